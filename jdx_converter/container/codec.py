"""
Binary encoding of JDX containers.

Layout (all integers little-endian):

    magic          3 bytes  b"JDX"
    version        u8
    image_width    u16
    image_height   u16
    bit_depth      u8
    class_count    u32
    class names    class_count x (u16 length, UTF-8 bytes)
    image_count    u64
    body_checksum  u32      CRC-32 of the uncompressed body
    body_length    u64      length of the compressed body
    body           zlib stream of image_count records, each the pixel bytes
                   followed by a u16 class index
"""

import struct
import zlib
from typing import Iterable, List, Optional, Set, Tuple

from pydantic import ValidationError

from jdx_converter.lib import CorruptContainerError

from .models import ClassEntry, Header, Version

MAGIC = b"JDX"

_GEOMETRY = struct.Struct("<BHHB")
_U16 = struct.Struct("<H")
_U32 = struct.Struct("<I")
_U64 = struct.Struct("<Q")
_BODY_PREFIX = struct.Struct("<QIQ")

Record = Tuple[int, bytes]

# Class names become directory names when a container is expanded
_UNSAFE_NAMES = {"", ".", ".."}
_UNSAFE_CHARACTERS = ("/", "\\", "\x00")


def encode(header: Header, records: Iterable[Record], compression_level: int = 6) -> bytes:
    """Serialize a header and its (class index, pixel bytes) records."""
    parts = [
        MAGIC,
        _GEOMETRY.pack(
            header.version.tag,
            header.image_width,
            header.image_height,
            header.bit_depth,
        ),
        _U32.pack(len(header.classes)),
    ]
    for entry in header.classes:
        name = entry.name.encode("utf-8")
        parts.append(_U16.pack(len(name)))
        parts.append(name)

    body = bytearray()
    for class_index, data in records:
        body += data
        body += _U16.pack(class_index)

    compressed = zlib.compress(bytes(body), compression_level)
    parts.append(_BODY_PREFIX.pack(header.image_count, zlib.crc32(body), len(compressed)))
    parts.append(compressed)
    return b"".join(parts)


def _class_name_problem(name: str, seen: Set[str]) -> Optional[str]:
    if name in _UNSAFE_NAMES:
        return "not usable as a directory name"
    if any(character in name for character in _UNSAFE_CHARACTERS):
        return "contains a path separator or NUL"
    if name in seen:
        return "duplicate class"
    return None


class _Reader:
    def __init__(self, blob: bytes):
        self.blob = blob
        self.offset = 0

    def take(self, size: int) -> bytes:
        end = self.offset + size
        if end > len(self.blob):
            raise CorruptContainerError(
                f"Unexpected end of data at byte {self.offset} (wanted {size} more)."
            )
        chunk = self.blob[self.offset : end]
        self.offset = end
        return chunk

    def unpack(self, layout: struct.Struct) -> Tuple[int, ...]:
        return layout.unpack(self.take(layout.size))


def decode(blob: bytes) -> Tuple[Header, List[Record]]:
    """
    Parse a serialized container.

    The returned header carries zeroed per-class counts and image count;
    callers rebuild them from the records.
    """
    reader = _Reader(blob)
    if reader.take(len(MAGIC)) != MAGIC:
        raise CorruptContainerError("Not a JDX file (bad magic bytes).")

    version_tag, width, height, bit_depth = reader.unpack(_GEOMETRY)
    if version_tag >= len(Version):
        raise CorruptContainerError(f"Unknown JDX version tag {version_tag}.")

    (class_count,) = reader.unpack(_U32)
    classes: List[ClassEntry] = []
    seen: Set[str] = set()
    for _ in range(class_count):
        (length,) = reader.unpack(_U16)
        try:
            name = reader.take(length).decode("utf-8")
        except UnicodeDecodeError as e:
            raise CorruptContainerError("Class name is not valid UTF-8.") from e
        problem = _class_name_problem(name, seen)
        if problem:
            raise CorruptContainerError(f"Invalid class name {name!r}: {problem}.")
        seen.add(name)
        classes.append(ClassEntry(name=name))

    try:
        header = Header(
            version=Version.from_tag(version_tag),
            image_width=width,
            image_height=height,
            bit_depth=bit_depth,
            classes=classes,
        )
    except ValidationError as e:
        raise CorruptContainerError(f"Invalid header: {e}") from e

    image_count, checksum, body_length = reader.unpack(_BODY_PREFIX)
    try:
        body = zlib.decompress(reader.take(body_length))
    except zlib.error as e:
        raise CorruptContainerError(f"Cannot decompress image data: {e}") from e

    if zlib.crc32(body) != checksum:
        raise CorruptContainerError("Image data checksum does not match.")

    record_size = header.image_size + _U16.size
    if len(body) != image_count * record_size:
        raise CorruptContainerError(
            f"Image data holds {len(body)} bytes, expected {image_count * record_size}."
        )

    records: List[Record] = []
    for start in range(0, len(body), record_size):
        data = body[start : start + header.image_size]
        (class_index,) = _U16.unpack_from(body, start + header.image_size)
        if class_index >= class_count:
            raise CorruptContainerError(
                f"Image {len(records)} refers to class {class_index} "
                f"but only {class_count} classes exist."
            )
        records.append((class_index, data))

    return header, records

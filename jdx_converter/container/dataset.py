from pathlib import Path
from typing import Dict, Iterator, List, Tuple, Union

from jdx_converter.lib import (
    ClassLimitError,
    HeaderMismatchError,
    InputPathError,
    OutputExistsError,
    setup_logger,
)

from . import codec
from .models import MAX_CLASSES, ClassEntry, Header

logger = setup_logger(__name__)


class Dataset:
    """An in-memory JDX container: a header plus labeled image payloads."""

    def __init__(self, header: Header, records: List[codec.Record]):
        self.header = header
        self._records = records
        self._index: Dict[str, int] = {
            entry.name: index for index, entry in enumerate(header.classes)
        }

    @classmethod
    def with_header(cls, header: Header) -> "Dataset":
        """Create an empty dataset using the geometry of `header`."""
        empty = header.model_copy(update={"image_count": 0, "classes": []})
        return cls(empty, [])

    def __len__(self) -> int:
        return len(self._records)

    def _class_index(self, label: str) -> int:
        index = self._index.get(label)
        if index is not None:
            return index
        if len(self.header.classes) >= MAX_CLASSES:
            raise ClassLimitError(
                f"The number of classes in the dataset exceeds the maximum of {MAX_CLASSES:,}."
            )
        self.header.classes.append(ClassEntry(name=label))
        self._index[label] = len(self.header.classes) - 1
        return self._index[label]

    def push(self, data: bytes, label: str) -> None:
        """Append one image payload under `label`."""
        if len(data) != self.header.image_size:
            raise HeaderMismatchError(
                f"Image for class '{label}' holds {len(data)} bytes, "
                f"expected {self.header.image_size}."
            )
        index = self._class_index(label)
        self._records.append((index, bytes(data)))
        self.header.classes[index].image_count += 1
        self.header.image_count += 1

    def push_image(
        self, width: int, height: int, bit_depth: int, data: bytes, label: str
    ) -> None:
        """Append an image after checking its geometry against the header."""
        problem = self.header.mismatch(width, height, bit_depth)
        if problem:
            raise HeaderMismatchError(f"Image for class '{label}' has {problem}.")
        self.push(data, label)

    def extend(self, other: "Dataset") -> None:
        """Append every image of `other`, merging classes by name."""
        problem = self.header.mismatch(
            other.header.image_width, other.header.image_height, other.header.bit_depth
        )
        if problem:
            raise HeaderMismatchError(f"Dataset has {problem}.")
        for label, data in other.items():
            self.push(data, label)

    def items(self) -> Iterator[Tuple[str, bytes]]:
        """Yield (label, pixel bytes) in insertion order."""
        for index, data in self._records:
            yield self.header.classes[index].name, data

    def to_bytes(self, compression_level: int = 6) -> bytes:
        return codec.encode(self.header, self._records, compression_level)

    @classmethod
    def from_bytes(cls, blob: bytes) -> "Dataset":
        header, records = codec.decode(blob)
        for index, _ in records:
            header.classes[index].image_count += 1
        header.image_count = len(records)
        return cls(header, records)

    def write_to_path(self, path: Union[str, Path], compression_level: int = 6) -> None:
        """Write the container to a new file. Existing files are never overwritten."""
        path = Path(path)
        blob = self.to_bytes(compression_level)
        try:
            with open(path, "xb") as f:
                f.write(blob)
        except FileExistsError as e:
            raise OutputExistsError(
                f"Invalid output path '{path}': File already exists."
            ) from e
        logger.info(
            f"Wrote {self.header.image_count} images in "
            f"{len(self.header.classes)} classes to {path} ({len(blob)} bytes)"
        )

    @classmethod
    def read_from_path(cls, path: Union[str, Path]) -> "Dataset":
        path = Path(path)
        try:
            with open(path, "rb") as f:
                blob = f.read()
        except OSError as e:
            raise InputPathError(f"Cannot read '{path}': {e.strerror or e}") from e
        logger.debug(f"Read {len(blob)} bytes from {path}")
        return cls.from_bytes(blob)

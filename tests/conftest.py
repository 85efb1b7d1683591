"""Shared pytest fixtures for the jdx-converter test suite.

Image trees are built with Pillow under ``tmp_path``; no test touches files
outside it.
"""

import struct
import zlib
from pathlib import Path
from typing import Callable, Tuple

import pytest
from PIL import Image

from jdx_converter.config import ConverterConfig

ImageFactory = Callable[..., Path]


def write_image(
    path: Path,
    mode: str = "L",
    size: Tuple[int, int] = (4, 4),
    color: object = 0,
) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    Image.new(mode, size, color).save(path)
    return path


def write_png_16bit(path: Path, channels: int = 3, size: Tuple[int, int] = (4, 4)) -> Path:
    """Write a PNG with 16 bits per sample, which Pillow cannot save itself."""
    width, height = size
    color_type = {3: 2, 4: 6}[channels]

    def chunk(kind: bytes, payload: bytes) -> bytes:
        return (
            struct.pack(">I", len(payload))
            + kind
            + payload
            + struct.pack(">I", zlib.crc32(kind + payload))
        )

    row = b"\x00" + b"\x12\x34" * channels * width
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(
        b"\x89PNG\r\n\x1a\n"
        + chunk(b"IHDR", struct.pack(">IIBBBBB", width, height, 16, color_type, 0, 0, 0))
        + chunk(b"IDAT", zlib.compress(row * height))
        + chunk(b"IEND", b"")
    )
    return path


@pytest.fixture
def make_image() -> ImageFactory:
    return write_image


@pytest.fixture
def make_png_16bit() -> ImageFactory:
    return write_png_16bit


@pytest.fixture
def config() -> ConverterConfig:
    return ConverterConfig(show_progress=False)


@pytest.fixture
def pets_dir(tmp_path: Path) -> Path:
    """Two classes, one 8-bit 4x4 image each."""
    root = tmp_path / "pets"
    write_image(root / "cat" / "cat0.png", color=10)
    write_image(root / "dog" / "dog0.png", color=200)
    return root

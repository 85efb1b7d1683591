"""
Utility library for the JDX converter.

This module provides the logging, error and image decoding helpers shared by
the container library and the commands.
"""

from .logger import setup_logger, set_package_level
from .errors import (
    ArityError,
    ClassLimitError,
    CorruptContainerError,
    HeaderMismatchError,
    ImageDecodeError,
    ImageTooLargeError,
    InputPathError,
    JdxError,
    NoImagesError,
    OutputExistsError,
    ParseError,
    ParseErrorKind,
    Severity,
    UnsupportedBitDepthError,
)
from .imaging import DecodedImage, decode_image, encode_image, MODE_FOR_BIT_DEPTH

__all__ = [
    "setup_logger",
    "set_package_level",
    "ArityError",
    "ClassLimitError",
    "CorruptContainerError",
    "HeaderMismatchError",
    "ImageDecodeError",
    "ImageTooLargeError",
    "InputPathError",
    "JdxError",
    "NoImagesError",
    "OutputExistsError",
    "ParseError",
    "ParseErrorKind",
    "Severity",
    "UnsupportedBitDepthError",
    "DecodedImage",
    "decode_image",
    "encode_image",
    "MODE_FOR_BIT_DEPTH",
]

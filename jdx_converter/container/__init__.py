"""
JDX container library.

This module provides:
- The header model shared by every image in a container
- An in-memory dataset builder that validates pushed images
- Reading and writing the binary `.jdx` format
"""

from .dataset import Dataset
from .models import (
    MAX_CLASSES,
    MAX_DIMENSION,
    SUPPORTED_BIT_DEPTHS,
    ClassEntry,
    Header,
    Version,
)

__all__ = [
    "Dataset",
    "ClassEntry",
    "Header",
    "Version",
    "MAX_CLASSES",
    "MAX_DIMENSION",
    "SUPPORTED_BIT_DEPTHS",
]

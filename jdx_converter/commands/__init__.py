"""
Command bodies for the `jdx` tool.

- generate: build a container from a class-labeled image directory
- concatenate: merge containers with the same geometry
- expand: unpack a container into class directories
- summarize: print container headers
"""

from .concatenate import concatenate
from .expand import expand
from .generate import IngestionState, generate, ingest_directory, validate_image
from .summarize import summarize

__all__ = [
    "concatenate",
    "expand",
    "generate",
    "ingest_directory",
    "validate_image",
    "IngestionState",
    "summarize",
]

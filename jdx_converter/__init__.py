"""
JDX dataset converter.

Builds JDX containers from directories of class-labeled images, and merges,
unpacks and summarizes existing containers.
"""

__version__ = "0.1.0"

__all__ = ["__version__"]

"""
Error taxonomy for the JDX converter.

Every error carries a severity. Validation code only raises; the CLI decides
how to present each severity and which exit code to use.
"""

from enum import Enum
from typing import Optional


class Severity(str, Enum):
    """How the CLI boundary should treat an error."""

    RECOVERABLE = "recoverable"
    FATAL = "fatal"


class JdxError(Exception):
    """Base class for every error raised by the converter."""

    severity: Severity = Severity.FATAL

    @property
    def is_fatal(self) -> bool:
        return self.severity == Severity.FATAL


# --- Argument parsing -------------------------------------------------------


class ParseErrorKind(str, Enum):
    NO_ARGUMENTS = "no_arguments"
    INVALID_COMMAND = "invalid_command"
    NO_PARAMETERS = "no_parameters"
    MISSING_INPUT = "missing_input"
    MISSING_OUTPUT = "missing_output"
    MISSING_UNKNOWN = "missing_unknown"


class ParseError(JdxError):
    """Raised when the token list does not form a valid command."""

    severity = Severity.RECOVERABLE

    def __init__(self, kind: ParseErrorKind, argument: Optional[str] = None):
        self.kind = kind
        self.argument = argument
        super().__init__(self._describe())

    @classmethod
    def missing_option(cls, option: str) -> "ParseError":
        if option == "-i":
            return cls(ParseErrorKind.MISSING_INPUT)
        if option == "-o":
            return cls(ParseErrorKind.MISSING_OUTPUT)
        return cls(ParseErrorKind.MISSING_UNKNOWN, option)

    def _describe(self) -> str:
        if self.kind == ParseErrorKind.NO_ARGUMENTS:
            return "No command supplied."
        if self.kind == ParseErrorKind.INVALID_COMMAND:
            return f"Invalid command '{self.argument}'."
        if self.kind == ParseErrorKind.NO_PARAMETERS:
            return f"Option '{self.argument}' requires at least one value."
        if self.kind == ParseErrorKind.MISSING_INPUT:
            return "Missing input option '-i'."
        if self.kind == ParseErrorKind.MISSING_OUTPUT:
            return "Missing output option '-o'."
        return f"Missing option '{self.argument}'."

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ParseError):
            return NotImplemented
        return self.kind == other.kind and self.argument == other.argument

    def __hash__(self) -> int:
        return hash((self.kind, self.argument))


class ArityError(JdxError):
    """Raised when a flag received more values than its command accepts."""


# --- Paths ------------------------------------------------------------------


class OutputExistsError(JdxError):
    """Raised when an output path is already taken."""


class InputPathError(JdxError):
    """Raised when an input path is missing or cannot be read."""


# --- Images -----------------------------------------------------------------


class ImageDecodeError(JdxError):
    """Raised when a file cannot be decoded as an image."""


class ImageTooLargeError(JdxError):
    """Raised when an image exceeds the 16-bit dimension or 8-bit depth fields."""


class UnsupportedBitDepthError(JdxError):
    """Raised when an image is not 8, 24 or 32 bits per pixel."""


# --- Dataset ----------------------------------------------------------------


class ClassLimitError(JdxError):
    """Raised when a dataset would hold more classes than a u16 index allows."""


class NoImagesError(JdxError):
    """Raised when a dataset is requested before any image was ingested."""


class HeaderMismatchError(JdxError):
    """Raised when an image or dataset does not match a header's geometry."""


class CorruptContainerError(JdxError):
    """Raised when a JDX file cannot be decoded."""

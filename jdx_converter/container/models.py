from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

MAX_DIMENSION = 65535
MAX_CLASSES = 65536
SUPPORTED_BIT_DEPTHS = (8, 24, 32)


class Version(str, Enum):
    """Container format revisions."""

    V0 = "V0"

    @property
    def tag(self) -> int:
        return list(Version).index(self)

    @classmethod
    def from_tag(cls, tag: int) -> "Version":
        return list(cls)[tag]


class ClassEntry(BaseModel):
    """A label plus the number of images stored under it."""

    name: str
    image_count: int = Field(0, ge=0)


class Header(BaseModel):
    """Fixed metadata describing every image in a container."""

    version: Version = Field(Version.V0, description="Format revision")
    image_width: int = Field(..., ge=0, le=MAX_DIMENSION)
    image_height: int = Field(..., ge=0, le=MAX_DIMENSION)
    bit_depth: int = Field(..., description="Bits per pixel (8, 24 or 32)")
    image_count: int = Field(0, ge=0)
    classes: List[ClassEntry] = Field(default_factory=list)

    @field_validator("bit_depth")
    @classmethod
    def validate_bit_depth(cls, v: int) -> int:
        if v not in SUPPORTED_BIT_DEPTHS:
            raise ValueError(
                f"bit_depth must be one of {SUPPORTED_BIT_DEPTHS}, got {v}"
            )
        return v

    @property
    def image_size(self) -> int:
        """Size in bytes of one image payload."""
        return self.image_width * self.image_height * self.bit_depth // 8

    @property
    def class_names(self) -> List[str]:
        return [entry.name for entry in self.classes]

    def mismatch(self, width: int, height: int, bit_depth: int) -> Optional[str]:
        """Describe the first geometry field that differs, or None."""
        if width != self.image_width:
            return f"width {width} does not match the dataset width {self.image_width}"
        if height != self.image_height:
            return f"height {height} does not match the dataset height {self.image_height}"
        if bit_depth != self.bit_depth:
            return f"bit depth {bit_depth} does not match the dataset bit depth {self.bit_depth}"
        return None

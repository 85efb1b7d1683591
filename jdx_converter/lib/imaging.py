from pathlib import Path
from typing import Dict, Optional, Union

from PIL import Image
from pydantic import BaseModel

from .errors import ImageDecodeError
from .logger import setup_logger

logger = setup_logger(__name__)

# Modes Pillow keeps compact that other decoders expand on load
EXPANDED_MODES: Dict[str, str] = {
    "1": "L",
    "CMYK": "RGB",
    "YCbCr": "RGB",
    "LAB": "RGB",
    "HSV": "RGB",
}

BITS_PER_PIXEL: Dict[str, int] = {
    "L": 8,
    "LA": 16,
    "La": 16,
    "RGB": 24,
    "RGBA": 32,
    "RGBa": 32,
    "RGBX": 32,
    "I;16": 16,
    "I;16L": 16,
    "I;16B": 16,
    "I;16N": 16,
    "I": 32,
    "F": 32,
}

# Decoder rawmodes for 16 bits per sample; packed 5-6-5 "BGR;16" is not one
WIDE_SAMPLE_RAWMODES = (";16B", ";16L", ";16N")

# JDX stores exactly these pixel layouts
MODE_FOR_BIT_DEPTH: Dict[int, str] = {8: "L", 24: "RGB", 32: "RGBA"}


class DecodedImage(BaseModel):
    """A decoded pixel grid."""

    width: int
    height: int
    mode: str
    bits_per_pixel: int
    data: bytes


def _expand_mode(image: Image.Image) -> Image.Image:
    if image.mode == "P" or image.mode == "PA":
        has_alpha = image.mode == "PA" or "transparency" in image.info
        return image.convert("RGBA" if has_alpha else "RGB")
    if image.mode in EXPANDED_MODES:
        return image.convert(EXPANDED_MODES[image.mode])
    return image


def _source_bits_per_pixel(image: Image.Image) -> Optional[int]:
    """
    Bits per pixel of 16-bit-per-sample sources, read from the decoder tiles.

    Pillow loads 16-bit RGB(A) as 8-bit RGB(A), so the mode alone under-reports
    them. Must be called before `load()`, which clears the tiles.
    """
    for tile in image.tile:
        args = tile[3]
        rawmode = args[0] if isinstance(args, tuple) and args else args
        if isinstance(rawmode, str) and rawmode.endswith(WIDE_SAMPLE_RAWMODES):
            return len(image.getbands()) * 16
    return None


def decode_image(path: Union[str, Path]) -> DecodedImage:
    """
    Decode an image file into raw pixel bytes.

    Palette, bilevel and CMYK-style images are expanded to grayscale or RGB(A)
    so the reported bits per pixel describe the bytes actually returned.
    Sources with 16-bit samples report their stored depth (48 for RGB, 64 for
    RGBA) so callers can reject them instead of storing truncated samples.

    Raises:
        ImageDecodeError: if Pillow cannot read the file.
    """
    path = Path(path)
    try:
        with Image.open(path) as image:
            source_bits = _source_bits_per_pixel(image)
            image.load()
            image = _expand_mode(image)
            data = image.tobytes()
    except (OSError, ValueError, Image.DecompressionBombError) as e:
        logger.debug(f"Pillow failed on {path}: {e}")
        raise ImageDecodeError(f"Cannot decode file '{path.name}' as an image.") from e

    bits_per_pixel = source_bits or BITS_PER_PIXEL.get(image.mode)
    if bits_per_pixel is None:
        bits_per_pixel = len(image.getbands()) * 8

    return DecodedImage(
        width=image.width,
        height=image.height,
        mode=image.mode,
        bits_per_pixel=bits_per_pixel,
        data=data,
    )


def encode_image(
    data: bytes, width: int, height: int, bit_depth: int, path: Union[str, Path]
) -> None:
    """Write raw JDX pixel bytes to an image file; the suffix picks the format."""
    image = Image.frombytes(MODE_FOR_BIT_DEPTH[bit_depth], (width, height), data)
    image.save(path)

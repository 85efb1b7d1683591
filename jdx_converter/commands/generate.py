"""
Build a JDX container from a directory of class-labeled images.

The input directory holds one subdirectory per class; the subdirectory name
becomes the label of every image inside it. The first valid image fixes the
container geometry and every later image must match it. The container is
written once, after every image has been ingested.
"""

from pathlib import Path
from typing import Iterator, List, Optional, Union

from tqdm import tqdm

from jdx_converter.config import ConverterConfig
from jdx_converter.container import (
    MAX_CLASSES,
    MAX_DIMENSION,
    Dataset,
    Header,
    Version,
)
from jdx_converter.lib import (
    MODE_FOR_BIT_DEPTH,
    ClassLimitError,
    DecodedImage,
    ImageTooLargeError,
    InputPathError,
    NoImagesError,
    UnsupportedBitDepthError,
    decode_image,
    setup_logger,
)

from .common import check_output_file

logger = setup_logger(__name__)

MAX_BITS_PER_PIXEL = 255


class IngestionState:
    """
    Tracks whether a dataset exists yet.

    Starts empty; `initialize` moves it to the initialized state exactly once.
    """

    def __init__(self) -> None:
        self._dataset: Optional[Dataset] = None

    @property
    def is_initialized(self) -> bool:
        return self._dataset is not None

    def initialize(self, header: Header) -> Dataset:
        if self._dataset is not None:
            raise RuntimeError("Ingestion state is already initialized")
        self._dataset = Dataset.with_header(header)
        logger.info(
            f"Dataset geometry fixed at {header.image_width}x{header.image_height}, "
            f"{header.bit_depth} bits per pixel"
        )
        return self._dataset

    @property
    def dataset(self) -> Dataset:
        if self._dataset is None:
            raise NoImagesError("No images were found in the input directory.")
        return self._dataset


def validate_image(image: DecodedImage, name: str) -> int:
    """Check an image against the format limits and return its bit depth."""
    if (
        image.width > MAX_DIMENSION
        or image.height > MAX_DIMENSION
        or image.bits_per_pixel > MAX_BITS_PER_PIXEL
    ):
        raise ImageTooLargeError(
            f"Image '{name}' has dimensions that are too big. "
            "(limit 65,536 x 65,536 x 32 bits per pixel)"
        )

    bit_depth = image.bits_per_pixel
    expected_mode = MODE_FOR_BIT_DEPTH.get(bit_depth)
    if expected_mode is None:
        raise UnsupportedBitDepthError(
            f"JDX does not support a bit-depth of {bit_depth}. "
            "Only bit-depths of 8, 24, or 32 are supported."
        )
    if image.mode != expected_mode:
        raise UnsupportedBitDepthError(
            f"Image '{name}' has {bit_depth}-bit {image.mode} pixels, which are not "
            f"supported; {bit_depth}-bit images must be {expected_mode}."
        )
    return bit_depth


def _visible(path: Path, hidden_prefix: str) -> bool:
    return not path.name.startswith(hidden_prefix)


def iter_class_dirs(input_path: Path, hidden_prefix: str) -> Iterator[Path]:
    """Yield candidate class directories in directory-enumeration order."""
    try:
        entries = list(input_path.iterdir())
    except OSError as e:
        raise InputPathError(
            f"Cannot read input directory '{input_path}': {e.strerror or e}"
        ) from e

    count = 0
    for entry in entries:
        if not _visible(entry, hidden_prefix):
            continue
        count += 1
        if count > MAX_CLASSES:
            raise ClassLimitError(
                f"The number of classes in the dataset exceeds the maximum of {MAX_CLASSES:,}."
            )
        yield entry


def list_images(class_dir: Path, hidden_prefix: str) -> Optional[List[Path]]:
    """List the visible files of a class directory, or None if it cannot be read."""
    try:
        entries = list(class_dir.iterdir())
    except OSError:
        return None
    return [entry for entry in entries if _visible(entry, hidden_prefix)]


def ingest_directory(
    input_path: Union[str, Path], config: Optional[ConverterConfig] = None
) -> Dataset:
    """Walk `input_path` and return a dataset holding every valid image."""
    config = config or ConverterConfig()
    input_path = Path(input_path)
    state = IngestionState()

    for class_dir in iter_class_dirs(input_path, config.hidden_prefix):
        label = class_dir.name
        image_paths = list_images(class_dir, config.hidden_prefix)
        if image_paths is None:
            logger.warning(f"Skipping file '{label}': Cannot iterate over its contents.")
            continue

        logger.debug(f"Found {len(image_paths)} files for class '{label}'")
        for image_path in tqdm(
            image_paths,
            desc=f"Processing images for {label}",
            disable=not config.show_progress,
        ):
            image = decode_image(image_path)
            bit_depth = validate_image(image, image_path.name)

            if not state.is_initialized:
                state.initialize(
                    Header(
                        version=Version.V0,
                        image_width=image.width,
                        image_height=image.height,
                        bit_depth=bit_depth,
                    )
                )

            state.dataset.push_image(
                image.width, image.height, bit_depth, image.data, label
            )

    dataset = state.dataset
    logger.info(
        f"Loaded {dataset.header.image_count} images "
        f"for {len(dataset.header.classes)} classes"
    )
    return dataset


def generate(
    input_path: Union[str, Path],
    output_path: Union[str, Path],
    config: Optional[ConverterConfig] = None,
) -> Header:
    """
    Build a container from `input_path` and write it to `output_path`.

    Args:
        input_path: Directory with one subdirectory per class
        output_path: Container file to create; must not exist yet
        config: Converter settings, defaults when omitted

    Returns:
        The header of the written container
    """
    config = config or ConverterConfig()
    output_path = check_output_file(output_path)

    logger.info(f"Generating {output_path} from {input_path}")
    dataset = ingest_directory(input_path, config)
    dataset.write_to_path(output_path, config.compression_level)
    return dataset.header


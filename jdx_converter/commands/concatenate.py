from pathlib import Path
from typing import Optional, Sequence, Union

from jdx_converter.config import ConverterConfig
from jdx_converter.container import Dataset, Header
from jdx_converter.lib import HeaderMismatchError, setup_logger

from .common import check_output_file

logger = setup_logger(__name__)


def _read(input_path: Union[str, Path]) -> Dataset:
    dataset = Dataset.read_from_path(input_path)
    logger.info(
        f"Read {dataset.header.image_count} images in "
        f"{len(dataset.header.classes)} classes from {input_path}"
    )
    return dataset


def concatenate(
    input_paths: Sequence[Union[str, Path]],
    output_path: Union[str, Path],
    config: Optional[ConverterConfig] = None,
) -> Header:
    """
    Merge several containers into a new one.

    Every input must share the geometry of the first. Classes with the same
    name are merged; new names are appended in the order they are met.
    """
    config = config or ConverterConfig()
    if not input_paths:
        raise ValueError("concatenate needs at least one input path")
    output_path = check_output_file(output_path)

    first = _read(input_paths[0])
    merged = Dataset.with_header(first.header)
    merged.extend(first)
    for input_path in input_paths[1:]:
        dataset = _read(input_path)
        try:
            merged.extend(dataset)
        except HeaderMismatchError as e:
            raise HeaderMismatchError(f"Cannot concatenate '{input_path}': {e}") from e

    merged.write_to_path(output_path, config.compression_level)
    return merged.header

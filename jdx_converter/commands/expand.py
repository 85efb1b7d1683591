from pathlib import Path
from typing import Dict, Optional, Union

from tqdm import tqdm

from jdx_converter.config import ConverterConfig
from jdx_converter.container import Dataset, Header
from jdx_converter.lib import (
    CorruptContainerError,
    OutputExistsError,
    encode_image,
    setup_logger,
)

logger = setup_logger(__name__)


def _class_dir(output_path: Path, label: str) -> Path:
    """Directory for `label`, which must sit directly under `output_path`."""
    class_dir = output_path / label
    if class_dir.resolve().parent != output_path.resolve():
        raise CorruptContainerError(
            f"Class name {label!r} cannot be used as a directory name."
        )
    return class_dir


def expand(
    input_path: Union[str, Path],
    output_path: Union[str, Path],
    config: Optional[ConverterConfig] = None,
) -> Header:
    """
    Unpack a container into one directory per class.

    The resulting tree has the layout `generate` reads, so expanding and
    regenerating yields the same images and labels.
    """
    config = config or ConverterConfig()
    output_path = Path(output_path)
    if output_path.exists():
        raise OutputExistsError(
            f"Invalid output path '{output_path}': File already exists."
        )

    dataset = Dataset.read_from_path(input_path)
    header = dataset.header

    class_dirs = [_class_dir(output_path, entry.name) for entry in header.classes]

    output_path.mkdir(parents=True)
    for class_dir in class_dirs:
        class_dir.mkdir()

    counters: Dict[str, int] = {}
    for label, data in tqdm(
        dataset.items(),
        total=header.image_count,
        desc=f"Expanding {input_path}",
        disable=not config.show_progress,
    ):
        index = counters.get(label, 0)
        counters[label] = index + 1
        image_path = output_path / label / f"{index}.{config.expand_format}"
        encode_image(
            data, header.image_width, header.image_height, header.bit_depth, image_path
        )

    logger.info(
        f"Expanded {header.image_count} images into "
        f"{len(header.classes)} class directories under {output_path}"
    )
    return header

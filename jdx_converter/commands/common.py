from pathlib import Path
from typing import Union

from jdx_converter.lib import OutputExistsError, setup_logger

logger = setup_logger(__name__)

JDX_SUFFIX = ".jdx"


def check_output_file(output_path: Union[str, Path]) -> Path:
    """Refuse an existing output file and warn about a missing .jdx suffix."""
    output_path = Path(output_path)
    if output_path.exists():
        raise OutputExistsError(
            f"Invalid output path '{output_path}': File already exists."
        )
    if output_path.suffix != JDX_SUFFIX:
        logger.warning("JDX files should end with the extension '.jdx'.")
    return output_path

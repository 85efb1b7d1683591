from pathlib import Path
from typing import List, Sequence, Union

import typer

from jdx_converter.container import Dataset, Header


def format_summary(path: Union[str, Path], header: Header) -> str:
    lines = [
        f"{path}",
        f"  - Version: {header.version.value}",
        f"  - Dimensions: {header.image_width} x {header.image_height}",
        f"  - Bit depth: {header.bit_depth}",
        f"  - Images: {header.image_count}",
        f"  - Classes: {len(header.classes)}",
    ]
    for entry in header.classes:
        lines.append(f"      {entry.name}: {entry.image_count} images")
    return "\n".join(lines)


def summarize(input_paths: Sequence[Union[str, Path]]) -> List[Header]:
    """Print the header of each container and return the headers."""
    headers: List[Header] = []
    for input_path in input_paths:
        header = Dataset.read_from_path(input_path).header
        typer.echo(format_summary(input_path, header))
        headers.append(header)
    return headers

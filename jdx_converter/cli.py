from typing import List, Optional

import typer
import yaml

from jdx_converter import __version__
from jdx_converter.commands import concatenate, expand, generate, summarize
from jdx_converter.config import CONFIG_ENV_VAR, ConverterConfig, config_from_environment
from jdx_converter.lib import JdxError, set_package_level, setup_logger
from jdx_converter.parser import (
    Command,
    Concatenate,
    Expand,
    Generate,
    Help,
    Summarize,
    Version,
    parse_arguments,
)

PROGRAM_NAME = "jdx"

USAGE = f"""Usage: {PROGRAM_NAME} <command> [options]

Commands:
  generate, gen        -i <directory> -o <file>     Build a dataset from class directories
  concatenate, concat  -i <file>... -o <file>       Merge datasets with the same geometry
  expand, exp          -i <file> -o <directory>     Unpack a dataset into class directories
  summarize            -i <file>...                 Print dataset headers
  version                                           Print the version
  help                                              Print this message

Set {CONFIG_ENV_VAR} to a YAML or JSON file to change logging, compression and
output settings."""

app = typer.Typer(help="JDX dataset converter", add_completion=False)

logger = setup_logger(__name__)


def dispatch(command: Command, config: ConverterConfig) -> None:
    """Run the handler for a parsed command."""
    if isinstance(command, Generate):
        header = generate(command.input_path, command.output_path, config)
        typer.echo(
            f"Dataset successfully generated and saved to {command.output_path} "
            f"({header.image_count} images, {len(header.classes)} classes)"
        )
    elif isinstance(command, Concatenate):
        header = concatenate(command.input_paths, command.output_path, config)
        typer.echo(
            f"{len(command.input_paths)} datasets concatenated into "
            f"{command.output_path} ({header.image_count} images)"
        )
    elif isinstance(command, Expand):
        expand(command.input_path, command.output_path, config)
        typer.echo(f"Dataset successfully expanded into {command.output_path}")
    elif isinstance(command, Summarize):
        summarize(command.input_paths)
    elif isinstance(command, Version):
        typer.echo(f"{PROGRAM_NAME} {__version__}")
    elif isinstance(command, Help):
        typer.echo(USAGE)
    else:
        raise TypeError(f"Unhandled command {command!r}")


def run(tokens: List[str], config: Optional[ConverterConfig] = None) -> int:
    """Parse `tokens` (program name first), run the command and return an exit code."""
    try:
        config = config or config_from_environment()
    except (OSError, ValueError, yaml.YAMLError) as e:
        typer.echo(f"Configuration error: {e}", err=True)
        return 1
    set_package_level(config.log_level)

    try:
        command = parse_arguments(tokens)
        dispatch(command, config)
    except JdxError as e:
        if e.is_fatal:
            logger.critical(e)
            typer.echo(f"Error: {e}", err=True)
        else:
            typer.echo(f"{e} Run '{PROGRAM_NAME} help' for usage.", err=True)
        return 1
    except Exception as e:
        logger.critical(e, exc_info=True)
        typer.echo(f"Error: {e}", err=True)
        return 1
    return 0


@app.command(
    add_help_option=False,
    context_settings={"allow_extra_args": True, "ignore_unknown_options": True},
)
def main(ctx: typer.Context):
    """
    Build, merge, unpack and inspect JDX datasets.
    """
    code = run([PROGRAM_NAME, *ctx.args])
    if code:
        raise typer.Exit(code=code)


if __name__ == "__main__":
    app()

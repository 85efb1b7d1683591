"""
Command-line grammar for the `jdx` tool.

`parse_arguments` turns the raw process arguments (program name first) into a
command model. Tokens after the command name are grouped once into flag
groups: an option token followed by the run of non-option tokens up to the
next option. The first group for a given option wins, so flag order does not
matter.
"""

from typing import Dict, List, Sequence, Union

from pydantic import BaseModel, ConfigDict, Field

from jdx_converter.lib import ArityError, ParseError, ParseErrorKind

OPTION_PREFIX = "-"
INPUT_FLAG = "-i"
OUTPUT_FLAG = "-o"


class _Command(BaseModel):
    model_config = ConfigDict(frozen=True)


class Generate(_Command):
    input_path: str
    output_path: str


class Concatenate(_Command):
    input_paths: List[str] = Field(..., min_length=1)
    output_path: str


class Expand(_Command):
    input_path: str
    output_path: str


class Summarize(_Command):
    input_paths: List[str] = Field(..., min_length=1)


class Version(_Command):
    pass


class Help(_Command):
    pass


Command = Union[Generate, Concatenate, Expand, Summarize, Version, Help]

COMMAND_ALIASES: Dict[str, str] = {
    "generate": "generate",
    "gen": "generate",
    "concatenate": "concatenate",
    "concat": "concatenate",
    "expand": "expand",
    "exp": "expand",
    "summarize": "summarize",
    "version": "version",
    "help": "help",
}


def group_flags(tokens: Sequence[str]) -> Dict[str, List[str]]:
    """Map each option to the values following its first occurrence."""
    groups: Dict[str, List[str]] = {}
    current: List[str] = []
    for token in tokens:
        if token.startswith(OPTION_PREFIX):
            current = []
            groups.setdefault(token, current)
        else:
            # Values before any option, or after a repeated option, land in a
            # list that is not stored
            current.append(token)
    return groups


def _params(groups: Dict[str, List[str]], option: str) -> List[str]:
    if option not in groups:
        raise ParseError.missing_option(option)
    values = groups[option]
    if not values:
        raise ParseError(ParseErrorKind.NO_PARAMETERS, option)
    return list(values)


def _single(values: List[str], what: str) -> str:
    if len(values) != 1:
        raise ArityError(f"Must specify only one {what} path.")
    return values[0]


def parse_arguments(tokens: Sequence[str]) -> Command:
    """
    Parse process arguments into a command.

    Raises:
        ParseError: recoverable grammar errors (missing command, unknown
            command, missing option, option without values).
        ArityError: a single-valued option received several values.
    """
    if len(tokens) < 2:
        raise ParseError(ParseErrorKind.NO_ARGUMENTS)

    name = tokens[1]
    command = COMMAND_ALIASES.get(name)
    if command is None:
        raise ParseError(ParseErrorKind.INVALID_COMMAND, name)

    if command == "version":
        return Version()
    if command == "help":
        return Help()

    groups = group_flags(tokens[2:])

    if command == "summarize":
        return Summarize(input_paths=_params(groups, INPUT_FLAG))

    inputs = _params(groups, INPUT_FLAG)
    outputs = _params(groups, OUTPUT_FLAG)

    if command == "concatenate":
        return Concatenate(input_paths=inputs, output_path=_single(outputs, "output"))

    input_path = _single(inputs, "input")
    output_path = _single(outputs, "output")
    if command == "generate":
        return Generate(input_path=input_path, output_path=output_path)
    return Expand(input_path=input_path, output_path=output_path)

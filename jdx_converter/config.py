import json
import logging
import os
from pathlib import Path
from typing import Literal, Optional, Union

import yaml
from pydantic import BaseModel, Field, field_validator

CONFIG_ENV_VAR = "JDX_CONFIG"

DEFAULT_HIDDEN_PREFIX = "."
DEFAULT_COMPRESSION_LEVEL = 6


class ConverterConfig(BaseModel):
    """Runtime settings for the converter commands."""

    log_level: str = Field("INFO", description="Logging level name")
    hidden_prefix: str = Field(
        DEFAULT_HIDDEN_PREFIX,
        min_length=1,
        description="Entries whose name starts with this prefix are skipped",
    )
    show_progress: bool = Field(True, description="Show progress bars")
    compression_level: int = Field(
        DEFAULT_COMPRESSION_LEVEL, ge=0, le=9, description="zlib compression level"
    )
    expand_format: Literal["png", "bmp", "tiff"] = Field(
        "png", description="Image format written by the expand command"
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level '{v}'")
        return level


def load_config(config_file: Union[str, Path]) -> ConverterConfig:
    """Load and validate a YAML or JSON configuration file."""
    config_path = Path(config_file)
    if config_path.suffix.lower() in [".yaml", ".yml"]:
        with open(config_path, "r") as f:
            config_data = yaml.safe_load(f)
    elif config_path.suffix.lower() == ".json":
        with open(config_path, "r") as f:
            config_data = json.load(f)
    else:
        raise ValueError(f"Unsupported config file format: {config_path.suffix}")

    # An empty YAML file means "all defaults"
    return ConverterConfig.model_validate(config_data or {})


def config_from_environment(environ: Optional[dict] = None) -> ConverterConfig:
    environ = os.environ if environ is None else environ
    config_file = environ.get(CONFIG_ENV_VAR)
    if not config_file:
        return ConverterConfig()
    return load_config(config_file)

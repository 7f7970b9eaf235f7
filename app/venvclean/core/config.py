"""Application configuration and settings.

This module provides the configuration model and I/O functions for
venvclean. Configuration is optional and stored in
``~/.config/venvclean/config.toml``; a missing file means defaults.
"""

import logging
import os
import tomllib
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Annotated, Literal

import tomli_w
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from venvclean.core.paths import get_config_path

logger = logging.getLogger(__name__)

RemovalToolChoice = Literal["auto", "rip", "trash-put", "rm", "native"]
SortChoice = Literal["time", "size", "name"]


class AppConfig(BaseModel):
    """Configuration for scanning and cleanup.

    Attributes:
        target_dir: Name of the virtual environment directory to look for.
        marker_dir: Name of the directory that marks a repository root.
        manifest_file: Project descriptor whose presence is recorded.
        removal_tool: Removal tool to use ("auto" picks the best available).
        sort: Initial ordering of the selection list.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    target_dir: Annotated[
        str,
        Field(min_length=1, description="Virtual environment directory name"),
    ] = ".venv"
    marker_dir: Annotated[
        str,
        Field(min_length=1, description="Repository marker directory name"),
    ] = ".git"
    manifest_file: Annotated[
        str,
        Field(min_length=1, description="Project manifest file name"),
    ] = "pyproject.toml"
    removal_tool: Annotated[
        RemovalToolChoice,
        Field(description="Removal tool preference"),
    ] = "auto"
    sort: Annotated[
        SortChoice,
        Field(description="Initial sort order"),
    ] = "time"

    @field_validator("target_dir", "marker_dir", "manifest_file")
    @classmethod
    def validate_single_component(cls, v: str) -> str:
        """Names must be a single path component."""
        if "/" in v or "\\" in v or v in (".", ".."):
            msg = f"'{v}' must be a plain file or directory name"
            raise ValueError(msg)
        return v


class ConfigError(Exception):
    """Base exception for configuration errors."""


class ConfigParseError(ConfigError):
    """Raised when the config file cannot be parsed."""


class ConfigValidationError(ConfigError):
    """Raised when the config content is invalid."""


def load_config(path: Path | None = None) -> AppConfig:
    """Load configuration from a TOML file.

    Args:
        path: Path to the config file. If None, uses the default config path.

    Returns:
        Validated AppConfig. Defaults if the file does not exist.

    Raises:
        ConfigParseError: If the TOML syntax is invalid.
        ConfigValidationError: If the content doesn't match the schema.
        ConfigError: If the file cannot be read.
    """
    config_path = path or get_config_path()

    if not config_path.exists():
        logger.debug("No config at %s, using defaults", config_path)
        return AppConfig()

    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigParseError(f"Invalid TOML syntax in {config_path}: {e}") from e
    except OSError as e:
        raise ConfigError(f"Failed to read config: {e}") from e

    try:
        return AppConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigValidationError(f"Invalid config content: {e}") from e


def save_config(config: AppConfig, path: Path | None = None) -> Path:
    """Save configuration to a TOML file.

    The file is written atomically by first writing to a temporary file
    and then using os.replace() for atomic rename.

    Args:
        config: The AppConfig to save.
        path: Path to save the config. If None, uses the default config path.

    Returns:
        Path where the config was saved.

    Raises:
        ConfigError: If the file cannot be written.
    """
    config_path = path or get_config_path()
    data = config.model_dump()

    tmp_path: Path | None = None
    try:
        config_path.parent.mkdir(parents=True, exist_ok=True)
        with NamedTemporaryFile(
            mode="wb",
            dir=config_path.parent,
            delete=False,
            suffix=".tmp",
        ) as f:
            tmp_path = Path(f.name)
            tomli_w.dump(data, f)
        os.replace(str(tmp_path), str(config_path))
    except OSError as e:
        if tmp_path is not None and tmp_path.exists():
            tmp_path.unlink()
        raise ConfigError(f"Failed to write config: {e}") from e

    return config_path

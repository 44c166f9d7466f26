"""Runtime configuration of apimeta.

The configuration is read from an optional YAML file and may be overridden
by environment variables::

    # apimeta.yml
    default_version: "3.0"
    max_depth: 32
    log_level: INFO

The file is looked up at ``$APIMETA_CONFIG`` and then at ``./apimeta.yml``.
Every setting can be overridden by an ``APIMETA_<SETTING>`` variable, e.g.
``APIMETA_MAX_DEPTH=16``.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import Field, ValidationError, field_validator

from .errors import InvalidArgumentError
from .models import ApiMetaBaseModel
from .openapi.version import Version

logger = logging.getLogger(__name__)

__all__ = ["ApiMetaConfigModel", "load_config", "find_config_file"]

CONFIG_FILE_NAME = "apimeta.yml"
CONFIG_ENV_VAR = "APIMETA_CONFIG"
ENV_PREFIX = "APIMETA_"

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class ApiMetaConfigModel(ApiMetaBaseModel):
    """Settings of apimeta.

    Attributes:
        default_version: The OpenAPI version documents are rendered as by
            default.
        max_depth: The maximum nesting depth of wrapped values.
        log_level: The level of the root logger set by the command line.
    """

    default_version: str = "3.1"
    max_depth: int = Field(default=64, ge=1)
    log_level: LogLevel = "WARNING"

    @field_validator("default_version", mode="before")
    @classmethod
    def _check_version(cls, value: Any) -> str:
        try:
            version = Version.from_value(str(value))
        except InvalidArgumentError as e:
            raise ValueError(str(e)) from e
        return f"{version.major}.{version.minor}"

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_log_level(cls, value: Any) -> Any:
        return value.upper() if isinstance(value, str) else value

    @property
    def version(self) -> Version:
        return Version.from_value(self.default_version)


def find_config_file() -> Path | None:
    """Returns the path of the configuration file, or None if there is none.

    Raises:
        FileNotFoundError: If ``APIMETA_CONFIG`` names a missing file.
    """
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        path = Path(env_path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found at {path}")
        return path
    path = Path.cwd() / CONFIG_FILE_NAME
    return path if path.exists() else None


def _env_overrides() -> dict[str, Any]:
    overrides = {}
    for name in ApiMetaConfigModel.model_fields:
        value = os.environ.get(f"{ENV_PREFIX}{name.upper()}")
        if value is not None:
            overrides[name] = value
    return overrides


def load_config(path: Path | str | None = None) -> ApiMetaConfigModel:
    """Loads and validates the configuration.

    Args:
        path: Path of the configuration file. If not provided, the file is
            looked up by :func:`find_config_file`.

    Returns:
        The loaded and validated configuration

    Raises:
        FileNotFoundError: If the given file doesn't exist
        ValueError: If validation fails
    """
    config_path = Path(path) if path is not None else find_config_file()

    config: dict[str, Any] = {}
    if config_path is not None:
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found at {config_path}")
        logger.debug(f"Loading config from {config_path}")
        with open(config_path) as f:
            config = yaml.safe_load(f) or {}
        if not isinstance(config, dict):
            raise ValueError(f"Config file {config_path} must contain a mapping")

    config.update(_env_overrides())
    try:
        return ApiMetaConfigModel.model_validate(config)
    except ValidationError as exc:
        raise ValueError(f"Config validation error: {exc}") from exc

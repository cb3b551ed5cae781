"""Collector options and configuration file loading."""

from __future__ import annotations

from collections.abc import Callable
from copy import deepcopy
import logging
import os
import sys
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .exceptions import ConfigValidationError, InvalidCapacityError

import tomllib  # stdlib since Python 3.11 (project requires >=3.11)

LOGGER = logging.getLogger(__name__)

CONFIG_DIR = Path.home() / ".config" / "event-collector"
CONFIG_PATH = CONFIG_DIR / "config.toml"

DEFAULT_CAPACITY = 1_000_000
MAX_CONFIG_CAPACITY = 100_000_000
VALID_LOG_LEVELS = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}


def _validate_capacity_value(value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError("capacity must be an integer.")
    if value <= 0:
        raise ValueError("capacity must be a positive integer.")
    if value > sys.maxsize:
        raise ValueError(f"capacity must not exceed {sys.maxsize}.")
    return value


class CollectorOptions(BaseModel):
    """Construction parameters for a single collector."""

    model_config = ConfigDict(frozen=True)
    channel: str
    capacity: int = DEFAULT_CAPACITY
    transform: Callable[[Any], Any] | None = None
    on_error: Callable[[Any], None] | None = None

    @field_validator("channel", mode="before")
    @classmethod
    def _validate_channel(cls, value: Any) -> str:
        if not isinstance(value, str):
            raise ValueError("channel must be a string.")
        if not value.strip():
            raise ValueError("channel must not be empty.")
        return value

    @field_validator("capacity", mode="before")
    @classmethod
    def _validate_capacity(cls, value: Any) -> int:
        return _validate_capacity_value(value)

    @classmethod
    def build(cls, **values: Any) -> CollectorOptions:
        """Validate options, mapping failures onto the domain exceptions."""
        try:
            return cls(**values)
        except ValidationError as exc:
            fields = {str(error["loc"][0]) for error in exc.errors() if error["loc"]}
            if "capacity" in fields:
                raise InvalidCapacityError(
                    f"Invalid capacity {values.get('capacity')!r}: "
                    f"must be a positive integer no larger than {sys.maxsize}."
                ) from exc
            raise ConfigValidationError(f"Invalid collector options: {exc}") from exc


class CollectorConfig(BaseModel):
    """Defaults applied to collectors created by the CLI."""

    default_capacity: int = Field(default=DEFAULT_CAPACITY, le=MAX_CONFIG_CAPACITY)
    default_channel: str = "events"

    @field_validator("default_capacity", mode="before")
    @classmethod
    def _validate_default_capacity(cls, value: Any) -> int:
        return _validate_capacity_value(value)

    @field_validator("default_channel", mode="before")
    @classmethod
    def _validate_default_channel(cls, value: Any) -> str:
        if not isinstance(value, str):
            raise ValueError("default_channel must be a string.")
        normalized = value.strip()
        if not normalized:
            raise ValueError("default_channel must not be empty.")
        return normalized


class LoggingConfig(BaseModel):
    """Logging behavior and output destinations."""

    level: str = "INFO"
    structured: bool = True
    log_to_file: bool = False
    log_file_path: str = "~/.local/state/event-collector/collector.log"

    @field_validator("level", mode="before")
    @classmethod
    def _validate_level(cls, value: Any) -> str:
        if not isinstance(value, str):
            raise ValueError("Logging level must be a string.")
        normalized = value.strip().upper()
        if normalized not in VALID_LOG_LEVELS:
            raise ValueError(f"Unsupported log level {normalized!r}.")
        return normalized

    @field_validator("log_file_path", mode="before")
    @classmethod
    def _validate_log_file_path(cls, value: Any) -> str:
        if not isinstance(value, str):
            raise ValueError("log_file_path must be a string.")
        normalized = value.strip()
        if not normalized:
            raise ValueError("log_file_path must not be empty.")
        return normalized


class Config(BaseModel):
    """Root configuration model for all sections."""

    collector: CollectorConfig = CollectorConfig()
    logging: LoggingConfig = LoggingConfig()


DEFAULT_CONFIG: dict[str, dict[str, Any]] = Config().model_dump()


def ensure_config_dir(config_dir: Path | None = None) -> Path:
    """Ensure that the config directory exists and return its path."""
    directory = config_dir or CONFIG_DIR
    try:
        directory.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        LOGGER.warning("Unable to create config directory %s: %s", directory, exc)
    return directory


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge override values onto base values."""
    merged: dict[str, Any] = deepcopy(base)
    for key, value in override.items():
        if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def _validate_config(raw: dict[str, Any]) -> dict[str, dict[str, Any]]:
    """Validate merged config and fallback to safe defaults when possible."""
    try:
        return Config.model_validate(raw).model_dump()
    except ValidationError as exc:
        LOGGER.warning("Configuration validation failed, using safe defaults: %s", exc)
        return deepcopy(DEFAULT_CONFIG)
    except Exception as exc:  # noqa: BLE001 - unexpected model construction failure.
        raise ConfigValidationError(f"Unable to validate configuration: {exc}") from exc


def load_config(config_path: Path | None = None) -> dict[str, dict[str, Any]]:
    """
    Load configuration from TOML, merge with defaults, and validate.

    A missing file yields the defaults. The optional ``config_path`` argument
    is intended for tests and tooling.
    """
    target_path = config_path or Path(
        os.environ.get("EVENT_COLLECTOR_CONFIG", str(CONFIG_PATH))
    ).expanduser()

    raw_data: dict[str, Any] = {}
    if target_path.exists():
        try:
            raw_data = tomllib.loads(target_path.read_text(encoding="utf-8"))
        except (OSError, tomllib.TOMLDecodeError) as exc:
            LOGGER.warning("Failed to parse config at %s: %s", target_path, exc)
            raw_data = {}

    return _validate_config(_deep_merge(DEFAULT_CONFIG, raw_data))

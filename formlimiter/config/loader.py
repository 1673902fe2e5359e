"""Configuration loading utilities."""

from __future__ import annotations

import json
from pathlib import Path

from loguru import logger
from pydantic import ValidationError

from formlimiter.config.schema import FormLimiterConfig
from formlimiter.errors import ConfigurationError


def get_config_path() -> Path:
    """Get the default configuration file path."""
    return Path.home() / ".formlimiter" / "config.json"


def load_config(config_path: Path | None = None) -> FormLimiterConfig:
    """Load configuration from file, or defaults when there is no file.

    Raises ConfigurationError for unreadable or invalid files.
    """
    path = config_path or get_config_path()

    if not path.exists():
        logger.debug("Config: {} not found, using defaults", path)
        return FormLimiterConfig()

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigurationError(f"Failed to read config from {path}: {e}") from e

    try:
        return FormLimiterConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid config in {path}: {e}") from e


def save_config(config: FormLimiterConfig, config_path: Path | None = None) -> None:
    path = config_path or get_config_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    data = config.model_dump(by_alias=True)
    path.write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")

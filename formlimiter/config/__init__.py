"""Configuration module."""

from formlimiter.config.loader import get_config_path, load_config, save_config
from formlimiter.config.schema import FormLimiterConfig

__all__ = ["FormLimiterConfig", "load_config", "save_config", "get_config_path"]

"""Configuration management for photometa."""

from photometa.config.manager import ConfigManager, ConfigError
from photometa.config.defaults import DEFAULT_CONFIG

__all__ = ["ConfigManager", "ConfigError", "DEFAULT_CONFIG"]

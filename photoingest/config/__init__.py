"""Configuration management for photoIngest."""

from photoingest.config.manager import ConfigManager, ConfigError
from photoingest.config.defaults import DEFAULT_CONFIG

__all__ = ["ConfigManager", "ConfigError", "DEFAULT_CONFIG"]

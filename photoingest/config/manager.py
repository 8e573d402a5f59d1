"""Configuration manager for photoIngest."""

import copy
import logging
import os
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

from photoingest.config.defaults import (
    DEFAULT_CONFIG,
    ENV_OVERRIDES,
    FIELD_DESCRIPTIONS,
    REQUIRED_FIELDS,
)

logger = logging.getLogger(__name__)


class ConfigError(Exception):
    """Exception raised for configuration errors."""
    pass


class ConfigManager:
    """Manages configuration loading, validation and access.

    Configuration is read from a YAML file (if one is found), merged over
    ``DEFAULT_CONFIG`` and finally overridden by ``PHOTOINGEST_*`` environment
    variables. Values are accessed with dot notation.

    Attributes:
        config: Dictionary containing all configuration values
        config_path: Path to the loaded configuration file (None when running
            on defaults)

    Examples:
        >>> config = ConfigManager.load("config.yaml")
        >>> config.get("storage.bucket")
        '000-photos'
        >>> config.get("processing.thumbnail_size")
        300
    """

    def __init__(self, config: Dict[str, Any], config_path: Optional[Path] = None):
        """Initialize configuration manager.

        Args:
            config: Configuration dictionary
            config_path: Path to the configuration file (optional)
        """
        self.config = config
        self.config_path = config_path

    @classmethod
    def load(
        cls,
        config_path: Optional[str] = None,
        use_environment: bool = True,
        environ: Optional[Mapping[str, str]] = None
    ) -> "ConfigManager":
        """Load configuration from file, defaults and environment.

        An explicitly given path must exist. Without one, the standard
        locations are searched and the defaults are used when nothing is found,
        so a worker can run purely on defaults plus environment overrides.

        Args:
            config_path: Path to configuration file (optional)
            use_environment: Whether to apply ``PHOTOINGEST_*`` overrides
            environ: Environment mapping (defaults to ``os.environ``)

        Returns:
            ConfigManager instance with loaded configuration

        Raises:
            ConfigError: If configuration cannot be loaded or validated
        """
        if config_path:
            path = Path(config_path).expanduser()
            if not path.exists():
                raise ConfigError(f"Configuration file not found: {path}")
        else:
            path = cls._find_config_file()

        if path:
            logger.info(f"Loading configuration from: {path}")
            config = cls._merge_with_defaults(cls._load_yaml(path))
        else:
            logger.info("No configuration file found, using defaults")
            config = copy.deepcopy(DEFAULT_CONFIG)

        if use_environment:
            cls._apply_env_overrides(config, os.environ if environ is None else environ)

        cls._validate(config)
        return cls(config, path)

    @classmethod
    def from_dict(cls, overrides: Optional[Dict[str, Any]] = None) -> "ConfigManager":
        """Build a configuration from defaults merged with ``overrides``.

        Environment variables are not consulted.

        Raises:
            ConfigError: If the merged configuration is invalid
        """
        config = cls._merge_with_defaults(overrides or {})
        cls._validate(config)
        return cls(config)

    @staticmethod
    def _find_config_file() -> Optional[Path]:
        """Search for config.yaml in standard locations.

        Search order:
        1. ~/.photoingest/config.yaml (user home directory)
        2. ./config.yaml (current directory)

        Returns:
            Path to config file if found, None otherwise
        """
        search_paths = [
            Path.home() / ".photoingest" / "config.yaml",
            Path.cwd() / "config.yaml",
        ]

        for path in search_paths:
            if path.exists():
                logger.debug(f"Found config file: {path}")
                return path

        logger.debug("No config file found in standard locations")
        return None

    @staticmethod
    def _load_yaml(path: Path) -> Dict[str, Any]:
        """Load configuration from YAML file.

        An empty file yields an empty dictionary.

        Raises:
            ConfigError: If file cannot be loaded or parsed
        """
        try:
            with open(path, 'r') as f:
                config = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigError(
                f"Failed to parse YAML configuration: {path}\n"
                f"Error: {e}"
            ) from e
        except OSError as e:
            raise ConfigError(
                f"Failed to load configuration file: {path}\n"
                f"Error: {e}"
            ) from e

        if config is None:
            return {}
        if not isinstance(config, dict):
            raise ConfigError(
                f"Invalid configuration file: {path}\n"
                "Configuration must be a YAML dictionary."
            )
        return config

    @staticmethod
    def _merge_with_defaults(config: Dict[str, Any]) -> Dict[str, Any]:
        """Merge loaded config with defaults to add any missing fields.

        User config values take precedence over defaults. The defaults
        themselves are never mutated.

        Args:
            config: Loaded configuration dictionary

        Returns:
            Merged configuration with defaults
        """
        def deep_merge(base: dict, updates: dict) -> dict:
            """Recursively merge two dictionaries, with updates taking precedence."""
            result = copy.deepcopy(base)
            for key, value in updates.items():
                if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                    result[key] = deep_merge(result[key], value)
                else:
                    result[key] = value
            return result

        return deep_merge(DEFAULT_CONFIG, config)

    @staticmethod
    def _apply_env_overrides(config: Dict[str, Any], environ: Mapping[str, str]) -> None:
        """Apply ``PHOTOINGEST_*`` environment overrides in place."""
        for env_name, key in ENV_OVERRIDES.items():
            value = environ.get(env_name)
            if value:
                logger.debug(f"Overriding {key} from {env_name}")
                ConfigManager._set_nested_value(config, key, value)

    @staticmethod
    def _validate(config: Dict[str, Any]) -> None:
        """Validate required fields and numeric processing settings.

        Raises:
            ConfigError: If required fields are missing or values are invalid
        """
        missing = []

        for field_path in REQUIRED_FIELDS:
            value = ConfigManager._get_nested_value(config, field_path)
            if not value:
                missing.append(field_path)

        if missing:
            raise ConfigError(
                f"Missing required configuration fields:\n"
                + "\n".join(
                    f"  - {field} ({FIELD_DESCRIPTIONS.get(field, 'required')})"
                    for field in missing
                )
                + "\n\nPlease provide these values in your config.yaml file."
            )

        for field_path in ("processing.web_size", "processing.thumbnail_size"):
            value = ConfigManager._get_nested_value(config, field_path)
            if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
                raise ConfigError(
                    f"Invalid value for {field_path}: {value!r} "
                    "(expected a positive integer)"
                )

        quality = ConfigManager._get_nested_value(config, "processing.jpeg_quality")
        if isinstance(quality, bool) or not isinstance(quality, int) or not 1 <= quality <= 95:
            raise ConfigError(
                f"Invalid value for processing.jpeg_quality: {quality!r} "
                "(expected an integer between 1 and 95)"
            )

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value using dot notation.

        Args:
            key: Configuration key (e.g., "storage.bucket")
            default: Default value to return if key not found

        Returns:
            Configuration value or default

        Examples:
            >>> config.get("processing.web_size")
            1080
            >>> config.get("nonexistent.key", "default_value")
            'default_value'
        """
        value = self._get_nested_value(self.config, key)
        return value if value is not None else default

    def set(self, key: str, value: Any) -> None:
        """Set configuration value using dot notation.

        Examples:
            >>> config.set("processing.timeout", 30)
        """
        self._set_nested_value(self.config, key, value)

    @staticmethod
    def _get_nested_value(config: Dict[str, Any], key: str) -> Any:
        """Get value from nested dictionary using dot notation.

        Returns:
            Value at key path, or None if not found
        """
        keys = key.split(".")
        value = config

        for k in keys:
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return None

        return value

    @staticmethod
    def _set_nested_value(config: Dict[str, Any], key: str, value: Any) -> None:
        """Set value in nested dictionary using dot notation."""
        keys = key.split(".")
        current = config

        for k in keys[:-1]:
            if k not in current or not isinstance(current[k], dict):
                current[k] = {}
            current = current[k]

        current[keys[-1]] = value

    def __repr__(self) -> str:
        """Return string representation of configuration."""
        path_str = f" from {self.config_path}" if self.config_path else ""
        return f"<ConfigManager{path_str}>"

"""Configuration manager for photometa."""

import copy
import logging
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from photometa.config.defaults import DEFAULT_CONFIG
from photometa.exceptions import PhotoMetaError

logger = logging.getLogger(__name__)


class ConfigError(PhotoMetaError):
    """Exception raised for configuration errors."""
    pass


class ConfigManager:
    """Manages configuration loading and access with dot notation.

    Configuration is read from a YAML file and merged over
    ``DEFAULT_CONFIG``, so a user file only needs the keys it changes.

    Attributes:
        config: Dictionary containing all configuration values
        config_path: Path to the loaded configuration file (None for defaults)

    Examples:
        >>> config = ConfigManager.load("config.yaml")
        >>> config.get("thumbnail.max_size")
        200
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
    def defaults(cls) -> "ConfigManager":
        """Return a manager holding only the default configuration."""
        return cls(copy.deepcopy(DEFAULT_CONFIG))

    @classmethod
    def load(
        cls,
        config_path: Optional[str] = None,
        create_if_missing: bool = False
    ) -> "ConfigManager":
        """Load configuration from file, falling back to defaults.

        With an explicit ``config_path`` the file must exist unless
        ``create_if_missing`` is set, in which case the defaults are written
        there. Without a path, standard locations are searched and the
        defaults are used when nothing is found.

        Args:
            config_path: Path to configuration file (optional)
            create_if_missing: Whether to write a default config file at
                ``config_path`` if it does not exist

        Returns:
            ConfigManager instance with loaded configuration

        Raises:
            ConfigError: If configuration cannot be loaded or saved
        """
        if config_path:
            path = Path(config_path).expanduser()
        else:
            path = cls._find_config_file()

        if path and path.exists():
            logger.info(f"Loading configuration from: {path}")
            config = cls._merge_with_defaults(cls._load_yaml(path))
            return cls(config, path)

        if config_path and not create_if_missing:
            raise ConfigError(f"Configuration file not found: {path}")

        config = copy.deepcopy(DEFAULT_CONFIG)
        if config_path:
            cls._save_yaml(config, path)
            logger.info(f"Default configuration saved to: {path}")
            return cls(config, path)

        logger.debug("No configuration file found, using defaults")
        return cls(config)

    @staticmethod
    def _find_config_file() -> Optional[Path]:
        """Search for config.yaml in standard locations.

        Search order:
        1. ~/.photometa/config.yaml (user home directory)
        2. ./config.yaml (current directory)

        Returns:
            Path to config file if found, None otherwise
        """
        search_paths = [
            Path.home() / ".photometa" / "config.yaml",
            Path.cwd() / "config.yaml",
        ]

        for path in search_paths:
            if path.exists():
                logger.debug(f"Found config file: {path}")
                return path

        return None

    @staticmethod
    def _load_yaml(path: Path) -> Dict[str, Any]:
        """Load configuration from YAML file.

        Args:
            path: Path to YAML file

        Returns:
            Configuration dictionary (empty for an empty file)

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
    def _save_yaml(config: Dict[str, Any], path: Path) -> None:
        """Save configuration to YAML file.

        Raises:
            ConfigError: If file cannot be saved
        """
        try:
            path.parent.mkdir(parents=True, exist_ok=True)

            with open(path, 'w') as f:
                yaml.dump(
                    config,
                    f,
                    default_flow_style=False,
                    sort_keys=False,
                    allow_unicode=True
                )
        except OSError as e:
            raise ConfigError(
                f"Failed to save configuration to: {path}\n"
                f"Error: {e}"
            ) from e

    @staticmethod
    def _merge_with_defaults(config: Dict[str, Any]) -> Dict[str, Any]:
        """Merge loaded config with defaults.

        User config values take precedence over defaults; missing keys are
        filled in from defaults. Neither input is modified.
        """
        def deep_merge(base: dict, updates: dict) -> dict:
            result = copy.deepcopy(base)
            for key, value in updates.items():
                if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                    result[key] = deep_merge(result[key], value)
                else:
                    result[key] = value
            return result

        return deep_merge(DEFAULT_CONFIG, config)

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value using dot notation.

        Args:
            key: Configuration key (e.g., "thumbnail.max_size")
            default: Default value to return if key not found

        Returns:
            Configuration value or default
        """
        value = self._get_nested_value(self.config, key)
        return value if value is not None else default

    def set(self, key: str, value: Any) -> None:
        """Set configuration value using dot notation."""
        self._set_nested_value(self.config, key, value)

    @staticmethod
    def _get_nested_value(config: Dict[str, Any], key: str) -> Any:
        value = config
        for k in key.split("."):
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return None
        return value

    @staticmethod
    def _set_nested_value(config: Dict[str, Any], key: str, value: Any) -> None:
        keys = key.split(".")
        current = config

        for k in keys[:-1]:
            if k not in current or not isinstance(current[k], dict):
                current[k] = {}
            current = current[k]

        current[keys[-1]] = value

    def save(self, path: Optional[str] = None) -> None:
        """Save current configuration to file.

        Args:
            path: Path to save configuration (uses loaded path if not specified)

        Raises:
            ConfigError: If path is not specified and no config was loaded
        """
        save_path = Path(path) if path else self.config_path

        if not save_path:
            raise ConfigError(
                "No configuration path specified. "
                "Provide a path or load config from a file first."
            )

        self._save_yaml(self.config, save_path)
        logger.info(f"Configuration saved to: {save_path}")

    def to_dict(self) -> Dict[str, Any]:
        """Return a copy of the configuration dictionary."""
        return copy.deepcopy(self.config)

    def __repr__(self) -> str:
        path_str = f" from {self.config_path}" if self.config_path else ""
        return f"<ConfigManager{path_str}>"

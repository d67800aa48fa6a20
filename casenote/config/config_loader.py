"""Configuration loader for application settings."""

import json
from pathlib import Path
from typing import Optional

from .app_config import AppConfig


class ConfigError(Exception):
    """Raised when a configuration file cannot be used."""

    pass


class ConfigLoader:
    """Load and validate application configuration."""

    DEFAULT_CONFIG_PATHS = [
        Path("~/.casenote/app_config.json"),
        Path("config/app_config.json"),
    ]

    def __init__(self, config_path: Optional[Path] = None):
        """
        Initialize configuration loader.

        Args:
            config_path: Optional custom config file path
        """
        self.config_path = config_path
        self._config: Optional[AppConfig] = None

    def load_app_config(self) -> AppConfig:
        """
        Load application configuration from file.

        Returns:
            AppConfig instance (defaults when no file is found)

        Raises:
            ConfigError: If the file is not valid JSON
            ValidationError: If the file content fails validation
        """
        if self._config is not None:
            return self._config

        config_paths = [self.config_path] if self.config_path else self.DEFAULT_CONFIG_PATHS

        for config_path in config_paths:
            if config_path and config_path.expanduser().exists():
                try:
                    with open(config_path.expanduser(), "r", encoding="utf-8") as f:
                        config_data = json.load(f)
                except json.JSONDecodeError as e:
                    raise ConfigError(f"Invalid JSON in {config_path}: {e}") from e

                self._config = AppConfig.model_validate(config_data)
                return self._config

        # Return default config if no file found
        self._config = AppConfig()
        return self._config

    def reload(self) -> AppConfig:
        """Reload configuration from file."""
        self._config = None
        return self.load_app_config()

"""Configuration management"""

from .app_config import AppConfig, ExtractionConfig, ThreadingConfig
from .config_loader import ConfigError, ConfigLoader

__all__ = ["AppConfig", "ExtractionConfig", "ThreadingConfig", "ConfigError", "ConfigLoader"]

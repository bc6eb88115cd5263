"""Configuration management for the crawler."""

from .loader import Config, default_config_path, default_database_name, load_config, save_config
from .models import ApiConfig, ConfigModel, DatabaseConfig, ThrottleConfig

__all__ = [
    "ApiConfig",
    "Config",
    "ConfigModel",
    "DatabaseConfig",
    "ThrottleConfig",
    "default_config_path",
    "default_database_name",
    "load_config",
    "save_config",
]

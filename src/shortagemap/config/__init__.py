# src/shortagemap/config/__init__.py
"""
Configuration system using Pydantic models loaded from YAML
"""

from shortagemap.config.exceptions import (
    ConfigurationError,
    ConfigurationNotFoundError,
    ConfigurationValidationError,
)
from shortagemap.config.loader import debug_config_loading, get_config, load_config
from shortagemap.config.models import (
    AppConfig,
    ConsoleLoggingConfig,
    FileLoggingConfig,
    GlobalConfig,
    LoggingConfig,
    MapConfig,
)

# Environment aliases accepted on the command line
ENVIRONMENTS = {
    "prod": "production",
    "production": "production",
    "dev": "development",
    "development": "development",
    "test": "test",
}

DEFAULT_ENVIRONMENT = "development"

__all__ = [
    "AppConfig",
    "ConfigurationError",
    "ConfigurationNotFoundError",
    "ConfigurationValidationError",
    "ConsoleLoggingConfig",
    "DEFAULT_ENVIRONMENT",
    "ENVIRONMENTS",
    "FileLoggingConfig",
    "GlobalConfig",
    "LoggingConfig",
    "MapConfig",
    "debug_config_loading",
    "get_config",
    "load_config",
]

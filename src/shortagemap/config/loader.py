# src/shortagemap/config/loader.py
"""
Configuration loader supporting separate environment files
"""

import os
from pathlib import Path
from typing import Any

import yaml
from loguru import logger
from pydantic import ValidationError
from rich.console import Console

from shortagemap.config.exceptions import (
    ConfigurationError,
    ConfigurationNotFoundError,
    ConfigurationValidationError,
)
from shortagemap.config.models import AppConfig

console = Console(stderr=True)

ENV_PREFIX = "SHORTAGEMAP"
ENV_SECTIONS = ["global", "map"]


class ConfigManager:
    """Config manager supporting a base file, environment files and env vars"""

    def __init__(self):
        self._config: AppConfig | None = None
        self._environment: str | None = None

    def load_config(
        self,
        config_path: Path | None = None,
        environment: str = "development",
    ) -> AppConfig:
        """Load, merge and validate configuration"""
        logger.debug(f"Loading configuration for environment '{environment}'")

        # 1. Base configuration (built-in defaults when no file exists)
        base_config_data = self._load_base_config(config_path)

        # 2. Environment-specific overrides
        env_config_data = self._load_environment_config(config_path, environment)
        if env_config_data:
            self._merge_configs(base_config_data, env_config_data)

        # 3. Environment variable overrides
        self._apply_env_overrides(base_config_data)

        # 4. Validate
        try:
            self._config = AppConfig(**base_config_data)
        except ValidationError as e:
            raise ConfigurationValidationError(f"Invalid configuration: {e}") from e

        self._environment = environment
        return self._config

    def get_config(self) -> AppConfig:
        """Get loaded configuration"""
        if self._config is None:
            raise ConfigurationError("Configuration not loaded. Call load_config() first.")
        return self._config

    def _load_base_config(self, config_path: Path | None) -> dict:
        """Load the base configuration file"""
        if config_path is not None:
            config_path = Path(config_path)
            if not config_path.exists():
                raise ConfigurationNotFoundError(
                    f"Configuration file not found: {config_path}"
                )
        else:
            config_path = self._find_base_config_file()
            if config_path is None:
                logger.debug("No configuration file found, using built-in defaults")
                return {}

        logger.debug(f"Loading base config: {config_path}")
        return self._read_yaml(config_path)

    def _read_yaml(self, path: Path) -> dict:
        try:
            with open(path, "r", encoding="utf-8") as f:
                # Handle both single YAML and multi-document YAML
                configs = [c for c in yaml.safe_load_all(f) if c]
        except yaml.YAMLError as e:
            raise ConfigurationValidationError(f"Invalid YAML in {path}: {e}") from e

        if not configs:
            return {}

        base_config = configs[0]
        if not isinstance(base_config, dict):
            raise ConfigurationValidationError(
                f"Top level of {path} must be a mapping"
            )
        for config in configs[1:]:
            if isinstance(config, dict) and not self._is_environment_section(config):
                self._merge_configs(base_config, config)
        return base_config

    def _load_environment_config(
        self, base_config_path: Path | None, environment: str
    ) -> dict | None:
        """Load environment-specific configuration file"""
        for env_path in self._find_environment_config_paths(base_config_path, environment):
            if env_path.exists():
                logger.debug(f"Loading environment config: {env_path}")
                env_config = self._read_yaml(env_path)
                if env_config:
                    return env_config
                logger.debug(f"Environment config is empty: {env_path}")

        logger.debug(f"No environment config found for '{environment}'")
        return None

    def _find_base_config_file(self) -> Path | None:
        """Find the base configuration file"""
        search_paths = [
            Path("config/shortagemap_config.yaml"),
            Path("config/config.yaml"),
            Path("~/.config/shortagemap/config.yaml").expanduser(),
        ]

        for path in search_paths:
            if path.exists():
                return path
        return None

    def _find_environment_config_paths(
        self, base_config_path: Path | None, environment: str
    ) -> list[Path]:
        """Find possible environment configuration file paths"""
        base_dir = Path(base_config_path).parent if base_config_path else Path("config")

        return [
            # config/environments/development.yaml
            base_dir / "environments" / f"{environment}.yaml",
            base_dir / "environments" / f"{environment}.yml",
            # config/development.yaml
            base_dir / f"{environment}.yaml",
            base_dir / f"{environment}.yml",
        ]

    def _is_environment_section(self, config: dict) -> bool:
        """Check if a config section is an environment override"""
        env_keys = ["environment", "env", "_environment"]
        return any(key in config for key in env_keys)

    def _merge_configs(self, base: dict, override: dict) -> None:
        """Recursively merge configuration dictionaries"""
        for key, value in override.items():
            if key.startswith("_"):  # Skip meta keys like _environment
                continue

            if key in base and isinstance(base[key], dict) and isinstance(value, dict):
                self._merge_configs(base[key], value)
            else:
                base[key] = value
                logger.debug(f"Override: {key} = {value}")

    def _apply_env_overrides(self, config: dict) -> None:
        """Apply SHORTAGEMAP_<SECTION>_<KEY> environment variable overrides"""
        for section in ENV_SECTIONS:
            prefix = f"{ENV_PREFIX}_{section.upper()}_"
            for env_var, value in os.environ.items():
                if not env_var.startswith(prefix):
                    continue
                section_data = config.setdefault(section, {})
                if not isinstance(section_data, dict):
                    continue
                config_path = env_var[len(prefix):].lower().split("__")
                self._set_nested_value(section_data, config_path, value)
                logger.debug(f"Env override: {env_var} = {value}")

    def _set_nested_value(self, config: dict, path: list[str], value: Any) -> None:
        """Set a nested configuration value"""
        current = config
        for key in path[:-1]:
            if not isinstance(current.get(key), dict):
                current[key] = {}
            current = current[key]
        current[path[-1]] = value


# Global instance
_config_manager = ConfigManager()


def load_config(
    config_path: Path | None = None,
    environment: str = "development",
) -> AppConfig:
    """Load configuration with separate environment files"""
    return _config_manager.load_config(config_path, environment)


def get_config() -> AppConfig:
    """Get the loaded configuration"""
    return _config_manager.get_config()


def debug_config_loading(
    config_path: Path | None = None, environment: str = "development"
) -> None:
    """Print each configuration layer"""
    console.print(f"\n🔍 DEBUG: Loading config for environment '{environment}'")

    manager = ConfigManager()

    try:
        base_config = manager._load_base_config(config_path)
        console.print(
            f"📄 Base config log_level: {base_config.get('global', {}).get('log_level', 'NOT_SET')}"
        )

        env_config = manager._load_environment_config(config_path, environment)
        if env_config:
            console.print(
                f"🌍 Environment config log_level: {env_config.get('global', {}).get('log_level', 'NOT_SET')}"
            )
        else:
            console.print("🌍 No environment config loaded")

        app_config = manager.load_config(config_path, environment)
        console.print(f"✅ Final log_level: {app_config.global_.log_level}")
        console.print(f"✅ Default lens: {app_config.map.default_lens or '(catalog default)'}")

    except ConfigurationError as e:
        console.print(f"❌ Error: {e}")

"""Tests for configuration loading (base file, environment file, env vars)."""

from pathlib import Path

import pytest
import yaml

from shortagemap.config import (
    AppConfig,
    ConfigurationNotFoundError,
    ConfigurationValidationError,
    load_config,
)
from shortagemap.config.models import FileLoggingConfig, LoggingConfig

BASE_CONFIG = {
    "global": {"log_level": "INFO"},
    "map": {
        "default_lens": "per_capita",
        "lens_overrides": {"per_capita": {"classification": {"kind": "quantile"}}},
    },
}


@pytest.fixture
def config_dir(tmp_path):
    config_path = tmp_path / "shortagemap_config.yaml"
    config_path.write_text(yaml.safe_dump(BASE_CONFIG), encoding="utf-8")
    env_dir = tmp_path / "environments"
    env_dir.mkdir()
    (env_dir / "production.yaml").write_text(
        yaml.safe_dump(
            {
                "_environment": "production",
                "global": {"log_level": "WARNING", "logging": {"file": {"enabled": True}}},
            }
        ),
        encoding="utf-8",
    )
    return tmp_path


def test_base_config_loaded(config_dir):
    config = load_config(config_dir / "shortagemap_config.yaml", environment="development")

    assert isinstance(config, AppConfig)
    assert config.global_.log_level == "INFO"
    assert config.map.default_lens == "per_capita"
    assert config.map.lens_overrides["per_capita"]["classification"]["kind"] == "quantile"


def test_environment_file_merged(config_dir):
    config = load_config(config_dir / "shortagemap_config.yaml", environment="production")

    assert config.global_.log_level == "WARNING"
    assert config.global_.logging.file.enabled is True
    # untouched sections survive the merge
    assert config.map.default_lens == "per_capita"


def test_env_var_overrides(config_dir, monkeypatch):
    monkeypatch.setenv("SHORTAGEMAP_GLOBAL_LOG_LEVEL", "error")
    monkeypatch.setenv("SHORTAGEMAP_GLOBAL_LOGGING__FILE__ROTATION", "5 MB")
    monkeypatch.setenv("SHORTAGEMAP_MAP_NO_DATA_LABEL", "Nothing here")

    config = load_config(config_dir / "shortagemap_config.yaml", environment="development")

    assert config.global_.log_level == "ERROR"
    assert config.global_.logging.file.rotation == "5 MB"
    assert config.map.no_data_label == "Nothing here"


def test_missing_explicit_config(tmp_path):
    with pytest.raises(ConfigurationNotFoundError):
        load_config(tmp_path / "nope.yaml")


def test_invalid_value_rejected(tmp_path):
    config_path = tmp_path / "config.yaml"
    config_path.write_text("global:\n  log_level: LOUD\n", encoding="utf-8")
    with pytest.raises(ConfigurationValidationError):
        load_config(config_path)


def test_invalid_yaml_rejected(tmp_path):
    config_path = tmp_path / "config.yaml"
    config_path.write_text("global: [unclosed\n", encoding="utf-8")
    with pytest.raises(ConfigurationValidationError):
        load_config(config_path)


def test_defaults_without_config_file(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HOME", str(tmp_path))

    config = load_config(environment="test")

    assert config.global_.log_level == "INFO"
    assert config.map.default_lens is None
    assert config.map.unknown_county_label == "Unknown County"


def test_file_logging_path_template():
    file_config = FileLoggingConfig(path="logs/map_{environment}.log")
    assert file_config.get_resolved_path("production") == Path("logs/map_production.log")

    with pytest.raises(ValueError):
        FileLoggingConfig(path="logs/{user}.log")
    with pytest.raises(ValueError):
        FileLoggingConfig(rotation="often")


def test_module_levels_normalized():
    logging_config = LoggingConfig(modules={"shortagemap.core": "debug"})
    assert logging_config.modules == {"shortagemap.core": "DEBUG"}
    assert logging_config.get_file_path("test") is None

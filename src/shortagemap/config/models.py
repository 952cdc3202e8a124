# src/shortagemap/config/models.py
"""
Pydantic configuration models
"""

import re
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

VALID_LEVELS = ["TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"]


class FileLoggingConfig(BaseModel):
    """File logging configuration with template support"""

    enabled: bool = False
    path: str = "logs/shortagemap_{environment}_{date}.log"  # Keep as string template
    rotation: str = "10 MB"
    retention: str = "30 days"
    compression: str = "gz"

    @field_validator("path")
    @classmethod
    def validate_path_template(cls, v):
        """Validate that path template has valid placeholders"""
        valid_placeholders = {"{environment}", "{date}", "{datetime}"}
        found_placeholders = set(re.findall(r"\{[^}]+\}", v))

        invalid_placeholders = found_placeholders - valid_placeholders
        if invalid_placeholders:
            raise ValueError(
                f"Invalid placeholders in path: {invalid_placeholders}. "
                f"Valid placeholders: {valid_placeholders}"
            )
        return v

    @field_validator("rotation")
    @classmethod
    def validate_rotation(cls, v):
        """Validate rotation format (e.g., '10 MB', '1 GB', '1 day')"""
        if not re.match(r"^\d+\s*(MB|GB|KB|day|days|hour|hours)$", v, re.IGNORECASE):
            raise ValueError(
                "rotation must be in format like '10 MB', '1 GB', or '1 day'"
            )
        return v

    @field_validator("retention")
    @classmethod
    def validate_retention(cls, v):
        """Validate retention format (e.g., '30 days', '1 week')"""
        if not re.match(
            r"^\d+\s*(day|days|week|weeks|month|months)$", v, re.IGNORECASE
        ):
            raise ValueError(
                "retention must be in format like '30 days', '1 week', '6 months'"
            )
        return v

    def get_resolved_path(self, environment: str) -> Path:
        """
        Resolve template placeholders in the path.

        Args:
            environment: Environment name (e.g., 'development', 'production')

        Returns:
            Path with placeholders resolved
        """
        now = datetime.now()
        return Path(
            self.path.format(
                environment=environment,
                date=now.strftime("%Y%m%d"),
                datetime=now.strftime("%Y%m%d_%H%M%S"),
            )
        )


class ConsoleLoggingConfig(BaseModel):
    """Console logging configuration"""

    format: str = "simple"  # "simple" or "detailed"
    show_time: bool = True
    show_level: bool = True
    show_path: bool = False

    @field_validator("format")
    @classmethod
    def validate_format(cls, v):
        if v not in ["simple", "detailed"]:
            raise ValueError("format must be 'simple' or 'detailed'")
        return v


class LoggingConfig(BaseModel):
    """Complete logging configuration"""

    file: FileLoggingConfig = FileLoggingConfig()
    console: ConsoleLoggingConfig = ConsoleLoggingConfig()
    modules: Dict[str, str] = {}

    @field_validator("modules")
    @classmethod
    def validate_module_levels(cls, v):
        """Validate that log levels are valid"""
        normalized = {}
        for module, level in v.items():
            if level.upper() not in VALID_LEVELS:
                raise ValueError(
                    f"Invalid log level '{level}' for module '{module}'. "
                    f"Valid levels: {VALID_LEVELS}"
                )
            normalized[module] = level.upper()
        return normalized

    def get_file_path(self, environment: str) -> Optional[Path]:
        """Resolved file path if file logging is enabled, None otherwise"""
        if self.file.enabled:
            return self.file.get_resolved_path(environment)
        return None


class GlobalConfig(BaseModel):
    """Global configuration settings"""

    log_level: str = "INFO"
    logging: LoggingConfig = LoggingConfig()

    @field_validator("log_level")
    @classmethod
    def log_level_must_be_valid(cls, v):
        if str(v).upper() not in VALID_LEVELS:
            raise ValueError(f"log_level must be one of {VALID_LEVELS}")
        return str(v).upper()


class MapConfig(BaseModel):
    """Lens catalog settings layered on top of the built-in lenses"""

    default_lens: Optional[str] = None
    lens_order: List[str] = []
    palettes: List[Dict[str, Any]] = []
    lens_overrides: Dict[str, Dict[str, Any]] = {}
    extra_lenses: List[Dict[str, Any]] = []
    unknown_county_label: str = "Unknown County"
    no_data_label: str = "No data available"
    data_path: Optional[Path] = None

    @field_validator("unknown_county_label", "no_data_label")
    @classmethod
    def label_not_empty(cls, v):
        if not v or not v.strip():
            raise ValueError("label cannot be empty")
        return v

    @field_validator("data_path", mode="before")
    @classmethod
    def parse_data_path(cls, v):
        if v in (None, ""):
            return None
        return Path(v) if not isinstance(v, Path) else v


class AppConfig(BaseModel):
    """Main application configuration"""

    model_config = ConfigDict(populate_by_name=True)

    global_: GlobalConfig = Field(default_factory=GlobalConfig, alias="global")
    map: MapConfig = Field(default_factory=MapConfig)

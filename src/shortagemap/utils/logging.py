# src/shortagemap/utils/logging.py
"""
Centralized logging configuration for the shortagemap application.
"""

import sys
from pathlib import Path
from typing import Dict, Optional

from loguru import logger
from rich.console import Console

from shortagemap.config import AppConfig, ConfigurationError, load_config


class MapLogger:
    """Centralized logger for the shortagemap application with config integration."""

    def __init__(self):
        self.console = Console(stderr=True)
        self._is_configured = False
        self._current_level = "INFO"
        self._log_file: Optional[Path] = None
        self._environment = "development"

    @property
    def is_configured(self) -> bool:
        return self._is_configured

    @property
    def level(self) -> str:
        return self._current_level

    def setup(
        self,
        verbose: bool = False,
        log_file: Optional[Path] = None,
        environment: str = "development",
        config_path: Optional[Path] = None,
        app_config: Optional[AppConfig] = None,
    ):
        """
        Setup logging using the unified configuration system.

        Args:
            verbose: Enable debug logging (overrides config)
            log_file: Optional custom log file path (overrides config)
            environment: Environment name for config loading
            config_path: Optional path to config file
            app_config: Already loaded configuration (skips loading)
        """
        if self._is_configured:
            return

        self._environment = environment

        if app_config is None:
            try:
                app_config = load_config(config_path=config_path, environment=environment)
            except ConfigurationError as e:
                self._setup_fallback_logging(verbose)
                logger.warning(f"Failed to load config, using fallback logging: {e}")
                return

        logging_config = app_config.global_.logging
        log_level = "DEBUG" if verbose else app_config.global_.log_level
        self._current_level = log_level

        logger.remove()
        self._setup_console_logging(log_level, verbose, logging_config.console.model_dump())

        if log_file:
            self._log_file = Path(log_file)
            self._setup_file_logging(
                log_level,
                {"rotation": "10 MB", "retention": "30 days", "compression": "gz"},
            )
        elif logging_config.file.enabled:
            self._log_file = logging_config.get_file_path(environment)
            self._setup_file_logging(log_level, logging_config.file.model_dump())

        if logging_config.modules:
            self._setup_module_logging(logging_config.modules)

        self._is_configured = True
        logger.debug(
            f"Logging initialized (level={log_level}, env={environment}, file={self._log_file})"
        )

    def _setup_fallback_logging(self, verbose: bool):
        """Setup basic stderr logging when config loading fails."""
        logger.remove()

        log_level = "DEBUG" if verbose else "INFO"
        self._current_level = log_level
        logger.add(sys.stderr, format="{level}: {message}", level=log_level, colorize=False)
        self._is_configured = True

    @staticmethod
    def _colored_level(level: str) -> str:
        if level == "ERROR":
            return f"[bold red]{level}[/bold red]"
        if level == "WARNING":
            return f"[bold orange1]{level}[/bold orange1]"
        if level == "SUCCESS":
            return f"[bold green]{level}[/bold green]"
        return f"[bold]{level}[/bold]"

    def _setup_console_logging(self, log_level: str, verbose: bool, console_config: Dict):
        """Setup console logging based on configuration."""
        format_type = console_config.get("format", "simple")
        show_time = console_config.get("show_time", True)
        show_level = console_config.get("show_level", True)
        show_path = console_config.get("show_path", False)
        detailed = verbose or format_type == "detailed"

        supports_color = self.console.is_terminal and not self.console.legacy_windows

        if not supports_color:
            if detailed:
                location = "{name}:{function}:{line}" if show_path else "{name}:{function}"
                format_str = "{time:HH:mm:ss} | {level: <8} | " + location + " - {message}"
            else:
                parts = []
                if show_time:
                    parts.append("{time:HH:mm:ss}")
                if show_level:
                    parts.append("{level}")
                parts.append("{message}")
                format_str = " | ".join(parts)

            logger.add(
                sys.stderr,
                format=format_str,
                level=log_level,
                colorize=False,
                diagnose=verbose,
            )
            return

        def rich_sink(message):
            record = message.record
            level = record["level"].name
            time_str = f"[green]{record['time'].strftime('%H:%M:%S')}[/green]"
            colored_level = self._colored_level(level)

            if detailed:
                location = f"{record['name']}:{record['function']}"
                if show_path:
                    location += f":{record['line']}"
                formatted_msg = f"{time_str} | {colored_level} | [cyan]{location}[/cyan] - {record['message']}"
            else:
                msg_parts = []
                if show_time:
                    msg_parts.append(time_str)
                if show_level:
                    msg_parts.append(colored_level)
                msg_parts.append(record["message"])
                formatted_msg = " | ".join(msg_parts)

            try:
                self.console.print(formatted_msg, markup=True, highlight=False)
            except Exception:
                # Rich markup errors (e.g. brackets in the message): print plain
                plain_msg = f"{record['time'].strftime('%H:%M:%S')} | {level} | {record['message']}"
                self.console.print(plain_msg, markup=False, highlight=False)

        logger.add(
            rich_sink,
            format="{message}",
            level=log_level,
            colorize=False,
            diagnose=verbose,
        )

    def _setup_file_logging(self, log_level: str, file_config: Dict):
        """Setup file logging based on configuration."""
        if not self._log_file:
            return

        self._log_file.parent.mkdir(parents=True, exist_ok=True)

        logger.add(
            str(self._log_file),
            format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}",
            level=log_level,
            rotation=file_config.get("rotation", "10 MB"),
            retention=file_config.get("retention", "30 days"),
            compression=file_config.get("compression", "gz"),
            enqueue=True,
            diagnose=True,
        )

    def _setup_module_logging(self, modules_config: Dict[str, str]):
        """Setup module-specific log levels."""
        for module_name, level in modules_config.items():

            def create_module_filter(module):
                return lambda record: record["name"].startswith(module)

            logger.add(
                sys.stderr,
                format="{message}",
                level=level,
                filter=create_module_filter(module_name),
            )

    def reset(self):
        """Forget the current setup so ``setup`` can run again."""
        logger.remove()
        self._is_configured = False
        self._log_file = None

    def get_log_file_path(self) -> Optional[Path]:
        return self._log_file

    def show_log_info(self):
        """Display logging information."""
        self.console.print("[bold]Logging Configuration:[/bold]")
        self.console.print(f"  Environment: {self._environment}")
        self.console.print(f"  Level: {self._current_level}")
        self.console.print(f"  Log file: {self._log_file}")
        if self._log_file and self._log_file.exists():
            size_mb = self._log_file.stat().st_size / (1024 * 1024)
            self.console.print(f"  File size: {size_mb:.2f} MB")


# Global logger instance
map_logger = MapLogger()


def setup_logging(
    verbose: bool = False,
    log_file: Optional[Path] = None,
    environment: str = "development",
    config_path: Optional[Path] = None,
    app_config: Optional[AppConfig] = None,
):
    """
    Setup logging for the shortagemap application.

    Args:
        verbose: Enable debug logging
        log_file: Optional custom log file path
        environment: Environment name
        config_path: Optional path to config file
        app_config: Already loaded configuration
    """
    map_logger.setup(
        verbose=verbose,
        log_file=log_file,
        environment=environment,
        config_path=config_path,
        app_config=app_config,
    )

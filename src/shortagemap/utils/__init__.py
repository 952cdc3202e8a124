"""
shortagemap utilities module.
"""

from shortagemap.utils.console import console
from shortagemap.utils.logging import map_logger, setup_logging

__all__ = [
    "console",
    "map_logger",
    "setup_logging",
]

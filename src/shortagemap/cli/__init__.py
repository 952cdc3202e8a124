"""
CLI module for shortagemap.
"""

from shortagemap.cli.main import cli, main

__all__ = ["cli", "main"]

"""
Rich console shared by CLI output.
"""

import os

from rich.console import Console


def get_console() -> Console:
    """Console with ASCII boxes on Windows terminals"""
    if os.name == "nt":
        return Console(legacy_windows=True, safe_box=True)
    return Console()


console = get_console()

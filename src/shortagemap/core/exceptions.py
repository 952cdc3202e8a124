# src/shortagemap/core/exceptions.py
"""
Lens-related exceptions
"""


class LensError(Exception):
    """Base exception for lens lookups"""

    pass


class UnknownLensError(LensError, KeyError):
    """Raised when a lens id is not registered"""

    def __init__(self, lens_id: str, available=None):
        self.lens_id = lens_id
        self.available = list(available or [])
        super().__init__(lens_id)

    def __str__(self) -> str:
        message = f"Unknown lens '{self.lens_id}'"
        if self.available:
            message += f" (available: {', '.join(self.available)})"
        return message

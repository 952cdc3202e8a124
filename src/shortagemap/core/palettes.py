"""
Palette resolution: (palette id, class index) -> display color.
"""

import re
from typing import Dict, Iterable, List, Optional, Tuple

from loguru import logger
from pydantic import BaseModel, ConfigDict, field_validator

from shortagemap.core.classifier import CLASS_COUNT, clamp_class_index

HEX_COLOR = re.compile(r"^#(?:[0-9a-fA-F]{6}|[0-9a-fA-F]{8})$")


class Palette(BaseModel):
    """A light-to-dark ramp of exactly five colors"""

    model_config = ConfigDict(frozen=True)

    id: str
    colors: Tuple[str, ...]
    description: Optional[str] = None

    @field_validator("id")
    @classmethod
    def id_must_not_be_empty(cls, v):
        if not v or not v.strip():
            raise ValueError("palette id cannot be empty")
        return v.strip()

    @field_validator("colors")
    @classmethod
    def validate_colors(cls, v):
        if len(v) != CLASS_COUNT:
            raise ValueError(f"a palette needs exactly {CLASS_COUNT} colors, got {len(v)}")
        invalid = [c for c in v if not HEX_COLOR.match(c)]
        if invalid:
            raise ValueError(f"invalid hex colors: {invalid}")
        return v

    @property
    def lightest(self) -> str:
        return self.colors[0]


class PaletteResolver:
    """
    Maps palette ids and class indices to colors.

    Unknown palette ids degrade to the default palette instead of failing.
    """

    def __init__(self, palettes: Iterable[Palette], default_id: str):
        self._palettes: Dict[str, Palette] = {p.id: p for p in palettes}
        if default_id not in self._palettes:
            raise KeyError(f"Default palette '{default_id}' is not registered")
        self.default_id = default_id
        self._warned: set = set()

    def __contains__(self, palette_id: str) -> bool:
        return palette_id in self._palettes

    @property
    def ids(self) -> List[str]:
        return list(self._palettes)

    def get(self, palette_id: str) -> Palette:
        palette = self._palettes.get(palette_id)
        if palette is None:
            if palette_id not in self._warned:
                logger.warning(
                    f"Unknown palette '{palette_id}', using '{self.default_id}'"
                )
                self._warned.add(palette_id)
            palette = self._palettes[self.default_id]
        return palette

    def color_for(self, palette_id: str, class_index: int) -> str:
        """Color of ``class_index`` (clamped into 0..4) in ``palette_id``."""
        return self.get(palette_id).colors[clamp_class_index(class_index)]

    def missing_color(self, palette_id: str) -> str:
        """Fallback color for missing data: the palette's lightest color."""
        return self.get(palette_id).lightest

    def colors(self, palette_id: str) -> Tuple[str, ...]:
        return self.get(palette_id).colors

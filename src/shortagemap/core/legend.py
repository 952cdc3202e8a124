"""
Legend models derived from a lens classification.

Entry colors are not looked up in a separate table: each range's midpoint
(``b4 + 1`` for the open top class) is run through the same classifier and
palette resolver used for map fills, so legend and map cannot disagree.
"""

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from shortagemap.core.classifier import Boundaries, classify_value
from shortagemap.core.formatting import format_value
from shortagemap.core.palettes import PaletteResolver

NO_DATA_LABEL = "No data available"


@dataclass(frozen=True)
class LegendEntry:
    """One legend row"""

    range_low: Optional[float]
    range_high: Optional[float]  # None for the open-ended top class
    color: str
    label: str
    class_index: int
    is_empty: bool = False  # middle band between two equal boundaries

    @property
    def is_open_ended(self) -> bool:
        return self.range_high is None and self.range_low is not None


@dataclass(frozen=True)
class Legend:
    """Title lines plus ordered entries for one lens"""

    lens_id: str
    title_lines: Tuple[str, ...]
    entries: Tuple[LegendEntry, ...] = field(default_factory=tuple)
    has_data: bool = True

    @property
    def title(self) -> str:
        return " ".join(self.title_lines)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "lens_id": self.lens_id,
            "title_lines": list(self.title_lines),
            "has_data": self.has_data,
            "entries": [asdict(entry) for entry in self.entries],
        }


def entry_label(low: float, high: Optional[float], unit: str) -> str:
    if high is None:
        return f"≥ {format_value(low, unit)}"
    return f"{format_value(low, unit)} – {format_value(high, unit)}"


def representative_value(low: float, high: Optional[float]) -> float:
    """Value used to color a legend range: midpoint, or ``low + 1`` when open."""
    if high is None:
        return low + 1
    return (low + high) / 2


def build_legend(
    lens,
    boundaries: Boundaries,
    palettes: PaletteResolver,
    no_data_label: str = NO_DATA_LABEL,
) -> Legend:
    """
    Build the legend for ``lens`` classified by ``boundaries``.

    Args:
        lens: Lens being displayed
        boundaries: Four boundaries, or empty when there is no data
        palettes: Resolver shared with map coloring
        no_data_label: Label of the single row shown without data

    Returns:
        Legend with five entries, or a single "no data" entry
    """
    if not boundaries:
        row = LegendEntry(
            range_low=None,
            range_high=None,
            color=palettes.missing_color(lens.palette_id),
            label=no_data_label,
            class_index=0,
        )
        return Legend(
            lens_id=lens.id,
            title_lines=lens.legend_title,
            entries=(row,),
            has_data=False,
        )

    if not isinstance(boundaries, Boundaries):
        boundaries = Boundaries.from_breaks(boundaries)

    entries: List[LegendEntry] = []
    for position, (low, high) in enumerate(boundaries.ranges()):
        class_index = classify_value(representative_value(low, high), boundaries)
        entries.append(
            LegendEntry(
                range_low=low,
                range_high=high,
                color=palettes.color_for(lens.palette_id, class_index),
                label=entry_label(low, high, lens.unit),
                class_index=class_index,
                # the bottom band starts at the fixed 0, not at a boundary
                is_empty=0 < position and high is not None and high <= low,
            )
        )

    return Legend(lens_id=lens.id, title_lines=lens.legend_title, entries=tuple(entries))

"""
Popup content for one county under one lens.

Only structured content is produced here; markup belongs to the presentation
layer.
"""

from dataclasses import asdict, dataclass
from typing import Any, Callable, Dict, Optional, Tuple

from shortagemap.core.formatting import format_value
from shortagemap.core.numeric import coerce_or_zero, parse_numeric, to_percent_space
from shortagemap.core.records import UNKNOWN_COUNTY, as_record

NORMALIZERS: Dict[str, Callable[[Any], Optional[float]]] = {
    "number_or_zero": coerce_or_zero,
    "numeric": parse_numeric,
    "percent_space": to_percent_space,
}


@dataclass(frozen=True)
class DetailLine:
    icon: str
    label: str
    formatted_value: str


@dataclass(frozen=True)
class DetailContent:
    lens_id: str
    county_name: str
    title: str
    lines: Tuple[DetailLine, ...]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "lens_id": self.lens_id,
            "county_name": self.county_name,
            "title": self.title,
            "lines": [asdict(line) for line in self.lines],
        }


def build_details(lens, record, unknown_county_label: str = UNKNOWN_COUNTY) -> DetailContent:
    """
    Format the lens's declared detail fields for ``record``.

    Args:
        lens: Active lens
        record: CountyRecord, GeoJSON feature or property mapping
        unknown_county_label: Placeholder used when the record has no name

    Returns:
        DetailContent with one line per declared field, in declared order
    """
    record = as_record(record)
    name = record.display_name(unknown_county_label)

    lines = []
    for detail in lens.detail_fields:
        value = NORMALIZERS[detail.normalizer](record.get(detail.field))
        lines.append(
            DetailLine(
                icon=detail.icon,
                label=detail.label,
                formatted_value=format_value(value, detail.formatter),
            )
        )

    return DetailContent(
        lens_id=lens.id,
        county_name=name,
        title=f"{name} County" if record.name else name,
        lines=tuple(lines),
    )

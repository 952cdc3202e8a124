"""
Immutable county records.

The engine only ever reads named properties; geometry is carried along
untouched for the presentation layer.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Iterable, Mapping, Optional, Tuple

UNKNOWN_COUNTY = "Unknown County"
NAME_FIELDS = ("NAME", "county")


@dataclass(frozen=True)
class CountyRecord:
    """A geographic feature and its read-only attribute mapping"""

    properties: Mapping[str, Any] = field(default_factory=dict)
    geometry: Any = None
    feature_id: Optional[Any] = None

    def __post_init__(self):
        if not isinstance(self.properties, MappingProxyType):
            object.__setattr__(
                self, "properties", MappingProxyType(dict(self.properties or {}))
            )

    def get(self, field_name: str, default: Any = None) -> Any:
        return self.properties.get(field_name, default)

    @property
    def name(self) -> Optional[str]:
        """County name from ``NAME`` or ``county``, None when neither is usable."""
        for key in NAME_FIELDS:
            value = self.properties.get(key)
            if value is not None and str(value).strip():
                return str(value).strip()
        return None

    def display_name(self, placeholder: str = UNKNOWN_COUNTY) -> str:
        return self.name or placeholder

    @classmethod
    def from_feature(cls, feature: Mapping[str, Any]) -> "CountyRecord":
        """Build a record from a GeoJSON feature dictionary."""
        if feature is None:
            return cls()
        return cls(
            properties=feature.get("properties") or {},
            geometry=feature.get("geometry"),
            feature_id=feature.get("id"),
        )


def as_record(feature: Any) -> CountyRecord:
    """Accept a record, a GeoJSON feature or a bare property mapping."""
    if isinstance(feature, CountyRecord):
        return feature
    if feature is None:
        return CountyRecord()
    if isinstance(feature, Mapping):
        if "properties" in feature or feature.get("type") == "Feature":
            return CountyRecord.from_feature(feature)
        return CountyRecord(properties=feature)
    raise TypeError(f"Cannot build a county record from {type(feature).__name__}")


def records_from_features(features: Iterable[Any]) -> Tuple[CountyRecord, ...]:
    """Records for every feature of a FeatureCollection-like iterable."""
    return tuple(as_record(feature) for feature in features)

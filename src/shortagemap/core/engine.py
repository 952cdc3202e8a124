"""
Renderer-facing facade over the classification engine.

The caller always passes the lens id explicitly; the engine keeps no notion of
a "current" lens. Classifications are cached per lens for the lifetime of the
record set, which is immutable.
"""

from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Tuple

from loguru import logger

from shortagemap.core.classifier import Boundaries, classify_value, compute_boundaries
from shortagemap.core.details import DetailContent, build_details
from shortagemap.core.legend import NO_DATA_LABEL, Legend, build_legend
from shortagemap.core.lenses import Lens, LensRegistry, build_registry
from shortagemap.core.numeric import metric_value
from shortagemap.core.records import UNKNOWN_COUNTY, CountyRecord, as_record


@dataclass(frozen=True)
class Classification:
    """Boundaries and class colors of one lens over one record set"""

    lens_id: str
    boundaries: Boundaries
    colors: Tuple[str, ...]
    value_count: int

    @property
    def has_data(self) -> bool:
        return self.boundaries.has_data

    def class_of(self, value: Optional[float]) -> int:
        return classify_value(value, self.boundaries)

    def color_of(self, value: Optional[float]) -> str:
        return self.colors[self.class_of(value)]


class ChoroplethEngine:
    """
    Colors, legends and popup content for a static set of county records.

    Args:
        registry: Lens registry (built from the default catalog if omitted)
        records: County records, GeoJSON features or property mappings
        unknown_county_label: Placeholder for unnamed counties
        no_data_label: Legend row label when a lens has no data
    """

    def __init__(
        self,
        registry: Optional[LensRegistry] = None,
        records: Iterable[Any] = (),
        unknown_county_label: str = UNKNOWN_COUNTY,
        no_data_label: str = NO_DATA_LABEL,
    ):
        self.registry = registry or build_registry()
        self.records: Tuple[CountyRecord, ...] = tuple(as_record(r) for r in records)
        self.unknown_county_label = unknown_county_label
        self.no_data_label = no_data_label
        self._classifications: Dict[str, Classification] = {}

        if not self.records:
            logger.debug("Engine created without records; quantile lenses will show no data")

    @classmethod
    def from_config(cls, app_config, records: Iterable[Any] = ()) -> "ChoroplethEngine":
        """Engine wired from an ``AppConfig``."""
        map_config = app_config.map
        return cls(
            registry=build_registry(map_config),
            records=records,
            unknown_county_label=map_config.unknown_county_label,
            no_data_label=map_config.no_data_label,
        )

    @property
    def palettes(self):
        return self.registry.palettes

    def lens(self, lens_id: str) -> Lens:
        return self.registry.resolve_lens(lens_id)

    def values_for(self, lens: Lens) -> List[float]:
        """Normalized metric values of every record, missing values excluded."""
        values = (metric_value(lens, record) for record in self.records)
        return [v for v in values if v is not None]

    def classification_for(self, lens_id: str) -> Classification:
        lens = self.lens(lens_id)
        cached = self._classifications.get(lens.id)
        if cached is not None:
            return cached

        values = self.values_for(lens) if lens.is_quantile else []
        boundaries = compute_boundaries(lens, values)
        if not boundaries.has_data:
            logger.warning(f"Lens '{lens.id}' has no data to classify")

        classification = Classification(
            lens_id=lens.id,
            boundaries=boundaries,
            colors=self.palettes.colors(lens.palette_id),
            value_count=len(values) if lens.is_quantile else len(self.records),
        )
        logger.debug(
            f"Classified lens '{lens.id}' ({lens.classification.kind}): {boundaries.values}"
        )
        self._classifications[lens.id] = classification
        return classification

    def class_index_for(self, feature: Any, lens_id: str) -> int:
        lens = self.lens(lens_id)
        value = metric_value(lens, as_record(feature))
        return self.classification_for(lens.id).class_of(value)

    def color_for(self, feature: Any, lens_id: str) -> str:
        """Fill color of ``feature`` under ``lens_id``."""
        lens = self.lens(lens_id)
        class_index = self.class_index_for(feature, lens.id)
        return self.palettes.color_for(lens.palette_id, class_index)

    def legend_for(self, lens_id: str) -> Legend:
        lens = self.lens(lens_id)
        classification = self.classification_for(lens.id)
        return build_legend(
            lens,
            classification.boundaries,
            self.palettes,
            no_data_label=self.no_data_label,
        )

    def details_for(self, feature: Any, lens_id: str) -> DetailContent:
        return build_details(
            self.lens(lens_id),
            feature,
            unknown_county_label=self.unknown_county_label,
        )

    def find_record(self, county_name: str) -> Optional[CountyRecord]:
        """Case-insensitive lookup by county name."""
        wanted = county_name.strip().lower()
        for record in self.records:
            name = record.name
            if name and name.lower() in (wanted, f"{wanted} county"):
                return record
            if name and f"{name.lower()} county" == wanted:
                return record
        return None

"""
Thematic classification engine for the county housing-shortage map.

- Numeric normalization of dirty county attributes
- Lens registry (metric, classification, palette, legend and popup settings)
- Five-class fixed or quantile classification
- Legend and popup content models for the presentation layer
"""

from shortagemap._version import __version__
from shortagemap.core.classifier import (
    Boundaries,
    classify_value,
    compute_boundaries,
    quantile_boundaries,
)
from shortagemap.core.details import DetailContent, DetailLine, build_details
from shortagemap.core.engine import ChoroplethEngine, Classification
from shortagemap.core.exceptions import LensError, UnknownLensError
from shortagemap.core.legend import Legend, LegendEntry, build_legend
from shortagemap.core.lenses import (
    DetailField,
    FixedClassification,
    Lens,
    LensRegistry,
    QuantileClassification,
    build_registry,
)
from shortagemap.core.numeric import (
    coerce_or_zero,
    metric_value,
    parse_numeric,
    to_percent_space,
)
from shortagemap.core.palettes import Palette, PaletteResolver
from shortagemap.core.records import CountyRecord, records_from_features

__all__ = [
    "__version__",
    "Boundaries",
    "ChoroplethEngine",
    "Classification",
    "CountyRecord",
    "DetailContent",
    "DetailField",
    "DetailLine",
    "FixedClassification",
    "Legend",
    "LegendEntry",
    "Lens",
    "LensError",
    "LensRegistry",
    "Palette",
    "PaletteResolver",
    "QuantileClassification",
    "UnknownLensError",
    "build_details",
    "build_legend",
    "build_registry",
    "classify_value",
    "coerce_or_zero",
    "compute_boundaries",
    "metric_value",
    "parse_numeric",
    "quantile_boundaries",
    "records_from_features",
    "to_percent_space",
]

"""
Publication tools: vectorized lens styling and styled layer export.
"""

from shortagemap.publish.exporter import export_lens, export_lenses, write_legend
from shortagemap.publish.styler import (
    StyledLayerReport,
    build_report,
    class_counts,
    classify_series,
    metric_series,
    style_layer,
)

__all__ = [
    "StyledLayerReport",
    "build_report",
    "class_counts",
    "classify_series",
    "export_lens",
    "export_lenses",
    "metric_series",
    "style_layer",
    "write_legend",
]

#!/usr/bin/env python
"""
Vectorized lens styling for a whole county layer.

Same rules as ``classify_value`` applied column-wise: ``numpy.searchsorted``
with ``side="left"`` counts the boundaries strictly below each value, which is
exactly the class index (a value equal to a boundary stays in the lower
class). Missing values land in class 0.
"""

from dataclasses import dataclass, field
from typing import Dict, Sequence

import geopandas as gpd
import numpy as np
import pandas as pd
from loguru import logger
from rich.console import Console
from rich.table import Table

from shortagemap.core.classifier import CLASS_COUNT, pad_breaks
from shortagemap.core.numeric import parse_numeric, ratio_to_percent

console = Console()

METRIC_COLUMN = "metric"
CLASS_COLUMN = "class_index"
COLOR_COLUMN = "fill_color"


def metric_series(gdf: pd.DataFrame, lens) -> pd.Series:
    """Normalized metric of every row as floats, NaN for missing."""
    if lens.metric_field not in gdf.columns:
        logger.warning(
            f"Field '{lens.metric_field}' not in layer; lens '{lens.id}' has no data"
        )
        return pd.Series(np.nan, index=gdf.index, dtype="float64")

    parsed = gdf[lens.metric_field].map(
        lambda raw: None if _is_missing(raw) else parse_numeric(raw)
    )
    if lens.value_transform == "percent":
        parsed = parsed.map(ratio_to_percent)
    return pd.to_numeric(parsed, errors="coerce").astype("float64")


def _is_missing(raw) -> bool:
    try:
        return bool(pd.isna(raw))
    except (TypeError, ValueError):
        return False


def classify_series(values: pd.Series, boundaries: Sequence[float]) -> np.ndarray:
    """Class index (0..4) for every value; NaN and empty boundaries give 0."""
    array = np.asarray(values, dtype="float64")
    if len(boundaries) == 0:
        return np.zeros(len(array), dtype="int64")

    edges = np.asarray(pad_breaks(list(boundaries)), dtype="float64")
    indices = np.searchsorted(edges, array, side="left")
    indices[~np.isfinite(array)] = 0
    return indices.astype("int64")


@dataclass
class StyledLayerReport:
    """Per-class feature counts after styling one lens"""

    lens_id: str
    total_features: int
    missing_count: int
    class_counts: Dict[int, int] = field(default_factory=dict)

    def display(self, colors: Sequence[str] = ()):
        """Display the report using Rich."""
        table = Table(title=f"Lens: {self.lens_id}", show_header=True)
        table.add_column("Class", justify="right", style="cyan")
        table.add_column("Color")
        table.add_column("Features", justify="right")

        for class_index in range(CLASS_COUNT):
            color = colors[class_index] if class_index < len(colors) else ""
            swatch = f"[on {color[:7]}]    [/] {color}" if color else ""
            table.add_row(str(class_index), swatch, str(self.class_counts.get(class_index, 0)))
        console.print(table)
        console.print(
            f"  Total: {self.total_features:,} | Missing values: {self.missing_count:,}"
        )


def style_layer(gdf: gpd.GeoDataFrame, engine, lens_id: str) -> gpd.GeoDataFrame:
    """
    Copy of ``gdf`` with metric, class index and fill color columns for a lens.

    Args:
        gdf: County layer
        engine: ChoroplethEngine built over the same records
        lens_id: Lens to style (unknown ids fall back to the default lens)

    Returns:
        Styled copy; the input frame is left untouched
    """
    lens = engine.lens(lens_id)
    classification = engine.classification_for(lens.id)

    styled = gdf.copy()
    styled[METRIC_COLUMN] = metric_series(gdf, lens)
    styled[CLASS_COLUMN] = classify_series(styled[METRIC_COLUMN], classification.boundaries)
    colors = np.asarray(classification.colors, dtype=object)
    styled[COLOR_COLUMN] = colors[styled[CLASS_COLUMN].to_numpy()]

    logger.info(
        f"Styled {len(styled)} features for lens '{lens.id}' "
        f"(boundaries={classification.boundaries.values})"
    )
    return styled


def class_counts(styled: pd.DataFrame) -> Dict[int, int]:
    """Feature count per class, always with keys 0..4."""
    counts = styled[CLASS_COLUMN].value_counts().to_dict() if len(styled) else {}
    return {i: int(counts.get(i, 0)) for i in range(CLASS_COUNT)}


def build_report(styled: pd.DataFrame, lens_id: str) -> StyledLayerReport:
    return StyledLayerReport(
        lens_id=lens_id,
        total_features=len(styled),
        missing_count=int(styled[METRIC_COLUMN].isna().sum()),
        class_counts=class_counts(styled),
    )

"""
Loading the static county layer.
"""

from pathlib import Path
from typing import Optional, Tuple, Union

import geopandas as gpd
import pandas as pd
from loguru import logger

from shortagemap.core.records import CountyRecord


def load_county_layer(
    path: Union[str, Path], layer: Optional[str] = None, **kwargs
) -> gpd.GeoDataFrame:
    """
    Read a county layer (GeoJSON, GeoPackage, ...) with geopandas.

    Args:
        path: Dataset path
        layer: Layer name for multi-layer sources
        **kwargs: Passed through to ``gpd.read_file``

    Returns:
        GeoDataFrame with one row per county
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"County dataset not found: {path}")

    try:
        if layer:
            gdf = gpd.read_file(path, layer=layer, **kwargs)
        else:
            gdf = gpd.read_file(path, **kwargs)
    except Exception as e:
        logger.error(f"Error loading county dataset {path}: {e}")
        raise

    logger.info(f"Loaded county dataset: {path} ({len(gdf)} features)")
    if gdf.empty:
        logger.warning("Loaded an empty county layer")
    return gdf


def _clean(value):
    # pandas NaN/NaT become None so the numeric parser sees a plain "missing"
    if value is None:
        return None
    try:
        if pd.isna(value):
            return None
    except (TypeError, ValueError):
        pass
    return value


def records_from_frame(gdf: gpd.GeoDataFrame) -> Tuple[CountyRecord, ...]:
    """Immutable records for every row of a county GeoDataFrame."""
    geometry_name = None
    if isinstance(gdf, gpd.GeoDataFrame):
        try:
            geometry_name = gdf.geometry.name
        except AttributeError:
            geometry_name = None
    columns = [c for c in gdf.columns if c != geometry_name]

    records = []
    for index, row in gdf.iterrows():
        properties = {column: _clean(row[column]) for column in columns}
        geometry = row[geometry_name] if geometry_name else None
        records.append(
            CountyRecord(properties=properties, geometry=geometry, feature_id=index)
        )
    return tuple(records)


def load_records(path: Union[str, Path], layer: Optional[str] = None) -> Tuple[CountyRecord, ...]:
    """Load a county layer straight into engine records."""
    return records_from_frame(load_county_layer(path, layer=layer))

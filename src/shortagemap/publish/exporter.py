"""
Publication of styled lens layers and legend models.
"""

import json
from pathlib import Path
from typing import Dict, Iterable, Optional

import geopandas as gpd
from loguru import logger

from shortagemap.publish.styler import style_layer


def write_legend(legend, output_path: Path) -> Path:
    """Write a legend model as JSON."""
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, "w", encoding="utf-8") as f:
        json.dump(legend.to_dict(), f, ensure_ascii=False, indent=2)
    return output_path


def export_lens(
    gdf: gpd.GeoDataFrame,
    engine,
    lens_id: str,
    output_dir: Path,
) -> Dict[str, Path]:
    """
    Write ``<lens>.geojson`` (styled features) and ``<lens>_legend.json``.

    Returns:
        Mapping of artifact kind ("features", "legend") to written path
    """
    lens = engine.lens(lens_id)
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    styled = style_layer(gdf, engine, lens.id)
    features_path = output_dir / f"{lens.id}.geojson"
    if features_path.exists():
        features_path.unlink()
    styled.to_file(features_path, driver="GeoJSON")

    legend_path = write_legend(engine.legend_for(lens.id), output_dir / f"{lens.id}_legend.json")

    logger.info(f"Published lens '{lens.id}' to {output_dir}")
    return {"features": features_path, "legend": legend_path}


def export_lenses(
    gdf: gpd.GeoDataFrame,
    engine,
    output_dir: Path,
    lens_ids: Optional[Iterable[str]] = None,
) -> Dict[str, Dict[str, Path]]:
    """Export every requested lens (all registered lenses by default)."""
    lens_ids = list(lens_ids) if lens_ids else list(engine.registry.list_lens_ids())
    return {lens_id: export_lens(gdf, engine, lens_id, output_dir) for lens_id in lens_ids}

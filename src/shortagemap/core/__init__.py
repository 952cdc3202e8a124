"""
Core engine: numeric normalization, lenses, classification, palettes,
legend and popup content.

``shortagemap.core.dataset`` is not imported here so the engine can be used
without loading geopandas.
"""

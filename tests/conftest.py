"""Pytest configuration and fixtures."""

import io
import json
import os
import sys
from pathlib import Path

import pytest
from loguru import logger

# Add src to Python path for testing
src_path = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_path))

DATA_DIR = Path(__file__).parent / "data"


def pytest_configure(config):
    """Force test environment for all pytest runs"""
    os.environ["SHORTAGEMAP_ENVIRONMENT"] = "test"


@pytest.fixture(autouse=True)
def loguru_capture():
    stream = io.StringIO()
    logger.remove()
    logger.add(stream, level="INFO")
    yield stream
    logger.remove()


@pytest.fixture(scope="session")
def sample_geojson_path():
    """Path to the small county layer with dirty values."""
    return DATA_DIR / "nc_counties_sample.geojson"


@pytest.fixture(scope="session")
def sample_features(sample_geojson_path):
    """Raw GeoJSON features of the sample layer."""
    with open(sample_geojson_path, encoding="utf-8") as f:
        return json.load(f)["features"]


@pytest.fixture
def registry():
    from shortagemap.core.lenses import build_registry

    return build_registry()


@pytest.fixture
def engine(registry, sample_features):
    from shortagemap.core.engine import ChoroplethEngine

    return ChoroplethEngine(registry, sample_features)


@pytest.fixture
def features_by_name(sample_features):
    return {f["properties"]["NAME"]: f for f in sample_features}

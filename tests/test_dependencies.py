"""Test that required dependencies are available."""

import pytest


def test_required_dependencies():
    """Test that all required dependencies can be imported."""
    required_deps = [
        "geopandas",
        "shapely",
        "numpy",
        "pandas",
        "click",
        "rich",
        "pydantic",
        "loguru",
        "yaml",  # pyyaml
    ]

    missing = []
    for dep in required_deps:
        try:
            __import__(dep)
        except ImportError:
            missing.append(dep)

    if missing:
        pytest.fail(f"Missing required dependencies: {missing}")


def test_pydantic_v2():
    import pydantic

    assert int(pydantic.VERSION.split(".")[0]) >= 2

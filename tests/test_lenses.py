"""Tests for the lens registry and its start-up validation."""

import copy

import pytest

from shortagemap.config.exceptions import ConfigurationError, ConfigurationValidationError
from shortagemap.config.models import MapConfig
from shortagemap.core.catalog import (
    DEFAULT_PALETTE_ID,
    LENS_DEFINITIONS,
    PALETTE_DEFINITIONS,
)
from shortagemap.core.exceptions import UnknownLensError
from shortagemap.core.lenses import LensRegistry, build_registry


def lens_definitions():
    return copy.deepcopy(LENS_DEFINITIONS)


def test_builtin_lens_order(registry):
    assert registry.list_lens_ids() == (
        "overview",
        "per_capita",
        "affordable_rental",
        "rental_backlog",
        "forsale_backlog",
    )
    assert [lens.id for lens in registry] == list(registry.list_lens_ids())


def test_builtin_lenses_are_fixed(registry):
    overview = registry.get_lens("overview")
    assert overview.classification.kind == "fixed"
    assert overview.classification.breaks == (4000, 10000, 16000, 34000)
    assert overview.unit == "integer"
    assert registry.get_lens("affordable_rental").legend_title == (
        "Shortage of rental units",
        "affordable at ≤50% AMI (percent, 2029)",
    )


def test_get_lens_unknown_raises(registry):
    with pytest.raises(UnknownLensError) as excinfo:
        registry.get_lens("nope")
    assert "nope" in str(excinfo.value)
    assert registry.find_lens("nope") is None


def test_resolve_lens_falls_back_to_default(registry, loguru_capture):
    assert registry.resolve_lens("nope").id == "overview"
    assert "falling back" in loguru_capture.getvalue()


def test_unknown_palette_is_a_configuration_error():
    definitions = lens_definitions()
    definitions[0]["palette_id"] = "rainbow"
    with pytest.raises(ConfigurationValidationError, match="unknown palette 'rainbow'"):
        LensRegistry.from_definitions(definitions, PALETTE_DEFINITIONS, DEFAULT_PALETTE_ID)


@pytest.mark.parametrize(
    "classification",
    [
        {"kind": "fixed", "breaks": []},
        {"kind": "fixed", "breaks": [1, 2, 3, 4, 5]},
        {"kind": "fixed", "breaks": [4, 3, 2, 1]},
        {"kind": "quantile", "count": 0},
        {"kind": "quantile", "count": 7},
        {"kind": "natural_breaks"},
    ],
)
def test_malformed_classification_is_a_configuration_error(classification):
    definitions = lens_definitions()
    definitions[1]["classification"] = classification
    with pytest.raises(ConfigurationError):
        LensRegistry.from_definitions(definitions, PALETTE_DEFINITIONS, DEFAULT_PALETTE_ID)


def test_duplicate_lens_ids_rejected():
    definitions = lens_definitions()
    definitions.append(copy.deepcopy(definitions[0]))
    with pytest.raises(ConfigurationValidationError, match="duplicate"):
        LensRegistry.from_definitions(definitions, PALETTE_DEFINITIONS, DEFAULT_PALETTE_ID)


def test_default_lens_must_exist():
    with pytest.raises(ConfigurationValidationError):
        LensRegistry.from_definitions(
            lens_definitions(), PALETTE_DEFINITIONS, DEFAULT_PALETTE_ID, default_lens_id="ghost"
        )


def test_legend_title_string_becomes_single_line():
    definitions = lens_definitions()
    definitions[0]["legend_title"] = "Just one line"
    registry = LensRegistry.from_definitions(definitions, PALETTE_DEFINITIONS, DEFAULT_PALETTE_ID)
    assert registry.get_lens("overview").legend_title == ("Just one line",)


def test_build_registry_applies_overrides():
    map_config = MapConfig(
        default_lens="per_capita",
        lens_overrides={"per_capita": {"classification": {"kind": "quantile", "count": 4}}},
    )
    registry = build_registry(map_config)
    assert registry.default_lens_id == "per_capita"
    assert registry.get_lens("per_capita").is_quantile
    assert not registry.get_lens("overview").is_quantile


def test_build_registry_extra_lens_and_palette():
    map_config = MapConfig(
        palettes=[
            {
                "id": "greys",
                "colors": ["#f0f0f0", "#bdbdbd", "#969696", "#636363", "#252525"],
            }
        ],
        extra_lenses=[
            {
                "id": "households",
                "short_label": "Shortage per 1,000 households",
                "metric_field": "shortage_per_1000_household_2029",
                "classification": {"kind": "quantile"},
                "legend_title": "Shortage per 1,000 households (2029)",
                "unit": "per_thousand",
                "palette_id": "greys",
            }
        ],
    )
    registry = build_registry(map_config)
    assert registry.list_lens_ids()[-1] == "households"
    assert registry.get_lens("households").classification.count == 4


def test_build_registry_rejects_override_of_unknown_lens():
    with pytest.raises(ConfigurationValidationError):
        build_registry(MapConfig(lens_overrides={"ghost": {"unit": "percent"}}))


def test_lens_order_must_cover_all_lenses():
    with pytest.raises(ConfigurationValidationError):
        build_registry(MapConfig(lens_order=["overview", "per_capita"]))

"""Tests for the engine facade used by the map renderer."""

import pytest

from shortagemap.config.models import AppConfig, MapConfig
from shortagemap.core.engine import ChoroplethEngine
from shortagemap.core.lenses import build_registry


@pytest.fixture
def quantile_registry():
    return build_registry(
        MapConfig(lens_overrides={"per_capita": {"classification": {"kind": "quantile"}}})
    )


@pytest.mark.parametrize(
    "county,lens_id,class_index",
    [
        ("Wake", "overview", 4),
        ("Durham", "overview", 2),
        ("Orange", "overview", 0),
        ("Mecklenburg", "overview", 4),
        (None, "overview", 0),
        ("Wake", "per_capita", 0),
        ("Durham", "per_capita", 1),
        ("Orange", "per_capita", 0),
        ("Mecklenburg", "per_capita", 4),
        ("Wake", "affordable_rental", 2),
        ("Durham", "affordable_rental", 2),
        ("Mecklenburg", "affordable_rental", 4),
        ("Wake", "rental_backlog", 1),
        ("Durham", "rental_backlog", 2),
        ("Wake", "forsale_backlog", 3),
        ("Durham", "forsale_backlog", 2),
        ("Orange", "forsale_backlog", 4),
        ("Mecklenburg", "forsale_backlog", 0),
    ],
)
def test_class_index_for_sample(engine, features_by_name, county, lens_id, class_index):
    assert engine.class_index_for(features_by_name[county], lens_id) == class_index


def test_color_for(engine, features_by_name):
    assert engine.color_for(features_by_name["Wake"], "overview") == "#430400ff"
    assert engine.color_for(features_by_name["Orange"], "overview") == "#fde092ff"
    assert engine.color_for(features_by_name["Wake"], "forsale_backlog") == "#980045ff"


def test_unknown_lens_falls_back_to_default(engine, features_by_name, loguru_capture):
    wake = features_by_name["Wake"]
    assert engine.color_for(wake, "bogus") == engine.color_for(wake, "overview")
    assert engine.legend_for("bogus").lens_id == "overview"
    assert "Unknown lens 'bogus'" in loguru_capture.getvalue()


def test_legend_and_map_agree(engine, features_by_name):
    legend = engine.legend_for("overview")
    classification = engine.classification_for("overview")
    for feature in features_by_name.values():
        class_index = engine.class_index_for(feature, "overview")
        assert engine.color_for(feature, "overview") == legend.entries[class_index].color
        assert classification.colors[class_index] == legend.entries[class_index].color


def test_classification_is_cached(engine):
    first = engine.classification_for("overview")
    assert engine.classification_for("overview") is first
    assert first.value_count == 5
    assert first.boundaries.values == (4000, 10000, 16000, 34000)


def test_quantile_lens_over_sample(quantile_registry, sample_features, features_by_name):
    engine = ChoroplethEngine(quantile_registry, sample_features)
    classification = engine.classification_for("per_capita")

    assert classification.boundaries.values == (27.6, 27.6, 47.1, 47.1)
    assert classification.value_count == 3
    assert engine.class_index_for(features_by_name["Wake"], "per_capita") == 0
    assert engine.class_index_for(features_by_name["Durham"], "per_capita") == 2
    assert engine.class_index_for(features_by_name["Mecklenburg"], "per_capita") == 4
    assert engine.class_index_for(features_by_name["Orange"], "per_capita") == 0


def test_quantile_lens_without_data(quantile_registry, loguru_capture):
    engine = ChoroplethEngine(quantile_registry, [])
    legend = engine.legend_for("per_capita")

    assert not legend.has_data
    assert len(legend.entries) == 1
    assert legend.entries[0].color == "#e7f2ffff"
    assert engine.color_for({"shortage_per_1000_2029": "50"}, "per_capita") == "#e7f2ffff"
    assert "has no data" in loguru_capture.getvalue()


def test_fixed_lens_ignores_empty_dataset(registry):
    engine = ChoroplethEngine(registry, [])
    legend = engine.legend_for("overview")
    assert legend.has_data
    assert len(legend.entries) == 5


def test_details_for(engine, features_by_name):
    content = engine.details_for(features_by_name["Durham"], "forsale_backlog")
    assert content.title == "Durham County"
    assert content.lines[-1].formatted_value == "13.1%"


def test_from_config_uses_labels(sample_features):
    app_config = AppConfig(
        map={
            "unknown_county_label": "Unmapped area",
            "no_data_label": "Nothing to show",
            "lens_overrides": {"overview": {"classification": {"kind": "quantile"}}},
        }
    )
    engine = ChoroplethEngine.from_config(app_config, [])
    assert engine.details_for({}, "overview").title == "Unmapped area"
    assert engine.legend_for("overview").entries[0].label == "Nothing to show"


def test_find_record(engine):
    assert engine.find_record("wake").name == "Wake"
    assert engine.find_record("Durham County").name == "Durham"
    assert engine.find_record("  MECKLENBURG ").name == "Mecklenburg"
    assert engine.find_record("Nowhere") is None

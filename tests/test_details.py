"""Tests for popup detail content."""

from shortagemap.core.details import build_details


def values(content):
    return [line.formatted_value for line in content.lines]


def test_overview_details(registry, features_by_name):
    content = build_details(registry.get_lens("overview"), features_by_name["Wake"])

    assert content.title == "Wake County"
    assert content.county_name == "Wake"
    assert values(content) == ["34,500", "1,250,000", "20,100", "14,400"]
    assert [line.icon for line in content.lines] == ["🏠", "👥", "📊", "🏡"]


def test_number_or_zero_shows_zero_for_missing(registry, features_by_name):
    content = build_details(registry.get_lens("overview"), features_by_name["Orange"])
    assert values(content) == ["4,000", "155,000", "2,100", "0"]


def test_missing_rates_render_as_not_available(registry, features_by_name):
    content = build_details(registry.get_lens("per_capita"), features_by_name["Orange"])
    assert values(content) == ["155,000", "n/a", "n/a"]


def test_per_thousand_rates(registry, features_by_name):
    content = build_details(registry.get_lens("per_capita"), features_by_name["Durham"])
    assert values(content) == ["340,000", "47.1", "110.3"]


def test_percent_space_fields(registry, features_by_name):
    wake = build_details(registry.get_lens("affordable_rental"), features_by_name["Wake"])
    assert values(wake) == ["20,100", "45.0%"]

    orange = build_details(registry.get_lens("affordable_rental"), features_by_name["Orange"])
    assert values(orange) == ["2,100", "0.0%"]

    durham = build_details(registry.get_lens("forsale_backlog"), features_by_name["Durham"])
    assert values(durham) == ["7,000", "13.1%"]


def test_lines_follow_declared_order(registry, features_by_name):
    lens = registry.get_lens("rental_backlog")
    content = build_details(lens, features_by_name["Mecklenburg"])
    assert [line.label for line in content.lines] == [d.label for d in lens.detail_fields]
    assert values(content) == ["25,000", "30.0%", "70.0%"]


def test_unnamed_county_uses_placeholder(registry, features_by_name):
    content = build_details(registry.get_lens("overview"), features_by_name[None])
    assert content.county_name == "Unknown County"
    assert content.title == "Unknown County"
    assert values(content)[0] == "0"


def test_custom_placeholder_and_plain_mapping(registry):
    content = build_details(
        registry.get_lens("overview"),
        {"housing_shortage": "12,345.5"},
        unknown_county_label="Unnamed",
    )
    assert content.title == "Unnamed"
    assert values(content)[0] == "12,346"


def test_county_field_used_when_name_missing(registry):
    content = build_details(registry.get_lens("overview"), {"county": "Dare"})
    assert content.title == "Dare County"


def test_details_to_dict(registry, features_by_name):
    data = build_details(registry.get_lens("overview"), features_by_name["Wake"]).to_dict()
    assert data["lens_id"] == "overview"
    assert data["lines"][0]["formatted_value"] == "34,500"

"""Tests for palette resolution."""

import pytest
from pydantic import ValidationError

from shortagemap.core.catalog import DEFAULT_PALETTE_ID, PALETTE_DEFINITIONS
from shortagemap.core.palettes import Palette, PaletteResolver


@pytest.fixture
def resolver():
    return PaletteResolver([Palette(**d) for d in PALETTE_DEFINITIONS], DEFAULT_PALETTE_ID)


def test_color_for_each_class(resolver):
    blues = resolver.colors("blues")
    for class_index in range(5):
        assert resolver.color_for("blues", class_index) == blues[class_index]


def test_class_index_is_clamped(resolver):
    assert resolver.color_for("greens", -3) == resolver.color_for("greens", 0)
    assert resolver.color_for("greens", 99) == resolver.color_for("greens", 4)


def test_unknown_palette_falls_back_to_default(resolver, loguru_capture):
    assert resolver.color_for("no-such-palette", 2) == resolver.color_for(DEFAULT_PALETTE_ID, 2)
    assert "Unknown palette 'no-such-palette'" in loguru_capture.getvalue()


def test_missing_color_is_lightest(resolver):
    assert resolver.missing_color("purples") == "#e4dafbff"
    assert resolver.missing_color("purples") == resolver.color_for("purples", 0)


def test_palette_needs_five_hex_colors():
    with pytest.raises(ValidationError):
        Palette(id="short", colors=("#000000", "#111111"))
    with pytest.raises(ValidationError):
        Palette(id="bad", colors=("#000000", "#111111", "red", "#333333", "#444444"))


def test_resolver_requires_registered_default():
    palette = Palette(id="grey", colors=("#eeeeee", "#cccccc", "#999999", "#666666", "#333333"))
    with pytest.raises(KeyError):
        PaletteResolver([palette], "missing")

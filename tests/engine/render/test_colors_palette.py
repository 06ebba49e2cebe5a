"""
Unit Tests for Colour Parsing and Palette Resolution
"""

import pytest

from scrapbook_toolkit.engine.registry import Palette
from scrapbook_toolkit.engine.render.colors import (
    is_transparent,
    parse_color,
    resolve_rgba,
    to_hex,
    with_opacity,
)
from scrapbook_toolkit.engine.render.palette import get_palette_part_color, resolve_color


class TestParseColor:
    """Tests for parse_color()."""

    def test_hex_and_rgba_strings(self):
        assert parse_color("#f00") == (255, 0, 0, 255)
        assert parse_color("rgba(0, 0, 255, 0.5)") == (0, 0, 255, 128)
        assert parse_color("white") == (255, 255, 255, 255)

    def test_transparent_and_none_then_zero_alpha(self):
        assert parse_color("transparent") == (0, 0, 0, 0)
        assert parse_color(None) == (0, 0, 0, 0)
        assert is_transparent("  ")

    def test_unknown_colour_then_black_not_error(self, caplog):
        assert parse_color("sparkly") == (0, 0, 0, 255)
        assert "sparkly" in caplog.text

    def test_opacity_then_alpha_scaled_and_clamped(self):
        assert with_opacity((10, 20, 30, 200), 0.5) == (10, 20, 30, 100)
        assert with_opacity((10, 20, 30, 200), 3.0) == (10, 20, 30, 200)
        assert resolve_rgba("#000000", 0.0)[3] == 0

    def test_to_hex(self):
        assert to_hex((31, 41, 55, 255)) == "#1f2937"


class TestPaletteParts:
    """Tests for get_palette_part_color() / resolve_color()."""

    def test_default_part_table_then_slot_colour(self, test_palette):
        assert get_palette_part_color(test_palette, "shapeStroke") == "#112233"
        assert get_palette_part_color(test_palette, "freeTextBorder") == "#445566"
        assert get_palette_part_color(test_palette, "freeTextRuledLines") == "#778899"

    def test_palette_parts_table_then_overrides_default(self):
        palette = Palette(
            id="sunset",
            name="Sunset",
            colors={"primary": "#111111", "accent": "#ff8800"},
            parts={"shapeStroke": "accent"},
        )

        assert get_palette_part_color(palette, "shapeStroke") == "#ff8800"
        assert get_palette_part_color(palette, "lineStroke") == "#111111"

    def test_missing_slot_then_fallback_slot_then_default(self):
        palette = Palette(id="thin", name="Thin", colors={"primary": "#111111"})

        assert get_palette_part_color(palette, "qnaBackground", "primary") == "#111111"
        assert get_palette_part_color(palette, "qnaBackground", None, "#abcdef") == "#abcdef"

    def test_no_palette_then_fallback_colour(self):
        assert get_palette_part_color(None, "shapeStroke", "primary", "#000000") == "#000000"

    def test_explicit_colour_then_palette_ignored(self, test_palette):
        assert resolve_color("#ff0000", test_palette, "shapeStroke") == "#ff0000"
        assert resolve_color(None, test_palette, "shapeStroke") == "#112233"

    @pytest.mark.parametrize("part", ["unknownPart", ""])
    def test_unknown_part_then_fallback_slot(self, test_palette, part):
        assert get_palette_part_color(test_palette, part, "secondary") == "#445566"

"""
Unit Tests for RenderConfig
"""

import pytest

from scrapbook_toolkit.engine.config import DEFAULT_PALETTE_ID, DEFAULT_THEME, RenderConfig


class TestRenderConfig:
    def test_defaults_then_css_pixels(self):
        config = RenderConfig()

        assert config.dpi == 96
        assert config.points_per_pixel == pytest.approx(0.75)
        assert config.default_theme == DEFAULT_THEME
        assert config.default_palette_id == DEFAULT_PALETTE_ID

    @pytest.mark.parametrize("field, value", [("dpi", 0), ("dpi", -72), ("raster_scale", 0)])
    def test_non_positive_values_then_raises(self, field, value):
        with pytest.raises(ValueError):
            RenderConfig(**{field: value})

    def test_missing_fonts_dir_then_raises(self, tmp_path):
        with pytest.raises(ValueError, match="fonts_dir"):
            RenderConfig(fonts_dir=tmp_path / "missing")

    def test_existing_fonts_dir_then_accepted(self, tmp_path):
        assert RenderConfig(fonts_dir=tmp_path).fonts_dir == tmp_path

    def test_frozen_then_cannot_assign(self):
        config = RenderConfig()

        with pytest.raises(AttributeError):
            config.dpi = 300

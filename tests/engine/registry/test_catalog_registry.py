"""
Unit Tests for the Palette/Theme/Pattern Catalogue
"""

import json

import pytest

from scrapbook_toolkit.core.models.page import PatternKind
from scrapbook_toolkit.engine.registry import CatalogRegistry, Palette
from scrapbook_toolkit.engine.themes import THEMES


class TestPackagedCatalogue:
    """Tests for CatalogRegistry.load_default()."""

    def test_every_theme_has_an_entry_with_a_known_palette(self):
        registry = CatalogRegistry.load_default()

        for theme_id in THEMES:
            entry = registry.theme(theme_id)
            assert entry is not None, theme_id
            assert registry.palette(entry.palette_id) is not None, theme_id

    def test_palettes_carry_all_role_slots(self):
        slots = {"primary", "secondary", "accent", "background", "surface", "text"}

        for palette in CatalogRegistry.load_default().palettes.values():
            assert slots <= set(palette.colors), palette.id

    def test_load_default_then_cached(self):
        assert CatalogRegistry.load_default() is CatalogRegistry.load_default()

    def test_pattern_ids_and_aliases_parse_to_same_kind(self):
        for entry in CatalogRegistry.load_default().patterns.values():
            kind = PatternKind.parse(entry.id)
            assert kind.value == entry.id
            for alias in entry.aliases:
                assert PatternKind.parse(alias) is kind, alias


class TestFromDirectory:
    def test_custom_catalogue(self, tmp_path):
        (tmp_path / "color-palettes.json").write_text(json.dumps({
            "palettes": [{"id": "mono", "name": "Mono", "colors": {"primary": "#000000"}}],
        }))
        (tmp_path / "themes.json").write_text(json.dumps({
            "ink": {"name": "Ink", "palette": "mono", "elementDefaults": {"shape": {"strokeWidth": 1}}},
        }))

        registry = CatalogRegistry.from_directory(tmp_path)

        assert registry.palette_for_theme("ink").id == "mono"
        assert not hasattr(registry.theme("ink"), "element_defaults")
        assert registry.patterns == {}

    def test_missing_files_then_empty_sections(self, tmp_path):
        registry = CatalogRegistry.from_directory(tmp_path)

        assert registry.palettes == {}
        assert registry.themes == {}

    def test_malformed_json_then_raises(self, tmp_path):
        (tmp_path / "themes.json").write_text("{not json")

        with pytest.raises(json.JSONDecodeError):
            CatalogRegistry.from_directory(tmp_path)


class TestLookups:
    def test_none_ids_then_none(self, empty_registry):
        assert empty_registry.palette(None) is None
        assert empty_registry.theme(None) is None
        assert empty_registry.palette_for_theme("default") is None

    def test_palette_from_dict_then_read_only(self):
        palette = Palette.from_dict({"id": "p", "colors": {"primary": "#111111"}})

        assert palette.name == "p"
        with pytest.raises(TypeError):
            palette.colors["primary"] = "#222222"

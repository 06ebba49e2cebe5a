"""
Module: engine.registry.registry

Purpose:
    Read-only catalogue of colour palettes, themes and background
    patterns. Loaded once per process from the packaged JSON files (or
    built explicitly in tests) and never mutated afterwards; every
    mapping is exposed as a MappingProxyType.

Key Classes:
    - Palette: Named role -> colour mapping with optional parts table
    - ThemeEntry: Theme name, description and palette id
    - PatternEntry: Background pattern id and accepted aliases
    - CatalogRegistry: Immutable lookup over all three

Key Functions:
    - CatalogRegistry.load_default(): Cached packaged catalogue
    - CatalogRegistry.from_directory(): Catalogue from a JSON directory

Dependencies:
    - json, functools.lru_cache (std)

Used By:
    - engine.render (palette fallback chain)
    - engine.compositor
    - scripts/render_page.py
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from types import MappingProxyType
from typing import Any, Iterable, Mapping, Optional, Tuple

logger = logging.getLogger(__name__)

DATA_DIR = Path(__file__).parent / "data"
PALETTES_FILE = "color-palettes.json"
THEMES_FILE = "themes.json"
PATTERNS_FILE = "patterns.json"


@dataclass(frozen=True)
class Palette:
    """
    Colour palette.

    Attributes:
        id: Palette identifier
        name: Display name
        colors: Role slot -> colour (primary, secondary, accent,
            background, surface, text)
        parts: Optional part -> slot overrides of the default table
    """
    id: str
    name: str
    colors: Mapping[str, str]
    parts: Optional[Mapping[str, str]] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Palette":
        parts = data.get("parts")
        return cls(
            id=data["id"],
            name=data.get("name", data["id"]),
            colors=MappingProxyType(dict(data.get("colors", {}))),
            parts=MappingProxyType(dict(parts)) if parts else None,
        )


@dataclass(frozen=True)
class ThemeEntry:
    """Theme metadata from the catalogue."""
    id: str
    name: str
    description: str = ""
    palette_id: Optional[str] = None

    @classmethod
    def from_dict(cls, theme_id: str, data: Mapping[str, Any]) -> "ThemeEntry":
        return cls(
            id=theme_id,
            name=data.get("name", theme_id),
            description=data.get("description") or "",
            palette_id=data.get("palette"),
        )


@dataclass(frozen=True)
class PatternEntry:
    """Background pattern catalogue entry."""
    id: str
    name: str
    aliases: Tuple[str, ...] = ()


class CatalogRegistry:
    """
    Immutable catalogue of palettes, themes and patterns.

    Example:
        >>> registry = CatalogRegistry(palettes=[Palette("p", "P", {"primary": "#000"})])
        >>> registry.palette("p").colors["primary"]
        '#000'
    """

    def __init__(
        self,
        palettes: Iterable[Palette] = (),
        themes: Iterable[ThemeEntry] = (),
        patterns: Iterable[PatternEntry] = (),
    ):
        self._palettes = MappingProxyType({p.id: p for p in palettes})
        self._themes = MappingProxyType({t.id: t for t in themes})
        self._patterns = MappingProxyType({p.id: p for p in patterns})

    @classmethod
    def from_directory(cls, directory: Path) -> "CatalogRegistry":
        """
        Load a catalogue from `directory`.

        Missing files yield empty sections; malformed JSON raises.

        Raises:
            json.JSONDecodeError: If a catalogue file is not valid JSON
        """
        directory = Path(directory)

        def read(name: str) -> Any:
            path = directory / name
            if not path.exists():
                logger.warning(f"Catalogue file missing: {path}")
                return {}
            with open(path, "r", encoding="utf-8") as f:
                return json.load(f)

        palettes = [Palette.from_dict(item) for item in read(PALETTES_FILE).get("palettes", [])]
        themes = [ThemeEntry.from_dict(key, value) for key, value in read(THEMES_FILE).items()]
        patterns = [
            PatternEntry(id=item["id"], name=item.get("name", item["id"]), aliases=tuple(item.get("aliases", ())))
            for item in read(PATTERNS_FILE).get("patterns", [])
        ]
        logger.debug(
            f"Loaded catalogue from {directory}: {len(palettes)} palettes, "
            f"{len(themes)} themes, {len(patterns)} patterns"
        )
        return cls(palettes=palettes, themes=themes, patterns=patterns)

    @staticmethod
    @lru_cache(maxsize=1)
    def load_default() -> "CatalogRegistry":
        """Packaged catalogue, loaded once per process."""
        return CatalogRegistry.from_directory(DATA_DIR)

    @property
    def palettes(self) -> Mapping[str, Palette]:
        return self._palettes

    @property
    def themes(self) -> Mapping[str, ThemeEntry]:
        return self._themes

    @property
    def patterns(self) -> Mapping[str, PatternEntry]:
        return self._patterns

    def palette(self, palette_id: Optional[str]) -> Optional[Palette]:
        if palette_id is None:
            return None
        return self._palettes.get(palette_id)

    def theme(self, theme_id: Optional[str]) -> Optional[ThemeEntry]:
        if theme_id is None:
            return None
        return self._themes.get(theme_id)

    def palette_for_theme(self, theme_id: Optional[str]) -> Optional[Palette]:
        """Palette a theme names, if both exist."""
        entry = self.theme(theme_id)
        return self.palette(entry.palette_id) if entry else None


"""
Catalogue Registry Package

Read-only palettes, themes and patterns loaded once per process.
"""

from .registry import CatalogRegistry, Palette, ThemeEntry, PatternEntry

__all__ = ["CatalogRegistry", "Palette", "ThemeEntry", "PatternEntry"]

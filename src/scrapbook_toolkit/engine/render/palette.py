"""
Module: engine.render.palette

Purpose:
    Palette fallback chain. An explicit element colour always wins;
    otherwise the palette part's slot is used, then an explicit fallback
    slot, then a fixed default colour.

Key Functions:
    - get_palette_part_color(): Palette part -> colour
    - resolve_color(): Explicit colour or the palette chain

Used By:
    - engine.render.elements
    - engine.render.background
    - engine.render.ruled_lines
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Optional

from scrapbook_toolkit.engine.registry import Palette

# Part name -> palette slot when a palette carries no parts table
DEFAULT_PALETTE_PARTS = MappingProxyType({
    "pageBackground": "surface",
    "pagePatternForeground": "primary",
    "pagePatternBackground": "background",
    "qnaBorder": "primary",
    "qnaBackground": "surface",
    "qnaQuestionText": "text",
    "qnaQuestionBackground": "surface",
    "qnaQuestionBorder": "secondary",
    "qnaAnswerText": "text",
    "qnaAnswerBackground": "surface",
    "qnaAnswerBorder": "primary",
    "qnaAnswerRuledLines": "primary",
    "freeTextText": "text",
    "freeTextBorder": "secondary",
    "freeTextBackground": "surface",
    "freeTextRuledLines": "accent",
    "shapeStroke": "primary",
    "shapeFill": "surface",
    "lineStroke": "primary",
})


def get_palette_part_color(
    palette: Optional[Palette],
    part: str,
    fallback_slot: Optional[str] = None,
    fallback_color: Optional[str] = None,
) -> Optional[str]:
    """
    Colour for a palette part.

    A palette's own parts table replaces the default table entirely for
    the parts it names; parts it omits use the default mapping.

    Example:
        >>> p = Palette("p", "P", {"primary": "#111111"})
        >>> get_palette_part_color(p, "shapeStroke"), get_palette_part_color(p, "shapeFill", fallback_color="#fff")
        ('#111111', '#fff')
    """
    if palette is None or not palette.colors:
        return fallback_color
    parts = palette.parts or {}
    slot = parts.get(part, DEFAULT_PALETTE_PARTS.get(part))
    if slot and palette.colors.get(slot):
        return palette.colors[slot]
    if fallback_slot and palette.colors.get(fallback_slot):
        return palette.colors[fallback_slot]
    return fallback_color


def resolve_color(
    explicit: Optional[str],
    palette: Optional[Palette],
    part: str,
    fallback_slot: Optional[str] = None,
    default: Optional[str] = None,
) -> Optional[str]:
    """Element colour -> palette part -> fallback slot -> default."""
    if explicit is not None:
        return explicit
    return get_palette_part_color(palette, part, fallback_slot, default)

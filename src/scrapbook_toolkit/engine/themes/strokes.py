"""
Module: engine.themes.strokes

Purpose:
    Convert stroke widths between the common 1-100 editor scale and the
    actual width each theme draws with. 0 always means "no stroke".

Key Functions:
    - common_to_actual_stroke_width(): Common scale -> theme width
    - actual_to_common_stroke_width(): Theme width -> common scale

Used By:
    - engine.themes.engine
    - engine.render.elements
"""

from __future__ import annotations

from types import MappingProxyType
from typing import NamedTuple


class StrokeRange(NamedTuple):
    minimum: float
    maximum: float


THEME_STROKE_RANGES = MappingProxyType({
    "default": StrokeRange(1, 100),
    "rough": StrokeRange(1, 100),
    "glow": StrokeRange(1, 50),
    "candy": StrokeRange(12, 50),
    "zigzag": StrokeRange(3, 40),
    "wobbly": StrokeRange(1, 50),
    "sketchy": StrokeRange(1, 100),
    "dashed": StrokeRange(1, 100),
})


def _range_for(theme: str) -> StrokeRange:
    return THEME_STROKE_RANGES.get(theme, THEME_STROKE_RANGES["default"])


def common_to_actual_stroke_width(common_width: float, theme: str = "default") -> float:
    """
    Map a common-scale width (1-100, clamped) onto the theme's range.

    Example:
        >>> common_to_actual_stroke_width(100, "candy")
        50.0
    """
    if common_width == 0:
        return 0.0
    stroke_range = _range_for(theme)
    normalized = max(1.0, min(100.0, float(common_width)))
    return stroke_range.minimum + (normalized - 1) / 99 * (stroke_range.maximum - stroke_range.minimum)


def actual_to_common_stroke_width(actual_width: float, theme: str = "default") -> int:
    """Map a theme width back onto the common 1-100 scale."""
    if actual_width == 0:
        return 0
    stroke_range = _range_for(theme)
    if actual_width < stroke_range.minimum:
        return 1
    if actual_width > stroke_range.maximum:
        return 100
    span = stroke_range.maximum - stroke_range.minimum
    return round(1 + (actual_width - stroke_range.minimum) / span * 99)

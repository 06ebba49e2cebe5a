"""
Module: theme

Purpose:
    Output of the theme/sketch engine: a vector path plus the paint
    properties a surface needs to draw it.

Key Classes:
    - ThemeResult: Path string + stroke/fill/dash/shadow
    - ShadowParams: Drop-shadow description
    - GlowLayers: Wide translucent under-strokes used by the glow theme

Dependencies:
    - dataclasses (std)

Used By:
    - engine.themes.engine
    - engine.render.elements
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple


@dataclass(frozen=True, slots=True)
class ShadowParams:
    """Drop shadow painted beneath a path."""
    color: str = "#000000"
    blur: float = 4.0
    offset_x: float = 2.0
    offset_y: float = 2.0
    opacity: float = 0.3


@dataclass(frozen=True, slots=True)
class GlowLayers:
    """Wide, translucent copies of the stroke painted beneath it."""
    width_multiplier: float = 2.5
    opacity: float = 0.25


@dataclass(frozen=True, slots=True)
class ThemeResult:
    """
    Themed path with paint properties.

    A `None` stroke or fill means "do not paint". Produced fresh on every
    call; the seed-derived randomness must be recomputed in each
    environment rather than shared.

    Attributes:
        path: SVG path data in element-local coordinates
        stroke: Stroke colour or None
        stroke_width: Stroke width in page pixels
        fill: Fill colour or None
        fill_path: Outline to fill instead of `path` (sketched themes
            whose stroke path is not a clean outline)
        opacity: Path opacity
        dash: Dash pattern (empty for solid)
        line_cap: butt | round | square
        line_join: miter | round | bevel
        shadow: Optional drop shadow
        glow: Optional glow under-strokes
        theme: Theme that produced the path
        fallback: True when the smooth fallback formula replaced the
            themed path after a generation failure
    """
    path: str
    stroke: Optional[str]
    stroke_width: float
    fill: Optional[str] = None
    opacity: float = 1.0
    dash: Tuple[float, ...] = ()
    line_cap: str = "butt"
    line_join: str = "miter"
    fill_path: Optional[str] = None
    shadow: Optional[ShadowParams] = None
    glow: Optional[GlowLayers] = None
    theme: str = "default"
    fallback: bool = False

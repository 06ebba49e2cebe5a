"""
Module: engine.render.paint

Purpose:
    Emit the paint calls for one ThemeResult: glow under-strokes, the
    clean fill outline of sketched shapes, then the themed path itself.

Key Functions:
    - paint_theme_result(): ThemeResult -> surface paint calls

Used By:
    - engine.render.elements
    - engine.render.ruled_lines
"""

from __future__ import annotations

from scrapbook_toolkit.core.models.theme import ThemeResult
from scrapbook_toolkit.engine.surfaces.base import Surface


def paint_theme_result(surface: Surface, result: ThemeResult, opacity: float = 1.0) -> None:
    """Paint a themed path in the current transform."""
    if not result.path:
        return
    alpha = result.opacity * opacity

    if result.glow is not None and result.stroke is not None:
        surface.draw_path(
            result.path,
            stroke=result.stroke,
            stroke_width=result.stroke_width * result.glow.width_multiplier,
            opacity=alpha * result.glow.opacity,
            line_cap="round",
            line_join="round",
        )

    fill = result.fill
    if result.fill_path and fill is not None:
        surface.draw_path(result.fill_path, fill=fill, opacity=alpha)
        fill = None

    if result.stroke is None and fill is None:
        return
    surface.draw_path(
        result.path,
        stroke=result.stroke,
        stroke_width=result.stroke_width,
        fill=fill,
        opacity=alpha,
        dash=result.dash,
        line_cap=result.line_cap,
        line_join=result.line_join,
        shadow=result.shadow,
    )

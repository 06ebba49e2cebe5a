"""
Module: engine.render.ruled_lines

Purpose:
    Baseline guide lines drawn beneath text lines. One line per laid-out
    line position inside the target area; below the last text line the
    ruling continues at the last line height to the bottom of the area,
    like a notebook page.

    The "rough" ruled-line theme sketches each line with the seeded
    generator, seeded by the element seed plus the line's y so every
    line differs but repeats identically on every render. Other themes
    reuse the theme engine with a line shape.

Key Functions:
    - ruled_line_ys(): Vertical positions to rule
    - render_ruled_lines(): Paint the lines onto a surface

Dependencies:
    - engine.themes: Seeded generator and themed paths

Used By:
    - engine.render.elements (free text and QnA)
"""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence

from scrapbook_toolkit.core.models.elements import RuledLinesConfig, ShapeKind
from scrapbook_toolkit.core.models.layout import Area, LinePosition
from scrapbook_toolkit.engine.surfaces.base import Surface
from scrapbook_toolkit.engine.themes import RoughGenerator, ShapeSpec, generate_themed_path, seed_from_id
from scrapbook_toolkit.engine.themes.engine import GeneratorFactory, normalize_theme

from .paint import paint_theme_result

logger = logging.getLogger(__name__)

DEFAULT_RULED_LINE_COLOR = "#1f2937"
RULED_LINE_ROUGHNESS = 2.0
# Lines closer than this to the bottom of the area are not drawn
BOTTOM_CLEARANCE = 10.0
MAX_RULED_LINES = 1000


def ruled_line_ys(positions: Sequence[LinePosition], area: Area) -> List[float]:
    """
    Y positions of the ruled lines for an area.

    Example:
        >>> style = RichTextStyle(font_size=10)
        >>> ruled_line_ys([LinePosition(20, 12, style)], Area(0, 0, 100, 60))
        [20, 32.0, 44.0]
    """
    limit = area.bottom - BOTTOM_CLEARANCE
    ys = [p.y for p in positions if area.y <= p.y < limit]
    if not positions:
        return ys
    step = positions[-1].line_height
    if step <= 0:
        return ys
    y = positions[-1].y + step
    while y < limit and len(ys) < MAX_RULED_LINES:
        if y >= area.y:
            ys.append(y)
        y += step
    return ys


def render_ruled_lines(
    surface: Surface,
    element_id: str,
    positions: Sequence[LinePosition],
    config: RuledLinesConfig,
    area: Area,
    *,
    color: Optional[str] = None,
    generator_factory: GeneratorFactory = RoughGenerator,
) -> int:
    """
    Paint ruled lines in element-local coordinates.

    `enabled` is read before anything else; a disabled configuration
    paints nothing. Sketch failures fall back to a straight line.

    Returns:
        Number of lines painted
    """
    if not config.enabled:
        return 0
    stroke = color or config.color or DEFAULT_RULED_LINE_COLOR
    theme = normalize_theme(config.theme)
    x1, x2 = area.x, area.right
    ys = ruled_line_ys(positions, area)
    seed = seed_from_id(element_id)

    for index, y in enumerate(ys):
        if theme == "rough":
            try:
                generator = generator_factory(seed + round(y), roughness=RULED_LINE_ROUGHNESS)
                path = generator.line(x1, y, x2, y)
                surface.draw_path(path, stroke=stroke, stroke_width=config.width, opacity=config.opacity)
            except Exception as e:
                logger.debug(f"Sketched ruled line failed for {element_id}, drawing straight: {e}")
                surface.draw_polyline([(x1, y), (x2, y)], stroke, config.width, config.opacity)
            continue

        shape = ShapeSpec(
            id=f"{element_id}-ruled-{index}",
            kind=ShapeKind.LINE,
            width=x2 - x1,
            height=0.0,
            stroke=stroke,
            stroke_width=config.width,
        )
        surface.push_transform(x1, y)
        paint_theme_result(surface, generate_themed_path(shape, theme, generator_factory=generator_factory), config.opacity)
        surface.pop_transform()

    logger.debug(f"Ruled {len(ys)} lines for {element_id}")
    return len(ys)

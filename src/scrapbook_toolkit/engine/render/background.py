"""
Module: engine.render.background

Purpose:
    Paints the page background beneath every element: a solid colour, a
    repeating procedural pattern over an optional base colour, or an
    image with a fit mode.

    `enabled` is the first and, when False, the only field read.

Key Functions:
    - build_pattern_tile(): Pattern id -> PatternTile

Key Classes:
    - BackgroundRenderer: BackgroundSpec -> surface paint calls

Dependencies:
    - engine.images: Background image loading
    - engine.render.palette: pageBackground / pagePatternForeground

Used By:
    - engine.compositor
"""

from __future__ import annotations

import logging
import math
from typing import List, Optional

from PIL import Image

from scrapbook_toolkit.core.models.page import BackgroundKind, BackgroundSpec, ImageFit, PatternKind
from scrapbook_toolkit.engine.errors import ImageLoadError
from scrapbook_toolkit.engine.images.provider import ImageProvider
from scrapbook_toolkit.engine.registry import Palette
from scrapbook_toolkit.engine.surfaces.base import PatternTile, Surface, TileShape
from scrapbook_toolkit.engine.themes.svgpath import PathBuilder

from .colors import is_transparent
from .crop import calculate_crop
from .palette import get_palette_part_color, resolve_color

logger = logging.getLogger(__name__)

BASE_TILE_SIZE = 20.0
DEFAULT_PATTERN_COLOR = "#666666"
DEFAULT_PAGE_COLOR = "#ffffff"


# ─────────────────────────────────────────────────────────────────────────────
# Pattern tiles
# ─────────────────────────────────────────────────────────────────────────────

def build_pattern_tile(pattern: PatternKind, color: str, size: float = 1.0, stroke_width: float = 1.0) -> PatternTile:
    """
    Build one tile of a procedural pattern.

    The tile edge is 20 x size page pixels.

    Example:
        >>> build_pattern_tile(PatternKind.GRID, "#000", 1.0).shapes[0].path
        'M 0 0 L 20 0 M 0 0 L 0 20'
    """
    t = BASE_TILE_SIZE * max(size, 0.05)
    if pattern is PatternKind.DOTS:
        r = t * 0.1
        c = t / 2
        dot = (
            PathBuilder()
            .move_to(c + r, c)
            .arc_to(r, r, 0, 1, 1, c - r, c)
            .arc_to(r, r, 0, 1, 1, c + r, c)
            .close()
            .build()
        )
        return PatternTile(pattern.value, t, (TileShape(path=dot, fill=color),))

    builder = PathBuilder()
    width = stroke_width
    if pattern is PatternKind.GRID:
        builder.move_to(0, 0).line_to(t, 0).move_to(0, 0).line_to(0, t)
    elif pattern is PatternKind.DIAGONAL_LINES:
        builder.move_to(0, t).line_to(t, 0)
    elif pattern is PatternKind.CROSS_HATCH:
        builder.move_to(0, t).line_to(t, 0).move_to(0, 0).line_to(t, t)
    elif pattern is PatternKind.WAVES:
        builder.move_to(0, t / 2).quad_to(t / 4, 0, t / 2, t / 2).quad_to(3 * t / 4, t, t, t / 2)
        width = stroke_width * 2
    elif pattern is PatternKind.HEXAGONS:
        radius = t * 0.3
        points = [
            (t / 2 + radius * math.cos(i * math.pi / 3), t / 2 + radius * math.sin(i * math.pi / 3))
            for i in range(6)
        ]
        builder.polyline(points, closed=True)
    else:
        raise ValueError(f"Unknown pattern: {pattern!r}")
    return PatternTile(pattern.value, t, (TileShape(path=builder.build(), stroke=color, stroke_width=width),))


# ─────────────────────────────────────────────────────────────────────────────
# Renderer
# ─────────────────────────────────────────────────────────────────────────────

class BackgroundRenderer:
    """
    Paints page backgrounds.

    Args:
        images: Provider for background images (image kind is reported
            as a load failure when None)
    """

    def __init__(self, images: Optional[ImageProvider] = None):
        self.images = images

    def render(
        self,
        background: BackgroundSpec,
        surface: Surface,
        width: float,
        height: float,
        palette: Optional[Palette] = None,
    ) -> List[str]:
        """
        Paint `background` over the page area.

        Returns:
            Diagnostics for recovered failures (missing images, unknown
            patterns)
        """
        if not background.enabled:
            logger.debug("Background disabled")
            return []

        if background.kind is BackgroundKind.COLOR:
            color = resolve_color(background.color, palette, "pageBackground", "background", DEFAULT_PAGE_COLOR)
            surface.fill_rect(0, 0, width, height, color, background.opacity)
            return []
        if background.kind is BackgroundKind.PATTERN:
            return self._render_pattern(background, surface, width, height, palette)
        return self._render_image(background, surface, width, height, palette)

    def _render_pattern(self, background, surface, width, height, palette) -> List[str]:
        if background.background_color_enabled:
            base = resolve_color(background.color, palette, "pageBackground", "background", DEFAULT_PAGE_COLOR)
            if not is_transparent(base):
                surface.fill_rect(0, 0, width, height, base, background.opacity)

        if background.pattern is None:
            surface.fill_rect(0, 0, width, height, DEFAULT_PAGE_COLOR)
            return ["Pattern background without a pattern id; painted white"]

        color = resolve_color(background.pattern_color, palette, "pagePatternForeground", None, DEFAULT_PATTERN_COLOR)
        tile = build_pattern_tile(background.pattern, color, background.pattern_size, background.pattern_stroke_width)
        surface.fill_pattern(tile, 0, 0, width, height, background.pattern_opacity)
        return []

    def _render_image(self, background, surface, width, height, palette) -> List[str]:
        palette_color = get_palette_part_color(palette, "pageBackground", "background", DEFAULT_PAGE_COLOR)
        painted_base = True
        if background.background_color_enabled:
            surface.fill_rect(0, 0, width, height, background.color or palette_color or DEFAULT_PAGE_COLOR)
        elif palette is not None and palette_color and palette_color.lower() != DEFAULT_PAGE_COLOR:
            surface.fill_rect(0, 0, width, height, palette_color)
        else:
            painted_base = False

        if not background.image_src:
            return []
        try:
            if self.images is None:
                raise ImageLoadError(background.image_src, "no image provider")
            image = self.images.load(background.image_src)
        except ImageLoadError as e:
            logger.warning(f"Background image failed: {e}")
            if not painted_base:
                surface.fill_rect(0, 0, width, height, DEFAULT_PAGE_COLOR)
            return [str(e)]

        self._paint_image(image, background, surface, width, height)
        return []

    @staticmethod
    def _paint_image(image: Image.Image, background: BackgroundSpec, surface: Surface,
                     width: float, height: float) -> None:
        fit = background.image_fit
        opacity = background.opacity
        if fit is ImageFit.STRETCH:
            surface.draw_image(image, 0, 0, width, height, opacity)
        elif fit is ImageFit.CONTAIN:
            image_aspect = image.width / image.height
            if image_aspect > width / height:
                new_w, new_h = width, width / image_aspect
            else:
                new_w, new_h = height * image_aspect, height
            position = background.image_position
            x = width - new_w if position in ("top-right", "bottom-right") else 0.0
            y = height - new_h if position in ("bottom-left", "bottom-right") else 0.0
            if position == "center":
                x, y = (width - new_w) / 2, (height - new_h) / 2
            surface.draw_image(image, x, y, new_w, new_h, opacity)
        elif fit is ImageFit.REPEAT:
            tile_w, tile_h = float(image.width), float(image.height)
            for row in range(int(height // tile_h) + 1):
                for column in range(int(width // tile_w) + 1):
                    x, y = column * tile_w, row * tile_h
                    # Edge tiles are cropped to the page
                    visible_w, visible_h = min(tile_w, width - x), min(tile_h, height - y)
                    if visible_w <= 0 or visible_h <= 0:
                        continue
                    piece = image.crop((0, 0, int(math.ceil(visible_w)), int(math.ceil(visible_h))))
                    surface.draw_image(piece, x, y, visible_w, visible_h, opacity)
        else:
            crop = calculate_crop(image.size, (width, height), "center-middle")
            surface.draw_image(image.crop(crop.box()), 0, 0, width, height, opacity)

"""
Module: engine.surfaces.raster

Purpose:
    Offscreen bitmap surface built on Pillow. Each paint call is drawn
    into its own transparent layer which is alpha-composited onto the
    page, so element opacity applies to the call as a whole.

    Paths are flattened to polylines (engine.themes.svgpath); fills use
    the even-odd rule; rotated text and images go through an affine
    resample of a locally drawn layer.

Key Classes:
    - RasterSurface: Pillow RGBA page target

Dependencies:
    - PIL (Image, ImageDraw, ImageChops, ImageFilter)
    - engine.themes.svgpath: Flattening and dashing
    - engine.text: Pillow fonts and PillowMeasurer

Used By:
    - engine.compositor (headless rendering)
    - scripts/render_page.py
"""

from __future__ import annotations

import logging
import math
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

from PIL import Image, ImageChops, ImageDraw, ImageFilter

from scrapbook_toolkit.core.models.styles import RichTextStyle
from scrapbook_toolkit.core.models.theme import ShadowParams
from scrapbook_toolkit.engine.render.colors import RGBA, parse_color, resolve_rgba, with_opacity
from scrapbook_toolkit.engine.text.fonts import FontRegistry
from scrapbook_toolkit.engine.text.measure import PillowMeasurer, TextMeasurer
from scrapbook_toolkit.engine.themes.shapes import rounded_rect_path
from scrapbook_toolkit.engine.themes.svgpath import Subpath, dash_polyline, flatten_path

from .base import PatternTile, Point, Surface

logger = logging.getLogger(__name__)

# (a, b, c, d, e, f): x' = a*x + b*y + c, y' = d*x + e*y + f
Matrix = Tuple[float, float, float, float, float, float]


# ─────────────────────────────────────────────────────────────────────────────
# Affine helpers
# ─────────────────────────────────────────────────────────────────────────────

def compose(m: Matrix, n: Matrix) -> Matrix:
    """Matrix applying `n` first, then `m`."""
    return (
        m[0] * n[0] + m[1] * n[3],
        m[0] * n[1] + m[1] * n[4],
        m[0] * n[2] + m[1] * n[5] + m[2],
        m[3] * n[0] + m[4] * n[3],
        m[3] * n[1] + m[4] * n[4],
        m[3] * n[2] + m[4] * n[5] + m[5],
    )


def invert(m: Matrix) -> Matrix:
    det = m[0] * m[4] - m[1] * m[3]
    if det == 0:
        raise ValueError("Singular transform")
    a, b = m[4] / det, -m[1] / det
    d, e = -m[3] / det, m[0] / det
    return (a, b, -(a * m[2] + b * m[5]), d, e, -(d * m[2] + e * m[5]))


def apply(m: Matrix, point: Point) -> Point:
    x, y = point
    return (m[0] * x + m[1] * y + m[2], m[3] * x + m[4] * y + m[5])


def translation(x: float, y: float) -> Matrix:
    return (1.0, 0.0, x, 0.0, 1.0, y)


def rotate_matrix(degrees: float) -> Matrix:
    theta = math.radians(degrees)
    cos_t, sin_t = math.cos(theta), math.sin(theta)
    return (cos_t, -sin_t, 0.0, sin_t, cos_t, 0.0)


def scaling(sx: float, sy: Optional[float] = None) -> Matrix:
    return (sx, 0.0, 0.0, 0.0, sx if sy is None else sy, 0.0)


# ─────────────────────────────────────────────────────────────────────────────
# Surface
# ─────────────────────────────────────────────────────────────────────────────

class RasterSurface(Surface):
    """
    Pillow-backed offscreen page.

    Args:
        scale: Bitmap pixels per page pixel
        background: Colour of a fresh page
        fonts: Font registry shared with the PillowMeasurer

    Example:
        >>> surface = RasterSurface(scale=2.0)
        >>> surface.begin_page(100, 50)
        >>> surface.fill_rect(0, 0, 10, 10, "#ff0000")
        >>> surface.end_page()
        >>> surface.image.size
        (200, 100)
    """

    def __init__(self, scale: float = 1.0, background: str = "#ffffff", fonts: Optional[FontRegistry] = None):
        super().__init__(fonts)
        if scale <= 0:
            raise ValueError(f"scale must be positive: {scale}")
        self.scale = scale
        self.background = background
        self.pages: List[Image.Image] = []
        self._image: Optional[Image.Image] = None
        self._stack: List[Matrix] = []

    @property
    def image(self) -> Image.Image:
        """Current page, or the last finished page."""
        if self._image is not None:
            return self._image
        if self.pages:
            return self.pages[-1]
        raise RuntimeError("No page has been rendered")

    def save(self, path: Path) -> None:
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        self.image.save(path)
        logger.info(f"Saved {self.image.size[0]}x{self.image.size[1]} bitmap to {path}")

    def create_measurer(self) -> TextMeasurer:
        return PillowMeasurer(self.fonts)

    @property
    def _matrix(self) -> Matrix:
        return self._stack[-1]

    @property
    def _device_scale(self) -> float:
        m = self._matrix
        return math.sqrt(abs(m[0] * m[4] - m[1] * m[3]))

    def _require_page(self) -> Image.Image:
        if self._image is None:
            raise RuntimeError("begin_page() has not been called")
        return self._image

    def _new_layer(self) -> Image.Image:
        return Image.new("RGBA", self._require_page().size, (0, 0, 0, 0))

    def _composite(self, layer: Image.Image, opacity: float = 1.0) -> None:
        if opacity <= 0:
            return
        if opacity < 1:
            alpha = layer.getchannel("A").point(lambda v: round(v * opacity))
            layer.putalpha(alpha)
        self._require_page().alpha_composite(layer)

    # Page lifecycle

    def begin_page(self, width: float, height: float) -> None:
        size = (max(1, math.ceil(width * self.scale)), max(1, math.ceil(height * self.scale)))
        self._image = Image.new("RGBA", size, parse_color(self.background))
        self._stack = [scaling(self.scale)]

    def end_page(self) -> None:
        page = self._require_page()
        if len(self._stack) != 1:
            logger.warning(f"Unbalanced transforms at end of page ({len(self._stack) - 1} left)")
        self.pages.append(page)
        self._image = None
        self._stack = []

    def push_transform(self, x: float, y: float, rotation: float = 0.0) -> None:
        matrix = compose(self._matrix, translation(x, y))
        if rotation:
            matrix = compose(matrix, rotate_matrix(rotation))
        self._stack.append(matrix)

    def pop_transform(self) -> None:
        if len(self._stack) <= 1:
            raise RuntimeError("pop_transform() without matching push_transform()")
        self._stack.pop()

    # Geometry

    def _paint_layer(
        self,
        subpaths: Sequence[Subpath],
        matrix: Matrix,
        size: Tuple[int, int],
        *,
        stroke: Optional[RGBA] = None,
        stroke_width: float = 1.0,
        fill: Optional[RGBA] = None,
        dash: Sequence[float] = (),
        line_cap: str = "butt",
    ) -> Image.Image:
        layer = Image.new("RGBA", size, (0, 0, 0, 0))
        if fill is not None and fill[3] > 0:
            closed = [sub for sub in subpaths if len(sub.points) > 2]
            if closed:
                mask = Image.new("L", size, 0)
                for sub in closed:
                    piece = Image.new("L", size, 0)
                    ImageDraw.Draw(piece).polygon([apply(matrix, p) for p in sub.points], fill=255)
                    mask = ImageChops.difference(mask, piece)
                layer.paste(fill, (0, 0, size[0], size[1]), mask)

        if stroke is not None and stroke[3] > 0 and stroke_width > 0:
            scale = math.sqrt(abs(matrix[0] * matrix[4] - matrix[1] * matrix[3]))
            width = max(1, round(stroke_width * scale))
            draw = ImageDraw.Draw(layer)
            for sub in subpaths:
                pieces = dash_polyline(sub.points, dash, sub.closed) if dash else [self._closed(sub)]
                for piece in pieces:
                    points = [apply(matrix, p) for p in piece]
                    if len(points) < 2:
                        continue
                    draw.line(points, fill=stroke, width=width, joint="curve")
                    if line_cap == "round" and width > 2 and not sub.closed:
                        radius = width / 2
                        for cx, cy in (points[0], points[-1]):
                            draw.ellipse((cx - radius, cy - radius, cx + radius, cy + radius), fill=stroke)
        return layer

    @staticmethod
    def _closed(sub: Subpath) -> List[Point]:
        points = list(sub.points)
        if sub.closed and points[0] != points[-1]:
            points.append(points[0])
        return points

    def fill_rect(self, x, y, width, height, color, opacity=1.0, corner_radius=0.0) -> None:
        if width <= 0 or height <= 0:
            return
        if corner_radius > 0:
            subpaths = [
                Subpath([(px + x, py + y) for px, py in sub.points], sub.closed)
                for sub in flatten_path(rounded_rect_path(width, height, corner_radius))
            ]
        else:
            subpaths = [Subpath([(x, y), (x + width, y), (x + width, y + height), (x, y + height)], True)]
        page = self._require_page()
        layer = self._paint_layer(subpaths, self._matrix, page.size, fill=parse_color(color))
        self._composite(layer, opacity)

    def draw_path(
        self,
        path: str,
        *,
        stroke: Optional[str] = None,
        stroke_width: float = 1.0,
        fill: Optional[str] = None,
        opacity: float = 1.0,
        dash: Sequence[float] = (),
        line_cap: str = "butt",
        line_join: str = "miter",
        shadow: Optional[ShadowParams] = None,
    ) -> None:
        if not path:
            return
        subpaths = flatten_path(path)
        if not subpaths:
            return
        page = self._require_page()
        stroke_rgba = parse_color(stroke) if stroke else None
        fill_rgba = parse_color(fill) if fill else None

        if shadow is not None:
            shadow_rgba = with_opacity(parse_color(shadow.color), shadow.opacity)
            scale = self._device_scale
            offset = compose(translation(shadow.offset_x * scale, shadow.offset_y * scale), self._matrix)
            shadow_layer = self._paint_layer(
                subpaths, offset, page.size,
                stroke=shadow_rgba if stroke_rgba else None,
                stroke_width=stroke_width,
                fill=shadow_rgba if fill_rgba else None,
                line_cap=line_cap,
            )
            if shadow.blur > 0:
                shadow_layer = shadow_layer.filter(ImageFilter.GaussianBlur(radius=shadow.blur * scale / 2))
            self._composite(shadow_layer, opacity)

        layer = self._paint_layer(
            subpaths, self._matrix, page.size,
            stroke=stroke_rgba, stroke_width=stroke_width, fill=fill_rgba,
            dash=dash, line_cap=line_cap,
        )
        self._composite(layer, opacity)

    def draw_polyline(self, points: Sequence[Point], color: str, width: float = 1.0,
                      opacity: float = 1.0, dash: Sequence[float] = ()) -> None:
        if len(points) < 2:
            return
        page = self._require_page()
        layer = self._paint_layer(
            [Subpath(list(points), False)], self._matrix, page.size,
            stroke=parse_color(color), stroke_width=width, dash=dash,
        )
        self._composite(layer, opacity)

    # Raster content

    def _paste_local(self, image: Image.Image, x: float, y: float, width: float, height: float,
                     opacity: float = 1.0) -> None:
        """Resample `image`, covering the local box (x, y, width, height), onto the page."""
        page = self._require_page()
        to_image = compose(
            scaling(image.width / width, image.height / height),
            compose(translation(-x, -y), invert(self._matrix)),
        )
        layer = image.convert("RGBA").transform(
            page.size, Image.Transform.AFFINE, to_image, resample=Image.Resampling.BICUBIC,
        )
        self._composite(layer, opacity)

    def draw_text(self, text: str, x: float, y: float, style: RichTextStyle) -> None:
        if not text:
            return
        scale = self._device_scale
        font = self.fonts.pillow_font(style.font_family, style.bold, style.italic, style.font_size * scale)
        color = resolve_rgba(style.color)
        m = self._matrix

        if m[1] == 0 and m[3] == 0 and m[0] > 0 and m[4] > 0:
            layer = self._new_layer()
            ImageDraw.Draw(layer).text(apply(m, (x, y)), text, font=font, fill=color, anchor="ls")
            self._composite(layer, style.opacity)
            return

        left, top, right, bottom = font.getbbox(text, anchor="ls")
        local = Image.new("RGBA", (max(1, math.ceil(right - left)), max(1, math.ceil(bottom - top))), (0, 0, 0, 0))
        ImageDraw.Draw(local).text((-left, -top), text, font=font, fill=color, anchor="ls")
        self._paste_local(
            local,
            x + left / scale,
            y + top / scale,
            local.width / scale,
            local.height / scale,
            style.opacity,
        )

    def draw_image(self, image: Image.Image, x: float, y: float, width: float, height: float,
                   opacity: float = 1.0, corner_radius: float = 0.0) -> None:
        if width <= 0 or height <= 0:
            return
        scale = self._device_scale
        size = (max(1, round(width * scale)), max(1, round(height * scale)))
        prepared = image.convert("RGBA").resize(size, Image.Resampling.LANCZOS)
        if corner_radius > 0:
            mask = Image.new("L", size, 0)
            ImageDraw.Draw(mask).rounded_rectangle(
                (0, 0, size[0] - 1, size[1] - 1), radius=corner_radius * scale, fill=255,
            )
            prepared.putalpha(ImageChops.multiply(prepared.getchannel("A"), mask))
        self._paste_local(prepared, x, y, width, height, opacity)

    def fill_pattern(self, tile: PatternTile, x: float, y: float, width: float, height: float,
                     opacity: float = 1.0) -> None:
        if tile.size <= 0 or width <= 0 or height <= 0:
            return
        scale = self._device_scale
        tile_px = max(1, round(tile.size * scale))
        tile_matrix = scaling(tile_px / tile.size)
        cell = Image.new("RGBA", (tile_px, tile_px), (0, 0, 0, 0))
        for shape in tile.shapes:
            subpaths = flatten_path(shape.path)
            layer = self._paint_layer(
                subpaths, tile_matrix, cell.size,
                stroke=parse_color(shape.stroke) if shape.stroke else None,
                stroke_width=shape.stroke_width,
                fill=parse_color(shape.fill) if shape.fill else None,
            )
            cell.alpha_composite(layer)

        area = (max(1, round(width * scale)), max(1, round(height * scale)))
        tiled = Image.new("RGBA", area, (0, 0, 0, 0))
        for top in range(0, area[1], tile_px):
            for left in range(0, area[0], tile_px):
                tiled.paste(cell, (left, top))
        self._paste_local(tiled, x, y, width, height, opacity)

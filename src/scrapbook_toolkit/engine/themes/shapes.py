"""
Module: engine.themes.shapes

Purpose:
    Smooth path formulas for every shape kind. These are the paths the
    default theme draws and the fallback every other theme degrades to
    when generation fails.

Key Classes:
    - ShapeSpec: Geometry and paint inputs for path generation

Key Functions:
    - generate_default_path(): Smooth path for any ShapeSpec
    - generate_complex_shape_path(): Decorative glyph formulas
    - rounded_rect_path(): Rect outline with quadratic corners

Dependencies:
    - engine.themes.svgpath: PathBuilder, fmt

Used By:
    - engine.themes.engine
    - engine.render.elements (borders, frames)
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Tuple

from scrapbook_toolkit.core.models.elements import ShapeElement, ShapeKind
from scrapbook_toolkit.engine.themes.svgpath import PathBuilder, fmt


@dataclass(frozen=True, slots=True)
class ShapeSpec:
    """
    Inputs for path generation, in element-local coordinates.

    Attributes:
        id: Element id (seed source)
        kind: Shape to draw
        width, height: Box size (a line's end vector)
        stroke: Stroke colour or None for the theme default
        stroke_width: Width on the common 1-100 scale
        fill: Fill colour or None
        corner_radius: Rect corner radius
        polygon_sides: Side count for polygons
        roughness: Sketch roughness for the rough theme
        candy_holed: Candy theme draws hollow circles
        is_border: True for text/QnA borders (tighter zigzags)
    """
    id: str
    kind: ShapeKind
    width: float
    height: float
    stroke: Optional[str] = None
    stroke_width: float = 2.0
    fill: Optional[str] = None
    corner_radius: float = 0.0
    polygon_sides: int = 5
    roughness: float = 1.0
    candy_holed: bool = False
    is_border: bool = False

    def __post_init__(self) -> None:
        if self.polygon_sides < 3:
            raise ValueError(f"polygon_sides must be >= 3: {self.polygon_sides}")

    @classmethod
    def from_element(cls, element: ShapeElement) -> "ShapeSpec":
        return cls(
            id=element.id,
            kind=element.shape,
            width=element.width,
            height=element.height,
            stroke=element.stroke,
            stroke_width=element.stroke_width,
            fill=element.fill,
            corner_radius=element.corner_radius,
            polygon_sides=element.polygon_sides,
            roughness=element.roughness,
            candy_holed=element.candy_holed,
        )


def rounded_rect_path(width: float, height: float, corner_radius: float = 0.0) -> str:
    """Rect outline; corners become quadratic curves when a radius is set."""
    if corner_radius <= 0:
        return (
            PathBuilder()
            .polyline([(0, 0), (width, 0), (width, height), (0, height)], closed=True)
            .build()
        )
    r = min(corner_radius, width / 2, height / 2)
    return (
        PathBuilder()
        .move_to(r, 0)
        .line_to(width - r, 0)
        .quad_to(width, 0, width, r)
        .line_to(width, height - r)
        .quad_to(width, height, width - r, height)
        .line_to(r, height)
        .quad_to(0, height, 0, height - r)
        .line_to(0, r)
        .quad_to(0, 0, r, 0)
        .close()
        .build()
    )


def circle_path(width: float, height: float) -> str:
    """Circle inscribed in the box, as two half arcs."""
    r = min(width, height) / 2
    cx, cy = width / 2, height / 2
    return (
        PathBuilder()
        .move_to(cx - r, cy)
        .arc_to(r, r, 0, 1, 0, cx + r, cy)
        .arc_to(r, r, 0, 1, 0, cx - r, cy)
        .build()
    )


def regular_polygon_points(width: float, height: float, sides: int) -> List[Tuple[float, float]]:
    cx, cy, r = width / 2, height / 2, min(width, height) / 2
    return [
        (cx + r * math.cos(i * 2 * math.pi / sides - math.pi / 2),
         cy + r * math.sin(i * 2 * math.pi / sides - math.pi / 2))
        for i in range(sides)
    ]


def triangle_points(width: float, height: float) -> List[Tuple[float, float]]:
    return [(width / 2, 0), (width, height), (0, height)]


# ─────────────────────────────────────────────────────────────────────────────
# Decorative glyphs
# ─────────────────────────────────────────────────────────────────────────────

def _star(w: float, h: float) -> str:
    cx, cy, r = w / 2, h / 2, min(w, h) / 2 * 0.8
    points = []
    for i in range(10):
        radius = r if i % 2 == 0 else r * 0.4
        angle = i * math.pi / 5 - math.pi / 2
        points.append((cx + radius * math.cos(angle), cy + radius * math.sin(angle)))
    return PathBuilder().polyline(points, closed=True).build()


def _heart(w: float, h: float) -> str:
    return (
        PathBuilder()
        .move_to(w / 2, h * 0.8)
        .curve_to(w / 2, h * 0.8, w * 0.1, h * 0.4, w * 0.1, h * 0.25)
        .curve_to(w * 0.1, h * 0.1, w * 0.25, h * 0.05, w / 2, h * 0.25)
        .curve_to(w * 0.75, h * 0.05, w * 0.9, h * 0.1, w * 0.9, h * 0.25)
        .curve_to(w * 0.9, h * 0.4, w / 2, h * 0.8, w / 2, h * 0.8)
        .close()
        .build()
    )


def _speech_bubble(w: float, h: float) -> str:
    return (
        PathBuilder()
        .move_to(w * 0.1, h * 0.2)
        .quad_to(w * 0.1, h * 0.1, w * 0.2, h * 0.1)
        .line_to(w * 0.8, h * 0.1)
        .quad_to(w * 0.9, h * 0.1, w * 0.9, h * 0.2)
        .line_to(w * 0.9, h * 0.6)
        .quad_to(w * 0.9, h * 0.7, w * 0.8, h * 0.7)
        .line_to(w * 0.3, h * 0.7)
        .line_to(w * 0.2, h * 0.9)
        .line_to(w * 0.25, h * 0.7)
        .line_to(w * 0.2, h * 0.7)
        .quad_to(w * 0.1, h * 0.7, w * 0.1, h * 0.6)
        .close()
        .build()
    )


def _scaled(w: float, h: float, template: str) -> str:
    """Expand a template of unit-box coordinates ("x,y") into page units."""
    parts = []
    for token in template.split():
        if "," in token:
            fx, fy = token.split(",")
            parts.append(f"{fmt(w * float(fx))} {fmt(h * float(fy))}")
        else:
            parts.append(token)
    return " ".join(parts)


_DOG_TEMPLATE = (
    "M .2,.3 C .1,.2 .1,.1 .2,.1 L .25,.05 C .3,.02 .35,.05 .4,.1 L .6,.1 "
    "C .65,.05 .7,.02 .75,.05 L .8,.1 C .9,.1 .9,.2 .8,.3 C .85,.4 .85,.5 .8,.6 "
    "C .75,.8 .6,.9 .5,.9 C .4,.9 .25,.8 .2,.6 C .15,.5 .15,.4 .2,.3 Z "
    "M .35,.4 C .32,.37 .32,.43 .35,.4 M .65,.4 C .68,.37 .68,.43 .65,.4 "
    "M .45,.55 L .5,.6 L .55,.55"
)

_CAT_TEMPLATE = (
    "M .2,.1 L .35,.3 C .4,.25 .6,.25 .65,.3 L .8,.1 C .85,.15 .85,.25 .8,.35 "
    "C .85,.5 .85,.65 .8,.8 C .7,.9 .3,.9 .2,.8 C .15,.65 .15,.5 .2,.35 "
    "C .15,.25 .15,.15 .2,.1 Z "
    "M .35,.45 C .32,.42 .32,.48 .35,.45 M .65,.45 C .68,.42 .68,.48 .65,.45"
)


def _smiley(w: float, h: float) -> str:
    cx, cy, r = w / 2, h / 2, min(w, h) / 2 * 0.9
    eye_r = r * 0.08
    eye_y = cy - r * 0.2
    builder = (
        PathBuilder()
        .move_to(cx - r, cy)
        .arc_to(r, r, 0, 1, 0, cx + r, cy)
        .arc_to(r, r, 0, 1, 0, cx - r, cy)
    )
    for eye_x in (cx - r * 0.3, cx + r * 0.3):
        (builder
            .move_to(eye_x - eye_r, eye_y)
            .arc_to(eye_r, eye_r, 0, 1, 1, eye_x + eye_r, eye_y)
            .arc_to(eye_r, eye_r, 0, 1, 1, eye_x - eye_r, eye_y)
            .close())
    return (
        builder
        .move_to(cx - r * 0.4, cy + r * 0.2)
        .quad_to(cx, cy + r * 0.5, cx + r * 0.4, cy + r * 0.2)
        .build()
    )


_GLYPHS: Dict[ShapeKind, Callable[[float, float], str]] = {
    ShapeKind.TRIANGLE: lambda w, h: PathBuilder().polyline(triangle_points(w, h), closed=True).build(),
    ShapeKind.HEART: _heart,
    ShapeKind.STAR: _star,
    ShapeKind.SPEECH_BUBBLE: _speech_bubble,
    ShapeKind.DOG: lambda w, h: _scaled(w, h, _DOG_TEMPLATE),
    ShapeKind.CAT: lambda w, h: _scaled(w, h, _CAT_TEMPLATE),
    ShapeKind.SMILEY: _smiley,
}


def generate_complex_shape_path(shape: ShapeSpec) -> str:
    """
    Smooth path for a decorative glyph.

    Raises:
        KeyError: If the shape kind has no glyph formula
    """
    if shape.kind is ShapeKind.POLYGON:
        points = regular_polygon_points(shape.width, shape.height, shape.polygon_sides)
        return PathBuilder().polyline(points, closed=True).build()
    return _GLYPHS[shape.kind](shape.width, shape.height)


def generate_default_path(shape: ShapeSpec) -> str:
    """
    Smooth path for any shape kind.

    Example:
        >>> generate_default_path(ShapeSpec("e1", ShapeKind.LINE, 10, 5))
        'M 0 0 L 10 5'
    """
    if shape.kind is ShapeKind.RECT:
        return rounded_rect_path(shape.width, shape.height, shape.corner_radius)
    if shape.kind is ShapeKind.CIRCLE:
        return circle_path(shape.width, shape.height)
    if shape.kind is ShapeKind.LINE:
        return PathBuilder().move_to(0, 0).line_to(shape.width, shape.height).build()
    return generate_complex_shape_path(shape)

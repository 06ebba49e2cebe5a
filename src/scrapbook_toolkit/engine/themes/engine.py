"""
Module: engine.themes.engine

Purpose:
    Theme dispatch. Turns a ShapeSpec and a theme name into a ThemeResult:
    the themed path plus the paint properties the theme calls for.

    Path generation never raises. Any failure (unknown shape, generator
    error, malformed intermediate path) is logged and replaced by the
    smooth formula for the shape, flagged with `fallback=True`.

Themes:
    default  Smooth path
    rough    Seeded hand-drawn sketch (RoughGenerator)
    glow     Smooth path, doubled width, translucent under-strokes
    candy    Circles along the outline; dashed for lines
    wobbly   Variable-width brush outlines
    zigzag   Zigzag along the outline
    dashed   Smooth path with a dash-dot pattern

Key Functions:
    - seed_from_id(): Stable integer seed from an element id
    - get_stroke_props(): Paint properties for a shape/theme pair
    - generate_path(): Theme path, raising on failure
    - generate_themed_path(): Path + paint with graceful fallback

Dependencies:
    - engine.themes.shapes, engine.themes.rough, engine.themes.svgpath
    - engine.themes.strokes

Used By:
    - engine.render.elements
    - engine.render.ruled_lines
"""

from __future__ import annotations

import logging
import math
import random
import re
from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple

from scrapbook_toolkit.core.models.elements import ShapeKind
from scrapbook_toolkit.core.models.theme import GlowLayers, ShadowParams, ThemeResult
from scrapbook_toolkit.engine.errors import PathGenerationError
from scrapbook_toolkit.engine.themes.rough import RoughGenerator
from scrapbook_toolkit.engine.themes.shapes import (
    ShapeSpec,
    generate_default_path,
    rounded_rect_path,
)
from scrapbook_toolkit.engine.themes.strokes import common_to_actual_stroke_width
from scrapbook_toolkit.engine.themes.svgpath import (
    PathBuilder,
    flatten_path,
    point_at_length,
    polyline_length,
)

logger = logging.getLogger(__name__)

Point = Tuple[float, float]
GeneratorFactory = Callable[..., RoughGenerator]

THEMES = ("default", "rough", "glow", "candy", "wobbly", "zigzag", "dashed")
THEME_ALIASES = {"sketchy": "rough"}

DEFAULT_STROKE = "#1f2937"
ZIGZAG_STROKE = "#bf4d28"
CANDY_STROKE = "#ff0000"


def _digits(element_id: str) -> str:
    return re.sub(r"[^0-9]", "", element_id or "")


def seed_from_id(element_id: str, digits: int = 8) -> int:
    """
    Deterministic seed: the first `digits` digits of the id, or 1.

    Example:
        >>> seed_from_id("el-1700000000123"), seed_from_id("abc")
        (17000000, 1)
    """
    value = _digits(element_id)[:digits]
    return int(value) if value and int(value) else 1


def normalize_theme(theme: Optional[str]) -> str:
    """Canonical theme name; unknown names resolve to default."""
    name = THEME_ALIASES.get(theme or "default", theme or "default")
    return name if name in THEMES else "default"


# ─────────────────────────────────────────────────────────────────────────────
# Stroke properties
# ─────────────────────────────────────────────────────────────────────────────

@dataclass(frozen=True, slots=True)
class StrokeProps:
    """Paint properties for a themed path."""
    stroke: Optional[str]
    stroke_width: float
    fill: Optional[str] = None
    opacity: float = 1.0
    dash: Tuple[float, ...] = ()
    line_cap: str = "butt"
    line_join: str = "miter"
    shadow: Optional[ShadowParams] = None
    glow: Optional[GlowLayers] = None


def actual_stroke_width(shape: ShapeSpec, theme: str) -> float:
    """Convert widths on the common 1-100 scale; others are already actual."""
    width = shape.stroke_width or 0.0
    if 1 <= width <= 100:
        return common_to_actual_stroke_width(width, theme)
    return float(width)


def _dash_pattern(stroke_width: float) -> Tuple[float, ...]:
    gap = max(3.0, stroke_width * 1.5)
    return (max(4.0, stroke_width * 2), gap, 0.001, gap)


def _is_transparent(color: Optional[str]) -> bool:
    return color is None or color == "transparent"


def get_stroke_props(shape: ShapeSpec, theme: str) -> StrokeProps:
    """
    Paint properties a theme applies to a shape.

    Stroke widths between 1 and 100 are on the common scale and are
    mapped onto the theme's range first.
    """
    theme = normalize_theme(theme)
    width = actual_stroke_width(shape, theme)
    is_line = shape.kind is ShapeKind.LINE
    shape_fill = None if is_line or _is_transparent(shape.fill) else shape.fill

    if theme == "glow":
        stroke = shape.stroke or DEFAULT_STROKE
        return StrokeProps(
            stroke=stroke,
            stroke_width=width * 2,
            fill=shape_fill,
            line_cap="round",
            line_join="round",
            shadow=ShadowParams(color=stroke, blur=width * 2, offset_x=0.0, offset_y=0.0, opacity=0.4),
            glow=GlowLayers(width_multiplier=2.5, opacity=0.25),
        )
    if theme == "candy":
        stroke = shape.stroke or CANDY_STROKE
        if is_line:
            return StrokeProps(
                stroke=stroke if width > 0 else None,
                stroke_width=width,
                dash=_dash_pattern(width),
                line_cap="round",
            )
        solid = None if shape.candy_holed else stroke
        return StrokeProps(
            stroke=stroke if width > 0 else None,
            stroke_width=width,
            fill=None if width > 0 else solid,
        )
    if theme == "dashed":
        return StrokeProps(
            stroke=(shape.stroke or DEFAULT_STROKE) if width > 0 else None,
            stroke_width=width,
            dash=_dash_pattern(width),
            line_cap="round",
        )
    if theme == "wobbly":
        # Brush outlines are filled with the stroke colour
        return StrokeProps(stroke=None, stroke_width=0.0, fill=shape.stroke or DEFAULT_STROKE)
    if theme == "zigzag":
        return StrokeProps(
            stroke=shape.stroke or ZIGZAG_STROKE,
            stroke_width=width,
            fill=shape_fill,
            line_cap="round",
            line_join="round",
        )
    return StrokeProps(stroke=shape.stroke or DEFAULT_STROKE, stroke_width=width, fill=shape_fill)


# ─────────────────────────────────────────────────────────────────────────────
# Outline helpers
# ─────────────────────────────────────────────────────────────────────────────

def _outline(shape: ShapeSpec) -> Tuple[List[Point], bool]:
    """Flattened first subpath of the smooth path (the shape's outline)."""
    subpaths = flatten_path(generate_default_path(shape))
    if not subpaths:
        raise PathGenerationError(f"Shape {shape.kind.value} has an empty outline")
    return subpaths[0].points, subpaths[0].closed


def _circle_at(builder: PathBuilder, x: float, y: float, radius: float) -> None:
    (builder
        .move_to(x - radius, y)
        .arc_to(radius, radius, 0, 1, 0, x + radius, y)
        .arc_to(radius, radius, 0, 1, 0, x - radius, y))


def _brush_outline(points: List[Point], widths: List[float], closed: bool = False) -> List[Point]:
    """Polygon around a centre line, each point offset by half its width."""
    top: List[Point] = []
    bottom: List[Point] = []
    count = len(points)
    for index, (x, y) in enumerate(points):
        if index + 1 < count:
            nx, ny = points[index + 1]
        elif closed:
            nx, ny = points[0]
        else:
            break
        dx, dy = nx - x, ny - y
        length = math.hypot(dx, dy)
        if length == 0:
            continue
        half = widths[index] / 2
        ox, oy = -dy / length * half, dx / length * half
        top.append((x + ox, y + oy))
        bottom.insert(0, (x - ox, y - oy))
    return top + bottom


# ─────────────────────────────────────────────────────────────────────────────
# Theme path generators
# ─────────────────────────────────────────────────────────────────────────────

def _rough_path(shape: ShapeSpec, generator_factory: GeneratorFactory) -> str:
    generator = generator_factory(seed_from_id(shape.id), roughness=shape.roughness or 1.0)
    w, h = shape.width, shape.height
    if shape.kind is ShapeKind.RECT:
        if shape.corner_radius > 0:
            return generator.path(rounded_rect_path(w, h, shape.corner_radius))
        return generator.rectangle(0, 0, w, h)
    if shape.kind is ShapeKind.CIRCLE:
        diameter = min(w, h)
        return generator.ellipse(w / 2, h / 2, diameter, diameter)
    if shape.kind is ShapeKind.LINE:
        return generator.line(0, 0, w, h)
    return generator.path(generate_default_path(shape))


def _candy_path(shape: ShapeSpec, stroke_width: float) -> str:
    w, h = shape.width, shape.height
    if shape.kind is ShapeKind.LINE:
        return generate_default_path(shape)

    size = stroke_width * 2 if stroke_width else 4.0
    spacing = size * 2
    radius = size / 2
    builder = PathBuilder()

    if shape.kind is ShapeKind.RECT:
        across = max(1, int(w // spacing))
        down = max(1, int(h // spacing))
        centers = (
            [((i + 0.5) * w / across, 0.0) for i in range(across)]
            + [(w, (i + 0.5) * h / down) for i in range(down)]
            + [(w - (i + 0.5) * w / across, h) for i in range(across)]
            + [(0.0, h - (i + 0.5) * h / down) for i in range(down)]
        )
    elif shape.kind is ShapeKind.CIRCLE:
        r = min(w, h) / 2
        count = int(2 * math.pi * r // spacing)
        centers = [
            (w / 2 + math.cos(2 * math.pi * i / count) * r, h / 2 + math.sin(2 * math.pi * i / count) * r)
            for i in range(count)
        ]
    else:
        points, closed = _outline(shape)
        length = polyline_length(points, closed)
        count = max(3, int(length // spacing))
        centers = [point_at_length(points, length * i / count, closed) for i in range(count)]

    for x, y in centers:
        _circle_at(builder, x, y, radius)
    return builder.build()


def _zigzag_path(shape: ShapeSpec, stroke_width: float) -> str:
    w, h = shape.width, shape.height
    base = stroke_width / 2
    if shape.is_border:
        size, thickness = max(8.0, base * 1.5), max(2.0, base * 0.8)
    else:
        size, thickness = max(12.0, base * 2), max(3.0, base * 1.2)
    builder = PathBuilder()

    if shape.kind is ShapeKind.LINE:
        segments = max(2, int(math.hypot(w, h) // size))
        builder.move_to(0, 0)
        for i in range(segments + 1):
            t = i / segments
            builder.line_to(w * t, h * t + (thickness if i % 2 else 0.0))
        return builder.build()

    if shape.kind is ShapeKind.RECT:
        perimeter = 2 * (w + h)
        segments = max(4, int(perimeter // size))
        builder.move_to(0, 0)
        for i in range(1, segments + 1):
            t = i / segments * perimeter
            if t <= w:
                x, y = t, 0.0
            elif t <= w + h:
                x, y = w, t - w
            elif t <= 2 * w + h:
                x, y = w - (t - w - h), h
            else:
                x, y = 0.0, h - (t - 2 * w - h)
            offset = thickness if i % 2 == 0 else -thickness
            builder.line_to(x + offset, y + offset)
        return builder.close().build()

    if shape.kind is ShapeKind.CIRCLE:
        r = min(w, h) / 2
        segments = max(8, int(2 * math.pi * r // size))
        for i in range(segments + 1):
            angle = i / segments * 2 * math.pi
            radius = r + (thickness if i % 2 else 0.0)
            x, y = w / 2 + math.cos(angle) * radius, h / 2 + math.sin(angle) * radius
            if i == 0:
                builder.move_to(x, y)
            else:
                builder.line_to(x, y)
        return builder.close().build()

    points, closed = _outline(shape)
    length = polyline_length(points, closed)
    segments = max(4, int(length // size))
    for i in range(segments + 1):
        x, y = point_at_length(points, i / segments * length, closed)
        if i == 0:
            builder.move_to(x, y)
        else:
            offset = thickness if i % 2 else 0.0
            builder.line_to(x + offset, y + offset)
    return builder.close().build()


def _wobbly_path(shape: ShapeSpec, stroke_width: float) -> str:
    w, h = shape.width, shape.height
    rng = random.Random(seed_from_id(shape.id))

    if shape.kind is ShapeKind.LINE:
        length = math.hypot(w, h)
        if length == 0:
            raise PathGenerationError("Wobbly line has zero length")
        nx, ny = -h / length, w / length
        steps = 20
        top: List[Point] = []
        bottom: List[Point] = []
        for i in range(steps + 1):
            t = i / steps
            half = stroke_width * (1 + 0.15 * math.sin(t * math.pi * 8)) / 2
            top.append((w * t + nx * half, h * t + ny * half))
            bottom.insert(0, (w * t - nx * half, h * t - ny * half))
        return PathBuilder().polyline(top + bottom, closed=True).build()

    if shape.kind is ShapeKind.RECT:
        deviation = stroke_width * 0.5
        overlap = stroke_width / 2
        edges = [
            ((w, -overlap), (w, h + overlap)),
            ((0.0, h + overlap), (0.0, -overlap)),
            ((-overlap, 0.0), (w + overlap, 0.0)),
            ((w + overlap, h), (-overlap, h)),
        ]
        builder = PathBuilder()
        steps = 15
        for (sx, sy), (ex, ey) in edges:
            points = [
                (sx + (ex - sx) * i / steps + (rng.random() - 0.5) * deviation,
                 sy + (ey - sy) * i / steps + (rng.random() - 0.5) * deviation)
                for i in range(steps + 1)
            ]
            widths = [stroke_width * (1 + 0.15 * math.sin(i / steps * math.pi * 8)) for i in range(steps + 1)]
            outline = _brush_outline(points, widths)
            if outline:
                builder.polyline(outline, closed=True)
        return builder.build()

    if shape.kind is ShapeKind.CIRCLE:
        r = min(w, h) / 2
        deviation = stroke_width * 0.3
        steps = 60
        points = []
        for i in range(steps + 1):
            angle = i / steps * 2 * math.pi
            points.append((
                w / 2 + math.cos(angle) * r + (rng.random() - 0.5) * deviation,
                h / 2 + math.sin(angle) * r + (rng.random() - 0.5) * deviation,
            ))
        widths = [stroke_width * (1 + 0.15 * math.sin(i / steps * math.pi * 12)) for i in range(steps + 1)]
        outline = _brush_outline(points, widths, closed=True)
        return PathBuilder().polyline(outline, closed=True).build()

    return generate_default_path(shape)


def generate_path(
    shape: ShapeSpec,
    theme: str,
    *,
    generator_factory: GeneratorFactory = RoughGenerator,
) -> str:
    """
    Themed path for a shape.

    Raises:
        PathGenerationError: Wraps any failure of the theme generator
    """
    theme = normalize_theme(theme)
    width = actual_stroke_width(shape, theme)
    try:
        if theme == "rough":
            return _rough_path(shape, generator_factory)
        if theme == "candy":
            return _candy_path(shape, width)
        if theme == "wobbly":
            return _wobbly_path(shape, width)
        if theme == "zigzag":
            return _zigzag_path(shape, width)
        return generate_default_path(shape)
    except PathGenerationError:
        raise
    except Exception as e:
        raise PathGenerationError(f"{theme} path failed for {shape.kind.value} {shape.id}: {e}") from e


def _smooth_or_empty(shape: ShapeSpec) -> str:
    try:
        return generate_default_path(shape)
    except KeyError:
        return ""


def generate_themed_path(
    shape: ShapeSpec,
    theme: Optional[str],
    *,
    generator_factory: GeneratorFactory = RoughGenerator,
) -> ThemeResult:
    """
    Themed path plus paint properties; never raises for a valid ShapeSpec.

    On generation failure the smooth formula for the shape kind replaces
    the themed path and the result carries `fallback=True`.

    Example:
        >>> spec = ShapeSpec("rect-1", ShapeKind.RECT, 100, 50)
        >>> generate_themed_path(spec, "rough").path == generate_themed_path(spec, "rough").path
        True
    """
    name = normalize_theme(theme)
    props = get_stroke_props(shape, name)
    fallback = False
    try:
        path = generate_path(shape, name, generator_factory=generator_factory)
    except PathGenerationError as e:
        logger.warning(f"Falling back to smooth path for {shape.id}: {e}")
        path = _smooth_or_empty(shape)
        fallback = True

    fill_path = None
    if name == "rough" and props.fill is not None and not fallback:
        fill_path = _smooth_or_empty(shape)

    return ThemeResult(
        path=path,
        stroke=props.stroke,
        stroke_width=props.stroke_width,
        fill=props.fill,
        opacity=props.opacity,
        dash=props.dash,
        line_cap=props.line_cap,
        line_join=props.line_join,
        fill_path=fill_path,
        shadow=props.shadow,
        glow=props.glow,
        theme=name,
        fallback=fallback,
    )



"""
Module: engine.themes.svgpath

Purpose:
    SVG path data helpers: deterministic number formatting, a small path
    builder, a parser that normalises path data to absolute commands, and
    flattening to polylines for surfaces without native curve support.

Key Functions:
    - fmt(): Deterministic number formatting for path output
    - parse_path(): Path data -> absolute M/L/Q/C/A/Z commands
    - flatten_path(): Path data -> list of Subpath polylines
    - dash_polyline(): Split a polyline by a dash pattern
    - polyline_length() / point_at_length(): Arc-length helpers

Key Classes:
    - PathBuilder: Fluent path-string builder
    - PathCommand: One absolute command
    - Subpath: Flattened polyline with closed flag

Dependencies:
    - math, re (std)

Used By:
    - engine.themes.shapes, engine.themes.rough, engine.themes.engine
    - engine.surfaces.raster, engine.surfaces.pdf
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from typing import List, Sequence, Tuple, Union

Point = Tuple[float, float]

_TOKEN_RE = re.compile(r"[MmLlHhVvQqCcAaZz]|[-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?")
_ARG_COUNTS = {"M": 2, "L": 2, "H": 1, "V": 1, "Q": 4, "C": 6, "A": 7, "Z": 0}

# Samples per curve segment when flattening
CURVE_SEGMENTS = 16


def fmt(value: float) -> str:
    """
    Format a coordinate with at most three decimals.

    Example:
        >>> fmt(1.23456), fmt(2.0), fmt(-0.0001)
        ('1.235', '2', '0')
    """
    rounded = round(value, 3)
    if rounded == 0:
        return "0"
    return f"{rounded:.3f}".rstrip("0").rstrip(".")


class PathBuilder:
    """Accumulates path commands with deterministic formatting."""

    def __init__(self) -> None:
        self._parts: List[str] = []

    def move_to(self, x: float, y: float) -> "PathBuilder":
        self._parts.append(f"M {fmt(x)} {fmt(y)}")
        return self

    def line_to(self, x: float, y: float) -> "PathBuilder":
        self._parts.append(f"L {fmt(x)} {fmt(y)}")
        return self

    def quad_to(self, cx: float, cy: float, x: float, y: float) -> "PathBuilder":
        self._parts.append(f"Q {fmt(cx)} {fmt(cy)} {fmt(x)} {fmt(y)}")
        return self

    def curve_to(self, c1x: float, c1y: float, c2x: float, c2y: float, x: float, y: float) -> "PathBuilder":
        self._parts.append(f"C {fmt(c1x)} {fmt(c1y)} {fmt(c2x)} {fmt(c2y)} {fmt(x)} {fmt(y)}")
        return self

    def arc_to(self, rx: float, ry: float, rotation: float, large: int, sweep: int, x: float, y: float) -> "PathBuilder":
        self._parts.append(f"A {fmt(rx)} {fmt(ry)} {fmt(rotation)} {large} {sweep} {fmt(x)} {fmt(y)}")
        return self

    def close(self) -> "PathBuilder":
        self._parts.append("Z")
        return self

    def polyline(self, points: Sequence[Point], closed: bool = False) -> "PathBuilder":
        """Append a polyline as M + L commands."""
        if not points:
            return self
        self.move_to(*points[0])
        for x, y in points[1:]:
            self.line_to(x, y)
        if closed:
            self.close()
        return self

    def extend(self, other: "PathBuilder") -> "PathBuilder":
        self._parts.extend(other._parts)
        return self

    def __bool__(self) -> bool:
        return bool(self._parts)

    def build(self) -> str:
        return " ".join(self._parts)


# ─────────────────────────────────────────────────────────────────────────────
# Parsing
# ─────────────────────────────────────────────────────────────────────────────

@dataclass(frozen=True, slots=True)
class PathCommand:
    """Absolute path command (op in M, L, Q, C, A, Z)."""
    op: str
    args: Tuple[float, ...] = ()


def parse_path(d: str) -> List[PathCommand]:
    """
    Parse path data into absolute commands.

    H/V become L; relative commands become absolute; implicit repeats
    after M continue as L.

    Raises:
        ValueError: On malformed path data
    """
    tokens = _TOKEN_RE.findall(d)
    commands: List[PathCommand] = []
    index = 0
    op = None
    cx = cy = 0.0
    start_x = start_y = 0.0

    while index < len(tokens):
        token = tokens[index]
        if token.isalpha():
            op = token
            index += 1
            if op in "Zz":
                commands.append(PathCommand("Z"))
                cx, cy = start_x, start_y
                op = None
                continue
        elif op is None:
            raise ValueError(f"Path data must start with a command: {d[:40]!r}")

        count = _ARG_COUNTS[op.upper()]
        raw = tokens[index:index + count]
        if len(raw) < count or any(t.isalpha() for t in raw):
            raise ValueError(f"Incomplete {op} command in path data")
        args = [float(t) for t in raw]
        index += count
        relative = op.islower()
        upper = op.upper()

        if upper == "M":
            x, y = args
            if relative:
                x, y = cx + x, cy + y
            commands.append(PathCommand("M", (x, y)))
            cx, cy = start_x, start_y = x, y
            op = "l" if relative else "L"
        elif upper == "L":
            x, y = args
            if relative:
                x, y = cx + x, cy + y
            commands.append(PathCommand("L", (x, y)))
            cx, cy = x, y
        elif upper == "H":
            x = cx + args[0] if relative else args[0]
            commands.append(PathCommand("L", (x, cy)))
            cx = x
        elif upper == "V":
            y = cy + args[0] if relative else args[0]
            commands.append(PathCommand("L", (cx, y)))
            cy = y
        elif upper == "Q":
            if relative:
                args = [cx + args[0], cy + args[1], cx + args[2], cy + args[3]]
            commands.append(PathCommand("Q", tuple(args)))
            cx, cy = args[2], args[3]
        elif upper == "C":
            if relative:
                args = [v + (cx if i % 2 == 0 else cy) for i, v in enumerate(args)]
            commands.append(PathCommand("C", tuple(args)))
            cx, cy = args[4], args[5]
        elif upper == "A":
            if relative:
                args[5] += cx
                args[6] += cy
            commands.append(PathCommand("A", tuple(args)))
            cx, cy = args[5], args[6]

    return commands


# ─────────────────────────────────────────────────────────────────────────────
# Flattening
# ─────────────────────────────────────────────────────────────────────────────

@dataclass(slots=True)
class Subpath:
    """Flattened subpath."""
    points: List[Point]
    closed: bool = False


def _quad_points(p0: Point, c: Point, p1: Point, segments: int) -> List[Point]:
    result = []
    for i in range(1, segments + 1):
        t = i / segments
        mt = 1 - t
        result.append((
            mt * mt * p0[0] + 2 * mt * t * c[0] + t * t * p1[0],
            mt * mt * p0[1] + 2 * mt * t * c[1] + t * t * p1[1],
        ))
    return result


def _cubic_points(p0: Point, c1: Point, c2: Point, p1: Point, segments: int) -> List[Point]:
    result = []
    for i in range(1, segments + 1):
        t = i / segments
        mt = 1 - t
        a, b, c, d = mt ** 3, 3 * mt * mt * t, 3 * mt * t * t, t ** 3
        result.append((
            a * p0[0] + b * c1[0] + c * c2[0] + d * p1[0],
            a * p0[1] + b * c1[1] + c * c2[1] + d * p1[1],
        ))
    return result


def _vector_angle(ux: float, uy: float, vx: float, vy: float) -> float:
    return math.atan2(ux * vy - uy * vx, ux * vx + uy * vy)


def arc_points(
    start: Point,
    rx: float,
    ry: float,
    rotation: float,
    large: bool,
    sweep: bool,
    end: Point,
) -> List[Point]:
    """Flatten an SVG endpoint-parameterised arc (excluding the start point)."""
    x1, y1 = start
    x2, y2 = end
    if (x1, y1) == (x2, y2):
        return []
    rx, ry = abs(rx), abs(ry)
    if rx == 0 or ry == 0:
        return [end]

    phi = math.radians(rotation)
    cos_phi, sin_phi = math.cos(phi), math.sin(phi)
    dx, dy = (x1 - x2) / 2, (y1 - y2) / 2
    x1p = cos_phi * dx + sin_phi * dy
    y1p = -sin_phi * dx + cos_phi * dy

    scale = (x1p * x1p) / (rx * rx) + (y1p * y1p) / (ry * ry)
    if scale > 1:
        root = math.sqrt(scale)
        rx, ry = rx * root, ry * root

    numerator = rx * rx * ry * ry - rx * rx * y1p * y1p - ry * ry * x1p * x1p
    denominator = rx * rx * y1p * y1p + ry * ry * x1p * x1p
    coef = math.sqrt(max(0.0, numerator / denominator)) if denominator else 0.0
    if large == sweep:
        coef = -coef
    cxp = coef * rx * y1p / ry
    cyp = -coef * ry * x1p / rx
    center_x = cos_phi * cxp - sin_phi * cyp + (x1 + x2) / 2
    center_y = sin_phi * cxp + cos_phi * cyp + (y1 + y2) / 2

    ux, uy = (x1p - cxp) / rx, (y1p - cyp) / ry
    vx, vy = (-x1p - cxp) / rx, (-y1p - cyp) / ry
    theta = _vector_angle(1.0, 0.0, ux, uy)
    delta = _vector_angle(ux, uy, vx, vy)
    if not sweep and delta > 0:
        delta -= 2 * math.pi
    elif sweep and delta < 0:
        delta += 2 * math.pi

    segments = max(8, int(math.ceil(abs(delta) / (math.pi / 16))))
    result = []
    for i in range(1, segments + 1):
        angle = theta + delta * i / segments
        cos_a, sin_a = math.cos(angle), math.sin(angle)
        result.append((
            center_x + rx * cos_a * cos_phi - ry * sin_a * sin_phi,
            center_y + rx * cos_a * sin_phi + ry * sin_a * cos_phi,
        ))
    result[-1] = end
    return result


def flatten_path(path: Union[str, Sequence[PathCommand]], segments: int = CURVE_SEGMENTS) -> List[Subpath]:
    """
    Flatten path data into polylines.

    Raises:
        ValueError: On malformed path data
    """
    commands = parse_path(path) if isinstance(path, str) else list(path)
    subpaths: List[Subpath] = []
    current: Subpath | None = None
    cursor: Point = (0.0, 0.0)
    start: Point = (0.0, 0.0)

    for command in commands:
        if command.op == "M":
            cursor = start = (command.args[0], command.args[1])
            current = Subpath(points=[cursor])
            subpaths.append(current)
            continue
        if current is None:
            current = Subpath(points=[cursor])
            subpaths.append(current)
        if command.op == "L":
            cursor = (command.args[0], command.args[1])
            current.points.append(cursor)
        elif command.op == "Q":
            a = command.args
            current.points.extend(_quad_points(cursor, (a[0], a[1]), (a[2], a[3]), segments))
            cursor = (a[2], a[3])
        elif command.op == "C":
            a = command.args
            current.points.extend(_cubic_points(cursor, (a[0], a[1]), (a[2], a[3]), (a[4], a[5]), segments))
            cursor = (a[4], a[5])
        elif command.op == "A":
            a = command.args
            end = (a[5], a[6])
            current.points.extend(arc_points(cursor, a[0], a[1], a[2], bool(a[3]), bool(a[4]), end))
            cursor = end
        elif command.op == "Z":
            current.closed = True
            cursor = start
            current = None

    return [sub for sub in subpaths if len(sub.points) > 1]


# ─────────────────────────────────────────────────────────────────────────────
# Arc length and dashes
# ─────────────────────────────────────────────────────────────────────────────

def _closed_points(points: Sequence[Point], closed: bool) -> List[Point]:
    pts = list(points)
    if closed and pts and pts[0] != pts[-1]:
        pts.append(pts[0])
    return pts


def polyline_length(points: Sequence[Point], closed: bool = False) -> float:
    pts = _closed_points(points, closed)
    return sum(math.dist(a, b) for a, b in zip(pts, pts[1:]))


def point_at_length(points: Sequence[Point], distance: float, closed: bool = False) -> Point:
    """Point at `distance` along a polyline (clamped to its ends)."""
    pts = _closed_points(points, closed)
    if not pts:
        return (0.0, 0.0)
    remaining = max(0.0, distance)
    for a, b in zip(pts, pts[1:]):
        seg = math.dist(a, b)
        if seg > 0 and remaining <= seg:
            t = remaining / seg
            return (a[0] + (b[0] - a[0]) * t, a[1] + (b[1] - a[1]) * t)
        remaining -= seg
    return pts[-1]


def dash_polyline(points: Sequence[Point], dash: Sequence[float], closed: bool = False) -> List[List[Point]]:
    """
    Split a polyline into the visible pieces of a dash pattern.

    Zero-length dash entries (dots) produce pieces with two nearly equal
    points so that round caps still paint a dot.
    """
    pts = _closed_points(points, closed)
    pattern = [max(0.0, d) for d in dash if d is not None]
    if len(pts) < 2 or not pattern or sum(pattern) <= 0:
        return [pts] if len(pts) > 1 else []

    pieces: List[List[Point]] = []
    dash_index = 0
    left_in_dash = pattern[0]
    drawing = True
    current: List[Point] = [pts[0]]

    for a, b in zip(pts, pts[1:]):
        seg = math.dist(a, b)
        pos = 0.0
        while seg - pos > left_in_dash:
            pos += left_in_dash
            t = pos / seg if seg else 0.0
            point = (a[0] + (b[0] - a[0]) * t, a[1] + (b[1] - a[1]) * t)
            if drawing:
                current.append(point)
                pieces.append(current)
                current = []
            else:
                current = [point]
            drawing = not drawing
            dash_index = (dash_index + 1) % len(pattern)
            left_in_dash = pattern[dash_index]
        left_in_dash -= seg - pos
        if drawing:
            current.append(b)

    if drawing and len(current) > 1:
        pieces.append(current)
    return [piece if len(piece) > 1 else piece * 2 for piece in pieces if piece]

"""
Module: engine.themes.rough

Purpose:
    Seeded hand-drawn path generator. Every public call reseeds its own
    random.Random from the generator seed, so the same inputs always give
    byte-identical path data regardless of call order or environment.

Key Classes:
    - RoughGenerator: line / rectangle / ellipse / path sketching

Dependencies:
    - random, math (std)
    - engine.themes.svgpath: parse_path, arc_points, fmt

Used By:
    - engine.themes.engine (rough theme)
    - engine.render.ruled_lines
"""

from __future__ import annotations

import math
import random
from typing import List, Sequence, Tuple

from scrapbook_toolkit.engine.errors import PathGenerationError
from scrapbook_toolkit.engine.themes.svgpath import arc_points, fmt, parse_path

Point = Tuple[float, float]

CURVE_FITTING = 0.95
CURVE_STEP_COUNT = 9
MAX_RANDOMNESS_OFFSET = 2.0


class RoughGenerator:
    """
    Hand-drawn sketch generator.

    Args:
        seed: Deterministic seed (derived from the element id)
        roughness: Wobble amplitude multiplier
        bowing: Mid-line bow amplitude

    Example:
        >>> RoughGenerator(42).line(0, 0, 100, 0) == RoughGenerator(42).line(0, 0, 100, 0)
        True
    """

    def __init__(self, seed: int, roughness: float = 1.0, bowing: float = 1.0) -> None:
        self.seed = seed
        self.roughness = roughness
        self.bowing = bowing
        self._rng = random.Random(seed)
        self._ops: List[str] = []

    # ─────────────────────────────────────────────────────────────────────
    # Public shapes
    # ─────────────────────────────────────────────────────────────────────

    def line(self, x1: float, y1: float, x2: float, y2: float) -> str:
        self._reset()
        self._double_line(x1, y1, x2, y2)
        return self._flush()

    def rectangle(self, x: float, y: float, width: float, height: float) -> str:
        self._reset()
        self._linear_path([(x, y), (x + width, y), (x + width, y + height), (x, y + height)], close=True)
        return self._flush()

    def polygon(self, points: Sequence[Point]) -> str:
        self._reset()
        self._linear_path(list(points), close=True)
        return self._flush()

    def ellipse(self, cx: float, cy: float, width: float, height: float) -> str:
        self._reset()
        rx, ry = abs(width / 2), abs(height / 2)
        perimeter_scale = math.sqrt(2 * math.pi * math.sqrt((rx * rx + ry * ry) / 2))
        step_count = math.ceil(max(CURVE_STEP_COUNT, CURVE_STEP_COUNT / math.sqrt(200) * perimeter_scale))
        increment = 2 * math.pi / step_count
        fit_adjust = 1 - CURVE_FITTING
        rx += self._offset_opt(rx * fit_adjust)
        ry += self._offset_opt(ry * fit_adjust)

        overlap = increment * self._offset(0.1, self._offset(0.4, 1.0))
        self._curve(self._ellipse_points(increment, cx, cy, rx, ry, 1.0, overlap))
        self._curve(self._ellipse_points(increment, cx, cy, rx, ry, 1.5, 0.0))
        return self._flush()

    def path(self, d: str) -> str:
        """
        Sketch arbitrary path data segment by segment.

        Raises:
            PathGenerationError: If the path data cannot be parsed
        """
        try:
            commands = parse_path(d)
        except ValueError as e:
            raise PathGenerationError(f"Cannot sketch path: {e}") from e

        self._reset()
        current: Point = (0.0, 0.0)
        start: Point = (0.0, 0.0)
        for command in commands:
            a = command.args
            if command.op == "M":
                current = start = (a[0], a[1])
            elif command.op == "L":
                self._double_line(current[0], current[1], a[0], a[1])
                current = (a[0], a[1])
            elif command.op == "Q":
                c1 = (current[0] + 2 / 3 * (a[0] - current[0]), current[1] + 2 / 3 * (a[1] - current[1]))
                c2 = (a[2] + 2 / 3 * (a[0] - a[2]), a[3] + 2 / 3 * (a[1] - a[3]))
                self._bezier_to(c1, c2, (a[2], a[3]), current)
                current = (a[2], a[3])
            elif command.op == "C":
                self._bezier_to((a[0], a[1]), (a[2], a[3]), (a[4], a[5]), current)
                current = (a[4], a[5])
            elif command.op == "A":
                end = (a[5], a[6])
                points = [current] + arc_points(current, a[0], a[1], a[2], bool(a[3]), bool(a[4]), end)
                self._sketch_points(points)
                current = end
            elif command.op == "Z":
                if current != start:
                    self._double_line(current[0], current[1], start[0], start[1])
                current = start
        return self._flush()

    # ─────────────────────────────────────────────────────────────────────
    # Internals
    # ─────────────────────────────────────────────────────────────────────

    def _reset(self) -> None:
        self._rng = random.Random(self.seed)
        self._ops = []

    def _flush(self) -> str:
        result = " ".join(self._ops)
        self._ops = []
        return result

    def _emit(self, op: str, *values: float) -> None:
        self._ops.append(" ".join([op] + [fmt(v) for v in values]))

    def _offset(self, low: float, high: float, gain: float = 1.0) -> float:
        return self.roughness * gain * (self._rng.random() * (high - low) + low)

    def _offset_opt(self, x: float, gain: float = 1.0) -> float:
        return self._offset(-x, x, gain)

    def _double_line(self, x1: float, y1: float, x2: float, y2: float) -> None:
        self._line(x1, y1, x2, y2, overlay=False)
        self._line(x1, y1, x2, y2, overlay=True)

    def _linear_path(self, points: List[Point], close: bool) -> None:
        if len(points) < 2:
            raise PathGenerationError("A sketched path needs at least two points")
        for (x1, y1), (x2, y2) in zip(points, points[1:]):
            self._double_line(x1, y1, x2, y2)
        if close:
            (x1, y1), (x2, y2) = points[-1], points[0]
            self._double_line(x1, y1, x2, y2)

    def _line(self, x1: float, y1: float, x2: float, y2: float, overlay: bool) -> None:
        length_sq = (x1 - x2) ** 2 + (y1 - y2) ** 2
        length = math.sqrt(length_sq)
        if length < 200:
            gain = 1.0
        elif length > 500:
            gain = 0.4
        else:
            gain = -0.0016668 * length + 1.233334

        offset = MAX_RANDOMNESS_OFFSET
        if offset * offset * 100 > length_sq:
            offset = length / 10
        jitter = offset / 2 if overlay else offset

        diverge = 0.2 + self._rng.random() * 0.2
        mid_x = self.bowing * MAX_RANDOMNESS_OFFSET * (y2 - y1) / 200
        mid_y = self.bowing * MAX_RANDOMNESS_OFFSET * (x1 - x2) / 200
        mid_x = self._offset_opt(mid_x, gain)
        mid_y = self._offset_opt(mid_y, gain)

        def rnd() -> float:
            return self._offset_opt(jitter, gain)

        self._emit("M", x1 + rnd(), y1 + rnd())
        self._emit(
            "C",
            mid_x + x1 + (x2 - x1) * diverge + rnd(),
            mid_y + y1 + (y2 - y1) * diverge + rnd(),
            mid_x + x1 + 2 * (x2 - x1) * diverge + rnd(),
            mid_y + y1 + 2 * (y2 - y1) * diverge + rnd(),
            x2 + rnd(),
            y2 + rnd(),
        )

    def _bezier_to(self, c1: Point, c2: Point, end: Point, current: Point) -> None:
        for index, spread in enumerate((MAX_RANDOMNESS_OFFSET, MAX_RANDOMNESS_OFFSET + 0.3)):
            if index == 0:
                self._emit("M", current[0], current[1])
            else:
                self._emit("M", current[0] + self._offset_opt(spread), current[1] + self._offset_opt(spread))
            self._emit(
                "C",
                c1[0] + self._offset_opt(spread), c1[1] + self._offset_opt(spread),
                c2[0] + self._offset_opt(spread), c2[1] + self._offset_opt(spread),
                end[0] + self._offset_opt(spread), end[1] + self._offset_opt(spread),
            )

    def _sketch_points(self, points: List[Point]) -> None:
        if len(points) < 2:
            return
        jittered = [(x + self._offset_opt(1.0), y + self._offset_opt(1.0)) for x, y in points]
        if len(jittered) < 4:
            self._linear_path(jittered, close=False)
        else:
            self._curve([jittered[0]] + jittered + [jittered[-1]])

    def _ellipse_points(
        self,
        increment: float,
        cx: float,
        cy: float,
        rx: float,
        ry: float,
        offset: float,
        overlap: float,
    ) -> List[Point]:
        rad_offset = self._offset_opt(0.5) - math.pi / 2
        points = [(
            self._offset_opt(offset) + cx + 0.9 * rx * math.cos(rad_offset - increment),
            self._offset_opt(offset) + cy + 0.9 * ry * math.sin(rad_offset - increment),
        )]
        end_angle = 2 * math.pi + rad_offset - 0.01
        angle = rad_offset
        while angle < end_angle:
            points.append((
                self._offset_opt(offset) + cx + rx * math.cos(angle),
                self._offset_opt(offset) + cy + ry * math.sin(angle),
            ))
            angle += increment
        points.append((
            cx + rx * math.cos(rad_offset + 2 * math.pi + overlap * 0.5),
            cy + ry * math.sin(rad_offset + 2 * math.pi + overlap * 0.5),
        ))
        points.append((cx + 0.98 * rx * math.cos(rad_offset + overlap), cy + 0.98 * ry * math.sin(rad_offset + overlap)))
        points.append((cx + 0.9 * rx * math.cos(rad_offset + overlap * 0.5), cy + 0.9 * ry * math.sin(rad_offset + overlap * 0.5)))
        return points

    def _curve(self, points: List[Point]) -> None:
        """Catmull-Rom spline through points[1:-1] as cubic segments."""
        if len(points) < 4:
            self._linear_path(points, close=False)
            return
        self._emit("M", points[1][0], points[1][1])
        for i in range(1, len(points) - 2):
            p0, p1, p2, p3 = points[i - 1], points[i], points[i + 1], points[i + 2]
            self._emit(
                "C",
                p1[0] + (p2[0] - p0[0]) / 6, p1[1] + (p2[1] - p0[1]) / 6,
                p2[0] - (p3[0] - p1[0]) / 6, p2[1] - (p3[1] - p1[1]) / 6,
                p2[0], p2[1],
            )

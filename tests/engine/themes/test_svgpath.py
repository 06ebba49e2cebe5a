"""
Unit Tests for Path Data Helpers

Formatting, parsing to absolute commands, flattening and dashing.
"""

import math

import pytest

from scrapbook_toolkit.engine.themes.shapes import circle_path
from scrapbook_toolkit.engine.themes.svgpath import (
    PathBuilder,
    PathCommand,
    dash_polyline,
    flatten_path,
    fmt,
    parse_path,
    point_at_length,
    polyline_length,
)


class TestFormatting:
    def test_fmt_trims_and_rounds(self):
        assert fmt(1.23456) == "1.235"
        assert fmt(2.0) == "2"
        assert fmt(-0.0001) == "0"

    def test_builder_then_spaced_commands(self):
        d = PathBuilder().move_to(0, 0).line_to(10, 5.5).close().build()

        assert d == "M 0 0 L 10 5.5 Z"

    def test_builder_polyline_closed(self):
        d = PathBuilder().polyline([(0, 0), (4, 0), (4, 3)], closed=True).build()

        assert d == "M 0 0 L 4 0 L 4 3 Z"


class TestParsePath:
    """Tests for parse_path()."""

    def test_relative_and_hv_then_absolute_lines(self):
        commands = parse_path("m 10 10 h 5 v 5 l -5 0 z")

        assert commands == [
            PathCommand("M", (10.0, 10.0)),
            PathCommand("L", (15.0, 10.0)),
            PathCommand("L", (15.0, 15.0)),
            PathCommand("L", (10.0, 15.0)),
            PathCommand("Z"),
        ]

    def test_implicit_repeat_after_move_then_lines(self):
        commands = parse_path("M0,0 10,0 10,10")

        assert [c.op for c in commands] == ["M", "L", "L"]

    def test_missing_leading_command_then_raises(self):
        with pytest.raises(ValueError):
            parse_path("10 10 L 5 5")

    def test_incomplete_command_then_raises(self):
        with pytest.raises(ValueError):
            parse_path("M 0 0 L 5")


class TestFlattenPath:
    def test_two_moves_then_two_subpaths(self):
        subpaths = flatten_path("M 0 0 L 20 0 M 0 0 L 0 20")

        assert len(subpaths) == 2
        assert subpaths[0].points == [(0.0, 0.0), (20.0, 0.0)]
        assert subpaths[1].closed is False

    def test_close_then_subpath_marked_closed(self):
        (square,) = flatten_path("M 0 0 L 10 0 L 10 10 L 0 10 Z")

        assert square.closed is True
        assert polyline_length(square.points, closed=True) == pytest.approx(40.0)

    def test_circle_arcs_then_points_on_radius(self):
        (circle,) = flatten_path(circle_path(20, 20))

        for x, y in circle.points:
            assert math.hypot(x - 10, y - 10) == pytest.approx(10.0, abs=1e-3)

    def test_lone_move_then_dropped(self):
        assert flatten_path("M 5 5") == []


class TestArcLength:
    def test_point_at_length_then_interpolates(self):
        points = [(0.0, 0.0), (10.0, 0.0), (10.0, 10.0)]

        assert point_at_length(points, 15) == pytest.approx((10.0, 5.0))
        assert point_at_length(points, 99) == (10.0, 10.0)

    def test_dash_polyline_then_visible_pieces(self):
        pieces = dash_polyline([(0.0, 0.0), (10.0, 0.0)], [2, 2])

        assert len(pieces) == 3
        assert pieces[1][0] == pytest.approx((4.0, 0.0))
        assert pieces[1][-1] == pytest.approx((6.0, 0.0))

    def test_dash_polyline_when_no_pattern_then_whole_line(self):
        points = [(0.0, 0.0), (10.0, 0.0)]

        assert dash_polyline(points, []) == [points]

"""
Unit Tests for the Theme/Sketch Engine

Determinism, per-theme paint properties and the smooth-path fallback.
"""

import pytest
from unittest.mock import MagicMock

from scrapbook_toolkit.core.models.elements import ShapeKind
from scrapbook_toolkit.engine.errors import PathGenerationError
from scrapbook_toolkit.engine.themes import (
    THEMES,
    RoughGenerator,
    ShapeSpec,
    generate_default_path,
    generate_path,
    generate_themed_path,
    get_stroke_props,
    normalize_theme,
    seed_from_id,
)
from scrapbook_toolkit.engine.themes.svgpath import flatten_path


ALL_KINDS = list(ShapeKind)


def _spec(kind=ShapeKind.RECT, element_id="el-1700000000123", **overrides):
    values = dict(id=element_id, kind=kind, width=120.0, height=80.0)
    values.update(overrides)
    return ShapeSpec(**values)


def _raising_factory(*args, **kwargs):
    raise RuntimeError("generator exploded")


class TestSeeding:
    def test_seed_when_digits_then_first_eight(self):
        assert seed_from_id("el-1700000000123") == 17000000

    def test_seed_when_no_digits_then_one(self):
        assert seed_from_id("abc") == 1
        assert seed_from_id("id-000") == 1

    def test_normalize_when_unknown_then_default(self):
        assert normalize_theme("neon") == "default"
        assert normalize_theme(None) == "default"
        assert normalize_theme("sketchy") == "rough"


class TestDeterminism:
    """Same id, kind and size -> byte-identical output."""

    @pytest.mark.parametrize("theme", THEMES)
    @pytest.mark.parametrize("kind", [ShapeKind.RECT, ShapeKind.CIRCLE, ShapeKind.LINE, ShapeKind.HEART])
    def test_themed_path_when_repeated_then_identical(self, theme, kind):
        first = generate_themed_path(_spec(kind), theme)
        second = generate_themed_path(_spec(kind), theme)

        assert first == second
        assert first.path

    def test_rough_path_when_generator_instances_differ_then_identical(self):
        """Two environments each build their own generator from the seed."""
        environment_a = generate_themed_path(_spec(), "rough", generator_factory=RoughGenerator)
        environment_b = generate_themed_path(_spec(), "rough", generator_factory=lambda *a, **k: RoughGenerator(*a, **k))

        assert environment_a.path == environment_b.path

    def test_rough_path_when_ids_differ_then_paths_differ(self):
        a = generate_themed_path(_spec(element_id="el-1"), "rough")
        b = generate_themed_path(_spec(element_id="el-2"), "rough")

        assert a.path != b.path

    def test_rough_generator_when_reused_then_each_call_restarts_sequence(self):
        generator = RoughGenerator(42)

        assert generator.line(0, 0, 100, 0) == generator.line(0, 0, 100, 0)


class TestAllShapes:
    @pytest.mark.parametrize("theme", THEMES)
    @pytest.mark.parametrize("kind", ALL_KINDS)
    def test_every_kind_and_theme_then_parseable_path(self, kind, theme):
        result = generate_themed_path(_spec(kind), theme)

        assert result.fallback is False
        assert flatten_path(result.path)


class TestFallback:
    """Generator failures never propagate."""

    def test_generate_path_when_generator_raises_then_path_generation_error(self):
        with pytest.raises(PathGenerationError):
            generate_path(_spec(), "rough", generator_factory=_raising_factory)

    def test_themed_path_when_generator_raises_then_smooth_rect(self):
        # Arrange
        spec = _spec(ShapeKind.RECT)

        # Act
        result = generate_themed_path(spec, "rough", generator_factory=_raising_factory)

        # Assert
        assert result.fallback is True
        assert result.path == generate_default_path(spec)
        assert result.path == "M 0 0 L 120 0 L 120 80 L 0 80 Z"

    def test_themed_path_when_generator_method_raises_then_smooth_circle(self):
        generator = MagicMock(spec=RoughGenerator)
        generator.ellipse.side_effect = ValueError("bad ellipse")
        spec = _spec(ShapeKind.CIRCLE)

        result = generate_themed_path(spec, "rough", generator_factory=lambda *a, **k: generator)

        assert result.fallback is True
        assert result.path == generate_default_path(spec)

    @pytest.mark.parametrize("sides", [0, 2, -1])
    def test_shape_spec_when_too_few_polygon_sides_then_rejected(self, sides):
        with pytest.raises(ValueError, match="polygon_sides"):
            _spec(ShapeKind.POLYGON, polygon_sides=sides)

    def test_wobbly_zero_length_line_then_falls_back(self):
        spec = _spec(ShapeKind.LINE, width=0.0, height=0.0)

        result = generate_themed_path(spec, "wobbly")

        assert result.fallback is True
        assert result.path == "M 0 0 L 0 0"


class TestStrokeProps:
    """Tests for get_stroke_props() per theme."""

    def test_default_when_no_stroke_then_default_colour(self):
        props = get_stroke_props(_spec(), "default")

        assert props.stroke == "#1f2937"
        assert props.fill is None

    def test_glow_then_shadow_and_glow_layers(self):
        props = get_stroke_props(_spec(stroke="#00ff00", stroke_width=1), "glow")

        assert props.shadow is not None
        assert props.shadow.color == "#00ff00"
        assert props.glow is not None
        assert props.line_cap == "round"

    def test_wobbly_then_filled_with_stroke_colour(self):
        props = get_stroke_props(_spec(stroke="#ff00ff"), "wobbly")

        assert props.stroke is None
        assert props.fill == "#ff00ff"

    def test_dashed_then_dash_pattern(self):
        props = get_stroke_props(_spec(), "dashed")

        assert len(props.dash) == 4
        assert props.line_cap == "round"

    def test_line_when_fill_given_then_never_filled(self):
        props = get_stroke_props(_spec(ShapeKind.LINE, fill="#ff0000"), "default")

        assert props.fill is None

    def test_candy_stroke_width_then_mapped_to_theme_range(self):
        props = get_stroke_props(_spec(stroke_width=100), "candy")

        assert props.stroke_width == pytest.approx(50.0)

    def test_rough_with_fill_then_clean_fill_outline(self):
        result = generate_themed_path(_spec(fill="#ffeeaa"), "rough")

        assert result.fill_path == generate_default_path(_spec())

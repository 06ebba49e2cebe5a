"""
Unit Tests for Page Description Models
"""

import pytest

from scrapbook_toolkit.core.models.elements import (
    ElementKind,
    QnAElement,
    QuestionPosition,
    ShapeElement,
    ShapeKind,
    TextElement,
)
from scrapbook_toolkit.core.models.layout import Area
from scrapbook_toolkit.core.models.page import PageDescription, PatternKind
from scrapbook_toolkit.core.models.styles import RichTextStyle


class TestShapeElement:
    """Tests for ShapeElement construction."""

    def test_basic_kind_then_shape_derived_from_kind(self):
        element = ShapeElement(id="c1", kind=ElementKind.CIRCLE, shape=ShapeKind.STAR)

        assert element.shape is ShapeKind.CIRCLE

    def test_decorative_kind_when_basic_shape_then_raises(self):
        with pytest.raises(ValueError):
            ShapeElement(id="d1", kind=ElementKind.DECORATIVE_SHAPE, shape=ShapeKind.RECT)

    def test_polygon_when_two_sides_then_raises(self):
        with pytest.raises(ValueError):
            ShapeElement(id="p1", kind=ElementKind.DECORATIVE_SHAPE, shape=ShapeKind.POLYGON, polygon_sides=2)

    def test_wrong_variant_for_kind_then_raises(self):
        with pytest.raises(ValueError):
            TextElement(id="t1", kind=ElementKind.RECT)


class TestQnAElement:
    def test_question_width_over_100_then_raises(self):
        with pytest.raises(ValueError):
            QnAElement(id="q1", kind=ElementKind.QNA_BLOCK, question_width=120)

    def test_position_aliases_then_parsed(self):
        assert QuestionPosition.parse("above") is QuestionPosition.TOP
        assert QuestionPosition.parse("below") is QuestionPosition.BOTTOM
        assert QuestionPosition.parse("right") is QuestionPosition.RIGHT


class TestRichTextStyle:
    def test_zero_font_size_then_raises(self):
        with pytest.raises(ValueError):
            RichTextStyle(font_size=0)

    def test_with_changes_then_original_untouched(self):
        style = RichTextStyle(font_size=12)

        bigger = style.with_changes(font_size=20)

        assert style.font_size == 12
        assert bigger.font_size == 20


class TestPageDescription:
    def test_negative_height_then_raises(self):
        with pytest.raises(ValueError):
            PageDescription(width=100, height=-1)

    def test_pattern_aliases_then_canonical(self):
        assert PatternKind.parse("diagonal") is PatternKind.DIAGONAL_LINES
        assert PatternKind.parse("cross") is PatternKind.CROSS_HATCH
        assert PatternKind.parse("waves") is PatternKind.WAVES


class TestArea:
    def test_shared_edge_then_no_overlap(self):
        left = Area(0, 0, 50, 50)
        right = Area(50, 0, 50, 50)

        assert not left.overlaps(right)
        assert left.overlaps(Area(49, 0, 10, 10))

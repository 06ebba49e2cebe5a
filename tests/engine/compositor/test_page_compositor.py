"""
Unit Tests for the Page Compositor

Stacking order, per-element failure boundaries and palette resolution.
"""

import math

import pytest

from scrapbook_toolkit.core.models.elements import ElementKind, ShapeElement, TextElement
from scrapbook_toolkit.core.models.page import DISABLED_BACKGROUND, BackgroundKind, BackgroundSpec, PageDescription
from scrapbook_toolkit.core.utils.serialization import page_from_dict
from scrapbook_toolkit.engine.compositor import PageCompositor, RenderReport, order_elements
from scrapbook_toolkit.engine.config import RenderConfig
from scrapbook_toolkit.engine.registry import CatalogRegistry


def _rect(element_id, z_index=0, **overrides):
    values = dict(id=element_id, kind=ElementKind.RECT, x=10, y=10, width=50, height=40, z_index=z_index)
    values.update(overrides)
    return ShapeElement(**values)


def _page(*elements, **overrides):
    values = dict(width=400, height=300, background=DISABLED_BACKGROUND, elements=tuple(elements), palette_id="test")
    values.update(overrides)
    return PageDescription(**values)


def _raising_factory(*args, **kwargs):
    raise RuntimeError("generator exploded")


@pytest.fixture
def compositor(empty_registry):
    return PageCompositor(registry=empty_registry)


class TestStackingOrder:
    """Painting order follows z_index, then list order."""

    def test_order_elements_then_ascending_stable(self):
        elements = [_rect("A", 5), _rect("B", 1), _rect("C", 3), _rect("D", 1)]

        assert [e.id for e in order_elements(elements)] == ["B", "D", "C", "A"]

    def test_render_page_then_painted_b_c_a(self, compositor, recording_surface):
        # Arrange
        page = _page(_rect("A", 5), _rect("B", 1), _rect("C", 3))

        # Act
        report = compositor.render_page(page, recording_surface)

        # Assert
        assert recording_surface.element_order() == ["B", "C", "A"]
        assert report.rendered == ("B", "C", "A")

    def test_background_before_elements(self, compositor, recording_surface):
        page = _page(_rect("A"), background=BackgroundSpec(color="#abcdef"))

        compositor.render_page(page, recording_surface)

        names = recording_surface.names()
        assert names[0] == "begin_page"
        assert names[1] == "fill_rect"
        assert recording_surface.calls[1].element_id is None
        assert names[-1] == "end_page"


class TestFailureBoundary:
    """One bad element never fails the page."""

    def test_generator_failure_then_smooth_rect_painted(self, empty_registry, recording_surface):
        compositor = PageCompositor(registry=empty_registry, generator_factory=_raising_factory)
        page = _page(_rect("rect-1"), theme="rough")

        report = compositor.render_page(page, recording_surface)

        assert report.rendered == ("rect-1",)
        paths = [call.get("path") for call in recording_surface.calls_for("rect-1") if call.name == "draw_path"]
        assert paths == ["M 0 0 L 50 0 L 50 40 L 0 40 Z"]
        assert any("themed path failed" in message for message in report.diagnostics)

    def test_non_finite_geometry_then_skipped_rest_rendered(self, compositor, recording_surface):
        page = _page(_rect("good-1"), _rect("bad", x=math.nan), _rect("good-2"))

        report = compositor.render_page(page, recording_surface)

        assert report.rendered == ("good-1", "good-2")
        assert report.skipped == ("bad",)
        assert recording_surface.calls_for("bad") == []
        assert report.ok is False

    def test_unexpected_handler_error_then_reported(self, compositor, recording_surface, monkeypatch):
        def broken(*args, **kwargs):
            raise RuntimeError("boom")

        monkeypatch.setitem(compositor.elements._handlers, ElementKind.FREE_TEXT, broken)
        page = _page(TextElement(id="t1", kind=ElementKind.FREE_TEXT, width=50, height=20), _rect("r1"))

        report = compositor.render_page(page, recording_surface)

        assert report.rendered == ("r1",)
        assert "t1: RuntimeError: boom" in report.diagnostics
        assert recording_surface.current_element is None

    def test_handler_fails_after_painting_then_no_partial_paint(self, compositor, recording_surface, monkeypatch):
        def half_drawn(element, surface, context):
            surface.fill_rect(0, 0, element.width, element.height, "#ff0000")
            raise RuntimeError("failed mid-element")

        monkeypatch.setitem(compositor.elements._handlers, ElementKind.FREE_TEXT, half_drawn)
        page = _page(TextElement(id="t1", kind=ElementKind.FREE_TEXT, width=50, height=20), _rect("r1"))

        report = compositor.render_page(page, recording_surface)

        assert report.skipped == ("t1",)
        assert recording_surface.calls_for("t1") == []
        assert [call.get("color") for call in recording_surface.calls if call.name == "fill_rect"] == []
        assert recording_surface.calls_for("r1")

    def test_qna_background_disabled_then_style_colour_not_painted(self, compositor, recording_surface):
        page = page_from_dict({
            "width": 400,
            "height": 300,
            "colorPaletteId": "test",
            "background": {"enabled": False},
            "elements": [{
                "id": "q1",
                "type": "qna-inline",
                "width": 200,
                "height": 80,
                "questionText": "Q?",
                "answerText": "A",
                "questionStyle": {"backgroundColor": "#ff0000"},
                "background": {"enabled": False, "color": "#00ff00"},
            }],
        })

        compositor.render_page(page, recording_surface)

        assert [call for call in recording_surface.calls_for("q1") if call.name == "fill_rect"] == []

    def test_rejected_elements_then_listed_as_skipped(self, compositor, recording_surface):
        page = page_from_dict({
            "width": 400,
            "height": 300,
            "colorPaletteId": "test",
            "elements": [
                {"id": "ok", "type": "rect", "x": 0, "y": 0, "width": 10, "height": 10},
                {"id": "odd", "type": "hologram", "x": 0, "y": 0, "width": 10, "height": 10},
            ],
        })

        report = compositor.render_page(page, recording_surface)

        assert report.rendered == ("ok",)
        assert report.skipped == ("odd",)
        assert any(message.startswith("odd: ") for message in report.diagnostics)

    def test_missing_background_image_then_page_still_renders(self, compositor, recording_surface):
        background = BackgroundSpec(kind=BackgroundKind.IMAGE, image_src="missing.png", background_color_enabled=False)
        page = _page(_rect("r1"), background=background)

        report = compositor.render_page(page, recording_surface)

        assert report.rendered == ("r1",)
        assert len(report.diagnostics) == 1


class TestPaletteResolution:
    """Tests for PageCompositor.resolve_palette()."""

    def test_page_palette_first(self, compositor, test_palette):
        assert compositor.resolve_palette(_page()) is test_palette

    def test_unknown_palette_then_theme_palette(self):
        compositor = PageCompositor(registry=CatalogRegistry.load_default())

        palette = compositor.resolve_palette(_page(palette_id="nope", theme="glow"))

        assert palette.id == "ocean"

    def test_no_palette_no_theme_palette_then_config_default(self):
        compositor = PageCompositor(registry=CatalogRegistry.load_default())

        palette = compositor.resolve_palette(_page(palette_id=None, theme="unknown-theme"))

        assert palette.id == "classic"

    def test_palette_colours_reach_elements(self, compositor, recording_surface):
        compositor.render_page(_page(_rect("r1")), recording_surface)

        (path_call,) = [call for call in recording_surface.calls if call.name == "draw_path"]
        assert path_call.get("stroke") == "#112233"


class TestContext:
    def test_explicit_measurer_wins_over_surface(self, empty_registry, fixed_measurer, recording_surface):
        compositor = PageCompositor(registry=empty_registry, measurer=fixed_measurer)

        context = compositor.context_for(_page(), recording_surface)

        assert context.measurer is fixed_measurer
        assert context.theme == "default"

    def test_config_default_theme_when_page_has_none(self, empty_registry, recording_surface):
        compositor = PageCompositor(registry=empty_registry, config=RenderConfig(default_theme="rough"))

        assert compositor.context_for(_page(theme=""), recording_surface).theme == "rough"


class TestRenderReport:
    def test_report_carries_page_number_and_duration(self, compositor, recording_surface):
        report = compositor.render_page(_page(_rect("r1"), page_number=7), recording_surface)

        assert isinstance(report, RenderReport)
        assert report.page_number == 7
        assert report.duration >= 0
        assert report.ok is True

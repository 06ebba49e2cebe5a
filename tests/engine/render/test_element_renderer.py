"""
Unit Tests for the Element Renderer

Handler exhaustiveness, palette resolution, paint order inside an
element and recovery from per-element failures.
"""

import math
from types import MappingProxyType

import pytest
from PIL import Image

from scrapbook_toolkit.core.models.elements import (
    BorderConfig,
    DISABLED_FILL,
    ElementKind,
    FillConfig,
    ImageElement,
    QnAElement,
    RuledLinesConfig,
    RuledLinesTarget,
    ShapeElement,
    TextElement,
)
from scrapbook_toolkit.core.models.styles import RichTextStyle
from scrapbook_toolkit.engine.errors import MalformedElementError
from scrapbook_toolkit.engine.images.provider import MemoryImageProvider
from scrapbook_toolkit.engine.render import elements as elements_module
from scrapbook_toolkit.engine.render.elements import (
    ElementContext,
    ElementRenderer,
    check_geometry,
    qna_background,
)


def _raising_factory(*args, **kwargs):
    raise RuntimeError("generator exploded")


def _rect(**overrides):
    values = dict(id="rect-1700000000001", kind=ElementKind.RECT, x=10, y=20, width=120, height=80)
    values.update(overrides)
    return ShapeElement(**values)


class TestHandlerTable:
    """Every element kind has a handler."""

    @pytest.mark.parametrize("kind", list(ElementKind))
    def test_every_kind_handled(self, kind):
        assert ElementRenderer().handles(kind)

    def test_missing_handler_then_fails_at_construction(self, monkeypatch):
        partial = {kind: name for kind, name in elements_module.HANDLER_NAMES.items() if kind is not ElementKind.IMAGE}
        monkeypatch.setattr(elements_module, "HANDLER_NAMES", MappingProxyType(partial))

        with pytest.raises(TypeError, match="image"):
            ElementRenderer()


class TestCheckGeometry:
    """Tests for check_geometry()."""

    @pytest.mark.parametrize(
        "overrides",
        [
            {"x": math.nan},
            {"y": math.inf},
            {"width": -1},
            {"rotation": math.nan},
            {"opacity": 1.5},
        ],
    )
    def test_unusable_geometry_then_malformed(self, overrides):
        with pytest.raises(MalformedElementError) as exc_info:
            check_geometry(_rect(**overrides))

        assert exc_info.value.element_id == "rect-1700000000001"

    def test_zero_size_then_accepted(self):
        check_geometry(_rect(width=0, height=0))


class TestShapes:
    def test_shape_then_drawn_in_element_transform(self, recording_surface):
        ElementRenderer().render(_rect(rotation=15), recording_surface)

        assert recording_surface.names() == ["push_transform", "draw_path", "pop_transform"]
        transform = recording_surface.calls[0]
        assert (transform.get("x"), transform.get("y"), transform.get("rotation")) == (10, 20, 15)

    def test_stroke_when_unset_then_palette_primary(self, recording_surface, test_palette):
        context = ElementContext(theme="default", palette=test_palette)

        ElementRenderer().render(_rect(), recording_surface, context)
        ElementRenderer().render(_rect(kind=ElementKind.LINE, id="line-2"), recording_surface, context)

        strokes = [call.get("stroke") for call in recording_surface.calls if call.name == "draw_path"]
        assert strokes == ["#112233", "#112233"]

    def test_explicit_stroke_then_palette_ignored(self, recording_surface, test_palette):
        ElementRenderer().render(_rect(stroke="#ff0000"), recording_surface, ElementContext(palette=test_palette))

        assert recording_surface.calls[1].get("stroke") == "#ff0000"

    def test_element_theme_overrides_page_theme(self, recording_surface):
        ElementRenderer().render(_rect(theme="dashed"), recording_surface, ElementContext(theme="default"))

        assert recording_surface.calls[1].get("dash") != ()

    def test_generator_failure_then_smooth_rect_and_diagnostic(self, recording_surface):
        renderer = ElementRenderer(generator_factory=_raising_factory)

        diagnostics = renderer.render(_rect(), recording_surface, ElementContext(theme="rough"))

        assert recording_surface.calls[1].get("path") == "M 0 0 L 120 0 L 120 80 L 0 80 Z"
        assert diagnostics == ["rect-1700000000001: themed path failed, drew smooth rect"]

    def test_transform_popped_when_handler_raises(self, recording_surface, monkeypatch):
        renderer = ElementRenderer()

        def broken(*args, **kwargs):
            raise RuntimeError("boom")

        monkeypatch.setitem(renderer._handlers, ElementKind.RECT, broken)
        with pytest.raises(RuntimeError):
            renderer.render(_rect(), recording_surface)

        assert recording_surface.names() == ["push_transform", "pop_transform"]


class TestImages:
    def _image(self, **overrides):
        values = dict(id="img-1", kind=ElementKind.IMAGE, width=100, height=100, src="cat.png")
        values.update(overrides)
        return ImageElement(**values)

    def test_missing_photo_then_empty_area_and_diagnostic(self, recording_surface):
        diagnostics = ElementRenderer(MemoryImageProvider()).render(self._image(), recording_surface)

        assert "draw_image" not in recording_surface.names()
        assert len(diagnostics) == 1
        assert diagnostics[0].startswith("img-1: ")
        assert "cat.png" in diagnostics[0]

    def test_photo_then_cropped_to_box_aspect(self, recording_surface):
        images = MemoryImageProvider({"cat.png": Image.new("RGB", (400, 200), "red")})

        ElementRenderer(images).render(self._image(clip_position="left-top"), recording_surface)

        call = next(call for call in recording_surface.calls if call.name == "draw_image")
        assert call.get("image").size == (200, 200)
        assert (call.get("width"), call.get("height")) == (100, 100)

    def test_frame_then_drawn_after_photo(self, recording_surface):
        images = MemoryImageProvider({"cat.png": Image.new("RGB", (10, 10))})
        element = self._image(frame=BorderConfig(enabled=True, color="#00ff00", width=3))

        ElementRenderer(images).render(element, recording_surface)

        assert recording_surface.names() == ["push_transform", "draw_image", "draw_path", "pop_transform"]
        assert recording_surface.calls[2].get("stroke") == "#00ff00"


class TestFreeText:
    def _text(self, **overrides):
        values = dict(
            id="txt-1", kind=ElementKind.FREE_TEXT, width=200, height=100, text="hello",
            background=FillConfig(enabled=True, color="#fffbe6"),
            border=BorderConfig(enabled=True, color="#ff0000", width=2, theme="default"),
            ruled_lines=RuledLinesConfig(enabled=True, color="#0000ff", theme="rough"),
        )
        values.update(overrides)
        return TextElement(**values)

    def test_paint_order_background_lines_border_text(self, recording_surface, fixed_measurer):
        ElementRenderer().render(self._text(), recording_surface, ElementContext(measurer=fixed_measurer))

        names = recording_surface.names()
        strokes = [call.get("stroke") for call in recording_surface.calls if call.name == "draw_path"]
        assert names[1] == "fill_rect"
        assert names[-2] == "draw_text"
        assert strokes[-1] == "#ff0000"
        assert set(strokes[:-1]) == {"#0000ff"}
        assert len(strokes) > 1

    def test_disabled_decorations_then_text_only(self, recording_surface):
        element = self._text(
            background=FillConfig(enabled=False, color="#fffbe6"),
            border=BorderConfig(enabled=False, width=9),
            ruled_lines=RuledLinesConfig(enabled=False),
        )

        ElementRenderer().render(element, recording_surface)

        assert recording_surface.names() == ["push_transform", "draw_text", "pop_transform"]

    def test_element_opacity_then_applied_to_text_style(self, recording_surface):
        element = self._text(opacity=0.5, style=RichTextStyle(opacity=0.8))

        ElementRenderer().render(element, recording_surface)

        text_call = next(call for call in recording_surface.calls if call.name == "draw_text")
        assert text_call.get("style").opacity == pytest.approx(0.4)

    def test_empty_text_then_no_text_calls(self, recording_surface):
        ElementRenderer().render(self._text(text=""), recording_surface)

        assert "draw_text" not in recording_surface.names()


class TestQnABackground:
    """Tests for qna_background()."""

    def _qna(self, **overrides):
        values = dict(id="q-1", kind=ElementKind.QNA_INLINE, width=200, height=100)
        values.update(overrides)
        return QnAElement(**values)

    def test_element_background_wins(self):
        element = self._qna(
            background=FillConfig(enabled=True, color="#111111", opacity=0.7),
            question_style=RichTextStyle(background_color="#222222"),
        )

        assert qna_background(element) == ("#111111", 0.7)

    def test_no_background_entry_then_question_style_then_answer_style(self):
        """Style colours apply only when the element has no background entry."""
        question = self._qna(
            question_style=RichTextStyle(background_color="#222222"),
            answer_style=RichTextStyle(background_color="#333333"),
        )
        answer = self._qna(answer_style=RichTextStyle(background_color="#333333"))

        assert qna_background(question) == ("#222222", 1.0)
        assert qna_background(answer) == ("#333333", 1.0)

    def test_disabled_background_when_style_colours_set_then_none(self, test_palette):
        element = self._qna(
            background=DISABLED_FILL,
            question_style=RichTextStyle(background_color="#ff0000"),
            answer_style=RichTextStyle(background_color="#333333"),
        )

        assert qna_background(element, test_palette) is None

    def test_disabled_background_then_no_fill_painted(self, recording_surface, fixed_measurer):
        element = self._qna(
            question_text="Q?", answer_text="A",
            background=FillConfig(enabled=False, color="#00ff00"),
            question_style=RichTextStyle(background_color="#ff0000"),
        )

        ElementRenderer().render(element, recording_surface, ElementContext(measurer=fixed_measurer))

        assert [call for call in recording_surface.calls if call.name == "fill_rect"] == []

    def test_transparent_element_colour_then_falls_through(self):
        element = self._qna(
            background=FillConfig(enabled=True, color="transparent"),
            answer_style=RichTextStyle(background_color="#333333"),
        )

        assert qna_background(element)[0] == "#333333"

    def test_enabled_without_colour_then_palette(self, test_palette):
        element = self._qna(background=FillConfig(enabled=True, opacity=0.5))

        assert qna_background(element, test_palette) == ("#fafafa", 0.5)

    def test_nothing_set_then_none(self, test_palette):
        assert qna_background(self._qna(), test_palette) is None


class TestQnA:
    def test_block_ruled_lines_then_confined_to_target_area(self, recording_surface, fixed_measurer):
        element = QnAElement(
            id="q-2", kind=ElementKind.QNA_BLOCK, width=200, height=100,
            question_text="Q one", answer_text="A",
            ruled_lines=RuledLinesConfig(enabled=True, theme="default"),
            ruled_lines_target=RuledLinesTarget.QUESTION,
        )

        ElementRenderer().render(element, recording_surface, ElementContext(measurer=fixed_measurer))

        line_transforms = [call for call in recording_surface.calls if call.name == "push_transform"][1:]
        line_paths = [call.get("path") for call in recording_surface.calls if call.name == "draw_path"]
        assert line_transforms
        assert {call.get("x") for call in line_transforms} == {10}
        assert set(line_paths) == {"M 0 0 L 80 0"}

    def test_inline_then_background_before_text(self, recording_surface, fixed_measurer):
        element = QnAElement(
            id="q-3", kind=ElementKind.QNA_INLINE, width=200, height=80,
            question_text="What is your name?", answer_text="My name is John",
            background=FillConfig(enabled=True, color="#eeeeee"),
        )

        ElementRenderer().render(element, recording_surface, ElementContext(measurer=fixed_measurer))

        assert recording_surface.names() == [
            "push_transform", "fill_rect", "draw_text", "draw_text", "pop_transform",
        ]

"""
Serialization Utilities

Parses raw page-description JSON (camelCase keys) into immutable models.

Parsing rules:
- Every switchable sub-configuration (page background, element
  background, border, image frame, ruled lines) reads `enabled` first.
  When it is False the disabled sentinel is returned and no sibling key
  is touched, so partially-specified or garbage siblings are harmless.
- An element that cannot be parsed (unknown type, missing geometry,
  non-numeric values) is dropped and recorded as a RejectedElement; the
  rest of the page still parses.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Mapping, Optional

from ..models.elements import (
    BorderConfig,
    DISABLED_BORDER,
    DISABLED_FILL,
    DISABLED_RULED_LINES,
    ElementKind,
    FillConfig,
    ImageElement,
    PageElement,
    QnAElement,
    QuestionPosition,
    RuledLinesConfig,
    RuledLinesTarget,
    ShapeElement,
    ShapeKind,
    TextElement,
    VerticalAlign,
    DECORATIVE_SHAPES,
)
from ..models.page import (
    BackgroundKind,
    BackgroundSpec,
    DISABLED_BACKGROUND,
    ImageFit,
    PageDescription,
    PatternKind,
    RejectedElement,
)
from ..models.styles import DEFAULT_FONT_FAMILY, DEFAULT_TEXT_COLOR, ParagraphSpacing, RichTextStyle, TextAlign
from ..schemas.validator import validate_page

logger = logging.getLogger(__name__)


# ─────────────────────────────────────────────────────────────────────────────
# Page
# ─────────────────────────────────────────────────────────────────────────────

def page_from_dict(
    data: Mapping[str, Any],
    *,
    validate: bool = True,
    strict: bool = False,
) -> PageDescription:
    """
    Deserialize a page description.

    Args:
        data: Page dictionary from JSON
        validate: Run basic validation first
        strict: Run full jsonschema validation (implies validate)

    Returns:
        PageDescription; unparseable elements are listed in `rejected`

    Raises:
        ValidationError: If validation is requested and fails
    """
    if validate or strict:
        validate_page(dict(data), strict=strict)

    elements: list[PageElement] = []
    rejected: list[RejectedElement] = []
    for index, raw in enumerate(data.get("elements", [])):
        element_id = str(raw.get("id", f"#{index}")) if isinstance(raw, Mapping) else f"#{index}"
        try:
            elements.append(element_from_dict(raw))
        except (KeyError, TypeError, ValueError) as e:
            logger.warning(f"Skipping malformed element {element_id}: {e}")
            rejected.append(RejectedElement(element_id=element_id, reason=str(e)))

    raw_background = data.get("background")
    background = background_from_dict(raw_background) if raw_background is not None else BackgroundSpec()

    return PageDescription(
        width=float(data["width"]),
        height=float(data["height"]),
        background=background,
        elements=tuple(elements),
        theme=data.get("theme") or "default",
        palette_id=data.get("colorPaletteId"),
        page_number=data.get("pageNumber"),
        rejected=tuple(rejected),
    )


def load_page_json(path: Path, *, strict: bool = False) -> PageDescription:
    """Load and parse a page description from a JSON file."""
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    return page_from_dict(data, strict=strict)


# ─────────────────────────────────────────────────────────────────────────────
# Switchable sub-configurations
# ─────────────────────────────────────────────────────────────────────────────

_FALSE_STRINGS = frozenset({"false", "0", "no", "off", ""})


def _is_enabled(data: Mapping[str, Any], default: bool = True) -> bool:
    """
    Read the `enabled` flag; must be the first key read.

    Strict schema validation only admits booleans. Lenient parsing also
    meets string flags from hand-edited JSON, where "false" means off.
    """
    value = data.get("enabled", default)
    if isinstance(value, str):
        return value.strip().lower() not in _FALSE_STRINGS
    return bool(value)


def background_from_dict(data: Mapping[str, Any]) -> BackgroundSpec:
    """Deserialize a page background; `enabled: false` short-circuits."""
    if not _is_enabled(data):
        return DISABLED_BACKGROUND

    kind = BackgroundKind(data.get("type", "color"))
    if kind is BackgroundKind.COLOR:
        return BackgroundSpec(
            kind=kind,
            color=data.get("value") or data.get("backgroundColor") or "#ffffff",
            opacity=_number(data, "opacity", 1.0),
        )
    if kind is BackgroundKind.PATTERN:
        return BackgroundSpec(
            kind=kind,
            color=data.get("backgroundColor"),
            opacity=_number(data, "opacity", 1.0),
            pattern=PatternKind.parse(data.get("value") or data.get("pattern") or "dots"),
            pattern_color=data.get("patternBackgroundColor") or data.get("patternColor"),
            pattern_size=_number(data, "patternSize", 1.0),
            pattern_stroke_width=_number(data, "patternStrokeWidth", 1.0),
            pattern_opacity=_number(data, "patternOpacity", 1.0),
            background_color_enabled=data.get("backgroundColorEnabled", True) is not False,
        )
    return BackgroundSpec(
        kind=kind,
        color=data.get("backgroundColor"),
        opacity=_number(data, "opacity", 1.0),
        background_color_enabled=data.get("backgroundColorEnabled", False) is True,
        image_src=data.get("value") or data.get("src"),
        image_fit=ImageFit(data.get("imageSize", "cover")),
        image_position=data.get("imagePosition", "top-left"),
    )


def fill_from_dict(data: Optional[Mapping[str, Any]]) -> Optional[FillConfig]:
    """
    Deserialize an element background fill.

    Returns None when the element has no background entry, which is not
    the same as an explicitly disabled one: QnA elements fall back to
    their style colours only in the first case.
    """
    if data is None:
        return None
    if not _is_enabled(data):
        return DISABLED_FILL
    return FillConfig(
        enabled=True,
        color=data.get("color"),
        opacity=_number(data, "opacity", 1.0),
    )


def border_from_dict(data: Optional[Mapping[str, Any]]) -> BorderConfig:
    """Deserialize a border or image frame."""
    if data is None or not _is_enabled(data):
        return DISABLED_BORDER
    return BorderConfig(
        enabled=True,
        color=data.get("color"),
        width=_number(data, "width", 1.0),
        opacity=_number(data, "opacity", 1.0),
        theme=data.get("theme"),
    )


def ruled_lines_from_dict(data: Optional[Mapping[str, Any]]) -> RuledLinesConfig:
    """Deserialize ruled-line settings."""
    if data is None or not _is_enabled(data):
        return DISABLED_RULED_LINES
    return RuledLinesConfig(
        enabled=True,
        color=data.get("color"),
        width=_number(data, "width", 0.8),
        opacity=_number(data, "opacity", 1.0),
        theme=data.get("theme") or "rough",
    )


# ─────────────────────────────────────────────────────────────────────────────
# Elements
# ─────────────────────────────────────────────────────────────────────────────

def style_from_dict(data: Optional[Mapping[str, Any]]) -> RichTextStyle:
    """Deserialize a text style (all keys optional)."""
    if not data:
        return RichTextStyle()
    return RichTextStyle(
        font_size=_number(data, "fontSize", 16.0),
        font_family=data.get("fontFamily") or DEFAULT_FONT_FAMILY,
        bold=bool(data.get("fontBold", False)),
        italic=bool(data.get("fontItalic", False)),
        color=data.get("fontColor") or DEFAULT_TEXT_COLOR,
        opacity=_number(data, "fontOpacity", 1.0),
        align=TextAlign(data.get("align", "left")),
        paragraph_spacing=ParagraphSpacing(data.get("paragraphSpacing", "medium")),
        background_color=data.get("backgroundColor"),
    )


def element_from_dict(data: Mapping[str, Any]) -> PageElement:
    """
    Deserialize one element.

    The `type` key selects the variant. Decorative glyph names ("heart",
    "star", ...) are accepted directly as types, as is "qna" with a
    `layoutVariant` key.

    Raises:
        KeyError: Missing id or geometry
        ValueError: Unknown type or invalid values
        TypeError: Non-numeric geometry
    """
    if not isinstance(data, Mapping):
        raise TypeError(f"Element must be an object, got {type(data).__name__}")

    raw_type = data["type"]
    kind, shape = _resolve_kind(raw_type, data)
    for key in ("width", "height"):
        if key not in data:
            raise KeyError(f"missing geometry field {key!r}")

    common = dict(
        id=str(data["id"]),
        kind=kind,
        x=_number(data, "x", 0.0),
        y=_number(data, "y", 0.0),
        width=_number(data, "width", 0.0),
        height=_number(data, "height", 0.0),
        rotation=_number(data, "rotation", 0.0),
        z_index=int(data.get("zIndex", 0)),
        opacity=_number(data, "opacity", 1.0),
        theme=data.get("theme"),
    )

    if kind is ElementKind.IMAGE:
        return ImageElement(
            **common,
            src=data.get("src"),
            clip_position=data.get("imageClipPosition", "center-middle"),
            corner_radius=_number(data, "cornerRadius", 0.0),
            frame=border_from_dict(data.get("frame")),
        )
    if kind is ElementKind.FREE_TEXT:
        return TextElement(
            **common,
            text=data.get("text", ""),
            style=style_from_dict(data.get("style")),
            padding=_number(data, "padding", 8.0),
            vertical_align=VerticalAlign(data.get("verticalAlign", "top")),
            corner_radius=_number(data, "cornerRadius", 0.0),
            background=fill_from_dict(data.get("background")) or DISABLED_FILL,
            border=border_from_dict(data.get("border")),
            ruled_lines=ruled_lines_from_dict(data.get("ruledLines")),
        )
    if kind in (ElementKind.QNA_INLINE, ElementKind.QNA_BLOCK):
        return QnAElement(
            **common,
            question_text=data.get("questionText", ""),
            answer_text=data.get("answerText", ""),
            question_style=style_from_dict(data.get("questionStyle")),
            answer_style=style_from_dict(data.get("answerStyle")),
            padding=_number(data, "padding", 10.0),
            answer_in_new_row=bool(data.get("answerInNewRow", False)),
            question_answer_gap=_number(data, "questionAnswerGap", 0.0),
            question_position=QuestionPosition.parse(data.get("questionPosition", "left")),
            question_width=_number(data, "questionWidth", 40.0),
            block_question_answer_gap=_number(data, "blockQuestionAnswerGap", 10.0),
            ruled_lines_target=RuledLinesTarget(data.get("ruledLinesTarget", "answer")),
            corner_radius=_number(data, "cornerRadius", 0.0),
            background=fill_from_dict(data.get("background")),
            border=border_from_dict(data.get("border")),
            ruled_lines=ruled_lines_from_dict(data.get("ruledLines")),
        )
    return ShapeElement(
        **common,
        shape=shape,
        stroke=data.get("stroke"),
        stroke_width=_number(data, "strokeWidth", 2.0),
        fill=data.get("fill"),
        corner_radius=_number(data, "cornerRadius", 0.0),
        polygon_sides=int(data.get("polygonSides", 5)),
        roughness=_number(data, "roughness", 1.0),
        candy_holed=bool(data.get("candyHoled", False)),
    )


def _resolve_kind(raw_type: str, data: Mapping[str, Any]) -> tuple[ElementKind, ShapeKind]:
    """Map a raw type string to (ElementKind, ShapeKind)."""
    if raw_type == "qna":
        variant = data.get("layoutVariant", "inline")
        return ElementKind(f"qna-{variant}"), ShapeKind.RECT
    if raw_type == ElementKind.DECORATIVE_SHAPE.value:
        return ElementKind.DECORATIVE_SHAPE, ShapeKind(data["shape"])
    try:
        shape = ShapeKind(raw_type)
    except ValueError:
        return ElementKind(raw_type), ShapeKind.RECT
    if shape in DECORATIVE_SHAPES:
        return ElementKind.DECORATIVE_SHAPE, shape
    return ElementKind(raw_type), shape


def _number(data: Mapping[str, Any], key: str, default: float) -> float:
    """Read a numeric field; None or absent yields the default."""
    value = data.get(key)
    if value is None:
        return default
    if isinstance(value, bool):
        raise TypeError(f"{key} must be a number, got bool")
    return float(value)

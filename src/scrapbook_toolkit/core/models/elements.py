"""
Module: elements

Purpose:
    Page element models. Elements form a closed tagged union keyed by
    ElementKind; every kind maps to exactly one dataclass and one
    renderer handler.

Key Classes:
    - ElementKind: Closed set of element variants
    - ShapeKind: Shape catalogue (basic shapes + decorative glyphs)
    - PageElement: Common geometry (id, position, size, rotation, z-index)
    - ShapeElement, ImageElement, TextElement, QnAElement: Variants
    - FillConfig, BorderConfig, RuledLinesConfig: Switchable
      sub-configurations (the `enabled` flag wins over every sibling)

Dependencies:
    - dataclasses (std)
    - enum (std)
    - .styles.RichTextStyle

Used By:
    - core.models.page
    - core.utils.serialization
    - engine.render.elements
    - engine.compositor
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .styles import RichTextStyle


class ElementKind(str, Enum):
    """Closed set of element variants."""
    RECT = "rect"
    CIRCLE = "circle"
    LINE = "line"
    IMAGE = "image"
    FREE_TEXT = "free-text"
    QNA_INLINE = "qna-inline"
    QNA_BLOCK = "qna-block"
    DECORATIVE_SHAPE = "decorative-shape"


class ShapeKind(str, Enum):
    """Shapes the theme engine can draw."""
    RECT = "rect"
    CIRCLE = "circle"
    LINE = "line"
    TRIANGLE = "triangle"
    POLYGON = "polygon"
    HEART = "heart"
    STAR = "star"
    SPEECH_BUBBLE = "speech-bubble"
    DOG = "dog"
    CAT = "cat"
    SMILEY = "smiley"


DECORATIVE_SHAPES = frozenset({
    ShapeKind.TRIANGLE,
    ShapeKind.POLYGON,
    ShapeKind.HEART,
    ShapeKind.STAR,
    ShapeKind.SPEECH_BUBBLE,
    ShapeKind.DOG,
    ShapeKind.CAT,
    ShapeKind.SMILEY,
})

SHAPE_ELEMENT_KINDS = frozenset({
    ElementKind.RECT,
    ElementKind.CIRCLE,
    ElementKind.LINE,
    ElementKind.DECORATIVE_SHAPE,
})

QNA_ELEMENT_KINDS = frozenset({ElementKind.QNA_INLINE, ElementKind.QNA_BLOCK})


class QuestionPosition(str, Enum):
    """Where the question sits relative to the answer in a block layout."""
    LEFT = "left"
    RIGHT = "right"
    TOP = "top"
    BOTTOM = "bottom"

    @classmethod
    def parse(cls, value: str) -> "QuestionPosition":
        """Parse a position, accepting "above"/"below" for top/bottom."""
        aliases = {"above": cls.TOP, "below": cls.BOTTOM}
        if value in aliases:
            return aliases[value]
        return cls(value)


class RuledLinesTarget(str, Enum):
    """Which half of a block QnA contributes ruled lines."""
    QUESTION = "question"
    ANSWER = "answer"


class VerticalAlign(str, Enum):
    """Vertical placement of free text inside its box."""
    TOP = "top"
    MIDDLE = "middle"
    BOTTOM = "bottom"


# ─────────────────────────────────────────────────────────────────────────────
# Switchable sub-configurations
# ─────────────────────────────────────────────────────────────────────────────


@dataclass(frozen=True, slots=True)
class FillConfig:
    """Background fill behind an element's content."""
    enabled: bool = False
    color: Optional[str] = None
    opacity: float = 1.0


@dataclass(frozen=True, slots=True)
class BorderConfig:
    """
    Border (or image frame) around an element.

    Attributes:
        enabled: Master switch; when False nothing else is read
        color: Stroke colour (palette fallback when None)
        width: Stroke width on the common 1-100 scale
        opacity: Stroke opacity
        theme: Theme for the border path (element/page theme when None)
    """
    enabled: bool = False
    color: Optional[str] = None
    width: float = 1.0
    opacity: float = 1.0
    theme: Optional[str] = None


@dataclass(frozen=True, slots=True)
class RuledLinesConfig:
    """Baseline guide lines drawn under text lines."""
    enabled: bool = False
    color: Optional[str] = None
    width: float = 0.8
    opacity: float = 1.0
    theme: str = "rough"


DISABLED_FILL = FillConfig()
DISABLED_BORDER = BorderConfig()
DISABLED_RULED_LINES = RuledLinesConfig()


# ─────────────────────────────────────────────────────────────────────────────
# Elements
# ─────────────────────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class PageElement:
    """
    Geometry shared by every element.

    Geometry is not validated here; the compositor rejects elements with
    non-finite or negative sizes so one bad element never sinks a page.

    Attributes:
        id: Stable identifier (also the source of the sketch seed)
        kind: Variant tag
        x, y: Top-left position on the page
        width, height: Size (a line's width/height is its end vector)
        rotation: Degrees clockwise about the top-left corner
        z_index: Explicit stacking index
        opacity: Element opacity
        theme: Theme override (page theme when None)
    """
    id: str
    kind: ElementKind
    x: float = 0.0
    y: float = 0.0
    width: float = 0.0
    height: float = 0.0
    rotation: float = 0.0
    z_index: int = 0
    opacity: float = 1.0
    theme: Optional[str] = None


@dataclass(frozen=True)
class ShapeElement(PageElement):
    """
    Rect, circle, line or decorative glyph.

    `shape` is derived from `kind` for the basic shapes; decorative shapes
    must name a glyph from DECORATIVE_SHAPES.
    """
    shape: ShapeKind = ShapeKind.RECT
    stroke: Optional[str] = None
    stroke_width: float = 2.0
    fill: Optional[str] = None
    corner_radius: float = 0.0
    polygon_sides: int = 5
    roughness: float = 1.0
    candy_holed: bool = False

    def __post_init__(self) -> None:
        if self.kind not in SHAPE_ELEMENT_KINDS:
            raise ValueError(f"ShapeElement cannot carry kind {self.kind.value!r}")
        if self.kind is ElementKind.DECORATIVE_SHAPE:
            if self.shape not in DECORATIVE_SHAPES:
                raise ValueError(f"Not a decorative shape: {self.shape.value!r}")
        else:
            object.__setattr__(self, "shape", ShapeKind(self.kind.value))
        if self.polygon_sides < 3:
            raise ValueError(f"polygon_sides must be >= 3: {self.polygon_sides}")


@dataclass(frozen=True)
class ImageElement(PageElement):
    """Photo placed on the page, cropped to fill its box."""
    src: Optional[str] = None
    clip_position: str = "center-middle"
    corner_radius: float = 0.0
    frame: BorderConfig = DISABLED_BORDER

    def __post_init__(self) -> None:
        if self.kind is not ElementKind.IMAGE:
            raise ValueError(f"ImageElement cannot carry kind {self.kind.value!r}")


@dataclass(frozen=True)
class TextElement(PageElement):
    """Free text box."""
    text: str = ""
    style: RichTextStyle = RichTextStyle()
    padding: float = 8.0
    vertical_align: VerticalAlign = VerticalAlign.TOP
    corner_radius: float = 0.0
    background: FillConfig = DISABLED_FILL
    border: BorderConfig = DISABLED_BORDER
    ruled_lines: RuledLinesConfig = DISABLED_RULED_LINES

    def __post_init__(self) -> None:
        if self.kind is not ElementKind.FREE_TEXT:
            raise ValueError(f"TextElement cannot carry kind {self.kind.value!r}")


@dataclass(frozen=True)
class QnAElement(PageElement):
    """
    Question/answer pair composed inline or as two blocks.

    The composition variant follows the kind: qna-inline or qna-block.
    `background` is None when the page gives no background entry; a
    disabled FillConfig means the background was switched off.
    """
    question_text: str = ""
    answer_text: str = ""
    question_style: RichTextStyle = RichTextStyle()
    answer_style: RichTextStyle = RichTextStyle()
    padding: float = 10.0
    answer_in_new_row: bool = False
    question_answer_gap: float = 0.0
    question_position: QuestionPosition = QuestionPosition.LEFT
    question_width: float = 40.0
    block_question_answer_gap: float = 10.0
    ruled_lines_target: RuledLinesTarget = RuledLinesTarget.ANSWER
    corner_radius: float = 0.0
    background: Optional[FillConfig] = None
    border: BorderConfig = DISABLED_BORDER
    ruled_lines: RuledLinesConfig = DISABLED_RULED_LINES

    def __post_init__(self) -> None:
        if self.kind not in QNA_ELEMENT_KINDS:
            raise ValueError(f"QnAElement cannot carry kind {self.kind.value!r}")
        if not 0.0 <= self.question_width <= 100.0:
            raise ValueError(f"question_width must be a percentage: {self.question_width}")

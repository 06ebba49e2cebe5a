"""
Core Models Package

Immutable data models shared by the parser and the rendering engine.
All models are frozen dataclasses; a render call never mutates them.
"""

from .styles import RichTextStyle, TextAlign, ParagraphSpacing, DEFAULT_FONT_FAMILY
from .layout import TextLine, TextRun, LinePosition, Area, LayoutResult
from .theme import ThemeResult, ShadowParams, GlowLayers
from .elements import (
    ElementKind,
    ShapeKind,
    QuestionPosition,
    RuledLinesTarget,
    VerticalAlign,
    FillConfig,
    BorderConfig,
    RuledLinesConfig,
    PageElement,
    ShapeElement,
    ImageElement,
    TextElement,
    QnAElement,
    DECORATIVE_SHAPES,
    DISABLED_FILL,
    DISABLED_BORDER,
    DISABLED_RULED_LINES,
)
from .page import (
    BackgroundKind,
    BackgroundSpec,
    PatternKind,
    ImageFit,
    PageDescription,
    RejectedElement,
    DISABLED_BACKGROUND,
)

__all__ = [
    "RichTextStyle",
    "TextAlign",
    "ParagraphSpacing",
    "DEFAULT_FONT_FAMILY",
    "TextLine",
    "TextRun",
    "LinePosition",
    "Area",
    "LayoutResult",
    "ThemeResult",
    "ShadowParams",
    "GlowLayers",
    "ElementKind",
    "ShapeKind",
    "QuestionPosition",
    "RuledLinesTarget",
    "VerticalAlign",
    "FillConfig",
    "BorderConfig",
    "RuledLinesConfig",
    "PageElement",
    "ShapeElement",
    "ImageElement",
    "TextElement",
    "QnAElement",
    "DECORATIVE_SHAPES",
    "DISABLED_FILL",
    "DISABLED_BORDER",
    "DISABLED_RULED_LINES",
    "BackgroundKind",
    "BackgroundSpec",
    "PatternKind",
    "ImageFit",
    "PageDescription",
    "RejectedElement",
    "DISABLED_BACKGROUND",
]

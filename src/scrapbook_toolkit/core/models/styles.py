"""
Module: styles

Purpose:
    Text style value objects consumed by the layout engine. A style is
    fixed at construction and shared freely between runs, line positions
    and the renderers that paint them.

Key Classes:
    - RichTextStyle: Immutable font/colour/alignment description
    - TextAlign: Horizontal alignment
    - ParagraphSpacing: Line-height class (small/medium/large)

Dependencies:
    - dataclasses (std)
    - enum (std)

Used By:
    - core.models.layout
    - core.models.elements
    - engine.text.layout
    - engine.qna.composer
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional


DEFAULT_FONT_FAMILY = "Arial, sans-serif"
DEFAULT_TEXT_COLOR = "#1f2937"


class TextAlign(str, Enum):
    """Horizontal text alignment."""
    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"
    JUSTIFY = "justify"  # Laid out as left; word spacing is not stretched


class ParagraphSpacing(str, Enum):
    """Line-height class applied on top of the font size."""
    SMALL = "small"
    MEDIUM = "medium"
    LARGE = "large"


@dataclass(frozen=True, slots=True)
class RichTextStyle:
    """
    Immutable text style.

    Attributes:
        font_size: Font size in page pixels (must be > 0)
        font_family: CSS-like family list, e.g. "Arial, sans-serif"
        bold: Bold weight flag
        italic: Italic flag
        color: Text colour (hex, rgb() or a named colour)
        opacity: Text opacity in [0, 1]
        align: Horizontal alignment
        paragraph_spacing: Line-height class
        background_color: Optional background behind the text block

    Example:
        >>> style = RichTextStyle(font_size=14, bold=True)
        >>> style.with_changes(font_size=20).font_size
        20
    """

    font_size: float = 16.0
    font_family: str = DEFAULT_FONT_FAMILY
    bold: bool = False
    italic: bool = False
    color: str = DEFAULT_TEXT_COLOR
    opacity: float = 1.0
    align: TextAlign = TextAlign.LEFT
    paragraph_spacing: ParagraphSpacing = ParagraphSpacing.MEDIUM
    background_color: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate style on construction."""
        if self.font_size <= 0:
            raise ValueError(f"font_size must be positive: {self.font_size}")
        if not 0.0 <= self.opacity <= 1.0:
            raise ValueError(f"opacity must be in [0, 1]: {self.opacity}")

    def with_changes(self, **changes) -> "RichTextStyle":
        """Return a copy with the given fields replaced."""
        return replace(self, **changes)

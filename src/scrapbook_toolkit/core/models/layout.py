"""
Module: layout

Purpose:
    Pure-data output of the text layout module and the QnA composer.
    Everything here is recomputed on each render call and never cached.

Key Classes:
    - TextLine: One wrapped line (text + measured width)
    - TextRun: Positioned substring with its style
    - LinePosition: Vertical slot used by ruled lines
    - Area: Axis-aligned rectangle in element coordinates
    - LayoutResult: Runs, content height, line slots and QnA sub-areas

Dependencies:
    - dataclasses (std)
    - .styles.RichTextStyle

Used By:
    - engine.text.layout
    - engine.qna.composer
    - engine.render.elements
    - engine.render.ruled_lines
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

from .styles import RichTextStyle


@dataclass(frozen=True, slots=True)
class TextLine:
    """A single wrapped line and its measured width."""
    text: str
    width: float


@dataclass(frozen=True, slots=True)
class TextRun:
    """
    Positioned text.

    Attributes:
        text: Literal substring to draw
        x: Left edge in element coordinates
        y: Baseline in element coordinates
        style: Style that produced the run
        width: Measured width of `text`
    """
    text: str
    x: float
    y: float
    style: RichTextStyle
    width: float = 0.0

    @property
    def right(self) -> float:
        return self.x + self.width


@dataclass(frozen=True, slots=True)
class LinePosition:
    """Vertical position of a ruled line with the style of its text line."""
    y: float
    line_height: float
    style: RichTextStyle


@dataclass(frozen=True, slots=True)
class Area:
    """
    Axis-aligned rectangle.

    Edges are half-open for overlap purposes: two areas that only share
    an edge do not overlap.
    """
    x: float
    y: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    def overlaps(self, other: "Area") -> bool:
        """Check whether the interiors of two areas intersect."""
        return (
            self.x < other.right
            and other.x < self.right
            and self.y < other.bottom
            and other.y < self.bottom
        )

    def contains(self, other: "Area", tolerance: float = 1e-9) -> bool:
        """Check whether `other` lies entirely within this area."""
        return (
            other.x >= self.x - tolerance
            and other.y >= self.y - tolerance
            and other.right <= self.right + tolerance
            and other.bottom <= self.bottom + tolerance
        )


@dataclass(frozen=True, slots=True)
class LayoutResult:
    """
    Result of laying out a text block or a QnA pair.

    Attributes:
        runs: Runs ordered top-to-bottom, left-to-right
        content_height: Total height used (never below the element height
            for QnA layouts)
        line_positions: Ruled-line slots, one per laid-out line
        question_area: Question sub-rectangle (block QnA only)
        answer_area: Answer sub-rectangle (block QnA only)
    """
    runs: Tuple[TextRun, ...]
    content_height: float
    line_positions: Tuple[LinePosition, ...] = ()
    question_area: Optional[Area] = None
    answer_area: Optional[Area] = None

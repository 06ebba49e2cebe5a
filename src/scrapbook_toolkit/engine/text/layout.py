"""
Module: engine.text.layout

Purpose:
    Measure and wrap rich text into positioned runs. Every function here
    is pure in its explicit arguments: measurement only happens through
    the measurer passed in, and a missing or failing measurer falls back
    to the average-character-width heuristic.

Contract constants:
    - Line height = font size x {small: 1.0, medium: 1.2, large: 1.5}
    - Heuristic width = characters x font size x 0.6
    - Baseline offset (no metrics) = font size x 0.8

Key Functions:
    - build_font(): Style -> font descriptor
    - get_line_height(): Line height for a style
    - measure_text(): Width via measurer, heuristic fallback
    - calculate_text_x(): Alignment within an available width
    - wrap_text(): Greedy word wrap
    - get_baseline_offset(): Top-of-line to baseline distance
    - create_text_layout(): Wrap + position a free text block

Dependencies:
    - engine.text.measure: TextMeasurer, HeuristicMeasurer
    - engine.text.fonts: Descriptors

Used By:
    - engine.qna.composer
    - engine.render.elements
"""

from __future__ import annotations

import logging
from types import MappingProxyType
from typing import List, Optional

from scrapbook_toolkit.core.models.elements import VerticalAlign
from scrapbook_toolkit.core.models.layout import LayoutResult, LinePosition, TextLine, TextRun
from scrapbook_toolkit.core.models.styles import ParagraphSpacing, RichTextStyle, TextAlign
from scrapbook_toolkit.engine.errors import LayoutContractError
from scrapbook_toolkit.engine.text.fonts import build_font, parse_font, resolve_font_family
from scrapbook_toolkit.engine.text.measure import AVERAGE_CHAR_WIDTH, TextMeasurer

logger = logging.getLogger(__name__)

LINE_HEIGHT_MULTIPLIERS = MappingProxyType({
    ParagraphSpacing.SMALL: 1.0,
    ParagraphSpacing.MEDIUM: 1.2,
    ParagraphSpacing.LARGE: 1.5,
})
BASELINE_RATIO = 0.8

# Ruled lines sit this far below the text baseline
RULED_LINE_BASELINE_OFFSET = 12.0

__all__ = [
    "LINE_HEIGHT_MULTIPLIERS",
    "BASELINE_RATIO",
    "RULED_LINE_BASELINE_OFFSET",
    "build_font",
    "parse_font",
    "resolve_font_family",
    "get_line_height",
    "heuristic_width",
    "measure_text",
    "calculate_text_x",
    "wrap_text",
    "get_baseline_offset",
    "create_text_layout",
]


def get_line_height(style: RichTextStyle) -> float:
    """Line height for a style (font size x paragraph-spacing multiplier)."""
    return style.font_size * LINE_HEIGHT_MULTIPLIERS.get(style.paragraph_spacing, 1.2)


def heuristic_width(text: str, style: RichTextStyle) -> float:
    """Width estimate used when no measurer is usable."""
    return len(text) * style.font_size * AVERAGE_CHAR_WIDTH


def measure_text(text: str, style: RichTextStyle, measurer: Optional[TextMeasurer] = None) -> float:
    """
    Measure text width.

    Never raises for a valid style: an absent, unready or failing measurer
    yields the heuristic width.
    """
    if not text:
        return 0.0
    if measurer is None or not measurer.is_ready:
        return heuristic_width(text, style)
    try:
        return float(measurer.measure(text, build_font(style)))
    except Exception as e:
        logger.debug(f"Measurement failed for {build_font(style)!r}, using heuristic: {e}")
        return heuristic_width(text, style)


def calculate_text_x(
    text: str,
    style: RichTextStyle,
    start_x: float,
    available_width: float,
    measurer: Optional[TextMeasurer] = None,
) -> float:
    """
    Left edge of a line for the style's alignment.

    Justify is laid out as left.
    """
    if style.align is TextAlign.CENTER:
        return start_x + (available_width - measure_text(text, style, measurer)) / 2
    if style.align is TextAlign.RIGHT:
        return start_x + available_width - measure_text(text, style, measurer)
    return start_x


def wrap_text(
    text: str,
    style: RichTextStyle,
    max_width: float,
    measurer: Optional[TextMeasurer] = None,
) -> List[TextLine]:
    """
    Greedy word wrap.

    Paragraphs split on "\\n"; an empty paragraph becomes an empty line.
    A word wider than max_width sits alone on its line and is never split.
    Empty input yields exactly one empty line of width 0.

    Raises:
        LayoutContractError: If max_width is negative

    Example:
        >>> [line.text for line in wrap_text("a b", RichTextStyle(font_size=10), 10)]
        ['a', 'b']
    """
    if max_width < 0:
        raise LayoutContractError(f"max_width must not be negative: {max_width}")
    if not text:
        return [TextLine(text="", width=0.0)]

    lines: List[TextLine] = []
    for paragraph in text.split("\n"):
        words = [word for word in paragraph.split(" ") if word]
        if not words:
            lines.append(TextLine(text="", width=0.0))
            continue
        current = words[0]
        for word in words[1:]:
            candidate = f"{current} {word}"
            if measure_text(candidate, style, measurer) > max_width:
                lines.append(TextLine(text=current, width=measure_text(current, style, measurer)))
                current = word
            else:
                current = candidate
        lines.append(TextLine(text=current, width=measure_text(current, style, measurer)))
    return lines


def get_baseline_offset(style: RichTextStyle, measurer: Optional[TextMeasurer] = None) -> float:
    """
    Distance from the top of a line to its baseline.

    Uses the measurer's ascent when it has one, otherwise font size x 0.8.
    """
    if measurer is not None and measurer.is_ready:
        try:
            ascent = measurer.ascent(build_font(style))
        except Exception as e:
            logger.debug(f"Ascent lookup failed, using approximation: {e}")
            ascent = None
        if ascent is not None:
            return float(ascent)
    return style.font_size * BASELINE_RATIO


def create_text_layout(
    text: str,
    style: RichTextStyle,
    width: float,
    height: float,
    padding: float,
    measurer: Optional[TextMeasurer] = None,
    vertical_align: VerticalAlign = VerticalAlign.TOP,
) -> LayoutResult:
    """
    Lay out a free text block inside a padded box.

    Baselines use the fixed font size x 0.8 offset so the live scene and
    batch output agree regardless of which measurer is in use.

    Raises:
        LayoutContractError: If width, height or padding is negative
    """
    if width < 0 or height < 0 or padding < 0:
        raise LayoutContractError(f"Invalid text box: {width}x{height} padding {padding}")

    available_width = max(0.0, width - padding * 2)
    line_height = get_line_height(style)
    baseline_offset = get_baseline_offset(style)
    lines = wrap_text(text, style, available_width, measurer)

    block_height = len(lines) * line_height
    free_space = max(0.0, height - padding * 2 - block_height)
    if vertical_align is VerticalAlign.MIDDLE:
        cursor_y = padding + free_space / 2
    elif vertical_align is VerticalAlign.BOTTOM:
        cursor_y = padding + free_space
    else:
        cursor_y = padding

    runs: List[TextRun] = []
    positions: List[LinePosition] = []
    for line in lines:
        baseline_y = cursor_y + baseline_offset
        if line.text:
            runs.append(TextRun(
                text=line.text,
                x=calculate_text_x(line.text, style, padding, available_width, measurer),
                y=baseline_y,
                style=style,
                width=line.width,
            ))
        positions.append(LinePosition(
            y=baseline_y + RULED_LINE_BASELINE_OFFSET,
            line_height=line_height,
            style=style,
        ))
        cursor_y += line_height

    return LayoutResult(
        runs=tuple(runs),
        content_height=max(height, cursor_y + padding),
        line_positions=tuple(positions),
    )

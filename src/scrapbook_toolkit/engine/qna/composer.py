"""
Module: engine.qna.composer

Purpose:
    Compose a question and an answer text block into one LayoutResult.

    Inline: the question wraps first; the answer continues on the last
    question line after a gap when at least its first word fits there,
    and the rest wraps below.

    Block: question and answer get disjoint rectangles inside the padded
    element box, with the question left/right (percentage width) or
    top/bottom (wrapped height) of the answer.

Key Functions:
    - create_inline_layout(): Shared text flow
    - create_block_layout(): Two disjoint sub-areas
    - create_layout(): Dispatch on QnALayoutVariant
    - layout_for_element(): Compose straight from a QnAElement

Dependencies:
    - engine.text.layout: wrap_text, measure_text, calculate_text_x

Used By:
    - engine.render.elements
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import List, Optional, Tuple

from scrapbook_toolkit.core.models.elements import (
    ElementKind,
    QnAElement,
    QuestionPosition,
    RuledLinesTarget,
)
from scrapbook_toolkit.core.models.layout import Area, LayoutResult, LinePosition, TextLine, TextRun
from scrapbook_toolkit.core.models.styles import RichTextStyle, TextAlign
from scrapbook_toolkit.engine.errors import LayoutContractError
from scrapbook_toolkit.engine.text.layout import (
    BASELINE_RATIO,
    RULED_LINE_BASELINE_OFFSET,
    calculate_text_x,
    get_line_height,
    measure_text,
    wrap_text,
)
from scrapbook_toolkit.engine.text.measure import TextMeasurer

logger = logging.getLogger(__name__)

MAX_INLINE_GAP = 32.0


class QnALayoutVariant(str, Enum):
    """Composition strategy for a QnA element."""
    INLINE = "inline"
    BLOCK = "block"


def _check_box(width: float, height: float, padding: float) -> None:
    if width < 0 or height < 0 or padding < 0:
        raise LayoutContractError(f"Invalid QnA box: {width}x{height} padding {padding}")


def _slot(baseline_y: float, line_height: float, style: RichTextStyle) -> LinePosition:
    return LinePosition(y=baseline_y + RULED_LINE_BASELINE_OFFSET, line_height=line_height, style=style)


def inline_gap(answer_style: RichTextStyle, question_answer_gap: float, answer_in_new_row: bool) -> float:
    """Horizontal gap between question and answer on a shared line."""
    base = min(MAX_INLINE_GAP, answer_style.font_size * 0.5)
    return base if answer_in_new_row else base + question_answer_gap


def _leading_newlines(text: str) -> int:
    return len(text) - len(text.lstrip("\n"))


# ─────────────────────────────────────────────────────────────────────────────
# Inline
# ─────────────────────────────────────────────────────────────────────────────

def create_inline_layout(
    question_text: str,
    answer_text: str,
    question_style: RichTextStyle,
    answer_style: RichTextStyle,
    width: float,
    height: float,
    padding: float,
    measurer: Optional[TextMeasurer] = None,
    *,
    answer_in_new_row: bool = False,
    question_answer_gap: float = 0.0,
) -> LayoutResult:
    """
    Lay out question and answer as one text flow.

    Ruled-line slots are produced for every question line, for the
    combined line, for each blank answer line and for every wrapped answer
    line. When `answer_in_new_row` is set the gap applies vertically.

    Raises:
        LayoutContractError: If width, height or padding is negative

    Example:
        >>> style = RichTextStyle(font_size=14)
        >>> result = create_inline_layout("Q?", "A", style, style, 200, 80, 10)
        >>> [run.text for run in result.runs]
        ['Q?', 'A']
    """
    _check_box(width, height, padding)

    available = max(0.0, width - padding * 2)
    q_line_height = get_line_height(question_style)
    a_line_height = get_line_height(answer_style)
    q_baseline = question_style.font_size * BASELINE_RATIO
    a_baseline = answer_style.font_size * BASELINE_RATIO
    gap = inline_gap(answer_style, question_answer_gap, answer_in_new_row)

    runs: List[TextRun] = []
    positions: List[LinePosition] = []
    cursor_y = padding

    question_lines = wrap_text(question_text, question_style, available, measurer)
    for line in question_lines:
        baseline_y = cursor_y + q_baseline
        if line.text:
            runs.append(TextRun(
                text=line.text,
                x=calculate_text_x(line.text, question_style, padding, available, measurer),
                y=baseline_y,
                style=question_style,
                width=line.width,
            ))
        positions.append(_slot(baseline_y, q_line_height, question_style))
        cursor_y += q_line_height
    content_height = cursor_y

    leading_breaks = _leading_newlines(answer_text) + (1 if answer_in_new_row else 0)
    remaining_text = answer_text
    same_line = False

    if leading_breaks == 0 and question_lines and answer_text.strip():
        combined = _combine_last_line(
            question_lines, answer_text, question_style, answer_style,
            available, padding, gap, measurer,
        )
        if combined is not None:
            same_line = True
            question_run, answer_run, remaining_text = combined
            if runs and runs[-1].style is question_style and question_lines[-1].text:
                runs[-1] = question_run
            runs.append(answer_run)

            combined_height = max(q_line_height, a_line_height)
            cursor_y = padding + len(question_lines) * q_line_height - q_line_height + combined_height
            positions[-1] = _slot(answer_run.y, combined_height, answer_style)
            logger.debug(f"Answer continues on question line at x={answer_run.x:.1f}")

    if same_line:
        answer_lines = (
            wrap_text(remaining_text, answer_style, available, measurer) if remaining_text.strip() else []
        )
        answer_cursor = cursor_y
    else:
        answer_lines = wrap_text(answer_text.lstrip("\n"), answer_style, available, measurer)
        vertical_gap = question_answer_gap if answer_in_new_row else 0.0
        spacing = a_line_height * 0.2 if question_lines else 0.0
        answer_cursor = cursor_y + spacing + vertical_gap

    for _ in range(max(0, leading_breaks - 1)):
        positions.append(_slot(answer_cursor + a_baseline, a_line_height, answer_style))
        answer_cursor += a_line_height

    for line in answer_lines:
        baseline_y = answer_cursor + a_baseline
        if line.text:
            runs.append(TextRun(
                text=line.text,
                x=calculate_text_x(line.text, answer_style, padding, available, measurer),
                y=baseline_y,
                style=answer_style,
                width=line.width,
            ))
        positions.append(_slot(baseline_y, a_line_height, answer_style))
        answer_cursor += a_line_height

    return LayoutResult(
        runs=tuple(runs),
        content_height=max(content_height, answer_cursor, height),
        line_positions=tuple(positions),
    )


def _combine_last_line(
    question_lines: List[TextLine],
    answer_text: str,
    question_style: RichTextStyle,
    answer_style: RichTextStyle,
    available: float,
    padding: float,
    gap: float,
    measurer: Optional[TextMeasurer],
) -> Optional[Tuple[TextRun, TextRun, str]]:
    """
    Fit the start of the answer onto the last question line.

    Returns:
        (repositioned question run, answer run, remaining answer text), or
        None when not even the first answer word fits.
    """
    paragraphs = answer_text.split("\n")
    words = [word for word in paragraphs[0].strip().split(" ") if word]
    if not words:
        return None

    last = question_lines[-1]
    inline_available = available - last.width - gap
    if inline_available <= measure_text(words[0], answer_style, measurer):
        return None

    fitted = words[0]
    used = 1
    for word in words[1:]:
        candidate = f"{fitted} {word}"
        if measure_text(candidate, answer_style, measurer) > inline_available:
            break
        fitted = candidate
        used += 1

    q_baseline = question_style.font_size * BASELINE_RATIO
    a_baseline = answer_style.font_size * BASELINE_RATIO
    last_baseline = padding + (len(question_lines) - 1) * get_line_height(question_style) + q_baseline
    combined_baseline = last_baseline + (max(q_baseline, a_baseline) - q_baseline)

    fitted_width = measure_text(fitted, answer_style, measurer)
    combined_width = last.width + gap + fitted_width
    align = question_style.align
    if align is TextAlign.CENTER:
        start_x = padding + (available - combined_width) / 2
    elif align is TextAlign.RIGHT:
        start_x = padding + available - combined_width
    else:
        start_x = padding

    question_run = TextRun(text=last.text, x=start_x, y=combined_baseline, style=question_style, width=last.width)
    answer_run = TextRun(
        text=fitted,
        x=start_x + last.width + gap,
        y=combined_baseline,
        style=answer_style,
        width=fitted_width,
    )

    rest = " ".join(words[used:])
    if len(paragraphs) > 1:
        later = "\n".join(paragraphs[1:])
        rest = f"{rest}\n{later}" if rest else later
    return question_run, answer_run, rest


# ─────────────────────────────────────────────────────────────────────────────
# Block
# ─────────────────────────────────────────────────────────────────────────────

def block_areas(
    question_text: str,
    question_style: RichTextStyle,
    width: float,
    height: float,
    padding: float,
    position: QuestionPosition,
    question_width: float,
    gap: float,
    measurer: Optional[TextMeasurer] = None,
) -> Tuple[Area, Area]:
    """
    Question and answer rectangles for a block layout.

    Both lie inside the padded box and never overlap; sizes that do not
    fit are clamped to zero instead of overlapping.
    """
    inner_w = max(0.0, width - padding * 2)
    inner_h = max(0.0, height - padding * 2)

    if position in (QuestionPosition.LEFT, QuestionPosition.RIGHT):
        q_w = min(width * question_width / 100, inner_w)
        gap_w = min(max(0.0, gap), inner_w - q_w)
        a_w = max(0.0, inner_w - q_w - gap_w)
        if position is QuestionPosition.LEFT:
            question = Area(padding, padding, q_w, inner_h)
            answer = Area(padding + q_w + gap_w, padding, a_w, inner_h)
        else:
            answer = Area(padding, padding, a_w, inner_h)
            question = Area(padding + a_w + gap_w, padding, q_w, inner_h)
        return question, answer

    if question_text:
        lines = wrap_text(question_text, question_style, inner_w, measurer)
        text_h = len(lines) * get_line_height(question_style)
    else:
        text_h = question_style.font_size
    q_h = min(max(text_h, question_style.font_size), inner_h)
    gap_h = min(max(0.0, gap), inner_h - q_h)
    a_h = max(0.0, inner_h - q_h - gap_h)
    if position is QuestionPosition.TOP:
        question = Area(padding, padding, inner_w, q_h)
        answer = Area(padding, padding + q_h + gap_h, inner_w, a_h)
    else:
        answer = Area(padding, padding, inner_w, a_h)
        question = Area(padding, padding + a_h + gap_h, inner_w, q_h)
    return question, answer


def _fill_area(
    text: str,
    style: RichTextStyle,
    area: Area,
    measurer: Optional[TextMeasurer],
    collect_positions: bool,
) -> Tuple[List[TextRun], List[LinePosition]]:
    runs: List[TextRun] = []
    positions: List[LinePosition] = []
    if not text:
        return runs, positions
    line_height = get_line_height(style)
    baseline = style.font_size * BASELINE_RATIO
    cursor_y = area.y
    for line in wrap_text(text, style, area.width, measurer):
        baseline_y = cursor_y + baseline
        if line.text:
            runs.append(TextRun(
                text=line.text,
                x=calculate_text_x(line.text, style, area.x, area.width, measurer),
                y=baseline_y,
                style=style,
                width=line.width,
            ))
        if collect_positions:
            positions.append(_slot(baseline_y, line_height, style))
        cursor_y += line_height
    return runs, positions


def create_block_layout(
    question_text: str,
    answer_text: str,
    question_style: RichTextStyle,
    answer_style: RichTextStyle,
    width: float,
    height: float,
    padding: float,
    measurer: Optional[TextMeasurer] = None,
    *,
    question_position: QuestionPosition = QuestionPosition.LEFT,
    question_width: float = 40.0,
    gap: float = 10.0,
    ruled_lines_target: RuledLinesTarget = RuledLinesTarget.ANSWER,
) -> LayoutResult:
    """
    Lay out question and answer in two disjoint areas.

    Only the half named by `ruled_lines_target` contributes line
    positions. Content height is always the element height.

    Raises:
        LayoutContractError: If width, height or padding is negative
    """
    _check_box(width, height, padding)
    question_area, answer_area = block_areas(
        question_text, question_style, width, height, padding,
        question_position, question_width, gap, measurer,
    )

    q_runs, q_positions = _fill_area(
        question_text, question_style, question_area, measurer,
        ruled_lines_target is RuledLinesTarget.QUESTION,
    )
    a_runs, a_positions = _fill_area(
        answer_text, answer_style, answer_area, measurer,
        ruled_lines_target is RuledLinesTarget.ANSWER,
    )
    return LayoutResult(
        runs=tuple(q_runs + a_runs),
        content_height=height,
        line_positions=tuple(q_positions + a_positions),
        question_area=question_area,
        answer_area=answer_area,
    )


# ─────────────────────────────────────────────────────────────────────────────
# Dispatch
# ─────────────────────────────────────────────────────────────────────────────

def create_layout(
    variant: QnALayoutVariant,
    question_text: str,
    answer_text: str,
    question_style: RichTextStyle,
    answer_style: RichTextStyle,
    width: float,
    height: float,
    padding: float,
    measurer: Optional[TextMeasurer] = None,
    **options,
) -> LayoutResult:
    """
    Compose with the requested variant.

    Keyword options are forwarded; options belonging to the other variant
    are ignored.
    """
    variant = QnALayoutVariant(variant)
    if variant is QnALayoutVariant.BLOCK:
        allowed = {"question_position", "question_width", "gap", "ruled_lines_target"}
        return create_block_layout(
            question_text, answer_text, question_style, answer_style,
            width, height, padding, measurer,
            **{key: value for key, value in options.items() if key in allowed},
        )
    allowed = {"answer_in_new_row", "question_answer_gap"}
    return create_inline_layout(
        question_text, answer_text, question_style, answer_style,
        width, height, padding, measurer,
        **{key: value for key, value in options.items() if key in allowed},
    )


def layout_for_element(element: QnAElement, measurer: Optional[TextMeasurer] = None) -> LayoutResult:
    """Compose a QnA element with the variant its kind names."""
    if element.kind is ElementKind.QNA_BLOCK:
        return create_layout(
            QnALayoutVariant.BLOCK,
            element.question_text, element.answer_text,
            element.question_style, element.answer_style,
            element.width, element.height, element.padding, measurer,
            question_position=element.question_position,
            question_width=element.question_width,
            gap=element.block_question_answer_gap,
            ruled_lines_target=element.ruled_lines_target,
        )
    return create_layout(
        QnALayoutVariant.INLINE,
        element.question_text, element.answer_text,
        element.question_style, element.answer_style,
        element.width, element.height, element.padding, measurer,
        answer_in_new_row=element.answer_in_new_row,
        question_answer_gap=element.question_answer_gap,
    )

"""
Unit Tests for the QnA Composer

Inline flow (shared last line), block areas and variant dispatch.
"""

import random

import pytest

from scrapbook_toolkit.core.models.elements import (
    ElementKind,
    QnAElement,
    QuestionPosition,
    RuledLinesTarget,
)
from scrapbook_toolkit.core.models.layout import Area
from scrapbook_toolkit.core.models.styles import RichTextStyle
from scrapbook_toolkit.engine.errors import LayoutContractError
from scrapbook_toolkit.engine.text.measure import HeuristicMeasurer
from scrapbook_toolkit.engine.qna import (
    QnALayoutVariant,
    block_areas,
    create_block_layout,
    create_inline_layout,
    create_layout,
    layout_for_element,
)


QUESTION_STYLE = RichTextStyle(font_size=14, bold=True)
ANSWER_STYLE = RichTextStyle(font_size=14)


class TestInlineLayout:
    """Tests for create_inline_layout()."""

    def test_short_answer_when_fits_then_shares_last_question_line(self, fixed_measurer):
        # Arrange: 180 px available, question 90 px, gap 7 px, answer 75 px
        question = "What is your name?"
        answer = "My name is John"

        # Act
        result = create_inline_layout(
            question, answer, QUESTION_STYLE, ANSWER_STYLE, 200, 80, 10, fixed_measurer
        )

        # Assert
        assert [run.text for run in result.runs] == [question, answer]
        question_run, answer_run = result.runs
        assert question_run.y == answer_run.y
        assert answer_run.x == pytest.approx(10 + 90 + 7)
        assert answer_run.right - question_run.x <= 180

    def test_answer_when_first_word_too_wide_then_starts_below(self, fixed_measurer):
        question = "a" * 34  # 170 px leaves 3 px after the gap

        result = create_inline_layout(
            question, "Answer", QUESTION_STYLE, ANSWER_STYLE, 200, 100, 10, fixed_measurer
        )

        question_run, answer_run = result.runs
        assert answer_run.x == 10
        assert answer_run.y > question_run.y

    def test_answer_when_partly_fits_then_rest_wraps_below(self, fixed_measurer):
        question = "a" * 26  # 130 px, 43 px left after the gap

        result = create_inline_layout(
            question, "one two three four", QUESTION_STYLE, ANSWER_STYLE, 200, 100, 10, fixed_measurer
        )

        texts = [run.text for run in result.runs]
        assert texts == [question, "one two", "three four"]
        assert result.runs[2].x == 10

    def test_answer_in_new_row_then_never_shares_line(self, fixed_measurer):
        result = create_inline_layout(
            "Q?", "A", QUESTION_STYLE, ANSWER_STYLE, 200, 100, 10, fixed_measurer,
            answer_in_new_row=True,
        )

        question_run, answer_run = result.runs
        assert answer_run.x == 10
        assert answer_run.y > question_run.y

    def test_leading_newline_then_answer_below_with_blank_slot(self, fixed_measurer):
        without = create_inline_layout("Q?", "\nA", QUESTION_STYLE, ANSWER_STYLE, 200, 100, 10, fixed_measurer)
        with_two = create_inline_layout("Q?", "\n\nA", QUESTION_STYLE, ANSWER_STYLE, 200, 100, 10, fixed_measurer)

        assert without.runs[1].x == 10
        assert len(with_two.line_positions) == len(without.line_positions) + 1

    def test_ruled_slots_when_combined_then_one_per_visual_line(self, fixed_measurer):
        result = create_inline_layout(
            "Q?", "A", QUESTION_STYLE, ANSWER_STYLE, 200, 100, 10, fixed_measurer
        )

        assert len(result.line_positions) == 1
        assert result.question_area is None

    def test_box_narrower_than_padding_then_words_wrap_to_box(self):
        """A 2 px text column holds one word per line, never two."""
        tiny = RichTextStyle(font_size=2)

        result = create_inline_layout("a b", "", tiny, tiny, 22, 40, 10, HeuristicMeasurer())

        assert [run.text for run in result.runs] == ["a", "b"]

    def test_negative_padding_then_contract_error(self):
        with pytest.raises(LayoutContractError):
            create_inline_layout("Q", "A", QUESTION_STYLE, ANSWER_STYLE, 100, 100, -1)


class TestBlockLayout:
    """Tests for create_block_layout() and block_areas()."""

    def test_left_question_then_percentage_width_and_gap(self, fixed_measurer):
        question, answer = block_areas(
            "Q?", QUESTION_STYLE, 200, 100, 10, QuestionPosition.LEFT, 40, 10, fixed_measurer
        )

        assert question == Area(10, 10, 80, 80)
        assert answer == Area(100, 10, 90, 80)

    def test_bottom_question_then_below_answer(self, fixed_measurer):
        question, answer = block_areas(
            "Q?", QUESTION_STYLE, 200, 100, 10, QuestionPosition.BOTTOM, 40, 10, fixed_measurer
        )

        assert question.y > answer.bottom
        assert question.bottom == pytest.approx(90)

    def test_areas_never_overlap_and_stay_inside_padded_box(self, fixed_measurer):
        """Random boxes, including ones too small for padding and gap."""
        rng = random.Random(20240611)
        words = ["why", "what", "because", "a", "longer-question-word"]

        for _ in range(300):
            width = rng.uniform(0, 400)
            height = rng.uniform(0, 300)
            padding = rng.uniform(0, 40)
            position = rng.choice(list(QuestionPosition))
            text = " ".join(rng.choice(words) for _ in range(rng.randint(0, 8)))

            question, answer = block_areas(
                text, QUESTION_STYLE, width, height, padding, position,
                rng.uniform(0, 100), rng.uniform(0, 50), fixed_measurer,
            )

            box = Area(padding, padding, max(0.0, width - padding * 2), max(0.0, height - padding * 2))
            assert box.contains(question, tolerance=1e-6)
            assert box.contains(answer, tolerance=1e-6)
            assert not question.overlaps(answer)
            assert question.width >= 0 and question.height >= 0
            assert answer.width >= 0 and answer.height >= 0

    def test_runs_then_inside_their_areas(self, fixed_measurer):
        result = create_block_layout(
            "Name your pets", "Rex and Tom and Bella", QUESTION_STYLE, ANSWER_STYLE,
            200, 100, 10, fixed_measurer,
        )

        question_runs = [run for run in result.runs if run.style is QUESTION_STYLE]
        answer_runs = [run for run in result.runs if run.style is ANSWER_STYLE]
        assert question_runs and answer_runs
        for run in question_runs:
            assert result.question_area.x <= run.x and run.right <= result.question_area.right
        for run in answer_runs:
            assert result.answer_area.x <= run.x and run.right <= result.answer_area.right

    def test_ruled_lines_target_then_only_that_half_has_slots(self, fixed_measurer):
        question_lines = create_block_layout(
            "Q one two three", "", QUESTION_STYLE, ANSWER_STYLE, 200, 100, 10, fixed_measurer,
            ruled_lines_target=RuledLinesTarget.QUESTION,
        )
        answer_lines = create_block_layout(
            "Q one two three", "", QUESTION_STYLE, ANSWER_STYLE, 200, 100, 10, fixed_measurer,
            ruled_lines_target=RuledLinesTarget.ANSWER,
        )

        assert question_lines.line_positions
        assert answer_lines.line_positions == ()

    def test_content_height_then_element_height(self, fixed_measurer):
        result = create_block_layout("Q", "A " * 50, QUESTION_STYLE, ANSWER_STYLE, 200, 60, 10, fixed_measurer)

        assert result.content_height == 60


class TestDispatch:
    def test_block_variant_then_other_variant_options_ignored(self, fixed_measurer):
        result = create_layout(
            "block", "Q", "A", QUESTION_STYLE, ANSWER_STYLE, 200, 100, 10, fixed_measurer,
            answer_in_new_row=True, question_position=QuestionPosition.TOP,
        )

        assert result.question_area is not None
        assert result.question_area.y < result.answer_area.y

    def test_unknown_variant_then_value_error(self):
        with pytest.raises(ValueError):
            create_layout("grid", "Q", "A", QUESTION_STYLE, ANSWER_STYLE, 200, 100, 10)

    def test_layout_for_element_then_kind_picks_variant(self, fixed_measurer):
        inline = QnAElement(
            id="q1", kind=ElementKind.QNA_INLINE, width=200, height=100,
            question_text="Q?", answer_text="A",
        )
        block = QnAElement(
            id="q2", kind=ElementKind.QNA_BLOCK, width=200, height=100,
            question_text="Q?", answer_text="A", question_position=QuestionPosition.RIGHT,
        )

        inline_result = layout_for_element(inline, fixed_measurer)
        block_result = layout_for_element(block, fixed_measurer)

        assert inline_result.question_area is None
        assert block_result.question_area.x > block_result.answer_area.x
        assert QnALayoutVariant("inline") is QnALayoutVariant.INLINE

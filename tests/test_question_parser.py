"""
Tests for the tabular question parser.

Tests cover:
- Header detection
- Row level skipping and the matching counters
- Duplicate ids, answer range and option checks
- Cell normalization
"""

import math

import pytest

from quizwhiz_app.core.error_handlers import ParseError
from quizwhiz_app.modules.quiz.logics.parser import (
    cell_text,
    is_header_row,
    parse_question_rows,
    to_integer,
)

HEADER = ['Q ID', 'Question', 'A', 'B', 'C', 'D', 'Answer']


class TestHeaderDetection:

    def test_text_header_is_skipped(self):
        rows = [HEADER, [1, 'What is 2+2?', '3', '4', '5', '6', 2]]
        questions, stats = parse_question_rows(rows, 'math.xlsx')

        assert [q.id for q in questions] == [1]
        assert stats.total_rows == 2
        assert stats.valid_questions == 1

    def test_numeric_first_row_is_data(self):
        rows = [[1, 'What is 2+2?', '3', '4', '5', '6', 2]]
        questions, _ = parse_question_rows(rows, 'math.xlsx')

        assert len(questions) == 1
        assert questions[0].options[questions[0].correct_answer_index] == '4'

    def test_numeric_text_in_first_cell_is_data(self):
        assert is_header_row(['7', 'Q', 'a', 'b', 'c', 'd', 1]) is False
        assert is_header_row(['  ', 'Q']) is False
        assert is_header_row([None, 'Q']) is False
        assert is_header_row([]) is False


class TestRowSkipping:

    def test_short_row_counts_as_malformed(self):
        rows = [HEADER, [2, 'Short row', 'A', 'B'], [3, 'Ok?', 'x', 'y', 'z', 'w', 1]]
        questions, stats = parse_question_rows(rows, 'f.xlsx')

        assert [q.id for q in questions] == [3]
        assert stats.malformed_rows == 1

    def test_empty_rows_are_counted(self):
        rows = [HEADER, [None] * 7, ['  ', '', None, None, None, None, None], []]
        questions, stats = parse_question_rows(rows, 'f.xlsx')

        assert questions == []
        assert stats.empty_rows == 3

    @pytest.mark.parametrize('raw_id', [0, -4, 'abc', None, 2.5, True])
    def test_invalid_ids(self, raw_id):
        rows = [HEADER, [raw_id, 'Q?', 'a', 'b', 'c', 'd', 1]]
        questions, stats = parse_question_rows(rows, 'f.xlsx')

        assert questions == []
        assert stats.invalid_id_rows == 1

    def test_blank_question_text(self):
        rows = [HEADER, [1, '   ', 'a', 'b', 'c', 'd', 1]]
        questions, stats = parse_question_rows(rows, 'f.xlsx')

        assert questions == []
        assert stats.empty_question_rows == 1

    @pytest.mark.parametrize('answer', [0, 5, 'x', None, 1.5])
    def test_answer_out_of_range(self, answer):
        rows = [HEADER, [1, 'Q?', 'a', 'b', 'c', 'd', answer]]
        questions, stats = parse_question_rows(rows, 'f.xlsx')

        assert questions == []
        assert stats.invalid_answer_rows == 1

    def test_empty_correct_option(self):
        rows = [HEADER, [1, 'Q?', 'a', 'b', '  ', 'd', 3]]
        questions, stats = parse_question_rows(rows, 'f.xlsx')

        assert questions == []
        assert stats.invalid_answer_rows == 1

    def test_other_options_may_be_empty(self):
        rows = [HEADER, [1, 'True or false?', 'True', 'False', None, None, 2]]
        questions, _ = parse_question_rows(rows, 'f.xlsx')

        assert questions[0].options == ('True', 'False', '', '')
        assert questions[0].correct_answer_index == 1


class TestDuplicateIds:

    def test_first_occurrence_wins(self):
        rows = [
            HEADER,
            [5, 'First?', 'a', 'b', 'c', 'd', 1],
            [5, 'Second?', 'a', 'b', 'c', 'd', 2],
            [5, 'Third?', 'a', 'b', 'c', 'd', 3],
        ]
        questions, stats = parse_question_rows(rows, 'f.xlsx')

        assert len(questions) == 1
        assert questions[0].question == 'First?'
        assert stats.duplicate_ids == 2

    def test_seen_ids_do_not_leak_between_calls(self):
        rows = [HEADER, [1, 'Q?', 'a', 'b', 'c', 'd', 1]]
        parse_question_rows(rows, 'first.xlsx')
        questions, stats = parse_question_rows(rows, 'second.xlsx')

        assert len(questions) == 1
        assert stats.duplicate_ids == 0

    def test_id_of_rejected_row_still_blocks_later_rows(self):
        rows = [
            HEADER,
            [9, 'Bad answer', 'a', 'b', 'c', 'd', 7],
            [9, 'Good?', 'a', 'b', 'c', 'd', 1],
        ]
        questions, stats = parse_question_rows(rows, 'f.xlsx')

        assert questions == []
        assert stats.invalid_answer_rows == 1
        assert stats.duplicate_ids == 1


class TestOutputInvariants:

    def test_order_and_range_invariant(self):
        rows = [HEADER] + [
            [i, f'Q{i}?', 'a', 'b', 'c', 'd', (i % 4) + 1] for i in range(1, 21)
        ]
        questions, stats = parse_question_rows(rows, 'f.xlsx')

        assert [q.id for q in questions] == list(range(1, 21))
        assert stats.valid_questions == 20
        for question in questions:
            assert 0 <= question.correct_answer_index <= 3
            assert question.options[question.correct_answer_index].strip() != ''

    def test_parsing_is_idempotent(self):
        rows = [
            HEADER,
            [1, 'Q1?', 'a', 'b', 'c', 'd', 1],
            [1, 'dup', 'a', 'b', 'c', 'd', 1],
            [2, 'short'],
            [3, 'Q3?', 'a', 'b', 'c', 'd', 4],
        ]
        first = parse_question_rows(rows, 'f.xlsx')
        second = parse_question_rows(rows, 'f.xlsx')

        assert first == second

    def test_numeric_strings_and_floats_are_accepted(self):
        rows = [[' 12 ', ' Padded? ', 1.0, 2.5, ' c ', 'd', '3']]
        questions, _ = parse_question_rows(rows, 'f.xlsx')

        assert questions[0].id == 12
        assert questions[0].question == 'Padded?'
        assert questions[0].options == ('1', '2.5', 'c', 'd')
        assert questions[0].correct_answer_index == 2


class TestStructuralFailures:

    @pytest.mark.parametrize('rows', [None, 'not rows', 42, [1, 2, 3]])
    def test_non_tabular_input_raises(self, rows):
        with pytest.raises(ParseError):
            parse_question_rows(rows, 'broken.xlsx')

    def test_empty_input_is_not_an_error(self):
        questions, stats = parse_question_rows([], 'empty.xlsx')

        assert questions == []
        assert stats.total_rows == 0


def test_cell_helpers():
    assert to_integer(3.0) == 3
    assert to_integer('4') == 4
    assert to_integer(float('nan')) is None
    assert cell_text(None) == ''
    assert cell_text(math.nan) == ''
    assert cell_text(4.0) == '4'
    assert cell_text('  x ') == 'x'

"""Tests for reading quiz spreadsheets into raw rows."""
from __future__ import annotations

import io
from unittest.mock import patch

import pandas as pd
import pytest

from conftest import HEADER, build_workbook_bytes
from quizwhiz_app.core.error_handlers import SourceUnreadable
from quizwhiz_app.utils.excel import has_supported_extension, read_quiz_sheet_rows
from quizwhiz_app.utils import excel as excel_utils


def test_reads_first_sheet_rows():
    content = build_workbook_bytes([HEADER, [1, 'Q?', 'a', 'b', 'c', 'd', 2]])

    rows, hidden = read_quiz_sheet_rows(content, 'quiz.xlsx')

    assert hidden == 0
    assert rows[0] == HEADER
    assert rows[1] == [1, 'Q?', 'a', 'b', 'c', 'd', 2]


def test_skips_hidden_sheets():
    content = build_workbook_bytes(
        [HEADER, [10, 'Visible?', 'a', 'b', 'c', 'd', 1]],
        hidden_first=[HEADER, [99, 'Hidden?', 'a', 'b', 'c', 'd', 1]],
    )

    rows, hidden = read_quiz_sheet_rows(content, 'quiz.xlsx')

    assert hidden == 1
    assert rows[1][0] == 10


def test_only_first_visible_sheet_is_used():
    content = build_workbook_bytes(
        [HEADER, [1, 'First?', 'a', 'b', 'c', 'd', 1]],
        extra_sheets={'Other': [HEADER, [2, 'Second?', 'a', 'b', 'c', 'd', 1]]},
    )

    rows, _ = read_quiz_sheet_rows(content, 'quiz.xlsx')

    assert [row[0] for row in rows[1:]] == [1]


def test_short_rows_are_padded_to_sheet_width():
    content = build_workbook_bytes([HEADER, [2, 'Short row', 'A', 'B']])

    rows, _ = read_quiz_sheet_rows(content, 'quiz.xlsx')

    assert rows[1] == [2, 'Short row', 'A', 'B', None, None, None]


def test_pandas_written_workbook_is_readable():
    buffer = io.BytesIO()
    df = pd.DataFrame([[1, 'Q?', 'a', 'b', 'c', 'd', 3]], columns=HEADER)
    with pd.ExcelWriter(buffer, engine='openpyxl') as writer:
        df.to_excel(writer, sheet_name='Data', index=False)

    rows, _ = read_quiz_sheet_rows(buffer.getvalue(), 'quiz.xlsx')

    assert rows[0] == HEADER
    assert rows[1][6] == 3


@pytest.mark.parametrize('content', [b'', b'definitely not a zip archive'])
def test_unreadable_content(content):
    with pytest.raises(SourceUnreadable):
        read_quiz_sheet_rows(content, 'broken.xlsx')


def test_supported_extensions():
    assert has_supported_extension('a.xlsx')
    assert has_supported_extension('B.XLS')
    assert not has_supported_extension('notes.csv')
    assert not has_supported_extension('xlsx')


def test_workbook_is_opened_read_only():
    content = build_workbook_bytes([HEADER, [1, 'Q?', 'a', 'b', 'c', 'd', 2]])

    with patch.object(excel_utils, 'load_workbook', wraps=excel_utils.load_workbook) as opener:
        rows, _ = read_quiz_sheet_rows(content, 'quiz.xlsx')

    assert opener.call_args.kwargs == {'read_only': True, 'data_only': True}
    assert rows[1] == [1, 'Q?', 'a', 'b', 'c', 'd', 2]

"""
Question Parser - Pure functions turning a raw sheet into Question records.

This module contains ONLY pure Python logic.
NO Flask dependencies allowed. The sheet arrives as a list of rows of raw
cell values (whatever the spreadsheet reader produced).

Expected column layout::

    ID | Question | Option 1 | Option 2 | Option 3 | Option 4 | Correct (1-4)
"""
from __future__ import annotations

import logging
import math
from collections.abc import Sequence
from typing import Any, List, Optional, Set, Tuple

from quizwhiz_app.core.error_handlers import ParseError
from ..schemas import OPTION_COUNT, ParseStats, Question

logger = logging.getLogger(__name__)

MIN_COLUMNS = 2 + OPTION_COUNT + 1
ID_COLUMN = 0
QUESTION_COLUMN = 1
FIRST_OPTION_COLUMN = 2
ANSWER_COLUMN = FIRST_OPTION_COLUMN + OPTION_COUNT


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, float) and math.isnan(value):
        return True
    return str(value).strip() == ''


def to_number(value: Any) -> Optional[float]:
    """
    Interpret a cell as a number.

    Returns None for blanks, text that is not numeric, booleans and any
    other cell type (dates, errors).
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            number = float(text)
        except ValueError:
            return None
    else:
        return None
    if math.isnan(number) or math.isinf(number):
        return None
    return number


def to_integer(value: Any) -> Optional[int]:
    """Return the cell as an int when it holds a whole number, else None."""
    number = to_number(value)
    if number is None or not number.is_integer():
        return None
    return int(number)


def cell_text(value: Any) -> str:
    """Stringify and trim a cell. Whole floats lose their ``.0``."""
    if _is_blank(value):
        return ''
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value).strip()


def is_empty_row(row: Sequence) -> bool:
    return all(_is_blank(cell) for cell in row)


def is_header_row(row: Optional[Sequence]) -> bool:
    """A header's first cell is non-blank text that does not read as a number."""
    if not row:
        return False
    first_cell = row[0]
    return (
        isinstance(first_cell, str)
        and first_cell.strip() != ''
        and to_number(first_cell) is None
    )


def _check_rows(rows: Any, source_label: str) -> List[Sequence]:
    if rows is None or isinstance(rows, (str, bytes)) or not isinstance(rows, Sequence):
        raise ParseError(f"'{source_label}' does not contain tabular data", source=source_label)
    checked = []
    for index, row in enumerate(rows):
        if row is None:
            checked.append(())
            continue
        if isinstance(row, (str, bytes)) or not isinstance(row, Sequence):
            raise ParseError(
                f"Row {index + 1} of '{source_label}' is not a sequence of cells",
                source=source_label,
            )
        checked.append(row)
    return checked


def parse_question_rows(rows: Any, source_label: str = '<sheet>') -> Tuple[List[Question], ParseStats]:
    """
    Convert raw sheet rows into validated, de-duplicated questions.

    Bad rows are skipped and counted in the returned ``ParseStats``; the
    function only raises ``ParseError`` when ``rows`` is not a sequence of
    rows at all. Output keeps the order of the source rows; for repeated ids
    the first row wins.
    """
    rows = _check_rows(rows, source_label)
    stats = ParseStats(total_rows=len(rows))
    questions: List[Question] = []
    seen_ids: Set[int] = set()

    start_index = 1 if rows and is_header_row(rows[0]) else 0

    for row_index in range(start_index, len(rows)):
        row = rows[row_index]
        row_number = row_index + 1

        if len(row) == 0 or is_empty_row(row):
            stats.empty_rows += 1
            continue

        if len(row) < MIN_COLUMNS:
            logger.warning(
                f"Skipping malformed row {row_number} in {source_label} "
                f"(expected {MIN_COLUMNS} columns, got {len(row)})"
            )
            stats.malformed_rows += 1
            continue

        question_id = to_integer(row[ID_COLUMN])
        question_text = cell_text(row[QUESTION_COLUMN])
        options = tuple(
            cell_text(row[column])
            for column in range(FIRST_OPTION_COLUMN, FIRST_OPTION_COLUMN + OPTION_COUNT)
        )
        answer_number = to_integer(row[ANSWER_COLUMN])

        if question_id is None or question_id <= 0:
            logger.warning(
                f"Skipping row {row_number} in {source_label} due to invalid ID (value: {row[ID_COLUMN]!r})"
            )
            stats.invalid_id_rows += 1
            continue

        if question_id in seen_ids:
            logger.warning(f"Duplicate ID {question_id} found in row {row_number} of {source_label}. Skipping duplicate.")
            stats.duplicate_ids += 1
            continue
        seen_ids.add(question_id)

        if not question_text:
            logger.warning(f"Skipping row {row_number} in {source_label} due to empty question text")
            stats.empty_question_rows += 1
            continue

        if answer_number is None or not 1 <= answer_number <= OPTION_COUNT:
            logger.warning(
                f"Skipping row {row_number} in {source_label} due to invalid correct answer "
                f"(value: {row[ANSWER_COLUMN]!r}, must be 1-{OPTION_COUNT})"
            )
            stats.invalid_answer_rows += 1
            continue

        if not options[answer_number - 1]:
            logger.warning(
                f"Skipping row {row_number} in {source_label} because the correct option "
                f"(number {answer_number}) is empty"
            )
            stats.invalid_answer_rows += 1
            continue

        questions.append(Question(
            id=question_id,
            question=question_text,
            options=options,
            correct_answer_index=answer_number - 1,
        ))
        stats.valid_questions += 1

    logger.info(
        f"Parsed {source_label}: {stats.valid_questions} questions from {stats.total_rows} rows "
        f"(empty={stats.empty_rows}, malformed={stats.malformed_rows}, invalid_id={stats.invalid_id_rows}, "
        f"empty_question={stats.empty_question_rows}, invalid_answer={stats.invalid_answer_rows}, "
        f"duplicates={stats.duplicate_ids})"
    )
    return questions, stats

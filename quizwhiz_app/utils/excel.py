"""Helper utilities for reading quiz spreadsheets into raw rows."""
from __future__ import annotations

import io
import logging
import os
from typing import Any, List, Tuple

import pandas as pd
from openpyxl import load_workbook

from quizwhiz_app.core.error_handlers import SourceUnreadable

logger = logging.getLogger(__name__)

OPENPYXL_EXTENSIONS = ('.xlsx', '.xlsm')
LEGACY_EXTENSIONS = ('.xls',)
SUPPORTED_EXTENSIONS = OPENPYXL_EXTENSIONS + LEGACY_EXTENSIONS


def has_supported_extension(file_name: str, extensions: Tuple[str, ...] = SUPPORTED_EXTENSIONS) -> bool:
    return os.path.splitext(str(file_name))[1].lower() in extensions


def read_quiz_sheet_rows(content: bytes, file_name: str) -> Tuple[List[List[Any]], int]:
    """
    Return the rows of the first visible sheet and the number of hidden sheets.

    Cells keep their raw values (numbers stay numbers, blanks are ``None``).
    Raises ``SourceUnreadable`` when the bytes are empty, cannot be opened as
    a workbook, or the workbook has no visible sheet.
    """
    if not content:
        raise SourceUnreadable(f"File '{file_name}' is empty.", source=file_name)

    extension = os.path.splitext(str(file_name))[1].lower()
    if extension in LEGACY_EXTENSIONS:
        return _read_legacy_rows(content, file_name)
    return _read_openpyxl_rows(content, file_name)


def _read_openpyxl_rows(content: bytes, file_name: str) -> Tuple[List[List[Any]], int]:
    try:
        wb = load_workbook(io.BytesIO(content), read_only=True, data_only=True)
    except Exception as exc:
        logger.warning(f"Could not open workbook {file_name}: {exc}")
        raise SourceUnreadable(f"Could not read '{file_name}' as a spreadsheet: {exc}", source=file_name) from exc

    try:
        visible_sheets = [ws for ws in wb.worksheets if ws.sheet_state == 'visible']
        hidden_count = len(wb.worksheets) - len(visible_sheets)
        if not visible_sheets:
            raise SourceUnreadable(f"No visible sheets found in '{file_name}'.", source=file_name)

        ws = visible_sheets[0]
        logger.info(
            f"Processing file {file_name}: found {len(wb.worksheets)} total sheets, "
            f"{len(visible_sheets)} visible, using '{ws.title}'"
        )
        rows = [list(row) for row in ws.iter_rows(values_only=True)]
    finally:
        wb.close()

    # Read-only sheets trust the stored dimension, which some writers omit
    width = max((len(row) for row in rows), default=0)
    return [row + [None] * (width - len(row)) for row in rows], hidden_count


def _read_legacy_rows(content: bytes, file_name: str) -> Tuple[List[List[Any]], int]:
    try:
        excel_file = pd.ExcelFile(io.BytesIO(content), engine='xlrd')
    except Exception as exc:
        logger.warning(f"Could not open legacy workbook {file_name}: {exc}")
        raise SourceUnreadable(f"Could not read '{file_name}' as a spreadsheet: {exc}", source=file_name) from exc

    with excel_file:
        book = excel_file.book
        visible_names = [
            name for name in excel_file.sheet_names
            if getattr(book.sheet_by_name(name), 'visibility', 0) == 0
        ]
        hidden_count = len(excel_file.sheet_names) - len(visible_names)
        if not visible_names:
            raise SourceUnreadable(f"No visible sheets found in '{file_name}'.", source=file_name)

        df = excel_file.parse(visible_names[0], header=None)

    df = df.astype(object).where(pd.notna(df), None)
    return df.values.tolist(), hidden_count

"""
Quiz File Loader Service

Fetches one quiz spreadsheet, reads its first visible sheet and parses it
into questions. Byte retrieval is injected; the default fetcher reads from
the configured quiz-files folder.
"""

from __future__ import annotations

import logging
import os
import unicodedata
from typing import Callable, List, Tuple

from quizwhiz_app.core.error_handlers import NoUsableData, QuizWhizError, SourceUnreadable
from quizwhiz_app.utils.excel import has_supported_extension, read_quiz_sheet_rows
from ..logics.parser import parse_question_rows
from ..schemas import ParseStats, Question

logger = logging.getLogger(__name__)

ByteFetcher = Callable[[str], bytes]


def _find_matching_file(folder: str, file_name: str) -> str:
    """Match a file name ignoring case and Unicode normalization form."""
    normalized = unicodedata.normalize('NFC', file_name).lower()
    try:
        candidates = os.listdir(folder)
    except OSError as exc:
        raise SourceUnreadable(f"Quiz folder is not readable: {exc}", source=file_name) from exc

    for candidate in candidates:
        if unicodedata.normalize('NFC', candidate).lower() == normalized:
            return os.path.join(folder, candidate)

    available = [name for name in candidates if has_supported_extension(name)]
    logger.error(f"File not found: {file_name}. Available files: {available}")
    raise SourceUnreadable(f"File '{file_name}' was not found.", source=file_name)


def local_file_fetcher(folder: str) -> ByteFetcher:
    """Build a fetcher reading spreadsheets from ``folder`` only."""

    def fetch(file_name: str) -> bytes:
        if not has_supported_extension(file_name):
            raise SourceUnreadable(f"Invalid file type: '{file_name}'", source=file_name)
        if '..' in file_name or '/' in file_name or '\\' in file_name:
            raise SourceUnreadable(f"Invalid file name: '{file_name}'", source=file_name)

        file_path = os.path.join(folder, unicodedata.normalize('NFC', file_name))
        if not os.path.isfile(file_path):
            file_path = _find_matching_file(folder, file_name)

        try:
            with open(file_path, 'rb') as handle:
                return handle.read()
        except OSError as exc:
            raise SourceUnreadable(f"Could not read '{file_name}': {exc}", source=file_name) from exc

    return fetch


class QuizFileLoader:
    """Turns a quiz file identifier into a list of questions."""

    def __init__(self, fetch_bytes: ByteFetcher):
        self.fetch_bytes = fetch_bytes

    def load_with_stats(self, path: str) -> Tuple[List[Question], ParseStats]:
        """
        Load and parse one file.

        Raises:
            SourceUnreadable: bytes could not be obtained or decoded.
            NoUsableData: the sheet produced no valid question.
        """
        try:
            content = self.fetch_bytes(path)
        except QuizWhizError:
            raise
        except Exception as exc:
            logger.error(f"Error loading quiz data from {path}: {exc}")
            raise SourceUnreadable(f"Could not load or parse quiz data from '{path}'. {exc}", source=path) from exc

        rows, hidden_sheets = read_quiz_sheet_rows(content, path)
        questions, stats = parse_question_rows(rows, source_label=path)
        stats.hidden_sheets = hidden_sheets

        if not questions:
            logger.warning(
                f"No valid questions were processed from '{path}' ({stats.total_rows} rows). "
                "Check data format and the skipped-row warnings."
            )
            raise NoUsableData(
                f"No valid questions found in '{path}'.",
                source=path,
                stats=stats.to_dict(),
            )

        return questions, stats

    def load(self, path: str) -> List[Question]:
        questions, _ = self.load_with_stats(path)
        return questions

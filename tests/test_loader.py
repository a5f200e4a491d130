"""Tests for loading one quiz file into questions."""

import unicodedata

import pytest

from conftest import HEADER, build_workbook_bytes, make_rows
from quizwhiz_app.core.error_handlers import NoUsableData, SourceUnreadable
from quizwhiz_app.modules.quiz.services.loader_service import QuizFileLoader, local_file_fetcher


class TestQuizFileLoader:

    def test_load_with_stats(self):
        rows = make_rows(3) + [[3, 'dup', 'a', 'b', 'c', 'd', 1], [None] * 7]
        loader = QuizFileLoader(lambda path: build_workbook_bytes(rows))

        questions, stats = loader.load_with_stats('quiz.xlsx')

        assert [q.id for q in questions] == [1, 2, 3]
        assert stats.duplicate_ids == 1
        assert stats.empty_rows == 1
        assert stats.hidden_sheets == 0

    def test_no_valid_questions_raises_no_usable_data(self):
        rows = [HEADER, [0, 'bad id', 'a', 'b', 'c', 'd', 1]]
        loader = QuizFileLoader(lambda path: build_workbook_bytes(rows))

        with pytest.raises(NoUsableData) as excinfo:
            loader.load('quiz.xlsx')

        assert excinfo.value.details['stats']['invalid_id_rows'] == 1

    def test_empty_bytes_are_unreadable(self):
        loader = QuizFileLoader(lambda path: b'')

        with pytest.raises(SourceUnreadable):
            loader.load('quiz.xlsx')

    def test_fetch_errors_become_source_unreadable(self):
        def failing_fetch(path):
            raise ConnectionError('offline')

        with pytest.raises(SourceUnreadable) as excinfo:
            QuizFileLoader(failing_fetch).load('quiz.xlsx')

        assert 'offline' in excinfo.value.message


class TestLocalFileFetcher:

    def test_reads_file_from_folder(self, quiz_folder, write_quiz_file):
        write_quiz_file('bank.xlsx', make_rows(2))

        content = local_file_fetcher(str(quiz_folder))('bank.xlsx')

        assert content[:2] == b'PK'

    @pytest.mark.parametrize('name', ['../secret.xlsx', 'sub/bank.xlsx', 'sub\\bank.xlsx', 'bank.csv'])
    def test_rejects_unsafe_names(self, quiz_folder, name):
        with pytest.raises(SourceUnreadable):
            local_file_fetcher(str(quiz_folder))(name)

    def test_missing_file(self, quiz_folder):
        with pytest.raises(SourceUnreadable):
            local_file_fetcher(str(quiz_folder))('missing.xlsx')

    def test_matches_case_and_unicode_normalization(self, quiz_folder, write_quiz_file):
        stored_name = unicodedata.normalize('NFD', 'Kế Toán.xlsx')
        write_quiz_file(stored_name, make_rows(1))

        fetch = local_file_fetcher(str(quiz_folder))
        questions = QuizFileLoader(fetch).load(unicodedata.normalize('NFC', 'kế toán.xlsx'))

        assert len(questions) == 1

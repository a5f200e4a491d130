import json
import os
import sys

import pytest
from openpyxl import Workbook

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from quizwhiz_app import create_app
from quizwhiz_app.config import Config
from quizwhiz_app.modules.quiz.schemas import Question


class TestConfig(Config):
    TESTING = True
    SECRET_KEY = 'test-secret'
    LOG_DIR = ''
    LOG_LEVEL = 'DEBUG'
    QUIZ_EXAM_DURATION_SECONDS = 7200
    QUIZ_COMMON_KNOWLEDGE_TAG = 'Kiến thức chung'
    QUIZ_ROLES = ['Kế toán', 'Kiểm ngân', 'Tín dụng', 'Quản lý']


HEADER = ['Q ID', 'Question', 'A', 'B', 'C', 'D', 'Answer']


def build_workbook_bytes(rows, *, hidden_first=None, extra_sheets=None):
    """Serialize ``rows`` into an .xlsx payload (optionally behind a hidden sheet)."""
    import io

    wb = Workbook()
    ws = wb.active
    if hidden_first is not None:
        ws.title = 'Hidden'
        for row in hidden_first:
            ws.append(row)
        ws.sheet_state = 'hidden'
        ws = wb.create_sheet('Data')
        wb.active = ws
    else:
        ws.title = 'Data'
    for row in rows:
        ws.append(row)
    for title, sheet_rows in (extra_sheets or {}).items():
        extra = wb.create_sheet(title)
        for row in sheet_rows:
            extra.append(row)

    buffer = io.BytesIO()
    wb.save(buffer)
    return buffer.getvalue()


def make_rows(count, start_id=1, prefix='Question'):
    rows = [HEADER]
    for offset in range(count):
        question_id = start_id + offset
        rows.append([question_id, f'{prefix} {question_id}?', 'A1', 'B1', 'C1', 'D1', (offset % 4) + 1])
    return rows


def make_question(question_id=1, correct=0, text=None):
    return Question(
        id=question_id,
        question=text or f'Question {question_id}?',
        options=('a', 'b', 'c', 'd'),
        correct_answer_index=correct,
    )


@pytest.fixture
def quiz_folder(tmp_path):
    folder = tmp_path / 'public'
    folder.mkdir()
    return folder


@pytest.fixture
def write_quiz_file(quiz_folder):
    def _write(file_name, rows, **kwargs):
        path = quiz_folder / file_name
        path.write_bytes(build_workbook_bytes(rows, **kwargs))
        return path
    return _write


@pytest.fixture
def write_manifest(quiz_folder):
    def _write(entries, file_name='quiz-files.json'):
        path = quiz_folder / file_name
        path.write_text(json.dumps(entries, ensure_ascii=False), encoding='utf-8')
        return path
    return _write


@pytest.fixture
def app(quiz_folder):
    class _Config(TestConfig):
        QUIZ_FILES_FOLDER = str(quiz_folder)

    app = create_app(_Config)
    with app.app_context():
        yield app


@pytest.fixture
def client(app):
    return app.test_client()

# File: quizwhiz_app/config.py
# Cấu hình ứng dụng Quiz Whiz, đọc từ biến môi trường (.env).

import os
from dotenv import load_dotenv

load_dotenv()

# Thư mục gốc của dự án: file này nằm ở quizwhiz_app/ nên đi lên 1 cấp
BASE_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))


def _env_int(name, default):
    raw_value = os.environ.get(name)
    if raw_value is None or raw_value.strip() == '':
        return default
    try:
        return int(raw_value)
    except ValueError:
        return default


def _env_list(name, default):
    raw_value = os.environ.get(name)
    if not raw_value:
        return list(default)
    return [part.strip() for part in raw_value.split(',') if part.strip()]


class Config:
    """Cấu hình ứng dụng Quiz Whiz."""

    SECRET_KEY = os.environ.get('SECRET_KEY')
    if not SECRET_KEY:
        # Fallback for development, though env is preferred
        SECRET_KEY = 'dev-secret-key-replace-in-production'

    # Folder holding the spreadsheets and the quiz-files.json manifest
    QUIZ_FILES_FOLDER = os.environ.get('QUIZ_FILES_FOLDER') or os.path.join(BASE_DIR, 'public')
    QUIZ_MANIFEST_FILE = os.environ.get('QUIZ_MANIFEST_FILE', 'quiz-files.json')

    QUIZ_EXAM_DURATION_SECONDS = _env_int('QUIZ_EXAM_DURATION_SECONDS', 7200)
    QUIZ_EXAM_MAX_WORKERS = _env_int('QUIZ_EXAM_MAX_WORKERS', 4)
    QUIZ_DEFAULT_QUESTION_COUNT = _env_int('QUIZ_DEFAULT_QUESTION_COUNT', 10)

    QUIZ_ROLES = _env_list('QUIZ_ROLES', ['Kế toán', 'Kiểm ngân', 'Tín dụng', 'Quản lý'])
    QUIZ_COMMON_KNOWLEDGE_TAG = os.environ.get('QUIZ_COMMON_KNOWLEDGE_TAG', 'Kiến thức chung')

    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')
    LOG_DIR = os.environ.get('LOG_DIR') or os.path.join(BASE_DIR, 'logs')
    LOG_JSON_FORMAT = os.environ.get('LOG_JSON_FORMAT', '').lower() in ('1', 'true', 'yes')
    LOG_MAX_BYTES = _env_int('LOG_MAX_BYTES', 10 * 1024 * 1024)
    LOG_BACKUP_COUNT = _env_int('LOG_BACKUP_COUNT', 5)

    JSON_AS_ASCII = False

    @classmethod
    def init_app(cls, app):
        """Khởi tạo các thư mục cần thiết."""
        os.makedirs(app.config.get('QUIZ_FILES_FOLDER', cls.QUIZ_FILES_FOLDER), exist_ok=True)

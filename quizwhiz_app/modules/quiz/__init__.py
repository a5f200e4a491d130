"""Quiz module: file catalog, question loading, exams and quiz sessions."""

from flask import Blueprint

blueprint = Blueprint('quiz', __name__)

# Module Metadata
module_metadata = {
    'name': 'Quizzes',
    'icon': 'circle-question',
    'category': 'Learning',
    'url_prefix': '/quiz',
    'enabled': True
}

# Đăng ký routes của module
from .routes import api  # noqa: E402,F401

"""
Error Handlers for Quiz Whiz

Provides:
- The quiz pipeline exception taxonomy
- Consistent error response format
- Flask error handlers
"""

from flask import jsonify, request, current_app
from typing import Optional, Dict, Any


class QuizWhizError(Exception):
    """Base exception class for Quiz Whiz."""

    def __init__(
        self,
        message: str,
        code: str = 'UNKNOWN_ERROR',
        status_code: int = 500,
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict:
        """Convert error to dictionary for JSON response."""
        return {
            'success': False,
            'message': self.message,
            'code': self.code,
            'details': self.details
        }


class ParseError(QuizWhizError):
    """The input could not be interpreted as tabular data at all."""

    def __init__(self, message: str = 'Input is not tabular data', source: str = None):
        super().__init__(
            message=message,
            code='PARSE_ERROR',
            status_code=422,
            details={'source': source} if source else None
        )


class SourceUnreadable(QuizWhizError):
    """The raw file bytes could not be obtained or decoded."""

    def __init__(self, message: str = 'Could not load this file', source: str = None):
        super().__init__(
            message=message,
            code='SOURCE_UNREADABLE',
            status_code=422,
            details={'source': source} if source else None
        )


class NoUsableData(QuizWhizError):
    """The file was read but produced zero valid questions."""

    def __init__(self, message: str = 'No valid questions in this file', source: str = None,
                 stats: Dict[str, int] = None):
        details = {}
        if source:
            details['source'] = source
        if stats:
            details['stats'] = stats
        super().__init__(
            message=message,
            code='NO_USABLE_DATA',
            status_code=422,
            details=details
        )


class NoFilesForRole(QuizWhizError):
    """The catalog has no quiz files for the requested role."""

    def __init__(self, message: str = 'No quiz files available', role: str = None):
        super().__init__(
            message=message,
            code='NO_FILES_FOR_ROLE',
            status_code=404,
            details={'role': role} if role else None
        )


class NoValidQuestions(QuizWhizError):
    """An exam could not be built from any of the role's files."""

    def __init__(self, message: str = 'Could not build an exam', role: str = None,
                 failed_files: list = None):
        details = {}
        if role:
            details['role'] = role
        if failed_files:
            details['failed_files'] = failed_files
        super().__init__(
            message=message,
            code='NO_VALID_QUESTIONS',
            status_code=422,
            details=details
        )


class InvalidInput(QuizWhizError):
    """Precondition violation by the caller."""

    def __init__(self, message: str = 'Invalid input', errors: Dict = None):
        super().__init__(
            message=message,
            code='INVALID_INPUT',
            status_code=400,
            details={'errors': errors} if errors else None
        )


def error_response(
    message: str,
    code: str = 'ERROR',
    status_code: int = 400,
    details: Dict = None
) -> tuple:
    """Create a standardized error response."""
    response = {
        'success': False,
        'message': message,
        'code': code
    }
    if details:
        response['details'] = details

    return jsonify(response), status_code


def success_response(data: Any = None, message: str = None) -> dict:
    """Create a standardized success response."""
    response = {'success': True}
    if data is not None:
        response['data'] = data
    if message:
        response['message'] = message
    return response


def register_error_handlers(app):
    """Register error handlers with Flask app."""

    @app.errorhandler(QuizWhizError)
    def handle_quizwhiz_error(error):
        if isinstance(error, InvalidInput):
            current_app.logger.warning(f"{error.code}: {error.message}")
        else:
            current_app.logger.error(f"{error.code}: {error.message}")
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(404)
    def handle_not_found(error):
        if '/api/' in request.path:
            return error_response('Endpoint not found', 'NOT_FOUND', 404)
        return error

    @app.errorhandler(500)
    def handle_internal_error(error):
        current_app.logger.exception('Internal server error')
        if '/api/' in request.path:
            return error_response('Internal server error', 'SERVER_ERROR', 500)
        return error

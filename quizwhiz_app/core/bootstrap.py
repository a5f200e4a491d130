"""Bootstrap helpers for configuring the Flask application."""

from __future__ import annotations

from flask import Flask

from .error_handlers import register_error_handlers
from .logging_config import setup_logging
from .module_registry import register_default_modules


def configure_logging(app: Flask) -> None:
    """Configure the package loggers; ``app.logger`` is the ``quizwhiz_app`` logger itself."""

    setup_logging(
        log_level=app.config.get("LOG_LEVEL", "INFO"),
        log_dir=app.config.get("LOG_DIR"),
        json_format=app.config.get("LOG_JSON_FORMAT", False),
        max_bytes=app.config.get("LOG_MAX_BYTES", 10 * 1024 * 1024),
        backup_count=app.config.get("LOG_BACKUP_COUNT", 5),
    )
    app.logger.debug(f"Flask app logger ready ({app.logger.name}).")


def register_blueprints(app: Flask) -> None:
    """Register all default blueprints with the app."""

    register_default_modules(app)


def register_errors(app: Flask) -> None:
    """Attach JSON error handlers for the quiz error taxonomy."""

    register_error_handlers(app)

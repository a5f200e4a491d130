"""Application factory for the Quiz Whiz app."""

from __future__ import annotations

from flask import Flask

from .config import Config
from .core.bootstrap import (
    configure_logging,
    register_blueprints,
    register_errors,
)

__all__ = ["create_app"]


def create_app(config_class: type[Config] = Config) -> Flask:
    """Create and configure a Flask application instance."""

    app = Flask(__name__)
    app.config.from_object(config_class)
    config_class.init_app(app)

    configure_logging(app)
    register_errors(app)
    register_blueprints(app)

    return app

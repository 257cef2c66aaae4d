"""Steps the app factory runs, in order."""

from __future__ import annotations

from flask import Flask

from .error_handlers import register_error_handlers
from .extensions import db
from .logging_config import setup_logging
from .module_registry import register_default_modules


def configure_logging(app: Flask) -> None:
    """Console and rotating-file logging; tests keep Flask's default handler."""

    if app.testing:
        return
    setup_logging(
        app,
        log_level=app.config.get("LOG_LEVEL", "INFO"),
        log_dir=app.config.get("LOG_DIR"),
        json_format=app.config.get("LOG_JSON", False),
    )
    app.logger.propagate = False


def register_extensions(app: Flask) -> None:
    db.init_app(app)


def register_handlers(app: Flask) -> None:
    register_error_handlers(app)


def register_blueprints(app: Flask) -> None:
    register_default_modules(app)


def initialize_database(app: Flask) -> None:
    """Create any missing tables; LangFu ships no migrations."""

    from .. import models  # noqa: F401

    db.create_all()
    app.logger.info("Database ready at %s", app.config.get("SQLALCHEMY_DATABASE_URI"))

"""
Logging for LangFu.

``setup_logging`` attaches a console handler and a size-rotated file handler
to the ``langfu_app`` logger (the Flask app logger). Records can be written
as readable lines or as one JSON object per line. Inside a request every
record is stamped with the request path and the signed-in user id.
"""

import json
import logging
import logging.handlers
import os
from typing import Optional

from flask import g, has_request_context, request

LOGGER_NAME = 'langfu_app'
LOG_FILE_NAME = 'langfu.log'
MAX_LOG_BYTES = 10 * 1024 * 1024
LOG_BACKUPS = 5

TEXT_FORMAT = '%(asctime)s [%(levelname)s] %(module)s %(path)s user=%(user_id)s: %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


class RequestContextFilter(logging.Filter):
    """Adds ``path`` and ``user_id`` attributes; ``-`` outside a request."""

    def filter(self, record):
        record.path = '-'
        record.user_id = '-'
        if has_request_context():
            record.path = request.path
            user = g.get('current_user')
            if user is not None:
                record.user_id = user.user_id
        return True


class JsonLineFormatter(logging.Formatter):

    def format(self, record):
        entry = {
            'time': self.formatTime(record, DATE_FORMAT),
            'level': record.levelname,
            'module': record.module,
            'path': getattr(record, 'path', '-'),
            'user_id': getattr(record, 'user_id', '-'),
            'message': record.getMessage(),
        }
        if record.exc_info:
            entry['exception'] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False, default=str)


def _build_formatter(json_format: bool) -> logging.Formatter:
    if json_format:
        return JsonLineFormatter()
    return logging.Formatter(TEXT_FORMAT, datefmt=DATE_FORMAT)


def setup_logging(
    app=None,
    log_level: str = 'INFO',
    log_dir: Optional[str] = None,
    json_format: bool = False
) -> logging.Logger:
    """
    Configure the LangFu logger. Calling it again replaces the handlers.

    Args:
        app: Flask application; when given, werkzeug access logs are quieted
        log_level: level name, unknown names fall back to INFO
        log_dir: directory for ``langfu.log`` (default: ``logs/`` next to the package)
        json_format: write one JSON object per record
    """
    if log_dir is None:
        log_dir = os.path.join(os.path.dirname(os.path.dirname(os.path.dirname(__file__))), 'logs')
    os.makedirs(log_dir, exist_ok=True)

    level = getattr(logging, log_level.upper(), None)
    if not isinstance(level, int):
        level = logging.INFO

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)

    formatter = _build_formatter(json_format)
    context_filter = RequestContextFilter()

    handlers = [
        logging.StreamHandler(),
        logging.handlers.RotatingFileHandler(
            os.path.join(log_dir, LOG_FILE_NAME),
            maxBytes=MAX_LOG_BYTES,
            backupCount=LOG_BACKUPS,
            encoding='utf-8',
        ),
    ]
    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        handler.addFilter(context_filter)
        logger.addHandler(handler)

    if app is not None:
        logging.getLogger('werkzeug').setLevel(logging.WARNING)

    logger.info("Logging initialized: level=%s, dir=%s, json=%s", logging.getLevelName(level), log_dir, json_format)
    return logger

"""
Error Handlers for LangFu

Every API failure is answered with the same JSON body::

    {"success": false, "error": <message>, "message": <message>, "code": <CODE>}

plus ``details`` when there is something to add. Services raise the
``LangFuError`` subclasses below; routes never build error bodies by hand
except through ``error_response``.
"""

from typing import Any, Dict, Optional

from flask import current_app, jsonify, request
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.exc import SQLAlchemyError


def error_body(message: str, code: str, details: Optional[Dict[str, Any]] = None) -> dict:
    body = {'success': False, 'error': message, 'message': message, 'code': code}
    if details:
        body['details'] = details
    return body


def error_response(message: str, code: str = 'ERROR', status_code: int = 400, details: Dict = None) -> tuple:
    return jsonify(error_body(message, code, details)), status_code


class LangFuError(Exception):
    """Base exception; subclasses set ``code``, ``status_code`` and ``default_message``."""

    code = 'UNKNOWN_ERROR'
    status_code = 500
    default_message = 'Unexpected error'

    def __init__(self, message: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        self.message = message or self.default_message
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict:
        return error_body(self.message, self.code, self.details)


class ValidationError(LangFuError):
    code = 'VALIDATION_ERROR'
    status_code = 400
    default_message = 'Validation failed'

    def __init__(self, message: Optional[str] = None, errors: Dict = None):
        super().__init__(message, {'errors': errors} if errors else None)


class AuthenticationError(LangFuError):
    code = 'UNAUTHORIZED'
    status_code = 401
    default_message = 'Unauthorized'


class NotFoundError(LangFuError):
    """Missing rows and rows owned by someone else look the same."""

    code = 'NOT_FOUND'
    status_code = 404
    default_message = 'Resource not found'

    def __init__(self, message: Optional[str] = None, resource: str = None):
        super().__init__(message, {'resource': resource} if resource else None)


class ReferentialIntegrityError(LangFuError):
    """A write pointed at a row that does not exist."""

    code = 'REFERENTIAL_INTEGRITY'
    status_code = 500
    default_message = 'Referenced record does not exist'

    def __init__(self, message: Optional[str] = None, resource: str = None):
        super().__init__(message, {'resource': resource} if resource else None)


def validation_error_from_pydantic(exc: PydanticValidationError, message: str = 'Missing required fields') -> ValidationError:
    errors = {}
    for err in exc.errors():
        field = '.'.join(str(part) for part in err.get('loc', ())) or 'body'
        errors[field] = err.get('msg')
    return ValidationError(message, errors=errors)


def storage_error_response(message: str, code: str = 'SERVER_ERROR') -> tuple:
    """Roll back the session, log the traceback and answer with a generic 500."""
    from .extensions import db

    db.session.rollback()
    current_app.logger.exception(message)
    return error_response(message, code, 500)


def _is_api_request() -> bool:
    return request.path.startswith('/api/')


def register_error_handlers(app):

    @app.errorhandler(LangFuError)
    def handle_langfu_error(error):
        log = current_app.logger.error if error.status_code >= 500 else current_app.logger.info
        log("%s: %s", error.code, error.message)
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(SQLAlchemyError)
    def handle_storage_error(error):
        return storage_error_response('Database error', 'STORAGE_ERROR')

    @app.errorhandler(404)
    def handle_not_found(error):
        if _is_api_request():
            return error_response('Endpoint not found', 'NOT_FOUND', 404)
        return error

    @app.errorhandler(405)
    def handle_method_not_allowed(error):
        if _is_api_request():
            return error_response('Method not allowed', 'METHOD_NOT_ALLOWED', 405)
        return error

    @app.errorhandler(500)
    def handle_internal_error(error):
        current_app.logger.exception('Internal server error')
        if _is_api_request():
            return error_response('Internal server error', 'SERVER_ERROR', 500)
        return error

"""
Request gate: resolves the session cookie into ``current_user`` and keeps
anonymous visitors out of protected pages and API endpoints.
"""
from typing import Optional

from flask import current_app, g, redirect, request, url_for
from werkzeug.local import LocalProxy

from langfu_app.core.error_handlers import error_response
from . import auth_bp
from .config import AuthModuleDefaultConfig
from .services.auth_service import AuthService


def _get_user():
    return g.get('current_user')


current_user = LocalProxy(_get_user)


def set_auth_cookie(response, token: str):
    config = current_app.config
    g.auth_cookie_written = True
    response.set_cookie(
        config['AUTH_COOKIE_NAME'],
        token,
        max_age=config.get('JWT_EXPIRATION_DAYS', 30) * 24 * 60 * 60,
        path='/',
        secure=config.get('AUTH_COOKIE_SECURE', False),
        httponly=True,
        samesite='Lax',
    )
    return response


def clear_auth_cookie(response):
    config = current_app.config
    g.auth_cookie_written = True
    response.delete_cookie(
        config['AUTH_COOKIE_NAME'],
        path='/',
        secure=config.get('AUTH_COOKIE_SECURE', False),
        httponly=True,
        samesite='Lax',
    )
    return response


def _read_token() -> Optional[str]:
    token = request.cookies.get(current_app.config['AUTH_COOKIE_NAME'])
    if token:
        return token
    header = request.headers.get('Authorization', '')
    if header.startswith(AuthModuleDefaultConfig.BEARER_PREFIX):
        return header[len(AuthModuleDefaultConfig.BEARER_PREFIX):].strip() or None
    return None


def is_public_path(path: str) -> bool:
    if path in AuthModuleDefaultConfig.PUBLIC_PATHS:
        return True
    return any(
        path == prefix or path.startswith(prefix + '/')
        for prefix in AuthModuleDefaultConfig.PUBLIC_PREFIXES
    )


@auth_bp.before_app_request
def load_current_user():
    """Populate ``g.current_user`` and enforce authentication for the request."""
    g.current_user = None
    g.rotated_token = None
    g.stale_cookie = False
    g.auth_cookie_written = False

    token = _read_token()
    if token:
        user, rotate = AuthService.resolve_token(token)
        g.current_user = user
        if user is not None and rotate:
            g.rotated_token = AuthService.issue_token(user)
        elif user is None:
            g.stale_cookie = request.cookies.get(current_app.config['AUTH_COOKIE_NAME']) is not None

    path = request.path
    user = g.current_user

    if user is not None and path in AuthModuleDefaultConfig.GUEST_ONLY_PATHS:
        return redirect(url_for('pages.dashboard'))
    if is_public_path(path) or user is not None:
        return None

    if path.startswith('/api/'):
        return error_response('Unauthorized', 'UNAUTHORIZED', 401)
    return redirect(url_for('pages.login'))


@auth_bp.after_app_request
def refresh_auth_cookie(response):
    """Rotate a recovered token, or drop a cookie that no longer resolves."""
    if g.get('auth_cookie_written'):
        return response
    if g.get('rotated_token'):
        set_auth_cookie(response, g.rotated_token)
    elif g.get('stale_cookie'):
        clear_auth_cookie(response)
    return response
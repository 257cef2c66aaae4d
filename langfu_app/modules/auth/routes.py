# File: langfu_app/modules/auth/routes.py
# JSON endpoints for browser and non-browser clients.
from flask import jsonify

from langfu_app.core.error_handlers import AuthenticationError
from langfu_app.schemas import CredentialsRequest, RegisterRequest
from langfu_app.utils.request_parsing import parse_json_body
from . import auth_bp
from .gate import clear_auth_cookie, set_auth_cookie
from .services.auth_service import AuthService

MISSING_CREDENTIALS = 'Email and password are required'


def _user_payload(user) -> dict:
    data = user.to_dict()
    return {key: data[key] for key in ('id', 'email', 'name', 'currentLanguage')}


@auth_bp.route('/api/auth/register', methods=['POST'])
def register():
    payload = parse_json_body(RegisterRequest, MISSING_CREDENTIALS)
    user = AuthService.register_user(payload.email, payload.password, payload.name)
    response = jsonify({'success': True, 'user': _user_payload(user)})
    return set_auth_cookie(response, AuthService.issue_token(user))


@auth_bp.route('/api/auth/login', methods=['POST'])
def login():
    payload = parse_json_body(CredentialsRequest, MISSING_CREDENTIALS)
    user = AuthService.login(payload.email, payload.password)
    response = jsonify({'success': True, 'user': _user_payload(user)})
    return set_auth_cookie(response, AuthService.issue_token(user))


@auth_bp.route('/api/auth/logout', methods=['POST'])
def logout():
    return clear_auth_cookie(jsonify({'success': True}))


@auth_bp.route('/api/auth/token', methods=['POST'])
def issue_token():
    """Bare token for clients that cannot hold cookies (sent as a Bearer header)."""
    payload = parse_json_body(CredentialsRequest, MISSING_CREDENTIALS)
    user = AuthService.authenticate_user(payload.email, payload.password)
    if user is None:
        raise AuthenticationError('Invalid credentials')
    return jsonify({'success': True, 'token': AuthService.issue_token(user)})

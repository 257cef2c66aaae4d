# File: langfu_app/core/config.py
# Core Infrastructure Layer: application configuration

import os
from dotenv import load_dotenv

load_dotenv()

# Project root (the directory holding the langfu_app package)
BASE_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), '..', '..'))

# Default SQLite database file
DATABASE_PATH = os.path.join(BASE_DIR, "database", "langfu.db")


class Config:
    """Configuration for the LangFu application."""

    SECRET_KEY = os.environ.get('SECRET_KEY')
    if not SECRET_KEY:
        # Fallback for development, env is preferred
        SECRET_KEY = 'dev-secret-key-replace-in-production'

    SQLALCHEMY_DATABASE_URI = os.environ.get('SQLALCHEMY_DATABASE_URI') or f'sqlite:///{DATABASE_PATH}'
    SQLALCHEMY_ENGINE_OPTIONS = {
        'pool_pre_ping': True,
        'connect_args': {'timeout': 30},
    }
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # --- Authentication ---
    JWT_SECRET = os.environ.get('JWT_SECRET') or 'langfu-development-secret-key-2024'
    JWT_ALGORITHM = 'HS256'
    JWT_EXPIRATION_DAYS = int(os.environ.get('JWT_EXPIRATION_DAYS', '30'))
    AUTH_COOKIE_NAME = os.environ.get('AUTH_COOKIE_NAME', 'langfu-auth')
    AUTH_COOKIE_SECURE = os.environ.get('FLASK_ENV') == 'production'

    # --- AI generation (Gemini) ---
    GEMINI_API_KEY = os.environ.get('GEMINI_API_KEY')
    # Comma separated, tried in order
    GEMINI_MODEL = os.environ.get('GEMINI_MODEL', 'gemini-2.0-flash-lite-001,gemini-1.5-flash')

    # --- Web extraction ---
    EXTRACT_FETCH_TIMEOUT = int(os.environ.get('EXTRACT_FETCH_TIMEOUT', '15'))
    EXTRACT_USER_AGENT = 'Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36'

    # --- Logging ---
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')
    LOG_DIR = os.environ.get('LOG_DIR') or os.path.join(BASE_DIR, 'logs')
    LOG_JSON = os.environ.get('LOG_JSON', '').lower() in ('1', 'true', 'yes')

    @classmethod
    def init_app(cls, app):
        """Create the directories the application writes to."""
        uri = app.config.get('SQLALCHEMY_DATABASE_URI', '')
        if uri == f'sqlite:///{DATABASE_PATH}':
            os.makedirs(os.path.dirname(DATABASE_PATH), exist_ok=True)

"""
Auth Service - Core authentication logic.

Handles registration, credential checks and session tokens.
Decouples DB logic from Routes.
"""
from typing import Optional, Tuple

from flask import current_app
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from langfu_app.core.error_handlers import AuthenticationError, ValidationError
from langfu_app.core.extensions import db
from langfu_app.core.signals import user_logged_in, user_registered
from langfu_app.models import Language, User
from langfu_app.modules.progress.services.progress_service import ProgressService
from ..logics.tokens import create_token, verify_token


class AuthService:
    """Service for Authentication related operations."""

    @staticmethod
    def find_by_email(email: str) -> Optional[User]:
        return db.session.scalars(select(User).where(User.email == email)).first()

    @staticmethod
    def register_user(email: str, password: str, name: Optional[str] = None) -> User:
        """
        Register a new user with a German Progress row and emit a signal.

        Raises:
            ValidationError: the email is already registered.
        """
        if AuthService.find_by_email(email) is not None:
            raise ValidationError('User already exists')

        user = User(email=email, name=name, current_language=Language.GERMAN.value)
        user.set_password(password)
        db.session.add(user)
        try:
            # Flush to get the id for the Progress row
            db.session.flush()
            ProgressService.ensure_progress(user.user_id, user.current_language, commit=False)
            db.session.commit()
        except IntegrityError:
            # Lost a race against a concurrent registration of the same email
            db.session.rollback()
            raise ValidationError('User already exists')

        current_app.logger.info(f"User registered: {email} ({user.user_id})")
        user_registered.send(current_app._get_current_object(), user=user)
        return user

    @staticmethod
    def authenticate_user(email: str, password: str) -> Optional[User]:
        """
        Verify credentials.

        Returns:
            User object if valid, None otherwise.
        """
        user = AuthService.find_by_email(email)
        if user and user.check_password(password):
            return user
        return None

    @staticmethod
    def login(email: str, password: str) -> User:
        user = AuthService.authenticate_user(email, password)
        if user is None:
            current_app.logger.info(f"Failed login attempt for {email}")
            raise AuthenticationError('Invalid credentials')

        ProgressService.ensure_progress(user.user_id, user.current_language)
        user_logged_in.send(current_app._get_current_object(), user=user)
        return user

    @staticmethod
    def issue_token(user: User) -> str:
        config = current_app.config
        return create_token(
            user.user_id,
            user.email,
            config['JWT_SECRET'],
            algorithm=config.get('JWT_ALGORITHM', 'HS256'),
            expires_days=config.get('JWT_EXPIRATION_DAYS', 30),
        )

    @staticmethod
    def resolve_token(token: str) -> Tuple[Optional[User], bool]:
        """
        Map a session token to its user.

        A valid token whose user id no longer exists is still accepted when
        its email matches an account (the database was rebuilt). The second
        element of the result tells the caller to rotate the token.
        """
        config = current_app.config
        payload = verify_token(token, config['JWT_SECRET'], config.get('JWT_ALGORITHM', 'HS256'))
        if payload is None:
            return None, False

        user = db.session.get(User, payload.user_id)
        if user is not None and user.email == payload.email:
            return user, False

        recovered = AuthService.find_by_email(payload.email) if payload.email else None
        if recovered is not None:
            current_app.logger.info(f"Recovered user {recovered.email} by email, rotating token")
            return recovered, True
        return None, False

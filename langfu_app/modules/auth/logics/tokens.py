"""Signed session tokens (HS256 JWT) carrying the user id and email."""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt


@dataclass(frozen=True)
class TokenPayload:
    user_id: int
    email: str


def create_token(
    user_id: int,
    email: str,
    secret: str,
    algorithm: str = 'HS256',
    expires_days: int = 30,
    now: Optional[datetime] = None,
) -> str:
    now = now or datetime.now(timezone.utc)
    claims = {
        'id': user_id,
        'email': email,
        'iat': now,
        'exp': now + timedelta(days=expires_days),
    }
    return jwt.encode(claims, secret, algorithm=algorithm)


def verify_token(token: str, secret: str, algorithm: str = 'HS256') -> Optional[TokenPayload]:
    """Decode a token, returning None when it is expired, tampered or incomplete."""
    try:
        claims = jwt.decode(token, secret, algorithms=[algorithm])
    except jwt.InvalidTokenError:
        return None

    if 'id' not in claims or 'email' not in claims:
        return None
    try:
        user_id = int(claims['id'])
    except (TypeError, ValueError):
        return None
    return TokenPayload(user_id=user_id, email=str(claims['email']))

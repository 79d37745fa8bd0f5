"""Session token creation/verification (signed JWT carried in the session cookie)."""

import uuid
from datetime import UTC, datetime, timedelta
from typing import Any

import jwt

from roster.core.config import settings


def create_session_token(user_id: str) -> str:
    """Create a signed session token with sub (user id), jti, exp and iat."""
    now = datetime.now(UTC)
    expire = now + timedelta(minutes=settings.SESSION_EXPIRE_MINUTES)
    payload: dict[str, Any] = {
        "sub": str(user_id),
        "jti": uuid.uuid4().hex,
        "exp": expire,
        "iat": now,
    }
    secret = settings.SESSION_SECRET.get_secret_value()
    return jwt.encode(
        payload,
        secret,
        algorithm=settings.SESSION_ALGORITHM,
    )


def decode_session_token(token: str) -> dict[str, Any]:
    """
    Decode and validate a session token; return payload (sub, jti, exp, iat).
    Raises jwt.PyJWTError on invalid or expired token.
    """
    secret = settings.SESSION_SECRET.get_secret_value()
    return jwt.decode(
        token,
        secret,
        algorithms=[settings.SESSION_ALGORITHM],
    )

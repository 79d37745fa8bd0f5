"""
Email/password authentication: sign-up, sign-in and session resolution.

Password hashing is private to this module. Everything else (including the
admin password reset) goes through sign_up_email / sign_in_email.

Calls that issue a session write the token into an explicit SessionContext
instead of ambient state, so callers decide which cookie jar is affected.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from datetime import UTC, datetime

import bcrypt
import jwt
from sqlalchemy.orm import Session

from roster.core.config import settings
from roster.core.security import create_session_token, decode_session_token
from roster.models import CREDENTIAL_PROVIDER, Account, Role, User, UserRole
from roster.services.errors import DuplicateEmail, InvalidPassword, Unauthorized

logger = logging.getLogger(__name__)

# Bcrypt cost (rounds); 12 is a good default for security vs speed.
BCRYPT_ROUNDS = 12
# bcrypt ignores input past this many bytes.
BCRYPT_MAX_BYTES = 72


def _hash_password(plain_password: str) -> str:
    pw_bytes = plain_password.encode("utf-8")[:BCRYPT_MAX_BYTES]
    return bcrypt.hashpw(pw_bytes, bcrypt.gensalt(rounds=BCRYPT_ROUNDS)).decode("utf-8")


def _verify_password(plain_password: str, hashed: str) -> bool:
    pw_bytes = plain_password.encode("utf-8")[:BCRYPT_MAX_BYTES]
    try:
        return bcrypt.checkpw(pw_bytes, hashed.encode("utf-8"))
    except (ValueError, TypeError):
        return False


def utcnow() -> datetime:
    return datetime.now(UTC)


def validate_password(password: str) -> None:
    """
    Raise InvalidPassword unless the length fits PASSWORD_MIN_LENGTH..PASSWORD_MAX_LENGTH
    and the UTF-8 encoding fits in bcrypt's input.
    """
    if not (settings.PASSWORD_MIN_LENGTH <= len(password) <= settings.PASSWORD_MAX_LENGTH):
        raise InvalidPassword(
            f"Password must be {settings.PASSWORD_MIN_LENGTH}-"
            f"{settings.PASSWORD_MAX_LENGTH} characters."
        )
    if len(password.encode("utf-8")) > BCRYPT_MAX_BYTES:
        raise InvalidPassword(f"Password must be at most {BCRYPT_MAX_BYTES} bytes in UTF-8.")


def check_unique_email(
    db: Session, email: str, require_unique: bool, exclude_id: str | None = None
) -> None:
    """Raise DuplicateEmail if require_unique and another user already has email."""
    if not require_unique:
        return
    query = db.query(User.id).filter(User.email == email)
    if exclude_id is not None:
        query = query.filter(User.id != exclude_id)
    if query.first() is not None:
        raise DuplicateEmail(f"A user with email '{email}' already exists.")


@dataclass
class SessionContext:
    """Cookie jar for one caller. Session-issuing calls write into it."""

    cookies: dict[str, str] = field(default_factory=dict)
    cookie_name: str = field(default_factory=lambda: settings.SESSION_COOKIE_NAME)

    @property
    def session_token(self) -> str | None:
        return self.cookies.get(self.cookie_name)

    def set_session_token(self, token: str) -> None:
        self.cookies[self.cookie_name] = token

    def clear_session_token(self) -> None:
        self.cookies.pop(self.cookie_name, None)

    def snapshot(self) -> str | None:
        """Capture the current session token for a later restore()."""
        return self.session_token

    def restore(self, token: str | None) -> None:
        """Put back a token captured with snapshot(); None means there was no session."""
        if token is None:
            self.clear_session_token()
        else:
            self.set_session_token(token)


@dataclass(frozen=True)
class SignUpResult:
    """Account created by sign_up_email."""

    user_id: str
    email: str
    session_token: str


def sign_up_email(
    db: Session,
    email: str,
    password: str,
    name: str,
    context: SessionContext,
) -> SignUpResult:
    """
    Create a user with a credential account, link the default sign-up roles and
    start a session for it in context.

    Raises InvalidPassword on policy violation and DuplicateEmail when another
    credential login already uses this email, or any user does while
    USERS_REQUIRE_UNIQUE_EMAIL is on.
    """
    validate_password(password)
    normalized_email = email.strip().lower()
    taken = (
        db.query(Account.id)
        .join(User, User.id == Account.user_id)
        .filter(User.email == normalized_email, Account.provider_id == CREDENTIAL_PROVIDER)
        .first()
    )
    if taken is not None:
        raise DuplicateEmail("An account with this email already exists.")
    check_unique_email(db, normalized_email, settings.USERS_REQUIRE_UNIQUE_EMAIL)

    now = utcnow()
    user = User(
        id=str(uuid.uuid4()),
        email=normalized_email,
        name=name,
        active=False,
        email_verified=False,
        created_at=now,
        updated_at=now,
    )
    db.add(user)
    db.flush()
    db.add(
        Account(
            id=f"acc-{uuid.uuid4()}",
            account_id=user.id,
            provider_id=CREDENTIAL_PROVIDER,
            user_id=user.id,
            password=_hash_password(password),
            created_at=now,
            updated_at=now,
        )
    )
    default_roles = settings.signup_default_roles
    if default_roles:
        existing = {
            role_id
            for (role_id,) in db.query(Role.id).filter(Role.id.in_(default_roles)).all()
        }
        for role_id in default_roles:
            if role_id in existing:
                db.add(UserRole(id=str(uuid.uuid4()), user_id=user.id, role_id=role_id))
    db.commit()

    token = create_session_token(user.id)
    context.set_session_token(token)
    logger.info("Sign-up completed", extra={"user_id": user.id})
    return SignUpResult(user_id=user.id, email=normalized_email, session_token=token)


def sign_in_email(
    db: Session,
    email: str,
    password: str,
    context: SessionContext,
) -> str:
    """Verify email/password, start a session in context and return the user id."""
    normalized_email = email.strip().lower()
    rows = (
        db.query(Account)
        .join(User, User.id == Account.user_id)
        .filter(User.email == normalized_email, Account.provider_id == CREDENTIAL_PROVIDER)
        .all()
    )
    for account in rows:
        if account.password and _verify_password(password, account.password):
            context.set_session_token(create_session_token(account.user_id))
            return account.user_id
    raise Unauthorized("Invalid email or password.")


def sign_out(context: SessionContext) -> None:
    context.clear_session_token()


def resolve_session(db: Session, token: str | None) -> User:
    """Return the user a session token belongs to. Raises Unauthorized."""
    if not token:
        raise Unauthorized("Not authenticated")
    try:
        payload = decode_session_token(token)
    except jwt.PyJWTError:
        raise Unauthorized("Invalid or expired session")
    sub = payload.get("sub")
    if not sub:
        raise Unauthorized("Invalid session payload")
    user = db.get(User, str(sub))
    if user is None:
        raise Unauthorized("User not found")
    return user

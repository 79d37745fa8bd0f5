"""User records: admin CRUD, activation, and the caller's own profile."""

from __future__ import annotations

import logging
import uuid
from typing import TYPE_CHECKING

from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from roster.models import User
from roster.schemas.users import ProfileUpdate, UserCreate, UserFields
from roster.services.auth_provider import check_unique_email, utcnow
from roster.services.errors import NotFound
from roster.services.guard import ensure_expected_user

if TYPE_CHECKING:
    from roster.core.config import Settings

logger = logging.getLogger(__name__)


def _normalize_email(email: str) -> str:
    return email.strip().lower()


def _apply_fields(user: User, fields: UserFields) -> None:
    user.email = _normalize_email(str(fields.email))
    user.name = fields.name
    user.fullname = fields.fullname or None
    user.birthdate = fields.birthdate
    user.gender = fields.gender or None


def get_user(db: Session, user_id: str) -> User | None:
    return db.get(User, user_id)


def get_user_or_404(db: Session, user_id: str) -> User:
    user = db.get(User, user_id)
    if user is None:
        raise NotFound(f"User '{user_id}' not found.")
    return user


def list_users(db: Session, search: str | None = None) -> list[User]:
    """All users, newest first. search matches email, name or fullname (case-insensitive)."""
    query = db.query(User)
    if search and search.strip():
        pattern = f"%{search.strip().lower()}%"
        query = query.filter(
            or_(
                func.lower(User.email).like(pattern),
                func.lower(User.name).like(pattern),
                func.lower(func.coalesce(User.fullname, "")).like(pattern),
            )
        )
    return query.order_by(User.created_at.desc(), User.id).all()


def create_user(db: Session, data: UserCreate, settings: "Settings") -> User:
    """Create a user. active and email_verified always start False, whatever data says."""
    email = _normalize_email(str(data.email))
    check_unique_email(db, email, settings.USERS_REQUIRE_UNIQUE_EMAIL)
    now = utcnow()
    user = User(
        id=str(uuid.uuid4()),
        active=False,
        email_verified=False,
        created_at=now,
        updated_at=now,
    )
    _apply_fields(user, data)
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info("User created", extra={"user_id": user.id})
    return user


def update_user(db: Session, user_id: str, data: UserFields, settings: "Settings") -> User:
    """Overwrite email, name, fullname, birthdate and gender. Never touches active."""
    user = get_user_or_404(db, user_id)
    check_unique_email(
        db, _normalize_email(str(data.email)), settings.USERS_REQUIRE_UNIQUE_EMAIL, exclude_id=user_id
    )
    _apply_fields(user, data)
    user.updated_at = utcnow()
    db.commit()
    db.refresh(user)
    return user


def set_active(db: Session, user_id: str, active: bool) -> User:
    """The only path that changes the active flag."""
    user = get_user_or_404(db, user_id)
    user.active = active
    user.updated_at = utcnow()
    db.commit()
    db.refresh(user)
    logger.info("User activation changed", extra={"user_id": user_id, "active": active})
    return user


def get_my_profile(
    db: Session, session_user_id: str, expected_user_id: str | None = None
) -> User | None:
    """
    Profile of the session's user.

    Raises SessionMismatch when expected_user_id (captured by the client when its
    view was loaded) names someone else.
    """
    ensure_expected_user(session_user_id, expected_user_id)
    return db.get(User, session_user_id)


def update_my_profile(
    db: Session, session_user_id: str, data: ProfileUpdate, settings: "Settings"
) -> User:
    """Self edit; data.id must be the session's user id."""
    ensure_expected_user(session_user_id, data.id)
    return update_user(db, session_user_id, data, settings)

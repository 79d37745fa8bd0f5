"""Role-based authorization guard and session identity check."""

import logging
from collections.abc import Iterable

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from roster.models import UserRole
from roster.services.errors import Forbidden, SessionMismatch

logger = logging.getLogger(__name__)


def get_role_ids(db: Session, user_id: str) -> set[str]:
    """Role ids assigned to user_id."""
    rows = db.query(UserRole.role_id).filter(UserRole.user_id == user_id).all()
    return {role_id for (role_id,) in rows}


def authorize(db: Session, user_id: str, required_roles: Iterable[str]) -> bool:
    """
    True if user_id holds any of required_roles, or required_roles is empty.

    Fails closed: a lookup error denies access.
    """
    required = set(required_roles)
    if not required:
        return True
    try:
        assigned = get_role_ids(db, user_id)
    except SQLAlchemyError:
        logger.exception("Role lookup failed; denying access", extra={"user_id": user_id})
        db.rollback()
        return False
    return not assigned.isdisjoint(required)


def require_roles(db: Session, user_id: str, required_roles: Iterable[str]) -> None:
    """Raise Forbidden unless authorize() allows the call."""
    required = tuple(required_roles)
    if not authorize(db, user_id, required):
        logger.info(
            "Access denied",
            extra={"user_id": user_id, "required_roles": ",".join(required)},
        )
        raise Forbidden(f"One of these roles is required: {', '.join(required)}")


def ensure_expected_user(session_user_id: str, expected_user_id: str | None) -> None:
    """Raise SessionMismatch when an expected user id is given and differs from the session's."""
    if expected_user_id and session_user_id != expected_user_id:
        logger.warning(
            "Session user does not match expected user",
            extra={"session_user_id": session_user_id, "expected_user_id": expected_user_id},
        )
        raise SessionMismatch()

"""User-role links: read, idempotent assign, unassign, and the bulk variants."""

import logging
import uuid
from collections.abc import Iterable

from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.orm import Session

from roster.core.permissions import CAN_READ_OTHER_ROLES
from roster.models import Role, User, UserRole
from roster.services.errors import NotFound
from roster.services.guard import require_roles

logger = logging.getLogger(__name__)

_INSERT_BY_DIALECT = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


def list_roles_for_user(db: Session, caller_id: str, user_id: str) -> list[str]:
    """
    Role ids linked to user_id, sorted.

    A caller may always read their own roles; reading someone else's requires
    ADMINISTRATOR.
    """
    if caller_id != user_id:
        require_roles(db, caller_id, CAN_READ_OTHER_ROLES)
    rows = (
        db.query(UserRole.role_id)
        .filter(UserRole.user_id == user_id)
        .order_by(UserRole.role_id)
        .all()
    )
    return [role_id for (role_id,) in rows]


def _ensure_exists(db: Session, user_id: str, role_id: str) -> None:
    if db.get(User, user_id) is None:
        raise NotFound(f"User '{user_id}' not found.")
    if db.get(Role, role_id) is None:
        raise NotFound(f"Role '{role_id}' not found.")


def assign(db: Session, user_id: str, role_id: str) -> bool:
    """
    Link user_id to role_id if not already linked.

    A single INSERT ... ON CONFLICT DO NOTHING against the (user_id, role_id)
    unique constraint, so concurrent calls cannot create duplicates. Returns True
    when a row was inserted.
    """
    _ensure_exists(db, user_id, role_id)
    dialect = db.get_bind().dialect.name
    insert = _INSERT_BY_DIALECT.get(dialect)
    if insert is None:
        raise RuntimeError(f"Unsupported database dialect for role assignment: {dialect}")
    stmt = (
        insert(UserRole)
        .values(id=str(uuid.uuid4()), user_id=user_id, role_id=role_id)
        .on_conflict_do_nothing(index_elements=["user_id", "role_id"])
    )
    result = db.execute(stmt)
    db.commit()
    inserted = bool(result.rowcount)
    if inserted:
        logger.info("Role assigned", extra={"user_id": user_id, "role_id": role_id})
    return inserted


def unassign(db: Session, user_id: str, role_id: str) -> bool:
    """Remove the link if present; returns False (no error) when there was none."""
    deleted = (
        db.query(UserRole)
        .filter(UserRole.user_id == user_id, UserRole.role_id == role_id)
        .delete(synchronize_session=False)
    )
    db.commit()
    if deleted:
        logger.info("Role unassigned", extra={"user_id": user_id, "role_id": role_id})
    return bool(deleted)


def bulk_assign(db: Session, user_id: str, role_ids: Iterable[str]) -> tuple[list[str], list[str]]:
    """
    assign() each role in order; returns (changed, unchanged).

    Each assignment commits on its own: if one fails, the earlier ones stay and
    the error propagates.
    """
    changed: list[str] = []
    unchanged: list[str] = []
    for role_id in dict.fromkeys(role_ids):
        (changed if assign(db, user_id, role_id) else unchanged).append(role_id)
    return changed, unchanged


def bulk_unassign(
    db: Session, user_id: str, role_ids: Iterable[str]
) -> tuple[list[str], list[str]]:
    """unassign() each role in order; same partial-failure behaviour as bulk_assign."""
    changed: list[str] = []
    unchanged: list[str] = []
    for role_id in dict.fromkeys(role_ids):
        (changed if unassign(db, user_id, role_id) else unchanged).append(role_id)
    return changed, unchanged

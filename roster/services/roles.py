"""Role definitions: list, create, edit description, delete."""

import logging

from sqlalchemy import func, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from roster.models import Role
from roster.services.errors import NotFound, RoleExists

logger = logging.getLogger(__name__)


def list_roles(db: Session, search: str | None = None) -> list[Role]:
    """Roles ordered by id. search matches id or description (case-insensitive)."""
    query = db.query(Role)
    if search and search.strip():
        pattern = f"%{search.strip().lower()}%"
        query = query.filter(
            or_(func.lower(Role.id).like(pattern), func.lower(Role.description).like(pattern))
        )
    return query.order_by(Role.id.asc()).all()


def get_role(db: Session, role_id: str) -> Role:
    role = db.get(Role, role_id)
    if role is None:
        raise NotFound(f"Role '{role_id}' not found.")
    return role


def create_role(db: Session, role_id: str, description: str) -> Role:
    if db.get(Role, role_id) is not None:
        raise RoleExists(f"Role '{role_id}' already exists.")
    role = Role(id=role_id, description=description)
    db.add(role)
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        raise RoleExists(f"Role '{role_id}' already exists.") from e
    logger.info("Role created", extra={"role_id": role_id})
    return role


def update_role(db: Session, role_id: str, description: str) -> Role:
    """Change the description; the id is immutable."""
    role = get_role(db, role_id)
    role.description = description
    db.commit()
    return role


def delete_role(db: Session, role_id: str) -> None:
    """Delete the role; its assignment rows go with it (ON DELETE CASCADE)."""
    deleted = db.query(Role).filter(Role.id == role_id).delete(synchronize_session=False)
    db.commit()
    if deleted == 0:
        raise NotFound(f"Role '{role_id}' not found.")
    logger.info("Role deleted", extra={"role_id": role_id})

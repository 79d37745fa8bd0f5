"""Role definitions: list, add, edit description, delete."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from roster.api.v1.auth import require_roles
from roster.core import permissions
from roster.core.database import get_db
from roster.schemas.auth import CurrentUser
from roster.schemas.roles import RoleCreate, RoleRead, RolesListResponse, RoleUpdate
from roster.services import roles

router = APIRouter()


@router.get("", response_model=RolesListResponse)
def list_roles(
    _caller: Annotated[CurrentUser, Depends(require_roles(*permissions.CAN_LIST_ROLES))],
    db: Annotated[Session, Depends(get_db)],
    search: Annotated[str | None, Query(max_length=255)] = None,
) -> RolesListResponse:
    """All roles ordered by id, optionally filtered by id/description."""
    return RolesListResponse(roles=[RoleRead.model_validate(r) for r in roles.list_roles(db, search)])


@router.post("", response_model=RoleRead, status_code=201)
def create_role(
    body: RoleCreate,
    _caller: Annotated[CurrentUser, Depends(require_roles(*permissions.CAN_ADD_ROLES))],
    db: Annotated[Session, Depends(get_db)],
) -> RoleRead:
    return RoleRead.model_validate(roles.create_role(db, body.id, body.description))


@router.get("/{role_id}", response_model=RoleRead)
def get_role(
    role_id: str,
    _caller: Annotated[CurrentUser, Depends(require_roles(*permissions.CAN_LIST_ROLES))],
    db: Annotated[Session, Depends(get_db)],
) -> RoleRead:
    return RoleRead.model_validate(roles.get_role(db, role_id))


@router.put("/{role_id}", response_model=RoleRead)
def update_role(
    role_id: str,
    body: RoleUpdate,
    _caller: Annotated[CurrentUser, Depends(require_roles(*permissions.CAN_EDIT_ROLES))],
    db: Annotated[Session, Depends(get_db)],
) -> RoleRead:
    """Change a role's description. Role ids cannot be renamed."""
    return RoleRead.model_validate(roles.update_role(db, role_id, body.description))


@router.delete("/{role_id}", status_code=204)
def delete_role(
    role_id: str,
    _caller: Annotated[CurrentUser, Depends(require_roles(*permissions.CAN_DELETE_ROLES))],
    db: Annotated[Session, Depends(get_db)],
) -> None:
    """Delete a role and every assignment of it."""
    roles.delete_role(db, role_id)

"""Admin user management: list, create, edit, activate, reset password, assign roles."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.orm import Session

from roster.api.v1.auth import (
    apply_session_cookie,
    get_current_user,
    get_session_context,
    require_roles,
)
from roster.core import permissions
from roster.core.config import get_settings
from roster.core.database import get_db
from roster.schemas.auth import CurrentUser
from roster.schemas.roles import (
    AssignmentResult,
    BulkAssignmentResponse,
    BulkRolesRequest,
    UserRolesResponse,
)
from roster.schemas.users import (
    ActiveUpdate,
    PasswordChange,
    UserCreate,
    UserRead,
    UserUpdate,
    UsersListResponse,
)
from roster.services import assignments, users
from roster.services.auth_provider import SessionContext
from roster.services.password_reset import reset_password

router = APIRouter()


@router.get("", response_model=UsersListResponse)
def list_users(
    _caller: Annotated[CurrentUser, Depends(require_roles(*permissions.CAN_LIST_USERS))],
    db: Annotated[Session, Depends(get_db)],
    search: Annotated[str | None, Query(max_length=255)] = None,
) -> UsersListResponse:
    """All users, newest first, optionally filtered by email/name/fullname."""
    rows = users.list_users(db, search)
    return UsersListResponse(users=[UserRead.model_validate(u) for u in rows])


@router.post("", response_model=UserRead, status_code=201)
def create_user(
    body: UserCreate,
    _caller: Annotated[CurrentUser, Depends(require_roles(*permissions.CAN_ADD_USERS))],
    db: Annotated[Session, Depends(get_db)],
) -> UserRead:
    """Add a user. The new user is always inactive."""
    return UserRead.model_validate(users.create_user(db, body, get_settings()))


@router.get("/{user_id}", response_model=UserRead)
def get_user(
    user_id: str,
    _caller: Annotated[CurrentUser, Depends(require_roles(*permissions.CAN_LIST_USERS))],
    db: Annotated[Session, Depends(get_db)],
) -> UserRead:
    return UserRead.model_validate(users.get_user_or_404(db, user_id))


@router.put("/{user_id}", response_model=UserRead)
def update_user(
    user_id: str,
    body: UserUpdate,
    _caller: Annotated[CurrentUser, Depends(require_roles(*permissions.CAN_EDIT_USERS))],
    db: Annotated[Session, Depends(get_db)],
) -> UserRead:
    """Overwrite a user's identity fields (not the active flag)."""
    return UserRead.model_validate(users.update_user(db, user_id, body, get_settings()))


@router.put("/{user_id}/active", response_model=UserRead)
def set_user_active(
    user_id: str,
    body: ActiveUpdate,
    _caller: Annotated[CurrentUser, Depends(require_roles(*permissions.CAN_ACTIVATE_USERS))],
    db: Annotated[Session, Depends(get_db)],
) -> UserRead:
    """Activate or deactivate a user."""
    return UserRead.model_validate(users.set_active(db, user_id, body.active))


@router.put("/{user_id}/password", status_code=204)
def set_user_password(
    user_id: str,
    body: PasswordChange,
    response: Response,
    _caller: Annotated[CurrentUser, Depends(require_roles(*permissions.CAN_EDIT_USERS))],
    context: Annotated[SessionContext, Depends(get_session_context)],
    db: Annotated[Session, Depends(get_db)],
) -> None:
    """Set another user's password. The administrator's own session is left untouched."""
    before = context.session_token
    reset_password(db, user_id, body.password, context)
    apply_session_cookie(response, before, context)


@router.get("/{user_id}/roles", response_model=UserRolesResponse)
def get_user_roles(
    user_id: str,
    caller: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
) -> UserRolesResponse:
    """Role ids of user_id. Own roles are always readable; others need ADMINISTRATOR."""
    role_ids = assignments.list_roles_for_user(db, caller.id, user_id)
    return UserRolesResponse(user_id=user_id, role_ids=role_ids)


@router.put("/{user_id}/roles/{role_id}", response_model=AssignmentResult)
def assign_role(
    user_id: str,
    role_id: str,
    _caller: Annotated[CurrentUser, Depends(require_roles(*permissions.CAN_EDIT_USERS))],
    db: Annotated[Session, Depends(get_db)],
) -> AssignmentResult:
    """Link a role to a user; repeating the call is a no-op (changed=false)."""
    changed = assignments.assign(db, user_id, role_id)
    return AssignmentResult(user_id=user_id, role_id=role_id, changed=changed)


@router.delete("/{user_id}/roles/{role_id}", response_model=AssignmentResult)
def unassign_role(
    user_id: str,
    role_id: str,
    _caller: Annotated[CurrentUser, Depends(require_roles(*permissions.CAN_EDIT_USERS))],
    db: Annotated[Session, Depends(get_db)],
) -> AssignmentResult:
    """Unlink a role; unlinking a role the user does not have is a no-op."""
    changed = assignments.unassign(db, user_id, role_id)
    return AssignmentResult(user_id=user_id, role_id=role_id, changed=changed)


@router.post("/{user_id}/roles/bulk-assign", response_model=BulkAssignmentResponse)
def bulk_assign_roles(
    user_id: str,
    body: BulkRolesRequest,
    _caller: Annotated[CurrentUser, Depends(require_roles(*permissions.CAN_EDIT_USERS))],
    db: Annotated[Session, Depends(get_db)],
) -> BulkAssignmentResponse:
    """
    Assign every role in role_ids. Not all-or-nothing: if one fails, the roles
    before it stay assigned.
    """
    changed, unchanged = assignments.bulk_assign(db, user_id, body.role_ids)
    return BulkAssignmentResponse(user_id=user_id, changed=changed, unchanged=unchanged)


@router.post("/{user_id}/roles/bulk-unassign", response_model=BulkAssignmentResponse)
def bulk_unassign_roles(
    user_id: str,
    body: BulkRolesRequest,
    _caller: Annotated[CurrentUser, Depends(require_roles(*permissions.CAN_EDIT_USERS))],
    db: Annotated[Session, Depends(get_db)],
) -> BulkAssignmentResponse:
    """Remove every role in role_ids; same partial-failure behaviour as bulk-assign."""
    changed, unchanged = assignments.bulk_unassign(db, user_id, body.role_ids)
    return BulkAssignmentResponse(user_id=user_id, changed=changed, unchanged=unchanged)

"""The caller's own profile, password and roles."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy.orm import Session

from roster.api.v1.auth import (
    ExpectedUserId,
    apply_session_cookie,
    get_current_user,
    get_session_context,
)
from roster.core.config import get_settings
from roster.core.database import get_db
from roster.schemas.auth import CurrentUser
from roster.schemas.roles import UserRolesResponse
from roster.schemas.users import MyPasswordChange, ProfileUpdate, UserRead
from roster.services import assignments, users
from roster.services.auth_provider import SessionContext
from roster.services.password_reset import change_my_password

router = APIRouter()


@router.get("", response_model=UserRead)
def get_me(
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
    expected_user_id: ExpectedUserId = None,
) -> UserRead:
    """
    Profile of the signed-in user.

    Pass expected_user_id (the id the client loaded its view for); if the session
    now belongs to someone else the call fails with 409 SessionMismatch.
    """
    user = users.get_my_profile(db, current_user.id, expected_user_id)
    if user is None:
        raise HTTPException(status_code=404, detail="Profile not found.")
    return UserRead.model_validate(user)


@router.put("", response_model=UserRead)
def put_me(
    body: ProfileUpdate,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
) -> UserRead:
    """Overwrite the caller's own email, name, fullname, birthdate and gender."""
    user = users.update_my_profile(db, current_user.id, body, get_settings())
    return UserRead.model_validate(user)


@router.put("/password", status_code=204)
def put_my_password(
    body: MyPasswordChange,
    response: Response,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    context: Annotated[SessionContext, Depends(get_session_context)],
    db: Annotated[Session, Depends(get_db)],
) -> None:
    """Change the caller's password; the session cookie stays as it was."""
    before = context.session_token
    change_my_password(db, current_user.id, body.user_id, body.password, context)
    apply_session_cookie(response, before, context)


@router.get("/roles", response_model=UserRolesResponse)
def get_my_roles(
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
) -> UserRolesResponse:
    """Role ids assigned to the caller (no privilege needed)."""
    role_ids = assignments.list_roles_for_user(db, current_user.id, current_user.id)
    return UserRolesResponse(user_id=current_user.id, role_ids=role_ids)

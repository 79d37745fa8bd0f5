"""Session-cookie auth endpoints and dependencies (get_current_user, require_roles)."""

from collections.abc import Callable
from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request, Response
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from roster.core.config import settings
from roster.core.database import get_db
from roster.schemas.auth import (
    AuthorizeResponse,
    CurrentUser,
    SessionResponse,
    SignInRequest,
    SignUpRequest,
)
from roster.services import auth_provider
from roster.services.auth_provider import SessionContext
from roster.services.guard import authorize, ensure_expected_user
from roster.services.guard import require_roles as guard_require_roles

router = APIRouter()
security = HTTPBearer(auto_error=False)


def get_session_context(request: Request) -> SessionContext:
    """Cookie jar of the current request; apply_session_cookie() writes changes back."""
    return SessionContext(cookies=dict(request.cookies))


def apply_session_cookie(response: Response, before: str | None, context: SessionContext) -> None:
    """Mirror a change of the session token in context onto the response cookie."""
    after = context.session_token
    if after == before:
        return
    if after is None:
        response.delete_cookie(settings.SESSION_COOKIE_NAME, path="/")
        return
    response.set_cookie(
        settings.SESSION_COOKIE_NAME,
        after,
        max_age=settings.SESSION_EXPIRE_MINUTES * 60,
        httponly=True,
        secure=settings.SESSION_COOKIE_SECURE,
        samesite="lax",
        path="/",
    )


def get_current_user(
    context: Annotated[SessionContext, Depends(get_session_context)],
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    db: Annotated[Session, Depends(get_db)],
) -> CurrentUser:
    """Dependency: require a valid session (cookie, or Bearer token). Raises Unauthorized (401)."""
    token = context.session_token
    if token is None and credentials is not None and credentials.scheme.lower() == "bearer":
        token = credentials.credentials
    user = auth_provider.resolve_session(db, token)
    return CurrentUser.model_validate(user)


# Optional id the client captured when it rendered the page; a different session
# user fails the call with 409 SessionMismatch instead of acting as someone else.
ExpectedUserId = Annotated[str | None, Query(max_length=36)]


def require_roles(*roles: str) -> Callable[..., CurrentUser]:
    """
    Dependency factory: current user must hold any of roles. Raises Forbidden (403).

    An expected_user_id query parameter is checked first, so a browser whose
    session switched to another account gets SessionMismatch (409) even when
    that account lacks the roles.
    """

    def dependency(
        current_user: Annotated[CurrentUser, Depends(get_current_user)],
        db: Annotated[Session, Depends(get_db)],
        expected_user_id: ExpectedUserId = None,
    ) -> CurrentUser:
        ensure_expected_user(current_user.id, expected_user_id)
        guard_require_roles(db, current_user.id, roles)
        return current_user

    return dependency


# Bearer clients opt in to receiving the token in the response body; browsers rely
# on the httponly cookie alone.
IncludeToken = Annotated[bool, Query(description="Return the session token in the body")]


@router.post("/sign-up", response_model=SessionResponse, status_code=201)
def sign_up(
    body: SignUpRequest,
    response: Response,
    context: Annotated[SessionContext, Depends(get_session_context)],
    db: Annotated[Session, Depends(get_db)],
    include_token: IncludeToken = False,
) -> SessionResponse:
    """Create an account with email and password and sign it in (sets the session cookie)."""
    before = context.session_token
    result = auth_provider.sign_up_email(db, str(body.email), body.password, body.name, context)
    apply_session_cookie(response, before, context)
    return SessionResponse(
        user_id=result.user_id,
        session_token=result.session_token if include_token else None,
    )


@router.post("/sign-in", response_model=SessionResponse)
def sign_in(
    body: SignInRequest,
    response: Response,
    context: Annotated[SessionContext, Depends(get_session_context)],
    db: Annotated[Session, Depends(get_db)],
    include_token: IncludeToken = False,
) -> SessionResponse:
    """Authenticate with email and password; sets the session cookie."""
    before = context.session_token
    user_id = auth_provider.sign_in_email(db, str(body.email), body.password, context)
    apply_session_cookie(response, before, context)
    return SessionResponse(
        user_id=user_id,
        session_token=context.session_token if include_token else None,
    )


@router.post("/sign-out", status_code=204)
def sign_out(
    response: Response,
    context: Annotated[SessionContext, Depends(get_session_context)],
) -> None:
    before = context.session_token
    auth_provider.sign_out(context)
    apply_session_cookie(response, before, context)


@router.get("/session", response_model=CurrentUser)
def get_session(
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
) -> CurrentUser:
    """Return the user the session belongs to."""
    return current_user


@router.get("/authorize", response_model=AuthorizeResponse)
def check_authorization(
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
    roles: Annotated[list[str], Query()] = [],
) -> AuthorizeResponse:
    """
    Whether the caller holds any of roles (always true when no roles are given).
    Lets a client decide whether to render a guarded page or dialog.
    """
    return AuthorizeResponse(allowed=authorize(db, current_user.id, roles))

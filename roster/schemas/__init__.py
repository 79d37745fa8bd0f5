"""Pydantic request/response schemas."""

from roster.schemas.auth import (
    AuthorizeResponse,
    CurrentUser,
    SessionResponse,
    SignInRequest,
    SignUpRequest,
)
from roster.schemas.health import HealthResponse
from roster.schemas.roles import (
    AssignmentResult,
    BulkAssignmentResponse,
    BulkRolesRequest,
    RoleCreate,
    RoleRead,
    RolesListResponse,
    RoleUpdate,
    UserRolesResponse,
)
from roster.schemas.users import (
    ActiveUpdate,
    MyPasswordChange,
    PasswordChange,
    ProfileUpdate,
    UserCreate,
    UserRead,
    UsersListResponse,
    UserUpdate,
)

__all__ = [
    "ActiveUpdate",
    "AssignmentResult",
    "AuthorizeResponse",
    "BulkAssignmentResponse",
    "BulkRolesRequest",
    "CurrentUser",
    "HealthResponse",
    "MyPasswordChange",
    "PasswordChange",
    "ProfileUpdate",
    "RoleCreate",
    "RoleRead",
    "RoleUpdate",
    "RolesListResponse",
    "SessionResponse",
    "SignInRequest",
    "SignUpRequest",
    "UserCreate",
    "UserRead",
    "UserRolesResponse",
    "UserUpdate",
    "UsersListResponse",
]

"""Request/response schemas for auth endpoints."""

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class SignUpRequest(BaseModel):
    """Self-service account creation."""

    email: EmailStr = Field(..., description="Email")
    password: str = Field(..., min_length=1, max_length=1024, description="Password")
    name: str = Field(..., min_length=1, max_length=255, description="Display name")


class SignInRequest(BaseModel):
    """Credentials for sign-in."""

    email: EmailStr = Field(..., description="Email")
    password: str = Field(..., min_length=1, max_length=1024, description="Password")


class SessionResponse(BaseModel):
    """
    Session issued by sign-up/sign-in. The token is always set as an httponly
    cookie and is only echoed in the body when the client asks for it.
    """

    user_id: str
    session_token: str | None = Field(
        None, description="Present with include_token=true; use as Authorization: Bearer <token>"
    )


class CurrentUser(BaseModel):
    """Authenticated user (id, email, name) for dependency injection."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    email: str
    name: str


class AuthorizeResponse(BaseModel):
    allowed: bool

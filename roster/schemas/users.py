"""Request/response schemas for user and profile endpoints."""

from datetime import date

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class UserFields(BaseModel):
    """Editable identity fields shared by create, admin edit and self edit."""

    email: EmailStr = Field(..., description="Email address")
    name: str = Field(..., min_length=1, max_length=255, description="Display name")
    fullname: str | None = Field(default=None, max_length=255)
    birthdate: date | None = None
    gender: str | None = Field(default=None, max_length=32)


class UserCreate(UserFields):
    """
    Admin create. active is accepted for form compatibility but ignored:
    new users always start inactive.
    """

    active: bool | None = Field(default=None, description="Ignored; new users are inactive")


class UserUpdate(UserFields):
    """Whole-record overwrite; active is not editable through this path."""


class ProfileUpdate(UserFields):
    """Self edit. id must be the session's user id."""

    id: str = Field(..., min_length=1, max_length=36)


class ActiveUpdate(BaseModel):
    active: bool


class PasswordChange(BaseModel):
    """New password for an admin reset or a self change."""

    password: str = Field(..., min_length=1, max_length=1024, description="New password")


class MyPasswordChange(PasswordChange):
    user_id: str = Field(..., min_length=1, max_length=36)


class UserRead(BaseModel):
    """User entry returned by list/get and the profile endpoint (no password)."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    email: str
    name: str
    fullname: str | None = None
    birthdate: date | None = None
    gender: str | None = None
    active: bool


class UsersListResponse(BaseModel):
    users: list[UserRead]

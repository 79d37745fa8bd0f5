"""Request/response schemas for roles and role assignments."""

from pydantic import BaseModel, ConfigDict, Field, field_validator


class RoleCreate(BaseModel):
    """New role. The id doubles as the role name and cannot be changed later."""

    id: str = Field(..., min_length=1, max_length=64, description="Role name, e.g. EDITOR")
    description: str = Field(default="", max_length=2000)

    @field_validator("id", mode="before")
    @classmethod
    def normalize_id(cls, v: object) -> object:
        if isinstance(v, str):
            v = v.strip().upper()
            if not v.replace("_", "").isalnum() or not v.isascii():
                raise ValueError("Role id may only contain letters, digits and underscores")
        return v


class RoleUpdate(BaseModel):
    description: str = Field(default="", max_length=2000)


class RoleRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    description: str


class RolesListResponse(BaseModel):
    roles: list[RoleRead]


class UserRolesResponse(BaseModel):
    """Role ids assigned to one user."""

    user_id: str
    role_ids: list[str]


class BulkRolesRequest(BaseModel):
    """Roles to assign or remove in one call, applied in order."""

    role_ids: list[str] = Field(..., max_length=500)


class AssignmentResult(BaseModel):
    """Outcome of a single assign/unassign: changed is False when it was a no-op."""

    user_id: str
    role_id: str
    changed: bool


class BulkAssignmentResponse(BaseModel):
    user_id: str
    changed: list[str] = Field(default_factory=list, description="Role ids actually added/removed")
    unchanged: list[str] = Field(default_factory=list, description="Role ids already in place")

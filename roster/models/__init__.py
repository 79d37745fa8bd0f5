"""SQLAlchemy ORM models."""

from roster.models.account import CREDENTIAL_PROVIDER, Account
from roster.models.base import Base
from roster.models.role import Role, UserRole
from roster.models.user import User

__all__ = ["Account", "Base", "CREDENTIAL_PROVIDER", "Role", "User", "UserRole"]

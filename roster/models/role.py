"""ORM models for roles and user-role assignments."""

from sqlalchemy import Column, ForeignKey, String, Text, UniqueConstraint

from roster.models.base import Base


class Role(Base):
    """Named permission bucket; the id is the role name itself (e.g. ADMINISTRATOR)."""

    __tablename__ = "roles"

    id = Column(String(64), primary_key=True)
    description = Column(Text, nullable=False, default="")


class UserRole(Base):
    """
    Link between one user and one role.

    (user_id, role_id) is unique at the storage level so assignment can be a
    single insert-if-absent statement.
    """

    __tablename__ = "users_roles"
    __table_args__ = (
        UniqueConstraint("user_id", "role_id", name="uq_users_roles_user_id_role_id"),
    )

    id = Column(String(36), primary_key=True)
    user_id = Column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    role_id = Column(
        String(64),
        ForeignKey("roles.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

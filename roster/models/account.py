"""ORM model for authentication accounts (password credentials)."""

from sqlalchemy import Column, DateTime, ForeignKey, String, func

from roster.models.base import Base

CREDENTIAL_PROVIDER = "credential"


class Account(Base):
    """
    Authentication account linked to a user.

    Email/password logins use provider_id 'credential' with the password hash in
    password; one such row per user is expected.
    """

    __tablename__ = "accounts"

    id = Column(String(64), primary_key=True)
    account_id = Column(String(255), nullable=False)
    provider_id = Column(String(64), nullable=False, default=CREDENTIAL_PROVIDER)
    user_id = Column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    password = Column(String(255), nullable=True)
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

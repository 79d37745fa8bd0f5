"""ORM model for dashboard user accounts."""

from sqlalchemy import Boolean, Column, Date, DateTime, String, func

from roster.models.base import Base


class User(Base):
    """
    Identity record managed from the admin dashboard.

    active and email_verified start False on every creation path; active is only
    flipped through the dedicated activation operation.
    """

    __tablename__ = "users"

    id = Column(String(36), primary_key=True)
    email = Column(String(255), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    fullname = Column(String(255), nullable=True)
    birthdate = Column(Date, nullable=True)
    gender = Column(String(32), nullable=True)
    active = Column(Boolean, nullable=False, default=False)
    email_verified = Column(Boolean, nullable=False, default=False)
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

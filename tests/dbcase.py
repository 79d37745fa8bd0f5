"""Shared TestCase that gives each test its own SQLite database file."""

import tempfile
import unittest
import uuid
from pathlib import Path

from sqlalchemy.orm import Session, sessionmaker

from roster.core.config import get_settings
from roster.core.database import build_engine
from roster.models import Base, Role, UserRole
from roster.schemas.users import UserCreate
from roster.services import users
from roster.services.auth_provider import SessionContext, sign_up_email


class DatabaseTestCase(unittest.TestCase):
    """Creates all tables in a temporary SQLite file; self.db is an open session."""

    def setUp(self) -> None:
        self._tempdir = tempfile.TemporaryDirectory()
        db_path = Path(self._tempdir.name) / "roster.sqlite3"
        self.engine = build_engine(f"sqlite:///{db_path}")
        Base.metadata.create_all(self.engine)
        self.SessionFactory = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)
        self.db: Session = self.SessionFactory()

    def tearDown(self) -> None:
        self.db.close()
        self.engine.dispose()
        self._tempdir.cleanup()

    def add_role(self, role_id: str, description: str = "") -> None:
        self.db.add(Role(id=role_id, description=description))
        self.db.commit()

    def add_user(self, email: str = "alice@example.com", name: str = "alice", settings=None):
        """Admin-style creation (no credential account)."""
        if settings is None:
            settings = get_settings()
        return users.create_user(self.db, UserCreate(email=email, name=name), settings)

    def sign_up(self, email: str, password: str = "Sup3rSecret!", name: str = "user") -> str:
        """Create a user with a credential account; returns its id."""
        return sign_up_email(self.db, email, password, name, SessionContext()).user_id

    def grant(self, user_id: str, *role_ids: str) -> None:
        """Link roles directly, creating missing role rows."""
        for role_id in role_ids:
            if self.db.get(Role, role_id) is None:
                self.db.add(Role(id=role_id, description=""))
                self.db.flush()
            self.db.add(UserRole(id=str(uuid.uuid4()), user_id=user_id, role_id=role_id))
        self.db.commit()

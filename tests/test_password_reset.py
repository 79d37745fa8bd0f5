"""Tests for roster.services.password_reset: hash via throwaway sign-up, cleanup, failure handling."""

import unittest
from unittest.mock import patch

from sqlalchemy.exc import OperationalError

from dbcase import DatabaseTestCase
from roster.core.config import settings
from roster.models import CREDENTIAL_PROVIDER, Account, User, UserRole
from roster.services import auth_provider
from roster.services.auth_provider import SessionContext
from roster.services.errors import (
    InvalidPassword,
    NotFound,
    PasswordHashError,
    PasswordResetError,
    SessionMismatch,
    Unauthorized,
)
from roster.services.password_reset import change_my_password, reset_password


class ResetTestCase(DatabaseTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.user_id = self.sign_up("target@example.com", password="OldPass123")

    def counts(self) -> tuple[int, int, int]:
        return (
            self.db.query(User).count(),
            self.db.query(Account).count(),
            self.db.query(UserRole).count(),
        )

    def can_sign_in(self, email: str, password: str) -> bool:
        try:
            auth_provider.sign_in_email(self.db, email, password, SessionContext())
        except Unauthorized:
            return False
        return True


class TestResetPassword(ResetTestCase):
    def test_new_password_works_and_old_does_not(self) -> None:
        reset_password(self.db, self.user_id, "NewPass123")
        self.assertTrue(self.can_sign_in("target@example.com", "NewPass123"))
        self.assertFalse(self.can_sign_in("target@example.com", "OldPass123"))

    def test_no_throwaway_rows_remain(self) -> None:
        self.add_role("MEMBER")
        before = self.counts()
        with patch.object(settings, "AUTH_SIGNUP_DEFAULT_ROLES", "MEMBER"):
            reset_password(self.db, self.user_id, "NewPass123")
        self.assertEqual(self.counts(), before)
        self.assertEqual(
            self.db.query(User).filter(User.email.like("temp-%")).count(), 0
        )

    def test_updates_existing_credential_in_place(self) -> None:
        account_id = self.db.query(Account.id).filter_by(user_id=self.user_id).scalar()
        reset_password(self.db, self.user_id, "NewPass123")
        accounts = self.db.query(Account).filter_by(user_id=self.user_id).all()
        self.assertEqual([a.id for a in accounts], [account_id])

    def test_creates_credential_when_missing(self) -> None:
        user = self.add_user(email="nocred@example.com", name="nocred")
        reset_password(self.db, user.id, "NewPass123")
        account = self.db.query(Account).filter_by(user_id=user.id).one()
        self.assertEqual(account.provider_id, CREDENTIAL_PROVIDER)
        self.assertEqual(account.account_id, user.id)
        self.assertTrue(self.can_sign_in("nocred@example.com", "NewPass123"))

    def test_caller_session_is_preserved(self) -> None:
        caller = SessionContext()
        caller.set_session_token("admin-session-token")
        reset_password(self.db, self.user_id, "NewPass123", caller)
        self.assertEqual(caller.session_token, "admin-session-token")

    def test_caller_without_session_stays_signed_out(self) -> None:
        caller = SessionContext()
        reset_password(self.db, self.user_id, "NewPass123", caller)
        self.assertIsNone(caller.session_token)

    def test_unknown_user(self) -> None:
        before = self.counts()
        with self.assertRaises(NotFound):
            reset_password(self.db, "no-such-user", "NewPass123")
        self.assertEqual(self.counts(), before)

    def test_invalid_password_rejected_before_any_write(self) -> None:
        before = self.counts()
        with self.assertRaises(InvalidPassword):
            reset_password(self.db, self.user_id, "short")
        self.assertEqual(self.counts(), before)


class TestResetFailures(ResetTestCase):
    def test_sign_up_failure_leaves_target_untouched(self) -> None:
        old_hash = self.db.query(Account.password).filter_by(user_id=self.user_id).scalar()
        caller = SessionContext()
        caller.set_session_token("admin-session-token")
        with patch(
            "roster.services.auth_provider.sign_up_email",
            side_effect=OperationalError("INSERT", {}, Exception("db down")),
        ):
            with self.assertRaises(PasswordHashError) as ctx:
                reset_password(self.db, self.user_id, "NewPass123", caller)
        self.assertEqual(ctx.exception.message, "Failed to generate password hash")
        self.assertEqual(
            self.db.query(Account.password).filter_by(user_id=self.user_id).scalar(), old_hash
        )
        self.assertEqual(caller.session_token, "admin-session-token")

    def test_target_write_failure_is_surfaced_after_cleanup(self) -> None:
        before = self.counts()
        with patch(
            "roster.services.password_reset.utcnow",
            side_effect=OperationalError("UPDATE", {}, Exception("db down")),
        ):
            with self.assertRaises(PasswordResetError):
                reset_password(self.db, self.user_id, "NewPass123")
        self.assertEqual(self.counts(), before)
        self.assertTrue(self.can_sign_in("target@example.com", "OldPass123"))


class TestChangeMyPassword(ResetTestCase):
    def test_own_password(self) -> None:
        change_my_password(self.db, self.user_id, self.user_id, "NewPass123")
        self.assertTrue(self.can_sign_in("target@example.com", "NewPass123"))

    def test_other_user_raises_session_mismatch(self) -> None:
        other = self.sign_up("other@example.com")
        with self.assertRaises(SessionMismatch):
            change_my_password(self.db, other, self.user_id, "NewPass123")
        self.assertTrue(self.can_sign_in("target@example.com", "OldPass123"))


if __name__ == "__main__":
    unittest.main()

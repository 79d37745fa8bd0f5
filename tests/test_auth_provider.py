"""Tests for roster.services.auth_provider: sign-up, sign-in, session resolution, SessionContext."""

import unittest
from unittest.mock import patch

from dbcase import DatabaseTestCase
from roster.core.config import settings
from roster.core.security import create_session_token
from roster.models import CREDENTIAL_PROVIDER, Account, User, UserRole
from roster.services import auth_provider
from roster.services.auth_provider import SessionContext
from roster.services.errors import DuplicateEmail, InvalidPassword, Unauthorized


class TestSessionContext(unittest.TestCase):
    def test_snapshot_and_restore(self) -> None:
        context = SessionContext()
        context.set_session_token("original")
        saved = context.snapshot()
        context.set_session_token("other")
        context.restore(saved)
        self.assertEqual(context.session_token, "original")

    def test_restore_none_clears(self) -> None:
        context = SessionContext()
        saved = context.snapshot()
        context.set_session_token("other")
        context.restore(saved)
        self.assertIsNone(context.session_token)
        self.assertNotIn(context.cookie_name, context.cookies)

    def test_uses_configured_cookie_name(self) -> None:
        context = SessionContext(cookies={settings.SESSION_COOKIE_NAME: "tok", "theme": "dark"})
        self.assertEqual(context.session_token, "tok")
        context.clear_session_token()
        self.assertEqual(context.cookies, {"theme": "dark"})


class TestSignUp(DatabaseTestCase):
    def test_creates_inactive_user_with_credential_and_session(self) -> None:
        context = SessionContext()
        result = auth_provider.sign_up_email(
            self.db, "New@Example.com", "Sup3rSecret!", "New", context
        )
        user = self.db.get(User, result.user_id)
        self.assertEqual(user.email, "new@example.com")
        self.assertFalse(user.active)
        self.assertFalse(user.email_verified)
        account = self.db.query(Account).filter_by(user_id=result.user_id).one()
        self.assertEqual(account.provider_id, CREDENTIAL_PROVIDER)
        self.assertNotEqual(account.password, "Sup3rSecret!")
        self.assertTrue(account.password.startswith("$2"))
        self.assertEqual(context.session_token, result.session_token)

    def test_duplicate_credential_email_rejected(self) -> None:
        self.sign_up("dup@example.com")
        with self.assertRaises(DuplicateEmail):
            self.sign_up("DUP@example.com")

    def test_email_of_user_without_login_allowed_by_default(self) -> None:
        self.add_user("shared@example.com")
        self.sign_up("shared@example.com")
        self.assertEqual(self.db.query(User).filter_by(email="shared@example.com").count(), 2)

    def test_email_of_user_without_login_rejected_when_unique_required(self) -> None:
        self.add_user("shared@example.com")
        with patch.object(settings, "USERS_REQUIRE_UNIQUE_EMAIL", True):
            with self.assertRaises(DuplicateEmail):
                self.sign_up("Shared@example.com")
        self.assertEqual(self.db.query(User).filter_by(email="shared@example.com").count(), 1)
        self.assertEqual(self.db.query(Account).count(), 0)

    def test_short_password_rejected(self) -> None:
        with self.assertRaises(InvalidPassword):
            auth_provider.sign_up_email(self.db, "a@example.com", "short", "A", SessionContext())
        self.assertEqual(self.db.query(User).count(), 0)

    def test_password_over_bcrypt_limit_rejected(self) -> None:
        # 40 characters but 80 bytes in UTF-8
        with self.assertRaises(InvalidPassword):
            auth_provider.sign_up_email(self.db, "a@example.com", "é" * 40, "A", SessionContext())
        self.assertEqual(self.db.query(User).count(), 0)

    def test_password_at_bcrypt_limit_accepted(self) -> None:
        user_id = auth_provider.sign_up_email(
            self.db, "a@example.com", "x" * 72, "A", SessionContext()
        ).user_id
        self.assertIsNotNone(self.db.get(User, user_id))

    def test_default_roles_linked_when_they_exist(self) -> None:
        self.add_role("MEMBER")
        with patch.object(settings, "AUTH_SIGNUP_DEFAULT_ROLES", "member, MISSING"):
            user_id = self.sign_up("m@example.com")
        links = [r.role_id for r in self.db.query(UserRole).filter_by(user_id=user_id)]
        self.assertEqual(links, ["MEMBER"])


class TestSignIn(DatabaseTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.user_id = self.sign_up("alice@example.com", password="CorrectHorse1")

    def test_correct_password_issues_session(self) -> None:
        context = SessionContext()
        user_id = auth_provider.sign_in_email(self.db, "Alice@example.com", "CorrectHorse1", context)
        self.assertEqual(user_id, self.user_id)
        self.assertEqual(auth_provider.resolve_session(self.db, context.session_token).id, self.user_id)

    def test_wrong_password_raises(self) -> None:
        context = SessionContext()
        with self.assertRaises(Unauthorized):
            auth_provider.sign_in_email(self.db, "alice@example.com", "wrong-password", context)
        self.assertIsNone(context.session_token)

    def test_unknown_email_raises(self) -> None:
        with self.assertRaises(Unauthorized):
            auth_provider.sign_in_email(self.db, "nobody@example.com", "CorrectHorse1", SessionContext())

    def test_sign_out_clears_token(self) -> None:
        context = SessionContext()
        auth_provider.sign_in_email(self.db, "alice@example.com", "CorrectHorse1", context)
        auth_provider.sign_out(context)
        self.assertIsNone(context.session_token)


class TestResolveSession(DatabaseTestCase):
    def test_missing_token(self) -> None:
        with self.assertRaises(Unauthorized):
            auth_provider.resolve_session(self.db, None)

    def test_garbage_token(self) -> None:
        with self.assertRaises(Unauthorized):
            auth_provider.resolve_session(self.db, "not-a-jwt")

    def test_token_for_deleted_user(self) -> None:
        token = create_session_token("00000000-0000-0000-0000-000000000000")
        with self.assertRaises(Unauthorized) as ctx:
            auth_provider.resolve_session(self.db, token)
        self.assertEqual(ctx.exception.message, "User not found")


if __name__ == "__main__":
    unittest.main()

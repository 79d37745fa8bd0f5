"""Unit tests for roster.services.guard: role-set check, fail-closed lookup, session identity check."""

import unittest
from unittest.mock import MagicMock

from sqlalchemy.exc import OperationalError

from dbcase import DatabaseTestCase
from roster.services.errors import Forbidden, SessionMismatch
from roster.services.guard import authorize, ensure_expected_user, get_role_ids, require_roles


class TestAuthorize(DatabaseTestCase):
    """authorize() allows on empty requirements or any overlapping role."""

    def setUp(self) -> None:
        super().setUp()
        self.user_id = self.sign_up("bob@example.com")
        self.grant(self.user_id, "USERS_CANEDITUSERS", "REPORTS_VIEWER")

    def test_empty_requirement_allows_any_user(self) -> None:
        self.assertTrue(authorize(self.db, self.user_id, []))
        self.assertTrue(authorize(self.db, "someone-without-roles", set()))

    def test_any_matching_role_suffices(self) -> None:
        self.assertTrue(authorize(self.db, self.user_id, ["ADMINISTRATOR", "USERS_CANEDITUSERS"]))

    def test_no_overlap_denies(self) -> None:
        self.assertFalse(authorize(self.db, self.user_id, ["ADMINISTRATOR", "ROLES_CANADDROLES"]))

    def test_user_without_roles_denied(self) -> None:
        other = self.sign_up("carol@example.com")
        self.assertFalse(authorize(self.db, other, ["USERS_CANEDITUSERS"]))

    def test_role_match_is_exact_string(self) -> None:
        self.assertFalse(authorize(self.db, self.user_id, ["users_caneditusers"]))

    def test_get_role_ids(self) -> None:
        self.assertEqual(
            get_role_ids(self.db, self.user_id), {"USERS_CANEDITUSERS", "REPORTS_VIEWER"}
        )


class TestAuthorizeFailsClosed(unittest.TestCase):
    """A database error during the role lookup denies access instead of raising."""

    def test_lookup_error_denies(self) -> None:
        session = MagicMock()
        session.query.side_effect = OperationalError("SELECT", {}, Exception("db down"))
        self.assertFalse(authorize(session, "u1", ["ADMINISTRATOR"]))
        session.rollback.assert_called_once()

    def test_lookup_error_not_consulted_for_empty_requirement(self) -> None:
        session = MagicMock()
        session.query.side_effect = OperationalError("SELECT", {}, Exception("db down"))
        self.assertTrue(authorize(session, "u1", []))
        session.query.assert_not_called()

    def test_require_roles_raises_forbidden_on_lookup_error(self) -> None:
        session = MagicMock()
        session.query.side_effect = OperationalError("SELECT", {}, Exception("db down"))
        with self.assertRaises(Forbidden):
            require_roles(session, "u1", ["ADMINISTRATOR"])


class TestRequireRoles(DatabaseTestCase):
    def test_raises_forbidden_without_role(self) -> None:
        user_id = self.sign_up("dave@example.com")
        with self.assertRaises(Forbidden) as ctx:
            require_roles(self.db, user_id, ("ADMINISTRATOR", "ROLES_CANADDROLES"))
        self.assertIn("ADMINISTRATOR", ctx.exception.message)

    def test_passes_with_role(self) -> None:
        user_id = self.sign_up("erin@example.com")
        self.grant(user_id, "ADMINISTRATOR")
        require_roles(self.db, user_id, ("ADMINISTRATOR", "ROLES_CANADDROLES"))


class TestEnsureExpectedUser(unittest.TestCase):
    """SessionMismatch is raised only when an expected id is given and differs."""

    def test_same_user_passes(self) -> None:
        ensure_expected_user("A", "A")

    def test_no_expectation_passes(self) -> None:
        ensure_expected_user("A", None)
        ensure_expected_user("A", "")

    def test_different_user_raises_session_mismatch(self) -> None:
        with self.assertRaises(SessionMismatch) as ctx:
            ensure_expected_user("B", "A")
        self.assertEqual(ctx.exception.message, "SessionMismatch")

    def test_session_mismatch_is_not_forbidden(self) -> None:
        with self.assertRaises(SessionMismatch) as ctx:
            ensure_expected_user("B", "A")
        self.assertNotIsInstance(ctx.exception, Forbidden)


if __name__ == "__main__":
    unittest.main()

"""Test settings: point the app at SQLite before any roster module reads the environment."""

import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SESSION_SECRET"] = "test-session-secret"
os.environ["USERS_REQUIRE_UNIQUE_EMAIL"] = "false"
os.environ["AUTH_SIGNUP_DEFAULT_ROLES"] = ""

from roster.services import auth_provider  # noqa: E402

# Cheapest bcrypt cost keeps the suite fast; hashes stay verifiable.
auth_provider.BCRYPT_ROUNDS = 4

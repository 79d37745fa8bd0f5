"""
Create a user with a password and roles (e.g. the first administrator). Run from project root:
  python -m roster.scripts.create_user EMAIL PASSWORD NAME [--role ROLE ...]
Example:
  python -m roster.scripts.create_user admin@example.com your-secure-password Admin --seed-roles
"""
import argparse
import logging
import sys

from sqlalchemy.orm import Session

from roster.core.database import SessionLocal
from roster.core.permissions import ADMINISTRATOR, BUILTIN_ROLES
from roster.models import Role
from roster.services import assignments, auth_provider, users
from roster.services.auth_provider import SessionContext
from roster.services.errors import RosterError

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)
logger = logging.getLogger(__name__)


def seed_builtin_roles(db: Session) -> int:
    """Insert the built-in roles that are missing; returns how many were added."""
    added = 0
    for role_id, description in BUILTIN_ROLES.items():
        if db.get(Role, role_id) is None:
            db.add(Role(id=role_id, description=description))
            added += 1
    db.commit()
    return added


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create a Roster user (bootstrap, no dashboard needed).")
    parser.add_argument("email", help="Email used to sign in")
    parser.add_argument("password", help="Password")
    parser.add_argument("name", help="Display name")
    parser.add_argument(
        "--role",
        action="append",
        dest="roles",
        help=f"Role to assign (repeatable, default {ADMINISTRATOR})",
    )
    parser.add_argument(
        "--seed-roles",
        action="store_true",
        help="Create the built-in roles first if they do not exist",
    )
    parser.add_argument(
        "--inactive",
        action="store_true",
        help="Leave the user inactive (default: activate it)",
    )
    args = parser.parse_args(argv)
    role_ids = [r.strip().upper() for r in (args.roles or [ADMINISTRATOR]) if r.strip()]

    db = SessionLocal()
    try:
        if args.seed_roles:
            added = seed_builtin_roles(db)
            logger.info("Seeded built-in roles: added=%s", added)
        missing = [r for r in role_ids if db.get(Role, r) is None]
        if missing:
            print(f"Unknown role(s): {', '.join(missing)} (try --seed-roles).", file=sys.stderr)
            return 1
        try:
            result = auth_provider.sign_up_email(
                db, args.email, args.password, args.name, SessionContext()
            )
        except RosterError as e:
            print(e.message, file=sys.stderr)
            return 1
        assignments.bulk_assign(db, result.user_id, role_ids)
        if not args.inactive:
            users.set_active(db, result.user_id, True)
        print(f"Created user '{result.email}' ({result.user_id}) with roles {', '.join(role_ids)}.")
        return 0
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())

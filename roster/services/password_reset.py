"""
Set a user's password without calling the auth provider's hashing directly.

The hash is obtained by signing up a throwaway identity with the new password,
reading back the hash the provider stored for it, deleting that identity, and
copying the hash onto the target user's credential account.

The steps commit one by one; there is no wrapping transaction. If the hash
cannot be written to the target after the throwaway identity is gone, the
error is surfaced (PasswordResetError) and the whole reset must be run again.
"""

from __future__ import annotations

import logging
import secrets
import time
import uuid

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from roster.models import CREDENTIAL_PROVIDER, Account, User, UserRole
from roster.services import auth_provider
from roster.services.auth_provider import SessionContext, utcnow, validate_password
from roster.services.errors import (
    NotFound,
    PasswordHashError,
    PasswordResetError,
    RosterError,
)
from roster.services.guard import ensure_expected_user

logger = logging.getLogger(__name__)

THROWAWAY_NAME = "Temp"
THROWAWAY_EMAIL_DOMAIN = "temp.invalid"


def _throwaway_email() -> str:
    return f"temp-{int(time.time() * 1000)}-{secrets.token_hex(4)}@{THROWAWAY_EMAIL_DOMAIN}"


def _credential_for(db: Session, user_id: str) -> Account | None:
    return (
        db.query(Account)
        .filter(Account.user_id == user_id, Account.provider_id == CREDENTIAL_PROVIDER)
        .first()
    )


def _delete_identity(db: Session, user_id: str) -> None:
    """Remove a throwaway user with its accounts and role links."""
    try:
        db.query(Account).filter(Account.user_id == user_id).delete(synchronize_session=False)
        db.query(UserRole).filter(UserRole.user_id == user_id).delete(synchronize_session=False)
        db.query(User).filter(User.id == user_id).delete(synchronize_session=False)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(
            "Throwaway identity cleanup failed; rows left behind",
            extra={"throwaway_user_id": user_id},
        )
        raise PasswordResetError(
            "Password hash was generated but the temporary account could not be removed."
        ) from e


def generate_password_hash(db: Session, new_password: str) -> str:
    """
    Return the hash the auth provider computes for new_password.

    Signs up a throwaway identity into its own SessionContext, reads its
    credential hash, then deletes it. Raises PasswordHashError if sign-up
    yields no credential.
    """
    scratch = SessionContext()
    try:
        result = auth_provider.sign_up_email(
            db, _throwaway_email(), new_password, THROWAWAY_NAME, scratch
        )
    except (RosterError, SQLAlchemyError) as e:
        db.rollback()
        logger.error("Throwaway sign-up failed: %s", e)
        raise PasswordHashError() from e

    account = _credential_for(db, result.user_id)
    password_hash = account.password if account is not None else None
    _delete_identity(db, result.user_id)
    scratch.clear_session_token()
    if not password_hash:
        raise PasswordHashError()
    return password_hash


def _write_credential(db: Session, user_id: str, password_hash: str) -> None:
    try:
        account = _credential_for(db, user_id)
        now = utcnow()
        if account is not None:
            account.password = password_hash
            account.updated_at = now
        else:
            db.add(
                Account(
                    id=f"acc-{uuid.uuid4()}",
                    account_id=user_id,
                    provider_id=CREDENTIAL_PROVIDER,
                    user_id=user_id,
                    password=password_hash,
                    created_at=now,
                    updated_at=now,
                )
            )
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error("Could not store new password hash", extra={"user_id": user_id})
        raise PasswordResetError(
            "Password hash was generated but could not be saved; run the reset again."
        ) from e


def reset_password(
    db: Session,
    user_id: str,
    new_password: str,
    caller_context: SessionContext | None = None,
) -> None:
    """
    Give user_id the password new_password.

    caller_context, when given, is the requesting browser's cookie jar; its
    session token is the same after the call as before it.
    """
    validate_password(new_password)
    if db.get(User, user_id) is None:
        raise NotFound(f"User '{user_id}' not found.")

    saved_token = caller_context.snapshot() if caller_context is not None else None
    try:
        password_hash = generate_password_hash(db, new_password)
    finally:
        if caller_context is not None:
            caller_context.restore(saved_token)

    _write_credential(db, user_id, password_hash)
    logger.info("Password reset", extra={"user_id": user_id})


def change_my_password(
    db: Session,
    session_user_id: str,
    user_id: str,
    new_password: str,
    caller_context: SessionContext | None = None,
) -> None:
    """Self-service change; user_id must be the session's user (else SessionMismatch)."""
    ensure_expected_user(session_user_id, user_id)
    reset_password(db, user_id, new_password, caller_context)

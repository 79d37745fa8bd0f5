"""Domain errors raised by the services; the API layer maps them to HTTP status codes."""


class RosterError(Exception):
    """Base class for service errors. message is safe to show to the caller."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class Unauthorized(RosterError):
    """No valid session (missing, invalid or expired token, or user gone)."""

    def __init__(self, message: str = "Unauthorized") -> None:
        super().__init__(message)


class SessionMismatch(RosterError):
    """
    The session belongs to a different user than the one the caller expected.

    Distinct from Forbidden so a client can reload instead of showing another
    account's data.
    """

    def __init__(self, message: str = "SessionMismatch") -> None:
        super().__init__(message)


class Forbidden(RosterError):
    """Valid session, but none of the required roles is assigned."""

    def __init__(self, message: str = "Forbidden") -> None:
        super().__init__(message)


class NotFound(RosterError):
    """The referenced user or role does not exist."""


class RoleExists(RosterError):
    """A role with the requested id already exists."""


class DuplicateEmail(RosterError):
    """Another user already has this email (only when unique emails are required)."""


class InvalidPassword(RosterError):
    """Password rejected by the length policy."""


class PasswordHashError(RosterError):
    """Sign-up did not produce a credential to copy the hash from; target untouched."""

    def __init__(self, message: str = "Failed to generate password hash") -> None:
        super().__init__(message)


class PasswordResetError(RosterError):
    """The hash was generated but could not be written to the target user."""

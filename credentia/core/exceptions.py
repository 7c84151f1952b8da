from __future__ import annotations

"""Centralized, structured error taxonomy for credentia.

Every anticipated identity failure has an `IdentityErrorKind`. The identity
service reports these kinds through `credentia.domain.results.Failure`
values rather than raising; the exception classes below exist for callers
that want to turn a failure into a raised error (`Failure.unwrap()`) and for
the store adapters, which signal uniqueness violations and driver failures
by raising.

Each exception carries a machine-readable `code` and a human-readable
`message`. Messages are plain English defaults; mapping codes to localized,
user-facing text is the calling layer's job.
"""

from enum import Enum
from typing import Final

__all__: Final = [
    "IdentityErrorKind",
    "CredentiaError",
    "IdentityError",
    "AccountConflictError",
    "DuplicateAccountError",
    "InvalidCredentialsError",
    "EmailNotVerifiedError",
    "InvalidOrExpiredTokenError",
    "AccountNotFoundError",
    "AlreadyVerifiedError",
    "DatabaseError",
    "error_for_kind",
]


class IdentityErrorKind(str, Enum):
    """The closed set of anticipated identity failures.

    Attributes:
        ACCOUNT_CONFLICT: The normalized email is already registered.
        INVALID_CREDENTIALS: Unknown email, no credential set, or wrong secret.
            The three causes are merged so the kind does not reveal whether
            an account exists.
        EMAIL_NOT_VERIFIED: Credentials are correct but verification is pending.
        INVALID_OR_EXPIRED_TOKEN: Token unknown, already consumed, or expired.
        ACCOUNT_NOT_FOUND: No account for the email (resend) or for the email
            a surviving token points at (verification).
        ALREADY_VERIFIED: Resend was requested for a verified account.
    """

    ACCOUNT_CONFLICT = "account_conflict"
    INVALID_CREDENTIALS = "invalid_credentials"
    EMAIL_NOT_VERIFIED = "email_not_verified"
    INVALID_OR_EXPIRED_TOKEN = "invalid_or_expired_token"
    ACCOUNT_NOT_FOUND = "account_not_found"
    ALREADY_VERIFIED = "already_verified"


class CredentiaError(Exception):
    """Base exception class for all custom errors in credentia.

    Attributes:
        message (str): A human-readable error message, suitable for logging.
        code (str): A unique, machine-readable error code.
    """

    message: str
    code: str = "generic_error"

    def __init__(self, message: str, code: str = "generic_error"):
        self.message = message
        self.code = code
        Exception.__init__(self, self.message)

    def __str__(self) -> str:
        return self.message


# ---------------------------------------------------------------------------
# Identity errors (one per IdentityErrorKind)
# ---------------------------------------------------------------------------


class IdentityError(CredentiaError):
    """Base for errors that correspond to an `IdentityErrorKind`.

    Subclasses set `kind`; the error `code` is always `kind.value`.
    """

    kind: IdentityErrorKind
    default_message: str = "Identity operation failed."

    def __init__(self, message: str | None = None):
        super().__init__(message or self.default_message, self.kind.value)


class AccountConflictError(IdentityError):
    """Raised when the email is already registered. Maps to `409 Conflict`."""

    kind = IdentityErrorKind.ACCOUNT_CONFLICT
    default_message = "An account with this email already exists."


class DuplicateAccountError(AccountConflictError):
    """Raised by an account store when an insert violates email uniqueness.

    This is the storage-level conflict signal. It still fires when two
    registrations race past the service's existence check.
    """

    default_message = "Account email violates the uniqueness constraint."


class InvalidCredentialsError(IdentityError):
    """Raised for unknown email, missing credential, or wrong secret.

    The message is deliberately generic. Maps to `401 Unauthorized`.
    """

    kind = IdentityErrorKind.INVALID_CREDENTIALS
    default_message = "Invalid email or password."


class EmailNotVerifiedError(IdentityError):
    """Raised when correct credentials belong to an unverified account."""

    kind = IdentityErrorKind.EMAIL_NOT_VERIFIED
    default_message = "Email address has not been verified."


class InvalidOrExpiredTokenError(IdentityError):
    """Raised when a verification token is unknown, consumed or expired."""

    kind = IdentityErrorKind.INVALID_OR_EXPIRED_TOKEN
    default_message = "Verification token is invalid or has expired."


class AccountNotFoundError(IdentityError):
    """Raised when no account matches. Maps to `404 Not Found`."""

    kind = IdentityErrorKind.ACCOUNT_NOT_FOUND
    default_message = "Account not found."


class AlreadyVerifiedError(IdentityError):
    """Raised when resending verification for an already verified account."""

    kind = IdentityErrorKind.ALREADY_VERIFIED
    default_message = "Email address is already verified."


# ---------------------------------------------------------------------------
# Persistence errors
# ---------------------------------------------------------------------------


class DatabaseError(CredentiaError):
    """Raised for low-level database interaction errors.

    Wraps driver errors so callers never see engine-specific exceptions.
    Maps to `500 Internal Server Error`; never retried by credentia.
    """

    def __init__(self, message: str, code: str = "database_error"):
        super().__init__(message, code)


_ERRORS_BY_KIND: Final = {
    IdentityErrorKind.ACCOUNT_CONFLICT: AccountConflictError,
    IdentityErrorKind.INVALID_CREDENTIALS: InvalidCredentialsError,
    IdentityErrorKind.EMAIL_NOT_VERIFIED: EmailNotVerifiedError,
    IdentityErrorKind.INVALID_OR_EXPIRED_TOKEN: InvalidOrExpiredTokenError,
    IdentityErrorKind.ACCOUNT_NOT_FOUND: AccountNotFoundError,
    IdentityErrorKind.ALREADY_VERIFIED: AlreadyVerifiedError,
}


def error_for_kind(kind: IdentityErrorKind, message: str | None = None) -> IdentityError:
    """Build the exception matching ``kind``."""
    return _ERRORS_BY_KIND[kind](message)

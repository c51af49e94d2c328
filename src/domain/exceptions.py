"""
Domain exceptions - Semantic error types for the OTP flows.

Every exception carries the user-facing message that the operation
boundary reports as the ``output`` of a failed result. Adapters translate
library faults (database, HTTP) into StoreError and TransportError so the
domain never sees infrastructure exception types.
"""


class AuthError(Exception):
    """Base class for authentication domain errors."""

    pass


class ValidationError(AuthError):
    """A required input (store, name, email or code) is missing."""

    pass


class DuplicateAccount(AuthError):
    """A confirmed account already exists for the email."""

    pass


class NotFound(AuthError):
    """No unconfirmed account matches the email/confirmation-code pair."""

    pass


class Expired(AuthError):
    """The code was issued longer ago than the validity window."""

    pass


class InvalidCredential(AuthError):
    """No account matches the email/login-code pair."""

    pass


class TransportError(AuthError):
    """Email dispatch failed."""

    pass


class StoreError(AuthError):
    """The underlying account store operation failed."""

    pass

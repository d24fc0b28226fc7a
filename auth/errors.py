"""
auth/errors.py -- Error taxonomy for the auth core.

Every failure the core reports to a client is one of the AuthError subclasses
below. Each carries the HTTP status and a machine-readable code; api/main.py
renders them all through one exception handler as {"message", "code"}.

Token-layer errors (TokenError and subclasses) are internal. The
Authentication Gate maps every one of them to Unauthenticated, so clients
never learn whether a token was expired, forged, or garbage.

Layer rule: stdlib only.
"""

from __future__ import annotations


class AuthError(Exception):
    """Base class for client-facing auth failures."""

    status_code: int = 400
    code: str = "auth_error"
    default_message: str = "Request failed."

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(AuthError):
    """Malformed input: missing fields, short password, bad email or role."""

    status_code = 400
    code = "validation_error"
    default_message = "Invalid input."


class DuplicateEmail(AuthError):
    status_code = 400
    code = "duplicate_email"
    default_message = "User already exists."


class InvalidCredentials(AuthError):
    """Signin failure. Deliberately identical for unknown email and wrong password."""

    status_code = 401
    code = "invalid_credentials"
    default_message = "Invalid email or password."


class Unauthenticated(AuthError):
    status_code = 401
    code = "unauthenticated"
    default_message = "Not authorized, token failed."


class Forbidden(AuthError):
    status_code = 403
    code = "forbidden"
    default_message = "Access denied."


class NotFound(AuthError):
    status_code = 404
    code = "not_found"
    default_message = "Not found."


class Transient(AuthError):
    """Infrastructure could not answer (timeout, store down). Safe to retry.

    Kept distinct from Unauthenticated so clients do not force a re-login on
    an infrastructure blip.
    """

    status_code = 503
    code = "transient"
    default_message = "Service temporarily unavailable. Please retry."


# ---------------------------------------------------------------------------
# Token-layer errors (internal)
# ---------------------------------------------------------------------------


class TokenError(Exception):
    """Raised when a bearer token cannot be accepted."""


class TokenInvalid(TokenError):
    """Malformed token, bad signature, wrong algorithm, or missing claims."""


class TokenExpired(TokenError):
    """Signature is valid but the exp claim is in the past."""

"""
auth/models.py -- Domain dataclasses for authentication entities.

Pattern: Data class (pure data container, zero logic). Stores, services and
routes do the work; these classes only own the shape.

Layer rule: no imports from api/ or tasks/.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

ROLE_USER = "user"
ROLE_ADMIN = "admin"
ROLES = (ROLE_USER, ROLE_ADMIN)


@dataclass
class User:
    """A persisted account.

    email is stored normalised (stripped, lower-cased) so the UNIQUE index on
    the column enforces case-insensitive uniqueness.

    id is None before the record is written; the store assigns an opaque
    uuid4 hex string on insert.
    """

    name: str
    email: str
    hashed_password: str
    role: str = ROLE_USER  # "user" | "admin"
    id: str | None = None
    created_at: str | None = None


@dataclass(frozen=True)
class PublicUser:
    """A User without its password hash -- the only shape that leaves the core."""

    id: str
    name: str
    email: str
    role: str


@dataclass(frozen=True)
class TokenClaims:
    """Verified contents of a bearer token."""

    user_id: str
    role: str
    issued_at: datetime
    expires_at: datetime


@dataclass(frozen=True)
class AuthContext:
    """Trusted identity attached to a request by the Authentication Gate.

    Request-scoped and never persisted. Authorization checks take one of these
    as their first argument, so they cannot be called on an unauthenticated
    request.
    """

    user: PublicUser
    role: str

    @property
    def user_id(self) -> str:
        return self.user.id

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN


@dataclass(frozen=True)
class AuthResult:
    """What signup and signin hand back: a fresh token plus the account."""

    token: str
    user: PublicUser

"""
auth/service.py -- Signup and signin orchestration.

Both handlers turn raw credentials into an AuthResult (token + public user)
using the Credential Store and the Token Service. They are plain blocking
functions; the HTTP layer runs them through auth.concurrency.run_blocking.

Account enumeration:
  signin() returns the same InvalidCredentials error for an unknown email
  and for a wrong password. It also runs bcrypt in both cases (against a
  dummy hash for unknown emails), so response time does not reveal which
  one happened. The two causes are still logged distinctly for auditing.

Role at signup:
  The requested role is taken from the caller. Settings.admin_signup_enabled
  switches off self-service admin accounts; with it off, admins come from
  the bootstrap command in main.py.
"""

from __future__ import annotations

import logging

from auth.errors import Forbidden, InvalidCredentials, ValidationError
from auth.models import ROLE_ADMIN, ROLE_USER, AuthResult, PublicUser, User
from auth.passwords import dummy_hash, verify_password
from auth.store import UserStore, normalize_email
from auth.tokens import create_access_token
from core.config import get_settings

logger = logging.getLogger("tasktracker.auth")


def to_public(user: User) -> PublicUser:
    """Strip the password hash. The only way a User leaves the core."""
    return PublicUser(id=user.id, name=user.name, email=user.email, role=user.role)


def authenticate_user(store: UserStore, email: str, password: str) -> User | None:
    """Return the User for a correct email/password pair, else None.

    Always runs bcrypt whether or not the user exists:
    - Unknown email: bcrypt runs against dummy_hash() (same cost as a real check)
    - Wrong password: bcrypt runs against the real hash (same cost)
    """
    user = store.get_by_email(email or "")
    if user is None:
        verify_password(password or "", dummy_hash())
        logger.info("Signin failed: unknown email")
        return None
    if not store.verify_password(user, password or ""):
        logger.info("Signin failed: wrong password for user %s", user.id)
        return None
    return user


def signup(store: UserStore, name: str, email: str, password: str, role: str | None = None) -> AuthResult:
    """Register an account and issue its first token.

    Raises ValidationError or DuplicateEmail from the store, or Forbidden when
    an admin account is requested while admin self-registration is disabled.
    """
    role = role or ROLE_USER
    if role == ROLE_ADMIN and not get_settings().admin_signup_enabled:
        logger.warning("Rejected admin self-registration for %s", normalize_email(email or ""))
        raise Forbidden("Admin accounts cannot be self-registered.")
    user = store.register(name, email, password, role)
    return AuthResult(token=create_access_token(user.id, user.role), user=to_public(user))


def signin(store: UserStore, email: str, password: str) -> AuthResult:
    """Verify credentials and issue a token. Raises InvalidCredentials on any mismatch."""
    if not email or not password:
        raise ValidationError("Please provide email and password.")
    user = authenticate_user(store, email, password)
    if user is None:
        raise InvalidCredentials()
    logger.info("Signin succeeded for user %s", user.id)
    return AuthResult(token=create_access_token(user.id, user.role), user=to_public(user))

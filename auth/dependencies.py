"""
auth/dependencies.py -- FastAPI Depends() helpers for authentication.

The Authentication Gate. Turns an "Authorization: Bearer <token>" header into
a trusted AuthContext, or stops the request with a 401:

  1. No bearer header                   -> Unauthenticated ("no token")
  2. Token fails verification           -> Unauthenticated
  3. Token subject no longer exists     -> Unauthenticated
  4. Otherwise the AuthContext is returned and attached to request.state.auth

Step 3 re-reads the user on every request, so a deleted account loses access
immediately even though its token has not expired. The lookup runs in a
worker thread under the request deadline; a timeout or store failure
surfaces as Transient (503), never as a 401.

get_optional_auth_context() is the soft variant (returns None when no bearer
header is present, still rejects a bad token). get_auth_context() is the hard
variant every protected route depends on.

Layer rule: no imports from api/ or tasks/.
  auth/dependencies.py may import from fastapi (for Request) because this
  module is part of the FastAPI dependency injection system.
"""

from __future__ import annotations

import logging

from fastapi import Request

from auth.concurrency import run_blocking
from auth.errors import TokenError, Unauthenticated
from auth.models import AuthContext
from auth.service import to_public
from auth.store import UserStore
from auth.tokens import decode_access_token

logger = logging.getLogger("tasktracker.auth")


def bearer_token(request: Request) -> str | None:
    """Return the bearer credential from the Authorization header, or None."""
    header = request.headers.get("Authorization", "")
    scheme, _, credential = header.partition(" ")
    credential = credential.strip()
    if scheme.lower() != "bearer" or not credential:
        return None
    return credential


async def get_optional_auth_context(request: Request) -> AuthContext | None:
    """Authenticate the request if it carries a bearer token.

    Returns None when no token was supplied. A token that is present but
    invalid still raises Unauthenticated -- a bad credential is never treated
    as anonymous.
    """
    token = bearer_token(request)
    if token is None:
        return None

    try:
        claims = decode_access_token(token)
    except TokenError as exc:
        logger.debug("Rejected bearer token: %s (%s)", type(exc).__name__, exc)
        raise Unauthenticated() from exc

    user_store: UserStore = request.app.state.user_store
    user = await run_blocking(user_store.get_by_id, claims.user_id)
    if user is None:
        logger.info("Rejected token for missing user %s", claims.user_id)
        raise Unauthenticated()
    if user.role != claims.role:
        logger.info("Role of user %s changed since token issue (%s -> %s)", user.id, claims.role, user.role)

    context = AuthContext(user=to_public(user), role=user.role)
    request.state.auth = context
    return context


async def get_auth_context(request: Request) -> AuthContext:
    """Require authentication. Raises Unauthenticated (401) otherwise.

    Use as a FastAPI dependency:
        @router.get("/protected")
        async def route(ctx: AuthContext = Depends(get_auth_context)): ...
    """
    context = await get_optional_auth_context(request)
    if context is None:
        raise Unauthenticated("Not authorized, no token.")
    return context

"""
auth/permissions.py -- The Authorization Gate.

Checks layered on an AuthContext that get_auth_context() already produced:

  require_admin         -- FastAPI dependency, role must be "admin"
  ensure_owner_or_admin -- resource.created_by == caller, or caller is admin
  authorize_resource    -- existence first (NotFound), then ownership (Forbidden)

Every function here takes an AuthContext (or depends on get_auth_context),
so an authorization check cannot run on an unauthenticated request.

Existence before ownership: a missing resource is NotFound for everyone, an
existing one owned by someone else is Forbidden. The check order never
changes with who is asking.
"""

from __future__ import annotations

from typing import Protocol, TypeVar

from fastapi import Depends

from auth.dependencies import get_auth_context
from auth.errors import Forbidden, NotFound
from auth.models import AuthContext


class Owned(Protocol):
    """Anything with a creator reference."""

    created_by: str


R = TypeVar("R", bound=Owned)


def require_admin(context: AuthContext = Depends(get_auth_context)) -> AuthContext:
    """Require the admin role. 401 if unauthenticated, 403 if not admin.

    Use as a FastAPI dependency:
        @router.delete("/admin-only")
        async def route(ctx: AuthContext = Depends(require_admin)): ...
    """
    if not context.is_admin:
        raise Forbidden("Not authorized as an admin.")
    return context


def ensure_owner_or_admin(context: AuthContext, owner_id: str) -> None:
    """Raise Forbidden unless the caller created the resource or is an admin."""
    if context.is_admin:
        return
    if str(owner_id) != context.user_id:
        raise Forbidden()


def authorize_resource(context: AuthContext, resource: R | None, *, kind: str = "Resource") -> R:
    """Return resource if the caller may act on it.

    Raises:
        NotFound:  resource is None (checked first).
        Forbidden: caller is neither the creator nor an admin.
    """
    if resource is None:
        raise NotFound(f"{kind} not found.")
    ensure_owner_or_admin(context, resource.created_by)
    return resource

"""
auth/concurrency.py -- Run blocking auth work off the event loop, under a deadline.

Store lookups and bcrypt are blocking, and bcrypt is slow on purpose. Calling
them directly from an async route would stall every other request on the
loop. run_blocking() moves the call to a worker thread (asyncio.to_thread)
and bounds the wait with asyncio.wait_for.

Failure mapping:
  - Deadline exceeded           -> Transient ("can't tell", not "denied")
  - AuthError from the callee   -> re-raised unchanged (already client-facing)
  - Any other exception         -> logged with traceback, raised as Transient,
                                   so store or hashing internals never reach
                                   the client.

A timed-out thread keeps running to completion in the background; only the
request stops waiting for it.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from typing import Any, TypeVar

from auth.errors import AuthError, Transient
from core.config import get_settings

logger = logging.getLogger("tasktracker.auth")

T = TypeVar("T")


async def run_blocking(func: Callable[..., T], *args: Any, timeout: float | None = None, **kwargs: Any) -> T:
    """Await func(*args, **kwargs) in a worker thread, bounded by timeout seconds."""
    deadline = timeout if timeout is not None else get_settings().auth_timeout_seconds
    try:
        return await asyncio.wait_for(asyncio.to_thread(func, *args, **kwargs), timeout=deadline)
    except AuthError:
        raise
    except asyncio.TimeoutError as exc:
        logger.warning("%s timed out after %.1fs", getattr(func, "__qualname__", func), deadline)
        raise Transient("Authentication service timed out. Please retry.") from exc
    except Exception as exc:
        logger.exception("%s failed", getattr(func, "__qualname__", func))
        raise Transient() from exc

"""
api/limiter.py -- Shared slowapi rate limiter instance.

Imported by api/main.py (mounted as middleware and on app.state) and by
api/routes/v1/auth.py (per-route limits on signup and signin).

A single shared instance means every route shares one in-memory counter
store; separate instances per module would never trip.
"""

from slowapi import Limiter
from slowapi.util import get_remote_address

from core.config import get_settings

limiter = Limiter(key_func=get_remote_address, storage_uri="memory://")


def auth_rate_limit() -> str:
    """Limit string for credential endpoints, e.g. "10/minute".

    Read from settings at request time so tests and deployments can tune it
    through AUTH_RATE_LIMIT without touching code.
    """
    return get_settings().auth_rate_limit

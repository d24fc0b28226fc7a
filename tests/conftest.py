"""
tests/conftest.py -- Shared test fixtures for TaskTracker tests.

This module provides:
  - _make_test_stores(): creates isolated in-memory DBs for users + tasks
  - _patch_lifespan(): wires test stores into app.state, bypassing real startup
  - api_client: TestClient plus an admin JWT for API integration tests
  - user_store: a fresh in-memory UserStore for unit tests

Design: Named shared-memory SQLite URIs (not plain :memory:) are required
because route handlers run store calls in worker threads. Plain :memory: DBs
are per-connection and would present a blank schema to each worker thread.
The named URI format (file:name?mode=memory&cache=shared&uri=true) shares
one in-memory instance across all connections in the same process.

SECRET_KEY and friends must be set before any auth/core import so
get_settings() sees them on its first (cached) call. BCRYPT_ROUNDS=4 keeps
hashing fast; AUTH_RATE_LIMIT is raised so the suite never trips the limiter.
"""

from __future__ import annotations

import os
import uuid
from collections.abc import Generator
from contextlib import asynccontextmanager

# CRITICAL: configure settings before any auth/core/api import.
os.environ.setdefault("SECRET_KEY", "test-secret-key-0123456789abcdef0123456789")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("AUTH_RATE_LIMIT", "1000/minute")

import pytest
from fastapi.testclient import TestClient

from api.main import app
from auth.store import UserStore
from auth.tokens import create_access_token
from tasks.store import TaskStore

# ---------------------------------------------------------------------------
# Store helpers
# ---------------------------------------------------------------------------


def _make_test_stores() -> tuple[UserStore, TaskStore]:
    """Create isolated named shared-memory SQLite stores.

    A random suffix per call keeps module-scoped fixtures from seeing each
    other's rows.
    """
    suffix = uuid.uuid4().hex[:8]
    user_store = UserStore(f"sqlite:///file:test_users_{suffix}?mode=memory&cache=shared&uri=true")
    task_store = TaskStore(f"sqlite:///file:test_tasks_{suffix}?mode=memory&cache=shared&uri=true")
    return user_store, task_store


def _patch_lifespan(user_store: UserStore, task_store: TaskStore):
    """Return an async context manager that replaces the real lifespan."""

    @asynccontextmanager
    async def test_lifespan(app):
        app.state.user_store = user_store
        app.state.task_store = task_store
        yield

    return test_lifespan


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture(scope="module")
def api_client() -> Generator[tuple[TestClient, str, str], None, None]:
    """Yield (client, admin_token, admin_id) for API integration tests.

    The TestClient uses the real FastAPI app with a patched lifespan so
    tests hit real route handlers but use isolated in-memory stores.
    The admin is created directly in the store, the way the create-admin
    command does it.
    """
    user_store, task_store = _make_test_stores()

    admin = user_store.register("Test Admin", "admin@example.com", "adminpass1", "admin")
    token = create_access_token(admin.id, admin.role)

    app.router.lifespan_context = _patch_lifespan(user_store, task_store)

    with TestClient(app, raise_server_exceptions=True) as client:
        yield client, token, admin.id

    user_store.close()
    task_store.close()


@pytest.fixture
def user_store() -> Generator[UserStore, None, None]:
    """Fresh in-memory UserStore for direct (same-thread) unit tests."""
    store = UserStore("sqlite:///:memory:")
    yield store
    store.close()

"""
tests/helpers.py -- Request helpers shared by the API integration tests.

Kept out of conftest.py so test modules can import them without loading
conftest a second time under another module name.
"""

from __future__ import annotations

import uuid

from fastapi.testclient import TestClient


def signup(client: TestClient, name: str = "Test User", email: str | None = None, password: str = "secret1", role: str = "user") -> dict:
    """Register through POST /api/v1/auth/signup and return the JSON body.

    email defaults to a unique address so tests never collide.
    """
    email = email or f"user-{uuid.uuid4().hex[:10]}@example.com"
    resp = client.post(
        "/api/v1/auth/signup",
        json={"name": name, "email": email, "password": password, "role": role},
    )
    assert resp.status_code == 201, resp.text
    return resp.json()


def bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


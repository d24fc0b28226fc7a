"""Unit tests for auth/concurrency.py -- run_blocking failure mapping.

No async test plugin is used; each test drives its coroutine with asyncio.run.
"""

import asyncio
import threading
import time

import pytest
from sqlalchemy.exc import OperationalError

from auth.concurrency import run_blocking
from auth.errors import Forbidden, Transient


def test_returns_value_from_worker_thread() -> None:
    main_thread = threading.get_ident()
    result = asyncio.run(run_blocking(threading.get_ident))
    assert result != main_thread


def test_passes_args_and_kwargs() -> None:
    assert asyncio.run(run_blocking(pow, 2, 10)) == 1024
    assert asyncio.run(run_blocking(int, "ff", base=16)) == 255


def test_timeout_is_transient_not_unauthenticated() -> None:
    with pytest.raises(Transient) as exc:
        asyncio.run(run_blocking(time.sleep, 0.5, timeout=0.05))
    assert exc.value.status_code == 503


def test_store_failure_is_transient() -> None:
    def broken():
        raise OperationalError("SELECT 1", {}, Exception("database is locked"))

    with pytest.raises(Transient) as exc:
        asyncio.run(run_blocking(broken))
    assert "locked" not in exc.value.message


def test_auth_errors_pass_through() -> None:
    def deny():
        raise Forbidden("nope")

    with pytest.raises(Forbidden):
        asyncio.run(run_blocking(deny))

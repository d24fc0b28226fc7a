"""Unit tests for auth/store.py -- the Credential Store.

Covers:
- register() then get_by_email() returns a user whose hash verifies
- Email lookups and uniqueness are case-insensitive
- Duplicate email raises DuplicateEmail, sequentially and under concurrency
- Input validation runs before hashing and raises ValidationError
"""

from concurrent.futures import ThreadPoolExecutor

import pytest

from auth import store as store_module
from auth.errors import DuplicateEmail, ValidationError
from auth.store import UserStore


class TestRegister:
    def test_register_then_lookup_verifies(self, user_store: UserStore) -> None:
        user_store.register("Ann", "ann@x.com", "secret1", "user")

        found = user_store.get_by_email("ann@x.com")
        assert found is not None
        assert found.name == "Ann"
        assert found.role == "user"
        assert found.hashed_password != "secret1"
        assert user_store.verify_password(found, "secret1")
        assert not user_store.verify_password(found, "secret2")

    def test_ids_are_opaque_and_unique(self, user_store: UserStore) -> None:
        a = user_store.register("A", "a@x.com", "secret1", "user")
        b = user_store.register("B", "b@x.com", "secret1", "user")
        assert a.id and b.id and a.id != b.id
        assert user_store.get_by_id(a.id).email == "a@x.com"

    def test_email_is_normalised(self, user_store: UserStore) -> None:
        user = user_store.register("Ann", "  Ann@X.com ", "secret1", "user")
        assert user.email == "ann@x.com"
        assert user_store.get_by_email("ANN@x.COM").id == user.id

    def test_created_at_is_set(self, user_store: UserStore) -> None:
        user = user_store.register("Ann", "ann@x.com", "secret1", "admin")
        assert user.created_at
        assert user.role == "admin"

    def test_unknown_lookups_return_none(self, user_store: UserStore) -> None:
        assert user_store.get_by_email("nobody@x.com") is None
        assert user_store.get_by_id("0" * 32) is None


class TestUniqueness:
    def test_second_signup_is_duplicate(self, user_store: UserStore) -> None:
        user_store.register("Ann", "ann@x.com", "secret1", "user")
        with pytest.raises(DuplicateEmail):
            user_store.register("Ann Again", "ann@x.com", "another1", "user")

    def test_duplicate_ignores_case(self, user_store: UserStore) -> None:
        user_store.register("Ann", "ann@x.com", "secret1", "user")
        with pytest.raises(DuplicateEmail):
            user_store.register("Ann", "ANN@X.COM", "secret1", "user")

    def test_insert_race_is_reported_as_duplicate(self, user_store: UserStore, monkeypatch) -> None:
        """If the pre-check misses a concurrent insert, the UNIQUE index still wins."""
        user_store.register("Ann", "ann@x.com", "secret1", "user")
        monkeypatch.setattr(user_store, "get_by_email", lambda email: None)
        with pytest.raises(DuplicateEmail):
            user_store.register("Ann", "ann@x.com", "secret1", "user")

    def test_concurrent_signups_exactly_one_wins(self, tmp_path) -> None:
        store = UserStore(f"sqlite:///{tmp_path / 'race.db'}")

        def attempt(i: int) -> str:
            try:
                store.register(f"Racer {i}", "race@x.com", "secret1", "user")
                return "ok"
            except DuplicateEmail:
                return "duplicate"

        try:
            with ThreadPoolExecutor(max_workers=8) as pool:
                outcomes = list(pool.map(attempt, range(8)))
        finally:
            assert store.count_users() == 1
            store.close()

        assert outcomes.count("ok") == 1
        assert outcomes.count("duplicate") == 7


class TestValidation:
    @pytest.mark.parametrize(
        "name, email, password, role",
        [
            ("", "ann@x.com", "secret1", "user"),
            ("Ann", "", "secret1", "user"),
            ("Ann", "ann@x.com", "", "user"),
            ("Ann", "not-an-email", "secret1", "user"),
            ("Ann", "ann@x.com", "12345", "user"),
            ("Ann", "ann@x.com", "x" * 73, "user"),
            ("Ann", "ann@x.com", "secret1", "superuser"),
        ],
    )
    def test_invalid_input(self, user_store: UserStore, name, email, password, role) -> None:
        with pytest.raises(ValidationError):
            user_store.register(name, email, password, role)
        assert user_store.count_users() == 0

    def test_six_characters_is_enough(self, user_store: UserStore) -> None:
        assert user_store.register("Ann", "ann@x.com", "123456", "user").id

    def test_validation_runs_before_hashing(self, user_store: UserStore, monkeypatch) -> None:
        def fail(*args, **kwargs):
            raise AssertionError("hash_password must not run for invalid input")

        monkeypatch.setattr(store_module, "hash_password", fail)
        with pytest.raises(ValidationError):
            user_store.register("Ann", "ann@x.com", "123", "user")

    def test_duplicate_check_runs_before_hashing(self, user_store: UserStore, monkeypatch) -> None:
        user_store.register("Ann", "ann@x.com", "secret1", "user")

        def fail(*args, **kwargs):
            raise AssertionError("hash_password must not run for a known duplicate")

        monkeypatch.setattr(store_module, "hash_password", fail)
        with pytest.raises(DuplicateEmail):
            user_store.register("Ann", "ann@x.com", "secret1", "user")


def test_list_and_batch_lookup(user_store: UserStore) -> None:
    a = user_store.register("A", "a@x.com", "secret1", "user")
    b = user_store.register("B", "b@x.com", "secret1", "admin")
    assert [u.email for u in user_store.list_users()] == ["a@x.com", "b@x.com"]
    assert set(user_store.get_many({a.id, b.id, "missing"})) == {a.id, b.id}
    assert user_store.get_many(set()) == {}
    assert user_store.ping() is True

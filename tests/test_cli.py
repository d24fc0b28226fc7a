"""Tests for the create-admin command in main.py."""

import io

import pytest

import main
from auth.store import UserStore


def _db_url(tmp_path) -> str:
    return f"sqlite:///{tmp_path / 'users.db'}"


def test_create_admin_from_stdin(tmp_path, monkeypatch, capsys) -> None:
    url = _db_url(tmp_path)
    monkeypatch.setattr("sys.stdin", io.StringIO("rootpass1\n"))

    code = main.main(["create-admin", "--name", "Root", "--email", "Root@X.com", "--password-stdin", "--database-url", url])

    assert code == 0
    assert "Created admin root@x.com" in capsys.readouterr().out
    store = UserStore(url)
    try:
        user = store.get_by_email("root@x.com")
        assert user is not None
        assert user.role == "admin"
        assert store.verify_password(user, "rootpass1")
    finally:
        store.close()


def test_duplicate_admin_exits_1(tmp_path, monkeypatch, capsys) -> None:
    url = _db_url(tmp_path)
    argv = ["create-admin", "--name", "Root", "--email", "root@x.com", "--password-stdin", "--database-url", url]

    monkeypatch.setattr("sys.stdin", io.StringIO("rootpass1\n"))
    assert main.main(argv) == 0
    monkeypatch.setattr("sys.stdin", io.StringIO("rootpass1\n"))
    assert main.main(argv) == 1
    assert "[!] User already exists." in capsys.readouterr().out


def test_weak_password_exits_1(tmp_path, monkeypatch, capsys) -> None:
    monkeypatch.setattr("sys.stdin", io.StringIO("abc\n"))
    code = main.main(
        ["create-admin", "--name", "Root", "--email", "root@x.com", "--password-stdin", "--database-url", _db_url(tmp_path)]
    )
    assert code == 1
    assert "at least" in capsys.readouterr().out


def test_prompted_passwords_must_match(tmp_path, monkeypatch) -> None:
    answers = iter(["rootpass1", "rootpass2"])
    monkeypatch.setattr(main.getpass, "getpass", lambda prompt="": next(answers))
    with pytest.raises(SystemExit, match="do not match"):
        main.main(["create-admin", "--name", "Root", "--email", "root@x.com", "--database-url", _db_url(tmp_path)])

#!/usr/bin/env python3
"""
TaskTracker admin command line.

Usage:
  python main.py create-admin --name "Ada" --email ada@example.com
  echo "s3cret!" | python main.py create-admin --name Ada --email ada@example.com --password-stdin

This is the controlled path for creating administrator accounts. It writes
through UserStore.register, so the same validation, hashing and uniqueness
rules apply as for /api/v1/auth/signup.

Environment variables:
  SECRET_KEY    Required (settings refuse to load without it).
  DATABASE_URL  SQLAlchemy URL of the user database. Default: sqlite:///tasktracker.db
"""

import argparse
import getpass
import sys
from typing import Optional

from auth.errors import AuthError
from auth.models import ROLE_ADMIN
from auth.store import UserStore
from core.config import get_settings


def _read_password(from_stdin: bool) -> str:
    """Read the password without echoing it or putting it in shell history."""
    if from_stdin:
        return sys.stdin.readline().rstrip("\n")
    first = getpass.getpass("Password: ")
    second = getpass.getpass("Repeat password: ")
    if first != second:
        raise SystemExit("  [!] Passwords do not match.")
    return first


def create_admin(args: argparse.Namespace) -> int:
    password = _read_password(args.password_stdin)
    store = UserStore(args.database_url or get_settings().database_url)
    try:
        user = store.register(args.name, args.email, password, ROLE_ADMIN)
    except AuthError as exc:
        print(f"  [!] {exc.message}")
        return 1
    finally:
        store.close()
    print(f"  Created admin {user.email} (id {user.id})")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tasktracker",
        description="TaskTracker administration.",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    admin = sub.add_parser("create-admin", help="Create an administrator account.")
    admin.add_argument("--name", required=True, help="Display name.")
    admin.add_argument("--email", required=True, help="Login email (case-insensitive, unique).")
    admin.add_argument(
        "--password-stdin",
        action="store_true",
        help="Read the password from the first line of stdin instead of prompting.",
    )
    admin.add_argument("--database-url", default=None, help="Override DATABASE_URL.")
    admin.set_defaults(handler=create_admin)
    return parser


def main(argv: Optional[list[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    return args.handler(args)


if __name__ == "__main__":
    sys.exit(main())

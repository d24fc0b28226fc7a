"""
auth/store.py -- SQLAlchemy Core persistence layer for user accounts.

Pattern: Repository + Data Mapper (same as tasks/store.py).
UserStore is the repository; _row_to_user is the mapper.
Route and dependency code never touches SQL directly.

Security:
  All queries use bound parameters. No f-strings in SQL.

  Email uniqueness is enforced by the UNIQUE index on users.email, not by the
  pre-insert lookup in register(). The lookup only gives a fast, friendly
  error; two concurrent signups can both pass it, and the loser's INSERT
  raises IntegrityError, which register() reports as DuplicateEmail. The
  store is the single authority -- callers add no locking of their own.

  Emails are stored lower-cased, so the UNIQUE index is case-insensitive in
  effect and lookups are a plain equality match.

  Plaintext passwords are hashed before they reach the table and are never
  logged.

Layer rule: no imports from api/ or tasks/. Import from core/ is allowed.
"""

from __future__ import annotations

import logging
import re
import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, MetaData, String, Table, Text, create_engine, event, func, select, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError

from auth.errors import DuplicateEmail, ValidationError
from auth.models import ROLES, User
from auth.passwords import MAX_PASSWORD_BYTES, hash_password
from auth.passwords import verify_password as _check_password
from core.config import get_settings

logger = logging.getLogger("tasktracker.auth")

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")

# ---------------------------------------------------------------------------
# Schema
# ---------------------------------------------------------------------------

_metadata = MetaData()

_users = Table(
    "users",
    _metadata,
    Column("id", String(32), primary_key=True),  # uuid4 hex
    Column("name", String(255), nullable=False),
    Column("email", String(255), nullable=False, unique=True),  # lower-cased
    Column("hashed_password", Text, nullable=False),
    Column("role", String(20), nullable=False, server_default="user"),
    Column("created_at", String(32), nullable=False),
)


# ---------------------------------------------------------------------------
# WAL mode
# ---------------------------------------------------------------------------


def _set_wal_mode(dbapi_conn, connection_record) -> None:
    """Enable WAL journal mode so readers never block behind a signup write.

    Set per-connection because SQLite PRAGMAs are not inherited by new
    connections from the pool.
    """
    dbapi_conn.execute("PRAGMA journal_mode=WAL")


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def normalize_email(email: str) -> str:
    return email.strip().lower()


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class UserStore:
    """Repository for User records.

    Usage:
        store = UserStore("sqlite:///tasktracker.db")
        user = store.register("Ann", "ann@x.com", "secret1", "user")
        same = store.get_by_email("ANN@x.com")
        store.verify_password(same, "secret1")   # True
        store.close()
    """

    def __init__(self, db_url: str | None = None) -> None:
        db_url = db_url or get_settings().database_url
        connect_args: dict = {}
        if db_url.startswith("sqlite"):
            connect_args["check_same_thread"] = False
        self.engine: Engine = create_engine(db_url, connect_args=connect_args)
        if db_url.startswith("sqlite"):
            event.listen(self.engine, "connect", _set_wal_mode)
        _metadata.create_all(self.engine)

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def register(self, name: str, email: str, password: str, role: str = "user") -> User:
        """Validate, hash, and persist a new account.

        Order matters: validation and the uniqueness pre-check run before
        bcrypt so bad input never pays the hashing cost.

        Raises:
            ValidationError: empty name/email, malformed email, password
                             too short or longer than 72 bytes, unknown role.
            DuplicateEmail:  email already registered (pre-check or INSERT race).
        """
        name = (name or "").strip()
        email = normalize_email(email or "")
        password = password or ""
        _validate_registration(name, email, password, role, get_settings().min_password_length)

        if self.get_by_email(email) is not None:
            raise DuplicateEmail()

        user = User(name=name, email=email, hashed_password=hash_password(password), role=role)
        user.id = self.create_user(user)
        logger.info("Registered user %s (role=%s)", user.id, role)
        return self.get_by_id(user.id) or user

    def create_user(self, user: User) -> str:
        """Insert a user and return its assigned id.

        The caller supplies an already-hashed password. Raises DuplicateEmail
        when the UNIQUE(email) constraint rejects the row.
        """
        user_id = user.id or uuid.uuid4().hex
        try:
            with self.engine.connect() as conn:
                conn.execute(
                    _users.insert().values(
                        id=user_id,
                        name=user.name,
                        email=normalize_email(user.email),
                        hashed_password=user.hashed_password,
                        role=user.role,
                        created_at=_now_iso(),
                    )
                )
                conn.commit()
        except IntegrityError as exc:
            raise DuplicateEmail() from exc
        return user_id

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_by_email(self, email: str) -> User | None:
        """Case-insensitive lookup. Returns None if not found."""
        with self.engine.connect() as conn:
            row = conn.execute(_users.select().where(_users.c.email == normalize_email(email))).fetchone()
        return _row_to_user(row) if row is not None else None

    def get_by_id(self, user_id: str) -> User | None:
        """Look up a user by primary key. Returns None if not found."""
        with self.engine.connect() as conn:
            row = conn.execute(_users.select().where(_users.c.id == str(user_id))).fetchone()
        return _row_to_user(row) if row is not None else None

    def get_many(self, user_ids: set[str]) -> dict[str, User]:
        """Batch lookup keyed by id. Used to render task creators."""
        if not user_ids:
            return {}
        with self.engine.connect() as conn:
            rows = conn.execute(_users.select().where(_users.c.id.in_(sorted(user_ids)))).fetchall()
        return {row.id: _row_to_user(row) for row in rows}

    def list_users(self) -> list[User]:
        """Return all users ordered by email. Admin-only operation."""
        with self.engine.connect() as conn:
            rows = conn.execute(_users.select().order_by(_users.c.email)).fetchall()
        return [_row_to_user(r) for r in rows]

    def count_users(self) -> int:
        with self.engine.connect() as conn:
            result = conn.execute(select(func.count()).select_from(_users)).scalar()
        return result or 0

    def verify_password(self, user: User, password: str) -> bool:
        """Constant-time check of a plaintext password against the stored hash."""
        return _check_password(password, user.hashed_password)

    def ping(self) -> bool:
        """Return True if the database answers a trivial query."""
        with self.engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        return True

    def close(self) -> None:
        self.engine.dispose()


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


def _validate_registration(name: str, email: str, password: str, role: str, min_length: int) -> None:
    if not name or not email or not password:
        raise ValidationError("Please provide name, email and password.")
    if len(name) > 255 or len(email) > 255 or not _EMAIL_RE.match(email):
        raise ValidationError("Please provide a valid email address.")
    if len(password) < min_length:
        raise ValidationError(f"Password must be at least {min_length} characters.")
    if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise ValidationError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes.")
    if role not in ROLES:
        raise ValidationError(f"Role must be one of: {', '.join(ROLES)}.")


# ---------------------------------------------------------------------------
# Row mapper (Data Mapper pattern)
# ---------------------------------------------------------------------------


def _row_to_user(row) -> User:
    return User(
        id=row.id,
        name=row.name,
        email=row.email,
        hashed_password=row.hashed_password,
        role=row.role,
        created_at=row.created_at,
    )

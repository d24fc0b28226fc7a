"""
tasks/store.py -- SQLAlchemy-backed persistence layer for tasks.

Uses SQLAlchemy Core (not ORM) so the Task dataclass in tasks/models.py
remains the authoritative domain representation. Swapping SQLite for
PostgreSQL is a connection string change.

Pattern: Repository + Data Mapper. TaskStore is the repository;
_row_to_task is the mapper. Route handlers never touch SQL directly.

The store knows nothing about who is asking. Scoping (users see their own
tasks, admins see all) is applied by passing created_by to the list and
count queries; the decision of what to pass belongs to the route.

Security: all queries use bound parameters. No f-strings in SQL.

Usage:
    store = TaskStore("sqlite:///tasktracker.db")
    task_id = store.create_task(Task(title="Write tests", created_by=user_id))
    store.update_task(task_id, status="completed")
    page = store.list_tasks(created_by=user_id, offset=0, limit=10)
    store.close()
"""

import uuid
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import Column, MetaData, String, Table, Text, create_engine, event, func, select, text
from sqlalchemy.engine import Engine

from core.config import get_settings
from tasks.models import Task

# ---------------------------------------------------------------------------
# Schema
# ---------------------------------------------------------------------------

metadata = MetaData()

_tasks = Table(
    "tasks",
    metadata,
    Column("id", String(32), primary_key=True),  # uuid4 hex
    Column("title", String(255), nullable=False),
    Column("description", Text, nullable=False, server_default=""),
    Column("status", String(20), nullable=False, server_default="pending"),
    Column("created_by", String(32), nullable=False, index=True),
    Column("created_at", String(32), nullable=False),
    Column("updated_at", String(32), nullable=False),
)

_UPDATABLE_FIELDS = {"title", "description", "status"}


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _set_wal_mode(dbapi_conn, connection_record) -> None:
    """Enable WAL journal mode. Set per-connection; PRAGMAs are not pooled."""
    dbapi_conn.execute("PRAGMA journal_mode=WAL")


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class TaskStore:
    def __init__(self, db_url: Optional[str] = None) -> None:
        db_url = db_url or get_settings().database_url
        connect_args: dict = {}
        if db_url.startswith("sqlite"):
            connect_args["check_same_thread"] = False
        self.engine: Engine = create_engine(db_url, connect_args=connect_args)
        if db_url.startswith("sqlite"):
            event.listen(self.engine, "connect", _set_wal_mode)
        metadata.create_all(self.engine)

    def create_task(self, task: Task) -> str:
        """Insert a new task and return its assigned id."""
        task_id = task.id or uuid.uuid4().hex
        now = _now_iso()
        with self.engine.connect() as conn:
            conn.execute(
                _tasks.insert().values(
                    id=task_id,
                    title=task.title,
                    description=task.description,
                    status=task.status,
                    created_by=task.created_by,
                    created_at=now,
                    updated_at=now,
                )
            )
            conn.commit()
        return task_id

    def get_task(self, task_id: str) -> Optional[Task]:
        """Fetch a single task by id. Returns None if not found."""
        with self.engine.connect() as conn:
            row = conn.execute(_tasks.select().where(_tasks.c.id == task_id)).fetchone()
        return _row_to_task(row) if row is not None else None

    def list_tasks(self, created_by: Optional[str] = None, offset: int = 0, limit: int = 10) -> list[Task]:
        """Return one page of tasks, newest first.

        created_by=None lists every task (admin view); otherwise only that
        user's tasks.
        """
        query = _tasks.select()
        if created_by is not None:
            query = query.where(_tasks.c.created_by == created_by)
        query = query.order_by(_tasks.c.created_at.desc(), _tasks.c.id).offset(offset).limit(limit)
        with self.engine.connect() as conn:
            rows = conn.execute(query).fetchall()
        return [_row_to_task(r) for r in rows]

    def count_tasks(self, created_by: Optional[str] = None) -> int:
        query = select(func.count()).select_from(_tasks)
        if created_by is not None:
            query = query.where(_tasks.c.created_by == created_by)
        with self.engine.connect() as conn:
            result = conn.execute(query).scalar()
        return result or 0

    def update_task(self, task_id: str, **fields) -> bool:
        """Update title, description and/or status.

        Unknown field names raise ValueError rather than being written.
        Returns True if a row was updated, False if task_id was not found.
        """
        unknown = set(fields) - _UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"Unknown task fields: {unknown!r}")
        fields["updated_at"] = _now_iso()
        with self.engine.connect() as conn:
            result = conn.execute(_tasks.update().where(_tasks.c.id == task_id).values(**fields))
            conn.commit()
        return result.rowcount > 0

    def delete_task(self, task_id: str) -> bool:
        """Permanently delete a task. Returns True if deleted, False if not found."""
        with self.engine.connect() as conn:
            result = conn.execute(_tasks.delete().where(_tasks.c.id == task_id))
            conn.commit()
        return result.rowcount > 0

    def ping(self) -> bool:
        with self.engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        return True

    def close(self) -> None:
        self.engine.dispose()


# ---------------------------------------------------------------------------
# Row mapper (Data Mapper pattern)
# ---------------------------------------------------------------------------


def _row_to_task(row) -> Task:
    return Task(
        id=row.id,
        title=row.title,
        description=row.description or "",
        status=row.status,
        created_by=row.created_by,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )

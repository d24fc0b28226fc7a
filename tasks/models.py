"""
tasks/models.py -- Domain dataclass for a task.

Pure data container with zero logic. Ownership rules live in
auth/permissions.py; persistence lives in tasks/store.py.
"""

from dataclasses import dataclass
from typing import Optional

TASK_STATUSES = ("pending", "completed")


@dataclass
class Task:
    """A unit of work owned by the user who created it.

    created_by is the creator's User.id. It is set once on insert and is the
    field the ownership check compares against.

    id is None before the record is written to the database.
    """

    title: str
    created_by: str
    description: str = ""
    status: str = "pending"  # "pending" | "completed"
    id: Optional[str] = None
    created_at: str = ""  # ISO 8601, set by store on insert
    updated_at: str = ""

"""
api/routes/v1/tasks.py -- Task routes, the protected consumers of the auth core.

Routes:
  GET    /tasks          -- list (admins: every task, users: their own), paginated
  POST   /tasks          -- create; created_by is always the caller
  GET    /tasks/{id}     -- detail; owner or admin
  PUT    /tasks/{id}     -- partial update; owner or admin
  DELETE /tasks/{id}     -- admin only, even for the creator

Every route depends on get_auth_context through the router, so the
Authentication Gate runs before any handler body. Per-resource checks use
authorize_resource(), which reports a missing task as 404 before it looks at
ownership.
"""

from __future__ import annotations

import math

from fastapi import APIRouter, Depends, Query, Request

from api.models import MessageResponse, TaskCreate, TaskPage, TaskResponse, TaskUpdate
from auth.concurrency import run_blocking
from auth.dependencies import get_auth_context
from auth.errors import NotFound, ValidationError
from auth.models import AuthContext
from auth.permissions import authorize_resource, require_admin
from auth.service import to_public
from auth.store import UserStore
from tasks.models import Task
from tasks.store import TaskStore

# All task routes require authentication. Router-level dependency applies to
# every route registered here, so no handler can be reached anonymously.
router = APIRouter(dependencies=[Depends(get_auth_context)])

# Keeps (page - 1) * limit well inside a 64-bit SQL integer.
MAX_PAGE = 1_000_000


async def _render(request: Request, tasks: list[Task]) -> list[TaskResponse]:
    """Attach creator name/email to each task (one batched user lookup)."""
    user_store: UserStore = request.app.state.user_store
    creators = await run_blocking(user_store.get_many, {t.created_by for t in tasks})
    return [
        TaskResponse.from_task(t, to_public(creators[t.created_by]) if t.created_by in creators else None)
        for t in tasks
    ]


async def _load(request: Request, context: AuthContext, task_id: str) -> Task:
    task_store: TaskStore = request.app.state.task_store
    task = await run_blocking(task_store.get_task, task_id)
    return authorize_resource(context, task, kind="Task")


# ---------------------------------------------------------------------------
# Collection
# ---------------------------------------------------------------------------


@router.get("/tasks", response_model=TaskPage)
async def list_tasks(
    request: Request,
    page: int = Query(default=1, ge=1, le=MAX_PAGE),
    limit: int = Query(default=10, ge=1, le=100),
    context: AuthContext = Depends(get_auth_context),
) -> TaskPage:
    """Return one page of tasks, newest first."""
    task_store: TaskStore = request.app.state.task_store
    owner = None if context.is_admin else context.user_id
    tasks = await run_blocking(task_store.list_tasks, owner, (page - 1) * limit, limit)
    total = await run_blocking(task_store.count_tasks, owner)
    total_pages = math.ceil(total / limit)
    return TaskPage(
        tasks=await _render(request, tasks),
        currentPage=page,
        totalPages=total_pages,
        totalTasks=total,
        hasNextPage=page < total_pages,
        hasPrevPage=page > 1,
    )


@router.post("/tasks", response_model=TaskResponse, status_code=201)
async def create_task(
    request: Request,
    body: TaskCreate,
    context: AuthContext = Depends(get_auth_context),
) -> TaskResponse:
    if not body.title:
        raise ValidationError("Please provide a task title.")
    task_store: TaskStore = request.app.state.task_store
    task = Task(
        title=body.title,
        description=body.description,
        status=body.status.value,
        created_by=context.user_id,
    )
    task_id = await run_blocking(task_store.create_task, task)
    created = await run_blocking(task_store.get_task, task_id)
    return TaskResponse.from_task(created, context.user)


# ---------------------------------------------------------------------------
# Item
# ---------------------------------------------------------------------------


@router.get("/tasks/{task_id}", response_model=TaskResponse)
async def get_task(
    request: Request,
    task_id: str,
    context: AuthContext = Depends(get_auth_context),
) -> TaskResponse:
    task = await _load(request, context, task_id)
    return (await _render(request, [task]))[0]


@router.put("/tasks/{task_id}", response_model=TaskResponse)
async def update_task(
    request: Request,
    task_id: str,
    body: TaskUpdate,
    context: AuthContext = Depends(get_auth_context),
) -> TaskResponse:
    """Apply the supplied fields. An empty title is ignored, not cleared."""
    await _load(request, context, task_id)
    updates: dict = {}
    if body.title:
        updates["title"] = body.title
    if body.description is not None:
        updates["description"] = body.description
    if body.status is not None:
        updates["status"] = body.status.value

    task_store: TaskStore = request.app.state.task_store
    if updates:
        await run_blocking(task_store.update_task, task_id, **updates)
    updated = await run_blocking(task_store.get_task, task_id)
    if updated is None:
        # Deleted by an admin between the check and the write.
        raise NotFound("Task not found.")
    return (await _render(request, [updated]))[0]


@router.delete("/tasks/{task_id}", response_model=MessageResponse)
async def delete_task(
    request: Request,
    task_id: str,
    context: AuthContext = Depends(require_admin),
) -> MessageResponse:
    """Hard delete. Admin only: ownership alone is not enough."""
    task_store: TaskStore = request.app.state.task_store
    deleted = await run_blocking(task_store.delete_task, task_id)
    if not deleted:
        raise NotFound("Task not found.")
    return MessageResponse(message="Task deleted successfully")

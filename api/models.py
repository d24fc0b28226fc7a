"""
API request and response models for TaskTracker REST endpoints.

These Pydantic v2 models define the HTTP transport contract for the API layer.
They are intentionally separate from the dataclasses in auth/models.py and
tasks/models.py, which own the internal domain representation. Route handlers
map between the two.

Credential fields are deliberately lenient (plain str with a default): the
Credential Store owns the rules for names, emails and passwords, and reports
violations as ValidationError with a readable message. Pydantic only guards
types and upper bounds here.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from auth.models import AuthResult, PublicUser
from tasks.models import Task

# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------


class RoleEnum(str, Enum):
    user = "user"
    admin = "admin"


class TaskStatusEnum(str, Enum):
    pending = "pending"
    completed = "completed"


# ---------------------------------------------------------------------------
# Auth -- request models
# ---------------------------------------------------------------------------


class SignupRequest(BaseModel):
    """Request body for POST /api/v1/auth/signup.

    No str_strip_whitespace here: whitespace is significant in passwords.
    The store strips name and email itself.
    """

    name: str = Field(default="", max_length=255)
    email: str = Field(default="", max_length=255)
    password: str = Field(default="", max_length=255)
    role: RoleEnum = RoleEnum.user


class SigninRequest(BaseModel):
    """Request body for POST /api/v1/auth/signin."""

    email: str = Field(default="", max_length=255)
    password: str = Field(default="", max_length=255)


# ---------------------------------------------------------------------------
# Auth -- response models
# ---------------------------------------------------------------------------


class UserResponse(BaseModel):
    """A user as clients see it. Never includes the password hash."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    email: str
    role: str

    @classmethod
    def from_public(cls, user: PublicUser) -> "UserResponse":
        return cls(id=user.id, name=user.name, email=user.email, role=user.role)


class AuthResponse(UserResponse):
    """Response for signup and signin: the user fields plus a bearer token.

    Flat shape {token, id, name, email, role} so a client can store the token
    and the profile from one response.
    """

    token: str

    @classmethod
    def from_result(cls, result: AuthResult) -> "AuthResponse":
        user = result.user
        return cls(token=result.token, id=user.id, name=user.name, email=user.email, role=user.role)


# ---------------------------------------------------------------------------
# Tasks
# ---------------------------------------------------------------------------


class TaskCreate(BaseModel):
    """Request body for POST /api/v1/tasks."""

    model_config = ConfigDict(str_strip_whitespace=True)

    title: str = Field(default="", max_length=255)
    description: str = Field(default="", max_length=5000)
    status: TaskStatusEnum = TaskStatusEnum.pending


class TaskUpdate(BaseModel):
    """Request body for PUT /api/v1/tasks/{id}. Omitted fields are left unchanged."""

    model_config = ConfigDict(str_strip_whitespace=True)

    title: Optional[str] = Field(default=None, max_length=255)
    description: Optional[str] = Field(default=None, max_length=5000)
    status: Optional[TaskStatusEnum] = None


class CreatorInfo(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: Optional[str] = None
    email: Optional[str] = None


class TaskResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    description: str
    status: str
    created_by: CreatorInfo
    created_at: str
    updated_at: str

    @classmethod
    def from_task(cls, task: Task, creator: Optional[PublicUser] = None) -> "TaskResponse":
        """Build a TaskResponse, filling creator name/email when known."""
        return cls(
            id=task.id,
            title=task.title,
            description=task.description,
            status=task.status,
            created_by=CreatorInfo(
                id=task.created_by,
                name=creator.name if creator else None,
                email=creator.email if creator else None,
            ),
            created_at=task.created_at,
            updated_at=task.updated_at,
        )


class TaskPage(BaseModel):
    """Response for GET /api/v1/tasks. Field names match the web client."""

    model_config = ConfigDict(frozen=True)

    tasks: list[TaskResponse]
    currentPage: int
    totalPages: int
    totalTasks: int
    hasNextPage: bool
    hasPrevPage: bool


# ---------------------------------------------------------------------------
# Shared
# ---------------------------------------------------------------------------


class MessageResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    message: str


class ErrorResponse(BaseModel):
    """Error body returned on every 4xx/5xx response."""

    model_config = ConfigDict(frozen=True)

    message: str
    code: str


class HealthResponse(BaseModel):
    """Response for GET /api/v1/health."""

    model_config = ConfigDict(frozen=True)

    status: str = "healthy"
    version: str
    components: dict[str, str] = Field(default_factory=dict)

"""Project and Task tables plus the request schemas that guard them."""

import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Annotated, Any, Optional

from pydantic import StringConstraints, field_validator, model_validator
from sqlalchemy import JSON, Column
from sqlmodel import Field, SQLModel

ID_PATTERN = r"^[0-9a-f]{32}$"

EntityId = Annotated[str, StringConstraints(strip_whitespace=True, pattern=ID_PATTERN)]
Tag = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=30)]


def new_id() -> str:
    return uuid.uuid4().hex


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _strip(value: Any) -> Any:
    return value.strip() if isinstance(value, str) else value


class TaskStatus(str, Enum):
    todo = "To Do"
    in_progress = "In Progress"
    done = "Done"


class TaskPriority(str, Enum):
    low = "Low"
    medium = "Medium"
    high = "High"


# Board columns in display order.
STATUSES: tuple[TaskStatus, ...] = (
    TaskStatus.todo,
    TaskStatus.in_progress,
    TaskStatus.done,
)


# ─── Projects ───────────────────────────────────────────────────────


class ProjectBase(SQLModel):
    name: str = Field(min_length=1, max_length=100)
    description: str = Field(min_length=1, max_length=500)

    @field_validator("name", "description", mode="before")
    @classmethod
    def strip_text(cls, v: Any) -> Any:
        return _strip(v)


class Project(ProjectBase, table=True):
    """Project table. ``task_count`` is a cache kept by the board service."""
    id: str = Field(default_factory=new_id, primary_key=True)
    task_count: int = Field(default=0)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)


class ProjectCreate(ProjectBase):
    pass


class ProjectUpdate(SQLModel):
    """Schema for updating a project. All fields optional."""
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    description: Optional[str] = Field(default=None, min_length=1, max_length=500)

    @field_validator("name", "description", mode="before")
    @classmethod
    def strip_text(cls, v: Any) -> Any:
        return _strip(v)


# ─── Tasks ──────────────────────────────────────────────────────────


class TaskBase(SQLModel):
    """Fields shared by the table and the create schema."""
    title: str = Field(min_length=1, max_length=100)
    description: str = Field(min_length=1, max_length=1000)
    priority: TaskPriority = Field(default=TaskPriority.medium)
    due_date: Optional[datetime] = Field(default=None)

    @field_validator("title", "description", mode="before")
    @classmethod
    def strip_text(cls, v: Any) -> Any:
        return _strip(v)


class Task(TaskBase, table=True):
    """Task table.

    ``order`` only sorts tasks within their (project_id, status) column.
    ``project_id`` is a plain indexed column; cascading on project delete
    is done by the board service, not by a foreign key.
    """
    id: str = Field(default_factory=new_id, primary_key=True)
    project_id: str = Field(index=True)
    status: TaskStatus = Field(default=TaskStatus.todo, index=True)
    order: int = Field(default=0)
    tags: list[str] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)


class TaskCreate(TaskBase):
    """Schema for creating a task. Omitting ``order`` appends to the column."""
    project_id: EntityId
    status: TaskStatus = TaskStatus.todo
    order: Optional[int] = Field(default=None, ge=0)
    tags: list[Tag] = Field(default_factory=list)


# Only reachable through transition_status / bulk_reorder, or never at all.
RESERVED_UPDATE_FIELDS = frozenset({"status", "order", "project_id"})


class TaskUpdate(SQLModel):
    """Schema for updating a task's descriptive fields. All fields optional."""
    title: Optional[str] = Field(default=None, min_length=1, max_length=100)
    description: Optional[str] = Field(default=None, min_length=1, max_length=1000)
    priority: Optional[TaskPriority] = None
    due_date: Optional[datetime] = None
    tags: Optional[list[Tag]] = None

    @model_validator(mode="before")
    @classmethod
    def reject_reserved_fields(cls, data: Any) -> Any:
        if isinstance(data, dict):
            reserved = sorted(RESERVED_UPDATE_FIELDS & set(data))
            if reserved:
                raise ValueError(
                    f"Fields {reserved} cannot be changed here; "
                    "use the status or bulk reorder endpoints"
                )
        return data

    @field_validator("title", "description", mode="before")
    @classmethod
    def strip_text(cls, v: Any) -> Any:
        return _strip(v)


class StatusTransition(SQLModel):
    """Body of the drag-and-drop status change.

    ``status`` stays a plain string so the board service can reject it with
    InvalidStatus instead of a schema error.
    """
    status: str
    order: Optional[int] = Field(default=None, ge=0)


class ReorderEntry(SQLModel):
    id: EntityId
    status: str
    order: int = Field(ge=0)


class BulkReorderRequest(SQLModel):
    tasks: list[ReorderEntry]

"""Task endpoints: CRUD, the grouped board view and drag-and-drop moves."""

from typing import Optional

from fastapi import APIRouter, Depends

from taskboard.board import BoardService
from taskboard.dependencies import get_board, get_repository
from taskboard.models import (
    BulkReorderRequest,
    StatusTransition,
    Task,
    TaskCreate,
    TaskPriority,
    TaskStatus,
    TaskUpdate,
)
from taskboard.repository import Repository
from taskboard.stats import grouped_by_status

router = APIRouter(prefix="/api/tasks", tags=["tasks"])


@router.get("/")
def list_tasks(
    status: Optional[TaskStatus] = None,
    priority: Optional[TaskPriority] = None,
    project_id: Optional[str] = None,
    repo: Repository = Depends(get_repository),
) -> list[Task]:
    """List all tasks, optionally filtered by status, priority and/or project."""
    return repo.list_tasks(status=status, priority=priority, project_id=project_id)


@router.get("/project/{project_id}")
def list_project_tasks(
    project_id: str, repo: Repository = Depends(get_repository)
) -> dict[str, list[Task]]:
    """A project's tasks grouped into the three board columns."""
    return grouped_by_status(repo, project_id)


# Registered before /{task_id} so the literal path wins.
@router.patch("/bulk-update-order")
def bulk_update_order(
    body: BulkReorderRequest, board: BoardService = Depends(get_board)
) -> list[Task]:
    """Apply a drag-and-drop snapshot of status/order pairs, entry by entry."""
    return board.bulk_reorder(entry.model_dump() for entry in body.tasks)


@router.get("/{task_id}")
def get_task(task_id: str, repo: Repository = Depends(get_repository)) -> Task:
    """Get a single task by ID."""
    return repo.get_task(task_id)


@router.post("/", status_code=201)
def create_task(body: TaskCreate, board: BoardService = Depends(get_board)) -> Task:
    """Create a new task at the end of its column unless an order is given."""
    return board.create_task(body.model_dump())


@router.put("/{task_id}")
def update_task(
    task_id: str, body: TaskUpdate, board: BoardService = Depends(get_board)
) -> Task:
    """Update a task's descriptive fields. Only provided fields are changed."""
    return board.update_task_fields(task_id, body.model_dump(exclude_unset=True))


@router.patch("/{task_id}/status")
def update_task_status(
    task_id: str, body: StatusTransition, board: BoardService = Depends(get_board)
) -> Task:
    """Move a task to another column, optionally at a given order."""
    return board.transition_status(task_id, body.status, body.order)


@router.delete("/{task_id}", status_code=204)
def delete_task(task_id: str, board: BoardService = Depends(get_board)) -> None:
    """Delete a task by ID."""
    board.delete_task(task_id)

"""Project endpoints: CRUD plus completion stats."""

from typing import Any

from fastapi import APIRouter, Depends

from taskboard.board import BoardService
from taskboard.dependencies import get_board, get_repository
from taskboard.models import Project, ProjectCreate, ProjectUpdate
from taskboard.repository import Repository
from taskboard.stats import project_stats

router = APIRouter(prefix="/api/projects", tags=["projects"])


@router.get("/")
def list_projects(repo: Repository = Depends(get_repository)) -> list[Project]:
    """List all projects, newest first."""
    return repo.list_projects()


@router.post("/", status_code=201)
def create_project(body: ProjectCreate, board: BoardService = Depends(get_board)) -> Project:
    """Create a project with a task_count of zero."""
    return board.create_project(body.model_dump())


@router.get("/{project_id}")
def get_project(project_id: str, repo: Repository = Depends(get_repository)) -> Project:
    """Get a single project by ID."""
    return repo.get_project(project_id)


@router.put("/{project_id}")
def update_project(
    project_id: str, body: ProjectUpdate, board: BoardService = Depends(get_board)
) -> Project:
    """Update name and/or description. Only provided fields are changed."""
    return board.update_project(project_id, body.model_dump(exclude_unset=True))


@router.delete("/{project_id}", status_code=204)
def delete_project(project_id: str, board: BoardService = Depends(get_board)) -> None:
    """Delete a project together with all of its tasks."""
    board.delete_project(project_id)


@router.get("/{project_id}/stats")
def get_project_stats(
    project_id: str, repo: Repository = Depends(get_repository)
) -> dict[str, Any]:
    """Get task totals per status, completion rate and overdue count for a project."""
    return project_stats(repo, project_id)

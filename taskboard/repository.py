"""Raw persistence for projects and tasks.

Every write commits on its own; there are no multi-row transactions and no
cross-entity checks here. Business rules live in ``taskboard.board``.
"""

from typing import Any, Optional

from sqlalchemy import func
from sqlmodel import Session, col, select

from taskboard.errors import ProjectNotFound, TaskNotFound
from taskboard.models import Project, Task, TaskPriority, TaskStatus, utc_now


class Repository:
    """Point lookups and CRUD keyed by id, over one SQLModel session."""

    def __init__(self, session: Session) -> None:
        self._session = session

    # -- projects ------------------------------------------------------------

    def create_project(self, project: Project) -> Project:
        return self._save(project)

    def get_project(self, project_id: str) -> Project:
        project = self._session.get(Project, project_id)
        if project is None:
            raise ProjectNotFound(project_id)
        return project

    def update_project(self, project_id: str, patch: dict[str, Any]) -> Project:
        project = self.get_project(project_id)
        for key, value in patch.items():
            setattr(project, key, value)
        project.updated_at = utc_now()
        return self._save(project)

    def delete_project(self, project_id: str) -> None:
        project = self.get_project(project_id)
        self._session.delete(project)
        self._session.commit()

    def list_projects(self) -> list[Project]:
        statement = select(Project).order_by(col(Project.created_at).desc())
        return list(self._session.exec(statement).all())

    # -- tasks ---------------------------------------------------------------

    def create_task(self, task: Task) -> Task:
        return self._save(task)

    def get_task(self, task_id: str) -> Task:
        task = self._session.get(Task, task_id)
        if task is None:
            raise TaskNotFound(task_id)
        return task

    def update_task(self, task_id: str, patch: dict[str, Any]) -> Task:
        task = self.get_task(task_id)
        for key, value in patch.items():
            setattr(task, key, value)
        task.updated_at = utc_now()
        return self._save(task)

    def delete_task(self, task_id: str) -> None:
        task = self.get_task(task_id)
        self._session.delete(task)
        self._session.commit()

    def list_tasks(
        self,
        status: Optional[TaskStatus] = None,
        priority: Optional[TaskPriority] = None,
        project_id: Optional[str] = None,
    ) -> list[Task]:
        """List tasks, optionally filtered, by order then newest first."""
        statement = select(Task)
        if status is not None:
            statement = statement.where(Task.status == status)
        if priority is not None:
            statement = statement.where(Task.priority == priority)
        if project_id is not None:
            statement = statement.where(Task.project_id == project_id)
        statement = statement.order_by(col(Task.order), col(Task.created_at).desc())
        return list(self._session.exec(statement).all())

    def list_tasks_by_project(self, project_id: str) -> list[Task]:
        statement = (
            select(Task)
            .where(Task.project_id == project_id)
            .order_by(col(Task.order), col(Task.created_at))
        )
        return list(self._session.exec(statement).all())

    def count_tasks(self, project_id: str) -> int:
        statement = select(func.count()).select_from(Task).where(Task.project_id == project_id)
        return self._session.exec(statement).one()

    def max_order(self, project_id: str, status: TaskStatus) -> Optional[int]:
        """Highest ``order`` in a (project, status) column, or None if it is empty."""
        statement = select(func.max(Task.order)).where(
            Task.project_id == project_id,
            Task.status == status,
        )
        return self._session.exec(statement).one()

    def refresh(self, row):
        """Reload *row* from the database; a later commit may have expired it."""
        self._session.refresh(row)
        return row

    def delete_tasks_by_project(self, project_id: str) -> int:
        """Delete every task of a project in one commit; returns how many went."""
        tasks = self.list_tasks_by_project(project_id)
        for task in tasks:
            self._session.delete(task)
        self._session.commit()
        return len(tasks)

    # -- internals -----------------------------------------------------------

    def _save(self, row):
        self._session.add(row)
        self._session.commit()
        self._session.refresh(row)
        return row

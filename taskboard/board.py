"""Board service: the status/order rules on top of raw repository CRUD.

This is the only place that changes a task's ``status`` or ``order`` and the
only place that keeps ``Project.task_count`` in step with the task table.
Nothing here is transactional across rows: each repository call commits on
its own, and failures propagate to the caller untouched.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping
from typing import Any, Optional

import pydantic

from taskboard.errors import BulkReorderError, InvalidStatus, ProjectNotFound, TaskboardError, ValidationError
from taskboard.models import (
    Project,
    ProjectCreate,
    ProjectUpdate,
    Task,
    TaskStatus,
    TaskUpdate,
)
from taskboard.repository import Repository

logger = logging.getLogger(__name__)

# Columns that may be set back to null through a field update.
_NULLABLE_FIELDS = frozenset({"due_date"})

TaskWriteHook = Callable[[str], None]


def coerce_status(value: Any) -> TaskStatus:
    """Return the TaskStatus for *value* or raise InvalidStatus."""
    if isinstance(value, TaskStatus):
        return value
    try:
        return TaskStatus(value)
    except ValueError:
        raise InvalidStatus(value) from None


def _check_order(value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ValidationError(f"order must be a non-negative integer, got {value!r}")
    return value


def _validation_message(exc: pydantic.ValidationError) -> str:
    first = exc.errors()[0]
    location = ".".join(str(part) for part in first.get("loc", ()))
    return f"{location}: {first['msg']}" if location else first["msg"]


class BoardService:
    """Task and project mutations with their cross-entity bookkeeping.

    Parameters
    ----------
    repo : Repository
        Storage for projects and tasks.
    after_task_write : iterable of callables, optional
        Hooks called with the affected project id after every task create
        or delete. Defaults to :meth:`recompute_task_count`.
    """

    def __init__(
        self,
        repo: Repository,
        after_task_write: Optional[Iterable[TaskWriteHook]] = None,
    ) -> None:
        self._repo = repo
        if after_task_write is None:
            self._after_task_write: list[TaskWriteHook] = [self.recompute_task_count]
        else:
            self._after_task_write = list(after_task_write)

    @property
    def repo(self) -> Repository:
        return self._repo

    # -- projects ------------------------------------------------------------

    def create_project(self, fields: Mapping[str, Any]) -> Project:
        try:
            data = ProjectCreate.model_validate(dict(fields))
        except pydantic.ValidationError as exc:
            raise ValidationError(_validation_message(exc)) from exc
        project = self._repo.create_project(Project.model_validate(data))
        logger.info("Created project %s (%s)", project.id, project.name)
        return project

    def update_project(self, project_id: str, patch: Mapping[str, Any]) -> Project:
        try:
            data = ProjectUpdate.model_validate(dict(patch))
        except pydantic.ValidationError as exc:
            raise ValidationError(_validation_message(exc)) from exc
        changes = {k: v for k, v in data.model_dump(exclude_unset=True).items() if v is not None}
        return self._repo.update_project(project_id, changes)

    def delete_project(self, project_id: str) -> None:
        """Delete a project and every task that references it.

        Tasks go first, then the project, in two separate commits. A crash in
        between leaves orphaned tasks behind; nothing compensates for that.
        """
        self._repo.get_project(project_id)
        removed = self._repo.delete_tasks_by_project(project_id)
        self._repo.delete_project(project_id)
        logger.info("Deleted project %s and %d task(s)", project_id, removed)

    # -- tasks ---------------------------------------------------------------

    def create_task(self, fields: Mapping[str, Any]) -> Task:
        """Create a task, appending it to its column when no order is given."""
        data = dict(fields)
        project_id = data.get("project_id")
        if not project_id:
            raise ValidationError("project_id is required")
        self._repo.get_project(project_id)

        status = coerce_status(data.get("status") or TaskStatus.todo)
        data["status"] = status
        if data.get("order") is None:
            highest = self._repo.max_order(project_id, status)
            data["order"] = 0 if highest is None else highest + 1
        else:
            data["order"] = _check_order(data["order"])
        if data.get("tags") is None:
            data["tags"] = []

        try:
            task = Task.model_validate(data)
        except pydantic.ValidationError as exc:
            raise ValidationError(_validation_message(exc)) from exc

        task = self._repo.create_task(task)
        logger.debug("Created task %s in %s/%s at order %d", task.id, project_id, status.value, task.order)
        self._task_written(project_id)
        # The hooks commit, which expires the task.
        return self._repo.refresh(task)

    def update_task_fields(self, task_id: str, patch: Mapping[str, Any]) -> Task:
        """Apply a partial update to title, description, priority, due_date or tags."""
        try:
            data = TaskUpdate.model_validate(dict(patch))
        except pydantic.ValidationError as exc:
            raise ValidationError(_validation_message(exc)) from exc
        changes = {
            key: value
            for key, value in data.model_dump(exclude_unset=True).items()
            if value is not None or key in _NULLABLE_FIELDS
        }
        return self._repo.update_task(task_id, changes)

    def transition_status(
        self,
        task_id: str,
        new_status: Any,
        new_order: Optional[int] = None,
    ) -> Task:
        """Move a task to *new_status*, and to *new_order* when given.

        Siblings are not renumbered; keeping a column tidy is up to the
        caller, usually through :meth:`bulk_reorder`.
        """
        status = coerce_status(new_status)
        changes: dict[str, Any] = {"status": status}
        if new_order is not None:
            changes["order"] = _check_order(new_order)
        return self._repo.update_task(task_id, changes)

    def bulk_reorder(self, entries: Iterable[Mapping[str, Any]]) -> list[Task]:
        """Apply ``{id, status, order}`` entries one by one, in the given sequence.

        No entry is checked against another. If entry *k* fails, entries
        before it stay applied, the rest are skipped, and BulkReorderError is
        raised carrying the applied tasks. Callers re-fetch to reconcile.
        """
        applied: list[Task] = []
        for index, entry in enumerate(entries):
            try:
                task_id = entry.get("id")
                if not task_id:
                    raise ValidationError(f"entry {index} has no id")
                status = coerce_status(entry.get("status"))
                order = _check_order(entry.get("order"))
                task = self._repo.update_task(task_id, {"status": status, "order": order})
            except TaskboardError as exc:
                logger.warning(
                    "Bulk reorder stopped at entry %d after %d applied: %s",
                    index, len(applied), exc.message,
                )
                raise BulkReorderError(self._reload(applied), index, exc) from exc
            applied.append(task)
        logger.info("Bulk reorder applied %d entries", len(applied))
        return self._reload(applied)

    def delete_task(self, task_id: str) -> None:
        project_id = self._repo.get_task(task_id).project_id
        self._repo.delete_task(task_id)
        self._task_written(project_id)

    # -- task_count bookkeeping ----------------------------------------------

    def recompute_task_count(self, project_id: str) -> None:
        """Set the project's task_count to the number of tasks referencing it.

        Read-then-write, so concurrent task writes can leave it briefly off
        until the next recompute. A project deleted in the meantime is skipped.
        """
        count = self._repo.count_tasks(project_id)
        try:
            self._repo.update_project(project_id, {"task_count": count})
        except ProjectNotFound:
            logger.warning("Skipping task_count recompute, project %s is gone", project_id)

    def _task_written(self, project_id: str) -> None:
        for hook in self._after_task_write:
            hook(project_id)

    def _reload(self, tasks: list[Task]) -> list[Task]:
        # Each update commits, expiring every task updated before it.
        return [self._repo.refresh(task) for task in tasks]

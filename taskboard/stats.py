"""Read-only board views: tasks grouped by column and completion stats."""

import math
from datetime import datetime, timezone
from typing import Any, Iterable, Optional

from taskboard.models import STATUSES, Task, TaskStatus
from taskboard.repository import Repository


def _as_utc(value: datetime) -> datetime:
    # SQLite hands datetimes back naive; everything is stored as UTC.
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def is_overdue(task: Task, now: Optional[datetime] = None) -> bool:
    """True when the task has a past due date and is not Done."""
    if task.due_date is None or task.status == TaskStatus.done:
        return False
    now = _as_utc(now) if now is not None else datetime.now(timezone.utc)
    return _as_utc(task.due_date) < now


def overdue_tasks(tasks: Iterable[Task], now: Optional[datetime] = None) -> list[Task]:
    return [task for task in tasks if is_overdue(task, now)]


def completion_rate(done: int, total: int) -> int:
    """Percentage of done tasks, halves rounded up; 0 for an empty project."""
    if total == 0:
        return 0
    return math.floor(100 * done / total + 0.5)


def group_tasks(tasks: Iterable[Task]) -> dict[str, list[Task]]:
    """Partition tasks into the three columns, each sorted by ``order``."""
    grouped: dict[str, list[Task]] = {status.value: [] for status in STATUSES}
    for task in tasks:
        grouped[TaskStatus(task.status).value].append(task)
    for column in grouped.values():
        column.sort(key=lambda task: task.order)
    return grouped


def grouped_by_status(repo: Repository, project_id: str) -> dict[str, list[Task]]:
    """Return the project's board as ``{"To Do": [...], "In Progress": [...], "Done": [...]}``.

    Raises ProjectNotFound when the project does not exist.
    """
    repo.get_project(project_id)
    return group_tasks(repo.list_tasks_by_project(project_id))


def count_by_status(tasks: Iterable[Task]) -> dict[str, int]:
    counts = {status.value: 0 for status in STATUSES}
    for task in tasks:
        counts[TaskStatus(task.status).value] += 1
    return counts


def project_stats(
    repo: Repository,
    project_id: str,
    now: Optional[datetime] = None,
) -> dict[str, Any]:
    """Totals per column plus completion rate for one project.

    Raises ProjectNotFound when the project does not exist.
    """
    project = repo.get_project(project_id)
    tasks = repo.list_tasks_by_project(project_id)
    by_status = count_by_status(tasks)
    total = len(tasks)
    return {
        "project": project.name,
        "total": total,
        "by_status": by_status,
        "completion_rate": completion_rate(by_status[TaskStatus.done.value], total),
        "overdue": len(overdue_tasks(tasks, now)),
    }

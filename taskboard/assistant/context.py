"""Formats a project and its tasks into a markdown prompt for the model."""

from datetime import datetime
from typing import Optional, Sequence

from taskboard.models import Project, Task, TaskStatus
from taskboard.stats import completion_rate, count_by_status, group_tasks, is_overdue

MAX_TASKS_PER_COLUMN = 50


def format_task(task: Task, now: Optional[datetime] = None) -> str:
    """One bullet line: priority, title, due date, tags."""
    parts = [f"- [{task.priority.value}] {task.title}"]
    if task.due_date is not None:
        due = task.due_date.date().isoformat()
        parts.append(f"(due {due}, OVERDUE)" if is_overdue(task, now) else f"(due {due})")
    if task.tags:
        parts.append(" ".join(f"#{tag}" for tag in task.tags))
    return " ".join(parts)


def format_task_detail(task: Task, now: Optional[datetime] = None) -> str:
    return "\n".join([
        format_task(task, now),
        f"  Status: {task.status.value}",
        f"  Description: {task.description}",
    ])


def format_project_context(
    project: Project,
    tasks: Sequence[Task],
    now: Optional[datetime] = None,
) -> str:
    """Render the whole board, column by column, for use as prompt context."""
    counts = count_by_status(tasks)
    done = counts[TaskStatus.done.value]
    lines = [
        f"# Project: {project.name}",
        "",
        project.description,
        "",
        f"Total tasks: {len(tasks)}, completion: {completion_rate(done, len(tasks))}%",
    ]

    for status, column in group_tasks(tasks).items():
        lines.append("")
        lines.append(f"## {status} ({len(column)})")
        if not column:
            lines.append("_none_")
            continue
        for task in column[:MAX_TASKS_PER_COLUMN]:
            lines.append(format_task(task, now))
        if len(column) > MAX_TASKS_PER_COLUMN:
            lines.append(f"... and {len(column) - MAX_TASKS_PER_COLUMN} more")

    return "\n".join(lines)

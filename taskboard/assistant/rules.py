"""Keyword-matching answer provider.

Works without any external service: the question is lowercased and checked
against a fixed chain of keyword groups, first match wins.
"""

from datetime import datetime
from typing import Optional, Sequence

from taskboard.assistant.base import AnswerProvider
from taskboard.models import Project, Task, TaskPriority, TaskStatus
from taskboard.stats import completion_rate, count_by_status, overdue_tasks

DEFAULT_SUGGESTIONS = "\n".join([
    "- Review task description for clarity and completeness",
    "- Consider breaking down complex tasks into smaller subtasks",
    "- Set appropriate priority based on project goals",
])


def _titles(tasks: Sequence[Task], limit: Optional[int] = None) -> str:
    shown = tasks if limit is None else tasks[:limit]
    text = ", ".join(task.title for task in shown)
    if limit is not None and len(tasks) > limit:
        text += "..."
    return text


def _has_any(text: str, *keywords: str) -> bool:
    return any(keyword in text for keyword in keywords)


def _pending(tasks: Sequence[Task], priority: TaskPriority) -> list[Task]:
    return [t for t in tasks if t.priority == priority and t.status != TaskStatus.done]


def _with_status(tasks: Sequence[Task], status: TaskStatus) -> list[Task]:
    return [t for t in tasks if t.status == status]


class RuleBasedProvider(AnswerProvider):
    name = "rules"

    def __init__(self, now: Optional[datetime] = None) -> None:
        # Fixed clock for tests; None means "now" at call time.
        self._now = now

    def _summarize(self, project: Project, tasks: Sequence[Task]) -> str:
        counts = count_by_status(tasks)
        progress = completion_rate(counts[TaskStatus.done.value], len(tasks))
        return "\n".join([
            f"**{project.name}** - Project Analysis",
            "",
            "**TASK OVERVIEW**",
            f"Total Tasks: {len(tasks)}",
            f"To Do: {counts[TaskStatus.todo.value]} tasks",
            f"In Progress: {counts[TaskStatus.in_progress.value]} tasks",
            f"Completed: {counts[TaskStatus.done.value]} tasks",
            f"Overall Progress: {progress}%",
        ])

    def suggest(self, task: Task) -> str:
        return DEFAULT_SUGGESTIONS

    def answer(
        self,
        project: Project,
        tasks: Sequence[Task],
        question: str,
        task: Optional[Task] = None,
    ) -> str:
        q = question.lower()

        if _has_any(q, "overdue", "late"):
            late = overdue_tasks(tasks, self._now)
            if late:
                return f"You have {len(late)} overdue task(s): {_titles(late)}"
            return "No tasks are currently overdue. Great job staying on track!"

        if _has_any(q, "progress", "complete"):
            done = len(_with_status(tasks, TaskStatus.done))
            rate = completion_rate(done, len(tasks))
            return f'Project "{project.name}" is {rate}% complete ({done}/{len(tasks)} tasks finished).'

        for priority, keywords in (
            (TaskPriority.high, ("high priority", "urgent", "high")),
            (TaskPriority.medium, ("medium priority", "medium")),
            (TaskPriority.low, ("low priority", "low")),
        ):
            if _has_any(q, *keywords):
                pending = _pending(tasks, priority)
                label = priority.value.lower()
                if pending:
                    return f"You have {len(pending)} {label} priority task(s): {_titles(pending)}"
                if priority == TaskPriority.high:
                    return "No high priority tasks are pending. Well done!"
                return f"No {label} priority tasks are pending."

        if "priority" in q:
            high = len(_pending(tasks, TaskPriority.high))
            medium = len(_pending(tasks, TaskPriority.medium))
            low = len(_pending(tasks, TaskPriority.low))
            return (
                f"Priority breakdown: {high} high priority, {medium} medium priority, "
                f"{low} low priority tasks pending."
            )

        if _has_any(q, "in progress", "working"):
            active = _with_status(tasks, TaskStatus.in_progress)
            if active:
                return f"Currently {len(active)} task(s) in progress: {_titles(active)}"
            return 'No tasks are currently in progress. Consider moving some tasks from "To Do"!'

        if _has_any(q, "todo", "to do", "pending"):
            todo = _with_status(tasks, TaskStatus.todo)
            if todo:
                return f"You have {len(todo)} task(s) to start: {_titles(todo, limit=5)}"
            return "No pending tasks! All tasks are either in progress or completed."

        if _has_any(q, "done", "finished", "completed"):
            done = _with_status(tasks, TaskStatus.done)
            if done:
                return f"You have completed {len(done)} task(s): {_titles(done, limit=5)}"
            return "No tasks completed yet. Time to get started!"

        if _has_any(q, "count", "how many"):
            counts = count_by_status(tasks)
            return (
                f'Project "{project.name}" has {len(tasks)} total tasks: '
                f"{counts[TaskStatus.todo.value]} to do, "
                f"{counts[TaskStatus.in_progress.value]} in progress, "
                f"{counts[TaskStatus.done.value]} completed."
            )

        if _has_any(q, "which", "what tasks", "show me"):
            return self._list_answer(tasks)

        return (
            f'I can help analyze your project "{project.name}" with {len(tasks)} tasks. '
            "Try asking about: project progress, overdue tasks, high priority items, "
            "task counts, or specific task statuses."
        )

    def _list_answer(self, tasks: Sequence[Task]) -> str:
        # Questions naming a priority never get here; the priority branches answer them.
        listed = ", ".join(
            f'"{t.title}" ({t.status.value}, {t.priority.value} priority)' for t in tasks[:10]
        )
        suffix = "..." if len(tasks) > 10 else ""
        return f"Here are all tasks: {listed}{suffix}"

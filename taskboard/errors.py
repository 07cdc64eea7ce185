"""Typed failures raised by the repository, board service and assistant.

The HTTP layer maps each class to one status code and one JSON shape; see
``taskboard.main``.
"""

from __future__ import annotations

from typing import Any


class TaskboardError(Exception):
    """Base class for every failure the core surfaces to callers."""

    code = "error"
    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict[str, Any]:
        return {"success": False, "error": self.code, "message": self.message}


class ValidationError(TaskboardError):
    """Malformed or out-of-range input, rejected before any mutation."""

    code = "validation_error"
    status_code = 400


class InvalidStatus(ValidationError):
    """A status value outside To Do / In Progress / Done."""

    code = "invalid_status"

    def __init__(self, value: Any) -> None:
        super().__init__(
            f"Invalid status {value!r}: must be one of To Do, In Progress, Done"
        )
        self.value = value


class NotFound(TaskboardError):
    code = "not_found"
    status_code = 404

    def __init__(self, kind: str, entity_id: str) -> None:
        super().__init__(f"{kind} not found: {entity_id}")
        self.entity_id = entity_id


class ProjectNotFound(NotFound):
    code = "project_not_found"

    def __init__(self, project_id: str) -> None:
        super().__init__("Project", project_id)


class TaskNotFound(NotFound):
    code = "task_not_found"

    def __init__(self, task_id: str) -> None:
        super().__init__("Task", task_id)


class BulkReorderError(TaskboardError):
    """A bulk reorder stopped part way through.

    Entries before ``failed_index`` were applied and stay applied; the
    failing entry and everything after it were not. The underlying error is
    chained as ``__cause__`` and decides the HTTP status.
    """

    code = "bulk_reorder_incomplete"

    def __init__(self, applied: list, failed_index: int, cause: TaskboardError) -> None:
        super().__init__(
            f"Bulk reorder stopped at entry {failed_index}: {cause.message}"
        )
        self.applied = applied
        self.failed_index = failed_index
        self.cause = cause
        self.status_code = cause.status_code

    def to_dict(self) -> dict[str, Any]:
        return {
            **super().to_dict(),
            "cause": self.cause.code,
            "failed_index": self.failed_index,
            "applied": [task.id for task in self.applied],
        }


class AssistantUnavailable(TaskboardError):
    """The configured answer provider cannot be used (e.g. missing API key)."""

    code = "assistant_unavailable"
    status_code = 503


class AssistantError(TaskboardError):
    """The answer provider failed or returned something unusable."""

    code = "assistant_error"
    status_code = 502

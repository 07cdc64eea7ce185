"""The answer-provider capability shared by every assistant backend."""

from abc import ABC, abstractmethod
from typing import Optional, Sequence

from taskboard.models import Project, Task

EMPTY_PROJECT_SUMMARY = "This project currently has no tasks to summarize."


class AnswerProvider(ABC):
    """Answers questions about a project's tasks.

    Implementations get the project and its tasks already loaded; they never
    touch storage themselves.
    """

    name = "base"

    def summarize(self, project: Project, tasks: Sequence[Task]) -> str:
        """Summarize the project. An empty project gets a fixed reply."""
        if not tasks:
            return EMPTY_PROJECT_SUMMARY
        return self._summarize(project, tasks)

    @abstractmethod
    def _summarize(self, project: Project, tasks: Sequence[Task]) -> str:
        ...

    @abstractmethod
    def answer(
        self,
        project: Project,
        tasks: Sequence[Task],
        question: str,
        task: Optional[Task] = None,
    ) -> str:
        """Answer a free-text question, optionally about one specific task."""

    @abstractmethod
    def suggest(self, task: Task) -> str:
        """Suggest improvements for a single task."""

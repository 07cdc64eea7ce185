"""Answer provider backed by the Anthropic Messages API."""

import logging
from typing import Optional, Sequence

from anthropic import Anthropic, APIError

from taskboard import config
from taskboard.assistant.base import AnswerProvider
from taskboard.assistant.context import format_project_context, format_task_detail
from taskboard.errors import AssistantError, AssistantUnavailable
from taskboard.models import Project, Task

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = """You are a project assistant for a kanban task board. Tasks move through \
three columns: To Do, In Progress and Done. You receive the current board as markdown.

Rules:
- Answer only from the board you are given; never invent tasks, dates or people
- Be brief: a short paragraph or a few bullet points
- A task is overdue when its due date has passed and it is not Done
- If the question is unrelated to the project, say what you can help with instead"""

SUMMARY_INSTRUCTION = (
    "Summarize this project: overall progress, what is in flight, "
    "what is blocked or overdue, and the most important next steps."
)

SUGGEST_INSTRUCTION = (
    "Suggest up to three concrete improvements to this task: clearer wording, "
    "splitting it up, priority or due date. One bullet each."
)


class ClaudeProvider(AnswerProvider):
    """Sends the formatted board plus the request to Claude, one call per operation."""

    name = "anthropic"

    def __init__(
        self,
        client: Optional[Anthropic] = None,
        model: str = config.ASSISTANT_MODEL,
        max_tokens: int = config.ASSISTANT_MAX_TOKENS,
    ) -> None:
        self._client = client
        self._model = model
        self._max_tokens = max_tokens

    def _get_client(self) -> Anthropic:
        """Lazy-initialize the Anthropic client."""
        if self._client is None:
            api_key = config.anthropic_api_key()
            if not api_key:
                raise AssistantUnavailable(
                    "Assistant is not configured. Set ANTHROPIC_API_KEY in the environment."
                )
            self._client = Anthropic(api_key=api_key)
        return self._client

    def _complete(self, prompt: str) -> str:
        client = self._get_client()
        try:
            message = client.messages.create(
                model=self._model,
                max_tokens=self._max_tokens,
                system=SYSTEM_PROMPT,
                messages=[{"role": "user", "content": prompt}],
            )
        except APIError as exc:
            logger.error("Assistant request failed: %s", exc)
            raise AssistantError("Assistant request failed") from exc

        text = "".join(
            block.text for block in message.content if hasattr(block, "text")
        ).strip()
        logger.info("Assistant stop_reason=%s, response length=%d", message.stop_reason, len(text))
        if not text:
            raise AssistantError("Assistant returned an empty response")
        return text

    def _summarize(self, project: Project, tasks: Sequence[Task]) -> str:
        return self._complete(f"{format_project_context(project, tasks)}\n\n{SUMMARY_INSTRUCTION}")

    def answer(
        self,
        project: Project,
        tasks: Sequence[Task],
        question: str,
        task: Optional[Task] = None,
    ) -> str:
        sections = [format_project_context(project, tasks)]
        if task is not None:
            sections.append(f"## Question is about this task\n{format_task_detail(task)}")
        sections.append(f"Question: {question}")
        return self._complete("\n\n".join(sections))

    def suggest(self, task: Task) -> str:
        return self._complete(f"{format_task_detail(task)}\n\n{SUGGEST_INSTRUCTION}")

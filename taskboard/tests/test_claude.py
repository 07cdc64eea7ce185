"""Tests for the Claude-backed answer provider and provider selection."""

import os
from types import SimpleNamespace
from unittest.mock import MagicMock, patch

import httpx
import pytest
from anthropic import APIConnectionError

from taskboard.assistant.base import EMPTY_PROJECT_SUMMARY
from taskboard.assistant.claude import SYSTEM_PROMPT, ClaudeProvider
from taskboard.assistant.context import format_project_context
from taskboard.assistant.providers import build_provider
from taskboard.assistant.rules import RuleBasedProvider
from taskboard.errors import AssistantError, AssistantUnavailable
from taskboard.models import Project, Task, TaskPriority, TaskStatus


def _message(text: str, stop_reason: str = "end_turn"):
    return SimpleNamespace(
        content=[SimpleNamespace(type="text", text=text)],
        stop_reason=stop_reason,
    )


@pytest.fixture
def project():
    return Project(name="Launch", description="v1 release")


@pytest.fixture
def tasks():
    return [
        Task(title="Design", description="mock UI", project_id="p", priority=TaskPriority.high, tags=["ui"]),
        Task(title="Build", description="impl", project_id="p", status=TaskStatus.done),
    ]


@pytest.fixture
def client():
    mock = MagicMock()
    mock.messages.create.return_value = _message("All good.")
    return mock


class TestClaudeProvider:
    def test_answer_sends_board_and_question(self, client, project, tasks):
        provider = ClaudeProvider(client=client, model="test-model")
        assert provider.answer(project, tasks, "What is left?") == "All good."

        kwargs = client.messages.create.call_args.kwargs
        assert kwargs["model"] == "test-model"
        assert kwargs["system"] == SYSTEM_PROMPT
        prompt = kwargs["messages"][0]["content"]
        assert "# Project: Launch" in prompt
        assert "- [High] Design #ui" in prompt
        assert prompt.endswith("Question: What is left?")

    def test_answer_about_one_task(self, client, project, tasks):
        provider = ClaudeProvider(client=client)
        provider.answer(project, tasks, "Is this one ready?", task=tasks[0])
        prompt = client.messages.create.call_args.kwargs["messages"][0]["content"]
        assert "## Question is about this task" in prompt
        assert "Description: mock UI" in prompt

    def test_empty_project_skips_the_model(self, client, project):
        provider = ClaudeProvider(client=client)
        assert provider.summarize(project, []) == EMPTY_PROJECT_SUMMARY
        client.messages.create.assert_not_called()

    def test_summary_uses_model(self, client, project, tasks):
        client.messages.create.return_value = _message("  Half done.  ")
        provider = ClaudeProvider(client=client)
        assert provider.summarize(project, tasks) == "Half done."

    def test_empty_reply_is_an_error(self, client, tasks):
        client.messages.create.return_value = _message("   ")
        provider = ClaudeProvider(client=client)
        with pytest.raises(AssistantError):
            provider.suggest(tasks[0])

    def test_api_error_is_wrapped(self, client, project, tasks):
        request = httpx.Request("POST", "https://api.anthropic.com/v1/messages")
        client.messages.create.side_effect = APIConnectionError(request=request)
        provider = ClaudeProvider(client=client)
        with pytest.raises(AssistantError) as excinfo:
            provider.answer(project, tasks, "anything?")
        assert isinstance(excinfo.value.__cause__, APIConnectionError)

    def test_missing_api_key(self, project, tasks):
        with patch.dict(os.environ, {}, clear=True):
            provider = ClaudeProvider()
            with pytest.raises(AssistantUnavailable):
                provider.answer(project, tasks, "anything?")

    @patch("taskboard.assistant.claude.Anthropic")
    def test_client_created_lazily_from_env(self, anthropic_cls, project, tasks):
        anthropic_cls.return_value.messages.create.return_value = _message("ok")
        with patch.dict(os.environ, {"ANTHROPIC_API_KEY": "sk-test"}):
            provider = ClaudeProvider()
            anthropic_cls.assert_not_called()
            assert provider.answer(project, tasks, "status?") == "ok"
        anthropic_cls.assert_called_once_with(api_key="sk-test")


class TestContext:
    def test_columns_in_board_order(self, project, tasks):
        text = format_project_context(project, tasks)
        assert text.index("## To Do (1)") < text.index("## In Progress (0)") < text.index("## Done (1)")
        assert "completion: 50%" in text
        assert "_none_" in text


class TestBuildProvider:
    def test_rules(self):
        assert isinstance(build_provider("rules"), RuleBasedProvider)

    def test_anthropic(self):
        assert isinstance(build_provider("anthropic"), ClaudeProvider)

    def test_unknown(self):
        with pytest.raises(AssistantUnavailable):
            build_provider("oracle")

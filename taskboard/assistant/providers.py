"""Picks the answer provider named in configuration."""

import logging
from typing import Optional

from taskboard import config
from taskboard.assistant.base import AnswerProvider
from taskboard.assistant.claude import ClaudeProvider
from taskboard.assistant.rules import RuleBasedProvider
from taskboard.errors import AssistantUnavailable

logger = logging.getLogger(__name__)

PROVIDERS: dict[str, type[AnswerProvider]] = {
    RuleBasedProvider.name: RuleBasedProvider,
    ClaudeProvider.name: ClaudeProvider,
}

_provider: Optional[AnswerProvider] = None


def build_provider(name: str) -> AnswerProvider:
    try:
        provider_cls = PROVIDERS[name]
    except KeyError:
        raise AssistantUnavailable(
            f"Unknown assistant provider {name!r}; expected one of {sorted(PROVIDERS)}"
        ) from None
    logger.info("Using %s answer provider", name)
    return provider_cls()


def get_answer_provider() -> AnswerProvider:
    """FastAPI dependency returning the process-wide provider."""
    global _provider
    if _provider is None:
        _provider = build_provider(config.ASSISTANT_PROVIDER)
    return _provider

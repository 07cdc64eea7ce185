"""Environment-driven settings for the taskboard service."""

import os
from pathlib import Path

DB_PATH = Path(__file__).parent / "data.db"
DATABASE_URL = os.getenv("TASKBOARD_DATABASE_URL", f"sqlite:///{DB_PATH}")

CORS_ORIGINS = os.getenv(
    "CORS_ORIGINS",
    "http://localhost:3000,http://localhost:5173",
).split(",")

LOG_LEVEL = os.getenv("TASKBOARD_LOG_LEVEL", "INFO").upper()

# "rules" answers from keyword matching, "anthropic" asks Claude.
ASSISTANT_PROVIDER = os.getenv("TASKBOARD_ASSISTANT_PROVIDER", "rules").lower()
ASSISTANT_MODEL = os.getenv("ANTHROPIC_ASSISTANT_MODEL", "claude-haiku-4-5-20251001")
ASSISTANT_MAX_TOKENS = 1024


def anthropic_api_key() -> str | None:
    """Read the API key at call time so tests can patch the environment."""
    return os.getenv("ANTHROPIC_API_KEY")

"""Shared fixtures: an in-memory database per test and a wired-up client."""

import pytest
from fastapi.testclient import TestClient
from sqlmodel import Session, create_engine
from sqlmodel.pool import StaticPool

from taskboard.assistant.providers import get_answer_provider
from taskboard.assistant.rules import RuleBasedProvider
from taskboard.board import BoardService
from taskboard.database import create_db_and_tables, get_session
from taskboard.main import app
from taskboard.repository import Repository


@pytest.fixture(name="session")
def session_fixture():
    """Create a fresh in-memory database for each test."""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    create_db_and_tables(engine)
    with Session(engine) as session:
        yield session


@pytest.fixture(name="repo")
def repo_fixture(session: Session) -> Repository:
    return Repository(session)


@pytest.fixture(name="board")
def board_fixture(repo: Repository) -> BoardService:
    return BoardService(repo)


@pytest.fixture(name="project")
def project_fixture(board: BoardService):
    return board.create_project({"name": "Launch", "description": "v1 release"})


@pytest.fixture(name="client")
def client_fixture(session: Session):
    """Create a test client with overridden database session and rule-based assistant."""
    def get_session_override():
        yield session

    app.dependency_overrides[get_session] = get_session_override
    app.dependency_overrides[get_answer_provider] = lambda: RuleBasedProvider()
    client = TestClient(app)
    yield client
    app.dependency_overrides.clear()

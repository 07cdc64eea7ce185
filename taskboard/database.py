"""Database engine, session factory and table creation using SQLModel."""

import logging

from sqlalchemy.engine import Engine
from sqlmodel import Session, SQLModel, create_engine

from taskboard import config

logger = logging.getLogger(__name__)


def make_engine(url: str = config.DATABASE_URL) -> Engine:
    """Build an engine; SQLite connections are shared across the threadpool."""
    connect_args = {"check_same_thread": False} if url.startswith("sqlite") else {}
    return create_engine(url, echo=False, connect_args=connect_args)


engine = make_engine()


def create_db_and_tables(bind: Engine | None = None) -> None:
    """Create all tables from SQLModel metadata. Existing tables are left alone."""
    # Registers Project and Task on SQLModel.metadata.
    from taskboard import models  # noqa: F401

    target = bind or engine
    SQLModel.metadata.create_all(target)
    logger.info("Tables ready on %s", target.url.render_as_string(hide_password=True))


def get_session():
    """Yield a database session for FastAPI dependency injection."""
    with Session(engine) as session:
        yield session

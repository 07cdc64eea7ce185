"""FastAPI dependencies wiring a request's session to the repository and board."""

from fastapi import Depends
from sqlmodel import Session

from taskboard.board import BoardService
from taskboard.database import get_session
from taskboard.repository import Repository


def get_repository(session: Session = Depends(get_session)) -> Repository:
    return Repository(session)


def get_board(repo: Repository = Depends(get_repository)) -> BoardService:
    return BoardService(repo)

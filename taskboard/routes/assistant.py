"""Assistant endpoints: project summary, free-text questions, task suggestions."""

import asyncio
from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field, field_validator

from taskboard.assistant.base import AnswerProvider
from taskboard.assistant.providers import get_answer_provider
from taskboard.dependencies import get_repository
from taskboard.models import EntityId, TaskStatus
from taskboard.repository import Repository
from taskboard.stats import completion_rate, count_by_status

router = APIRouter(prefix="/api/ai", tags=["assistant"])


class SummarizeRequest(BaseModel):
    project_id: EntityId


class QuestionRequest(BaseModel):
    project_id: EntityId
    question: str = Field(..., min_length=5, max_length=500)
    task_id: Optional[EntityId] = None

    @field_validator("question", mode="before")
    @classmethod
    def strip_question(cls, v):
        return v.strip() if isinstance(v, str) else v


class SuggestionRequest(BaseModel):
    task_id: EntityId


@router.post("/summarize")
async def summarize_project(
    body: SummarizeRequest,
    repo: Repository = Depends(get_repository),
    provider: AnswerProvider = Depends(get_answer_provider),
):
    """Summarize every task in a project."""
    project = repo.get_project(body.project_id)
    tasks = repo.list_tasks_by_project(project.id)
    summary = await asyncio.to_thread(provider.summarize, project, tasks)

    statistics = count_by_status(tasks)
    return {
        "summary": summary,
        "project_name": project.name,
        "task_count": len(tasks),
        "statistics": statistics,
        "progress": completion_rate(statistics[TaskStatus.done.value], len(tasks)),
        "provider": provider.name,
    }


@router.post("/question")
async def ask_question(
    body: QuestionRequest,
    repo: Repository = Depends(get_repository),
    provider: AnswerProvider = Depends(get_answer_provider),
):
    """Answer a question about the project, or about one task in it."""
    project = repo.get_project(body.project_id)
    task = repo.get_task(body.task_id) if body.task_id else None
    tasks = repo.list_tasks_by_project(project.id)
    answer = await asyncio.to_thread(provider.answer, project, tasks, body.question, task)
    return {
        "question": body.question,
        "answer": answer,
        "project_name": project.name,
        "context": "specific-task" if task is not None else "all-tasks",
        "provider": provider.name,
    }


@router.post("/suggestions")
async def task_suggestions(
    body: SuggestionRequest,
    repo: Repository = Depends(get_repository),
    provider: AnswerProvider = Depends(get_answer_provider),
):
    """Suggest improvements for one task."""
    task = repo.get_task(body.task_id)
    suggestions = await asyncio.to_thread(provider.suggest, task)
    return {
        "task_id": task.id,
        "task_title": task.title,
        "suggestions": suggestions,
        "provider": provider.name,
    }

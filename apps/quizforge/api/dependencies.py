"""Shared API dependencies."""

from collections.abc import Generator

from fastapi import Depends
from sqlmodel import Session

from quizforge.core.database import get_session
from quizforge.core.dependencies import (
    get_grading_engine,
    get_llm_service,
    get_retrieval_service,
)
from quizforge.services.quiz_service import QuizService
from quizforge.services.quiz_store import AttemptStore, QuizStore


def get_db_session() -> Generator[Session, None, None]:
    """Provide a database session for request handlers."""
    yield from get_session()


def get_quiz_service(session: Session = Depends(get_db_session)) -> QuizService:
    """Request-scoped pipeline over the request's database session."""
    return QuizService(
        quiz_store=QuizStore(session),
        attempt_store=AttemptStore(session),
        llm=get_llm_service(),
        retrieval=get_retrieval_service(),
        grader=get_grading_engine(),
    )

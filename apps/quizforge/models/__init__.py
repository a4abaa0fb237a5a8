"""Convenient exports for writing ORM models (SQLModel)."""

from sqlmodel import Field, SQLModel

from quizforge.models.base import Model, TimestampMixin
from quizforge.models.quiz import QuestionRow, QuizAttemptRow, QuizRow

__all__ = [
    "Field",
    "Model",
    "QuestionRow",
    "QuizAttemptRow",
    "QuizRow",
    "SQLModel",
    "TimestampMixin",
]

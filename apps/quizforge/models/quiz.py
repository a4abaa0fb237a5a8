"""Quiz persistence models (SQLModel).

Stores generated quizzes, their questions (options kept as a JSON list), and
graded attempts with per-question results.
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import JSON, Column, DateTime, Float, ForeignKey, Index, Integer, String, Text
from sqlmodel import Field

from quizforge.core.utils import utcnow_naive
from quizforge.models.base import Model


class QuizRow(Model, table=True):
    __tablename__ = "quizzes"
    __table_args__ = (Index("ix_quizzes_topic", "topic"),)

    topic: str = Field(sa_column=Column(String(255), nullable=False))
    title: str = Field(sa_column=Column(String(512), nullable=False))
    description: str = Field(default="", sa_column=Column(Text, nullable=False))


class QuestionRow(Model, table=True):
    __tablename__ = "questions"
    __table_args__ = (Index("ix_questions_quiz_id", "quiz_id"),)

    quiz_id: int = Field(
        sa_column=Column(Integer, ForeignKey("quizzes.id", ondelete="CASCADE"), nullable=False)
    )
    question_number: int = Field(sa_column=Column(Integer, nullable=False))
    question_text: str = Field(sa_column=Column(Text, nullable=False))
    options: list[dict] = Field(sa_column=Column(JSON, nullable=False))  # [{"label", "text"}]
    correct_answer: str = Field(sa_column=Column(Text, nullable=False))
    explanation: str = Field(default="", sa_column=Column(Text, nullable=False))


class QuizAttemptRow(Model, table=True):
    __tablename__ = "quiz_attempts"
    __table_args__ = (
        Index("ix_quiz_attempts_quiz_id", "quiz_id"),
        Index("ix_quiz_attempts_user_name", "user_name"),
    )

    quiz_id: int = Field(
        sa_column=Column(Integer, ForeignKey("quizzes.id", ondelete="CASCADE"), nullable=False)
    )
    quiz_title: str = Field(default="", sa_column=Column(String(512), nullable=False))
    user_name: str = Field(sa_column=Column(String(255), nullable=False))
    score: int = Field(default=0, sa_column=Column(Integer, nullable=False))
    total_questions: int = Field(sa_column=Column(Integer, nullable=False))
    percentage: float = Field(default=0.0, sa_column=Column(Float, nullable=False))
    responses: list[dict] = Field(sa_column=Column(JSON, nullable=False))
    submitted_at: datetime = Field(
        default_factory=utcnow_naive, sa_column=Column(DateTime, nullable=False)
    )

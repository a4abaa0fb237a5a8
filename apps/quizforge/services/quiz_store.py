"""SQLModel-backed stores for quizzes and graded attempts.

Rows are converted to and from the pipeline's frozen value types so callers
never hold ORM objects; the stores own all SQL and transactions.
"""

from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy import func
from sqlmodel import Session, select

from quizforge.models.quiz import QuestionRow, QuizAttemptRow, QuizRow
from quizforge.schemas.quiz import (
    OptionSpec,
    QuestionResult,
    QuestionSpec,
    QuizSpec,
    SubmissionResult,
)


def _question_from_row(row: QuestionRow) -> QuestionSpec:
    return QuestionSpec(
        id=row.id,
        question_text=row.question_text,
        ordinal=row.question_number,
        options=[OptionSpec(label=o["label"], text=o["text"]) for o in row.options],
        correct_answer_text=row.correct_answer,
        explanation=row.explanation or "",
    )


def _attempt_from_row(row: QuizAttemptRow) -> SubmissionResult:
    return SubmissionResult(
        attempt_id=row.id,
        quiz_id=row.quiz_id,
        quiz_title=row.quiz_title,
        user_name=row.user_name,
        score=row.score,
        total_questions=row.total_questions,
        percentage=row.percentage,
        question_results=[QuestionResult.model_validate(r) for r in row.responses or []],
        submitted_at=row.submitted_at,
    )


@dataclass
class QuizStore:
    """Persist and look up generated quizzes."""

    session: Session

    def save(self, quiz: QuizSpec) -> QuizSpec:
        """Insert `quiz` with its questions in one transaction; return it with ids."""

        row = QuizRow(topic=quiz.topic, title=quiz.title, description=quiz.description)
        self.session.add(row)
        self.session.flush()

        for question in quiz.questions:
            self.session.add(
                QuestionRow(
                    quiz_id=row.id or 0,
                    question_number=question.ordinal,
                    question_text=question.question_text,
                    options=[{"label": o.label, "text": o.text} for o in question.options],
                    correct_answer=question.correct_answer_text,
                    explanation=question.explanation,
                )
            )
        self.session.commit()
        self.session.refresh(row)
        return self._to_spec(row)

    def get(self, quiz_id: int) -> QuizSpec | None:
        row = self.session.get(QuizRow, quiz_id)
        return self._to_spec(row) if row else None

    def delete(self, quiz_id: int) -> bool:
        """Delete a quiz with its questions and attempts. False when absent."""

        row = self.session.get(QuizRow, quiz_id)
        if row is None:
            return False
        for model in (QuizAttemptRow, QuestionRow):
            for child in self.session.exec(select(model).where(model.quiz_id == quiz_id)).all():
                self.session.delete(child)
        self.session.delete(row)
        self.session.commit()
        return True

    def search(self, topic: str) -> list[QuizSpec]:
        """Case-insensitive topic substring search, newest first."""

        needle = (topic or "").strip().lower()
        stmt = (
            select(QuizRow)
            .where(func.lower(QuizRow.topic).contains(needle))
            .order_by(QuizRow.created_at.desc(), QuizRow.id.desc())
        )
        return [self._to_spec(r) for r in self.session.exec(stmt).all()]

    def list_all(self) -> list[QuizSpec]:
        stmt = select(QuizRow).order_by(QuizRow.created_at.desc(), QuizRow.id.desc())
        return [self._to_spec(r) for r in self.session.exec(stmt).all()]

    def _to_spec(self, row: QuizRow) -> QuizSpec:
        questions = self.session.exec(
            select(QuestionRow)
            .where(QuestionRow.quiz_id == row.id)
            .order_by(QuestionRow.question_number)
        )
        return QuizSpec(
            id=row.id,
            topic=row.topic,
            title=row.title,
            description=row.description or "",
            questions=[_question_from_row(q) for q in questions],
            created_at=row.created_at,
        )


@dataclass
class AttemptStore:
    """Persist graded submissions."""

    session: Session

    def save(self, result: SubmissionResult) -> SubmissionResult:
        row = QuizAttemptRow(
            quiz_id=result.quiz_id or 0,
            quiz_title=result.quiz_title,
            user_name=result.user_name,
            score=result.score,
            total_questions=result.total_questions,
            percentage=result.percentage,
            responses=[r.model_dump(mode="json") for r in result.question_results],
        )
        self.session.add(row)
        self.session.commit()
        self.session.refresh(row)
        return _attempt_from_row(row)

    def find_by_user(self, user_name: str) -> list[SubmissionResult]:
        """Attempts by `user_name`, newest first."""

        stmt = (
            select(QuizAttemptRow)
            .where(QuizAttemptRow.user_name == user_name)
            .order_by(QuizAttemptRow.submitted_at.desc(), QuizAttemptRow.id.desc())
        )
        return [_attempt_from_row(r) for r in self.session.exec(stmt)]

    def find_by_quiz(self, quiz_id: int) -> list[SubmissionResult]:
        """Attempts on `quiz_id`, newest first."""

        stmt = (
            select(QuizAttemptRow)
            .where(QuizAttemptRow.quiz_id == quiz_id)
            .order_by(QuizAttemptRow.submitted_at.desc(), QuizAttemptRow.id.desc())
        )
        return [_attempt_from_row(r) for r in self.session.exec(stmt)]


__all__ = ["AttemptStore", "QuizStore"]

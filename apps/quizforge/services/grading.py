"""Score a learner's submission against a stored quiz."""

from __future__ import annotations

import logging

from quizforge.core.exceptions import ValidationError
from quizforge.schemas.quiz import (
    FrontendFeedback,
    FrontendResult,
    QuestionResult,
    QuestionSpec,
    QuizSpec,
    SubmissionInput,
    SubmissionResult,
)

logger = logging.getLogger(__name__)


def build_feedback(selected: str, correct: str, explanation: str, *, is_correct: bool) -> str:
    if is_correct:
        return f"Correct! {explanation}"
    return (
        f"Incorrect. You selected '{selected}', but the correct answer is '{correct}'. "
        f"{explanation}"
    )


def percentage_of(score: int, total: int) -> float:
    return round(score / total * 100, 2)


class QuizGradingEngine:
    """Stateless grader. `grade` never mutates the quiz or the submission."""

    def resolve_selection(self, question: QuestionSpec, selected_answer: str) -> tuple[str, bool]:
        """Resolve a selection to option text.

        A non-negative integer string is a zero-based option index; anything
        else is taken as literal option text. Returns ``(text, resolved)`` where
        `resolved` is False when a literal matches none of the options.
        """
        raw = selected_answer.strip()
        options = question.option_texts()
        if raw.isascii() and raw.isdigit():
            index = int(raw)
            if index >= len(options):
                raise ValidationError(
                    f"Invalid option index: {index}",
                    details={"question_id": question.id, "selected_answer": selected_answer},
                )
            return options[index], True
        return raw, raw in options

    def grade(self, quiz: QuizSpec, submission: SubmissionInput) -> SubmissionResult:
        if quiz.id is None or submission.quiz_id != quiz.id:
            raise ValidationError(
                f"Submission targets quiz {submission.quiz_id}, not quiz {quiz.id}",
                details={"quiz_id": submission.quiz_id},
            )
        if not quiz.questions:
            raise ValidationError(f"Quiz {quiz.id} has no questions to grade")

        # score can never exceed the question count
        seen: set[int] = set()
        for answer in submission.answers:
            if answer.question_id in seen:
                raise ValidationError(
                    f"Duplicate answer for question ID: {answer.question_id}",
                    details={"quiz_id": quiz.id, "question_id": answer.question_id},
                )
            seen.add(answer.question_id)

        results: list[QuestionResult] = []
        for answer in submission.answers:
            question = quiz.question_by_id(answer.question_id)
            if question is None:
                raise ValidationError(
                    f"Question not found with ID: {answer.question_id}",
                    details={"quiz_id": quiz.id, "question_id": answer.question_id},
                )
            results.append(self._grade_answer(question, answer.selected_answer))

        score = sum(1 for r in results if r.is_correct)
        total = len(quiz.questions)
        logger.info("Graded quiz %s for %s: %d/%d", quiz.id, submission.user_name, score, total)
        return SubmissionResult(
            quiz_id=quiz.id,
            quiz_title=quiz.title,
            user_name=submission.user_name,
            score=score,
            total_questions=total,
            percentage=percentage_of(score, total),
            question_results=results,
        )

    def _grade_answer(self, question: QuestionSpec, selected_answer: str) -> QuestionResult:
        selected, resolved = self.resolve_selection(question, selected_answer)
        if not resolved:
            logger.warning(
                "Selection %r for question %s matches no option; grading as incorrect",
                selected,
                question.id,
            )
        correct = question.correct_answer_text.strip()
        is_correct = selected.strip() == correct
        return QuestionResult(
            question_id=question.id,
            ordinal=question.ordinal,
            question_text=question.question_text,
            selected_answer_text=selected,
            correct_answer_text=correct,
            is_correct=is_correct,
            explanation=question.explanation,
            feedback=build_feedback(selected, correct, question.explanation, is_correct=is_correct),
            resolved=resolved,
        )


def frontend_view(result: SubmissionResult) -> FrontendResult:
    """Compact per-question view ordered by question ordinal (0-based index)."""
    ordered = sorted(result.question_results, key=lambda r: r.ordinal)
    return FrontendResult(
        score=result.score,
        total_questions=result.total_questions,
        feedback=[
            FrontendFeedback(
                question_index=r.ordinal - 1,
                correct=r.is_correct,
                explanation=r.feedback,
                correct_answer=r.correct_answer_text,
            )
            for r in ordered
        ],
    )


__all__ = [
    "QuizGradingEngine",
    "build_feedback",
    "frontend_view",
    "percentage_of",
]

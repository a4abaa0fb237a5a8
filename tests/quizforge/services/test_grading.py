import logging

import pytest
from quizforge.core.exceptions import ValidationError
from quizforge.schemas.quiz import (
    AnswerInput,
    OptionSpec,
    QuestionSpec,
    QuizSpec,
    SubmissionInput,
)
from quizforge.services.grading import QuizGradingEngine, frontend_view


def _question(qid: int, ordinal: int, options: list[str], correct: str) -> QuestionSpec:
    return QuestionSpec(
        id=qid,
        question_text=f"Question {ordinal}?",
        ordinal=ordinal,
        options=[OptionSpec(label=label, text=text) for label, text in zip("ABCD", options)],
        correct_answer_text=correct,
        explanation=f"Because of fact {ordinal}.",
    )


def _quiz() -> QuizSpec:
    return QuizSpec(
        id=7,
        topic="Java",
        title="Java Basics",
        questions=[
            _question(11, 1, ["main", "run", "start", "init"], "main"),
            _question(12, 2, ["true", "false", "sometimes", "never"], "false"),
            _question(13, 3, ["implements", "extends", "inherits", "super"], "extends"),
            _question(14, 4, ["List", "ArrayList", "Set", "Queue"], "Set"),
            _question(15, 5, ["null", "1", "-1", "0"], "0"),
        ],
    )


def _submission(*answers: tuple[int, str], quiz_id: int = 7) -> SubmissionInput:
    return SubmissionInput(
        quiz_id=quiz_id,
        user_name="learner",
        answers=[AnswerInput(question_id=qid, selected_answer=sel) for qid, sel in answers],
    )


def test_index_selection_marks_correct_answer():
    result = QuizGradingEngine().grade(_quiz(), _submission((12, "1")))

    [graded] = result.question_results
    assert graded.selected_answer_text == "false"
    assert graded.is_correct is True
    assert graded.feedback == "Correct! Because of fact 2."


def test_incorrect_feedback_names_both_answers():
    result = QuizGradingEngine().grade(_quiz(), _submission((13, "0")))

    [graded] = result.question_results
    assert graded.is_correct is False
    assert graded.feedback == (
        "Incorrect. You selected 'implements', but the correct answer is 'extends'. "
        "Because of fact 3."
    )


def test_index_and_literal_selection_grade_identically():
    engine = QuizGradingEngine()
    by_index = engine.grade(_quiz(), _submission((14, "2")))
    by_text = engine.grade(_quiz(), _submission((14, "Set")))

    assert by_index.question_results == by_text.question_results


def test_score_and_percentage_use_quiz_question_count():
    result = QuizGradingEngine().grade(
        _quiz(), _submission((11, "0"), (12, "1"), (13, "0"))
    )

    assert result.score == 2
    assert result.total_questions == 5
    assert result.percentage == 40.0
    assert result.score == sum(r.is_correct for r in result.question_results)
    assert result.quiz_title == "Java Basics"
    assert result.user_name == "learner"


def test_percentage_is_rounded_to_two_decimals():
    quiz = QuizSpec(
        id=1,
        topic="t",
        title="t",
        questions=[
            _question(1, 1, ["a", "b", "c", "d"], "a"),
            _question(2, 2, ["a", "b", "c", "d"], "a"),
            _question(3, 3, ["a", "b", "c", "d"], "a"),
        ],
    )

    result = QuizGradingEngine().grade(quiz, _submission((1, "0"), quiz_id=1))

    assert result.percentage == 33.33


def test_regrading_is_idempotent():
    engine = QuizGradingEngine()
    submission = _submission((11, "0"), (12, "0"), (15, "3"))

    assert engine.grade(_quiz(), submission) == engine.grade(_quiz(), submission)


def test_unresolvable_selection_is_soft_incorrect(caplog):
    with caplog.at_level(logging.WARNING, logger="quizforge.services.grading"):
        result = QuizGradingEngine().grade(_quiz(), _submission((11, "maybe"), (12, "1")))

    first, second = result.question_results
    assert first.resolved is False
    assert first.is_correct is False
    assert second.is_correct is True
    assert result.score == 1
    assert "matches no option" in caplog.text


def test_out_of_range_index_is_rejected():
    with pytest.raises(ValidationError, match="Invalid option index: 4"):
        QuizGradingEngine().grade(_quiz(), _submission((11, "4")))


def test_unknown_question_is_rejected():
    with pytest.raises(ValidationError, match="Question not found with ID: 99"):
        QuizGradingEngine().grade(_quiz(), _submission((99, "0")))


def test_duplicate_answers_are_rejected():
    submission = _submission(*[(11, "0")] * 7)

    with pytest.raises(ValidationError, match="Duplicate answer for question ID: 11"):
        QuizGradingEngine().grade(_quiz(), submission)


def test_score_never_exceeds_total():
    result = QuizGradingEngine().grade(
        _quiz(), _submission((11, "0"), (12, "1"), (13, "1"), (14, "2"), (15, "3"))
    )

    assert result.score == result.total_questions == 5
    assert result.percentage == 100.0


def test_mismatched_quiz_is_rejected():
    with pytest.raises(ValidationError):
        QuizGradingEngine().grade(_quiz(), _submission((11, "0"), quiz_id=8))


def test_frontend_view_is_ordered_by_ordinal():
    result = QuizGradingEngine().grade(_quiz(), _submission((15, "3"), (11, "1"), (13, "1")))

    view = frontend_view(result)

    assert view.score == 2
    assert view.total_questions == 5
    assert [f.question_index for f in view.feedback] == [0, 2, 4]
    assert [f.correct for f in view.feedback] == [False, True, True]
    assert view.feedback[0].correct_answer == "main"
    assert view.feedback[0].explanation.startswith("Incorrect. You selected 'run'")

from __future__ import annotations

from fastapi import APIRouter, Depends

from quizforge.api.dependencies import get_quiz_service
from quizforge.schemas.quiz import FrontendResult, SubmissionInput, SubmissionResult
from quizforge.services.grading import frontend_view
from quizforge.services.quiz_service import QuizService

router = APIRouter(prefix="/api/quiz-submissions", tags=["quiz-submissions"])


@router.post("/submit", response_model=FrontendResult)
def submit_quiz(
    payload: SubmissionInput,
    svc: QuizService = Depends(get_quiz_service),
) -> FrontendResult:
    return frontend_view(svc.submit_quiz(payload))


@router.get("/user/{user_name}/history", response_model=list[SubmissionResult])
def user_history(
    user_name: str,
    svc: QuizService = Depends(get_quiz_service),
) -> list[SubmissionResult]:
    return svc.user_history(user_name)


@router.get("/quiz/{quiz_id}/attempts", response_model=list[SubmissionResult])
def quiz_attempts(
    quiz_id: int,
    svc: QuizService = Depends(get_quiz_service),
) -> list[SubmissionResult]:
    return svc.quiz_attempts(quiz_id)

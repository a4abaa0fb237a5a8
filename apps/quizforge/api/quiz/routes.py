from __future__ import annotations

from fastapi import APIRouter, Depends, Query, Response, status

from quizforge.api.dependencies import get_quiz_service
from quizforge.core.settings import settings
from quizforge.core.utils import utcnow
from quizforge.schemas.quiz_api import ConfigCheckOut, QuizGenerationRequest, QuizOut
from quizforge.services.quiz_service import QuizService

router = APIRouter(prefix="/api/quizzes", tags=["quizzes"])


@router.post("/generate", response_model=QuizOut, status_code=status.HTTP_201_CREATED)
def generate_quiz(
    payload: QuizGenerationRequest,
    svc: QuizService = Depends(get_quiz_service),
) -> QuizOut:
    quiz = svc.generate_quiz(
        payload.topic,
        use_retrieval=payload.use_retrieval,
        description=payload.description,
    )
    return QuizOut.from_spec(quiz)


@router.get("", response_model=list[QuizOut])
def list_quizzes(svc: QuizService = Depends(get_quiz_service)) -> list[QuizOut]:
    return [QuizOut.from_spec(q) for q in svc.list_quizzes()]


# Static paths are declared before `/{quiz_id}` so they are not shadowed.
@router.get("/search", response_model=list[QuizOut])
def search_quizzes(
    topic: str = Query(..., min_length=1, max_length=100),
    svc: QuizService = Depends(get_quiz_service),
) -> list[QuizOut]:
    return [QuizOut.from_spec(q) for q in svc.search_quizzes(topic)]


@router.get("/config/check", response_model=ConfigCheckOut)
def check_config() -> ConfigCheckOut:
    key = settings.openai_api_key.get_secret_value() if settings.openai_api_key else ""
    return ConfigCheckOut(
        status="OK",
        timestamp=utcnow(),
        model=settings.llm_model,
        base_url=settings.openai_base_url,
        api_key_configured=bool(key.strip()),
        rag_enabled=settings.rag_enabled,
    )


@router.get("/{quiz_id}", response_model=QuizOut)
def get_quiz(quiz_id: int, svc: QuizService = Depends(get_quiz_service)) -> QuizOut:
    return QuizOut.from_spec(svc.get_quiz(quiz_id))


@router.delete("/{quiz_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_quiz(quiz_id: int, svc: QuizService = Depends(get_quiz_service)) -> Response:
    svc.delete_quiz(quiz_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

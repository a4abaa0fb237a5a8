from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from quizforge.schemas.quiz import QuizSpec


class QuizGenerationRequest(BaseModel):
    topic: str = Field(min_length=3, max_length=100)
    description: str | None = Field(default=None, max_length=200)
    use_retrieval: bool | None = Field(
        default=None,
        description="Force grounding on/off. Defaults to the topic keyword heuristic.",
    )


class OptionOut(BaseModel):
    option_label: str
    option_text: str


class QuestionOut(BaseModel):
    id: int | None
    question_text: str
    question_number: int
    options: list[OptionOut]
    correct_answer: str


class QuizOut(BaseModel):
    id: int | None
    topic: str
    title: str
    description: str
    created_at: datetime | None
    questions: list[QuestionOut]

    @classmethod
    def from_spec(cls, quiz: QuizSpec) -> QuizOut:
        return cls(
            id=quiz.id,
            topic=quiz.topic,
            title=quiz.title,
            description=quiz.description,
            created_at=quiz.created_at,
            questions=[
                QuestionOut(
                    id=q.id,
                    question_text=q.question_text,
                    question_number=q.ordinal,
                    options=[OptionOut(option_label=o.label, option_text=o.text) for o in q.options],
                    correct_answer=q.correct_answer_text,
                )
                for q in quiz.questions
            ],
        )


class ConfigCheckOut(BaseModel):
    status: str
    timestamp: datetime
    model: str
    base_url: str | None
    api_key_configured: bool
    rag_enabled: bool

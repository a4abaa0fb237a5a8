"""Quiz value types shared by the generation, parsing and grading pipeline.

A `QuizSpec` exclusively owns its `QuestionSpec`s, which own their
`OptionSpec`s. Cross-aggregate references (submission -> quiz/question) use the
opaque integer ids assigned by the quiz store.
"""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

OPTION_LABELS: tuple[str, ...] = ("A", "B", "C", "D")
QUESTIONS_PER_QUIZ = 5

OptionLabel = Literal["A", "B", "C", "D"]
SourceType = Literal["Wikipedia", "Stack Overflow", "Educational"]


class OptionSpec(BaseModel):
    model_config = ConfigDict(frozen=True)

    label: OptionLabel
    text: str = Field(min_length=1)

    @field_validator("text")
    @classmethod
    def _strip_text(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("option text must not be blank")
        return value


class QuestionSpec(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int | None = None
    question_text: str = Field(min_length=1)
    ordinal: int = Field(ge=1, le=QUESTIONS_PER_QUIZ)
    options: list[OptionSpec] = Field(min_length=4, max_length=4)
    correct_answer_text: str
    explanation: str = ""

    @model_validator(mode="after")
    def _check_options(self) -> QuestionSpec:
        labels = tuple(o.label for o in self.options)
        if labels != OPTION_LABELS:
            raise ValueError(f"options must be labeled A-D in order, got {labels}")
        if self.correct_answer_text.strip() not in self.option_texts():
            raise ValueError("correct_answer_text must match one option text")
        return self

    def option_texts(self) -> list[str]:
        return [o.text for o in self.options]


class QuizSpec(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int | None = None
    topic: str
    title: str
    description: str = ""
    questions: list[QuestionSpec] = Field(default_factory=list)
    created_at: datetime | None = None

    @model_validator(mode="after")
    def _unique_ordinals(self) -> QuizSpec:
        ordinals = [q.ordinal for q in self.questions]
        if len(ordinals) != len(set(ordinals)):
            raise ValueError("question ordinals must be unique within a quiz")
        return self

    def question_by_id(self, question_id: int) -> QuestionSpec | None:
        for question in self.questions:
            if question.id == question_id:
                return question
        return None


class Source(BaseModel):
    title: str
    url: str = ""
    source_type: SourceType


class RetrievalContext(BaseModel):
    """Grounding text gathered for one generation request. Never persisted."""

    topic: str
    combined_text: str = ""
    sources: list[Source] = Field(default_factory=list)

    def has_content(self) -> bool:
        return bool(self.combined_text and self.combined_text.strip())

    def context_for_prompt(self) -> str:
        if not self.has_content():
            return ""
        return (
            "FACTUAL CONTEXT (use this information to ensure accuracy):\n"
            f"{self.combined_text}\n\n"
            "Please use the above factual information to create accurate quiz questions. "
            "Ensure all facts, dates, names, and technical details are correct based on "
            "the provided context.\n\n"
        )

    @classmethod
    def empty(cls, topic: str) -> RetrievalContext:
        return cls(topic=topic)


class AnswerInput(BaseModel):
    question_id: int
    selected_answer: str = Field(
        min_length=1,
        description="Zero-based option index (e.g. '1') or the literal option text.",
    )


class SubmissionInput(BaseModel):
    quiz_id: int
    user_name: str = Field(min_length=1, max_length=255)
    answers: list[AnswerInput] = Field(min_length=1)


class QuestionResult(BaseModel):
    question_id: int | None = None
    ordinal: int
    question_text: str
    selected_answer_text: str
    correct_answer_text: str
    is_correct: bool
    explanation: str = ""
    feedback: str
    resolved: bool = True


class SubmissionResult(BaseModel):
    attempt_id: int | None = None
    quiz_id: int | None = None
    quiz_title: str = ""
    user_name: str = ""
    score: int = Field(ge=0)
    total_questions: int = Field(gt=0)
    percentage: float
    question_results: list[QuestionResult] = Field(default_factory=list)
    submitted_at: datetime | None = None


class FrontendFeedback(BaseModel):
    question_index: int
    correct: bool
    explanation: str
    correct_answer: str


class FrontendResult(BaseModel):
    score: int
    total_questions: int
    feedback: list[FrontendFeedback]


__all__ = [
    "OPTION_LABELS",
    "QUESTIONS_PER_QUIZ",
    "AnswerInput",
    "FrontendFeedback",
    "FrontendResult",
    "OptionSpec",
    "QuestionResult",
    "QuestionSpec",
    "QuizSpec",
    "RetrievalContext",
    "Source",
    "SubmissionInput",
    "SubmissionResult",
]

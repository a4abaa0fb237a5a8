"""Pydantic schemas shared across the app."""

from .quiz import (
    AnswerInput,
    FrontendFeedback,
    FrontendResult,
    OptionSpec,
    QuestionResult,
    QuestionSpec,
    QuizSpec,
    RetrievalContext,
    Source,
    SubmissionInput,
    SubmissionResult,
)
from .quiz_api import ConfigCheckOut, OptionOut, QuestionOut, QuizGenerationRequest, QuizOut

__all__ = [
    "AnswerInput",
    "ConfigCheckOut",
    "FrontendFeedback",
    "FrontendResult",
    "OptionOut",
    "OptionSpec",
    "QuestionOut",
    "QuestionResult",
    "QuestionSpec",
    "QuizGenerationRequest",
    "QuizOut",
    "QuizSpec",
    "RetrievalContext",
    "Source",
    "SubmissionInput",
    "SubmissionResult",
]

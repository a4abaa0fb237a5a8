"""Service layer package.

Keep imports lazy to avoid initializing heavyweight dependencies at import time
(e.g., the OpenAI client). Downstream code can still access common symbols from
`quizforge.services` thanks to `__getattr__` proxies.
"""

from __future__ import annotations

from typing import Any

__all__ = [
    "LLMService",
    "QuizGradingEngine",
    "QuizService",
    "RetrievalService",
]


def __getattr__(name: str) -> Any:  # PEP 562 lazy attribute access
    if name == "LLMService":
        from .llm_service import LLMService

        return LLMService
    if name == "QuizGradingEngine":
        from .grading import QuizGradingEngine

        return QuizGradingEngine
    if name == "QuizService":
        from .quiz_service import QuizService

        return QuizService
    if name == "RetrievalService":
        from .retrieval import RetrievalService

        return RetrievalService
    raise AttributeError(name)

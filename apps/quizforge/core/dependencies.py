"""Central dependency providers.

These helpers keep stateless clients (the LLM wrapper, retrieval connectors)
process-scoped and reusable, and allow test-time cache clearing/overrides.
"""

from __future__ import annotations

from functools import lru_cache
from typing import TYPE_CHECKING

from quizforge.core.settings import settings

if TYPE_CHECKING:
    from quizforge.connectors.google_search_connector import GoogleSearchClient
    from quizforge.connectors.stackexchange_connector import StackExchangeClient
    from quizforge.connectors.wikipedia_connector import WikipediaClient
    from quizforge.services.grading import QuizGradingEngine
    from quizforge.services.llm_service import LLMService
    from quizforge.services.retrieval import RetrievalService


@lru_cache(maxsize=1)
def get_llm_service() -> LLMService:
    from quizforge.services.llm_service import LLMService

    return LLMService()


@lru_cache(maxsize=1)
def get_grading_engine() -> QuizGradingEngine:
    from quizforge.services.grading import QuizGradingEngine

    return QuizGradingEngine()


@lru_cache(maxsize=1)
def get_wikipedia_client() -> WikipediaClient | None:
    if not settings.wikipedia_enabled:
        return None
    from quizforge.connectors.wikipedia_connector import WikipediaClient

    return WikipediaClient()


@lru_cache(maxsize=1)
def get_stackexchange_client() -> StackExchangeClient | None:
    if not settings.stackoverflow_enabled:
        return None
    from quizforge.connectors.stackexchange_connector import StackExchangeClient

    return StackExchangeClient()


@lru_cache(maxsize=1)
def get_google_search_client() -> GoogleSearchClient | None:
    if not settings.google_search_enabled:
        return None
    from quizforge.connectors.google_search_connector import GoogleSearchClient

    return GoogleSearchClient()


@lru_cache(maxsize=1)
def get_retrieval_service() -> RetrievalService | None:
    if not settings.rag_enabled:
        return None
    from quizforge.services.retrieval import RetrievalService

    return RetrievalService(
        encyclopedic=get_wikipedia_client(),
        qa=get_stackexchange_client(),
        web=get_google_search_client(),
    )


def clear_dependency_caches() -> None:
    for provider in (
        get_llm_service,
        get_grading_engine,
        get_wikipedia_client,
        get_stackexchange_client,
        get_google_search_client,
        get_retrieval_service,
    ):
        provider.cache_clear()


__all__ = [
    "clear_dependency_caches",
    "get_google_search_client",
    "get_grading_engine",
    "get_llm_service",
    "get_retrieval_service",
    "get_stackexchange_client",
    "get_wikipedia_client",
]

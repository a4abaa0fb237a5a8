"""Multi-source retrieval used to ground quiz prompts in factual context.

Sources are consulted sequentially in a fixed priority order:

1. encyclopedic (always, when configured)
2. Q&A (only for technical topics)
3. web search (only when 1-2 produced nothing)

A failing source counts as "no results" and never aborts the aggregate call.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Optional, Protocol, Sequence

from quizforge.connectors.base import SourceDocument
from quizforge.core.settings import settings
from quizforge.core.utils import truncate
from quizforge.schemas.quiz import RetrievalContext, Source

logger = logging.getLogger(__name__)

# Topics likely to benefit from factual grounding.
FACTUAL_KEYWORDS: tuple[str, ...] = (
    "history",
    "science",
    "biology",
    "chemistry",
    "physics",
    "geography",
    "mathematics",
    "literature",
    "philosophy",
    "economics",
    "politics",
    "medicine",
    "technology",
    "computer",
    "engineering",
    "astronomy",
    "geology",
    "psychology",
    "sociology",
    "anthropology",
    "archaeology",
    "photosynthesis",
    "evolution",
    "genetics",
    "anatomy",
    "ecology",
    "molecular",
    "cellular",
    "biochemistry",
    "organic",
    "inorganic",
    "neural",
    "network",
    "machine learning",
    "artificial intelligence",
    "rome",
    "roman",
    "ancient",
    "empire",
    "civilization",
)

PROGRAMMING_KEYWORDS: tuple[str, ...] = (
    "java",
    "python",
    "javascript",
    "react",
    "spring",
    "node",
    "angular",
    "vue",
    "docker",
    "kubernetes",
    "aws",
    "azure",
    "database",
    "sql",
)

# Gate for the Q&A source. Plain substring matching: "ai" also matches e.g. "domain".
TECHNICAL_KEYWORDS: tuple[str, ...] = (
    "programming",
    "coding",
    "software",
    "algorithm",
    "data structure",
    "neural",
    "machine learning",
    "ai",
    "artificial intelligence",
    "java",
    "python",
    "javascript",
    "react",
    "spring",
    "node",
    "database",
    "sql",
    "api",
    "framework",
    "library",
)


class KnowledgeSource(Protocol):
    source_type: str

    def fetch(self, topic: str) -> list[SourceDocument]: ...


def _matches_any(topic: str, keywords: Sequence[str]) -> bool:
    lower = (topic or "").lower()
    return any(keyword in lower for keyword in keywords)


def _render_document(doc: SourceDocument) -> str:
    return f"Source: {doc.title}\n{doc.content}"


def _render_answer(doc: SourceDocument) -> str:
    return f"Q: {doc.title}\nA (Score: {doc.score or 0}): {doc.content}"


@dataclass(frozen=True)
class _SourceSlot:
    header: str
    source_type: str
    render: Callable[[SourceDocument], str]


ENCYCLOPEDIC_SLOT = _SourceSlot("WIKIPEDIA SOURCES", "Wikipedia", _render_document)
QA_SLOT = _SourceSlot("STACK OVERFLOW SOURCES", "Stack Overflow", _render_answer)
WEB_SLOT = _SourceSlot("EDUCATIONAL SOURCES", "Educational", _render_document)


class RetrievalService:
    """Aggregate grounding text for a topic from the configured sources."""

    def __init__(
        self,
        *,
        encyclopedic: Optional[KnowledgeSource] = None,
        qa: Optional[KnowledgeSource] = None,
        web: Optional[KnowledgeSource] = None,
        max_items: Optional[int] = None,
        max_content_length: Optional[int] = None,
    ) -> None:
        self.encyclopedic = encyclopedic
        self.qa = qa
        self.web = web
        self.max_items = max_items or settings.retrieval_max_items
        self.max_content_length = max_content_length or settings.retrieval_max_content_length

    # ---------- heuristics ----------

    @staticmethod
    def should_use_retrieval(topic: str) -> bool:
        """Advisory: does `topic` look factual or programming-related?"""
        return _matches_any(topic, FACTUAL_KEYWORDS) or _matches_any(topic, PROGRAMMING_KEYWORDS)

    @staticmethod
    def is_technical_topic(topic: str) -> bool:
        return _matches_any(topic, TECHNICAL_KEYWORDS)

    # ---------- aggregation ----------

    def retrieve_context(self, topic: str) -> RetrievalContext:
        logger.info("Retrieving context for topic: %s", topic)
        blocks: list[str] = []
        sources: list[Source] = []

        def consult(source: Optional[KnowledgeSource], slot: _SourceSlot) -> None:
            if source is None:
                return
            docs = self._select(self._safe_fetch(source, topic, slot))
            if not docs:
                return
            body = "\n\n".join(slot.render(d) for d in docs)
            blocks.append(f"{slot.header}:\n{body}")
            sources.extend(
                Source(title=d.title, url=d.url, source_type=slot.source_type) for d in docs
            )

        consult(self.encyclopedic, ENCYCLOPEDIC_SLOT)
        if self.is_technical_topic(topic):
            consult(self.qa, QA_SLOT)
        if not sources:
            consult(self.web, WEB_SLOT)

        if not sources:
            logger.warning("No sources found for topic: %s", topic)
            return RetrievalContext.empty(topic)

        logger.info("Retrieved context from %d sources for topic: %s", len(sources), topic)
        return RetrievalContext(
            topic=topic,
            combined_text="\n\n".join(blocks).strip(),
            sources=sources,
        )

    def _safe_fetch(
        self, source: KnowledgeSource, topic: str, slot: _SourceSlot
    ) -> list[SourceDocument]:
        try:
            return list(source.fetch(topic) or [])
        except Exception as exc:  # any source failure degrades to "no results"
            logger.warning("%s lookup failed for topic %r: %s", slot.source_type, topic, exc)
            return []

    def _select(self, docs: Sequence[SourceDocument]) -> list[SourceDocument]:
        """Drop empty items, cap each item's content, keep the top `max_items`."""
        selected: list[SourceDocument] = []
        for doc in docs:
            content = truncate((doc.content or "").strip(), self.max_content_length)
            if not content:
                continue
            selected.append(
                SourceDocument(title=doc.title, content=content, url=doc.url, score=doc.score)
            )
            if len(selected) >= self.max_items:
                break
        return selected


__all__ = [
    "FACTUAL_KEYWORDS",
    "PROGRAMMING_KEYWORDS",
    "TECHNICAL_KEYWORDS",
    "KnowledgeSource",
    "RetrievalService",
]

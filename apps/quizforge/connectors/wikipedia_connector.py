"""Encyclopedic source backed by the MediaWiki search and REST summary APIs."""

from __future__ import annotations

import logging
from typing import Any, Optional
from urllib.parse import quote

import requests
from requests import Session

from quizforge.connectors.base import (
    ConnectorMixin,
    SourceDocument,
    build_session,
    cap_content,
    strip_html,
)
from quizforge.core.settings import settings

logger = logging.getLogger(__name__)

WIKIPEDIA_SEARCH_API = "https://en.wikipedia.org/w/api.php"
WIKIPEDIA_REST_API = "https://en.wikipedia.org/api/rest_v1"

# Extra search terms tried after the raw topic, keyed by a lowercase trigger.
TOPIC_EXPANSIONS: dict[str, tuple[str, ...]] = {
    "neural network": (
        "neural network",
        "artificial neural network",
        "deep learning",
        "machine learning",
    ),
    "rome": ("ancient rome", "roman empire", "roman history"),
    "photosynthesis": ("photosynthesis", "plant biology"),
}


class WikipediaClient(ConnectorMixin):
    source_type = "Wikipedia"

    def __init__(
        self,
        *,
        max_results: Optional[int] = None,
        max_content_length: Optional[int] = None,
        timeout: Optional[float] = None,
        session: Optional[Session] = None,
        search_url: str = WIKIPEDIA_SEARCH_API,
        rest_url: str = WIKIPEDIA_REST_API,
    ) -> None:
        self.max_results = max_results or settings.retrieval_max_items
        self.max_content_length = max_content_length or settings.retrieval_max_content_length
        self.timeout = timeout or settings.retrieval_timeout_seconds
        self.search_url = search_url
        self.rest_url = rest_url.rstrip("/")
        self.session = session or build_session(
            max_retries=settings.retrieval_max_retries, user_agent=settings.user_agent
        )

    @staticmethod
    def search_terms(topic: str) -> list[str]:
        """Search variations for `topic`, the raw topic first."""
        lower = topic.lower()
        terms = [topic]
        for trigger, expansions in TOPIC_EXPANSIONS.items():
            if trigger in lower:
                terms.extend(expansions)

        if len(terms) == 1:
            terms.append(topic[:-1] if topic.endswith("s") else topic + "s")
            if topic != lower:
                terms.append(lower)

        seen: set[str] = set()
        out: list[str] = []
        for term in terms:
            if term and term not in seen:
                seen.add(term)
                out.append(term)
        return out

    def search_titles(self, topic: str) -> list[str]:
        """Return article titles for the first search variation that has hits."""
        for term in self.search_terms(topic):
            params = {
                "action": "query",
                "format": "json",
                "list": "search",
                "srsearch": term,
                "srlimit": self.max_results,
            }
            resp = self.session.get(self.search_url, params=params, timeout=self.timeout)
            resp.raise_for_status()
            titles = self._parse_search(resp.json())
            if titles:
                logger.info("Found %d Wikipedia articles with search term: %s", len(titles), term)
                return titles[: self.max_results]

        logger.warning("No Wikipedia articles found for any search variation of: %s", topic)
        return []

    @staticmethod
    def _parse_search(payload: Any) -> list[str]:
        if not isinstance(payload, dict):
            return []
        results = (payload.get("query") or {}).get("search") or []
        return [
            str(item["title"]).strip()
            for item in results
            if isinstance(item, dict) and str(item.get("title") or "").strip()
        ]

    def fetch_summary(self, title: str) -> SourceDocument | None:
        """Fetch the lead-section summary of one article; None when unavailable."""
        url = f"{self.rest_url}/page/summary/{quote(title.replace(' ', '_'), safe='')}"
        try:
            resp = self.session.get(url, timeout=self.timeout)
            if resp.status_code >= 400:
                logger.info("Wikipedia summary for %r returned HTTP %s", title, resp.status_code)
                return None
            data = resp.json()
        except (requests.RequestException, ValueError) as exc:
            logger.warning("Could not fetch Wikipedia content for %r: %s", title, exc)
            return None

        if not isinstance(data, dict):
            return None
        extract = strip_html(data.get("extract") or "")
        page_url = (((data.get("content_urls") or {}).get("desktop") or {}).get("page")) or ""
        return SourceDocument(
            title=str(data.get("title") or title),
            content=cap_content(extract, self.max_content_length),
            url=str(page_url),
        )

    def fetch(self, topic: str) -> list[SourceDocument]:
        docs: list[SourceDocument] = []
        for title in self.search_titles(topic):
            doc = self.fetch_summary(title)
            if doc is not None and doc.has_content():
                docs.append(doc)
        logger.info("Retrieved %d Wikipedia articles for topic: %s", len(docs), topic)
        return docs


__all__ = ["WikipediaClient", "TOPIC_EXPANSIONS"]

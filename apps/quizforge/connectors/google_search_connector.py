"""Web fallback source backed by the Google Custom Search JSON API."""

from __future__ import annotations

import logging
from typing import Any, Optional

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

GOOGLE_SEARCH_API_BASE = "https://www.googleapis.com/customsearch/v1"


class GoogleSearchClient(ConnectorMixin):
    source_type = "Educational"

    def __init__(
        self,
        *,
        api_key: Optional[str] = None,
        cx: Optional[str] = None,
        max_results: Optional[int] = None,
        max_content_length: Optional[int] = None,
        timeout: Optional[float] = None,
        session: Optional[Session] = None,
        base_url: str = GOOGLE_SEARCH_API_BASE,
    ) -> None:
        if api_key is None and settings.google_search_api_key is not None:
            api_key = settings.google_search_api_key.get_secret_value()
        self.api_key = (api_key or "").strip()
        self.cx = (cx or settings.google_search_cx or "").strip()
        self.max_results = max_results or settings.retrieval_max_items
        self.max_content_length = max_content_length or settings.retrieval_max_content_length
        self.timeout = timeout or settings.retrieval_timeout_seconds
        self.base_url = base_url
        self.session = session or build_session(
            max_retries=settings.retrieval_max_retries, user_agent=settings.user_agent
        )

    @property
    def configured(self) -> bool:
        return bool(self.api_key and self.cx)

    def fetch(self, topic: str) -> list[SourceDocument]:
        if not self.configured:
            logger.warning("Google Search API not configured, skipping Google search")
            return []

        params = {
            "key": self.api_key,
            "cx": self.cx,
            "q": f"{topic} tutorial explanation",
            "num": min(self.max_results, 10),
        }
        resp = self.session.get(self.base_url, params=params, timeout=self.timeout)
        resp.raise_for_status()
        docs = [d for d in self._parse_items(resp.json()) if d.has_content()]
        logger.info("Retrieved %d Google results for topic: %s", len(docs), topic)
        return docs

    def _parse_items(self, payload: Any) -> list[SourceDocument]:
        if not isinstance(payload, dict):
            return []
        return [
            SourceDocument(
                title=str(item.get("title") or ""),
                content=cap_content(strip_html(item.get("snippet")), self.max_content_length),
                url=str(item.get("link") or ""),
            )
            for item in payload.get("items") or []
            if isinstance(item, dict)
        ]


__all__ = ["GoogleSearchClient"]

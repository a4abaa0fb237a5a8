"""Q&A source backed by the Stack Exchange `search/advanced` endpoint."""

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

STACKEXCHANGE_API_BASE = "https://api.stackexchange.com/2.3"


class StackExchangeClient(ConnectorMixin):
    source_type = "Stack Overflow"

    def __init__(
        self,
        *,
        site: str = "stackoverflow",
        max_results: Optional[int] = None,
        max_content_length: Optional[int] = None,
        timeout: Optional[float] = None,
        session: Optional[Session] = None,
        base_url: str = STACKEXCHANGE_API_BASE,
    ) -> None:
        self.site = site
        self.max_results = max_results or settings.retrieval_max_items
        self.max_content_length = max_content_length or settings.retrieval_max_content_length
        self.timeout = timeout or settings.retrieval_timeout_seconds
        self.base_url = base_url.rstrip("/")
        self.session = session or build_session(
            max_retries=settings.retrieval_max_retries, user_agent=settings.user_agent
        )

    def fetch(self, topic: str) -> list[SourceDocument]:
        """Top-voted questions with an accepted answer; non-positive scores are dropped."""
        params = {
            "order": "desc",
            "sort": "votes",
            "accepted": "True",
            "answers": 1,
            "q": topic,
            "site": self.site,
            "pagesize": self.max_results,
            "filter": "withbody",
        }
        resp = self.session.get(f"{self.base_url}/search/advanced", params=params, timeout=self.timeout)
        resp.raise_for_status()
        docs = [d for d in self._parse_items(resp.json()) if d.has_content() and (d.score or 0) > 0]
        logger.info("Retrieved %d Stack Overflow answers for topic: %s", len(docs), topic)
        return docs

    def _parse_items(self, payload: Any) -> list[SourceDocument]:
        if not isinstance(payload, dict):
            return []
        if payload.get("error_id"):
            logger.warning(
                "Stack Exchange API error %s: %s",
                payload.get("error_id"),
                payload.get("error_message"),
            )
            return []
        docs: list[SourceDocument] = []
        for item in payload.get("items") or []:
            if not isinstance(item, dict):
                continue
            try:
                score = int(item.get("score") or 0)
            except (TypeError, ValueError):
                score = 0
            docs.append(
                SourceDocument(
                    title=strip_html(item.get("title")),
                    content=cap_content(strip_html(item.get("body")), self.max_content_length),
                    url=str(item.get("link") or ""),
                    score=score,
                )
            )
        return docs


__all__ = ["StackExchangeClient"]

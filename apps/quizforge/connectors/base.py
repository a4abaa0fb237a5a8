"""Shared plumbing for retrieval connectors."""

from __future__ import annotations

from dataclasses import dataclass

import requests
from bs4 import BeautifulSoup
from requests import Session
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from quizforge.core.utils import truncate


@dataclass(slots=True)
class SourceDocument:
    title: str
    content: str
    url: str = ""
    score: int | None = None

    def has_content(self) -> bool:
        return bool(self.content and self.content.strip())


def build_session(*, max_retries: int, user_agent: str) -> Session:
    """Return a `requests.Session` retrying idempotent GETs on 429/5xx."""
    session = requests.Session()
    retry = Retry(
        total=max_retries,
        backoff_factor=0.6,
        status_forcelist=(429, 500, 502, 503, 504),
        allowed_methods=("GET",),
        raise_on_status=False,
    )
    adapter = HTTPAdapter(max_retries=retry)
    session.mount("https://", adapter)
    session.mount("http://", adapter)
    session.headers.update({"User-Agent": user_agent, "Accept": "application/json"})
    return session


def strip_html(markup: str | None) -> str:
    """Reduce an HTML fragment to its visible text."""
    if not markup:
        return ""
    text = BeautifulSoup(markup, "html.parser").get_text(" ")
    return " ".join(text.split())


def cap_content(text: str, limit: int) -> str:
    return truncate(text.strip(), limit)


class ConnectorMixin:
    """Context-manager support for connectors that own a `requests.Session`."""

    session: Session

    def close(self) -> None:
        self.session.close()

    def __enter__(self):  # noqa: ANN204
        return self

    def __exit__(self, exc_type, exc, tb) -> None:  # noqa: ANN001
        self.close()


__all__ = ["ConnectorMixin", "SourceDocument", "build_session", "cap_content", "strip_html"]

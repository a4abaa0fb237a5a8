from __future__ import annotations

from datetime import datetime, timezone


def utcnow() -> datetime:
    """Return the current time as a timezone-aware UTC datetime."""

    return datetime.now(timezone.utc)


def utcnow_naive() -> datetime:
    """Return the current time as a naive UTC datetime.

    SQLite `DateTime` columns store naive timestamps; use this for table defaults.
    """

    return utcnow().replace(tzinfo=None)


def truncate(text: str, limit: int, *, suffix: str = "...") -> str:
    """Cap `text` at `limit` characters, appending `suffix` when cut."""

    if len(text) <= limit:
        return text
    return text[:limit] + suffix


__all__ = ["truncate", "utcnow", "utcnow_naive"]

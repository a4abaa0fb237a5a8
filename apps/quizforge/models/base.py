"""SQLModel base classes and mixins for ORM models."""

from __future__ import annotations

from datetime import datetime

from sqlmodel import Field, SQLModel

from quizforge.core.utils import utcnow_naive


class TimestampMixin(SQLModel):
    """Adds created/updated timestamps (app-managed)."""

    created_at: datetime | None = Field(default_factory=utcnow_naive)
    updated_at: datetime | None = Field(default_factory=utcnow_naive)


class Model(TimestampMixin, SQLModel):
    """Opinionated base with `id`/timestamps for SQLModel tables.

    Inherit this along with `table=True` on concrete models.
    """

    id: int | None = Field(default=None, primary_key=True)

from __future__ import annotations

import uuid
from datetime import UTC, datetime
from typing import Any

import sqlalchemy as sa
from sqlmodel import Field, SQLModel


def now_utc() -> datetime:
    return datetime.now(UTC)


def timestamp_field(**kwargs: Any) -> Any:
    """A timezone-aware timestamp column defaulting to now on both sides."""
    return Field(
        default_factory=now_utc,
        sa_type=sa.DateTime(timezone=True),  # ty: ignore[invalid-argument-type]
        sa_column_kwargs={"server_default": sa.func.now()},
        **kwargs,
    )


class UUIDBase(SQLModel):
    """Surrogate UUID primary key."""

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True, sa_type=sa.Uuid)


class TimestampMixin(SQLModel):
    """created_at / updated_at pair; services call ``touch()`` on every mutation."""

    created_at: datetime = timestamp_field()
    updated_at: datetime = timestamp_field()

    def touch(self) -> datetime:
        self.updated_at = now_utc()
        return self.updated_at

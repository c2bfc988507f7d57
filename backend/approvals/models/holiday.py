from __future__ import annotations

import datetime

from sqlmodel import Field

from approvals.models.base import TimestampMixin, UUIDBase


class Holiday(UUIDBase, TimestampMixin, table=True):
    """A day excluded from working-day counts.

    Recurring holidays repeat on the same month/day every year.
    """

    __tablename__ = "holiday"

    date: datetime.date = Field(index=True)
    name: str = Field(max_length=255)
    description: str = ""
    is_recurring: bool = Field(default=True, sa_column_kwargs={"server_default": "1"})

# ruff: noqa: TC003
from __future__ import annotations

import datetime
import uuid

from pydantic import BaseModel, ConfigDict, Field


class CreateHolidayRequest(BaseModel):
    """Request body for creating a holiday."""

    date: datetime.date
    name: str = Field(min_length=1, max_length=255)
    description: str = Field(default="", max_length=2000)
    is_recurring: bool = True


class UpdateHolidayRequest(BaseModel):
    """Partial update of a holiday."""

    date: datetime.date | None = None
    name: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = Field(default=None, max_length=2000)
    is_recurring: bool | None = None


class HolidayResponse(BaseModel):
    """Response schema for a holiday."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    date: datetime.date
    name: str
    description: str
    is_recurring: bool


class HolidayListResponse(BaseModel):
    """List of holidays."""

    items: list[HolidayResponse]
    total: int

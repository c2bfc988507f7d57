# ruff: noqa: TC003
from __future__ import annotations

import uuid

from pydantic import BaseModel, ConfigDict, Field


class CreateLeaveTypeRequest(BaseModel):
    """Request body for adding a leave type to the catalog."""

    code: str = Field(min_length=1, max_length=50)
    name: str = Field(min_length=1, max_length=255)
    description: str = Field(default="", max_length=2000)
    max_days: int = Field(default=0, ge=0, description="0 means unlimited and untracked")
    is_active: bool = True
    has_default_balance: bool = False


class UpdateLeaveTypeRequest(BaseModel):
    """Partial update of a leave type. The code is immutable."""

    name: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = Field(default=None, max_length=2000)
    max_days: int | None = Field(default=None, ge=0)
    is_active: bool | None = None
    has_default_balance: bool | None = None


class LeaveTypeResponse(BaseModel):
    """Response schema for a leave type."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    code: str
    name: str
    description: str
    max_days: int
    is_active: bool
    has_default_balance: bool


class LeaveTypeListResponse(BaseModel):
    """List of leave types."""

    items: list[LeaveTypeResponse]
    total: int

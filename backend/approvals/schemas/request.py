# ruff: noqa: TC001, TC003
from __future__ import annotations

import datetime
import uuid
from typing import Annotated, Literal, Self

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from approvals.models.enums import RequestKind, RequestStatus

# ---------------------------------------------------------------------------
# Create / update payloads
# ---------------------------------------------------------------------------


class CreateTimesheetPayload(BaseModel):
    """Request body for logging hours."""

    user_id: uuid.UUID | None = None
    project_id: uuid.UUID | None = None
    date: datetime.date
    hours: float = Field(gt=0, le=24)
    description: str = Field(default="", max_length=2000)


class UpdateTimesheetPayload(BaseModel):
    """Partial update of a draft timesheet."""

    project_id: uuid.UUID | None = None
    date: datetime.date | None = None
    hours: float | None = Field(default=None, gt=0, le=24)
    description: str | None = Field(default=None, max_length=2000)


class CreateExpensePayload(BaseModel):
    """Request body for an expense claim."""

    user_id: uuid.UUID | None = None
    date: datetime.date
    amount: float = Field(gt=0)
    description: str = Field(default="", max_length=2000)
    receipt_ref: str | None = Field(default=None, max_length=2048)


class UpdateExpensePayload(BaseModel):
    """Partial update of a draft expense."""

    date: datetime.date | None = None
    amount: float | None = Field(default=None, gt=0)
    description: str | None = Field(default=None, max_length=2000)
    receipt_ref: str | None = Field(default=None, max_length=2048)


class CreateLeavePayload(BaseModel):
    """Request body for applying for leave."""

    user_id: uuid.UUID | None = None
    leave_type_id: uuid.UUID
    start_date: datetime.date
    end_date: datetime.date
    reason: str = Field(default="", max_length=2000)

    @model_validator(mode="after")
    def _validate_dates(self) -> Self:
        if self.start_date > self.end_date:
            msg = "Start date cannot be after end date"
            raise ValueError(msg)
        return self


class UpdateLeavePayload(BaseModel):
    """Partial update of a draft leave request."""

    leave_type_id: uuid.UUID | None = None
    start_date: datetime.date | None = None
    end_date: datetime.date | None = None
    reason: str | None = Field(default=None, max_length=2000)


CreatePayload = CreateTimesheetPayload | CreateExpensePayload | CreateLeavePayload
UpdatePayload = UpdateTimesheetPayload | UpdateExpensePayload | UpdateLeavePayload


class RejectPayload(BaseModel):
    """Request body for rejecting a submitted request."""

    reason: str = Field(default="", max_length=1000)

    @field_validator("reason")
    @classmethod
    def _strip(cls, value: str) -> str:
        return value.strip()


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class _RequestResponseBase(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    owner_id: uuid.UUID
    status: RequestStatus
    approver_id: uuid.UUID | None
    rejection_reason: str | None
    decided_at: datetime.datetime | None
    created_at: datetime.datetime
    updated_at: datetime.datetime


class TimesheetResponse(_RequestResponseBase):
    """A timesheet entry."""

    kind: Literal[RequestKind.TIMESHEET] = RequestKind.TIMESHEET
    project_id: uuid.UUID | None
    date: datetime.date
    hours: float
    description: str


class ExpenseResponse(_RequestResponseBase):
    """An expense claim."""

    kind: Literal[RequestKind.EXPENSE] = RequestKind.EXPENSE
    date: datetime.date
    amount: float
    description: str
    receipt_ref: str | None


class LeaveResponse(_RequestResponseBase):
    """A leave request."""

    kind: Literal[RequestKind.LEAVE] = RequestKind.LEAVE
    leave_type_id: uuid.UUID
    start_date: datetime.date
    end_date: datetime.date
    reason: str
    applied_at: datetime.datetime | None


RequestResponse = Annotated[
    TimesheetResponse | ExpenseResponse | LeaveResponse,
    Field(discriminator="kind"),
]


class RequestListResponse(BaseModel):
    """List of requests visible to the actor."""

    items: list[RequestResponse]
    total: int


class DeleteResponse(BaseModel):
    """Confirmation of a deleted draft."""

    id: uuid.UUID
    deleted: bool = True


class WorkingDaysResponse(BaseModel):
    """Business-day count of an inclusive date range."""

    start_date: datetime.date
    end_date: datetime.date
    working_days: int

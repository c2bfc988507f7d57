# ruff: noqa: TC003
from __future__ import annotations

import datetime
import uuid

import sqlalchemy as sa
from sqlmodel import Field

from approvals.models.base import TimestampMixin, UUIDBase
from approvals.models.enums import RequestStatus


class RequestFields(UUIDBase, TimestampMixin):
    """Lifecycle columns shared by every request kind."""

    owner_id: uuid.UUID = Field(index=True)
    status: str = Field(
        default=RequestStatus.DRAFT, max_length=20, index=True, sa_column_kwargs={"server_default": "draft"}
    )
    approver_id: uuid.UUID | None = None
    rejection_reason: str | None = None
    decided_at: datetime.datetime | None = Field(default=None, sa_type=sa.DateTime(timezone=True))  # ty: ignore[invalid-argument-type]


class Timesheet(RequestFields, table=True):
    """Hours an employee logged against a project on one day."""

    __tablename__ = "timesheet"

    project_id: uuid.UUID | None = None
    date: datetime.date
    hours: float
    description: str = ""


class Expense(RequestFields, table=True):
    """An out-of-pocket expense claim."""

    __tablename__ = "expense"

    date: datetime.date
    amount: float
    description: str = ""
    receipt_ref: str | None = None


class LeaveRequest(RequestFields, table=True):
    """A time-off request against a leave type."""

    __tablename__ = "leave_request"
    __table_args__ = (sa.Index("ix_leave_owner_dates", "owner_id", "start_date", "end_date"),)

    leave_type_id: uuid.UUID = Field(
        sa_column=sa.Column(sa.Uuid, sa.ForeignKey("leave_type.id"), nullable=False, index=True),
    )
    start_date: datetime.date
    end_date: datetime.date
    reason: str = ""
    applied_at: datetime.datetime | None = Field(default=None, sa_type=sa.DateTime(timezone=True))  # ty: ignore[invalid-argument-type]

# ruff: noqa: TC003
from __future__ import annotations

import uuid
from datetime import datetime

import sqlalchemy as sa
from sqlmodel import Field, SQLModel

from approvals.models.base import timestamp_field


class LeaveBalance(SQLModel, table=True):
    """Remaining leave days per user, leave type and calendar year.

    The balance is signed: approvals may drive it below zero.
    """

    __tablename__ = "leave_balance"

    user_id: uuid.UUID = Field(primary_key=True, sa_type=sa.Uuid)
    leave_type_id: uuid.UUID = Field(
        sa_column=sa.Column(sa.Uuid, sa.ForeignKey("leave_type.id", ondelete="CASCADE"), primary_key=True),
    )
    year: int = Field(primary_key=True)
    balance: int = Field(default=0, sa_column_kwargs={"server_default": "0"})
    updated_at: datetime = timestamp_field()

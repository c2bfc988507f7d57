# ruff: noqa: B008, TC001, TC003
from __future__ import annotations

import datetime

from fastapi import APIRouter, Query

from approvals.api.deps import ActorDep
from approvals.db import SessionDep
from approvals.exceptions import ValidationFailedError
from approvals.schemas.balance import BalanceListResponse
from approvals.schemas.leave_type import LeaveTypeListResponse
from approvals.schemas.request import WorkingDaysResponse
from approvals.services import ledger
from approvals.services.calendar import get_working_days
from approvals.services.leave_type import list_leave_types

# Registered ahead of the generic /leaves/{request_id} routes.
leave_helpers_router = APIRouter(prefix="/leaves", tags=["leaves"])
leave_types_router = APIRouter(prefix="/leave-types", tags=["leave-types"])


@leave_helpers_router.get("/working-days", response_model=WorkingDaysResponse)
async def working_days(
    session: SessionDep,
    actor: ActorDep,
    start_date: datetime.date = Query(),
    end_date: datetime.date = Query(),
) -> WorkingDaysResponse:
    """Count working days in an inclusive range, excluding weekends and holidays."""
    if start_date > end_date:
        raise ValidationFailedError("Start date cannot be after end date")
    return WorkingDaysResponse(
        start_date=start_date,
        end_date=end_date,
        working_days=await get_working_days(session, start_date, end_date),
    )


@leave_helpers_router.get("/balances", response_model=BalanceListResponse)
async def my_balances(
    session: SessionDep,
    actor: ActorDep,
    year: int | None = Query(default=None, ge=1970, le=9999),
) -> BalanceListResponse:
    """Leave balances of the caller for a year (current year by default)."""
    return await ledger.list_balances(session, actor.user_id, year or ledger.current_year())


@leave_types_router.get("", response_model=LeaveTypeListResponse)
async def active_leave_types(session: SessionDep, actor: ActorDep) -> LeaveTypeListResponse:
    """Leave types employees can apply for."""
    return await list_leave_types(session, active_only=True)

# ruff: noqa: B008, TC001, TC003
from __future__ import annotations

import uuid

from fastapi import APIRouter, Query, status

from approvals.api.deps import ActorDep, AdminDep
from approvals.db import SessionDep
from approvals.schemas.holiday import (
    CreateHolidayRequest,
    HolidayListResponse,
    HolidayResponse,
    UpdateHolidayRequest,
)
from approvals.services import holiday as holiday_service

holidays_router = APIRouter(prefix="/holidays", tags=["holidays"])
admin_holidays_router = APIRouter(prefix="/admin/holidays", tags=["admin"])


@holidays_router.get(
    "",
    response_model=HolidayListResponse,
)
async def list_holidays(
    session: SessionDep,
    actor: ActorDep,
    year: int | None = Query(default=None, ge=1970, le=9999),
) -> HolidayListResponse:
    """List holidays; recurring ones are listed for every year."""
    return await holiday_service.list_holidays(session, year)


@admin_holidays_router.get(
    "",
    response_model=HolidayListResponse,
)
async def admin_list_holidays(
    session: SessionDep,
    auth: AdminDep,
    year: int | None = Query(default=None, ge=1970, le=9999),
) -> HolidayListResponse:
    """List holidays (admin only)."""
    return await holiday_service.list_holidays(session, year)


@admin_holidays_router.post(
    "",
    response_model=HolidayResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_holiday(
    payload: CreateHolidayRequest,
    session: SessionDep,
    auth: AdminDep,
) -> HolidayResponse:
    """Create a holiday (admin only)."""
    return await holiday_service.create_holiday(session, auth, payload)


@admin_holidays_router.patch(
    "/{holiday_id}",
    response_model=HolidayResponse,
)
async def update_holiday(
    holiday_id: uuid.UUID,
    payload: UpdateHolidayRequest,
    session: SessionDep,
    auth: AdminDep,
) -> HolidayResponse:
    """Update a holiday (admin only)."""
    return await holiday_service.update_holiday(session, auth, holiday_id, payload)


@admin_holidays_router.delete(
    "/{holiday_id}",
    status_code=status.HTTP_204_NO_CONTENT,
)
async def delete_holiday(
    holiday_id: uuid.UUID,
    session: SessionDep,
    auth: AdminDep,
) -> None:
    """Delete a holiday (admin only)."""
    await holiday_service.delete_holiday(session, auth, holiday_id)

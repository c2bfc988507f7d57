from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from sqlalchemy import extract, or_, select
from sqlmodel import col

from approvals.exceptions import NotFoundError
from approvals.models.enums import AuditAction, AuditEntityType
from approvals.models.holiday import Holiday
from approvals.schemas.holiday import HolidayListResponse, HolidayResponse
from approvals.services.audit import audit_snapshot, record_audit

if TYPE_CHECKING:
    import uuid

    from sqlalchemy.ext.asyncio import AsyncSession

    from approvals.schemas.auth import ActorContext
    from approvals.schemas.holiday import CreateHolidayRequest, UpdateHolidayRequest

logger = logging.getLogger(__name__)


async def create_holiday(
    session: AsyncSession,
    actor: ActorContext,
    payload: CreateHolidayRequest,
) -> HolidayResponse:
    """Add a holiday to the calendar."""
    holiday = Holiday(**payload.model_dump())
    session.add(holiday)
    await session.flush()

    await record_audit(
        session,
        actor=actor,
        entity_type=AuditEntityType.HOLIDAY,
        entity_id=holiday.id,
        action=AuditAction.CREATE,
        after_json=audit_snapshot(holiday),
    )

    await session.commit()
    await session.refresh(holiday)
    logger.info("Holiday %s on %s created by %s", holiday.name, holiday.date, actor.user_id)
    return HolidayResponse.model_validate(holiday)


async def list_holidays(session: AsyncSession, year: int | None = None) -> HolidayListResponse:
    """List holidays ordered by date.

    With a year, recurring holidays are always listed and one-off holidays
    only when they fall in that year.
    """
    query = select(Holiday).order_by(col(Holiday.date))
    if year is not None:
        query = query.where(
            or_(
                col(Holiday.is_recurring).is_(True),
                extract("year", col(Holiday.date)) == year,
            )
        )

    result = await session.execute(query)
    items = [HolidayResponse.model_validate(h) for h in result.scalars().all()]
    return HolidayListResponse(items=items, total=len(items))


async def get_holiday(session: AsyncSession, holiday_id: uuid.UUID) -> Holiday:
    """Get a single holiday or raise 404."""
    holiday = await session.get(Holiday, holiday_id)
    if holiday is None:
        raise NotFoundError("Holiday not found")
    return holiday


async def update_holiday(
    session: AsyncSession,
    actor: ActorContext,
    holiday_id: uuid.UUID,
    payload: UpdateHolidayRequest,
) -> HolidayResponse:
    """Apply a partial update to a holiday."""
    holiday = await get_holiday(session, holiday_id)
    before = audit_snapshot(holiday)

    for field, value in payload.model_dump(exclude_unset=True, exclude_none=True).items():
        setattr(holiday, field, value)
    holiday.touch()
    session.add(holiday)

    await record_audit(
        session,
        actor=actor,
        entity_type=AuditEntityType.HOLIDAY,
        entity_id=holiday.id,
        action=AuditAction.UPDATE,
        before_json=before,
        after_json=audit_snapshot(holiday),
    )

    await session.commit()
    await session.refresh(holiday)
    return HolidayResponse.model_validate(holiday)


async def delete_holiday(
    session: AsyncSession,
    actor: ActorContext,
    holiday_id: uuid.UUID,
) -> None:
    """Remove a holiday from the calendar."""
    holiday = await get_holiday(session, holiday_id)

    await record_audit(
        session,
        actor=actor,
        entity_type=AuditEntityType.HOLIDAY,
        entity_id=holiday.id,
        action=AuditAction.DELETE,
        before_json=audit_snapshot(holiday),
    )

    await session.delete(holiday)
    await session.commit()

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlmodel import col

from approvals.exceptions import BusinessRuleViolation, NotFoundError
from approvals.models.enums import AuditAction, AuditEntityType
from approvals.models.leave_type import LeaveType
from approvals.schemas.leave_type import LeaveTypeListResponse, LeaveTypeResponse
from approvals.services.audit import audit_snapshot, record_audit

if TYPE_CHECKING:
    import uuid

    from sqlalchemy.ext.asyncio import AsyncSession

    from approvals.schemas.auth import ActorContext
    from approvals.schemas.leave_type import CreateLeaveTypeRequest, UpdateLeaveTypeRequest

logger = logging.getLogger(__name__)


async def get_leave_type(session: AsyncSession, leave_type_id: uuid.UUID) -> LeaveType:
    """Get a single leave type or raise 404."""
    leave_type = await session.get(LeaveType, leave_type_id)
    if leave_type is None:
        raise NotFoundError("Leave type not found")
    return leave_type


async def list_leave_types(session: AsyncSession, *, active_only: bool = False) -> LeaveTypeListResponse:
    """List the catalog, ordered by code."""
    query = select(LeaveType).order_by(col(LeaveType.code))
    if active_only:
        query = query.where(col(LeaveType.is_active).is_(True))
    result = await session.execute(query)
    items = [LeaveTypeResponse.model_validate(lt) for lt in result.scalars().all()]
    return LeaveTypeListResponse(items=items, total=len(items))


async def create_leave_type(
    session: AsyncSession,
    actor: ActorContext,
    payload: CreateLeaveTypeRequest,
) -> LeaveTypeResponse:
    """Add a leave type to the catalog. Codes are unique."""
    leave_type = LeaveType(**payload.model_dump())
    session.add(leave_type)

    try:
        await session.flush()
    except IntegrityError:
        await session.rollback()
        raise BusinessRuleViolation("Leave type code already exists") from None

    await record_audit(
        session,
        actor=actor,
        entity_type=AuditEntityType.LEAVE_TYPE,
        entity_id=leave_type.id,
        action=AuditAction.CREATE,
        after_json=audit_snapshot(leave_type),
    )

    await session.commit()
    await session.refresh(leave_type)
    logger.info("Leave type %s created by %s", leave_type.code, actor.user_id)
    return LeaveTypeResponse.model_validate(leave_type)


async def update_leave_type(
    session: AsyncSession,
    actor: ActorContext,
    leave_type_id: uuid.UUID,
    payload: UpdateLeaveTypeRequest,
) -> LeaveTypeResponse:
    """Apply a partial update to a leave type."""
    leave_type = await get_leave_type(session, leave_type_id)
    before = audit_snapshot(leave_type)

    for field, value in payload.model_dump(exclude_unset=True, exclude_none=True).items():
        setattr(leave_type, field, value)
    leave_type.touch()
    session.add(leave_type)

    await record_audit(
        session,
        actor=actor,
        entity_type=AuditEntityType.LEAVE_TYPE,
        entity_id=leave_type.id,
        action=AuditAction.UPDATE,
        before_json=before,
        after_json=audit_snapshot(leave_type),
    )

    await session.commit()
    await session.refresh(leave_type)
    return LeaveTypeResponse.model_validate(leave_type)

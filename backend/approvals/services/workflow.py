"""Lifecycle of timesheets, expenses and leave requests.

Every operation follows the same order: authorize, check the state guard,
run kind-specific validation, then write and commit once. Nothing is
written before a denial. Notifications go out after the commit.
"""

# ruff: noqa: TC003
from __future__ import annotations

import logging
import uuid
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from datetime import date
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel
from sqlalchemy import select
from sqlmodel import col

from approvals.config import get_settings
from approvals.exceptions import (
    BusinessRuleViolation,
    InvalidStateError,
    NotFoundError,
    ValidationFailedError,
)
from approvals.models.base import now_utc
from approvals.models.enums import (
    AuditAction,
    AuditEntityType,
    Operation,
    RequestKind,
    RequestStatus,
    Role,
)
from approvals.models.request import Expense, LeaveRequest, RequestFields, Timesheet
from approvals.schemas.request import (
    ExpenseResponse,
    LeaveResponse,
    RequestListResponse,
    TimesheetResponse,
)
from approvals.services import ledger
from approvals.services.audit import audit_snapshot, balance_snapshot, record_audit
from approvals.services.authorization import can_perform, kind_label, list_scope, resolve_create_target
from approvals.services.calendar import get_working_days
from approvals.services.directory import get_user_directory
from approvals.services.leave_type import get_leave_type
from approvals.services.notification import NotificationEvent, dispatch

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from approvals.schemas.auth import ActorContext
    from approvals.schemas.request import CreatePayload, UpdatePayload

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Leave-specific hooks
# ---------------------------------------------------------------------------


async def _validate_leave_create(session: AsyncSession, owner_id: uuid.UUID, values: dict[str, Any]) -> None:
    """Leave type, backdating, max-days and balance checks for a new leave."""
    leave_type = await get_leave_type(session, values["leave_type_id"])
    if not leave_type.is_active:
        raise ValidationFailedError(f"Leave type {leave_type.name} is not active")

    start_date: date = values["start_date"]
    end_date: date = values["end_date"]
    if start_date > end_date:
        raise ValidationFailedError("Start date cannot be after end date")
    if not get_settings().allow_backdated_leave and start_date < date.today():
        raise ValidationFailedError("Cannot apply for leave in the past")

    if not leave_type.is_balance_tracked:
        return

    working_days = await get_working_days(session, start_date, end_date)
    if working_days > leave_type.max_days:
        raise BusinessRuleViolation(f"Cannot apply for more than {leave_type.max_days} days of {leave_type.name}")

    balance = await ledger.check_balance(session, owner_id, leave_type.id, ledger.current_year())
    if working_days > balance:
        raise BusinessRuleViolation(
            f"Insufficient {leave_type.name} balance. Available: {balance} days, Required: {working_days} days"
        )


async def _validate_leave_update(session: AsyncSession, request: LeaveRequest, changes: dict[str, Any]) -> None:
    """Merged dates must stay ordered; a new leave type must exist."""
    if "leave_type_id" in changes:
        await get_leave_type(session, changes["leave_type_id"])

    start_date = changes.get("start_date", request.start_date)
    end_date = changes.get("end_date", request.end_date)
    if start_date > end_date:
        raise ValidationFailedError("Start date cannot be after end date")


async def _on_leave_submit(session: AsyncSession, request: LeaveRequest) -> None:
    request.applied_at = now_utc()


async def _on_leave_approve(session: AsyncSession, actor: ActorContext, request: LeaveRequest) -> None:
    """Debit the ledger by the working days of an approved tracked leave."""
    leave_type = await get_leave_type(session, request.leave_type_id)
    if not leave_type.is_balance_tracked:
        return

    working_days = await get_working_days(session, request.start_date, request.end_date)
    year = ledger.current_year()
    new_balance = await ledger.adjust_balance(session, request.owner_id, leave_type.id, -working_days, year=year)

    await record_audit(
        session,
        actor=actor,
        entity_type=AuditEntityType.LEAVE_BALANCE,
        entity_id=request.owner_id,
        action=AuditAction.ADJUST,
        before_json=balance_snapshot(leave_type.id, year, new_balance + working_days),
        after_json=balance_snapshot(leave_type.id, year, new_balance),
    )
    logger.info(
        "Debited %d days of %s from %s for leave %s (balance now %d)",
        working_days,
        leave_type.code,
        request.owner_id,
        request.id,
        new_balance,
    )


# ---------------------------------------------------------------------------
# Kind registry
# ---------------------------------------------------------------------------


async def _no_create_check(session: AsyncSession, owner_id: uuid.UUID, values: dict[str, Any]) -> None:
    return None


async def _no_update_check(session: AsyncSession, request: RequestFields, changes: dict[str, Any]) -> None:
    return None


async def _no_submit_hook(session: AsyncSession, request: RequestFields) -> None:
    return None


async def _no_approve_hook(session: AsyncSession, actor: ActorContext, request: RequestFields) -> None:
    return None


@dataclass(frozen=True)
class KindSpec:
    """Everything the lifecycle needs to know about one request kind."""

    kind: RequestKind
    model: type[RequestFields]
    response: type[BaseModel]
    audit_entity: AuditEntityType
    # Columns that may be cleared to NULL by an update.
    nullable_fields: frozenset[str] = field(default_factory=frozenset)
    validate_create: Callable[..., Awaitable[None]] = _no_create_check
    validate_update: Callable[..., Awaitable[None]] = _no_update_check
    on_submit: Callable[..., Awaitable[None]] = _no_submit_hook
    on_approve: Callable[..., Awaitable[None]] = _no_approve_hook

    @property
    def label(self) -> str:
        return kind_label(self.kind)


KINDS: dict[RequestKind, KindSpec] = {
    RequestKind.TIMESHEET: KindSpec(
        kind=RequestKind.TIMESHEET,
        model=Timesheet,
        response=TimesheetResponse,
        audit_entity=AuditEntityType.TIMESHEET,
        nullable_fields=frozenset({"project_id"}),
    ),
    RequestKind.EXPENSE: KindSpec(
        kind=RequestKind.EXPENSE,
        model=Expense,
        response=ExpenseResponse,
        audit_entity=AuditEntityType.EXPENSE,
        nullable_fields=frozenset({"receipt_ref"}),
    ),
    RequestKind.LEAVE: KindSpec(
        kind=RequestKind.LEAVE,
        model=LeaveRequest,
        response=LeaveResponse,
        audit_entity=AuditEntityType.LEAVE,
        validate_create=_validate_leave_create,
        validate_update=_validate_leave_update,
        on_submit=_on_leave_submit,
        on_approve=_on_leave_approve,
    ),
}


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _build_response(spec: KindSpec, request: RequestFields) -> BaseModel:
    return spec.response.model_validate(request)


async def _managed_ids(actor: ActorContext) -> frozenset[uuid.UUID]:
    if actor.role != Role.MANAGER:
        return frozenset()
    return await get_user_directory().list_managed_user_ids(actor.user_id)


async def _get_request_or_404(session: AsyncSession, spec: KindSpec, request_id: uuid.UUID) -> RequestFields:
    request = await session.get(spec.model, request_id)
    if request is None:
        raise NotFoundError(f"{spec.kind.value.capitalize()} not found")
    return request


async def _authorize(actor: ActorContext, operation: Operation, spec: KindSpec, owner_id: uuid.UUID) -> None:
    decision = can_perform(actor, operation, spec.kind, owner_id, await _managed_ids(actor))
    decision.raise_for_denial()


def _require_status(spec: KindSpec, request: RequestFields, expected: RequestStatus, verb: str) -> None:
    if request.status != expected:
        raise InvalidStateError(f"Only {expected.value} {spec.label} can be {verb}")


async def _audit(
    session: AsyncSession,
    actor: ActorContext,
    spec: KindSpec,
    request: RequestFields,
    action: AuditAction,
    before: dict[str, Any] | None,
    after: dict[str, Any] | None,
) -> None:
    await record_audit(
        session,
        actor=actor,
        entity_type=spec.audit_entity,
        entity_id=request.id,
        action=action,
        before_json=before,
        after_json=after,
    )


def _notify(
    spec: KindSpec,
    request: RequestFields,
    action: AuditAction,
    actor: ActorContext,
    recipients: list[uuid.UUID],
    message: str,
) -> None:
    dispatch(
        NotificationEvent(
            kind=spec.kind,
            request_id=request.id,
            action=action,
            actor_id=actor.user_id,
            recipient_ids=recipients,
            message=message,
        )
    )


# ---------------------------------------------------------------------------
# Lifecycle operations
# ---------------------------------------------------------------------------


async def create_request(
    session: AsyncSession,
    actor: ActorContext,
    kind: RequestKind,
    payload: CreatePayload,
) -> BaseModel:
    """Create a draft request owned by the resolved target user."""
    spec = KINDS[kind]
    owner_id = resolve_create_target(actor, kind, payload.user_id)
    await _authorize(actor, Operation.CREATE, spec, owner_id)

    values = payload.model_dump(exclude={"user_id"})
    await spec.validate_create(session, owner_id, values)

    request = spec.model(owner_id=owner_id, status=RequestStatus.DRAFT, **values)
    session.add(request)
    await session.flush()

    await _audit(session, actor, spec, request, AuditAction.CREATE, None, audit_snapshot(request))
    await session.commit()
    await session.refresh(request)
    logger.info("%s %s created for %s by %s", kind.value, request.id, owner_id, actor.user_id)

    if owner_id != actor.user_id:
        _notify(spec, request, AuditAction.CREATE, actor, [owner_id], f"A {kind.value} was created for you")
    return _build_response(spec, request)


async def get_request(
    session: AsyncSession,
    actor: ActorContext,
    kind: RequestKind,
    request_id: uuid.UUID,
) -> BaseModel:
    """Fetch one request the actor may view."""
    spec = KINDS[kind]
    request = await _get_request_or_404(session, spec, request_id)
    await _authorize(actor, Operation.VIEW, spec, request.owner_id)
    return _build_response(spec, request)


async def list_requests(
    session: AsyncSession,
    actor: ActorContext,
    kind: RequestKind,
    status_filter: str | None = None,
) -> RequestListResponse:
    """List requests visible to the actor, newest first."""
    spec = KINDS[kind]
    scope = list_scope(actor, status_filter, await _managed_ids(actor))

    query = select(spec.model)
    if scope.owner_ids is not None:
        query = query.where(col(spec.model.owner_id).in_(scope.owner_ids))
    if scope.exclude_owner_id is not None:
        query = query.where(col(spec.model.owner_id) != scope.exclude_owner_id)
    if scope.status is not None:
        query = query.where(col(spec.model.status) == scope.status.value)
    query = query.order_by(col(spec.model.created_at).desc())

    result = await session.execute(query)
    items = [_build_response(spec, r) for r in result.scalars().all()]
    return RequestListResponse(items=items, total=len(items))  # type: ignore[arg-type]


async def update_request(
    session: AsyncSession,
    actor: ActorContext,
    kind: RequestKind,
    request_id: uuid.UUID,
    payload: UpdatePayload,
) -> BaseModel:
    """Apply a partial update to a draft."""
    spec = KINDS[kind]
    request = await _get_request_or_404(session, spec, request_id)
    await _authorize(actor, Operation.UPDATE, spec, request.owner_id)
    _require_status(spec, request, RequestStatus.DRAFT, "updated")

    changes = {
        key: value
        for key, value in payload.model_dump(exclude_unset=True).items()
        if value is not None or key in spec.nullable_fields
    }
    await spec.validate_update(session, request, changes)

    before = audit_snapshot(request)
    for key, value in changes.items():
        setattr(request, key, value)
    request.touch()
    session.add(request)

    await _audit(session, actor, spec, request, AuditAction.UPDATE, before, audit_snapshot(request))
    await session.commit()
    await session.refresh(request)
    return _build_response(spec, request)


async def delete_request(
    session: AsyncSession,
    actor: ActorContext,
    kind: RequestKind,
    request_id: uuid.UUID,
) -> uuid.UUID:
    """Delete a draft. Drafts never touched the ledger, so nothing is restored."""
    spec = KINDS[kind]
    request = await _get_request_or_404(session, spec, request_id)
    await _authorize(actor, Operation.DELETE, spec, request.owner_id)
    _require_status(spec, request, RequestStatus.DRAFT, "deleted")

    await _audit(session, actor, spec, request, AuditAction.DELETE, audit_snapshot(request), None)
    await session.delete(request)
    await session.commit()
    logger.info("%s %s deleted by %s", kind.value, request_id, actor.user_id)
    return request_id


async def submit_request(
    session: AsyncSession,
    actor: ActorContext,
    kind: RequestKind,
    request_id: uuid.UUID,
) -> BaseModel:
    """Move a draft to submitted and tell the owner's manager."""
    spec = KINDS[kind]
    request = await _get_request_or_404(session, spec, request_id)
    await _authorize(actor, Operation.SUBMIT, spec, request.owner_id)
    _require_status(spec, request, RequestStatus.DRAFT, "submitted")

    before = audit_snapshot(request)
    request.status = RequestStatus.SUBMITTED
    request.touch()
    await spec.on_submit(session, request)
    session.add(request)

    await _audit(session, actor, spec, request, AuditAction.SUBMIT, before, audit_snapshot(request))
    await session.commit()
    await session.refresh(request)
    logger.info("%s %s submitted by %s", kind.value, request.id, actor.user_id)

    owner = await get_user_directory().get_user(request.owner_id)
    if owner is not None and owner.manager_id is not None:
        _notify(
            spec, request, AuditAction.SUBMIT, actor, [owner.manager_id], f"A {kind.value} is waiting for approval"
        )
    return _build_response(spec, request)


async def approve_request(
    session: AsyncSession,
    actor: ActorContext,
    kind: RequestKind,
    request_id: uuid.UUID,
) -> BaseModel:
    """Approve a submitted request; approved tracked leave debits the ledger."""
    spec = KINDS[kind]
    request = await _get_request_or_404(session, spec, request_id)
    await _authorize(actor, Operation.APPROVE, spec, request.owner_id)
    _require_status(spec, request, RequestStatus.SUBMITTED, "approved")

    before = audit_snapshot(request)
    request.status = RequestStatus.APPROVED
    request.approver_id = actor.user_id
    request.rejection_reason = None
    request.decided_at = request.touch()
    session.add(request)
    await spec.on_approve(session, actor, request)

    await _audit(session, actor, spec, request, AuditAction.APPROVE, before, audit_snapshot(request))
    await session.commit()
    await session.refresh(request)
    logger.info("%s %s approved by %s", kind.value, request.id, actor.user_id)

    _notify(spec, request, AuditAction.APPROVE, actor, [request.owner_id], f"Your {kind.value} was approved")
    return _build_response(spec, request)


async def reject_request(
    session: AsyncSession,
    actor: ActorContext,
    kind: RequestKind,
    request_id: uuid.UUID,
    reason: str,
) -> BaseModel:
    """Reject a submitted request with a mandatory reason."""
    reason = reason.strip()
    if not reason:
        raise ValidationFailedError("Rejection reason is required")

    spec = KINDS[kind]
    request = await _get_request_or_404(session, spec, request_id)
    await _authorize(actor, Operation.REJECT, spec, request.owner_id)
    _require_status(spec, request, RequestStatus.SUBMITTED, "rejected")

    before = audit_snapshot(request)
    request.status = RequestStatus.REJECTED
    request.approver_id = actor.user_id
    request.rejection_reason = reason
    request.decided_at = request.touch()
    session.add(request)

    await _audit(session, actor, spec, request, AuditAction.REJECT, before, audit_snapshot(request))
    await session.commit()
    await session.refresh(request)
    logger.info("%s %s rejected by %s", kind.value, request.id, actor.user_id)

    _notify(
        spec, request, AuditAction.REJECT, actor, [request.owner_id], f"Your {kind.value} was rejected: {reason}"
    )
    return _build_response(spec, request)

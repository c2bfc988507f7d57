from __future__ import annotations

from typing import TYPE_CHECKING, Any

from approvals.models.audit import AuditLog

if TYPE_CHECKING:
    import uuid

    from sqlalchemy.ext.asyncio import AsyncSession
    from sqlmodel import SQLModel

    from approvals.models.enums import AuditAction, AuditEntityType
    from approvals.schemas.auth import ActorContext


def audit_snapshot(model: SQLModel) -> dict[str, Any]:
    """JSON-safe copy of a row for the before/after columns."""
    return model.model_dump(mode="json")


def balance_snapshot(leave_type_id: uuid.UUID, year: int, balance: int) -> dict[str, Any]:
    """Ledger rows have no surrogate id, so their snapshots carry the key."""
    return {"leave_type_id": str(leave_type_id), "year": year, "balance": balance}


async def record_audit(
    session: AsyncSession,
    *,
    actor: ActorContext,
    entity_type: AuditEntityType,
    entity_id: uuid.UUID,
    action: AuditAction,
    before_json: dict[str, Any] | None = None,
    after_json: dict[str, Any] | None = None,
) -> AuditLog:
    """Stage an audit entry in the caller's transaction; it commits with the change."""
    entry = AuditLog(
        actor_id=actor.user_id,
        entity_type=entity_type.value,
        entity_id=entity_id,
        action=action.value,
        before_json=before_json,
        after_json=after_json,
    )
    session.add(entry)
    return entry

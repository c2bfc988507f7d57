"""Role/ownership rules for request operations.

Every check here is pure: the caller fetches ``managed_ids`` from the user
directory and decides what to do with a denial.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from typing import TYPE_CHECKING

from approvals.exceptions import ForbiddenError, ValidationFailedError
from approvals.models.enums import Operation, RequestKind, RequestStatus, Role

if TYPE_CHECKING:
    from collections.abc import Set

    from approvals.schemas.auth import ActorContext


@dataclass(frozen=True)
class Decision:
    allowed: bool
    reason: str | None = None

    def raise_for_denial(self) -> None:
        """Raise ForbiddenError carrying the denial reason."""
        if not self.allowed:
            raise ForbiddenError(self.reason or "Forbidden")


_ALLOW = Decision(allowed=True)


def kind_label(kind: RequestKind) -> str:
    """Plural human label used in messages, e.g. "timesheets"."""
    return f"{kind.value}s"


def _deny(reason: str) -> Decision:
    return Decision(allowed=False, reason=reason)


def _employee_decision(
    actor: ActorContext, operation: Operation, kind: RequestKind, owner_id: uuid.UUID | None
) -> Decision:
    label = kind_label(kind)
    if operation in (Operation.APPROVE, Operation.REJECT):
        return _deny(f"Only managers and admins can {operation.value} {label}")
    if owner_id == actor.user_id:
        return _ALLOW
    if operation == Operation.CREATE:
        return _deny(f"Employees can only create their own {label}")
    if operation == Operation.VIEW:
        return _deny(f"Employees can only view their own {label}")
    return _deny(f"Unauthorized to {operation.value} this {kind.value}")


def _manager_decision(
    actor: ActorContext,
    operation: Operation,
    kind: RequestKind,
    owner_id: uuid.UUID | None,
    managed_ids: Set[uuid.UUID],
) -> Decision:
    # Managers may decide on any request, managed or not.
    if operation in (Operation.APPROVE, Operation.REJECT):
        return _ALLOW
    if owner_id == actor.user_id or owner_id in managed_ids:
        return _ALLOW

    label = kind_label(kind)
    if operation == Operation.CREATE:
        return _deny(f"Manager can create {label} only for self or managed employees")
    if operation in (Operation.UPDATE, Operation.DELETE, Operation.VIEW):
        return _deny(f"Manager can only {operation.value} their own or team {label}")
    return _deny(f"Unauthorized to {operation.value} this {kind.value}")


def _admin_decision(
    actor: ActorContext, operation: Operation, kind: RequestKind, owner_id: uuid.UUID | None
) -> Decision:
    if owner_id != actor.user_id:
        return _ALLOW

    label = kind_label(kind)
    if operation == Operation.CREATE:
        return _deny(f"Admin cannot create {label} for themselves")
    if operation in (Operation.UPDATE, Operation.DELETE):
        return _deny(f"Admin cannot {operation.value} their own {label}")
    return _ALLOW


def can_perform(
    actor: ActorContext,
    operation: Operation,
    kind: RequestKind,
    owner_id: uuid.UUID | None,
    managed_ids: Set[uuid.UUID] = frozenset(),
) -> Decision:
    """Decide whether ``actor`` may perform ``operation`` on a request owned by ``owner_id``.

    For CREATE, ``owner_id`` is the resolved target user.
    """
    if actor.role == Role.ADMIN:
        return _admin_decision(actor, operation, kind, owner_id)
    if actor.role == Role.MANAGER:
        return _manager_decision(actor, operation, kind, owner_id, managed_ids)
    return _employee_decision(actor, operation, kind, owner_id)


def resolve_create_target(actor: ActorContext, kind: RequestKind, target_user_id: uuid.UUID | None) -> uuid.UUID:
    """Work out who will own a new request.

    Admins must name a target; everyone else defaults to themselves.
    """
    if target_user_id is not None:
        return target_user_id
    if actor.role == Role.ADMIN:
        raise ValidationFailedError("userId is required for admin")
    return actor.user_id


# ---------------------------------------------------------------------------
# List visibility
# ---------------------------------------------------------------------------

STATUS_FILTER_ALL = "all"


@dataclass(frozen=True)
class ListScope:
    """Which requests a list query may return.

    ``owner_ids`` of None means any owner; ``exclude_owner_id`` removes one
    owner from that set; ``status`` of None means any status.
    """

    owner_ids: frozenset[uuid.UUID] | None = None
    exclude_owner_id: uuid.UUID | None = None
    status: RequestStatus | None = None


def list_scope(actor: ActorContext, status_filter: str | None, managed_ids: Set[uuid.UUID]) -> ListScope:
    """Compute list visibility for an actor and an optional status filter."""
    show_all = status_filter is None or status_filter == STATUS_FILTER_ALL

    if actor.role == Role.ADMIN:
        if show_all:
            return ListScope(exclude_owner_id=actor.user_id)
        return ListScope(exclude_owner_id=actor.user_id, status=RequestStatus.SUBMITTED)

    if actor.role == Role.MANAGER:
        if show_all:
            return ListScope(owner_ids=frozenset(managed_ids) | {actor.user_id})
        return ListScope(owner_ids=frozenset(managed_ids), status=RequestStatus.SUBMITTED)

    return ListScope(owner_ids=frozenset({actor.user_id}))

"""Tests for the role/ownership authorization matrix and list scoping."""

from __future__ import annotations

import uuid

import pytest

from approvals.exceptions import ForbiddenError, ValidationFailedError
from approvals.models.enums import Operation, RequestKind, RequestStatus, Role
from approvals.schemas.auth import ActorContext
from approvals.services.authorization import (
    Decision,
    can_perform,
    kind_label,
    list_scope,
    resolve_create_target,
)

EMPLOYEE = ActorContext(user_id=uuid.uuid4(), role=Role.EMPLOYEE)
MANAGER = ActorContext(user_id=uuid.uuid4(), role=Role.MANAGER)
ADMIN = ActorContext(user_id=uuid.uuid4(), role=Role.ADMIN)
MANAGED_ID = uuid.uuid4()
STRANGER_ID = uuid.uuid4()
MANAGED = frozenset({MANAGED_ID})

OWNER_OPERATIONS = [Operation.CREATE, Operation.VIEW, Operation.UPDATE, Operation.DELETE, Operation.SUBMIT]


# ---------------------------------------------------------------------------
# Employee
# ---------------------------------------------------------------------------


@pytest.mark.parametrize("operation", OWNER_OPERATIONS)
def test_employee_may_act_on_own_request(operation: Operation) -> None:
    assert can_perform(EMPLOYEE, operation, RequestKind.TIMESHEET, EMPLOYEE.user_id).allowed


@pytest.mark.parametrize("operation", OWNER_OPERATIONS)
def test_employee_may_not_act_on_others_request(operation: Operation) -> None:
    decision = can_perform(EMPLOYEE, operation, RequestKind.EXPENSE, STRANGER_ID)
    assert not decision.allowed
    assert decision.reason


@pytest.mark.parametrize("operation", [Operation.APPROVE, Operation.REJECT])
def test_employee_never_decides(operation: Operation) -> None:
    decision = can_perform(EMPLOYEE, operation, RequestKind.LEAVE, EMPLOYEE.user_id)
    assert not decision.allowed
    assert decision.reason == f"Only managers and admins can {operation.value} leaves"


def test_employee_create_for_other_reason() -> None:
    decision = can_perform(EMPLOYEE, Operation.CREATE, RequestKind.TIMESHEET, STRANGER_ID)
    assert decision.reason == "Employees can only create their own timesheets"


def test_employee_submit_other_reason() -> None:
    decision = can_perform(EMPLOYEE, Operation.SUBMIT, RequestKind.LEAVE, STRANGER_ID)
    assert decision.reason == "Unauthorized to submit this leave"


# ---------------------------------------------------------------------------
# Manager
# ---------------------------------------------------------------------------


@pytest.mark.parametrize("owner_id", [MANAGER.user_id, MANAGED_ID])
@pytest.mark.parametrize("operation", OWNER_OPERATIONS)
def test_manager_may_act_for_self_and_team(operation: Operation, owner_id: uuid.UUID) -> None:
    assert can_perform(MANAGER, operation, RequestKind.TIMESHEET, owner_id, MANAGED).allowed


def test_manager_may_not_create_for_stranger() -> None:
    decision = can_perform(MANAGER, Operation.CREATE, RequestKind.LEAVE, STRANGER_ID, MANAGED)
    assert not decision.allowed
    assert decision.reason == "Manager can create leaves only for self or managed employees"


@pytest.mark.parametrize("operation", [Operation.UPDATE, Operation.DELETE])
def test_manager_may_not_edit_stranger_request(operation: Operation) -> None:
    decision = can_perform(MANAGER, operation, RequestKind.EXPENSE, STRANGER_ID, MANAGED)
    assert not decision.allowed
    assert decision.reason == f"Manager can only {operation.value} their own or team expenses"


@pytest.mark.parametrize("operation", [Operation.APPROVE, Operation.REJECT])
def test_manager_may_decide_on_unmanaged_request(operation: Operation) -> None:
    assert can_perform(MANAGER, operation, RequestKind.TIMESHEET, STRANGER_ID, MANAGED).allowed


# ---------------------------------------------------------------------------
# Admin
# ---------------------------------------------------------------------------


def test_admin_may_not_create_for_self() -> None:
    decision = can_perform(ADMIN, Operation.CREATE, RequestKind.TIMESHEET, ADMIN.user_id)
    assert not decision.allowed
    assert decision.reason == "Admin cannot create timesheets for themselves"


@pytest.mark.parametrize("operation", [Operation.UPDATE, Operation.DELETE])
def test_admin_may_not_edit_own_request(operation: Operation) -> None:
    decision = can_perform(ADMIN, operation, RequestKind.LEAVE, ADMIN.user_id)
    assert decision.reason == f"Admin cannot {operation.value} their own leaves"


@pytest.mark.parametrize("operation", list(Operation))
def test_admin_may_act_on_anyone_else(operation: Operation) -> None:
    assert can_perform(ADMIN, operation, RequestKind.EXPENSE, STRANGER_ID).allowed


@pytest.mark.parametrize("operation", [Operation.SUBMIT, Operation.APPROVE, Operation.REJECT])
def test_admin_may_submit_and_decide_own(operation: Operation) -> None:
    assert can_perform(ADMIN, operation, RequestKind.EXPENSE, ADMIN.user_id).allowed


# ---------------------------------------------------------------------------
# Decision / create target / labels
# ---------------------------------------------------------------------------


def test_denied_decision_raises_forbidden() -> None:
    with pytest.raises(ForbiddenError, match="nope"):
        Decision(allowed=False, reason="nope").raise_for_denial()


def test_allowed_decision_does_not_raise() -> None:
    Decision(allowed=True).raise_for_denial()


def test_create_target_defaults_to_actor() -> None:
    assert resolve_create_target(EMPLOYEE, RequestKind.LEAVE, None) == EMPLOYEE.user_id
    assert resolve_create_target(MANAGER, RequestKind.LEAVE, None) == MANAGER.user_id


def test_create_target_uses_explicit_user() -> None:
    assert resolve_create_target(MANAGER, RequestKind.LEAVE, MANAGED_ID) == MANAGED_ID


def test_admin_create_requires_target() -> None:
    with pytest.raises(ValidationFailedError, match="userId is required for admin"):
        resolve_create_target(ADMIN, RequestKind.TIMESHEET, None)


def test_kind_label() -> None:
    assert kind_label(RequestKind.TIMESHEET) == "timesheets"
    assert kind_label(RequestKind.EXPENSE) == "expenses"
    assert kind_label(RequestKind.LEAVE) == "leaves"


# ---------------------------------------------------------------------------
# list_scope
# ---------------------------------------------------------------------------


@pytest.mark.parametrize("status_filter", [None, "all", "submitted"])
def test_employee_scope_is_own(status_filter: str | None) -> None:
    scope = list_scope(EMPLOYEE, status_filter, frozenset())
    assert scope.owner_ids == {EMPLOYEE.user_id}
    assert scope.status is None


@pytest.mark.parametrize("status_filter", [None, "all"])
def test_manager_scope_all(status_filter: str | None) -> None:
    scope = list_scope(MANAGER, status_filter, MANAGED)
    assert scope.owner_ids == {MANAGER.user_id, MANAGED_ID}
    assert scope.status is None


def test_manager_scope_filtered_is_team_submitted() -> None:
    scope = list_scope(MANAGER, "submitted", MANAGED)
    assert scope.owner_ids == MANAGED
    assert scope.status == RequestStatus.SUBMITTED


@pytest.mark.parametrize("status_filter", [None, "all"])
def test_admin_scope_all_excludes_self(status_filter: str | None) -> None:
    scope = list_scope(ADMIN, status_filter, frozenset())
    assert scope.owner_ids is None
    assert scope.exclude_owner_id == ADMIN.user_id
    assert scope.status is None


def test_admin_scope_filtered_is_submitted() -> None:
    scope = list_scope(ADMIN, "pending-review", frozenset())
    assert scope.exclude_owner_id == ADMIN.user_id
    assert scope.status == RequestStatus.SUBMITTED

# ruff: noqa: B008, TC001, TC003
from __future__ import annotations

import uuid

from fastapi import APIRouter, Query, status

from approvals.api.deps import AdminDep
from approvals.db import SessionDep
from approvals.schemas.balance import (
    BalanceListResponse,
    BalanceResponse,
    InitializeAllBalancesRequest,
    InitializeAllBalancesResponse,
    InitializeBalancesRequest,
    SetBalanceRequest,
    UserBalanceInitializationResult,
)
from approvals.schemas.leave_type import (
    CreateLeaveTypeRequest,
    LeaveTypeListResponse,
    LeaveTypeResponse,
    UpdateLeaveTypeRequest,
)
from approvals.services import ledger
from approvals.services import leave_type as leave_type_service

admin_leave_types_router = APIRouter(prefix="/admin/leave-types", tags=["admin"])
admin_balances_router = APIRouter(prefix="/admin/leave-balances", tags=["admin"])


# ---------------------------------------------------------------------------
# Leave type catalog
# ---------------------------------------------------------------------------


@admin_leave_types_router.get("", response_model=LeaveTypeListResponse)
async def list_leave_types(session: SessionDep, auth: AdminDep) -> LeaveTypeListResponse:
    """List every leave type, active or not."""
    return await leave_type_service.list_leave_types(session)


@admin_leave_types_router.post("", response_model=LeaveTypeResponse, status_code=status.HTTP_201_CREATED)
async def create_leave_type(
    payload: CreateLeaveTypeRequest,
    session: SessionDep,
    auth: AdminDep,
) -> LeaveTypeResponse:
    """Add a leave type to the catalog."""
    return await leave_type_service.create_leave_type(session, auth, payload)


@admin_leave_types_router.patch("/{leave_type_id}", response_model=LeaveTypeResponse)
async def update_leave_type(
    leave_type_id: uuid.UUID,
    payload: UpdateLeaveTypeRequest,
    session: SessionDep,
    auth: AdminDep,
) -> LeaveTypeResponse:
    """Update a leave type."""
    return await leave_type_service.update_leave_type(session, auth, leave_type_id, payload)


# ---------------------------------------------------------------------------
# Balance ledger
# ---------------------------------------------------------------------------


@admin_balances_router.get("", response_model=BalanceListResponse)
async def list_balances(
    session: SessionDep,
    auth: AdminDep,
    user_id: uuid.UUID | None = Query(default=None),
    year: int | None = Query(default=None, ge=1970, le=9999),
) -> BalanceListResponse:
    """List balances, optionally for one user and year."""
    return await ledger.list_balances(session, user_id, year)


@admin_balances_router.put("", response_model=BalanceResponse)
async def set_balance(
    payload: SetBalanceRequest,
    session: SessionDep,
    auth: AdminDep,
) -> BalanceResponse:
    """Override a balance with an absolute value."""
    return await ledger.set_balance(session, auth, payload)


@admin_balances_router.post("/initialize", response_model=UserBalanceInitializationResult)
async def initialize_user(
    payload: InitializeBalancesRequest,
    session: SessionDep,
    auth: AdminDep,
) -> UserBalanceInitializationResult:
    """Seed default balances for one user."""
    return await ledger.initialize_user_balances(session, payload.user_id, payload.year)


@admin_balances_router.post("/initialize-all", response_model=InitializeAllBalancesResponse)
async def initialize_all(
    session: SessionDep,
    auth: AdminDep,
    payload: InitializeAllBalancesRequest | None = None,
) -> InitializeAllBalancesResponse:
    """Seed default balances for every active user."""
    year = payload.year if payload is not None else None
    return await ledger.initialize_all_users_balances(session, year)

# ruff: noqa: TC001, TC003
from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import BaseModel, Field

from approvals.models.enums import InitializationStatus

# ---------------------------------------------------------------------------
# Balance response schemas
# ---------------------------------------------------------------------------


class BalanceResponse(BaseModel):
    """A single ledger row with its leave type metadata."""

    user_id: uuid.UUID
    leave_type_id: uuid.UUID
    leave_type_code: str
    leave_type_name: str
    max_days: int
    year: int
    balance: int
    updated_at: datetime | None


class BalanceListResponse(BaseModel):
    """Ledger rows matching a query."""

    items: list[BalanceResponse]
    total: int


# ---------------------------------------------------------------------------
# Admin write schemas
# ---------------------------------------------------------------------------


class SetBalanceRequest(BaseModel):
    """Request body for overriding a balance (admin only)."""

    user_id: uuid.UUID
    leave_type_id: uuid.UUID
    balance: int = Field(description="Absolute number of days; may be negative")
    year: int | None = Field(default=None, ge=1970, le=9999)


class InitializeBalancesRequest(BaseModel):
    """Request body for seeding default balances for one user."""

    user_id: uuid.UUID
    year: int | None = Field(default=None, ge=1970, le=9999)


class InitializeAllBalancesRequest(BaseModel):
    """Request body for seeding default balances for every active user."""

    year: int | None = Field(default=None, ge=1970, le=9999)


# ---------------------------------------------------------------------------
# Initialization results
# ---------------------------------------------------------------------------


class BalanceInitializationResult(BaseModel):
    """Outcome of seeding one leave type for one user."""

    leave_type: str
    balance: int
    status: InitializationStatus
    error: str | None = None


class UserBalanceInitializationResult(BaseModel):
    """Outcome of seeding every default leave type for one user."""

    user_id: uuid.UUID
    user_name: str
    year: int
    balances: list[BalanceInitializationResult]

    @property
    def created(self) -> int:
        return sum(1 for b in self.balances if b.status == InitializationStatus.CREATED)

    @property
    def already_existing(self) -> int:
        return sum(1 for b in self.balances if b.status == InitializationStatus.ALREADY_EXISTS)


class InitializeAllBalancesResponse(BaseModel):
    """Summary of a bulk initialization run."""

    year: int
    total_users: int
    total_created: int
    total_existing: int
    details: list[UserBalanceInitializationResult]

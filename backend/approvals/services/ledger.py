# ruff: noqa: TC003
from __future__ import annotations

import logging
import uuid
from datetime import date
from typing import TYPE_CHECKING, Any

from sqlalchemy import select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import col

from approvals.exceptions import NotFoundError
from approvals.models.balance import LeaveBalance
from approvals.models.base import now_utc
from approvals.models.enums import AuditAction, AuditEntityType, InitializationStatus
from approvals.models.leave_type import LeaveType
from approvals.schemas.balance import (
    BalanceInitializationResult,
    BalanceListResponse,
    BalanceResponse,
    InitializeAllBalancesResponse,
    UserBalanceInitializationResult,
)
from approvals.services.audit import balance_snapshot, record_audit
from approvals.services.directory import get_user_directory

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from approvals.schemas.auth import ActorContext
    from approvals.schemas.balance import SetBalanceRequest

logger = logging.getLogger(__name__)

# Default yearly allowance keyed by lower-cased leave type code.
_DEFAULT_BALANCES: dict[str, int] = {
    "annual": 20,
    "al": 20,
    "sick": 12,
    "sl": 12,
    "medical": 15,
    "ml": 15,
    "casual": 7,
    "cl": 7,
    "maternity": 180,
    "mat": 180,
    "paternity": 14,
    "pat": 14,
}
_FALLBACK_DEFAULT_BALANCE = 10


def current_year() -> int:
    return date.today().year


def default_balance_for(leave_type: LeaveType) -> int:
    """Starting balance for a leave type: its max_days when set, else a per-code default."""
    if leave_type.max_days > 0:
        return leave_type.max_days
    return _DEFAULT_BALANCES.get(leave_type.code.lower(), _FALLBACK_DEFAULT_BALANCE)


def _insert(session: AsyncSession) -> Any:
    """Dialect-specific INSERT construct supporting ON CONFLICT."""
    if session.get_bind().dialect.name == "sqlite":
        return sqlite.insert(LeaveBalance)
    return postgresql.insert(LeaveBalance)


_BALANCE_KEY = ["user_id", "leave_type_id", "year"]


# ---------------------------------------------------------------------------
# Reads
# ---------------------------------------------------------------------------


async def check_balance(
    session: AsyncSession,
    user_id: uuid.UUID,
    leave_type_id: uuid.UUID,
    year: int | None = None,
) -> int:
    """Current balance in days, 0 when the user has no ledger row."""
    result = await session.execute(
        select(col(LeaveBalance.balance)).where(
            col(LeaveBalance.user_id) == user_id,
            col(LeaveBalance.leave_type_id) == leave_type_id,
            col(LeaveBalance.year) == (year or current_year()),
        )
    )
    balance = result.scalar_one_or_none()
    return balance if balance is not None else 0


async def list_balances(
    session: AsyncSession,
    user_id: uuid.UUID | None = None,
    year: int | None = None,
) -> BalanceListResponse:
    """List ledger rows with their leave type, optionally narrowed to a user and year."""
    query = select(LeaveBalance, LeaveType).join(LeaveType, col(LeaveType.id) == col(LeaveBalance.leave_type_id))
    if user_id is not None:
        query = query.where(col(LeaveBalance.user_id) == user_id)
    if year is not None:
        query = query.where(col(LeaveBalance.year) == year)
    query = query.order_by(col(LeaveBalance.user_id), col(LeaveBalance.year), col(LeaveType.code))

    result = await session.execute(query)
    items = [
        BalanceResponse(
            user_id=row.user_id,
            leave_type_id=row.leave_type_id,
            leave_type_code=leave_type.code,
            leave_type_name=leave_type.name,
            max_days=leave_type.max_days,
            year=row.year,
            balance=row.balance,
            updated_at=row.updated_at,
        )
        for row, leave_type in result.all()
    ]
    return BalanceListResponse(items=items, total=len(items))


# ---------------------------------------------------------------------------
# Writes
# ---------------------------------------------------------------------------


async def adjust_balance(
    session: AsyncSession,
    user_id: uuid.UUID,
    leave_type_id: uuid.UUID,
    delta: int,
    year: int | None = None,
) -> int:
    """Add ``delta`` (negative to debit) to a balance in one atomic statement.

    A missing row is created with ``balance = delta``. The caller commits.
    """
    stmt = _insert(session).values(
        user_id=user_id,
        leave_type_id=leave_type_id,
        year=year or current_year(),
        balance=delta,
        updated_at=now_utc(),
    )
    stmt = stmt.on_conflict_do_update(
        index_elements=_BALANCE_KEY,
        set_={
            "balance": col(LeaveBalance.balance) + stmt.excluded.balance,
            "updated_at": stmt.excluded.updated_at,
        },
    ).returning(col(LeaveBalance.balance))
    result = await session.execute(stmt)
    return result.scalar_one()


async def _upsert_absolute(
    session: AsyncSession, user_id: uuid.UUID, leave_type_id: uuid.UUID, balance: int, year: int
) -> int:
    stmt = _insert(session).values(
        user_id=user_id,
        leave_type_id=leave_type_id,
        year=year,
        balance=balance,
        updated_at=now_utc(),
    )
    stmt = stmt.on_conflict_do_update(
        index_elements=_BALANCE_KEY,
        set_={"balance": stmt.excluded.balance, "updated_at": stmt.excluded.updated_at},
    ).returning(col(LeaveBalance.balance))
    result = await session.execute(stmt)
    return result.scalar_one()


async def _get_leave_type_or_404(session: AsyncSession, leave_type_id: uuid.UUID) -> LeaveType:
    leave_type = await session.get(LeaveType, leave_type_id)
    if leave_type is None:
        raise NotFoundError("Leave type not found")
    return leave_type


async def set_balance(
    session: AsyncSession,
    actor: ActorContext,
    payload: SetBalanceRequest,
) -> BalanceResponse:
    """Admin override: set a balance to an absolute value."""
    leave_type = await _get_leave_type_or_404(session, payload.leave_type_id)
    year = payload.year or current_year()
    before = await check_balance(session, payload.user_id, payload.leave_type_id, year)

    balance = await _upsert_absolute(session, payload.user_id, payload.leave_type_id, payload.balance, year)

    await record_audit(
        session,
        actor=actor,
        entity_type=AuditEntityType.LEAVE_BALANCE,
        entity_id=payload.user_id,
        action=AuditAction.UPDATE,
        before_json=balance_snapshot(leave_type.id, year, before),
        after_json=balance_snapshot(leave_type.id, year, balance),
    )
    await session.commit()
    logger.info("Balance of %s for %s/%d set to %d by %s", payload.user_id, leave_type.code, year, balance, actor.user_id)

    return BalanceResponse(
        user_id=payload.user_id,
        leave_type_id=leave_type.id,
        leave_type_code=leave_type.code,
        leave_type_name=leave_type.name,
        max_days=leave_type.max_days,
        year=year,
        balance=balance,
        updated_at=now_utc(),
    )


# ---------------------------------------------------------------------------
# Default balance initialization
# ---------------------------------------------------------------------------


async def _default_leave_types(session: AsyncSession) -> list[LeaveType]:
    result = await session.execute(
        select(LeaveType)
        .where(col(LeaveType.is_active).is_(True), col(LeaveType.has_default_balance).is_(True))
        .order_by(col(LeaveType.code))
    )
    return list(result.scalars().all())


async def _initialize_one(
    session: AsyncSession, user_id: uuid.UUID, leave_type: LeaveType, year: int
) -> BalanceInitializationResult:
    """Insert the default row if absent; each type commits on its own."""
    default = default_balance_for(leave_type)
    stmt = (
        _insert(session)
        .values(user_id=user_id, leave_type_id=leave_type.id, year=year, balance=default, updated_at=now_utc())
        .on_conflict_do_nothing(index_elements=_BALANCE_KEY)
        .returning(col(LeaveBalance.balance))
    )
    try:
        result = await session.execute(stmt)
        inserted = result.scalar_one_or_none()
        await session.commit()
    except SQLAlchemyError as exc:
        await session.rollback()
        logger.exception("Failed to initialize %s balance for %s", leave_type.code, user_id)
        return BalanceInitializationResult(
            leave_type=leave_type.code, balance=0, status=InitializationStatus.ERROR, error=str(exc)
        )

    if inserted is None:
        existing = await check_balance(session, user_id, leave_type.id, year)
        return BalanceInitializationResult(
            leave_type=leave_type.code, balance=existing, status=InitializationStatus.ALREADY_EXISTS
        )
    return BalanceInitializationResult(leave_type=leave_type.code, balance=inserted, status=InitializationStatus.CREATED)


async def _initialize_for(
    session: AsyncSession,
    user_id: uuid.UUID,
    user_name: str,
    leave_types: list[LeaveType],
    year: int,
) -> UserBalanceInitializationResult:
    balances = [await _initialize_one(session, user_id, lt, year) for lt in leave_types]
    return UserBalanceInitializationResult(user_id=user_id, user_name=user_name, year=year, balances=balances)


async def initialize_user_balances(
    session: AsyncSession,
    user_id: uuid.UUID,
    year: int | None = None,
) -> UserBalanceInitializationResult:
    """Seed default balances for one user. Idempotent."""
    user = await get_user_directory().get_user(user_id)
    if user is None:
        raise NotFoundError("User not found")

    year = year or current_year()
    leave_types = await _default_leave_types(session)
    # Detached copies survive a rollback in _initialize_one.
    leave_types = [LeaveType.model_validate(lt.model_dump()) for lt in leave_types]
    outcome = await _initialize_for(session, user.id, user.name, leave_types, year)
    logger.info("Initialized balances for %s (%d): %d created", user.id, year, outcome.created)
    return outcome


async def initialize_all_users_balances(
    session: AsyncSession,
    year: int | None = None,
) -> InitializeAllBalancesResponse:
    """Seed default balances for every active user. Idempotent."""
    year = year or current_year()
    users = await get_user_directory().list_active_users()
    leave_types = [LeaveType.model_validate(lt.model_dump()) for lt in await _default_leave_types(session)]

    details = [await _initialize_for(session, user.id, user.name, leave_types, year) for user in users]
    response = InitializeAllBalancesResponse(
        year=year,
        total_users=len(users),
        total_created=sum(d.created for d in details),
        total_existing=sum(d.already_existing for d in details),
        details=details,
    )
    logger.info(
        "Initialized balances for %d users (%d): %d created, %d existing",
        response.total_users,
        year,
        response.total_created,
        response.total_existing,
    )
    return response

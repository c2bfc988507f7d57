"""Tests for the working-day calculator (weekends + holiday calendar)."""

from __future__ import annotations

from datetime import date
from typing import TYPE_CHECKING

from approvals.models.holiday import Holiday
from approvals.services.calendar import count_working_days, get_working_days, holiday_dates_in_range

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession


def _holiday(dt: date, *, recurring: bool, name: str = "Holiday") -> Holiday:
    return Holiday(date=dt, name=name, is_recurring=recurring)


# ---------------------------------------------------------------------------
# count_working_days
# ---------------------------------------------------------------------------


def test_weekdays_only() -> None:
    # Mon 2025-12-01 .. Wed 2025-12-03
    assert count_working_days(date(2025, 12, 1), date(2025, 12, 3), set()) == 3


def test_weekend_counts_zero() -> None:
    assert count_working_days(date(2025, 12, 6), date(2025, 12, 7), set()) == 0


def test_full_week_counts_five() -> None:
    assert count_working_days(date(2025, 12, 1), date(2025, 12, 7), set()) == 5


def test_single_day() -> None:
    assert count_working_days(date(2025, 12, 1), date(2025, 12, 1), set()) == 1


def test_holiday_on_weekday_is_excluded() -> None:
    assert count_working_days(date(2025, 12, 1), date(2025, 12, 3), {date(2025, 12, 2)}) == 2


def test_holiday_on_weekend_changes_nothing() -> None:
    assert count_working_days(date(2025, 12, 1), date(2025, 12, 7), {date(2025, 12, 6)}) == 5


def test_reversed_range_counts_zero() -> None:
    assert count_working_days(date(2025, 12, 3), date(2025, 12, 1), set()) == 0


# ---------------------------------------------------------------------------
# holiday_dates_in_range
# ---------------------------------------------------------------------------


def test_one_off_holiday_in_range() -> None:
    holidays = [_holiday(date(2025, 12, 2), recurring=False)]
    assert holiday_dates_in_range(holidays, date(2025, 12, 1), date(2025, 12, 3)) == {date(2025, 12, 2)}


def test_one_off_holiday_out_of_range() -> None:
    holidays = [_holiday(date(2024, 12, 2), recurring=False)]
    assert holiday_dates_in_range(holidays, date(2025, 12, 1), date(2025, 12, 3)) == set()


def test_recurring_holiday_expands_per_year() -> None:
    holidays = [_holiday(date(2020, 12, 25), recurring=True, name="Christmas")]
    dates = holiday_dates_in_range(holidays, date(2025, 12, 1), date(2027, 1, 31))
    assert dates == {date(2025, 12, 25), date(2026, 12, 25)}


def test_recurring_feb_29_skipped_in_non_leap_year() -> None:
    holidays = [_holiday(date(2024, 2, 29), recurring=True, name="Leap Day")]
    dates = holiday_dates_in_range(holidays, date(2027, 1, 1), date(2028, 12, 31))
    assert dates == {date(2028, 2, 29)}


def test_recurring_christmas_excluded_once_per_year() -> None:
    holidays = [_holiday(date(2000, 12, 25), recurring=True)]
    start, end = date(2025, 12, 22), date(2026, 12, 31)
    without = count_working_days(start, end, set())
    with_holidays = count_working_days(start, end, holiday_dates_in_range(holidays, start, end))
    # 2025-12-25 is a Thursday and 2026-12-25 a Friday.
    assert without - with_holidays == 2


# ---------------------------------------------------------------------------
# get_working_days (database-backed)
# ---------------------------------------------------------------------------


async def test_get_working_days_without_holidays(db_session: AsyncSession) -> None:
    assert await get_working_days(db_session, date(2025, 12, 1), date(2025, 12, 3)) == 3


async def test_get_working_days_uses_stored_holidays(db_session: AsyncSession) -> None:
    db_session.add(_holiday(date(2025, 12, 2), recurring=False, name="Company day"))
    db_session.add(_holiday(date(1999, 12, 3), recurring=True, name="Founders day"))
    await db_session.commit()

    assert await get_working_days(db_session, date(2025, 12, 1), date(2025, 12, 5)) == 3


async def test_get_working_days_ignores_one_off_outside_range(db_session: AsyncSession) -> None:
    db_session.add(_holiday(date(2024, 12, 2), recurring=False))
    await db_session.commit()

    assert await get_working_days(db_session, date(2025, 12, 1), date(2025, 12, 5)) == 5

from __future__ import annotations

import calendar
from datetime import date, timedelta
from typing import TYPE_CHECKING

from sqlalchemy import or_, select
from sqlmodel import col

from approvals.models.holiday import Holiday

if TYPE_CHECKING:
    from collections.abc import Iterable

    from sqlalchemy.ext.asyncio import AsyncSession

# Monday=0 .. Friday=4
_LAST_WEEKDAY = 4


def holiday_dates_in_range(holidays: Iterable[Holiday], start_date: date, end_date: date) -> set[date]:
    """Expand holidays into the concrete dates they cover within [start_date, end_date].

    A recurring holiday contributes its month/day in every year of the range.
    A Feb 29 recurring holiday is skipped in non-leap years.
    """
    dates: set[date] = set()
    for holiday in holidays:
        if not holiday.is_recurring:
            if start_date <= holiday.date <= end_date:
                dates.add(holiday.date)
            continue

        for year in range(start_date.year, end_date.year + 1):
            if holiday.date.month == 2 and holiday.date.day == 29 and not calendar.isleap(year):
                continue
            occurrence = holiday.date.replace(year=year)
            if start_date <= occurrence <= end_date:
                dates.add(occurrence)
    return dates


def count_working_days(start_date: date, end_date: date, holidays: set[date]) -> int:
    """Count Monday-Friday dates in the inclusive range that are not holidays."""
    if start_date > end_date:
        return 0

    count = 0
    current = start_date
    while current <= end_date:
        if current.weekday() <= _LAST_WEEKDAY and current not in holidays:
            count += 1
        current += timedelta(days=1)
    return count


async def _fetch_holidays(session: AsyncSession, start_date: date, end_date: date) -> list[Holiday]:
    """Fetch one-off holidays inside the range plus every recurring holiday."""
    result = await session.execute(
        select(Holiday).where(
            or_(
                col(Holiday.is_recurring).is_(True),
                (col(Holiday.date) >= start_date) & (col(Holiday.date) <= end_date),
            )
        )
    )
    return list(result.scalars().all())


async def get_working_days(session: AsyncSession, start_date: date, end_date: date) -> int:
    """Number of working days between two dates, inclusive, excluding weekends and holidays."""
    if start_date > end_date:
        return 0
    holidays = await _fetch_holidays(session, start_date, end_date)
    return count_working_days(start_date, end_date, holiday_dates_in_range(holidays, start_date, end_date))

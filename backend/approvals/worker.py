"""Worker process for the scheduled balance initialization job.

Runs an asyncio loop that seeds default leave balances for every active
user once per ``balance_init_interval_seconds``.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from approvals.config import configure_logging, get_settings
from approvals.db import get_session_factory
from approvals.services.ledger import current_year, initialize_all_users_balances

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

    from approvals.schemas.balance import InitializeAllBalancesResponse

logger = logging.getLogger(__name__)


async def run_balance_initialization(
    session_factory: async_sessionmaker[AsyncSession],
    year: int | None = None,
) -> InitializeAllBalancesResponse:
    """Run one initialization pass. Idempotent: existing balances are left alone."""
    year = year or current_year()
    async with session_factory() as session:
        result = await initialize_all_users_balances(session, year)
    logger.info(
        "Balance initialization complete for %d: users=%d created=%d existing=%d",
        year,
        result.total_users,
        result.total_created,
        result.total_existing,
    )
    return result


async def run_balance_init_loop() -> None:
    """Main worker loop."""
    interval = get_settings().balance_init_interval_seconds
    logger.info("Balance worker started (interval=%ds)", interval)
    session_factory = get_session_factory()

    while True:
        try:
            await run_balance_initialization(session_factory)
        except Exception:
            logger.exception("Balance initialization run failed")

        await asyncio.sleep(interval)


def main() -> None:
    """Entry point for the worker process."""
    configure_logging(get_settings())
    asyncio.run(run_balance_init_loop())


if __name__ == "__main__":
    main()

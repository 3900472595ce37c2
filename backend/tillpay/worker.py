"""Worker process for scheduled daily jobs.

Runs an asyncio loop that applies the cash-float daily reset and warms the
holiday cache for the current and next year.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import date

from tillpay.config import get_settings
from tillpay.db import get_session_factory
from tillpay.services.cash_float import check_daily_reset
from tillpay.services.holiday_calendar import get_holiday_calendar
from tillpay.services.time_log import business_today

logger = logging.getLogger(__name__)


async def run_daily_jobs(today: date | None = None) -> None:
    """One pass of the daily jobs. Each job's failure is logged and does not stop the others."""
    today = today or business_today()
    session_factory = get_session_factory()

    try:
        async with session_factory() as session:
            reset = await check_daily_reset(session, today)
        if reset:
            logger.info("Cash float daily reset applied for %s", today)
    except Exception:
        logger.exception("Cash float daily reset failed for %s", today)

    calendar = get_holiday_calendar()
    for year in (today.year, today.year + 1):
        try:
            holidays = await calendar.resolve(year)
            logger.info("Holiday calendar ready for %d: %d holidays", year, len(holidays))
        except Exception:
            logger.exception("Holiday calendar warm-up failed for %d", year)


async def run_worker_loop() -> None:
    """Main worker loop."""
    interval = get_settings().worker_interval_seconds
    logger.info("Daily worker started (interval=%ds)", interval)

    while True:
        await run_daily_jobs()
        await asyncio.sleep(interval)


def main() -> None:
    """Entry point for the worker process."""
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(name)s %(levelname)s %(message)s")
    asyncio.run(run_worker_loop())


if __name__ == "__main__":
    main()

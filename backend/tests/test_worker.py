"""Tests for the daily worker jobs."""

from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal
from typing import TYPE_CHECKING

import pytest
from sqlalchemy.ext.asyncio import async_sessionmaker

from tillpay import worker
from tillpay.services import cash_float as cash_float_service

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession

    from tillpay.services.holiday_calendar import HolidayCalendar


@pytest.fixture
def wired_worker(
    monkeypatch: pytest.MonkeyPatch,
    engine: AsyncEngine,
    holiday_calendar: HolidayCalendar,
) -> HolidayCalendar:
    factory = async_sessionmaker(engine, expire_on_commit=False)
    monkeypatch.setattr(worker, "get_session_factory", lambda: factory)
    monkeypatch.setattr(worker, "get_holiday_calendar", lambda: holiday_calendar)
    return holiday_calendar


async def test_daily_jobs_reset_float_and_warm_calendar(
    wired_worker: HolidayCalendar,
    db_session: AsyncSession,
) -> None:
    await cash_float_service.configure_daily_reset(db_session, True, Decimal("600"))
    await cash_float_service.set_float(db_session, Decimal("2200"))
    await db_session.close()

    await worker.run_daily_jobs(date(2024, 6, 1))

    snapshot = await cash_float_service.get_cash_float(db_session)
    assert snapshot.current_amount == Decimal("600.00")
    assert snapshot.last_reset_date == date(2024, 6, 1)
    assert snapshot.audit_trail[-1].metadata["trigger"] == "scheduled"

    assert await wired_worker.holiday_on(date(2025, 1, 1)) is not None


async def test_daily_jobs_skip_reset_when_disabled(wired_worker: HolidayCalendar, db_session: AsyncSession) -> None:
    await worker.run_daily_jobs(date(2024, 6, 1))

    snapshot = await cash_float_service.get_cash_float(db_session)
    assert snapshot.current_amount == Decimal("1000.00")
    assert snapshot.last_reset_date is None


async def test_daily_jobs_log_reset_failure_and_continue(
    wired_worker: HolidayCalendar,
    monkeypatch: pytest.MonkeyPatch,
    caplog: pytest.LogCaptureFixture,
) -> None:
    async def _broken(*args: object, **kwargs: object) -> bool:
        raise RuntimeError("database down")

    monkeypatch.setattr(worker, "check_daily_reset", _broken)

    with caplog.at_level(logging.INFO, logger="tillpay.worker"):
        await worker.run_daily_jobs(date(2024, 6, 1))

    messages = [r.getMessage() for r in caplog.records if r.name == "tillpay.worker"]
    assert any("daily reset failed" in m for m in messages)
    assert any("Holiday calendar ready for 2025" in m for m in messages)


async def test_daily_jobs_default_to_business_day(
    wired_worker: HolidayCalendar,
    db_session: AsyncSession,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    await cash_float_service.configure_daily_reset(db_session, True, Decimal("700"))
    await db_session.close()
    monkeypatch.setattr(worker, "business_today", lambda: date(2024, 8, 26))

    await worker.run_daily_jobs()

    snapshot = await cash_float_service.get_cash_float(db_session)
    assert snapshot.last_reset_date == date(2024, 8, 26)

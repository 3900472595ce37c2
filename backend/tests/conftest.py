from __future__ import annotations

from typing import TYPE_CHECKING

import httpx
import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.pool import StaticPool

from tillpay.db import get_session
from tillpay.main import app
from tillpay.models import SQLModel
from tillpay.services.holiday_calendar import HolidayCache, HolidayCalendar, get_holiday_calendar
from tillpay.services.staff import InMemoryStaffService, get_staff_service
from tillpay.services.time_log import InMemoryTimeLogService, get_time_log_service

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from sqlalchemy.ext.asyncio import AsyncEngine

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest.fixture
async def engine() -> AsyncIterator[AsyncEngine]:
    """Fresh in-memory database per test, shared across connections."""
    _engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with _engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield _engine
    await _engine.dispose()


@pytest.fixture
async def db_session(engine: AsyncEngine) -> AsyncIterator[AsyncSession]:
    """Yield a database session; services commit, so isolation comes from the per-test engine."""
    session = AsyncSession(engine, expire_on_commit=False)
    yield session
    await session.close()


def _feed_down(request: httpx.Request) -> httpx.Response:
    return httpx.Response(503, json={"error": "unavailable"})


@pytest.fixture
async def holiday_calendar() -> AsyncIterator[HolidayCalendar]:
    """Calendar whose feed always fails, so holidays come from the generator."""
    async with httpx.AsyncClient(transport=httpx.MockTransport(_feed_down)) as client:
        yield HolidayCalendar(client=client, cache=HolidayCache())


@pytest.fixture
def staff_service() -> InMemoryStaffService:
    return InMemoryStaffService()


@pytest.fixture
def time_log_service() -> InMemoryTimeLogService:
    return InMemoryTimeLogService()


@pytest.fixture
async def async_client(
    db_session: AsyncSession,
    holiday_calendar: HolidayCalendar,
    staff_service: InMemoryStaffService,
    time_log_service: InMemoryTimeLogService,
) -> AsyncIterator[AsyncClient]:
    """Async HTTP client with the database session and collaborators overridden."""

    async def _override_get_session() -> AsyncIterator[AsyncSession]:
        yield db_session

    app.dependency_overrides[get_session] = _override_get_session
    app.dependency_overrides[get_holiday_calendar] = lambda: holiday_calendar
    app.dependency_overrides[get_staff_service] = lambda: staff_service
    app.dependency_overrides[get_time_log_service] = lambda: time_log_service
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()

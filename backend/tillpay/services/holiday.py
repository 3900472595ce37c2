from __future__ import annotations

import logging
from datetime import date
from typing import TYPE_CHECKING

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlmodel import col

from tillpay.exceptions import ConflictError, NotFoundError
from tillpay.models.enums import HolidaySource, HolidayType
from tillpay.models.holiday import LocalHoliday
from tillpay.schemas.holiday import (
    Holiday,
    HolidayCalendarResponse,
    LocalHolidayListResponse,
    LocalHolidayResponse,
)
from tillpay.services.compensation import pay_multiplier

if TYPE_CHECKING:
    import uuid

    from sqlalchemy.ext.asyncio import AsyncSession

    from tillpay.schemas.holiday import CreateLocalHolidayRequest
    from tillpay.services.holiday_calendar import HolidayCalendar

logger = logging.getLogger(__name__)


def _build_local_holiday_response(holiday: LocalHoliday) -> LocalHolidayResponse:
    return LocalHolidayResponse(id=holiday.id, date=holiday.date, name=holiday.name)


def _as_holiday(holiday: LocalHoliday) -> Holiday:
    return Holiday(
        date=holiday.date,
        name=holiday.name,
        local_name=holiday.name,
        type=HolidayType.LOCAL,
        pay_multiplier=pay_multiplier(HolidayType.LOCAL),
        source=HolidaySource.CONFIGURED,
    )


async def create_local_holiday(
    session: AsyncSession,
    payload: CreateLocalHolidayRequest,
) -> LocalHolidayResponse:
    """Declare a local holiday."""
    existing = await session.execute(select(LocalHoliday).where(col(LocalHoliday.date) == payload.date))
    if existing.scalar_one_or_none() is not None:
        raise ConflictError("Local holiday already exists for this date")

    holiday = LocalHoliday(date=payload.date, name=payload.name)
    session.add(holiday)

    try:
        await session.flush()
    except IntegrityError:
        await session.rollback()
        raise ConflictError("Local holiday already exists for this date") from None

    await session.commit()
    await session.refresh(holiday)
    logger.info("Declared local holiday %s on %s", holiday.name, holiday.date)
    return _build_local_holiday_response(holiday)


async def list_local_holidays(
    session: AsyncSession,
    year: int | None = None,
    offset: int = 0,
    limit: int = 50,
) -> LocalHolidayListResponse:
    """List local holidays with optional year filter."""
    base_filter = []
    if year is not None:
        base_filter.extend(
            [col(LocalHoliday.date) >= date(year, 1, 1), col(LocalHoliday.date) <= date(year, 12, 31)]
        )

    count_result = await session.execute(select(func.count()).select_from(LocalHoliday).where(*base_filter))
    total = count_result.scalar_one()

    result = await session.execute(
        select(LocalHoliday).where(*base_filter).order_by(col(LocalHoliday.date)).offset(offset).limit(limit)
    )
    holidays = list(result.scalars().all())

    return LocalHolidayListResponse(
        items=[_build_local_holiday_response(h) for h in holidays],
        total=total,
    )


async def delete_local_holiday(session: AsyncSession, holiday_id: uuid.UUID) -> None:
    """Remove a local holiday."""
    result = await session.execute(select(LocalHoliday).where(col(LocalHoliday.id) == holiday_id))
    holiday = result.scalar_one_or_none()
    if holiday is None:
        raise NotFoundError("Local holiday not found")

    await session.delete(holiday)
    await session.commit()


async def holidays_between(
    session: AsyncSession,
    calendar: HolidayCalendar,
    start: date,
    end: date,
) -> list[Holiday]:
    """Public and local holidays between two dates, sorted by date.

    A public holiday wins over a local one declared for the same day.
    """
    public = await calendar.holidays_in_range(start, end)
    taken = {h.date for h in public}

    result = await session.execute(
        select(LocalHoliday).where(col(LocalHoliday.date) >= start, col(LocalHoliday.date) <= end)
    )
    local = [_as_holiday(h) for h in result.scalars().all() if h.date not in taken]

    return sorted([*public, *local], key=lambda h: h.date)


async def get_year_calendar(
    session: AsyncSession,
    calendar: HolidayCalendar,
    year: int,
) -> HolidayCalendarResponse:
    """All holidays that apply in a year."""
    items = await holidays_between(session, calendar, date(year, 1, 1), date(year, 12, 31))
    return HolidayCalendarResponse(year=year, items=items, total=len(items))

# ruff: noqa: B008, TC001, TC003
from __future__ import annotations

import uuid

from fastapi import APIRouter, Path, Query, status

from tillpay.api.deps import HolidayCalendarDep
from tillpay.db import SessionDep
from tillpay.schemas.holiday import (
    CreateLocalHolidayRequest,
    HolidayCalendarResponse,
    LocalHolidayListResponse,
    LocalHolidayResponse,
)
from tillpay.services import holiday as holiday_service

holidays_router = APIRouter(prefix="/holidays", tags=["holidays"])


@holidays_router.post("/local", response_model=LocalHolidayResponse, status_code=status.HTTP_201_CREATED)
async def create_local_holiday(
    payload: CreateLocalHolidayRequest,
    session: SessionDep,
) -> LocalHolidayResponse:
    """Declare a local holiday."""
    return await holiday_service.create_local_holiday(session, payload)


@holidays_router.get("/local", response_model=LocalHolidayListResponse)
async def list_local_holidays(
    session: SessionDep,
    year: int | None = Query(default=None, ge=1900, le=2100),
    offset: int = Query(default=0, ge=0),
    limit: int = Query(default=50, ge=1, le=100),
) -> LocalHolidayListResponse:
    """List local holidays with optional year filter."""
    return await holiday_service.list_local_holidays(session, year, offset, limit)


@holidays_router.delete("/local/{holiday_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_local_holiday(holiday_id: uuid.UUID, session: SessionDep) -> None:
    """Remove a local holiday."""
    await holiday_service.delete_local_holiday(session, holiday_id)


@holidays_router.get("/{year}", response_model=HolidayCalendarResponse)
async def get_year_calendar(
    session: SessionDep,
    calendar: HolidayCalendarDep,
    year: int = Path(ge=1900, le=2100),
) -> HolidayCalendarResponse:
    """Public and local holidays for a year."""
    return await holiday_service.get_year_calendar(session, calendar, year)

# ruff: noqa: B008
from __future__ import annotations

from typing import Annotated, Any

from fastapi import Depends, Header, Request

from tillpay.services.holiday_calendar import HolidayCalendar, get_holiday_calendar
from tillpay.services.staff import StaffService, get_staff_service
from tillpay.services.time_log import TimeLogService, get_time_log_service


async def get_request_metadata(
    request: Request,
    user_agent: str | None = Header(default=None),
) -> dict[str, Any]:
    """Caller details recorded alongside cash-float audit entries."""
    metadata: dict[str, Any] = {}
    if user_agent:
        metadata["user_agent"] = user_agent
    if request.client is not None:
        metadata["ip_address"] = request.client.host
    return metadata


RequestMetadataDep = Annotated[dict[str, Any], Depends(get_request_metadata)]
HolidayCalendarDep = Annotated[HolidayCalendar, Depends(get_holiday_calendar)]
StaffServiceDep = Annotated[StaffService, Depends(get_staff_service)]
TimeLogServiceDep = Annotated[TimeLogService, Depends(get_time_log_service)]

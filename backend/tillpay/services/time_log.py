# ruff: noqa: TC003
from __future__ import annotations

import uuid
from datetime import date, datetime
from decimal import Decimal
from typing import Protocol, runtime_checkable
from zoneinfo import ZoneInfo

from pydantic import BaseModel, Field

from tillpay.config import get_settings


class TimeLogEntry(BaseModel):
    """One clock-in/clock-out shift."""

    id: uuid.UUID = Field(default_factory=uuid.uuid4)
    staff_id: uuid.UUID
    clock_in: datetime
    clock_out: datetime | None = None
    total_hours: Decimal = Field(default=Decimal("0"), ge=0)
    is_overtime: bool = False


def business_today(tz: ZoneInfo | None = None) -> date:
    """Current calendar day in the business timezone."""
    zone = tz or ZoneInfo(get_settings().business_timezone)
    return datetime.now(zone).date()


def local_work_day(moment: datetime, tz: ZoneInfo | None = None) -> date:
    """Calendar day of a timestamp in the business timezone.

    Naive timestamps are taken to already be business-local.
    """
    if moment.tzinfo is None:
        return moment.date()
    zone = tz or ZoneInfo(get_settings().business_timezone)
    return moment.astimezone(zone).date()


@runtime_checkable
class TimeLogService(Protocol):
    """Interface for the attendance log."""

    async def list_entries(self, staff_id: uuid.UUID, start: date, end: date) -> list[TimeLogEntry]:
        """Entries whose local clock-in day falls within [start, end]."""
        ...


class InMemoryTimeLogService:
    """In-memory stub implementation for development."""

    def __init__(self) -> None:
        self._entries: list[TimeLogEntry] = []

    def seed(self, *entries: TimeLogEntry) -> None:
        """Seed time-log entries for testing."""
        self._entries.extend(entries)

    async def list_entries(self, staff_id: uuid.UUID, start: date, end: date) -> list[TimeLogEntry]:
        return sorted(
            (
                e
                for e in self._entries
                if e.staff_id == staff_id and start <= local_work_day(e.clock_in) <= end
            ),
            key=lambda e: e.clock_in,
        )


_time_log_service: TimeLogService = InMemoryTimeLogService()


def get_time_log_service() -> TimeLogService:
    """FastAPI dependency for the attendance log."""
    return _time_log_service


def set_time_log_service(service: TimeLogService) -> None:
    """Override the service (for testing or production wiring)."""
    global _time_log_service
    _time_log_service = service

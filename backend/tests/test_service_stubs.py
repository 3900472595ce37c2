"""Tests for the staff directory and attendance log service stubs."""

from __future__ import annotations

import uuid
from datetime import UTC, date, datetime
from decimal import Decimal
from zoneinfo import ZoneInfo

from tillpay.models.enums import StaffStatus
from tillpay.services.staff import (
    InMemoryStaffService,
    StaffProfile,
    StaffService,
    get_staff_service,
    set_staff_service,
)
from tillpay.services.time_log import (
    InMemoryTimeLogService,
    TimeLogEntry,
    TimeLogService,
    business_today,
    get_time_log_service,
    local_work_day,
    set_time_log_service,
)

SCHEDULE_ID = uuid.uuid4()


def _make_staff(name: str = "Jose", schedule_id: uuid.UUID | None = None) -> StaffProfile:
    return StaffProfile(
        id=uuid.uuid4(),
        name=name,
        position="Server",
        daily_rate=Decimal("610"),
        payroll_schedule_id=schedule_id,
    )


# ---------------------------------------------------------------------------
# InMemoryStaffService tests
# ---------------------------------------------------------------------------


async def test_staff_service_get_not_found() -> None:
    svc = InMemoryStaffService()
    assert await svc.get_staff(uuid.uuid4()) is None


async def test_staff_service_seed_and_get() -> None:
    svc = InMemoryStaffService()
    staff = _make_staff()
    svc.seed(staff)

    result = await svc.get_staff(staff.id)
    assert result is not None
    assert result.name == "Jose"
    assert result.status == StaffStatus.ACTIVE
    assert result.scheduled_hours_per_day == 8


async def test_staff_service_filters_by_schedule() -> None:
    svc = InMemoryStaffService()
    svc.seed(_make_staff("Alice", SCHEDULE_ID))
    svc.seed(_make_staff("Bob", SCHEDULE_ID))
    svc.seed(_make_staff("Carol"))

    assert len(await svc.list_staff()) == 3
    assert {s.name for s in await svc.list_by_schedule(SCHEDULE_ID)} == {"Alice", "Bob"}
    assert await svc.count_by_schedule(SCHEDULE_ID) == 2
    assert await svc.count_by_schedule(uuid.uuid4()) == 0


def test_staff_service_satisfies_protocol() -> None:
    assert isinstance(InMemoryStaffService(), StaffService)


def test_set_staff_service_overrides_dependency() -> None:
    original = get_staff_service()
    replacement = InMemoryStaffService()
    set_staff_service(replacement)
    try:
        assert get_staff_service() is replacement
    finally:
        set_staff_service(original)


# ---------------------------------------------------------------------------
# InMemoryTimeLogService tests
# ---------------------------------------------------------------------------


async def test_time_log_service_filters_by_staff_and_range() -> None:
    svc = InMemoryTimeLogService()
    staff_id = uuid.uuid4()
    svc.seed(
        TimeLogEntry(staff_id=staff_id, clock_in=datetime(2024, 1, 5, 8), total_hours=Decimal("8")),
        TimeLogEntry(staff_id=staff_id, clock_in=datetime(2024, 1, 2, 8), total_hours=Decimal("8")),
        TimeLogEntry(staff_id=staff_id, clock_in=datetime(2024, 2, 1, 8), total_hours=Decimal("8")),
        TimeLogEntry(staff_id=uuid.uuid4(), clock_in=datetime(2024, 1, 3, 8), total_hours=Decimal("8")),
    )

    entries = await svc.list_entries(staff_id, date(2024, 1, 1), date(2024, 1, 31))
    assert [e.clock_in.day for e in entries] == [2, 5]


def test_time_log_service_satisfies_protocol() -> None:
    assert isinstance(InMemoryTimeLogService(), TimeLogService)


def test_set_time_log_service_overrides_dependency() -> None:
    original = get_time_log_service()
    replacement = InMemoryTimeLogService()
    set_time_log_service(replacement)
    try:
        assert get_time_log_service() is replacement
    finally:
        set_time_log_service(original)


def test_local_work_day_converts_aware_timestamps() -> None:
    # 20:00 UTC on Jan 1 is 04:00 on Jan 2 in Manila.
    moment = datetime(2024, 1, 1, 20, 0, tzinfo=UTC)
    assert local_work_day(moment) == date(2024, 1, 2)
    assert local_work_day(moment, ZoneInfo("UTC")) == date(2024, 1, 1)


def test_local_work_day_keeps_naive_timestamps() -> None:
    assert local_work_day(datetime(2024, 1, 1, 23, 30)) == date(2024, 1, 1)


def test_business_today_uses_business_timezone() -> None:
    manila = datetime.now(ZoneInfo("Asia/Manila")).date()
    kiritimati = datetime.now(ZoneInfo("Pacific/Kiritimati")).date()
    assert business_today() == manila
    assert business_today(ZoneInfo("Pacific/Kiritimati")) == kiritimati

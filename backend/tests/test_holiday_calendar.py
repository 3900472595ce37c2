"""Tests for holiday classification, fallback generation, caching, and the feed client."""

from __future__ import annotations

import json
from datetime import UTC, date, datetime, timedelta
from decimal import Decimal

import httpx
import pytest

from tillpay.models.enums import HolidaySource, HolidayType
from tillpay.services.holiday_calendar import (
    HolidayCache,
    HolidayCalendar,
    classify_holiday,
    easter_sunday,
    generate_fallback_holidays,
    last_monday,
)

FEED_2024 = [
    {"date": "2024-01-01", "localName": "Bagong Taon", "name": "New Year's Day", "global": True, "counties": None},
    {"date": "2024-02-25", "localName": "EDSA", "name": "EDSA Revolution Anniversary", "global": True},
    {"date": "2024-06-12", "localName": "Araw ng Kalayaan", "name": "Independence Day", "global": True},
    {"date": "2024-08-21", "localName": "Ninoy Aquino Day", "name": "Ninoy Aquino Day", "global": True},
    {"date": "2024-03-28", "localName": "Huwebes Santo", "name": "Maundy Thursday", "global": True},
]


class FakeClock:
    def __init__(self) -> None:
        self.now = datetime(2024, 1, 1, tzinfo=UTC)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now += timedelta(**kwargs)


class FeedStub:
    """Mock transport handler that counts calls and replays a canned response."""

    def __init__(self, status_code: int = 200, body: bytes | None = None) -> None:
        self.status_code = status_code
        self.body = body if body is not None else json.dumps(FEED_2024).encode()
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return httpx.Response(self.status_code, content=self.body)


def _calendar(stub: FeedStub, cache: HolidayCache | None = None) -> HolidayCalendar:
    client = httpx.AsyncClient(transport=httpx.MockTransport(stub))
    return HolidayCalendar(client=client, cache=cache or HolidayCache(), base_url="https://feed.test/api/v3")


# ---------------------------------------------------------------------------
# Classification
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    ("name", "expected"),
    [
        ("New Year's Day", HolidayType.REGULAR),
        ("Good Friday", HolidayType.REGULAR),
        ("Day of Valor", HolidayType.REGULAR),
        ("National Heroes Day", HolidayType.REGULAR),
        ("RIZAL DAY", HolidayType.REGULAR),
        ("EDSA People Power Revolution Anniversary", HolidayType.SPECIAL),
        ("All Saints' Day", HolidayType.SPECIAL),
        ("Black Saturday", HolidayType.SPECIAL),
        ("Some Provincial Fiesta", HolidayType.SPECIAL),
    ],
)
def test_classify_holiday(name: str, expected: HolidayType) -> None:
    assert classify_holiday(name) == expected


def test_classify_chinese_new_year_matches_regular_keyword_first() -> None:
    # "new year" is a regular keyword and is checked before the special list.
    assert classify_holiday("Chinese New Year") == HolidayType.REGULAR


# ---------------------------------------------------------------------------
# Date rules
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    ("year", "expected"),
    [(2024, date(2024, 3, 31)), (2025, date(2025, 4, 20)), (2019, date(2019, 4, 21)), (2000, date(2000, 4, 23))],
)
def test_easter_sunday(year: int, expected: date) -> None:
    assert easter_sunday(year) == expected


def test_easter_is_always_a_spring_sunday() -> None:
    for year in range(2015, 2036):
        easter = easter_sunday(year)
        assert easter.weekday() == 6
        assert date(year, 3, 22) <= easter <= date(year, 4, 25)


def test_last_monday_of_august() -> None:
    assert last_monday(2024, 8) == date(2024, 8, 26)
    assert last_monday(2025, 8) == date(2025, 8, 25)
    assert last_monday(2024, 12) == date(2024, 12, 30)


# ---------------------------------------------------------------------------
# Fallback generation
# ---------------------------------------------------------------------------


def test_fallback_2024_contents() -> None:
    holidays = {h.date: h for h in generate_fallback_holidays(2024)}

    assert holidays[date(2024, 1, 1)].type == HolidayType.REGULAR
    assert holidays[date(2024, 3, 28)].name == "Maundy Thursday"
    assert holidays[date(2024, 3, 29)].name == "Good Friday"
    assert holidays[date(2024, 3, 30)].type == HolidayType.SPECIAL
    assert holidays[date(2024, 8, 26)].name == "National Heroes Day"
    assert holidays[date(2024, 12, 25)].pay_multiplier == Decimal("2.0")

    lunar = holidays[date(2024, 2, 10)]
    assert lunar.is_approximate is True
    assert lunar.type == HolidayType.SPECIAL
    assert all(h.source == HolidaySource.GENERATED for h in holidays.values())


def test_fallback_is_sorted_and_deterministic_across_years() -> None:
    for year in range(2015, 2036):
        holidays = generate_fallback_holidays(year)
        dates = [h.date for h in holidays]
        assert dates == sorted(dates)
        assert all(h.date.year == year for h in holidays)
        assert len(set(dates)) == len(dates)
        assert holidays == generate_fallback_holidays(year)
        assert len(holidays) >= 16


def test_fallback_keeps_fixed_holiday_on_shared_date() -> None:
    # Maundy Thursday 2020 fell on Araw ng Kagitingan.
    holidays = [h for h in generate_fallback_holidays(2020) if h.date == date(2020, 4, 9)]
    assert len(holidays) == 1
    assert holidays[0].name == "Araw ng Kagitingan (Day of Valor)"


def test_fallback_multipliers_match_type() -> None:
    for holiday in generate_fallback_holidays(2025):
        expected = Decimal("2.0") if holiday.type == HolidayType.REGULAR else Decimal("1.3")
        assert holiday.pay_multiplier == expected


# ---------------------------------------------------------------------------
# Cache
# ---------------------------------------------------------------------------


def test_cache_expires_after_ttl() -> None:
    clock = FakeClock()
    cache = HolidayCache(ttl=timedelta(hours=24), clock=clock)
    holidays = generate_fallback_holidays(2024)
    cache.set(2024, holidays)

    clock.advance(hours=23, minutes=59)
    assert cache.get(2024) == holidays

    clock.advance(minutes=1)
    assert cache.get(2024) is None


def test_cache_clear() -> None:
    cache = HolidayCache()
    cache.set(2024, generate_fallback_holidays(2024))
    cache.clear()
    assert cache.get(2024) is None


# ---------------------------------------------------------------------------
# Calendar resolution
# ---------------------------------------------------------------------------


async def test_resolve_uses_feed_and_classifies() -> None:
    stub = FeedStub()
    calendar = _calendar(stub)

    holidays = await calendar.resolve(2024)

    assert [h.date for h in holidays] == sorted(h.date for h in holidays)
    by_date = {h.date: h for h in holidays}
    assert by_date[date(2024, 1, 1)].type == HolidayType.REGULAR
    assert by_date[date(2024, 1, 1)].local_name == "Bagong Taon"
    assert by_date[date(2024, 8, 21)].type == HolidayType.SPECIAL
    assert all(h.source == HolidaySource.EXTERNAL for h in holidays)

    request = stub.requests[0]
    assert request.url.path == "/api/v3/PublicHolidays/2024/PH"
    assert "user-agent" in request.headers


async def test_resolve_caches_feed_result() -> None:
    stub = FeedStub()
    calendar = _calendar(stub)

    await calendar.resolve(2024)
    await calendar.resolve(2024)

    assert len(stub.requests) == 1


async def test_resolve_refetches_after_ttl() -> None:
    clock = FakeClock()
    stub = FeedStub()
    calendar = _calendar(stub, cache=HolidayCache(ttl=timedelta(hours=24), clock=clock))

    await calendar.resolve(2024)
    clock.advance(hours=24)
    await calendar.resolve(2024)

    assert len(stub.requests) == 2


async def test_resolve_falls_back_on_server_error() -> None:
    calendar = _calendar(FeedStub(status_code=503, body=b"down"))

    holidays = await calendar.resolve(2024)

    assert holidays == generate_fallback_holidays(2024)


async def test_resolve_falls_back_on_malformed_payload() -> None:
    calendar = _calendar(FeedStub(body=b'{"not": "a list"}'))

    holidays = await calendar.resolve(2024)

    assert all(h.source == HolidaySource.GENERATED for h in holidays)


async def test_resolve_falls_back_on_transport_error() -> None:
    def _unreachable(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    client = httpx.AsyncClient(transport=httpx.MockTransport(_unreachable))
    calendar = HolidayCalendar(client=client, cache=HolidayCache())

    holidays = await calendar.resolve(2025)

    assert holidays == generate_fallback_holidays(2025)


async def test_fallback_result_is_cached() -> None:
    stub = FeedStub(status_code=500, body=b"")
    calendar = _calendar(stub)

    await calendar.resolve(2024)
    await calendar.resolve(2024)

    assert len(stub.requests) == 1


async def test_clear_cache_forces_refetch() -> None:
    stub = FeedStub()
    calendar = _calendar(stub)

    await calendar.resolve(2024)
    calendar.clear_cache()
    await calendar.resolve(2024)

    assert len(stub.requests) == 2


async def test_holidays_in_range_spans_years() -> None:
    calendar = _calendar(FeedStub(status_code=503, body=b""))

    holidays = await calendar.holidays_in_range(date(2024, 12, 24), date(2025, 1, 1))

    assert [h.date for h in holidays] == [
        date(2024, 12, 24),
        date(2024, 12, 25),
        date(2024, 12, 30),
        date(2024, 12, 31),
        date(2025, 1, 1),
    ]


async def test_holiday_on_and_pay_multiplier_on() -> None:
    calendar = _calendar(FeedStub(status_code=503, body=b""))

    christmas = await calendar.holiday_on(date(2024, 12, 25))
    assert christmas is not None
    assert christmas.name == "Christmas Day"
    assert await calendar.holiday_on(date(2024, 12, 26)) is None

    assert await calendar.pay_multiplier_on(date(2024, 12, 25)) == 2.0
    assert await calendar.pay_multiplier_on(date(2024, 11, 1)) == 1.3
    assert await calendar.pay_multiplier_on(date(2024, 12, 26)) == 1.0

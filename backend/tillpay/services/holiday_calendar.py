"""Philippine public holiday calendar.

Holidays are fetched from the Nager.Date feed and classified into the Labor
Code's regular/special types. When the feed cannot be used the calendar is
generated from fixed dates, Easter, and a table of Chinese New Year dates.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import UTC, date, datetime, timedelta
from typing import TYPE_CHECKING

import httpx
from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from tillpay.config import get_settings
from tillpay.exceptions import ExternalSourceError
from tillpay.models.enums import HolidaySource, HolidayType
from tillpay.schemas.holiday import ExternalHoliday, Holiday
from tillpay.services.compensation import pay_multiplier

if TYPE_CHECKING:
    from collections.abc import Callable, MutableMapping

logger = logging.getLogger(__name__)

_USER_AGENT = "TillPay-Payroll"
_feed_adapter: TypeAdapter[list[ExternalHoliday]] = TypeAdapter(list[ExternalHoliday])

# Checked in order; the first match wins.
REGULAR_KEYWORDS = (
    "new year",
    "maundy thursday",
    "good friday",
    "araw ng kagitingan",
    "day of valor",
    "labor day",
    "independence day",
    "national heroes day",
    "bonifacio day",
    "christmas day",
    "christmas eve",
    "rizal day",
)
SPECIAL_KEYWORDS = (
    "chinese new year",
    "edsa",
    "people power",
    "black saturday",
    "all saints",
    "immaculate conception",
    "last day of the year",
    "new year's eve",
    "ninoy aquino day",
)

# (month, day, name, type)
FIXED_HOLIDAYS: tuple[tuple[int, int, str, HolidayType], ...] = (
    (1, 1, "New Year's Day", HolidayType.REGULAR),
    (2, 25, "EDSA People Power Revolution Anniversary", HolidayType.SPECIAL),
    (4, 9, "Araw ng Kagitingan (Day of Valor)", HolidayType.REGULAR),
    (5, 1, "Labor Day", HolidayType.REGULAR),
    (6, 12, "Independence Day", HolidayType.REGULAR),
    (8, 21, "Ninoy Aquino Day", HolidayType.SPECIAL),
    (11, 1, "All Saints' Day", HolidayType.SPECIAL),
    (11, 30, "Bonifacio Day", HolidayType.REGULAR),
    (12, 8, "Immaculate Conception", HolidayType.SPECIAL),
    (12, 24, "Christmas Eve", HolidayType.REGULAR),
    (12, 25, "Christmas Day", HolidayType.REGULAR),
    (12, 30, "Rizal Day", HolidayType.REGULAR),
    (12, 31, "Last Day of the Year", HolidayType.SPECIAL),
)

# (days relative to Easter Sunday, name, type)
EASTER_HOLIDAYS: tuple[tuple[int, str, HolidayType], ...] = (
    (-3, "Maundy Thursday", HolidayType.REGULAR),
    (-2, "Good Friday", HolidayType.REGULAR),
    (-1, "Black Saturday", HolidayType.SPECIAL),
)

# Lunar dates are not computed; years outside this table have no entry.
CHINESE_NEW_YEAR: dict[int, date] = {
    2024: date(2024, 2, 10),
    2025: date(2025, 1, 29),
    2026: date(2026, 2, 17),
    2027: date(2027, 2, 6),
    2028: date(2028, 1, 26),
    2029: date(2029, 2, 13),
    2030: date(2030, 2, 3),
}


# ---------------------------------------------------------------------------
# Rules
# ---------------------------------------------------------------------------


def classify_holiday(name: str) -> HolidayType:
    """Map a holiday name to its Labor Code type; unknown names are special."""
    lowered = name.lower()
    if any(keyword in lowered for keyword in REGULAR_KEYWORDS):
        return HolidayType.REGULAR
    if any(keyword in lowered for keyword in SPECIAL_KEYWORDS):
        return HolidayType.SPECIAL
    return HolidayType.SPECIAL


def easter_sunday(year: int) -> date:
    """Anonymous Gregorian computus."""
    a = year % 19
    b = year // 100
    c = year % 100
    d = b // 4
    e = b % 4
    f = (b + 8) // 25
    g = (b - f + 1) // 3
    h = (19 * a + b - d - g + 15) % 30
    i = c // 4
    k = c % 4
    l = (32 + 2 * e + 2 * i - h - k) % 7  # noqa: E741
    m = (a + 11 * h + 22 * l) // 451
    n = (h + l - 7 * m + 114) // 31
    p = (h + l - 7 * m + 114) % 31
    return date(year, n, p + 1)


def last_monday(year: int, month: int) -> date:
    """Return the last Monday of a month."""
    first_of_next = date(year + 1, 1, 1) if month == 12 else date(year, month + 1, 1)
    last_day = first_of_next - timedelta(days=1)
    return last_day - timedelta(days=last_day.weekday())


def _generated(day: date, name: str, holiday_type: HolidayType, *, approximate: bool = False) -> Holiday:
    return Holiday(
        date=day,
        name=name,
        local_name=name,
        type=holiday_type,
        pay_multiplier=pay_multiplier(holiday_type),
        is_approximate=approximate,
        source=HolidaySource.GENERATED,
    )


def generate_fallback_holidays(year: int) -> list[Holiday]:
    """Build the year's holidays without the external feed, sorted by date."""
    holidays = [_generated(date(year, month, day), name, kind) for month, day, name, kind in FIXED_HOLIDAYS]

    easter = easter_sunday(year)
    holidays.extend(
        _generated(easter + timedelta(days=offset), name, kind) for offset, name, kind in EASTER_HOLIDAYS
    )

    holidays.append(_generated(last_monday(year, 8), "National Heroes Day", HolidayType.REGULAR))

    lunar_new_year = CHINESE_NEW_YEAR.get(year)
    if lunar_new_year is not None:
        holidays.append(_generated(lunar_new_year, "Chinese New Year", HolidayType.SPECIAL, approximate=True))

    # One entry per date; the fixed table wins when a movable holiday lands on it.
    by_date: dict[date, Holiday] = {}
    for holiday in holidays:
        by_date.setdefault(holiday.date, holiday)

    logger.info("Generated %d fallback holidays for %d", len(by_date), year)
    return sorted(by_date.values(), key=lambda h: h.date)


def _from_feed(item: ExternalHoliday) -> Holiday:
    kind = classify_holiday(item.name)
    return Holiday(
        date=item.date,
        name=item.name,
        local_name=item.local_name or item.name,
        type=kind,
        pay_multiplier=pay_multiplier(kind),
        source=HolidaySource.EXTERNAL,
        is_global=item.is_global is not False,
        counties=tuple(item.counties or ()),
    )


# ---------------------------------------------------------------------------
# Cache
# ---------------------------------------------------------------------------


def _utc_clock() -> datetime:
    return datetime.now(UTC)


@dataclass(frozen=True)
class _CacheEntry:
    holidays: list[Holiday]
    stored_at: datetime


class HolidayCache:
    """Per-year holiday cache with a time-to-live.

    Not guarded against concurrent writers: two simultaneous misses for the
    same year both store, and the last one wins.
    """

    def __init__(
        self,
        ttl: timedelta = timedelta(hours=24),
        clock: Callable[[], datetime] = _utc_clock,
        store: MutableMapping[int, _CacheEntry] | None = None,
    ) -> None:
        self._ttl = ttl
        self._clock = clock
        self._store: MutableMapping[int, _CacheEntry] = store if store is not None else {}

    def get(self, year: int) -> list[Holiday] | None:
        entry = self._store.get(year)
        if entry is None:
            return None
        if self._clock() - entry.stored_at >= self._ttl:
            del self._store[year]
            return None
        return entry.holidays

    def set(self, year: int, holidays: list[Holiday]) -> None:
        self._store[year] = _CacheEntry(holidays=holidays, stored_at=self._clock())

    def clear(self) -> None:
        self._store.clear()


# ---------------------------------------------------------------------------
# Calendar
# ---------------------------------------------------------------------------


class HolidayCalendar:
    """Resolves the public holidays of a year. Never fails: falls back to generation."""

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        cache: HolidayCache | None = None,
        base_url: str | None = None,
        country_code: str | None = None,
        timeout: float | None = None,
    ) -> None:
        settings = get_settings()
        self._client = client
        self._cache = cache or HolidayCache(ttl=timedelta(hours=settings.holiday_cache_ttl_hours))
        self._base_url = (base_url or settings.holiday_api_base_url).rstrip("/")
        self._country_code = country_code or settings.holiday_country_code
        self._timeout = timeout if timeout is not None else settings.holiday_fetch_timeout_seconds

    async def resolve(self, year: int) -> list[Holiday]:
        """Return the year's holidays sorted by date."""
        cached = self._cache.get(year)
        if cached is not None:
            logger.debug("Using cached holidays for %d", year)
            return cached

        try:
            holidays = await self._fetch(year)
        except ExternalSourceError as exc:
            logger.warning("Holiday feed unavailable for %d: %s; generating fallback", year, exc.message)
            holidays = generate_fallback_holidays(year)

        self._cache.set(year, holidays)
        return holidays

    async def holidays_in_range(self, start: date, end: date) -> list[Holiday]:
        """Holidays between two dates, inclusive, across year boundaries."""
        result: list[Holiday] = []
        for year in range(start.year, end.year + 1):
            result.extend(h for h in await self.resolve(year) if start <= h.date <= end)
        return result

    async def holiday_on(self, day: date) -> Holiday | None:
        """Return the holiday falling on a calendar day, if any."""
        return next((h for h in await self.resolve(day.year) if h.date == day), None)

    async def pay_multiplier_on(self, day: date) -> float:
        """Holiday multiplier for a day; 1.0 on ordinary days."""
        holiday = await self.holiday_on(day)
        return float(holiday.pay_multiplier) if holiday else 1.0

    def clear_cache(self) -> None:
        self._cache.clear()

    async def _fetch(self, year: int) -> list[Holiday]:
        url = f"{self._base_url}/PublicHolidays/{year}/{self._country_code}"
        logger.info("Fetching holidays for %d from %s", year, url)
        try:
            if self._client is not None:
                response = await self._client.get(url, timeout=self._timeout, headers={"User-Agent": _USER_AGENT})
            else:
                async with httpx.AsyncClient(timeout=self._timeout) as client:
                    response = await client.get(url, headers={"User-Agent": _USER_AGENT})
            response.raise_for_status()
            items = _feed_adapter.validate_json(response.content)
        except httpx.HTTPError as exc:
            raise ExternalSourceError(f"{type(exc).__name__}: {exc}") from exc
        except PydanticValidationError as exc:
            raise ExternalSourceError(f"Malformed holiday payload ({exc.error_count()} errors)") from exc

        holidays = sorted((_from_feed(item) for item in items), key=lambda h: h.date)
        logger.info("Fetched %d holidays for %d", len(holidays), year)
        return holidays


_holiday_calendar: HolidayCalendar | None = None


def get_holiday_calendar() -> HolidayCalendar:
    """FastAPI dependency for the shared holiday calendar."""
    global _holiday_calendar
    if _holiday_calendar is None:
        _holiday_calendar = HolidayCalendar()
    return _holiday_calendar


def set_holiday_calendar(calendar: HolidayCalendar | None) -> None:
    """Override the calendar (for testing or production wiring)."""
    global _holiday_calendar
    _holiday_calendar = calendar

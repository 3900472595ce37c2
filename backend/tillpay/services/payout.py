"""Payout date and cutoff period arithmetic for payroll cadences.

Weekday numbers run 0 (Sunday) to 6 (Saturday). Day-of-month numbers that
fall outside a month roll into the neighbouring month, so day 0 is the last
day of the previous month and February 30 lands in early March.
"""

from __future__ import annotations

from datetime import date, timedelta

from tillpay.exceptions import ValidationError
from tillpay.models.enums import PayrollCadence


def _month_day(year: int, month: int, day: int) -> date:
    """Build a date, rolling month and day overflow forward or backward."""
    year += (month - 1) // 12
    month = (month - 1) % 12 + 1
    return date(year, month, 1) + timedelta(days=day - 1)


def _sunday_weekday(day: date) -> int:
    return (day.weekday() + 1) % 7


def _cadence(value: str) -> PayrollCadence:
    try:
        return PayrollCadence(value)
    except ValueError:
        raise ValidationError(f"Unknown payroll cadence: {value!r}") from None


def _require(days: list[int], count: int, label: str) -> None:
    if len(days) < count:
        raise ValidationError(f"{label} needs {count} value(s), got {len(days)}")


# ---------------------------------------------------------------------------
# Next payout date
# ---------------------------------------------------------------------------


def _next_monthly(from_date: date, payout_day: int) -> date:
    target = _month_day(from_date.year, from_date.month, payout_day)
    if target <= from_date:
        target = _month_day(from_date.year, from_date.month + 1, payout_day)
    return target


def _next_semi_monthly(from_date: date, first: int, second: int) -> date:
    if from_date.day < first:
        return _month_day(from_date.year, from_date.month, first)
    if from_date.day < second:
        return _month_day(from_date.year, from_date.month, second)
    return _month_day(from_date.year, from_date.month + 1, first)


def _next_weekly(from_date: date, weekday: int) -> date:
    return from_date + timedelta(days=(weekday - _sunday_weekday(from_date) + 7) % 7)


def _next_bi_weekly(from_date: date, weekday: int) -> date:
    target = _next_weekly(from_date, weekday)
    if (target - from_date).days <= 7:
        target += timedelta(days=7)
    return target


def next_payout_date(cadence: str, payout_days: list[int], from_date: date) -> date:
    """Return the next payout date on or after ``from_date`` for a cadence."""
    kind = _cadence(cadence)
    if kind == PayrollCadence.SEMI_MONTHLY:
        _require(payout_days, 2, "payout_days")
        return _next_semi_monthly(from_date, payout_days[0], payout_days[1])

    _require(payout_days, 1, "payout_days")
    if kind == PayrollCadence.MONTHLY:
        return _next_monthly(from_date, payout_days[0])
    if kind == PayrollCadence.WEEKLY:
        return _next_weekly(from_date, payout_days[0])
    return _next_bi_weekly(from_date, payout_days[0])


# ---------------------------------------------------------------------------
# Cutoff period
# ---------------------------------------------------------------------------


def cutoff_period(cadence: str, cutoff_days: list[int], for_date: date) -> tuple[date, date]:
    """Return the inclusive (start, end) range of worked time for ``for_date``."""
    kind = _cadence(cadence)

    if kind == PayrollCadence.MONTHLY:
        _require(cutoff_days, 1, "cutoff_days")
        start = _month_day(for_date.year, for_date.month, cutoff_days[0])
        end = _month_day(for_date.year, for_date.month + 1, cutoff_days[0] - 1)
        return start, end

    if kind == PayrollCadence.SEMI_MONTHLY:
        _require(cutoff_days, 2, "cutoff_days")
        first, second = cutoff_days[0], cutoff_days[1]
        if for_date.day <= first:
            start = _month_day(for_date.year, for_date.month - 1, second + 1)
            end = _month_day(for_date.year, for_date.month, first)
        else:
            start = _month_day(for_date.year, for_date.month, first + 1)
            end = _month_day(for_date.year, for_date.month, second)
        return start, end

    span = 7 if kind == PayrollCadence.WEEKLY else 14
    return for_date - timedelta(days=span), for_date

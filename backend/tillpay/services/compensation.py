"""Holiday pay and 13th-month pay rules under the Philippine Labor Code.

All functions are pure. Monetary results are rounded to centavos.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import TYPE_CHECKING

from tillpay.models.enums import HolidayType

if TYPE_CHECKING:
    from datetime import date

_CENTS = Decimal("0.01")

HOLIDAY_MULTIPLIERS: dict[str, Decimal] = {
    HolidayType.REGULAR: Decimal("2.0"),
    HolidayType.SPECIAL: Decimal("1.3"),
    HolidayType.LOCAL: Decimal("1.3"),
}

# Hourly rate is always derived from an 8-hour day here, whatever the staff
# member's own scheduled hours.
_HOURS_PER_DAY = Decimal(8)


def to_decimal(value: Decimal | float | str) -> Decimal:
    """Convert a number to Decimal without binary float artifacts."""
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def round_money(value: Decimal) -> Decimal:
    """Round to two decimal places, half up."""
    return value.quantize(_CENTS, rounding=ROUND_HALF_UP)


def pay_multiplier(holiday_type: str) -> Decimal:
    """Return the pay multiplier for a holiday type, defaulting to special."""
    return HOLIDAY_MULTIPLIERS.get(holiday_type, HOLIDAY_MULTIPLIERS[HolidayType.SPECIAL])


def holiday_bonus(
    daily_rate: Decimal | float,
    holiday_type: str,
    hours_worked: Decimal | float = 8,
) -> Decimal:
    """Premium portion of holiday pay: (multiplier - 1) on top of the normal rate."""
    hourly_rate = to_decimal(daily_rate) / _HOURS_PER_DAY
    return round_money(hourly_rate * to_decimal(hours_worked) * (pay_multiplier(holiday_type) - 1))


def total_holiday_pay(
    daily_rate: Decimal | float,
    holiday_type: str,
    hours_worked: Decimal | float = 8,
) -> Decimal:
    """Full pay for hours worked on a holiday, premium included."""
    hourly_rate = to_decimal(daily_rate) / _HOURS_PER_DAY
    return round_money(hourly_rate * to_decimal(hours_worked) * pay_multiplier(holiday_type))


def thirteenth_month_pay(annual_basic_pay: Decimal | float) -> Decimal:
    """One twelfth of the basic pay earned in the calendar year (PD 851)."""
    return round_money(to_decimal(annual_basic_pay) / 12)


def is_thirteenth_month_period(day: date) -> bool:
    """13th-month pay is released with December payroll."""
    return day.month == 12

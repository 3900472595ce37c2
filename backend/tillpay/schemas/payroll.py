# ruff: noqa: TC003
from __future__ import annotations

import uuid
from datetime import date, datetime
from decimal import Decimal
from typing import Self

from pydantic import BaseModel, Field, model_validator

from tillpay.models.enums import HolidayType

# ---------------------------------------------------------------------------
# Nested components
# ---------------------------------------------------------------------------


class Bonuses(BaseModel):
    """Discretionary bonuses added on top of computed pay."""

    holiday: Decimal = Field(default=Decimal("0"), ge=0)
    performance: Decimal = Field(default=Decimal("0"), ge=0)
    other: Decimal = Field(default=Decimal("0"), ge=0)


class Deductions(BaseModel):
    """Amounts subtracted from gross pay."""

    late: Decimal = Field(default=Decimal("0"), ge=0)
    absence: Decimal = Field(default=Decimal("0"), ge=0)


class HolidayWorked(BaseModel):
    """Breakdown of pay earned on one holiday."""

    date: date
    holiday_name: str
    holiday_type: HolidayType
    hours_worked: Decimal
    pay_multiplier: Decimal
    bonus_amount: Decimal


# ---------------------------------------------------------------------------
# Request
# ---------------------------------------------------------------------------


class CreatePayrollRequest(BaseModel):
    """Request body for a payroll run for one staff member.

    Any monetary component left unset is derived from the staff profile and
    the period's time logs.
    """

    staff_id: uuid.UUID
    period: date
    period_start: date | None = None
    period_end: date | None = None

    basic_pay: Decimal | None = Field(default=None, ge=0)
    overtime_pay: Decimal | None = Field(default=None, ge=0)
    allowances: Decimal | None = Field(default=None, ge=0)
    bonuses: Bonuses = Field(default_factory=Bonuses)

    deductions: Deductions | None = None
    late_minutes: int = Field(default=0, ge=0)
    absent_days: int = Field(default=0, ge=0)

    include_holiday_pay: bool = True
    include_thirteenth_month: bool = True

    net_pay: Decimal | None = None

    @model_validator(mode="after")
    def _validate_window(self) -> Self:
        if (self.period_start is None) != (self.period_end is None):
            msg = "period_start and period_end must be given together"
            raise ValueError(msg)
        if self.period_start is not None and self.period_end is not None and self.period_start > self.period_end:
            msg = "period_start must be on or before period_end"
            raise ValueError(msg)
        return self


# ---------------------------------------------------------------------------
# Response
# ---------------------------------------------------------------------------


class PayrollRecordResponse(BaseModel):
    """A persisted payroll record."""

    id: uuid.UUID
    staff_id: uuid.UUID
    period: date
    period_start: date
    period_end: date
    basic_pay: Decimal
    overtime_pay: Decimal
    allowances: Decimal
    holiday_pay: Decimal
    thirteenth_month_pay: Decimal
    bonuses: Bonuses
    holidays_worked: list[HolidayWorked]
    deductions: Deductions
    total_hours_worked: Decimal
    overtime_hours: Decimal
    gross_pay: Decimal
    net_pay: Decimal
    created_at: datetime


class PayrollListResponse(BaseModel):
    """Payroll history for a staff member, newest first."""

    items: list[PayrollRecordResponse]
    total: int

# ruff: noqa: TC003
from __future__ import annotations

import uuid
from datetime import date, datetime
from decimal import Decimal
from typing import Self

from pydantic import BaseModel, Field, model_validator

from tillpay.models.enums import PayrollCadence

_WEEKLY_CADENCES = (PayrollCadence.WEEKLY, PayrollCadence.BI_WEEKLY)


def _check_days(cadence: PayrollCadence, days: list[int], label: str) -> None:
    expected = 2 if cadence == PayrollCadence.SEMI_MONTHLY else 1
    if len(days) != expected:
        msg = f"{label} must have {expected} value(s) for a {cadence.value} schedule"
        raise ValueError(msg)
    if cadence in _WEEKLY_CADENCES:
        if not all(0 <= d <= 6 for d in days):
            msg = f"{label} must be weekdays 0 (Sunday) to 6 (Saturday)"
            raise ValueError(msg)
    elif not all(1 <= d <= 31 for d in days):
        msg = f"{label} must be days of the month between 1 and 31"
        raise ValueError(msg)
    if expected == 2 and days[0] >= days[1]:
        msg = f"{label} must be in ascending order"
        raise ValueError(msg)


class ScheduleSettings(BaseModel):
    """Fields shared by create and update payloads."""

    overtime_multiplier: Decimal = Field(default=Decimal("1.25"), ge=1)
    regular_hours_per_day: int = Field(default=8, ge=1, le=24)
    work_days_per_week: int = Field(default=6, ge=1, le=7)
    description: str | None = Field(default=None, max_length=1000)


class CreateScheduleRequest(ScheduleSettings):
    """Request body for creating a payroll schedule."""

    name: str = Field(min_length=1, max_length=255)
    cadence: PayrollCadence = PayrollCadence.SEMI_MONTHLY
    payout_days: list[int]
    cutoff_days: list[int]
    is_active: bool = True

    @model_validator(mode="after")
    def _validate_days(self) -> Self:
        _check_days(self.cadence, self.payout_days, "payout_days")
        _check_days(self.cadence, self.cutoff_days, "cutoff_days")
        return self


class UpdateScheduleRequest(BaseModel):
    """Partial update; day lists are revalidated against the resulting cadence."""

    name: str | None = Field(default=None, min_length=1, max_length=255)
    cadence: PayrollCadence | None = None
    payout_days: list[int] | None = None
    cutoff_days: list[int] | None = None
    description: str | None = Field(default=None, max_length=1000)
    overtime_multiplier: Decimal | None = Field(default=None, ge=1)
    regular_hours_per_day: int | None = Field(default=None, ge=1, le=24)
    work_days_per_week: int | None = Field(default=None, ge=1, le=7)
    is_active: bool | None = None


class ScheduleResponse(BaseModel):
    """Response schema for a payroll schedule."""

    id: uuid.UUID
    name: str
    cadence: PayrollCadence
    payout_days: list[int]
    cutoff_days: list[int]
    description: str | None
    overtime_multiplier: Decimal
    regular_hours_per_day: int
    work_days_per_week: int
    is_active: bool
    created_at: datetime


class ScheduleListResponse(BaseModel):
    """All payroll schedules."""

    items: list[ScheduleResponse]
    total: int


class CutoffPeriod(BaseModel):
    """Date range of worked time included in a payroll run."""

    start_date: date
    end_date: date


class NextPayoutResponse(BaseModel):
    """Next payout date and the active cutoff period for a schedule."""

    schedule_id: uuid.UUID
    next_payout_date: date
    cutoff_period: CutoffPeriod


class ScheduleStaffItem(BaseModel):
    """Staff member assigned to a schedule."""

    id: uuid.UUID
    name: str
    position: str
    status: str


class ScheduleStaffResponse(BaseModel):
    """Staff members assigned to a schedule."""

    items: list[ScheduleStaffItem]
    total: int

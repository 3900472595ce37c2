"""Payroll aggregation: turns a staff profile and a period's time logs into a payroll record."""

from __future__ import annotations

import calendar
import logging
from collections import defaultdict
from datetime import date
from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlmodel import col

from tillpay.exceptions import ConflictError, NotFoundError
from tillpay.models.payroll import PayrollRecord
from tillpay.models.schedule import PayrollScheduleDefinition
from tillpay.schemas.payroll import (
    Bonuses,
    Deductions,
    HolidayWorked,
    PayrollListResponse,
    PayrollRecordResponse,
)
from tillpay.services.compensation import (
    holiday_bonus,
    is_thirteenth_month_period,
    round_money,
    thirteenth_month_pay,
    to_decimal,
)
from tillpay.services.holiday import holidays_between
from tillpay.services.payout import cutoff_period
from tillpay.services.time_log import local_work_day

if TYPE_CHECKING:
    import uuid

    from sqlalchemy.ext.asyncio import AsyncSession

    from tillpay.schemas.payroll import CreatePayrollRequest
    from tillpay.services.holiday_calendar import HolidayCalendar
    from tillpay.services.staff import StaffProfile, StaffService
    from tillpay.services.time_log import TimeLogEntry, TimeLogService

logger = logging.getLogger(__name__)

# Overtime is counted per log entry beyond a flat 8 hours, independent of the
# schedule's regular_hours_per_day.
OVERTIME_THRESHOLD_HOURS = Decimal(8)
DEFAULT_OVERTIME_MULTIPLIER = Decimal("1.25")

_ZERO = Decimal("0")


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _month_bounds(day: date) -> tuple[date, date]:
    last = calendar.monthrange(day.year, day.month)[1]
    return date(day.year, day.month, 1), date(day.year, day.month, last)


def _build_payroll_response(record: PayrollRecord) -> PayrollRecordResponse:
    return PayrollRecordResponse(
        id=record.id,
        staff_id=record.staff_id,
        period=record.period,
        period_start=record.period_start,
        period_end=record.period_end,
        basic_pay=record.basic_pay,
        overtime_pay=record.overtime_pay,
        allowances=record.allowances,
        holiday_pay=record.holiday_pay,
        thirteenth_month_pay=record.thirteenth_month_pay,
        bonuses=Bonuses(
            holiday=record.holiday_bonus,
            performance=record.performance_bonus,
            other=record.other_bonus,
        ),
        holidays_worked=[HolidayWorked.model_validate(item) for item in record.holidays_worked or []],
        deductions=Deductions(late=record.late_deduction, absence=record.absence_deduction),
        total_hours_worked=record.total_hours_worked,
        overtime_hours=record.overtime_hours,
        gross_pay=record.gross_pay,
        net_pay=record.net_pay,
        created_at=record.created_at,
    )


async def _load_schedule(
    session: AsyncSession,
    staff: StaffProfile,
) -> PayrollScheduleDefinition | None:
    if staff.payroll_schedule_id is None:
        return None
    return await session.get(PayrollScheduleDefinition, staff.payroll_schedule_id)


def _resolve_window(
    payload: CreatePayrollRequest,
    schedule: PayrollScheduleDefinition | None,
) -> tuple[date, date]:
    if payload.period_start is not None and payload.period_end is not None:
        return payload.period_start, payload.period_end
    if schedule is not None:
        return cutoff_period(schedule.cadence, schedule.cutoff_days, payload.period)
    return _month_bounds(payload.period)


def summarize_hours(entries: list[TimeLogEntry]) -> tuple[Decimal, Decimal]:
    """Return (total hours, overtime hours) for a set of log entries."""
    total = sum((e.total_hours for e in entries), _ZERO)
    overtime = sum(
        (max(e.total_hours - OVERTIME_THRESHOLD_HOURS, _ZERO) for e in entries if e.is_overtime),
        _ZERO,
    )
    return total, overtime


async def price_holidays_worked(
    session: AsyncSession,
    holiday_calendar: HolidayCalendar,
    period: date,
    daily_rate: Decimal,
    entries: list[TimeLogEntry],
) -> tuple[Decimal, list[HolidayWorked]]:
    """Premium owed for hours logged on holidays in the period's calendar month."""
    hours_by_day: dict[date, Decimal] = defaultdict(lambda: _ZERO)
    for entry in entries:
        hours_by_day[local_work_day(entry.clock_in)] += entry.total_hours

    month_start, month_end = _month_bounds(period)
    holidays = await holidays_between(session, holiday_calendar, month_start, month_end)

    total = _ZERO
    worked: list[HolidayWorked] = []
    for holiday in holidays:
        if holiday.date not in hours_by_day:
            continue
        hours = hours_by_day[holiday.date]
        bonus = holiday_bonus(daily_rate, holiday.type, hours)
        worked.append(
            HolidayWorked(
                date=holiday.date,
                holiday_name=holiday.name,
                holiday_type=holiday.type,
                hours_worked=hours,
                pay_multiplier=holiday.pay_multiplier,
                bonus_amount=bonus,
            )
        )
        total += bonus
    return total, worked


async def _prior_basic_pay_this_year(session: AsyncSession, staff_id: uuid.UUID, period: date) -> Decimal:
    """Basic pay of the staff member's January-November records in the period's year."""
    result = await session.execute(
        select(func.coalesce(func.sum(col(PayrollRecord.basic_pay)), 0)).where(
            col(PayrollRecord.staff_id) == staff_id,
            col(PayrollRecord.period) >= date(period.year, 1, 1),
            col(PayrollRecord.period) < date(period.year, 12, 1),
        )
    )
    return to_decimal(result.scalar_one())


# ---------------------------------------------------------------------------
# Write path
# ---------------------------------------------------------------------------


async def create_payroll_record(
    session: AsyncSession,
    payload: CreatePayrollRequest,
    holiday_calendar: HolidayCalendar,
    staff_service: StaffService,
    time_log_service: TimeLogService,
) -> PayrollRecordResponse:
    """Aggregate and persist one payroll record.

    Flow:
    1. Resolve the staff profile and reject duplicates for (staff, period)
    2. Bound the period by explicit dates, the staff's schedule, or the month
    3. Sum hours and overtime from the period's time logs
    4. Derive basic pay, allowances, overtime pay, and deductions
    5. Price hours worked on holidays
    6. Add 13th-month pay for December runs
    7. Fill in net pay when the caller did not supply it
    """
    # 1. Staff and uniqueness.
    staff = await staff_service.get_staff(payload.staff_id)
    if staff is None:
        raise NotFoundError("Staff member not found")

    existing = await session.execute(
        select(PayrollRecord).where(
            col(PayrollRecord.staff_id) == payload.staff_id,
            col(PayrollRecord.period) == payload.period,
        )
    )
    if existing.scalar_one_or_none() is not None:
        raise ConflictError("Payroll record already exists for this staff member and period")

    # 2. Period window.
    schedule = await _load_schedule(session, staff)
    start, end = _resolve_window(payload, schedule)

    # 3. Hours.
    entries = await time_log_service.list_entries(staff.id, start, end)
    total_hours, overtime_hours = summarize_hours(entries)

    # 4. Pay components.
    daily_rate = staff.daily_rate
    hourly_rate = daily_rate / Decimal(staff.scheduled_hours_per_day)

    if payload.basic_pay is not None:
        basic_pay = payload.basic_pay
    elif staff.basic_salary is not None:
        basic_pay = staff.basic_salary
    else:
        days_worked = {local_work_day(e.clock_in) for e in entries}
        basic_pay = daily_rate * len(days_worked)
    basic_pay = round_money(basic_pay)

    if payload.allowances is not None:
        allowances = payload.allowances
    else:
        allowances = staff.allowances or _ZERO

    if payload.overtime_pay is not None:
        overtime_pay = payload.overtime_pay
    else:
        multiplier = schedule.overtime_multiplier if schedule is not None else DEFAULT_OVERTIME_MULTIPLIER
        overtime_pay = overtime_hours * hourly_rate * to_decimal(multiplier)

    if payload.deductions is not None:
        deductions = payload.deductions
    else:
        deductions = Deductions(
            late=round_money(Decimal(payload.late_minutes) * hourly_rate / 60),
            absence=round_money(Decimal(payload.absent_days) * daily_rate),
        )

    # 5. Holiday premium.
    holiday_pay = _ZERO
    holidays_worked: list[HolidayWorked] = []
    if payload.include_holiday_pay:
        holiday_pay, holidays_worked = await price_holidays_worked(
            session, holiday_calendar, payload.period, daily_rate, entries
        )

    # 6. 13th month.
    thirteenth = _ZERO
    if payload.include_thirteenth_month and is_thirteenth_month_period(payload.period):
        prior = await _prior_basic_pay_this_year(session, staff.id, payload.period)
        thirteenth = thirteenth_month_pay(prior + basic_pay)

    record = PayrollRecord(
        staff_id=staff.id,
        period=payload.period,
        period_start=start,
        period_end=end,
        basic_pay=basic_pay,
        overtime_pay=round_money(overtime_pay),
        allowances=round_money(allowances),
        holiday_pay=round_money(holiday_pay),
        thirteenth_month_pay=thirteenth,
        holiday_bonus=round_money(payload.bonuses.holiday),
        performance_bonus=round_money(payload.bonuses.performance),
        other_bonus=round_money(payload.bonuses.other),
        late_deduction=round_money(deductions.late),
        absence_deduction=round_money(deductions.absence),
        total_hours_worked=round_money(total_hours),
        overtime_hours=round_money(overtime_hours),
        holidays_worked=[item.model_dump(mode="json") for item in holidays_worked],
    )

    # 7. Net pay is only derived when absent.
    if payload.net_pay is not None:
        record.net_pay = round_money(payload.net_pay)
    else:
        record.net_pay = record.gross_pay - record.late_deduction - record.absence_deduction

    session.add(record)
    try:
        await session.flush()
    except IntegrityError:
        await session.rollback()
        raise ConflictError("Payroll record already exists for this staff member and period") from None

    await session.commit()
    await session.refresh(record)
    logger.info(
        "Created payroll record %s for staff %s period %s: gross=%s net=%s",
        record.id,
        record.staff_id,
        record.period,
        record.gross_pay,
        record.net_pay,
    )
    return _build_payroll_response(record)


# ---------------------------------------------------------------------------
# Read path
# ---------------------------------------------------------------------------


async def list_staff_payroll(session: AsyncSession, staff_id: uuid.UUID) -> PayrollListResponse:
    """Payroll history for a staff member, newest period first."""
    result = await session.execute(
        select(PayrollRecord)
        .where(col(PayrollRecord.staff_id) == staff_id)
        .order_by(col(PayrollRecord.period).desc())
    )
    records = list(result.scalars().all())
    return PayrollListResponse(items=[_build_payroll_response(r) for r in records], total=len(records))


async def get_payroll_record(session: AsyncSession, record_id: uuid.UUID) -> PayrollRecordResponse:
    """Get a single payroll record or raise 404."""
    result = await session.execute(select(PayrollRecord).where(col(PayrollRecord.id) == record_id))
    record = result.scalar_one_or_none()
    if record is None:
        raise NotFoundError("Payroll record not found")
    return _build_payroll_response(record)

from __future__ import annotations

import logging
from datetime import date
from typing import TYPE_CHECKING

from sqlalchemy import select
from sqlmodel import col

from tillpay.exceptions import ConflictError, NotFoundError, ValidationError
from tillpay.models.enums import PayrollCadence
from tillpay.models.schedule import PayrollScheduleDefinition
from tillpay.schemas.schedule import (
    CreateScheduleRequest,
    CutoffPeriod,
    NextPayoutResponse,
    ScheduleListResponse,
    ScheduleResponse,
    ScheduleStaffItem,
    ScheduleStaffResponse,
)
from tillpay.services.payout import cutoff_period, next_payout_date
from tillpay.services.time_log import business_today

if TYPE_CHECKING:
    import uuid

    from sqlalchemy.ext.asyncio import AsyncSession

    from tillpay.schemas.schedule import UpdateScheduleRequest
    from tillpay.services.staff import StaffService

logger = logging.getLogger(__name__)


def _build_schedule_response(schedule: PayrollScheduleDefinition) -> ScheduleResponse:
    return ScheduleResponse(
        id=schedule.id,
        name=schedule.name,
        cadence=PayrollCadence(schedule.cadence),
        payout_days=list(schedule.payout_days),
        cutoff_days=list(schedule.cutoff_days),
        description=schedule.description,
        overtime_multiplier=schedule.overtime_multiplier,
        regular_hours_per_day=schedule.regular_hours_per_day,
        work_days_per_week=schedule.work_days_per_week,
        is_active=schedule.is_active,
        created_at=schedule.created_at,
    )


async def get_schedule(session: AsyncSession, schedule_id: uuid.UUID) -> PayrollScheduleDefinition:
    """Get a single schedule or raise 404."""
    result = await session.execute(
        select(PayrollScheduleDefinition).where(col(PayrollScheduleDefinition.id) == schedule_id)
    )
    schedule = result.scalar_one_or_none()
    if schedule is None:
        raise NotFoundError("Payroll schedule not found")
    return schedule


async def get_schedule_detail(session: AsyncSession, schedule_id: uuid.UUID) -> ScheduleResponse:
    """Get a single schedule as a response."""
    return _build_schedule_response(await get_schedule(session, schedule_id))


async def create_schedule(session: AsyncSession, payload: CreateScheduleRequest) -> ScheduleResponse:
    """Create a payroll schedule."""
    schedule = PayrollScheduleDefinition(
        name=payload.name,
        cadence=payload.cadence.value,
        payout_days=payload.payout_days,
        cutoff_days=payload.cutoff_days,
        description=payload.description,
        overtime_multiplier=payload.overtime_multiplier,
        regular_hours_per_day=payload.regular_hours_per_day,
        work_days_per_week=payload.work_days_per_week,
        is_active=payload.is_active,
    )
    session.add(schedule)
    await session.commit()
    await session.refresh(schedule)
    logger.info("Created %s payroll schedule %s", schedule.cadence, schedule.id)
    return _build_schedule_response(schedule)


async def list_schedules(session: AsyncSession) -> ScheduleListResponse:
    """List schedules, active ones first, then by name."""
    result = await session.execute(
        select(PayrollScheduleDefinition).order_by(
            col(PayrollScheduleDefinition.is_active).desc(),
            col(PayrollScheduleDefinition.name),
        )
    )
    schedules = list(result.scalars().all())
    return ScheduleListResponse(items=[_build_schedule_response(s) for s in schedules], total=len(schedules))


async def update_schedule(
    session: AsyncSession,
    schedule_id: uuid.UUID,
    payload: UpdateScheduleRequest,
) -> ScheduleResponse:
    """Apply a partial update, revalidating the day lists against the final cadence."""
    schedule = await get_schedule(session, schedule_id)
    changes = payload.model_dump(exclude_unset=True)

    merged = {
        "name": schedule.name,
        "cadence": schedule.cadence,
        "payout_days": schedule.payout_days,
        "cutoff_days": schedule.cutoff_days,
        "description": schedule.description,
        "overtime_multiplier": schedule.overtime_multiplier,
        "regular_hours_per_day": schedule.regular_hours_per_day,
        "work_days_per_week": schedule.work_days_per_week,
        "is_active": schedule.is_active,
        **{k: v for k, v in changes.items() if v is not None},
    }
    try:
        validated = CreateScheduleRequest.model_validate(merged)
    except ValueError as exc:
        raise ValidationError(str(exc)) from None

    schedule.name = validated.name
    schedule.cadence = validated.cadence.value
    schedule.payout_days = validated.payout_days
    schedule.cutoff_days = validated.cutoff_days
    schedule.description = validated.description
    schedule.overtime_multiplier = validated.overtime_multiplier
    schedule.regular_hours_per_day = validated.regular_hours_per_day
    schedule.work_days_per_week = validated.work_days_per_week
    schedule.is_active = validated.is_active
    session.add(schedule)

    await session.commit()
    await session.refresh(schedule)
    return _build_schedule_response(schedule)


async def delete_schedule(
    session: AsyncSession,
    staff_service: StaffService,
    schedule_id: uuid.UUID,
) -> None:
    """Delete a schedule that no staff member is assigned to."""
    schedule = await get_schedule(session, schedule_id)

    assigned = await staff_service.count_by_schedule(schedule_id)
    if assigned > 0:
        raise ConflictError(f"Cannot delete schedule while {assigned} staff member(s) are assigned to it")

    await session.delete(schedule)
    await session.commit()
    logger.info("Deleted payroll schedule %s", schedule_id)


async def get_next_payout(
    session: AsyncSession,
    schedule_id: uuid.UUID,
    on: date | None = None,
) -> NextPayoutResponse:
    """Next payout date and the cutoff period active on ``on`` (default today)."""
    schedule = await get_schedule(session, schedule_id)
    today = on or business_today()

    payout = next_payout_date(schedule.cadence, schedule.payout_days, today)
    start, end = cutoff_period(schedule.cadence, schedule.cutoff_days, today)

    return NextPayoutResponse(
        schedule_id=schedule.id,
        next_payout_date=payout,
        cutoff_period=CutoffPeriod(start_date=start, end_date=end),
    )


async def list_schedule_staff(
    session: AsyncSession,
    staff_service: StaffService,
    schedule_id: uuid.UUID,
) -> ScheduleStaffResponse:
    """Staff members assigned to a schedule."""
    await get_schedule(session, schedule_id)
    staff = await staff_service.list_by_schedule(schedule_id)
    return ScheduleStaffResponse(
        items=[ScheduleStaffItem(id=s.id, name=s.name, position=s.position, status=s.status) for s in staff],
        total=len(staff),
    )

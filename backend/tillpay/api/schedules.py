# ruff: noqa: B008, TC001, TC003
from __future__ import annotations

import uuid
from datetime import date

from fastapi import APIRouter, Query, status

from tillpay.api.deps import StaffServiceDep
from tillpay.db import SessionDep
from tillpay.schemas.schedule import (
    CreateScheduleRequest,
    NextPayoutResponse,
    ScheduleListResponse,
    ScheduleResponse,
    ScheduleStaffResponse,
    UpdateScheduleRequest,
)
from tillpay.services import schedule as schedule_service

schedules_router = APIRouter(prefix="/payroll-schedules", tags=["payroll-schedules"])


@schedules_router.post("", response_model=ScheduleResponse, status_code=status.HTTP_201_CREATED)
async def create_schedule(payload: CreateScheduleRequest, session: SessionDep) -> ScheduleResponse:
    """Create a payroll schedule."""
    return await schedule_service.create_schedule(session, payload)


@schedules_router.get("", response_model=ScheduleListResponse)
async def list_schedules(session: SessionDep) -> ScheduleListResponse:
    """List payroll schedules."""
    return await schedule_service.list_schedules(session)


@schedules_router.get("/{schedule_id}", response_model=ScheduleResponse)
async def get_schedule(schedule_id: uuid.UUID, session: SessionDep) -> ScheduleResponse:
    """Get a payroll schedule."""
    return await schedule_service.get_schedule_detail(session, schedule_id)


@schedules_router.patch("/{schedule_id}", response_model=ScheduleResponse)
async def update_schedule(
    schedule_id: uuid.UUID,
    payload: UpdateScheduleRequest,
    session: SessionDep,
) -> ScheduleResponse:
    """Partially update a payroll schedule."""
    return await schedule_service.update_schedule(session, schedule_id, payload)


@schedules_router.delete("/{schedule_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_schedule(
    schedule_id: uuid.UUID,
    session: SessionDep,
    staff_service: StaffServiceDep,
) -> None:
    """Delete a payroll schedule with no assigned staff."""
    await schedule_service.delete_schedule(session, staff_service, schedule_id)


@schedules_router.get("/{schedule_id}/next-payout", response_model=NextPayoutResponse)
async def get_next_payout(
    schedule_id: uuid.UUID,
    session: SessionDep,
    on: date | None = Query(default=None),
) -> NextPayoutResponse:
    """Next payout date and active cutoff period, as of ``on`` or today."""
    return await schedule_service.get_next_payout(session, schedule_id, on)


@schedules_router.get("/{schedule_id}/staff", response_model=ScheduleStaffResponse)
async def list_schedule_staff(
    schedule_id: uuid.UUID,
    session: SessionDep,
    staff_service: StaffServiceDep,
) -> ScheduleStaffResponse:
    """Staff assigned to a payroll schedule."""
    return await schedule_service.list_schedule_staff(session, staff_service, schedule_id)

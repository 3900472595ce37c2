# ruff: noqa: TC001, TC003
from __future__ import annotations

import uuid

from fastapi import APIRouter, status

from tillpay.api.deps import HolidayCalendarDep, StaffServiceDep, TimeLogServiceDep
from tillpay.db import SessionDep
from tillpay.schemas.payroll import CreatePayrollRequest, PayrollListResponse, PayrollRecordResponse
from tillpay.services import payroll as payroll_service

payroll_router = APIRouter(prefix="/payroll", tags=["payroll"])


@payroll_router.post("", response_model=PayrollRecordResponse, status_code=status.HTTP_201_CREATED)
async def create_payroll_record(
    payload: CreatePayrollRequest,
    session: SessionDep,
    calendar: HolidayCalendarDep,
    staff_service: StaffServiceDep,
    time_log_service: TimeLogServiceDep,
) -> PayrollRecordResponse:
    """Aggregate a payroll record for one staff member and period."""
    return await payroll_service.create_payroll_record(session, payload, calendar, staff_service, time_log_service)


@payroll_router.get("/staff/{staff_id}", response_model=PayrollListResponse)
async def list_staff_payroll(staff_id: uuid.UUID, session: SessionDep) -> PayrollListResponse:
    """Payroll history for a staff member."""
    return await payroll_service.list_staff_payroll(session, staff_id)


@payroll_router.get("/{record_id}", response_model=PayrollRecordResponse)
async def get_payroll_record(record_id: uuid.UUID, session: SessionDep) -> PayrollRecordResponse:
    """Get a payroll record."""
    return await payroll_service.get_payroll_record(session, record_id)

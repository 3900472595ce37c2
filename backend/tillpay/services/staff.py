# ruff: noqa: TC003
from __future__ import annotations

import uuid
from decimal import Decimal
from typing import Protocol, runtime_checkable

from pydantic import BaseModel, Field

from tillpay.models.enums import StaffStatus


class StaffProfile(BaseModel):
    """Pay-relevant staff metadata from the staff directory."""

    id: uuid.UUID
    name: str
    position: str
    daily_rate: Decimal = Field(ge=0)
    basic_salary: Decimal | None = Field(default=None, ge=0)
    scheduled_hours_per_day: int = Field(default=8, ge=1, le=24)
    allowances: Decimal = Field(default=Decimal("0"), ge=0)
    payroll_schedule_id: uuid.UUID | None = None
    status: StaffStatus = StaffStatus.ACTIVE


@runtime_checkable
class StaffService(Protocol):
    """Interface for the staff directory."""

    async def get_staff(self, staff_id: uuid.UUID) -> StaffProfile | None:
        """Fetch a staff profile. Returns None if not found."""
        ...

    async def list_staff(self) -> list[StaffProfile]:
        """List all staff."""
        ...

    async def list_by_schedule(self, schedule_id: uuid.UUID) -> list[StaffProfile]:
        """List staff assigned to a payroll schedule."""
        ...

    async def count_by_schedule(self, schedule_id: uuid.UUID) -> int:
        """Count staff assigned to a payroll schedule."""
        ...


class InMemoryStaffService:
    """In-memory stub implementation for development."""

    def __init__(self) -> None:
        self._staff: dict[uuid.UUID, StaffProfile] = {}

    def seed(self, staff: StaffProfile) -> None:
        """Seed a staff member for testing."""
        self._staff[staff.id] = staff

    async def get_staff(self, staff_id: uuid.UUID) -> StaffProfile | None:
        return self._staff.get(staff_id)

    async def list_staff(self) -> list[StaffProfile]:
        return list(self._staff.values())

    async def list_by_schedule(self, schedule_id: uuid.UUID) -> list[StaffProfile]:
        return [s for s in self._staff.values() if s.payroll_schedule_id == schedule_id]

    async def count_by_schedule(self, schedule_id: uuid.UUID) -> int:
        return len(await self.list_by_schedule(schedule_id))


_staff_service: StaffService = InMemoryStaffService()


def get_staff_service() -> StaffService:
    """FastAPI dependency for the staff directory."""
    return _staff_service


def set_staff_service(service: StaffService) -> None:
    """Override the service (for testing or production wiring)."""
    global _staff_service
    _staff_service = service

from __future__ import annotations

from decimal import Decimal

import sqlalchemy as sa
from sqlmodel import Field

from tillpay.models.base import TimestampMixin, UUIDBase
from tillpay.models.enums import PayrollCadence


class PayrollScheduleDefinition(UUIDBase, TimestampMixin, table=True):
    """Administrator-defined payout cadence with its payout and cutoff days."""

    __tablename__ = "payroll_schedule"

    name: str = Field(max_length=255)
    cadence: str = Field(default=PayrollCadence.SEMI_MONTHLY, max_length=20)
    # Day-of-month for monthly cadences, 0=Sunday..6=Saturday for weekly ones.
    payout_days: list[int] = Field(default_factory=list, sa_type=sa.JSON)
    cutoff_days: list[int] = Field(default_factory=list, sa_type=sa.JSON)
    description: str | None = None
    overtime_multiplier: Decimal = Field(default=Decimal("1.25"), sa_type=sa.Numeric(5, 2))  # ty: ignore[invalid-argument-type]
    regular_hours_per_day: int = Field(default=8)
    work_days_per_week: int = Field(default=6)
    is_active: bool = Field(default=True, sa_column_kwargs={"server_default": sa.true()})

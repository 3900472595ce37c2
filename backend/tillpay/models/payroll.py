# ruff: noqa: TC003
from __future__ import annotations

import uuid
from datetime import date
from decimal import Decimal
from typing import Any

import sqlalchemy as sa
from sqlmodel import Field

from tillpay.models.base import TimestampMixin, UUIDBase, money_field


class PayrollRecord(UUIDBase, TimestampMixin, table=True):
    """One payroll run result for a staff member. Never edited after creation."""

    __tablename__ = "payroll_record"
    __table_args__ = (sa.UniqueConstraint("staff_id", "period", name="uq_payroll_staff_period"),)

    staff_id: uuid.UUID = Field(index=True)
    period: date = Field(index=True)
    period_start: date
    period_end: date

    basic_pay: Decimal = money_field()
    overtime_pay: Decimal = money_field()
    allowances: Decimal = money_field()
    holiday_pay: Decimal = money_field()
    thirteenth_month_pay: Decimal = money_field()

    holiday_bonus: Decimal = money_field()
    performance_bonus: Decimal = money_field()
    other_bonus: Decimal = money_field()

    late_deduction: Decimal = money_field()
    absence_deduction: Decimal = money_field()

    total_hours_worked: Decimal = money_field()
    overtime_hours: Decimal = money_field()
    net_pay: Decimal = money_field()

    holidays_worked: list[dict[str, Any]] = Field(default_factory=list, sa_type=sa.JSON)

    @property
    def gross_pay(self) -> Decimal:
        return (
            self.basic_pay
            + self.overtime_pay
            + self.allowances
            + self.holiday_pay
            + self.thirteenth_month_pay
            + self.holiday_bonus
            + self.performance_bonus
            + self.other_bonus
        )

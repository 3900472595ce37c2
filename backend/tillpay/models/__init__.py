from sqlmodel import SQLModel

from tillpay.models.base import TimestampMixin, UUIDBase
from tillpay.models.cash_float import CashFloatAuditEntry, CashFloatState
from tillpay.models.enums import (
    CashFloatAction,
    HolidaySource,
    HolidayType,
    PayrollCadence,
    StaffStatus,
)
from tillpay.models.holiday import LocalHoliday
from tillpay.models.payroll import PayrollRecord
from tillpay.models.schedule import PayrollScheduleDefinition

__all__ = [
    "CashFloatAction",
    "CashFloatAuditEntry",
    "CashFloatState",
    "HolidaySource",
    "HolidayType",
    "LocalHoliday",
    "PayrollCadence",
    "PayrollRecord",
    "PayrollScheduleDefinition",
    "SQLModel",
    "StaffStatus",
    "TimestampMixin",
    "UUIDBase",
]

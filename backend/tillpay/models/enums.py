from __future__ import annotations

import enum


class HolidayType(enum.StrEnum):
    """Labor-code classification driving the holiday pay multiplier."""

    REGULAR = "regular"
    SPECIAL = "special"
    LOCAL = "local"


class HolidaySource(enum.StrEnum):
    """Where a resolved holiday came from."""

    EXTERNAL = "external"
    GENERATED = "generated"
    CONFIGURED = "configured"


class PayrollCadence(enum.StrEnum):
    """How often a payroll schedule pays out."""

    MONTHLY = "monthly"
    SEMI_MONTHLY = "semi-monthly"
    WEEKLY = "weekly"
    BI_WEEKLY = "bi-weekly"


class CashFloatAction(enum.StrEnum):
    """Action recorded in the cash-float audit trail."""

    INITIALIZE = "initialize"
    SET_FLOAT = "set_float"
    TRANSACTION = "transaction"
    DAILY_RESET = "daily_reset"


class StaffStatus(enum.StrEnum):
    """Employment status reported by the staff provider."""

    ACTIVE = "Active"
    ON_LEAVE = "On Leave"
    INACTIVE = "Inactive"

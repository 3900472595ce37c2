# ruff: noqa: TC003
from __future__ import annotations

import uuid
from datetime import date, datetime
from decimal import Decimal
from typing import Any

from pydantic import BaseModel, Field

from tillpay.models.enums import CashFloatAction

# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class DailyResetSettings(BaseModel):
    """Whether the float is reset every day, and to how much."""

    enabled: bool
    amount: Decimal


class AuditEntryResponse(BaseModel):
    """A single cash-float audit entry."""

    id: uuid.UUID
    sequence: int
    timestamp: datetime
    action: CashFloatAction
    previous_amount: Decimal
    new_amount: Decimal
    change: Decimal
    reason: str
    metadata: dict[str, Any]


class CashFloatResponse(BaseModel):
    """Read-only snapshot of the cash float."""

    current_amount: Decimal
    daily_reset_settings: DailyResetSettings
    last_reset_date: date | None
    version: int
    audit_trail: list[AuditEntryResponse]


class CashFloatChangeResponse(BaseModel):
    """Result of a balance-changing operation."""

    previous_amount: Decimal
    new_amount: Decimal
    audit_entry: AuditEntryResponse


class AuditTrailResponse(BaseModel):
    """Filtered audit entries, oldest first."""

    items: list[AuditEntryResponse]
    count: int


# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------


class SetFloatRequest(BaseModel):
    """Request body for a manual float adjustment."""

    amount: Decimal
    reason: str = Field(default="manual_adjustment", min_length=1, max_length=255)
    metadata: dict[str, Any] = Field(default_factory=dict)


class OrderContext(BaseModel):
    """Point-of-sale details of the order that required change."""

    order_id: str | None = None
    cash_received: Decimal | None = None
    order_total: Decimal | None = None


class CashTransactionRequest(BaseModel):
    """Request body for giving change out of the float."""

    change_given: Decimal
    order: OrderContext = Field(default_factory=OrderContext)
    metadata: dict[str, Any] = Field(default_factory=dict)


class ConfigureDailyResetRequest(BaseModel):
    """Request body for daily reset configuration."""

    enabled: bool
    amount: Decimal | None = None

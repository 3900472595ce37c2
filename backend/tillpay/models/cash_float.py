# ruff: noqa: TC003
from __future__ import annotations

import uuid
from datetime import date, datetime
from decimal import Decimal
from typing import Any

import sqlalchemy as sa
from sqlmodel import Field

from tillpay.models.base import UUIDBase, money_field, now_utc


class CashFloatState(UUIDBase, table=True):
    """The shared cash drawer balance. Exactly one row exists."""

    __tablename__ = "cash_float_state"

    current_amount: Decimal = money_field(ge=0)
    daily_reset_enabled: bool = Field(default=False, sa_column_kwargs={"server_default": sa.false()})
    daily_reset_amount: Decimal = money_field()
    last_reset_date: date | None = None
    updated_at: datetime = Field(  # type: ignore[call-overload]
        default_factory=now_utc,
        sa_type=sa.DateTime(timezone=True),
        sa_column_kwargs={"server_default": sa.func.now(), "onupdate": sa.func.now()},
    )
    version: int = Field(default=1, sa_column_kwargs={"server_default": "1"})


class CashFloatAuditEntry(UUIDBase, table=True):
    """Append-only record of one cash-float balance change."""

    __tablename__ = "cash_float_audit_entry"
    __table_args__ = (sa.UniqueConstraint("state_id", "sequence", name="uq_cash_float_audit_sequence"),)

    state_id: uuid.UUID = Field(
        sa_column=sa.Column(
            sa.Uuid, sa.ForeignKey("cash_float_state.id", ondelete="CASCADE"), nullable=False, index=True
        ),
    )
    sequence: int
    timestamp: datetime = Field(
        default_factory=now_utc,
        index=True,
        sa_type=sa.DateTime(timezone=True),  # ty: ignore[invalid-argument-type]
    )
    action: str = Field(max_length=50)
    previous_amount: Decimal = money_field()
    new_amount: Decimal = money_field()
    change: Decimal = money_field()
    reason: str = Field(max_length=255)
    metadata_json: dict[str, Any] | None = Field(default=None, sa_type=sa.JSON)

# ruff: noqa: TC003
from __future__ import annotations

import datetime

import sqlalchemy as sa
from sqlmodel import Field

from tillpay.models.base import TimestampMixin, UUIDBase


class LocalHoliday(UUIDBase, TimestampMixin, table=True):
    """A locally declared holiday priced at the local-holiday multiplier."""

    __tablename__ = "local_holiday"
    __table_args__ = (sa.UniqueConstraint("date", name="uq_local_holiday_date"),)

    date: datetime.date = Field(index=True)
    name: str = Field(max_length=255)

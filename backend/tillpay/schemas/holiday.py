# ruff: noqa: TC003
from __future__ import annotations

import uuid
from datetime import date
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from tillpay.models.enums import HolidaySource, HolidayType


class Holiday(BaseModel):
    """A resolved public holiday. Regenerated per year, never mutated."""

    model_config = ConfigDict(frozen=True)

    date: date
    name: str
    local_name: str
    type: HolidayType
    pay_multiplier: Decimal = Field(ge=1)
    is_approximate: bool = False
    source: HolidaySource
    is_global: bool = True
    counties: tuple[str, ...] = ()


class ExternalHoliday(BaseModel):
    """One item of the Nager.Date PublicHolidays payload."""

    date: date
    name: str
    local_name: str | None = Field(default=None, alias="localName")
    is_global: bool | None = Field(default=None, alias="global")
    counties: list[str] | None = None


class CreateLocalHolidayRequest(BaseModel):
    """Request body for declaring a local holiday."""

    date: date
    name: str = Field(min_length=1, max_length=255)


class LocalHolidayResponse(BaseModel):
    """Response schema for a local holiday."""

    id: uuid.UUID
    date: date
    name: str


class LocalHolidayListResponse(BaseModel):
    """Paginated list of local holidays."""

    items: list[LocalHolidayResponse]
    total: int


class HolidayCalendarResponse(BaseModel):
    """All holidays that apply in a year."""

    year: int
    items: list[Holiday]
    total: int

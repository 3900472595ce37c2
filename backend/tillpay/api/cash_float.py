# ruff: noqa: B008, TC001, TC003
from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Query

from tillpay.api.deps import RequestMetadataDep
from tillpay.db import SessionDep
from tillpay.models.enums import CashFloatAction
from tillpay.schemas.cash_float import (
    AuditTrailResponse,
    CashFloatChangeResponse,
    CashFloatResponse,
    CashTransactionRequest,
    ConfigureDailyResetRequest,
    DailyResetSettings,
    SetFloatRequest,
)
from tillpay.services import cash_float as cash_float_service

cash_float_router = APIRouter(prefix="/cash-float", tags=["cash-float"])


@cash_float_router.get("", response_model=CashFloatResponse)
async def get_cash_float(session: SessionDep) -> CashFloatResponse:
    """Current float, reset settings, and audit trail."""
    return await cash_float_service.get_cash_float(session)


@cash_float_router.post("/set", response_model=CashFloatChangeResponse)
async def set_float(
    payload: SetFloatRequest,
    session: SessionDep,
    request_metadata: RequestMetadataDep,
) -> CashFloatChangeResponse:
    """Overwrite the float with a counted amount."""
    metadata = {**request_metadata, **payload.metadata}
    return await cash_float_service.set_float(session, payload.amount, payload.reason, metadata)


@cash_float_router.post("/transaction", response_model=CashFloatChangeResponse)
async def apply_transaction(
    payload: CashTransactionRequest,
    session: SessionDep,
    request_metadata: RequestMetadataDep,
) -> CashFloatChangeResponse:
    """Give change for a cash sale out of the float."""
    metadata = {**request_metadata, **payload.metadata}
    return await cash_float_service.apply_transaction(session, payload.change_given, payload.order, metadata)


@cash_float_router.post("/daily-reset/config", response_model=DailyResetSettings)
async def configure_daily_reset(
    payload: ConfigureDailyResetRequest,
    session: SessionDep,
) -> DailyResetSettings:
    """Enable or disable the daily reset."""
    return await cash_float_service.configure_daily_reset(session, payload.enabled, payload.amount)


@cash_float_router.post("/daily-reset", response_model=CashFloatChangeResponse)
async def perform_daily_reset(
    session: SessionDep,
    request_metadata: RequestMetadataDep,
) -> CashFloatChangeResponse:
    """Reset the float to its configured opening amount now."""
    return await cash_float_service.perform_daily_reset(session, metadata={"trigger": "manual", **request_metadata})


@cash_float_router.get("/audit-trail", response_model=AuditTrailResponse)
async def get_audit_trail(
    session: SessionDep,
    date_from: date | None = Query(default=None),
    date_to: date | None = Query(default=None),
    action: CashFloatAction | None = Query(default=None),
    limit: int | None = Query(default=None, ge=1, le=100),
) -> AuditTrailResponse:
    """Filter the audit trail by date range and action, keeping the newest ``limit``."""
    return await cash_float_service.get_audit_trail(session, date_from, date_to, action, limit)

from __future__ import annotations

import logging
from datetime import UTC, date, datetime, time, timedelta
from decimal import Decimal
from typing import TYPE_CHECKING, Any

from sqlalchemy import delete, func, select
from sqlmodel import col

from tillpay.config import get_settings
from tillpay.exceptions import InsufficientFundsError, ValidationError
from tillpay.models.cash_float import CashFloatAuditEntry, CashFloatState
from tillpay.models.enums import CashFloatAction
from tillpay.schemas.cash_float import (
    AuditEntryResponse,
    AuditTrailResponse,
    CashFloatChangeResponse,
    CashFloatResponse,
    DailyResetSettings,
)
from tillpay.services.compensation import round_money, to_decimal
from tillpay.services.time_log import business_today

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from tillpay.schemas.cash_float import OrderContext

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _build_audit_entry_response(entry: CashFloatAuditEntry) -> AuditEntryResponse:
    return AuditEntryResponse(
        id=entry.id,
        sequence=entry.sequence,
        timestamp=entry.timestamp,
        action=CashFloatAction(entry.action),
        previous_amount=entry.previous_amount,
        new_amount=entry.new_amount,
        change=entry.change,
        reason=entry.reason,
        metadata=entry.metadata_json or {},
    )


def _as_utc(moment: datetime) -> datetime:
    # SQLite hands back naive timestamps; they were written as UTC.
    return moment.replace(tzinfo=UTC) if moment.tzinfo is None else moment


async def _load_trail(session: AsyncSession, state: CashFloatState) -> list[CashFloatAuditEntry]:
    result = await session.execute(
        select(CashFloatAuditEntry)
        .where(col(CashFloatAuditEntry.state_id) == state.id)
        .order_by(col(CashFloatAuditEntry.sequence))
    )
    return list(result.scalars().all())


async def _append_audit_entry(
    session: AsyncSession,
    state: CashFloatState,
    *,
    action: CashFloatAction,
    previous_amount: Decimal,
    new_amount: Decimal,
    reason: str,
    metadata: dict[str, Any],
) -> CashFloatAuditEntry:
    """Append an entry, then trim the trail to the configured cap from the oldest end."""
    result = await session.execute(
        select(func.coalesce(func.max(col(CashFloatAuditEntry.sequence)), 0)).where(
            col(CashFloatAuditEntry.state_id) == state.id
        )
    )
    sequence = int(result.scalar_one()) + 1

    entry = CashFloatAuditEntry(
        state_id=state.id,
        sequence=sequence,
        action=action.value,
        previous_amount=previous_amount,
        new_amount=new_amount,
        change=new_amount - previous_amount,
        reason=reason,
        metadata_json=metadata,
    )
    session.add(entry)
    await session.flush()

    cap = get_settings().cash_float_audit_cap
    await session.execute(
        delete(CashFloatAuditEntry).where(
            col(CashFloatAuditEntry.state_id) == state.id,
            col(CashFloatAuditEntry.sequence) <= sequence - cap,
        )
    )
    return entry


async def _get_or_create_state_for_update(session: AsyncSession) -> CashFloatState:
    """Get the float row with a FOR UPDATE lock, creating and seeding it if absent."""
    result = await session.execute(
        select(CashFloatState).order_by(col(CashFloatState.id)).limit(1).with_for_update()
    )
    state = result.scalar_one_or_none()

    if state is None:
        initial = round_money(to_decimal(get_settings().cash_float_initial_amount))
        state = CashFloatState(
            current_amount=initial,
            daily_reset_enabled=False,
            daily_reset_amount=initial,
            version=1,
        )
        session.add(state)
        await session.flush()
        await _append_audit_entry(
            session,
            state,
            action=CashFloatAction.INITIALIZE,
            previous_amount=Decimal("0.00"),
            new_amount=initial,
            reason="first_time_setup",
            metadata={"source": "backend_initialization", "note": "Default cash float set for first-time use"},
        )
        logger.info("Initialized cash float at %s", initial)

    return state


async def _get_state_for_read(session: AsyncSession) -> CashFloatState:
    """Plain read of the float row; only the first-time create takes the lock."""
    result = await session.execute(select(CashFloatState).order_by(col(CashFloatState.id)).limit(1))
    state = result.scalar_one_or_none()
    if state is None:
        state = await _get_or_create_state_for_update(session)
    return state


async def _commit_change(
    session: AsyncSession,
    state: CashFloatState,
    entry: CashFloatAuditEntry,
    previous_amount: Decimal,
) -> CashFloatChangeResponse:
    state.version += 1
    state.updated_at = datetime.now(UTC)
    session.add(state)
    await session.commit()
    await session.refresh(entry)
    return CashFloatChangeResponse(
        previous_amount=previous_amount,
        new_amount=entry.new_amount,
        audit_entry=_build_audit_entry_response(entry),
    )


# ---------------------------------------------------------------------------
# Read path
# ---------------------------------------------------------------------------


async def initialize_cash_float(session: AsyncSession) -> CashFloatResponse:
    """Create the float on first start; a no-op afterwards. Run from application startup."""
    await _get_or_create_state_for_update(session)
    await session.commit()
    return await get_cash_float(session)


async def get_cash_float(session: AsyncSession) -> CashFloatResponse:
    """Read-only snapshot of the float and its full audit trail."""
    state = await _get_state_for_read(session)
    trail = await _load_trail(session, state)
    await session.commit()
    return CashFloatResponse(
        current_amount=state.current_amount,
        daily_reset_settings=DailyResetSettings(
            enabled=state.daily_reset_enabled,
            amount=state.daily_reset_amount,
        ),
        last_reset_date=state.last_reset_date,
        version=state.version,
        audit_trail=[_build_audit_entry_response(e) for e in trail],
    )


async def get_audit_trail(
    session: AsyncSession,
    date_from: date | datetime | None = None,
    date_to: date | datetime | None = None,
    action: CashFloatAction | None = None,
    limit: int | None = None,
) -> AuditTrailResponse:
    """Filter the trail, then keep the last ``limit`` matches.

    Date bounds are inclusive; a plain date as ``date_to`` covers that whole day.
    """
    state = await _get_state_for_read(session)
    trail = await _load_trail(session, state)
    await session.commit()

    if date_from is not None:
        lower = date_from if isinstance(date_from, datetime) else datetime.combine(date_from, time.min)
        lower = _as_utc(lower)
        trail = [e for e in trail if _as_utc(e.timestamp) >= lower]

    if date_to is not None:
        if isinstance(date_to, datetime):
            upper = _as_utc(date_to)
            trail = [e for e in trail if _as_utc(e.timestamp) <= upper]
        else:
            next_day = _as_utc(datetime.combine(date_to + timedelta(days=1), time.min))
            trail = [e for e in trail if _as_utc(e.timestamp) < next_day]

    if action is not None:
        trail = [e for e in trail if e.action == action.value]

    if limit is not None:
        trail = trail[-limit:] if limit > 0 else []

    return AuditTrailResponse(items=[_build_audit_entry_response(e) for e in trail], count=len(trail))


# ---------------------------------------------------------------------------
# Write path
# ---------------------------------------------------------------------------


async def set_float(
    session: AsyncSession,
    amount: Decimal | float,
    reason: str = "manual_adjustment",
    metadata: dict[str, Any] | None = None,
) -> CashFloatChangeResponse:
    """Overwrite the float with a counted amount."""
    raw = to_decimal(amount)
    if raw < 0:
        raise ValidationError("Valid amount is required and cannot be negative")
    value = round_money(raw)

    state = await _get_or_create_state_for_update(session)
    previous = state.current_amount
    state.current_amount = value

    entry = await _append_audit_entry(
        session,
        state,
        action=CashFloatAction.SET_FLOAT,
        previous_amount=previous,
        new_amount=value,
        reason=reason,
        metadata=dict(metadata or {}),
    )
    logger.info("Cash float set from %s to %s (%s)", previous, value, reason)
    return await _commit_change(session, state, entry, previous)


async def apply_transaction(
    session: AsyncSession,
    change_given: Decimal | float,
    order: OrderContext | None = None,
    metadata: dict[str, Any] | None = None,
) -> CashFloatChangeResponse:
    """Pay out change for a cash sale from the float."""
    raw = to_decimal(change_given)
    if raw < 0:
        raise ValidationError("Valid change amount is required")
    change = round_money(raw)

    state = await _get_or_create_state_for_update(session)
    previous = state.current_amount

    if change > previous:
        shortfall = change - previous
        await session.rollback()
        raise InsufficientFundsError(
            f"Insufficient cash float. Cannot provide {change:.2f} change. Cash float only has {previous:.2f}",
            shortfall=shortfall,
        )

    new_amount = max(Decimal("0.00"), previous - change)
    state.current_amount = new_amount

    details: dict[str, Any] = {"change_given": str(change)}
    if order is not None:
        details.update(order.model_dump(mode="json", exclude_none=True))
    details.update(metadata or {})

    entry = await _append_audit_entry(
        session,
        state,
        action=CashFloatAction.TRANSACTION,
        previous_amount=previous,
        new_amount=new_amount,
        reason="cash_transaction",
        metadata=details,
    )
    logger.info("Cash float gave %s change: %s -> %s", change, previous, new_amount)
    return await _commit_change(session, state, entry, previous)


async def configure_daily_reset(
    session: AsyncSession,
    enabled: bool,
    amount: Decimal | float | None = None,
) -> DailyResetSettings:
    """Turn the daily reset on or off; enabling keeps the old amount when none is given."""
    value = round_money(to_decimal(amount)) if amount is not None else None

    state = await _get_or_create_state_for_update(session)
    if enabled:
        target = value if value is not None else state.daily_reset_amount
        if target <= 0:
            await session.rollback()
            raise ValidationError("Reset amount must be greater than zero when daily reset is enabled")
        state.daily_reset_amount = target
    state.daily_reset_enabled = enabled

    state.version += 1
    session.add(state)
    await session.commit()
    logger.info("Cash float daily reset %s at %s", "enabled" if enabled else "disabled", state.daily_reset_amount)
    return DailyResetSettings(enabled=state.daily_reset_enabled, amount=state.daily_reset_amount)


async def perform_daily_reset(
    session: AsyncSession,
    today: date | None = None,
    metadata: dict[str, Any] | None = None,
) -> CashFloatChangeResponse:
    """Reset the float to the configured opening amount."""
    reset_day = today or business_today()

    state = await _get_or_create_state_for_update(session)
    if not state.daily_reset_enabled:
        await session.rollback()
        raise ValidationError("Daily reset is not enabled")

    previous = state.current_amount
    state.current_amount = state.daily_reset_amount
    state.last_reset_date = reset_day

    entry = await _append_audit_entry(
        session,
        state,
        action=CashFloatAction.DAILY_RESET,
        previous_amount=previous,
        new_amount=state.daily_reset_amount,
        reason="daily_reset",
        metadata={"reset_date": reset_day.isoformat(), **(metadata or {})},
    )
    logger.info("Cash float daily reset from %s to %s", previous, state.daily_reset_amount)
    return await _commit_change(session, state, entry, previous)


async def check_daily_reset(session: AsyncSession, today: date | None = None) -> bool:
    """Run the daily reset if it is enabled and has not run yet today."""
    reset_day = today or business_today()

    state = await _get_or_create_state_for_update(session)
    due = state.daily_reset_enabled and state.last_reset_date != reset_day
    if not due:
        await session.commit()
        return False

    await perform_daily_reset(session, reset_day, metadata={"trigger": "scheduled"})
    return True

"""Integration tests for payroll schedule API."""

from __future__ import annotations

import uuid
from decimal import Decimal
from typing import TYPE_CHECKING

from tillpay.services.staff import StaffProfile

if TYPE_CHECKING:
    from httpx import AsyncClient

    from tillpay.services.staff import InMemoryStaffService

BASE_URL = "/payroll-schedules"


def _schedule_payload(**overrides: object) -> dict:
    payload: dict = {
        "name": "Twice a month",
        "cadence": "semi-monthly",
        "payout_days": [15, 30],
        "cutoff_days": [10, 25],
    }
    payload.update(overrides)
    return payload


async def _create(async_client: AsyncClient, **overrides: object) -> dict:
    resp = await async_client.post(BASE_URL, json=_schedule_payload(**overrides))
    assert resp.status_code == 201, resp.text
    return resp.json()


# ---------------------------------------------------------------------------
# Create
# ---------------------------------------------------------------------------


async def test_create_schedule(async_client: AsyncClient) -> None:
    data = await _create(async_client)
    assert data["cadence"] == "semi-monthly"
    assert data["payout_days"] == [15, 30]
    assert Decimal(data["overtime_multiplier"]) == Decimal("1.25")
    assert data["regular_hours_per_day"] == 8
    assert data["is_active"] is True


async def test_create_semi_monthly_requires_two_days(async_client: AsyncClient) -> None:
    resp = await async_client.post(BASE_URL, json=_schedule_payload(payout_days=[15]))
    assert resp.status_code == 422


async def test_create_weekly_rejects_day_of_month(async_client: AsyncClient) -> None:
    resp = await async_client.post(
        BASE_URL, json=_schedule_payload(cadence="weekly", payout_days=[15], cutoff_days=[4])
    )
    assert resp.status_code == 422


async def test_create_rejects_unknown_cadence(async_client: AsyncClient) -> None:
    resp = await async_client.post(BASE_URL, json=_schedule_payload(cadence="fortnightly"))
    assert resp.status_code == 422


# ---------------------------------------------------------------------------
# Read / update
# ---------------------------------------------------------------------------


async def test_list_schedules_active_first(async_client: AsyncClient) -> None:
    await _create(async_client, name="B retired", is_active=False)
    await _create(async_client, name="A current")
    await _create(async_client, name="C current")

    resp = await async_client.get(BASE_URL)
    names = [s["name"] for s in resp.json()["items"]]
    assert names == ["A current", "C current", "B retired"]


async def test_get_unknown_schedule_returns_404(async_client: AsyncClient) -> None:
    resp = await async_client.get(f"{BASE_URL}/{uuid.uuid4()}")
    assert resp.status_code == 404


async def test_update_schedule_changes_cadence_with_days(async_client: AsyncClient) -> None:
    created = await _create(async_client)

    resp = await async_client.patch(
        f"{BASE_URL}/{created['id']}",
        json={"cadence": "weekly", "payout_days": [5], "cutoff_days": [4]},
    )
    assert resp.status_code == 200
    data = resp.json()
    assert data["cadence"] == "weekly"
    assert data["payout_days"] == [5]
    assert data["name"] == "Twice a month"


async def test_update_schedule_rejects_inconsistent_days(async_client: AsyncClient) -> None:
    created = await _create(async_client)

    resp = await async_client.patch(f"{BASE_URL}/{created['id']}", json={"cadence": "monthly"})
    assert resp.status_code == 400


# ---------------------------------------------------------------------------
# Delete
# ---------------------------------------------------------------------------


async def test_delete_unused_schedule(async_client: AsyncClient) -> None:
    created = await _create(async_client)

    resp = await async_client.delete(f"{BASE_URL}/{created['id']}")
    assert resp.status_code == 204
    assert (await async_client.get(f"{BASE_URL}/{created['id']}")).status_code == 404


async def test_delete_schedule_in_use_conflicts(
    async_client: AsyncClient,
    staff_service: InMemoryStaffService,
) -> None:
    created = await _create(async_client)
    staff_service.seed(
        StaffProfile(
            id=uuid.uuid4(),
            name="Maria Santos",
            position="Cashier",
            daily_rate=Decimal("645"),
            payroll_schedule_id=uuid.UUID(created["id"]),
        )
    )

    resp = await async_client.delete(f"{BASE_URL}/{created['id']}")
    assert resp.status_code == 409


# ---------------------------------------------------------------------------
# Next payout / staff
# ---------------------------------------------------------------------------


async def test_next_payout(async_client: AsyncClient) -> None:
    created = await _create(async_client)

    resp = await async_client.get(f"{BASE_URL}/{created['id']}/next-payout", params={"on": "2024-01-20"})
    assert resp.status_code == 200
    data = resp.json()
    assert data["next_payout_date"] == "2024-01-30"
    assert data["cutoff_period"] == {"start_date": "2024-01-11", "end_date": "2024-01-25"}


async def test_next_payout_rolls_into_next_month(async_client: AsyncClient) -> None:
    created = await _create(async_client)

    resp = await async_client.get(f"{BASE_URL}/{created['id']}/next-payout", params={"on": "2024-01-30"})
    assert resp.json()["next_payout_date"] == "2024-02-15"


async def test_list_schedule_staff(async_client: AsyncClient, staff_service: InMemoryStaffService) -> None:
    created = await _create(async_client)
    schedule_id = uuid.UUID(created["id"])
    staff_service.seed(
        StaffProfile(
            id=uuid.uuid4(),
            name="Juan",
            position="Barista",
            daily_rate=Decimal("600"),
            payroll_schedule_id=schedule_id,
        )
    )
    staff_service.seed(StaffProfile(id=uuid.uuid4(), name="Ana", position="Cook", daily_rate=Decimal("700")))

    resp = await async_client.get(f"{BASE_URL}/{created['id']}/staff")
    data = resp.json()
    assert data["total"] == 1
    assert data["items"][0]["name"] == "Juan"
    assert data["items"][0]["status"] == "Active"

"""Integration tests for the admin catalog, holiday calendar and balance routes."""

from __future__ import annotations

import uuid
from typing import TYPE_CHECKING

from sqlalchemy import select
from sqlmodel import col

from approvals.models.audit import AuditLog

if TYPE_CHECKING:
    from httpx import AsyncClient
    from sqlalchemy.ext.asyncio import AsyncSession

    from tests.conftest import People

LEAVE_TYPES_URL = "/admin/leave-types"
HOLIDAYS_URL = "/admin/holidays"
BALANCES_URL = "/admin/leave-balances"


def _leave_type_payload(code: str = "annual", max_days: int = 0, *, has_default_balance: bool = True) -> dict:
    return {"code": code, "name": code.title(), "max_days": max_days, "has_default_balance": has_default_balance}


# ---------------------------------------------------------------------------
# Admin guard
# ---------------------------------------------------------------------------


async def test_admin_routes_reject_non_admin(async_client: AsyncClient, people: People) -> None:
    for user in (people.employee, people.manager):
        resp = await async_client.post(LEAVE_TYPES_URL, json=_leave_type_payload(), headers=people.headers(user))
        assert resp.status_code == 403
        assert resp.json()["detail"] == "Admin access required"

    resp = await async_client.get(BALANCES_URL, headers=people.headers(people.manager))
    assert resp.status_code == 403


# ---------------------------------------------------------------------------
# Leave types
# ---------------------------------------------------------------------------


async def test_create_leave_type(async_client: AsyncClient, people: People, db_session: AsyncSession) -> None:
    resp = await async_client.post(
        LEAVE_TYPES_URL, json=_leave_type_payload("sick", 12), headers=people.headers(people.admin)
    )
    assert resp.status_code == 201
    data = resp.json()
    assert data["code"] == "sick"
    assert data["max_days"] == 12
    assert data["is_active"] is True

    logs = (
        await db_session.execute(select(AuditLog).where(col(AuditLog.entity_id) == uuid.UUID(data["id"])))
    ).scalars().all()
    assert len(logs) == 1
    assert logs[0].entity_type == "LEAVE_TYPE"
    assert logs[0].actor_id == people.admin.id


async def test_duplicate_leave_type_code(async_client: AsyncClient, people: People) -> None:
    headers = people.headers(people.admin)
    await async_client.post(LEAVE_TYPES_URL, json=_leave_type_payload("annual"), headers=headers)

    resp = await async_client.post(LEAVE_TYPES_URL, json=_leave_type_payload("annual"), headers=headers)
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Leave type code already exists"


async def test_update_leave_type(async_client: AsyncClient, people: People) -> None:
    headers = people.headers(people.admin)
    created = (await async_client.post(LEAVE_TYPES_URL, json=_leave_type_payload(), headers=headers)).json()

    resp = await async_client.patch(
        f"{LEAVE_TYPES_URL}/{created['id']}", json={"max_days": 25, "name": "Annual Leave"}, headers=headers
    )
    assert resp.status_code == 200
    assert resp.json()["max_days"] == 25
    assert resp.json()["name"] == "Annual Leave"
    assert resp.json()["code"] == "annual"


async def test_update_unknown_leave_type(async_client: AsyncClient, people: People) -> None:
    resp = await async_client.patch(
        f"{LEAVE_TYPES_URL}/{uuid.uuid4()}", json={"max_days": 1}, headers=people.headers(people.admin)
    )
    assert resp.status_code == 404


# ---------------------------------------------------------------------------
# Holidays
# ---------------------------------------------------------------------------


async def test_holiday_crud(async_client: AsyncClient, people: People) -> None:
    headers = people.headers(people.admin)
    resp = await async_client.post(
        HOLIDAYS_URL,
        json={"date": "2030-05-01", "name": "Labour Day", "is_recurring": False},
        headers=headers,
    )
    assert resp.status_code == 201
    holiday = resp.json()
    assert holiday["is_recurring"] is False

    resp = await async_client.patch(f"{HOLIDAYS_URL}/{holiday['id']}", json={"name": "May Day"}, headers=headers)
    assert resp.status_code == 200
    assert resp.json()["name"] == "May Day"

    resp = await async_client.delete(f"{HOLIDAYS_URL}/{holiday['id']}", headers=headers)
    assert resp.status_code == 204

    resp = await async_client.delete(f"{HOLIDAYS_URL}/{holiday['id']}", headers=headers)
    assert resp.status_code == 404
    assert resp.json()["detail"] == "Holiday not found"


async def test_holiday_year_filter_keeps_recurring(async_client: AsyncClient, people: People) -> None:
    headers = people.headers(people.admin)
    await async_client.post(
        HOLIDAYS_URL, json={"date": "2020-12-25", "name": "Christmas", "is_recurring": True}, headers=headers
    )
    await async_client.post(
        HOLIDAYS_URL, json={"date": "2030-05-01", "name": "Labour Day", "is_recurring": False}, headers=headers
    )
    await async_client.post(
        HOLIDAYS_URL, json={"date": "2031-05-01", "name": "Labour Day", "is_recurring": False}, headers=headers
    )

    resp = await async_client.get("/holidays", params={"year": 2030}, headers=people.headers(people.employee))
    assert resp.status_code == 200
    names = [(h["name"], h["date"]) for h in resp.json()["items"]]
    assert names == [("Christmas", "2020-12-25"), ("Labour Day", "2030-05-01")]

    resp = await async_client.get(HOLIDAYS_URL, headers=headers)
    assert resp.json()["total"] == 3


async def test_employee_cannot_create_holiday(async_client: AsyncClient, people: People) -> None:
    resp = await async_client.post(
        HOLIDAYS_URL, json={"date": "2030-05-01", "name": "Labour Day"}, headers=people.headers(people.employee)
    )
    assert resp.status_code == 403


# ---------------------------------------------------------------------------
# Balances
# ---------------------------------------------------------------------------


async def test_set_and_list_balances(async_client: AsyncClient, people: People) -> None:
    headers = people.headers(people.admin)
    leave_type = (await async_client.post(LEAVE_TYPES_URL, json=_leave_type_payload(), headers=headers)).json()

    resp = await async_client.put(
        BALANCES_URL,
        json={"user_id": str(people.employee.id), "leave_type_id": leave_type["id"], "balance": 9, "year": 2030},
        headers=headers,
    )
    assert resp.status_code == 200
    assert resp.json()["balance"] == 9

    resp = await async_client.get(
        BALANCES_URL, params={"user_id": str(people.employee.id), "year": 2030}, headers=headers
    )
    data = resp.json()
    assert data["total"] == 1
    assert data["items"][0]["balance"] == 9
    assert data["items"][0]["year"] == 2030


async def test_set_balance_unknown_leave_type(async_client: AsyncClient, people: People) -> None:
    resp = await async_client.put(
        BALANCES_URL,
        json={"user_id": str(people.employee.id), "leave_type_id": str(uuid.uuid4()), "balance": 1},
        headers=people.headers(people.admin),
    )
    assert resp.status_code == 404


async def test_initialize_user(async_client: AsyncClient, people: People) -> None:
    headers = people.headers(people.admin)
    await async_client.post(LEAVE_TYPES_URL, json=_leave_type_payload("annual"), headers=headers)
    await async_client.post(LEAVE_TYPES_URL, json=_leave_type_payload("cl"), headers=headers)

    resp = await async_client.post(
        f"{BALANCES_URL}/initialize", json={"user_id": str(people.employee.id), "year": 2030}, headers=headers
    )
    assert resp.status_code == 200
    data = resp.json()
    assert data["user_name"] == "Eve Employee"
    assert {b["leave_type"]: (b["balance"], b["status"]) for b in data["balances"]} == {
        "annual": (20, "created"),
        "cl": (7, "created"),
    }

    resp = await async_client.post(
        f"{BALANCES_URL}/initialize", json={"user_id": str(people.employee.id), "year": 2030}, headers=headers
    )
    assert {b["status"] for b in resp.json()["balances"]} == {"already_exists"}


async def test_initialize_unknown_user(async_client: AsyncClient, people: People) -> None:
    resp = await async_client.post(
        f"{BALANCES_URL}/initialize", json={"user_id": str(uuid.uuid4())}, headers=people.headers(people.admin)
    )
    assert resp.status_code == 404


async def test_initialize_all(async_client: AsyncClient, people: People) -> None:
    headers = people.headers(people.admin)
    await async_client.post(LEAVE_TYPES_URL, json=_leave_type_payload("annual"), headers=headers)
    await async_client.post(
        LEAVE_TYPES_URL, json=_leave_type_payload("unpaid", has_default_balance=False), headers=headers
    )

    resp = await async_client.post(f"{BALANCES_URL}/initialize-all", json={"year": 2030}, headers=headers)
    assert resp.status_code == 200
    data = resp.json()
    assert data["year"] == 2030
    assert data["total_users"] == 6
    assert data["total_created"] == 6
    assert data["total_existing"] == 0

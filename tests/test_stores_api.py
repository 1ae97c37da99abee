"""Tests for store management endpoints"""

import pytest
from httpx import AsyncClient

from conftest import auth_headers


@pytest.mark.asyncio
async def test_list_only_active_stores(client: AsyncClient, test_db, store, owner):
    response = await client.post(
        "/stores",
        json={"name": "Pending Place", "address": "99 Teheran-ro, Gangnam-gu", "capacity": 10},
        headers=auth_headers(owner),
    )
    assert response.status_code == 201

    response = await client.get("/stores")
    data = response.json()
    assert data["total"] == 1
    assert data["items"][0]["name"] == "Hanok Table"

    response = await client.get("/stores", params={"name": "hanok"})
    assert response.json()["total"] == 1


@pytest.mark.asyncio
async def test_get_store_detail(client: AsyncClient, store):
    response = await client.get(f"/stores/{store.id}")

    assert response.status_code == 200
    data = response.json()
    assert [hours["day_of_week"] for hours in data["business_hours"]] == list(range(7))
    assert data["tables"][0]["table_number"] == "T1"


@pytest.mark.asyncio
async def test_only_owners_create_stores(client: AsyncClient, customer):
    response = await client.post(
        "/stores",
        json={"name": "Not Mine", "address": "1 Jongno, Seoul", "capacity": 4},
        headers=auth_headers(customer),
    )

    assert response.status_code == 403


@pytest.mark.asyncio
async def test_replace_business_hours(client: AsyncClient, store, owner, other_owner):
    payload = {
        "business_hours": [
            {"day_of_week": day, "open_time": "17:00", "close_time": "23:00", "is_closed": day == 1}
            for day in range(7)
        ]
    }

    response = await client.put(f"/stores/{store.id}/business_hours", json=payload, headers=auth_headers(other_owner))
    assert response.status_code == 403

    response = await client.put(f"/stores/{store.id}/business_hours", json=payload, headers=auth_headers(owner))
    assert response.status_code == 200
    hours = response.json()["business_hours"]
    assert len(hours) == 7
    assert hours[0]["open_time"] == "17:00"
    assert hours[1]["is_closed"] is True
    assert hours[0]["break_start"] is None


@pytest.mark.asyncio
async def test_business_hours_validation(client: AsyncClient, store, owner):
    duplicate = {
        "business_hours": [
            {"day_of_week": 2, "open_time": "11:00", "close_time": "21:00"},
            {"day_of_week": 2, "open_time": "12:00", "close_time": "21:00"},
        ]
    }
    response = await client.put(f"/stores/{store.id}/business_hours", json=duplicate, headers=auth_headers(owner))
    assert response.status_code == 422

    half_break = {
        "business_hours": [
            {"day_of_week": 2, "open_time": "11:00", "close_time": "21:00", "break_start": "15:00"},
        ]
    }
    response = await client.put(f"/stores/{store.id}/business_hours", json=half_break, headers=auth_headers(owner))
    assert response.status_code == 422


@pytest.mark.asyncio
@pytest.mark.parametrize("hours", [
    {"open_time": "21:00", "close_time": "11:00"},
    {"open_time": "11:00", "close_time": "11:00"},
    {"open_time": "11:00", "close_time": "21:00", "break_start": "16:00", "break_end": "15:00"},
    {"open_time": "11:00", "close_time": "21:00", "break_start": "10:00", "break_end": "12:00"},
    {"open_time": "11:00", "close_time": "21:00", "break_start": "20:00", "break_end": "22:00"},
])
async def test_business_hours_must_be_ordered(client: AsyncClient, store, owner, hours):
    payload = {"business_hours": [{"day_of_week": 3, **hours}]}

    response = await client.put(f"/stores/{store.id}/business_hours", json=payload, headers=auth_headers(owner))

    assert response.status_code == 422
    assert response.json()["error"]["code"] == "VALIDATION_ERROR"


@pytest.mark.asyncio
async def test_closed_day_skips_time_order(client: AsyncClient, store, owner):
    payload = {
        "business_hours": [
            {"day_of_week": 0, "open_time": "00:00", "close_time": "00:00", "is_closed": True},
            {"day_of_week": 1, "open_time": "11:00", "close_time": "21:00", "break_start": "15:00", "break_end": "17:00"},
        ]
    }

    response = await client.put(f"/stores/{store.id}/business_hours", json=payload, headers=auth_headers(owner))

    assert response.status_code == 200
    assert response.json()["business_hours"][0]["is_closed"] is True


@pytest.mark.asyncio
async def test_add_table(client: AsyncClient, store, owner, admin):
    response = await client.post(
        f"/stores/{store.id}/tables",
        json={"table_number": "P1", "capacity": 4, "table_type": "PRIVATE"},
        headers=auth_headers(admin),
    )

    assert response.status_code == 201
    assert response.json()["table_type"] == "PRIVATE"
    assert response.json()["is_active"] is True


@pytest.mark.asyncio
async def test_only_admin_changes_store_status(client: AsyncClient, store, owner, admin):
    response = await client.patch(f"/stores/{store.id}/status", json={"status": "INACTIVE"}, headers=auth_headers(owner))
    assert response.status_code == 403

    response = await client.patch(f"/stores/{store.id}/status", json={"status": "INACTIVE"}, headers=auth_headers(admin))
    assert response.status_code == 200
    assert response.json()["status"] == "INACTIVE"


@pytest.mark.asyncio
async def test_unknown_store(client: AsyncClient):
    response = await client.get("/stores/00000000-0000-0000-0000-000000000000")

    assert response.status_code == 404
    assert response.json()["error"]["code"] == "STORE_NOT_FOUND"

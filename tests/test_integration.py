"""Integration tests for the full booking flow"""

import pytest
from httpx import AsyncClient

from conftest import auth_headers, future_date


async def register_and_login(client, email, user_type, name="Test User"):
    response = await client.post(
        "/auth/register",
        json={
            "email": email,
            "password": "password123",
            "name": name,
            "phone": "010-1234-5678",
            "user_type": user_type,
        },
    )
    assert response.status_code == 201

    response = await client.post("/auth/login", data={"username": email, "password": "password123"})
    assert response.status_code == 200
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


@pytest.mark.asyncio
async def test_full_booking_flow(client: AsyncClient, admin):
    """
    Integration test simulating a full booking:
    1. Owner registers a store, admin activates it
    2. Customer checks availability and books
    3. Owner confirms and completes the visit
    4. Customer reviews the reservation
    """
    owner_headers = await register_and_login(client, "owner@jarimae.kr", "OWNER", "Park Owner")
    customer_headers = await register_and_login(client, "guest@jarimae.kr", "CUSTOMER", "Kim Guest")

    # Step 1: Register and activate a store
    response = await client.post(
        "/stores",
        json={
            "name": "Seoul Kitchen",
            "address": "1 Sejong-daero, Jung-gu, Seoul",
            "capacity": 6,
            "business_hours": [
                {"day_of_week": day, "open_time": "11:00", "close_time": "21:00"}
                for day in range(7)
            ],
        },
        headers=owner_headers,
    )
    assert response.status_code == 201
    store = response.json()
    assert store["status"] == "PENDING"
    assert len(store["business_hours"]) == 7

    response = await client.patch(
        f"/stores/{store['id']}/status",
        json={"status": "ACTIVE"},
        headers=auth_headers(admin),
    )
    assert response.status_code == 200

    # Step 2: Check availability and book
    day = future_date()
    response = await client.get(
        "/reservations/availability",
        params={"store_id": store["id"], "reservation_date": day.isoformat(), "party_size": 2},
    )
    assert response.status_code == 200
    slot = response.json()["available_slots"][0]["time"]
    assert slot == "11:00"

    response = await client.post(
        "/reservations",
        json={
            "store_id": store["id"],
            "reservation_date": day.isoformat(),
            "reservation_time": slot,
            "party_size": 2,
        },
        headers=customer_headers,
    )
    assert response.status_code == 201
    reservation_id = response.json()["id"]

    # Step 3: Owner confirms, then completes
    for status in ("CONFIRMED", "COMPLETED"):
        response = await client.patch(
            f"/reservations/{reservation_id}",
            json={"status": status, "total_amount": 64000},
            headers=owner_headers,
        )
        assert response.status_code == 200
        assert response.json()["status"] == status

    # Step 4: Review
    response = await client.get(f"/reservations/{reservation_id}", headers=customer_headers)
    assert response.json()["permissions"]["can_review"] is True

    response = await client.post(
        f"/reservations/{reservation_id}/review",
        json={"rating": 4, "comment": "Great bibimbap"},
        headers=customer_headers,
    )
    assert response.status_code == 201

    response = await client.get(f"/reservations/{reservation_id}", headers=customer_headers)
    data = response.json()
    assert data["review"]["rating"] == 4
    assert data["permissions"]["can_review"] is False
    assert data["total_amount"] == 64000


@pytest.mark.asyncio
async def test_admin_cannot_self_register(client: AsyncClient):
    response = await client.post(
        "/auth/register",
        json={"email": "root@jarimae.kr", "password": "password123", "name": "Root", "user_type": "ADMIN"},
    )

    assert response.status_code == 403
    assert response.json()["error"]["code"] == "FORBIDDEN"


@pytest.mark.asyncio
async def test_duplicate_email_rejected(client: AsyncClient, customer):
    response = await client.post(
        "/auth/register",
        json={"email": customer.email, "password": "password123", "name": "Copy Cat"},
    )

    assert response.status_code == 400


@pytest.mark.asyncio
async def test_login_rejects_bad_password(client: AsyncClient, customer):
    response = await client.post("/auth/login", data={"username": customer.email, "password": "wrong-password"})

    assert response.status_code == 401
    assert response.json()["error"]["code"] == "UNAUTHORIZED"


@pytest.mark.asyncio
async def test_refresh_rotates_token_and_logout_revokes(client: AsyncClient, customer):
    response = await client.post("/auth/login", data={"username": customer.email, "password": "testpass123"})
    tokens = response.json()

    response = await client.post("/auth/refresh", json={"refresh_token": tokens["refresh_token"]})
    assert response.status_code == 200
    rotated = response.json()

    headers = {"Authorization": f"Bearer {rotated['access_token']}"}
    response = await client.get("/auth/me", headers=headers)
    assert response.status_code == 200
    assert response.json()["user_type"] == "CUSTOMER"

    response = await client.post("/auth/logout", headers=headers)
    assert response.status_code == 200

    response = await client.post("/auth/refresh", json={"refresh_token": rotated["refresh_token"]})
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_refresh_token_cannot_authenticate(client: AsyncClient, customer):
    response = await client.post("/auth/login", data={"username": customer.email, "password": "testpass123"})

    headers = {"Authorization": f"Bearer {response.json()['refresh_token']}"}
    response = await client.get("/auth/me", headers=headers)

    assert response.status_code == 401

"""Tests for parking lot endpoints."""

from datetime import datetime, timedelta, timezone

import pytest
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.models import ParkingLot


@pytest.mark.asyncio
async def test_create_parking_lot(async_client: AsyncClient, admin_headers):
    """Test creating a parking lot."""
    response = await async_client.post(
        "/api/v1/parking-lots/",
        json={"name": "Parking Lot A", "location": "5th Avenue", "total_capacity": 20},
        headers=admin_headers,
    )
    assert response.status_code == 201
    data = response.json()
    assert data["name"] == "Parking Lot A"
    assert data["total_capacity"] == 20
    assert data["available_capacity"] == 20
    assert "id" in data
    assert "created_at" in data


@pytest.mark.asyncio
async def test_create_parking_lot_available_above_total(async_client: AsyncClient, admin_headers):
    """Test creating a parking lot with more free slots than slots."""
    response = await async_client.post(
        "/api/v1/parking-lots/",
        json={
            "name": "Parking Lot A",
            "location": "5th Avenue",
            "total_capacity": 5,
            "available_capacity": 6,
        },
        headers=admin_headers,
    )
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_create_parking_lot_negative_capacity(async_client: AsyncClient, admin_headers):
    """Test creating a parking lot with a negative capacity."""
    response = await async_client.post(
        "/api/v1/parking-lots/",
        json={"name": "Parking Lot A", "location": "5th Avenue", "total_capacity": -1},
        headers=admin_headers,
    )
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_create_parking_lot_requires_admin(async_client: AsyncClient, driver_headers):
    """Test drivers cannot create parking lots."""
    response = await async_client.post(
        "/api/v1/parking-lots/",
        json={"name": "Parking Lot A", "location": "5th Avenue", "total_capacity": 5},
        headers=driver_headers,
    )
    assert response.status_code == 403

    response = await async_client.post(
        "/api/v1/parking-lots/",
        json={"name": "Parking Lot A", "location": "5th Avenue", "total_capacity": 5},
    )
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_list_parking_lots(async_client: AsyncClient, db_session: AsyncSession):
    """Test listing parking lots without authentication."""
    lot1 = ParkingLot(name="Lot A", location="North", total_capacity=10, available_capacity=10)
    lot2 = ParkingLot(name="Lot B", location="South", total_capacity=4, available_capacity=2)
    db_session.add_all([lot1, lot2])
    await db_session.commit()

    response = await async_client.get("/api/v1/parking-lots/")
    assert response.status_code == 200
    data = response.json()
    assert len(data) == 2


@pytest.mark.asyncio
async def test_get_parking_lot(async_client: AsyncClient, make_lot):
    """Test getting a specific parking lot."""
    parking_lot = await make_lot(total=8, name="Test Lot")

    response = await async_client.get(f"/api/v1/parking-lots/{parking_lot.id}")
    assert response.status_code == 200
    data = response.json()
    assert data["name"] == "Test Lot"
    assert data["id"] == str(parking_lot.id)
    assert data["available_capacity"] == 8


@pytest.mark.asyncio
async def test_get_parking_lot_not_found(async_client: AsyncClient):
    """Test getting a non-existent parking lot."""
    response = await async_client.get("/api/v1/parking-lots/00000000-0000-0000-0000-000000000000")
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_update_parking_lot(async_client: AsyncClient, make_lot, admin_headers):
    """Test updating a parking lot."""
    parking_lot = await make_lot(total=10, name="Old Name")

    response = await async_client.patch(
        f"/api/v1/parking-lots/{parking_lot.id}",
        json={"name": "New Name", "total_capacity": 12, "available_capacity": 11},
        headers=admin_headers,
    )
    assert response.status_code == 200
    data = response.json()
    assert data["name"] == "New Name"
    assert data["location"] == "1 Main Street"
    assert data["total_capacity"] == 12
    assert data["available_capacity"] == 11


@pytest.mark.asyncio
async def test_update_parking_lot_invalid_capacity(async_client: AsyncClient, make_lot, admin_headers):
    """Test shrinking a lot below its free slots."""
    parking_lot = await make_lot(total=10)

    response = await async_client.patch(
        f"/api/v1/parking-lots/{parking_lot.id}",
        json={"total_capacity": 5},
        headers=admin_headers,
    )
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_update_parking_lot_not_found(async_client: AsyncClient, admin_headers):
    """Test updating a non-existent parking lot."""
    response = await async_client.patch(
        "/api/v1/parking-lots/00000000-0000-0000-0000-000000000000",
        json={"name": "Ghost"},
        headers=admin_headers,
    )
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_delete_parking_lot(async_client: AsyncClient, make_lot, admin_headers):
    """Test deleting a parking lot."""
    parking_lot = await make_lot(name="To Delete")
    lot_id = parking_lot.id

    response = await async_client.delete(f"/api/v1/parking-lots/{lot_id}", headers=admin_headers)
    assert response.status_code == 204

    # Verify parking lot is deleted
    response = await async_client.get(f"/api/v1/parking-lots/{lot_id}")
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_parking_lot_occupancy(async_client: AsyncClient, make_lot, ledger, driver, admin_headers):
    """Test the per-status reservation counts of a lot."""
    parking_lot = await make_lot(total=3)
    start = datetime(2026, 11, 1, 9, 0, tzinfo=timezone.utc)
    reservation = await ledger.reserve(parking_lot.id, driver.id, start, start + timedelta(hours=1))
    await ledger.reserve(parking_lot.id, driver.id, start, start + timedelta(hours=1))
    await ledger.transition(reservation.id, "cancelled")

    response = await async_client.get(
        f"/api/v1/parking-lots/{parking_lot.id}/occupancy",
        headers=admin_headers,
    )
    assert response.status_code == 200
    data = response.json()
    assert data["available_capacity"] == 2
    assert data["reservations"]["booked"] == 1
    assert data["reservations"]["cancelled"] == 1

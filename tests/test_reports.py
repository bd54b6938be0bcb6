"""Tests for report endpoints."""

from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest
from httpx import AsyncClient

START = datetime(2026, 11, 1, 9, 0, tzinfo=timezone.utc)
END = START + timedelta(hours=2)


@pytest.mark.asyncio
async def test_daily_report(async_client: AsyncClient, make_lot, ledger, driver, admin_headers):
    """Test daily revenue totals and per-lot breakdown."""
    lot_a = await make_lot(total=5, name="Lot A")
    lot_b = await make_lot(total=5, name="Lot B")

    for lot, amount in ((lot_a, "10.00"), (lot_a, "5.00"), (lot_b, "7.50")):
        reservation = await ledger.reserve(lot.id, driver.id, START, END)
        await ledger.pay(reservation.id, Decimal(amount), "card")
    # Booked but unpaid reservations do not count
    await ledger.reserve(lot_b.id, driver.id, START, END)

    today = datetime.now(timezone.utc).date().isoformat()
    response = await async_client.get(f"/api/v1/reports/daily?date={today}", headers=admin_headers)
    assert response.status_code == 200
    data = response.json()
    assert data["date"] == today
    assert data["total_earnings"] == pytest.approx(22.5)
    assert [item["lot_name"] for item in data["breakdown"]] == ["Lot A", "Lot B"]
    assert data["breakdown"][0]["total"] == pytest.approx(15.0)


@pytest.mark.asyncio
async def test_daily_report_other_day_is_empty(async_client: AsyncClient, make_lot, ledger, driver, admin_headers):
    """Test a day without payments."""
    lot = await make_lot(total=5)
    reservation = await ledger.reserve(lot.id, driver.id, START, END)
    await ledger.pay(reservation.id, Decimal("10.00"), "cash")

    response = await async_client.get("/api/v1/reports/daily?date=2001-01-01", headers=admin_headers)
    assert response.status_code == 200
    data = response.json()
    assert data["total_earnings"] == 0
    assert data["breakdown"] == []


@pytest.mark.asyncio
async def test_daily_report_requires_admin(async_client: AsyncClient, driver_headers):
    """Test drivers cannot read revenue reports."""
    response = await async_client.get("/api/v1/reports/daily", headers=driver_headers)
    assert response.status_code == 403

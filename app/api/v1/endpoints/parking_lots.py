"""ParkingLot endpoints."""

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_db_session, get_ledger, require_admin
from app.api.errors import ledger_http_error
from app.db.models import ParkingLot
from app.schemas.parking_lot import (
    ParkingLotCreate,
    ParkingLotOccupancy,
    ParkingLotResponse,
    ParkingLotUpdate,
)
from app.services.exceptions import LedgerError
from app.services.ledger import SlotInventoryLedger

router = APIRouter()


@router.post(
    "/",
    response_model=ParkingLotResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_admin)],
)
async def create_parking_lot(
    lot_data: ParkingLotCreate,
    db: AsyncSession = Depends(get_db_session),
):
    """Create a new parking lot."""
    available = lot_data.available_capacity
    if available is None:
        available = lot_data.total_capacity

    if available > lot_data.total_capacity:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="available_capacity must be between 0 and total_capacity",
        )

    lot = ParkingLot(
        name=lot_data.name,
        location=lot_data.location,
        total_capacity=lot_data.total_capacity,
        available_capacity=available,
    )
    db.add(lot)
    await db.commit()
    await db.refresh(lot)
    return lot


@router.get("/", response_model=List[ParkingLotResponse])
async def list_parking_lots(
    skip: int = 0,
    limit: int = 100,
    db: AsyncSession = Depends(get_db_session),
):
    """List all parking lots."""
    query = select(ParkingLot).offset(skip).limit(limit).order_by(ParkingLot.created_at.desc())

    result = await db.execute(query)
    lots = result.scalars().all()
    return lots


@router.get("/{lot_id}", response_model=ParkingLotResponse)
async def get_parking_lot(
    lot_id: UUID,
    db: AsyncSession = Depends(get_db_session),
):
    """Get a specific parking lot by ID."""
    result = await db.execute(select(ParkingLot).where(ParkingLot.id == lot_id))
    lot = result.scalar_one_or_none()

    if not lot:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Parking lot with id {lot_id} not found",
        )

    return lot


@router.patch(
    "/{lot_id}",
    response_model=ParkingLotResponse,
    dependencies=[Depends(require_admin)],
)
async def update_parking_lot(
    lot_id: UUID,
    lot_data: ParkingLotUpdate,
    ledger: SlotInventoryLedger = Depends(get_ledger),
):
    """Update a parking lot, capacity counters included."""
    try:
        return await ledger.update_lot(lot_id, **lot_data.model_dump(exclude_unset=True))
    except LedgerError as exc:
        raise ledger_http_error(exc)


@router.get(
    "/{lot_id}/occupancy",
    response_model=ParkingLotOccupancy,
    dependencies=[Depends(require_admin)],
)
async def get_parking_lot_occupancy(
    lot_id: UUID,
    ledger: SlotInventoryLedger = Depends(get_ledger),
):
    """Get reservation counts per status for a parking lot."""
    try:
        lot = await ledger.get_lot(lot_id)
        counts = await ledger.occupancy(lot_id)
    except LedgerError as exc:
        raise ledger_http_error(exc)

    return ParkingLotOccupancy(
        lot_id=lot.id,
        total_capacity=lot.total_capacity,
        available_capacity=lot.available_capacity,
        reservations=counts,
    )


@router.delete(
    "/{lot_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[Depends(require_admin)],
)
async def delete_parking_lot(
    lot_id: UUID,
    ledger: SlotInventoryLedger = Depends(get_ledger),
):
    """Delete a parking lot together with its reservations."""
    try:
        await ledger.delete_lot(lot_id)
    except LedgerError as exc:
        raise ledger_http_error(exc)

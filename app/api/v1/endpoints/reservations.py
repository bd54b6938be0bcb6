"""Reservation endpoints."""

from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import (
    CurrentUser,
    get_current_user,
    get_db_session,
    get_ledger,
    require_admin,
)
from app.api.errors import ledger_http_error
from app.db.models import ParkingLot, Reservation, ReservationStatus, User
from app.schemas.reservation import (
    ReservationCreate,
    ReservationListItem,
    ReservationResponse,
)
from app.services.exceptions import LedgerError
from app.services.ledger import SlotInventoryLedger

router = APIRouter()


async def get_owned_reservation(
    db: AsyncSession,
    reservation_id: UUID,
    current_user: CurrentUser,
) -> Reservation:
    """Load a reservation the caller may read (owner or admin)."""
    reservation = await db.get(Reservation, reservation_id)

    if not reservation:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Reservation with id {reservation_id} not found",
        )
    if reservation.user_id != current_user.id and not current_user.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Reservation belongs to another user",
        )

    return reservation


def owner_scope(current_user: CurrentUser) -> Optional[UUID]:
    """Owner the ledger must enforce for this caller; admins act on any reservation."""
    return None if current_user.is_admin else current_user.id


async def _transition(
    ledger: SlotInventoryLedger,
    reservation_id: UUID,
    next_status: ReservationStatus,
    owner_id: Optional[UUID] = None,
) -> Reservation:
    try:
        return await ledger.transition(reservation_id, next_status, owner_id=owner_id)
    except LedgerError as exc:
        raise ledger_http_error(exc)


def _listing_query():
    return (
        select(Reservation, ParkingLot.name, ParkingLot.location, User.name)
        .join(ParkingLot, Reservation.lot_id == ParkingLot.id)
        .join(User, Reservation.user_id == User.id)
        .order_by(Reservation.created_at.desc())
    )


def _listing_items(rows) -> List[ReservationListItem]:
    return [
        ReservationListItem(
            **ReservationResponse.model_validate(reservation).model_dump(),
            lot_name=lot_name,
            location=location,
            user_name=user_name,
        )
        for reservation, lot_name, location, user_name in rows
    ]


@router.post("/", response_model=ReservationResponse, status_code=status.HTTP_201_CREATED)
async def create_reservation(
    reservation_data: ReservationCreate,
    current_user: CurrentUser = Depends(get_current_user),
    ledger: SlotInventoryLedger = Depends(get_ledger),
):
    """Book one slot at a parking lot."""
    if reservation_data.end_time <= reservation_data.start_time:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="end_time must be after start_time",
        )

    try:
        return await ledger.reserve(
            reservation_data.lot_id,
            current_user.id,
            reservation_data.start_time,
            reservation_data.end_time,
            slot_label=reservation_data.slot_label,
        )
    except LedgerError as exc:
        raise ledger_http_error(exc)


@router.get("/my", response_model=List[ReservationListItem])
async def list_my_reservations(
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
):
    """List the caller's reservations, newest first."""
    query = _listing_query().where(Reservation.user_id == current_user.id)

    result = await db.execute(query)
    return _listing_items(result.all())


@router.get(
    "/",
    response_model=List[ReservationListItem],
    dependencies=[Depends(require_admin)],
)
async def list_reservations(
    lot_id: Optional[UUID] = Query(None, description="Filter by parking lot ID"),
    status_filter: Optional[ReservationStatus] = Query(None, description="Filter by status"),
    skip: int = 0,
    limit: int = 100,
    db: AsyncSession = Depends(get_db_session),
):
    """List all reservations with optional filters."""
    query = _listing_query().offset(skip).limit(limit)

    if lot_id:
        query = query.where(Reservation.lot_id == lot_id)
    if status_filter:
        query = query.where(Reservation.status == status_filter.value)

    result = await db.execute(query)
    return _listing_items(result.all())


@router.put("/{reservation_id}/cancel", response_model=ReservationResponse)
async def cancel_reservation(
    reservation_id: UUID,
    current_user: CurrentUser = Depends(get_current_user),
    ledger: SlotInventoryLedger = Depends(get_ledger),
):
    """Cancel a booked or active reservation and release its slot.

    Drivers may only cancel their own reservations; the ledger checks
    ownership inside its locked transaction.
    """
    return await _transition(
        ledger,
        reservation_id,
        ReservationStatus.CANCELLED,
        owner_id=owner_scope(current_user),
    )


@router.put(
    "/{reservation_id}/activate",
    response_model=ReservationResponse,
    dependencies=[Depends(require_admin)],
)
async def activate_reservation(
    reservation_id: UUID,
    ledger: SlotInventoryLedger = Depends(get_ledger),
):
    """Mark a reservation as active (driver checked in)."""
    return await _transition(ledger, reservation_id, ReservationStatus.ACTIVE)


@router.put(
    "/{reservation_id}/complete",
    response_model=ReservationResponse,
    dependencies=[Depends(require_admin)],
)
async def complete_reservation(
    reservation_id: UUID,
    ledger: SlotInventoryLedger = Depends(get_ledger),
):
    """Mark a reservation as completed."""
    return await _transition(ledger, reservation_id, ReservationStatus.COMPLETED)

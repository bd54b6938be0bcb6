"""Slot inventory ledger.

Owns lot capacity bookkeeping and the reservation lifecycle. Every operation
runs in its own transaction and serializes on the affected lot: an
``asyncio.Lock`` per lot inside this process and a ``SELECT ... FOR UPDATE``
row lock across processes. Rows are always locked lot first, then reservation.
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from datetime import datetime
from decimal import Decimal
from typing import Dict, Optional, Tuple, Union
from uuid import UUID, uuid4

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.db.models import ParkingLot, Payment, Reservation, ReservationStatus, User
from app.services.exceptions import (
    InvalidCapacity,
    InvalidTransition,
    LotFull,
    LotNotFound,
    NotReservationOwner,
    ReservationNotFound,
    UserNotFound,
)

logger = logging.getLogger(__name__)

# Cancelling from these states hands the slot back to the lot
RELEASING_STATES = frozenset({ReservationStatus.BOOKED, ReservationStatus.ACTIVE})
TERMINAL_STATES = frozenset({ReservationStatus.CANCELLED, ReservationStatus.COMPLETED})


def check_transition(current: str, requested: Union[str, ReservationStatus]) -> int:
    """Validate a status change and return the capacity delta it implies.

    Raises InvalidTransition when the change is not allowed.
    """
    try:
        next_status = ReservationStatus(requested)
    except ValueError:
        raise InvalidTransition(
            current, requested, f"Unknown reservation status '{requested}'"
        ) from None
    current_status = ReservationStatus(current)

    if next_status is ReservationStatus.CANCELLED and current_status in (
        ReservationStatus.PAID,
        ReservationStatus.COMPLETED,
    ):
        raise InvalidTransition(
            current_status.value,
            next_status.value,
            "Cannot cancel a paid or completed reservation",
        )
    if current_status in TERMINAL_STATES or current_status is next_status:
        raise InvalidTransition(
            current_status.value,
            next_status.value,
            f"Reservation is already {current_status.value}",
        )

    if next_status is ReservationStatus.CANCELLED and current_status in RELEASING_STATES:
        return 1
    return 0


def check_invariants(lot: ParkingLot) -> bool:
    """Return True when the lot's counters are within bounds."""
    return 0 <= lot.available_capacity <= lot.total_capacity


class SlotInventoryLedger:
    """Race-free capacity and reservation status bookkeeping."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory
        # Entries live only while some caller holds or awaits the lot's lock
        self._lot_locks: Dict[UUID, asyncio.Lock] = {}
        self._lock_users: Dict[UUID, int] = {}

    @asynccontextmanager
    async def _serialized(self, lot_id):
        key = lot_id if isinstance(lot_id, UUID) else UUID(str(lot_id))
        lock = self._lot_locks.get(key)
        if lock is None:
            lock = self._lot_locks[key] = asyncio.Lock()
            self._lock_users[key] = 0
        self._lock_users[key] += 1
        try:
            async with lock:
                yield
        finally:
            self._lock_users[key] -= 1
            if not self._lock_users[key]:
                del self._lot_locks[key]
                del self._lock_users[key]

    @staticmethod
    async def _lock_lot(session: AsyncSession, lot_id) -> Optional[ParkingLot]:
        result = await session.execute(
            select(ParkingLot).where(ParkingLot.id == lot_id).with_for_update()
        )
        return result.scalar_one_or_none()

    async def _lot_of(self, reservation_id) -> UUID:
        async with self._session_factory() as session:
            result = await session.execute(
                select(Reservation.lot_id).where(Reservation.id == reservation_id)
            )
            lot_id = result.scalar_one_or_none()
        if lot_id is None:
            raise ReservationNotFound(reservation_id)
        return lot_id

    async def reserve(
        self,
        lot_id,
        user_id,
        start_time: datetime,
        end_time: datetime,
        slot_label: Optional[str] = None,
    ) -> Reservation:
        """Claim one unit of capacity and create a ``booked`` reservation."""
        async with self._serialized(lot_id):
            async with self._session_factory() as session:
                async with session.begin():
                    if await session.get(User, user_id) is None:
                        raise UserNotFound(user_id)
                    lot = await self._lock_lot(session, lot_id)
                    if lot is None:
                        raise LotNotFound(lot_id)
                    if lot.available_capacity <= 0:
                        logger.info("Reservation rejected: lot %s is full", lot_id)
                        raise LotFull(lot_id)

                    lot.available_capacity -= 1
                    reservation = Reservation(
                        user_id=user_id,
                        lot_id=lot.id,
                        slot_label=slot_label,
                        start_time=start_time,
                        end_time=end_time,
                        status=ReservationStatus.BOOKED.value,
                    )
                    session.add(reservation)
                    remaining = lot.available_capacity

                await session.refresh(reservation)

        logger.info(
            "Reservation %s booked at lot %s (%d slots left)",
            reservation.id,
            lot_id,
            remaining,
        )
        return reservation

    async def _apply_transition(
        self,
        session: AsyncSession,
        lot_id: UUID,
        reservation_id,
        next_status,
        owner_id=None,
    ) -> Tuple[Reservation, str]:
        lot = await self._lock_lot(session, lot_id)
        result = await session.execute(
            select(Reservation).where(Reservation.id == reservation_id).with_for_update()
        )
        reservation = result.scalar_one_or_none()
        if lot is None or reservation is None:
            raise ReservationNotFound(reservation_id)
        if owner_id is not None and reservation.user_id != owner_id:
            raise NotReservationOwner(reservation_id)

        try:
            delta = check_transition(reservation.status, next_status)
        except InvalidTransition as exc:
            logger.info("Transition of reservation %s rejected: %s", reservation_id, exc)
            raise

        if delta:
            released = lot.available_capacity + delta
            if released > lot.total_capacity:
                logger.warning(
                    "Lot %s already at total capacity, release from reservation %s dropped",
                    lot.id,
                    reservation.id,
                )
                released = lot.total_capacity
            lot.available_capacity = released

        previous = reservation.status
        reservation.status = ReservationStatus(next_status).value
        return reservation, previous

    async def transition(self, reservation_id, next_status, owner_id=None) -> Reservation:
        """Move a reservation to ``next_status``, adjusting lot capacity if needed.

        With ``owner_id`` set, reservations of other users raise NotReservationOwner.
        """
        lot_id = await self._lot_of(reservation_id)
        async with self._serialized(lot_id):
            async with self._session_factory() as session:
                async with session.begin():
                    reservation, previous = await self._apply_transition(
                        session, lot_id, reservation_id, next_status, owner_id
                    )
                await session.refresh(reservation)

        logger.info(
            "Reservation %s moved from %s to %s", reservation.id, previous, reservation.status
        )
        return reservation

    async def pay(
        self,
        reservation_id,
        amount: Decimal,
        method: str,
        owner_id=None,
    ) -> Tuple[Reservation, Payment]:
        """Record a simulated successful payment and mark the reservation paid."""
        lot_id = await self._lot_of(reservation_id)
        async with self._serialized(lot_id):
            async with self._session_factory() as session:
                async with session.begin():
                    reservation, previous = await self._apply_transition(
                        session, lot_id, reservation_id, ReservationStatus.PAID, owner_id
                    )
                    payment = Payment(
                        reservation_id=reservation.id,
                        amount=amount,
                        method=method,
                        status="paid",
                        transaction_code=uuid4().hex,
                    )
                    session.add(payment)

                await session.refresh(reservation)
                await session.refresh(payment)

        logger.info(
            "Payment %s recorded for reservation %s (was %s)",
            payment.transaction_code,
            reservation.id,
            previous,
        )
        return reservation, payment

    async def update_lot(
        self,
        lot_id,
        *,
        name: Optional[str] = None,
        location: Optional[str] = None,
        total_capacity: Optional[int] = None,
        available_capacity: Optional[int] = None,
    ) -> ParkingLot:
        """Administrative edit of a lot, capacity counters included."""
        async with self._serialized(lot_id):
            async with self._session_factory() as session:
                async with session.begin():
                    lot = await self._lock_lot(session, lot_id)
                    if lot is None:
                        raise LotNotFound(lot_id)

                    total = lot.total_capacity if total_capacity is None else total_capacity
                    available = (
                        lot.available_capacity if available_capacity is None else available_capacity
                    )
                    if total < 0 or not 0 <= available <= total:
                        raise InvalidCapacity(total, available)

                    if name is not None:
                        lot.name = name
                    if location is not None:
                        lot.location = location
                    lot.total_capacity = total
                    lot.available_capacity = available

                await session.refresh(lot)

        logger.info("Lot %s updated: %d/%d available", lot.id, available, total)
        return lot

    async def delete_lot(self, lot_id) -> None:
        """Remove a lot; the database cascades to its reservations and payments."""
        async with self._serialized(lot_id):
            async with self._session_factory() as session:
                async with session.begin():
                    lot = await self._lock_lot(session, lot_id)
                    if lot is None:
                        raise LotNotFound(lot_id)
                    await session.delete(lot)

        logger.info("Lot %s deleted", lot_id)

    async def get_lot(self, lot_id) -> ParkingLot:
        async with self._session_factory() as session:
            lot = await session.get(ParkingLot, lot_id)
        if lot is None:
            raise LotNotFound(lot_id)
        return lot

    async def occupancy(self, lot_id) -> Dict[str, int]:
        """Count a lot's reservations per status."""
        counts = {status.value: 0 for status in ReservationStatus}
        async with self._session_factory() as session:
            if await session.get(ParkingLot, lot_id) is None:
                raise LotNotFound(lot_id)
            result = await session.execute(
                select(Reservation.status, func.count(Reservation.id))
                .where(Reservation.lot_id == lot_id)
                .group_by(Reservation.status)
            )
            for status, count in result.all():
                counts[status] = count
        return counts

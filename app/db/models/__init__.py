"""Database models package."""

from app.db.base import Base
from app.db.models.parking_lot import ParkingLot
from app.db.models.payment import Payment
from app.db.models.reservation import Reservation, ReservationStatus
from app.db.models.user import User

__all__ = [
    "Base",
    "ParkingLot",
    "Payment",
    "Reservation",
    "ReservationStatus",
    "User",
]

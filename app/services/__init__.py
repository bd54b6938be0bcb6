"""Domain services package."""

from app.services.exceptions import (
    InvalidCapacity,
    InvalidTransition,
    LedgerError,
    LotFull,
    LotNotFound,
    NotReservationOwner,
    ReservationNotFound,
    UserNotFound,
)
from app.services.ledger import SlotInventoryLedger

__all__ = [
    "InvalidCapacity",
    "InvalidTransition",
    "LedgerError",
    "LotFull",
    "LotNotFound",
    "NotReservationOwner",
    "ReservationNotFound",
    "SlotInventoryLedger",
    "UserNotFound",
]

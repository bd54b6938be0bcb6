"""Schemas package."""

from app.schemas.parking_lot import (
    ParkingLotCreate,
    ParkingLotOccupancy,
    ParkingLotResponse,
    ParkingLotUpdate,
)
from app.schemas.payment import PaymentCreate, PaymentRecorded, PaymentResponse, Receipt
from app.schemas.report import DailyReport, LotEarnings
from app.schemas.reservation import (
    ReservationCreate,
    ReservationListItem,
    ReservationResponse,
)
from app.schemas.user import TokenResponse, UserLogin, UserRegister, UserResponse

__all__ = [
    "ParkingLotCreate",
    "ParkingLotOccupancy",
    "ParkingLotResponse",
    "ParkingLotUpdate",
    "PaymentCreate",
    "PaymentRecorded",
    "PaymentResponse",
    "Receipt",
    "DailyReport",
    "LotEarnings",
    "ReservationCreate",
    "ReservationListItem",
    "ReservationResponse",
    "TokenResponse",
    "UserLogin",
    "UserRegister",
    "UserResponse",
]

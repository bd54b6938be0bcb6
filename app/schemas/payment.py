"""Payment schemas."""

from datetime import datetime
from decimal import Decimal
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, Field

from app.schemas.reservation import ReservationResponse


class PaymentCreate(BaseModel):
    """Schema for recording a (simulated) payment."""

    reservation_id: UUID
    amount: Decimal = Field(..., gt=0, max_digits=10, decimal_places=2)
    method: Literal["card", "cash"]


class PaymentResponse(BaseModel):
    """Schema for payment response."""

    id: UUID
    reservation_id: UUID
    amount: float
    method: str
    status: str
    transaction_code: str
    payment_time: datetime

    model_config = {"from_attributes": True}


class Receipt(BaseModel):
    """QR receipt handed to the driver."""

    qr: str
    transaction_code: str


class PaymentRecorded(BaseModel):
    """Schema returned after a successful payment."""

    payment: PaymentResponse
    reservation: ReservationResponse
    receipt: Receipt

"""ParkingLot schemas."""

from datetime import datetime
from typing import Dict, Optional
from uuid import UUID

from pydantic import BaseModel, Field


class ParkingLotBase(BaseModel):
    """Base parking lot schema."""

    name: str = Field(..., min_length=1, max_length=255)
    location: str = Field(..., min_length=1)
    total_capacity: int = Field(..., ge=0)


class ParkingLotCreate(ParkingLotBase):
    """Schema for creating a parking lot.

    ``available_capacity`` defaults to ``total_capacity``.
    """

    available_capacity: Optional[int] = Field(None, ge=0)


class ParkingLotUpdate(BaseModel):
    """Schema for updating a parking lot."""

    name: Optional[str] = Field(None, min_length=1, max_length=255)
    location: Optional[str] = Field(None, min_length=1)
    total_capacity: Optional[int] = Field(None, ge=0)
    available_capacity: Optional[int] = Field(None, ge=0)


class ParkingLotResponse(BaseModel):
    """Schema for parking lot response."""

    id: UUID
    name: str
    location: str
    total_capacity: int
    available_capacity: int
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class ParkingLotOccupancy(BaseModel):
    """Reservation counts per status for one lot."""

    lot_id: UUID
    total_capacity: int
    available_capacity: int
    reservations: Dict[str, int]

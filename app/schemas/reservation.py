"""Reservation schemas."""

from datetime import datetime, timezone
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field, field_validator


class ReservationCreate(BaseModel):
    """Schema for booking a slot.

    Naive datetimes are taken as UTC. The end-after-start rule is checked by
    the endpoint so it can answer 400 instead of 422.
    """

    lot_id: UUID
    slot_label: Optional[str] = Field(None, max_length=32)
    start_time: datetime
    end_time: datetime

    @field_validator("start_time", "end_time")
    @classmethod
    def assume_utc(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value


class ReservationResponse(BaseModel):
    """Schema for reservation response."""

    id: UUID
    user_id: UUID
    lot_id: UUID
    slot_label: Optional[str]
    start_time: datetime
    end_time: datetime
    status: str
    created_at: datetime

    model_config = {"from_attributes": True}


class ReservationListItem(ReservationResponse):
    """Reservation listing row with the lot and driver it belongs to."""

    lot_name: str
    location: str
    user_name: str

"""ParkingLot model."""

from uuid import uuid4

from sqlalchemy import CheckConstraint, Column, DateTime, Integer, String, Text, Uuid
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from app.db.base import Base


class ParkingLot(Base):
    """Parking lot - a location with a fixed capacity and a live availability counter."""

    __tablename__ = "parking_lots"

    id = Column(Uuid, primary_key=True, default=uuid4)
    name = Column(String(255), nullable=False)
    location = Column(Text, nullable=False)
    total_capacity = Column(Integer, nullable=False)
    # Only written by SlotInventoryLedger
    available_capacity = Column(Integer, nullable=False)
    created_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    # Constraints
    __table_args__ = (
        CheckConstraint("total_capacity >= 0", name="check_total_capacity"),
        CheckConstraint(
            "available_capacity >= 0 AND available_capacity <= total_capacity",
            name="check_available_capacity",
        ),
    )

    # Relationships
    reservations = relationship(
        "Reservation",
        back_populates="parking_lot",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    def __repr__(self):
        return (
            f"<ParkingLot(id={self.id}, name={self.name}, "
            f"available={self.available_capacity}/{self.total_capacity})>"
        )

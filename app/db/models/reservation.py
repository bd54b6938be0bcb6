"""Reservation model."""

import enum
from uuid import uuid4

from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, String, Uuid
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from app.db.base import Base


class ReservationStatus(str, enum.Enum):
    """Lifecycle states of a reservation."""

    BOOKED = "booked"
    ACTIVE = "active"
    PAID = "paid"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class Reservation(Base):
    """A driver's claim on one unit of a lot's capacity for a time window."""

    __tablename__ = "reservations"

    id = Column(Uuid, primary_key=True, default=uuid4)
    user_id = Column(
        Uuid,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    lot_id = Column(
        Uuid,
        ForeignKey("parking_lots.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    slot_label = Column(String(32), nullable=True)

    # Time window
    start_time = Column(DateTime(timezone=True), nullable=False)
    end_time = Column(DateTime(timezone=True), nullable=False)

    status = Column(String(16), nullable=False, default=ReservationStatus.BOOKED.value)
    created_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )

    # Constraints
    __table_args__ = (
        CheckConstraint(
            "status IN ('booked', 'active', 'paid', 'completed', 'cancelled')",
            name="check_reservation_status",
        ),
        CheckConstraint("end_time > start_time", name="check_time_window"),
    )

    # Relationships
    user = relationship("User", back_populates="reservations")
    parking_lot = relationship("ParkingLot", back_populates="reservations")
    payments = relationship(
        "Payment",
        back_populates="reservation",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    def __repr__(self):
        return f"<Reservation(id={self.id}, lot_id={self.lot_id}, status={self.status})>"

"""Payment model."""

from uuid import uuid4

from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Numeric, String, Uuid
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from app.db.base import Base


class Payment(Base):
    """Simulated payment recorded against a reservation."""

    __tablename__ = "payments"

    id = Column(Uuid, primary_key=True, default=uuid4)
    reservation_id = Column(
        Uuid,
        ForeignKey("reservations.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    amount = Column(Numeric(10, 2), nullable=False)
    method = Column(String(16), nullable=False)  # 'card', 'cash'
    status = Column(String(16), nullable=False, default="pending")  # 'pending', 'paid'
    transaction_code = Column(String(64), nullable=True, unique=True)
    payment_time = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
        index=True,
    )

    # Constraints
    __table_args__ = (
        CheckConstraint("amount > 0", name="check_amount_positive"),
        CheckConstraint("method IN ('card', 'cash')", name="check_method"),
        CheckConstraint("status IN ('pending', 'paid')", name="check_payment_status"),
    )

    # Relationships
    reservation = relationship("Reservation", back_populates="payments")

    def __repr__(self):
        return f"<Payment(id={self.id}, amount={self.amount}, status={self.status})>"

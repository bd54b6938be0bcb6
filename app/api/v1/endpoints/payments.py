"""Payment endpoints."""

import logging
from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import CurrentUser, get_current_user, get_db_session, get_ledger
from app.api.errors import ledger_http_error
from app.api.v1.endpoints.reservations import get_owned_reservation, owner_scope
from app.db.models import Payment
from app.schemas.payment import (
    PaymentCreate,
    PaymentRecorded,
    PaymentResponse,
    Receipt,
)
from app.schemas.reservation import ReservationResponse
from app.services.exceptions import LedgerError
from app.services.ledger import SlotInventoryLedger
from app.services.receipts import build_receipt_payload, render_qr_data_url

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/", response_model=PaymentRecorded, status_code=status.HTTP_201_CREATED)
async def create_payment(
    payment_data: PaymentCreate,
    current_user: CurrentUser = Depends(get_current_user),
    ledger: SlotInventoryLedger = Depends(get_ledger),
):
    """Record a simulated payment and issue a QR receipt.

    No gateway is called; the payment always succeeds and moves the
    reservation to ``paid``, after which it can no longer be cancelled.
    """
    try:
        reservation, payment = await ledger.pay(
            payment_data.reservation_id,
            payment_data.amount,
            payment_data.method,
            owner_id=owner_scope(current_user),
        )
    except LedgerError as exc:
        raise ledger_http_error(exc)

    qr = render_qr_data_url(build_receipt_payload(payment))
    logger.debug("Receipt rendered for transaction %s", payment.transaction_code)

    return PaymentRecorded(
        payment=PaymentResponse.model_validate(payment),
        reservation=ReservationResponse.model_validate(reservation),
        receipt=Receipt(qr=qr, transaction_code=payment.transaction_code),
    )


@router.get("/by-reservation/{reservation_id}", response_model=List[PaymentResponse])
async def list_payments_by_reservation(
    reservation_id: UUID,
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
):
    """List payments recorded against a reservation."""
    await get_owned_reservation(db, reservation_id, current_user)

    query = (
        select(Payment)
        .where(Payment.reservation_id == reservation_id)
        .order_by(Payment.payment_time.desc())
    )

    result = await db.execute(query)
    return result.scalars().all()

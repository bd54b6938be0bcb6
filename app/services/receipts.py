"""Scannable payment receipts."""

import base64
import io
import json

import qrcode
from qrcode.image.svg import SvgPathImage

from app.db.models import Payment


def build_receipt_payload(payment: Payment) -> dict:
    """Build the data encoded in a receipt's QR code."""
    return {
        "type": "PARKING_RECEIPT",
        "reservation_id": str(payment.reservation_id),
        "transaction_code": payment.transaction_code,
        "method": payment.method,
        "amount": float(payment.amount),
    }


def render_qr_data_url(payload: dict) -> str:
    """Render ``payload`` as an SVG QR code embedded in a data URL."""
    image = qrcode.make(json.dumps(payload, sort_keys=True), image_factory=SvgPathImage)
    buffer = io.BytesIO()
    image.save(buffer)
    encoded = base64.b64encode(buffer.getvalue()).decode("ascii")
    return f"data:image/svg+xml;base64,{encoded}"

"""Translation of ledger failures into HTTP errors."""

from fastapi import HTTPException, status

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

LEDGER_ERROR_STATUS = {
    LotNotFound: status.HTTP_404_NOT_FOUND,
    ReservationNotFound: status.HTTP_404_NOT_FOUND,
    LotFull: status.HTTP_409_CONFLICT,
    InvalidTransition: status.HTTP_400_BAD_REQUEST,
    InvalidCapacity: status.HTTP_400_BAD_REQUEST,
    NotReservationOwner: status.HTTP_403_FORBIDDEN,
    # Token outlived its user
    UserNotFound: status.HTTP_401_UNAUTHORIZED,
}


def ledger_http_error(exc: LedgerError) -> HTTPException:
    """Build the HTTPException a ledger failure should surface as."""
    status_code = LEDGER_ERROR_STATUS.get(type(exc), status.HTTP_400_BAD_REQUEST)
    headers = None
    if status_code == status.HTTP_401_UNAUTHORIZED:
        headers = {"WWW-Authenticate": "Bearer"}
    return HTTPException(status_code=status_code, detail=str(exc), headers=headers)

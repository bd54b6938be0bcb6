"""API v1 router."""

from fastapi import APIRouter

from app.api.v1.endpoints import auth, parking_lots, payments, reports, reservations

api_router = APIRouter()

api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
api_router.include_router(parking_lots.router, prefix="/parking-lots", tags=["parking-lots"])
api_router.include_router(reservations.router, prefix="/reservations", tags=["reservations"])
api_router.include_router(payments.router, prefix="/payments", tags=["payments"])
api_router.include_router(reports.router, prefix="/reports", tags=["reports"])

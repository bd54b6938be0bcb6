"""Report endpoints."""

import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_db_session, require_admin
from app.db.models import ParkingLot, Payment, Reservation
from app.schemas.report import DailyReport, LotEarnings

router = APIRouter(dependencies=[Depends(require_admin)])


@router.get("/daily", response_model=DailyReport)
async def get_daily_report(
    report_date: Optional[datetime.date] = Query(
        None, alias="date", description="Day to report on (UTC), defaults to today"
    ),
    db: AsyncSession = Depends(get_db_session),
):
    """Get paid revenue for one day, broken down per lot."""
    if report_date is None:
        report_date = datetime.datetime.now(datetime.timezone.utc).date()

    day_start = datetime.datetime.combine(report_date, datetime.time.min, tzinfo=datetime.timezone.utc)
    day_end = day_start + datetime.timedelta(days=1)

    lot_total = func.sum(Payment.amount)
    query = (
        select(ParkingLot.id, ParkingLot.name, lot_total)
        .select_from(Payment)
        .join(Reservation, Reservation.id == Payment.reservation_id)
        .join(ParkingLot, ParkingLot.id == Reservation.lot_id)
        .where(Payment.status == "paid")
        .where(Payment.payment_time >= day_start)
        .where(Payment.payment_time < day_end)
        .group_by(ParkingLot.id, ParkingLot.name)
        .order_by(lot_total.desc())
    )

    result = await db.execute(query)
    breakdown = [
        LotEarnings(lot_id=lot_id, lot_name=name, total=float(total or 0))
        for lot_id, name, total in result.all()
    ]

    return DailyReport(
        date=report_date,
        total_earnings=sum(item.total for item in breakdown),
        breakdown=breakdown,
    )

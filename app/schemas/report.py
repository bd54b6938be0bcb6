"""Report schemas."""

import datetime
from typing import List
from uuid import UUID

from pydantic import BaseModel


class LotEarnings(BaseModel):
    """Earnings of a single lot."""

    lot_id: UUID
    lot_name: str
    total: float


class DailyReport(BaseModel):
    """Paid revenue for one day."""

    date: datetime.date
    total_earnings: float
    breakdown: List[LotEarnings]

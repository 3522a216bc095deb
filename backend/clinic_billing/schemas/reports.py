from datetime import date
from decimal import Decimal

from pydantic import BaseModel, ConfigDict


class DailySummaryRowOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    patient_id: int
    reference_number: str
    fullname: str
    mobile: str
    total: Decimal
    paid: Decimal
    pending: Decimal


class DailySummaryOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    day: date
    patient_count: int
    total_billed: Decimal
    total_collected: Decimal
    total_pending: Decimal
    collected_by_method: dict[str, Decimal]
    rows: list[DailySummaryRowOut]

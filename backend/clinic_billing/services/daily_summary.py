from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timezone, tzinfo
from decimal import Decimal
from typing import Iterable

from clinic_billing.models.invoice import TransactionStatus
from clinic_billing.schemas.patient import PatientOut


@dataclass(frozen=True)
class DailySummaryRow:
    patient_id: int
    reference_number: str
    fullname: str
    mobile: str
    total: Decimal
    paid: Decimal
    pending: Decimal


@dataclass
class DailySummary:
    day: date
    patient_count: int = 0
    total_billed: Decimal = Decimal("0")
    total_collected: Decimal = Decimal("0")
    total_pending: Decimal = Decimal("0")
    collected_by_method: dict[str, Decimal] = field(default_factory=dict)
    rows: list[DailySummaryRow] = field(default_factory=list)


def local_day(created_at: datetime, tz: tzinfo = timezone.utc) -> date:
    """Calendar day of a registration timestamp in the clinic's time zone.

    Naive timestamps are taken as UTC, which is how SQLite hands them back.
    """
    if created_at.tzinfo is None:
        created_at = created_at.replace(tzinfo=timezone.utc)
    return created_at.astimezone(tz).date()


def summarize_day(
    patients: Iterable[PatientOut], day: date, tz: tzinfo = timezone.utc
) -> DailySummary:
    summary = DailySummary(day=day)
    for patient in patients:
        if local_day(patient.created_at, tz) != day:
            continue
        summary.patient_count += 1
        summary.total_billed += patient.invoice.total
        for tx in patient.invoice.transactions:
            if tx.status == TransactionStatus.paid:
                key = tx.payment_method.value
                summary.collected_by_method[key] = (
                    summary.collected_by_method.get(key, Decimal("0")) + tx.amount
                )
                summary.total_collected += tx.amount
            else:
                summary.total_pending += tx.amount
        summary.rows.append(
            DailySummaryRow(
                patient_id=patient.id,
                reference_number=patient.invoice.invoice_number,
                fullname=patient.fullname,
                mobile=patient.mobile,
                total=patient.invoice.total,
                paid=patient.paid_total,
                pending=patient.pending_total,
            )
        )
    return summary

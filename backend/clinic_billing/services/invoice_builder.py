from __future__ import annotations

import logging
from decimal import Decimal, InvalidOperation

from clinic_billing.models.invoice import PaymentMethod, TransactionStatus
from clinic_billing.schemas.patient import InvoiceDraft, PatientDraft, TransactionDraft
from clinic_billing.schemas.registration import AmountDueOut, ParsedRegistration

logger = logging.getLogger("clinic_billing.invoice")

ZERO = Decimal("0")

PENDING_DESCRIPTION = "Pending Payment"


class AmountParseError(ValueError):
    pass


def parse_amount(raw: str | None) -> Decimal:
    """Parse a form amount; missing or blank input counts as zero."""
    if raw is None:
        return ZERO
    text = str(raw).strip()
    if not text:
        return ZERO
    try:
        value = Decimal(text)
    except InvalidOperation as exc:
        raise AmountParseError(f"{raw!r} is not a number") from exc
    if not value.is_finite():
        raise AmountParseError(f"{raw!r} is not a finite number")
    return value


def paid_description(method: PaymentMethod) -> str:
    return f"Paid Amount ({method.value})"


def build_transactions(
    total: Decimal, paid: Decimal, method: PaymentMethod
) -> list[TransactionDraft]:
    """Pending first, then paid; a zero paid entry is dropped, a zero pending one is kept."""
    candidates = [
        TransactionDraft(
            status=TransactionStatus.pending,
            amount=total - paid,
            description=PENDING_DESCRIPTION,
            payment_method=PaymentMethod.none,
        ),
        TransactionDraft(
            status=TransactionStatus.paid,
            amount=paid,
            description=paid_description(method),
            payment_method=method,
        ),
    ]
    return [
        tx
        for tx in candidates
        if not (tx.status == TransactionStatus.paid and tx.amount == ZERO)
    ]


def assemble_patient(values: ParsedRegistration) -> PatientDraft:
    pending = values.total - values.paid
    if pending < ZERO:
        logger.warning(
            "Overpayment accepted for %s: total=%s paid=%s pending=%s",
            values.fullname,
            values.total,
            values.paid,
            pending,
        )
    return PatientDraft(
        fullname=values.fullname,
        mobile=values.mobile,
        treatment=values.treatment,
        invoice=InvoiceDraft(
            description=values.fullname,
            total=values.total,
            transactions=build_transactions(values.total, values.paid, values.payment_method),
        ),
    )


def amount_due(total_amount: str | None, paid_amount: str | None) -> AmountDueOut:
    total = parse_amount(total_amount)
    paid = parse_amount(paid_amount)
    return AmountDueOut(total=total, paid=paid, amount_due=total - paid)

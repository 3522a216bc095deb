from datetime import datetime, timezone
from decimal import Decimal
from io import BytesIO

from reportlab.lib.units import mm
from reportlab.pdfgen import canvas

from clinic_billing.models.invoice import PaymentMethod, TransactionStatus
from clinic_billing.schemas.patient import TransactionOut
from clinic_billing.schemas.registration import BillProjection, RegistrationForm
from clinic_billing.services.bill_pdf import (
    MAX_HEADER_LINES,
    _draw_header,
    _header_lines,
    build_bill_pdf,
    format_amount,
)


def _bill(transactions) -> BillProjection:
    return BillProjection(
        patient_id=7,
        fullname="Asha Kumar",
        mobile="9876543210",
        registration_id="REG-000007",
        reference_number="BILL-000007",
        issued_at=datetime(2026, 10, 19, 10, 30, tzinfo=timezone.utc),
        treatment="Root canal",
        total=Decimal("1000"),
        paid=Decimal("400"),
        amount_due=Decimal("600"),
        transactions=transactions,
        values=RegistrationForm(fullname="Asha Kumar", mobile="9876543210"),
    )


def test_format_amount():
    assert format_amount(Decimal("1234.5")) == "Rs. 1,234.50"
    assert format_amount(Decimal("-200"), "$") == "$ -200.00"


def test_build_bill_pdf(clinic_profile):
    transactions = [
        TransactionOut(
            id=1,
            status=TransactionStatus.pending,
            amount=Decimal("600"),
            description="Pending Payment",
            payment_method=PaymentMethod.none,
        ),
        TransactionOut(
            id=2,
            status=TransactionStatus.paid,
            amount=Decimal("400"),
            description="Paid Amount (cash)",
            payment_method=PaymentMethod.cash,
        ),
    ]

    pdf_bytes = build_bill_pdf(_bill(transactions), clinic_profile)

    assert pdf_bytes.startswith(b"%PDF")
    assert len(pdf_bytes) > 1000


def test_build_bill_pdf_with_minimal_profile():
    pdf_bytes = build_bill_pdf(_bill([]), {"name": "Clinic"})

    assert pdf_bytes.startswith(b"%PDF")


def test_long_address_stays_above_the_header_rule():
    profile = {
        "name": "Smile Dental Care",
        "address_lines": [f"Address line {n}" for n in range(1, 7)],
        "phone": "044 2345 6789",
    }

    lines = _header_lines(profile)

    assert len(lines) == MAX_HEADER_LINES
    assert lines[0] == "Address line 1"
    assert lines[-1] == "Tel: 044 2345 6789"

    last_y = _draw_header(canvas.Canvas(BytesIO()), profile, "Bill")
    assert last_y > 257 * mm
    assert build_bill_pdf(_bill([]), profile).startswith(b"%PDF")


def test_header_without_phone_uses_every_slot_for_the_address():
    profile = {"address_lines": ["1", "2", "3", "4", "5"]}

    assert _header_lines(profile) == ["1", "2", "3", "4"]

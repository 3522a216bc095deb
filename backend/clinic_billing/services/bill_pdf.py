from __future__ import annotations

from decimal import Decimal
from io import BytesIO

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.units import mm
from reportlab.pdfgen import canvas
from reportlab.platypus import Table, TableStyle

from clinic_billing.schemas.registration import BillProjection
from clinic_billing.services.daily_summary import DailySummary


def format_amount(amount: Decimal, currency_symbol: str = "Rs.") -> str:
    return f"{currency_symbol} {amount:,.2f}"


# Address and phone lines that fit between the clinic name and the header rule.
MAX_HEADER_LINES = 4


def _header_lines(profile: dict[str, object]) -> list[str]:
    phone = profile.get("phone")
    room = MAX_HEADER_LINES - (1 if phone else 0)
    lines = [str(line) for line in profile.get("address_lines") or []][:room]
    if phone:
        lines.append(f"Tel: {phone}")
    return lines


def _draw_header(pdf: canvas.Canvas, profile: dict[str, object], title: str) -> float:
    pdf.setFont("Helvetica-Bold", 16)
    pdf.drawString(20 * mm, 280 * mm, str(profile.get("name") or "Clinic"))
    pdf.setFont("Helvetica", 10)
    y = 274 * mm
    for line in _header_lines(profile):
        pdf.drawString(20 * mm, y, line)
        y -= 4 * mm
    pdf.setFont("Helvetica-Bold", 14)
    pdf.drawRightString(190 * mm, 280 * mm, title)
    pdf.setStrokeColor(colors.lightgrey)
    pdf.line(20 * mm, 258 * mm, 190 * mm, 258 * mm)
    return y


def _draw_patient_block(pdf: canvas.Canvas, bill: BillProjection) -> None:
    pdf.setFont("Helvetica-Bold", 11)
    pdf.drawString(20 * mm, 245 * mm, "Billed to")
    pdf.setFont("Helvetica", 10)
    pdf.drawString(20 * mm, 240 * mm, bill.fullname)
    pdf.drawString(20 * mm, 235 * mm, f"Mobile: {bill.mobile}")
    pdf.drawString(20 * mm, 230 * mm, f"Registration: {bill.registration_id}")
    if bill.treatment:
        pdf.drawString(20 * mm, 225 * mm, f"Treatment: {bill.treatment}")


def _draw_bill_meta(pdf: canvas.Canvas, bill: BillProjection) -> None:
    pdf.setFont("Helvetica-Bold", 10)
    pdf.drawString(120 * mm, 245 * mm, f"Bill: {bill.reference_number}")
    pdf.setFont("Helvetica", 10)
    pdf.drawString(120 * mm, 240 * mm, f"Date: {bill.issued_at.strftime('%Y-%m-%d')}")


def _draw_transactions(pdf: canvas.Canvas, bill: BillProjection, currency: str) -> None:
    data = [["Description", "Status", "Method", "Amount"]]
    for tx in bill.transactions:
        method = "" if tx.payment_method.value == "none" else tx.payment_method.value
        data.append(
            [tx.description, tx.status.value, method, format_amount(tx.amount, currency)]
        )
    table = Table(data, colWidths=[85 * mm, 25 * mm, 25 * mm, 35 * mm])
    table.setStyle(
        TableStyle(
            [
                ("BACKGROUND", (0, 0), (-1, 0), colors.HexColor("#f0f0f0")),
                ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
                ("GRID", (0, 0), (-1, -1), 0.25, colors.lightgrey),
                ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
                ("ALIGN", (3, 1), (3, -1), "RIGHT"),
            ]
        )
    )
    _, height = table.wrapOn(pdf, 170 * mm, 80 * mm)
    table.drawOn(pdf, 20 * mm, 210 * mm - height)


def _draw_totals(pdf: canvas.Canvas, bill: BillProjection, currency: str, y: float) -> None:
    pdf.setFont("Helvetica-Bold", 10)
    pdf.drawRightString(160 * mm, y, "Total")
    pdf.drawRightString(190 * mm, y, format_amount(bill.total, currency))
    pdf.setFont("Helvetica", 10)
    pdf.drawRightString(160 * mm, y - 12, "Paid")
    pdf.drawRightString(190 * mm, y - 12, format_amount(bill.paid, currency))
    pdf.setFont("Helvetica-Bold", 11)
    pdf.drawRightString(160 * mm, y - 28, "Amount due")
    pdf.drawRightString(190 * mm, y - 28, format_amount(bill.amount_due, currency))


def build_bill_pdf(bill: BillProjection, profile: dict[str, object]) -> bytes:
    currency = str(profile.get("currency_symbol") or "Rs.")
    buffer = BytesIO()
    pdf = canvas.Canvas(buffer, pagesize=A4)
    pdf.setTitle(f"Bill {bill.reference_number}")
    _draw_header(pdf, profile, "Bill")
    _draw_patient_block(pdf, bill)
    _draw_bill_meta(pdf, bill)
    _draw_transactions(pdf, bill, currency)
    _draw_totals(pdf, bill, currency, 150 * mm)
    pdf.showPage()
    pdf.save()
    return buffer.getvalue()


def _draw_line(pdf: canvas.Canvas, left: float, y: float, text: str, bold: bool = False) -> float:
    pdf.setFont("Helvetica-Bold" if bold else "Helvetica", 10)
    pdf.drawString(left, y, text)
    return y - 5 * mm


def build_daily_summary_pdf(summary: DailySummary, profile: dict[str, object]) -> bytes:
    currency = str(profile.get("currency_symbol") or "Rs.")
    buffer = BytesIO()
    pdf = canvas.Canvas(buffer, pagesize=A4)
    left = 20 * mm
    _draw_header(pdf, profile, "Daily summary")
    y = 250 * mm

    y = _draw_line(pdf, left, y, f"Date: {summary.day.isoformat()}", bold=True)
    y = _draw_line(pdf, left, y, f"Patients registered: {summary.patient_count}")
    y = _draw_line(pdf, left, y, f"Total billed: {format_amount(summary.total_billed, currency)}")
    y = _draw_line(
        pdf, left, y, f"Total collected: {format_amount(summary.total_collected, currency)}"
    )
    y = _draw_line(pdf, left, y, f"Total pending: {format_amount(summary.total_pending, currency)}")
    y = _draw_line(pdf, left, y, "")

    y = _draw_line(pdf, left, y, "Collected by method", bold=True)
    if not summary.collected_by_method:
        y = _draw_line(pdf, left, y, "No payments recorded.")
    for method, amount in sorted(summary.collected_by_method.items()):
        y = _draw_line(pdf, left, y, f"{method}: {format_amount(amount, currency)}")
    y = _draw_line(pdf, left, y, "")

    y = _draw_line(pdf, left, y, "Patients", bold=True)
    for row in summary.rows:
        if y < 20 * mm:
            pdf.showPage()
            y = 280 * mm
        y = _draw_line(
            pdf,
            left,
            y,
            f"{row.reference_number} • {row.fullname} • {row.mobile} • "
            f"billed {format_amount(row.total, currency)} • "
            f"paid {format_amount(row.paid, currency)} • "
            f"due {format_amount(row.pending, currency)}",
        )

    pdf.showPage()
    pdf.save()
    return buffer.getvalue()

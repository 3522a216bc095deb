from datetime import date, datetime, tzinfo

from fastapi import APIRouter, Depends, Query, Response

from clinic_billing.deps import get_profile, get_timezone, get_workflow
from clinic_billing.schemas.reports import DailySummaryOut
from clinic_billing.services.bill_pdf import build_daily_summary_pdf
from clinic_billing.services.daily_summary import summarize_day
from clinic_billing.services.registration import RegistrationWorkflow

router = APIRouter(prefix="/reports", tags=["reports"])


@router.get("/daily-summary", response_model=DailySummaryOut)
def daily_summary(
    workflow: RegistrationWorkflow = Depends(get_workflow),
    tz: tzinfo = Depends(get_timezone),
    report_date: date | None = Query(default=None, alias="date"),
):
    target = report_date or datetime.now(tz).date()
    return summarize_day(workflow.roster, target, tz)


@router.get("/daily-summary.pdf")
def daily_summary_pdf(
    workflow: RegistrationWorkflow = Depends(get_workflow),
    profile: dict = Depends(get_profile),
    tz: tzinfo = Depends(get_timezone),
    report_date: date | None = Query(default=None, alias="date"),
):
    target = report_date or datetime.now(tz).date()
    summary = summarize_day(workflow.roster, target, tz)
    pdf_bytes = build_daily_summary_pdf(summary, profile)
    filename = f"daily-summary-{target.isoformat()}.pdf"
    headers = {"Content-Disposition": f'attachment; filename="{filename}"'}
    return Response(content=pdf_bytes, media_type="application/pdf", headers=headers)

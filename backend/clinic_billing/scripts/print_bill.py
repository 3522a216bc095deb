from __future__ import annotations

import argparse
from datetime import date
from pathlib import Path

from clinic_billing.core.settings import settings
from clinic_billing.db.session import SessionLocal
from clinic_billing.services.bill_pdf import build_bill_pdf, build_daily_summary_pdf
from clinic_billing.services.clinic_profile import load_profile
from clinic_billing.services.daily_summary import summarize_day
from clinic_billing.services.patient_store import SqlPatientStore
from clinic_billing.services.registration import bill_for_stored_patient


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Write a patient bill or daily summary as PDF.")
    target = parser.add_mutually_exclusive_group(required=True)
    target.add_argument("--patient-id", type=int, help="Patient id to print the bill for.")
    target.add_argument(
        "--daily-summary", type=date.fromisoformat, help="Day to summarise (YYYY-MM-DD)."
    )
    parser.add_argument("--out", required=True, help="Output PDF path.")
    args = parser.parse_args(argv)

    store = SqlPatientStore(SessionLocal)
    profile = load_profile(settings)

    if args.patient_id is not None:
        patient = store.get_patient(args.patient_id)
        if patient is None:
            print(f"Patient {args.patient_id} not found")
            return 1
        pdf_bytes = build_bill_pdf(bill_for_stored_patient(patient), profile)
    else:
        summary = summarize_day(store.fetch_all(), args.daily_summary, settings.clinic_tz)
        pdf_bytes = build_daily_summary_pdf(summary, profile)

    Path(args.out).write_bytes(pdf_bytes)
    print(f"Wrote {args.out} ({len(pdf_bytes)} bytes)")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

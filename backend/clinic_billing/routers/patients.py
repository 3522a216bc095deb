from fastapi import APIRouter, Depends, HTTPException, Response, status

from clinic_billing.deps import get_profile, get_workflow
from clinic_billing.schemas.patient import PatientOut
from clinic_billing.services.bill_pdf import build_bill_pdf
from clinic_billing.services.registration import RegistrationWorkflow, bill_for_stored_patient

router = APIRouter(prefix="/patients", tags=["patients"])


@router.get("", response_model=list[PatientOut])
def list_patients(workflow: RegistrationWorkflow = Depends(get_workflow)):
    return workflow.roster.snapshot()


@router.get("/{patient_id}", response_model=PatientOut)
def get_patient(patient_id: int, workflow: RegistrationWorkflow = Depends(get_workflow)):
    patient = workflow.store.get_patient(patient_id)
    if not patient:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Patient not found")
    return patient


@router.get("/{patient_id}/bill.pdf")
def get_patient_bill_pdf(
    patient_id: int,
    workflow: RegistrationWorkflow = Depends(get_workflow),
    profile: dict = Depends(get_profile),
):
    patient = workflow.store.get_patient(patient_id)
    if not patient:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Patient not found")
    bill = bill_for_stored_patient(patient)
    pdf_bytes = build_bill_pdf(bill, profile)
    filename = f"bill-{bill.reference_number}.pdf"
    headers = {"Content-Disposition": f'attachment; filename="{filename}"'}
    return Response(content=pdf_bytes, media_type="application/pdf", headers=headers)

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from fastapi.responses import JSONResponse

from clinic_billing.deps import get_profile, get_workflow
from clinic_billing.schemas.registration import (
    AmountDueOut,
    RegistrationForm,
    SubmissionOut,
    WorkflowStateOut,
)
from clinic_billing.services.bill_pdf import build_bill_pdf
from clinic_billing.services.invoice_builder import AmountParseError, amount_due
from clinic_billing.services.registration import (
    DuplicateSubmissionError,
    FormValidationError,
    RegistrationError,
    RegistrationWorkflow,
    SubmissionInProgressError,
    SubmissionStoreError,
)

router = APIRouter(prefix="/registrations", tags=["registrations"])

_ERROR_STATUS: dict[type[RegistrationError], int] = {
    FormValidationError: 422,
    DuplicateSubmissionError: status.HTTP_409_CONFLICT,
    SubmissionInProgressError: status.HTTP_409_CONFLICT,
    SubmissionStoreError: status.HTTP_502_BAD_GATEWAY,
}


def _state_out(workflow: RegistrationWorkflow) -> WorkflowStateOut:
    return WorkflowStateOut(
        state=workflow.state,
        form=workflow.form,
        bill=workflow.bill,
        roster_size=len(workflow.roster),
    )


@router.post("", response_model=SubmissionOut, status_code=status.HTTP_201_CREATED)
def submit_registration(
    payload: RegistrationForm,
    workflow: RegistrationWorkflow = Depends(get_workflow),
):
    try:
        return workflow.submit(payload)
    except RegistrationError as exc:
        return JSONResponse(
            status_code=_ERROR_STATUS.get(type(exc), status.HTTP_400_BAD_REQUEST),
            content=exc.result.model_dump(mode="json"),
        )


@router.get("/state", response_model=WorkflowStateOut)
def get_registration_state(workflow: RegistrationWorkflow = Depends(get_workflow)):
    return _state_out(workflow)


@router.post("/clear", response_model=WorkflowStateOut)
def clear_registration(workflow: RegistrationWorkflow = Depends(get_workflow)):
    if workflow.busy:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT, detail="A submission is in progress"
        )
    workflow.clear()
    return _state_out(workflow)


@router.get("/amount-due", response_model=AmountDueOut)
def preview_amount_due(
    total_amount: str | None = Query(default=None),
    paid_amount: str | None = Query(default=None),
):
    try:
        return amount_due(total_amount, paid_amount)
    except AmountParseError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))


@router.get("/bill.pdf")
def get_current_bill_pdf(
    workflow: RegistrationWorkflow = Depends(get_workflow),
    profile: dict = Depends(get_profile),
):
    bill = workflow.bill
    if bill is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No bill ready to print")
    pdf_bytes = build_bill_pdf(bill, profile)
    filename = f"bill-{bill.reference_number}.pdf"
    headers = {"Content-Disposition": f'inline; filename="{filename}"'}
    return Response(content=pdf_bytes, media_type="application/pdf", headers=headers)

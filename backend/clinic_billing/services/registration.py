"""Patient registration and first-visit billing workflow.

The workflow owns the roster: it is the only writer, and it replaces the
roster wholesale after every successful insert so the duplicate guard always
sees the store's current view before the next submission starts.
"""

from __future__ import annotations

import logging
import threading

from clinic_billing.schemas.patient import PatientOut
from clinic_billing.schemas.registration import (
    BillProjection,
    Notice,
    NoticeLevel,
    RegistrationForm,
    SubmissionOut,
    WorkflowState,
)
from clinic_billing.services.form_validation import validate_registration_form
from clinic_billing.services.invoice_builder import assemble_patient
from clinic_billing.services.patient_store import PatientStore, StoreError
from clinic_billing.services.roster import Roster, is_duplicate

logger = logging.getLogger("clinic_billing.registration")

SUCCESS_MESSAGE = "Patient registered successfully"
DUPLICATE_MESSAGE = "This patient has already been submitted"
STORE_FAILURE_MESSAGE = "Could not save the patient, please try again"
REFRESH_FAILURE_MESSAGE = "Patient saved but the patient list could not be reloaded"


class RegistrationError(Exception):
    def __init__(self, result: SubmissionOut) -> None:
        super().__init__(result.notice.message if result.notice else result.state.value)
        self.result = result


class FormValidationError(RegistrationError):
    pass


class DuplicateSubmissionError(RegistrationError):
    pass


class SubmissionInProgressError(RegistrationError):
    pass


class SubmissionStoreError(RegistrationError):
    pass


def build_bill(patient: PatientOut, values: RegistrationForm) -> BillProjection:
    return BillProjection(
        patient_id=patient.id,
        fullname=patient.fullname,
        mobile=patient.mobile,
        registration_id=patient.registration_id,
        reference_number=patient.invoice.invoice_number,
        issued_at=patient.created_at,
        treatment=patient.treatment,
        total=patient.invoice.total,
        paid=patient.paid_total,
        amount_due=patient.pending_total,
        transactions=patient.invoice.transactions,
        values=values,
    )


def bill_for_stored_patient(patient: PatientOut) -> BillProjection:
    values = RegistrationForm(
        fullname=patient.fullname,
        mobile=patient.mobile,
        treatment=patient.treatment,
        total_amount=str(patient.invoice.total),
        paid_amount=str(patient.paid_total),
    )
    return build_bill(patient, values)


class RegistrationWorkflow:
    def __init__(
        self,
        store: PatientStore,
        *,
        roster: Roster | None = None,
        default_payment_method: str | None = None,
    ) -> None:
        self.store = store
        self.roster = roster if roster is not None else Roster()
        self.default_payment_method = default_payment_method
        self.state = WorkflowState.idle
        self.form = self._blank_form()
        self.bill: BillProjection | None = None
        self._in_flight = threading.Lock()

    def _blank_form(self) -> RegistrationForm:
        return RegistrationForm(payment_type=self.default_payment_method or "")

    @property
    def busy(self) -> bool:
        return self._in_flight.locked()

    def refresh(self) -> list[PatientOut]:
        patients = self.store.fetch_all()
        self.roster.replace(patients)
        logger.info("Roster loaded (%s patients).", len(self.roster))
        return self.roster.snapshot()

    def clear(self) -> None:
        self.state = WorkflowState.idle
        self.bill = None
        self.form = self._blank_form()

    def submit(self, form: RegistrationForm) -> SubmissionOut:
        if not self._in_flight.acquire(blocking=False):
            logger.warning("Submission refused, another submission is in flight.")
            raise SubmissionInProgressError(
                SubmissionOut(
                    state=self.state,
                    notice=Notice(
                        level=NoticeLevel.error, message="A submission is already in progress"
                    ),
                )
            )
        try:
            return self._submit(form)
        finally:
            self._in_flight.release()

    def _submit(self, form: RegistrationForm) -> SubmissionOut:
        self.form = form
        self.bill = None
        self.state = WorkflowState.validating
        validation = validate_registration_form(
            form, default_payment_method=self.default_payment_method
        )
        if not validation.valid:
            self.state = WorkflowState.idle
            raise FormValidationError(
                SubmissionOut(state=self.state, errors=validation.errors)
            )
        values = validation.parsed

        if is_duplicate(self.roster, values.fullname, values.mobile):
            self.state = WorkflowState.rejected_duplicate
            logger.info("Duplicate submission rejected for %s / %s", values.fullname, values.mobile)
            notice = Notice(level=NoticeLevel.error, message=DUPLICATE_MESSAGE)
            self.state = WorkflowState.idle
            raise DuplicateSubmissionError(
                SubmissionOut(state=WorkflowState.rejected_duplicate, notice=notice)
            )

        draft = assemble_patient(values)

        self.state = WorkflowState.persisting
        try:
            patient = self.store.insert_patient(draft)
        except StoreError as exc:
            self.state = WorkflowState.idle
            raise SubmissionStoreError(
                SubmissionOut(
                    state=self.state,
                    notice=Notice(level=NoticeLevel.error, message=STORE_FAILURE_MESSAGE),
                )
            ) from exc

        self.state = WorkflowState.refreshing
        try:
            patients = self.store.fetch_all()
        except StoreError as exc:
            self.state = WorkflowState.idle
            raise SubmissionStoreError(
                SubmissionOut(
                    state=self.state,
                    notice=Notice(level=NoticeLevel.error, message=REFRESH_FAILURE_MESSAGE),
                    patient=patient,
                )
            ) from exc
        self.roster.replace(patients)

        self.bill = build_bill(patient, form)
        self.form = self._blank_form()
        self.state = WorkflowState.ready_to_print
        logger.info(
            "Registered %s as %s, bill %s",
            patient.fullname,
            patient.registration_id,
            patient.invoice.invoice_number,
        )
        return SubmissionOut(
            state=self.state,
            notice=Notice(level=NoticeLevel.success, message=SUCCESS_MESSAGE),
            patient=patient,
            bill=self.bill,
        )

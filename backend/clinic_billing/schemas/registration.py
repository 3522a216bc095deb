import enum
from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from clinic_billing.models.invoice import PaymentMethod
from clinic_billing.schemas.patient import PatientOut, TransactionOut


class WorkflowState(str, enum.Enum):
    idle = "idle"
    validating = "validating"
    rejected_duplicate = "rejected_duplicate"
    persisting = "persisting"
    refreshing = "refreshing"
    ready_to_print = "ready_to_print"


class NoticeLevel(str, enum.Enum):
    success = "success"
    error = "error"


class Notice(BaseModel):
    level: NoticeLevel
    message: str


class RegistrationForm(BaseModel):
    fullname: str = ""
    mobile: str = ""
    treatment: str = ""
    total_amount: str = ""
    paid_amount: str = ""
    payment_type: str = ""

    @field_validator("*", mode="before")
    @classmethod
    def _coerce_to_text(cls, value):
        if value is None:
            return ""
        if isinstance(value, (int, float, Decimal)) and not isinstance(value, bool):
            return str(value)
        return value


class ParsedRegistration(BaseModel):
    fullname: str
    mobile: str
    treatment: str
    total: Decimal
    paid: Decimal
    payment_method: PaymentMethod


class FormValidation(BaseModel):
    valid: bool
    errors: dict[str, str] = Field(default_factory=dict)
    parsed: Optional[ParsedRegistration] = None


class BillProjection(BaseModel):
    patient_id: int
    fullname: str
    mobile: str
    registration_id: str
    reference_number: str
    issued_at: datetime
    treatment: str
    total: Decimal
    paid: Decimal
    amount_due: Decimal
    transactions: list[TransactionOut]
    values: RegistrationForm


class SubmissionOut(BaseModel):
    state: WorkflowState
    notice: Optional[Notice] = None
    errors: dict[str, str] = Field(default_factory=dict)
    patient: Optional[PatientOut] = None
    bill: Optional[BillProjection] = None


class WorkflowStateOut(BaseModel):
    state: WorkflowState
    form: RegistrationForm
    bill: Optional[BillProjection] = None
    roster_size: int


class AmountDueOut(BaseModel):
    total: Decimal
    paid: Decimal
    amount_due: Decimal

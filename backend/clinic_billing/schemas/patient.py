from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from clinic_billing.models.invoice import PaymentMethod, TransactionStatus


class TransactionDraft(BaseModel):
    status: TransactionStatus
    amount: Decimal
    description: str
    payment_method: PaymentMethod = PaymentMethod.none


class InvoiceDraft(BaseModel):
    description: str
    total: Decimal
    transactions: list[TransactionDraft] = Field(default_factory=list)


class PatientDraft(BaseModel):
    fullname: str
    mobile: str
    treatment: str = ""
    invoice: InvoiceDraft


class TransactionOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    status: TransactionStatus
    amount: Decimal
    description: str
    payment_method: PaymentMethod


class InvoiceOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    invoice_number: str
    description: str
    total: Decimal
    transactions: list[TransactionOut]


class PatientOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    registration_id: str
    fullname: str
    mobile: str
    treatment: str
    created_at: datetime
    invoice: InvoiceOut

    @property
    def paid_total(self) -> Decimal:
        return sum(
            (tx.amount for tx in self.invoice.transactions if tx.status == TransactionStatus.paid),
            Decimal("0"),
        )

    @property
    def pending_total(self) -> Decimal:
        return sum(
            (tx.amount for tx in self.invoice.transactions if tx.status == TransactionStatus.pending),
            Decimal("0"),
        )

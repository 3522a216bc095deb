from clinic_billing.models.base import Base
from clinic_billing.models.patient import Patient
from clinic_billing.models.invoice import (
    Invoice,
    InvoiceTransaction,
    PaymentMethod,
    TransactionStatus,
)

__all__ = [
    "Base",
    "Patient",
    "Invoice",
    "InvoiceTransaction",
    "PaymentMethod",
    "TransactionStatus",
]

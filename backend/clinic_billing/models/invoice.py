from __future__ import annotations

import enum
from decimal import Decimal

from sqlalchemy import Enum, ForeignKey, Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from clinic_billing.models.base import Base, TimestampMixin

AMOUNT_PRECISION = 12
AMOUNT_SCALE = 2
AMOUNT = Numeric(AMOUNT_PRECISION, AMOUNT_SCALE, asdecimal=True)

# Largest magnitude the amount columns hold exactly.
AMOUNT_LIMIT = Decimal(10) ** (AMOUNT_PRECISION - AMOUNT_SCALE)


class TransactionStatus(str, enum.Enum):
    pending = "pending"
    paid = "paid"


class PaymentMethod(str, enum.Enum):
    none = "none"
    cash = "cash"
    card = "card"
    bank_transfer = "bank_transfer"
    other = "other"


def format_invoice_number(invoice_id: int) -> str:
    return f"BILL-{invoice_id:06d}"


class Invoice(Base, TimestampMixin):
    __tablename__ = "invoices"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    patient_id: Mapped[int] = mapped_column(
        ForeignKey("patients.id"), nullable=False, unique=True, index=True
    )
    invoice_number: Mapped[str] = mapped_column(String(32), nullable=False, default="", index=True)
    description: Mapped[str] = mapped_column(String(255), nullable=False)
    total: Mapped[Decimal] = mapped_column(AMOUNT, nullable=False, default=Decimal("0"))

    patient = relationship("Patient", back_populates="invoice")
    transactions = relationship(
        "InvoiceTransaction",
        back_populates="invoice",
        cascade="all, delete-orphan",
        order_by="InvoiceTransaction.position",
        lazy="selectin",
    )


class InvoiceTransaction(Base):
    __tablename__ = "invoice_transactions"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    invoice_id: Mapped[int] = mapped_column(ForeignKey("invoices.id"), nullable=False, index=True)
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    status: Mapped[TransactionStatus] = mapped_column(
        Enum(TransactionStatus, name="transaction_status"), nullable=False
    )
    amount: Mapped[Decimal] = mapped_column(AMOUNT, nullable=False)
    description: Mapped[str] = mapped_column(String(255), nullable=False)
    payment_method: Mapped[PaymentMethod] = mapped_column(
        Enum(PaymentMethod, name="payment_method"), nullable=False, default=PaymentMethod.none
    )

    invoice = relationship("Invoice", back_populates="transactions")

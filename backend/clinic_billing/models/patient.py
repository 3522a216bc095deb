from __future__ import annotations

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from clinic_billing.models.base import Base, TimestampMixin


def format_registration_id(patient_id: int) -> str:
    return f"REG-{patient_id:06d}"


class Patient(Base, TimestampMixin):
    __tablename__ = "patients"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    fullname: Mapped[str] = mapped_column(String(200), nullable=False, index=True)
    mobile: Mapped[str] = mapped_column(String(50), nullable=False, index=True)
    treatment: Mapped[str] = mapped_column(Text, nullable=False, default="")

    invoice = relationship(
        "Invoice",
        back_populates="patient",
        uselist=False,
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    @property
    def registration_id(self) -> str:
        return format_registration_id(self.id)

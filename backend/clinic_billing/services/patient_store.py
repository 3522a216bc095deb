from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Callable, Protocol

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from clinic_billing.models.invoice import Invoice, InvoiceTransaction, format_invoice_number
from clinic_billing.models.patient import Patient, format_registration_id
from clinic_billing.schemas.patient import InvoiceOut, PatientDraft, PatientOut, TransactionOut

logger = logging.getLogger("clinic_billing.store")


class StoreError(RuntimeError):
    pass


class PatientStore(Protocol):
    def insert_patient(self, draft: PatientDraft) -> PatientOut:
        raise NotImplementedError

    def fetch_all(self) -> list[PatientOut]:
        raise NotImplementedError

    def get_patient(self, patient_id: int) -> PatientOut | None:
        raise NotImplementedError


class SqlPatientStore:
    def __init__(self, session_factory: Callable[[], Session]) -> None:
        self._session_factory = session_factory

    def insert_patient(self, draft: PatientDraft) -> PatientOut:
        session = self._session_factory()
        try:
            patient = Patient(
                fullname=draft.fullname,
                mobile=draft.mobile,
                treatment=draft.treatment,
            )
            invoice = Invoice(
                invoice_number="",
                description=draft.invoice.description,
                total=draft.invoice.total,
            )
            invoice.transactions = [
                InvoiceTransaction(
                    position=position,
                    status=tx.status,
                    amount=tx.amount,
                    description=tx.description,
                    payment_method=tx.payment_method,
                )
                for position, tx in enumerate(draft.invoice.transactions)
            ]
            patient.invoice = invoice
            session.add(patient)
            session.flush()
            invoice.invoice_number = format_invoice_number(invoice.id)
            session.commit()
            session.refresh(patient)
            record = PatientOut.model_validate(patient)
        except SQLAlchemyError as exc:
            session.rollback()
            logger.exception("Patient insert failed for %s", draft.fullname)
            raise StoreError("Could not save patient") from exc
        finally:
            session.close()
        logger.info("Inserted patient %s (%s)", record.registration_id, record.invoice.invoice_number)
        return record

    def fetch_all(self) -> list[PatientOut]:
        session = self._session_factory()
        try:
            rows = session.scalars(select(Patient).order_by(Patient.id.asc())).all()
            return [PatientOut.model_validate(row) for row in rows]
        except SQLAlchemyError as exc:
            logger.exception("Patient roster fetch failed")
            raise StoreError("Could not load patients") from exc
        finally:
            session.close()

    def get_patient(self, patient_id: int) -> PatientOut | None:
        session = self._session_factory()
        try:
            patient = session.get(Patient, patient_id)
            return PatientOut.model_validate(patient) if patient else None
        except SQLAlchemyError as exc:
            logger.exception("Patient fetch failed for id=%s", patient_id)
            raise StoreError("Could not load patient") from exc
        finally:
            session.close()


class InMemoryPatientStore:
    """Store kept in process memory, used for tests and demos."""

    def __init__(self, patients: list[PatientOut] | None = None) -> None:
        self._patients: list[PatientOut] = list(patients or [])
        self._next_patient_id = max((p.id for p in self._patients), default=0) + 1
        self._next_tx_id = 1

    def insert_patient(self, draft: PatientDraft) -> PatientOut:
        patient_id = self._next_patient_id
        self._next_patient_id += 1
        transactions = []
        for tx in draft.invoice.transactions:
            transactions.append(
                TransactionOut(
                    id=self._next_tx_id,
                    status=tx.status,
                    amount=tx.amount,
                    description=tx.description,
                    payment_method=tx.payment_method,
                )
            )
            self._next_tx_id += 1
        record = PatientOut(
            id=patient_id,
            registration_id=format_registration_id(patient_id),
            fullname=draft.fullname,
            mobile=draft.mobile,
            treatment=draft.treatment,
            created_at=datetime.now(timezone.utc),
            invoice=InvoiceOut(
                id=patient_id,
                invoice_number=format_invoice_number(patient_id),
                description=draft.invoice.description,
                total=draft.invoice.total,
                transactions=transactions,
            ),
        )
        self._patients.append(record)
        return record

    def fetch_all(self) -> list[PatientOut]:
        return list(self._patients)

    def get_patient(self, patient_id: int) -> PatientOut | None:
        for patient in self._patients:
            if patient.id == patient_id:
                return patient
        return None

from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from clinic_billing.deps import get_profile, get_workflow
from clinic_billing.main import app
from clinic_billing.services.patient_store import InMemoryPatientStore, StoreError
from clinic_billing.services.registration import (
    REFRESH_FAILURE_MESSAGE,
    STORE_FAILURE_MESSAGE,
    RegistrationWorkflow,
)


class FailingStore(InMemoryPatientStore):
    def __init__(self) -> None:
        super().__init__()
        self.fail_insert = False
        self.fail_fetch = False
        self.fail_get = False

    def insert_patient(self, draft):
        if self.fail_insert:
            raise StoreError("Could not save patient")
        return super().insert_patient(draft)

    def fetch_all(self):
        if self.fail_fetch:
            raise StoreError("Could not load patients")
        return super().fetch_all()

    def get_patient(self, patient_id):
        if self.fail_get:
            raise StoreError("Could not load patient")
        return super().get_patient(patient_id)


@pytest.fixture
def failing_store():
    return FailingStore()


@pytest.fixture
def failing_client(failing_store, clinic_profile):
    workflow = RegistrationWorkflow(failing_store, default_payment_method="cash")
    app.dependency_overrides[get_workflow] = lambda: workflow
    app.dependency_overrides[get_profile] = lambda: clinic_profile
    client = TestClient(app)
    try:
        yield client
    finally:
        app.dependency_overrides.clear()


def _payload(**overrides):
    data = {
        "fullname": "A",
        "mobile": "1",
        "treatment": "Braces",
        "total_amount": "1000",
        "paid_amount": "400",
        "payment_type": "Cash",
    }
    data.update(overrides)
    return data


def test_submit_registration_creates_patient_and_bill(api_client):
    res = api_client.post("/registrations", json=_payload())
    assert res.status_code == 201, res.text
    body = res.json()

    assert body["state"] == "ready_to_print"
    assert body["notice"]["level"] == "success"
    invoice = body["patient"]["invoice"]
    assert Decimal(invoice["total"]) == Decimal("1000")
    assert [
        (tx["status"], Decimal(tx["amount"]), tx["payment_method"])
        for tx in invoice["transactions"]
    ] == [("pending", Decimal("600"), "none"), ("paid", Decimal("400"), "cash")]
    assert body["bill"]["reference_number"] == invoice["invoice_number"]
    assert body["bill"]["values"]["payment_type"] == "Cash"

    roster = api_client.get("/patients")
    assert roster.status_code == 200
    assert [p["id"] for p in roster.json()] == [body["patient"]["id"]]


def test_duplicate_submission_returns_conflict(api_client):
    assert api_client.post("/registrations", json=_payload()).status_code == 201

    res = api_client.post("/registrations", json=_payload())

    assert res.status_code == 409
    body = res.json()
    assert body["state"] == "rejected_duplicate"
    assert body["notice"]["level"] == "error"
    assert len(api_client.get("/patients").json()) == 1


def test_invalid_form_returns_field_errors(api_client):
    res = api_client.post("/registrations", json=_payload(mobile="", paid_amount="x"))

    assert res.status_code == 422
    assert set(res.json()["errors"]) == {"mobile", "paid_amount"}


def test_state_and_clear(api_client):
    assert api_client.get("/registrations/state").json()["state"] == "idle"
    api_client.post("/registrations", json=_payload())

    state = api_client.get("/registrations/state").json()
    assert state["state"] == "ready_to_print"
    assert state["bill"]["fullname"] == "A"
    assert state["roster_size"] == 1

    cleared = api_client.post("/registrations/clear")
    assert cleared.status_code == 200
    assert cleared.json()["state"] == "idle"
    assert cleared.json()["bill"] is None


def test_bill_pdf_only_when_ready(api_client):
    assert api_client.get("/registrations/bill.pdf").status_code == 404

    api_client.post("/registrations", json=_payload())
    res = api_client.get("/registrations/bill.pdf")

    assert res.status_code == 200
    assert res.headers["content-type"] == "application/pdf"
    assert res.content.startswith(b"%PDF")


def test_reprint_stored_bill(api_client):
    patient_id = api_client.post("/registrations", json=_payload()).json()["patient"]["id"]

    res = api_client.get(f"/patients/{patient_id}/bill.pdf")
    assert res.status_code == 200
    assert res.content.startswith(b"%PDF")

    assert api_client.get(f"/patients/{patient_id + 1}/bill.pdf").status_code == 404


def test_amount_due_preview(api_client):
    res = api_client.get(
        "/registrations/amount-due", params={"total_amount": "1000", "paid_amount": "1200"}
    )
    assert res.status_code == 200
    assert Decimal(res.json()["amount_due"]) == Decimal("-200")

    assert api_client.get("/registrations/amount-due", params={"total_amount": "x"}).status_code == 400


def test_health(api_client):
    assert api_client.get("/health").json() == {"status": "ok"}


def test_oversized_amount_is_rejected_before_saving(api_client):
    res = api_client.post(
        "/registrations", json=_payload(total_amount="12345678901234567.89", paid_amount="0.01")
    )

    assert res.status_code == 422
    assert "total_amount" in res.json()["errors"]
    assert api_client.get("/patients").json() == []


def test_insert_failure_returns_bad_gateway_and_keeps_form(failing_client, failing_store):
    failing_store.fail_insert = True

    res = failing_client.post("/registrations", json=_payload())

    assert res.status_code == 502
    body = res.json()
    assert body["state"] == "idle"
    assert body["notice"] == {"level": "error", "message": STORE_FAILURE_MESSAGE}
    assert body["patient"] is None

    state = failing_client.get("/registrations/state").json()
    assert state["state"] == "idle"
    assert state["form"]["fullname"] == "A"
    assert state["bill"] is None
    assert state["roster_size"] == 0


def test_refresh_failure_returns_bad_gateway_and_keeps_roster(failing_client, failing_store):
    failing_store.fail_fetch = True

    res = failing_client.post("/registrations", json=_payload())

    assert res.status_code == 502
    body = res.json()
    assert body["notice"] == {"level": "error", "message": REFRESH_FAILURE_MESSAGE}
    assert body["patient"]["fullname"] == "A"

    state = failing_client.get("/registrations/state").json()
    assert state["state"] == "idle"
    assert state["roster_size"] == 0
    assert failing_client.get("/patients").json() == []


def test_store_error_outside_the_workflow_maps_to_bad_gateway(failing_client, failing_store):
    failing_store.fail_get = True

    res = failing_client.get("/patients/1")

    assert res.status_code == 502
    assert res.json() == {"detail": "Could not load patient"}

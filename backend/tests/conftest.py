from datetime import timezone

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from clinic_billing.deps import get_profile, get_timezone, get_workflow
from clinic_billing.main import app
from clinic_billing.models import Base
from clinic_billing.services.patient_store import InMemoryPatientStore, SqlPatientStore
from clinic_billing.services.registration import RegistrationWorkflow


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def sql_store(session_factory):
    return SqlPatientStore(session_factory)


@pytest.fixture
def memory_store():
    return InMemoryPatientStore()


@pytest.fixture
def clinic_profile():
    return {
        "name": "Smile Dental Care",
        "address_lines": ["12 Main Road", "Chennai 600001"],
        "phone": "044 2345 6789",
        "currency_symbol": "Rs.",
    }


@pytest.fixture
def workflow(sql_store):
    return RegistrationWorkflow(sql_store, default_payment_method="cash")


@pytest.fixture
def api_client(workflow, clinic_profile):
    app.dependency_overrides[get_workflow] = lambda: workflow
    app.dependency_overrides[get_profile] = lambda: clinic_profile
    app.dependency_overrides[get_timezone] = lambda: timezone.utc
    client = TestClient(app)
    try:
        yield client
    finally:
        app.dependency_overrides.clear()

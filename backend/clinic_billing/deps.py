from datetime import tzinfo

from clinic_billing.core.settings import settings
from clinic_billing.db.session import SessionLocal
from clinic_billing.services.clinic_profile import load_profile
from clinic_billing.services.patient_store import SqlPatientStore
from clinic_billing.services.registration import RegistrationWorkflow

_workflow: RegistrationWorkflow | None = None


def get_workflow() -> RegistrationWorkflow:
    global _workflow
    if _workflow is None:
        _workflow = RegistrationWorkflow(
            SqlPatientStore(SessionLocal),
            default_payment_method=settings.default_payment_method,
        )
    return _workflow


def get_profile() -> dict[str, object]:
    return load_profile(settings)


def get_timezone() -> tzinfo:
    return settings.clinic_tz

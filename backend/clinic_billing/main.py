import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from clinic_billing.core.settings import settings, validate_settings
from clinic_billing.db.session import engine
from clinic_billing.deps import get_workflow
from clinic_billing.models import Base
from clinic_billing.routers.patients import router as patients_router
from clinic_billing.routers.registrations import router as registrations_router
from clinic_billing.routers.reports import router as reports_router
from clinic_billing.services.patient_store import StoreError

app = FastAPI(title="Clinic Billing API", version="0.1.0")
logger = logging.getLogger("clinic_billing.startup")


@app.exception_handler(StoreError)
async def store_error_handler(request: Request, exc: StoreError):
    return JSONResponse(status_code=502, content={"detail": str(exc)})


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    request_id = request.headers.get("x-request-id")
    logger.exception("Unhandled server error", extra={"request_id": request_id})
    payload = {"detail": "Internal server error"}
    if request_id:
        payload["request_id"] = request_id
    return JSONResponse(status_code=500, content=payload)


@app.on_event("startup")
def startup():
    validate_settings(settings)
    Base.metadata.create_all(bind=engine)
    try:
        patients = get_workflow().refresh()
    except StoreError:
        logger.exception("Initial roster load failed; starting with an empty roster.")
    else:
        logger.info("Startup complete (%s patients on roster).", len(patients))


@app.get("/health")
def health():
    return {"status": "ok"}


app.include_router(registrations_router)
app.include_router(patients_router)
app.include_router(reports_router)

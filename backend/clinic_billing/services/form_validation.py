from __future__ import annotations

from decimal import Decimal

from clinic_billing.core.settings import settings
from clinic_billing.models.invoice import AMOUNT_LIMIT, PaymentMethod
from clinic_billing.schemas.registration import (
    FormValidation,
    ParsedRegistration,
    RegistrationForm,
)
from clinic_billing.services.invoice_builder import AmountParseError, parse_amount

MAX_FRACTION_DIGITS = 2

SELECTABLE_METHODS = tuple(method for method in PaymentMethod if method != PaymentMethod.none)


def resolve_payment_method(raw: str | None, default: str | None = None) -> PaymentMethod | None:
    text = (raw or "").strip().lower()
    if not text:
        text = (default or settings.default_payment_method).strip().lower()
    for method in SELECTABLE_METHODS:
        if method.value == text:
            return method
    return None


def _check_amount(raw: str, errors: dict[str, str], field: str) -> Decimal | None:
    try:
        value = parse_amount(raw)
    except AmountParseError:
        errors[field] = "Must be a number"
        return None
    if -value.as_tuple().exponent > MAX_FRACTION_DIGITS:
        errors[field] = f"At most {MAX_FRACTION_DIGITS} decimal places"
        return None
    if abs(value) >= AMOUNT_LIMIT:
        errors[field] = f"Must be less than {AMOUNT_LIMIT:,}"
        return None
    return value


def validate_registration_form(
    form: RegistrationForm, *, default_payment_method: str | None = None
) -> FormValidation:
    errors: dict[str, str] = {}
    fullname = form.fullname.strip()
    mobile = form.mobile.strip()
    if not fullname:
        errors["fullname"] = "Full name is required"
    if not mobile:
        errors["mobile"] = "Mobile is required"

    total = _check_amount(form.total_amount, errors, "total_amount")
    paid = _check_amount(form.paid_amount, errors, "paid_amount")
    if total is not None and paid is not None and abs(total - paid) >= AMOUNT_LIMIT:
        errors["paid_amount"] = f"Pending amount must be less than {AMOUNT_LIMIT:,}"

    method = resolve_payment_method(form.payment_type, default_payment_method)
    if method is None:
        errors["payment_type"] = "Unknown payment type"

    if errors:
        return FormValidation(valid=False, errors=errors)
    return FormValidation(
        valid=True,
        parsed=ParsedRegistration(
            fullname=fullname,
            mobile=mobile,
            treatment=form.treatment.strip(),
            total=total,
            paid=paid,
            payment_method=method,
        ),
    )

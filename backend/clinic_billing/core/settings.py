from __future__ import annotations

import logging
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from clinic_billing.models.invoice import PaymentMethod

logger = logging.getLogger("clinic_billing.config")

DEFAULT_CLINIC_NAME = "Clinic"


class Settings(BaseSettings):
    app_env: str = "development"
    database_url: str = "sqlite:///./clinic_billing.db"
    clinic_name: str = DEFAULT_CLINIC_NAME
    clinic_address: str = ""
    clinic_phone: str | None = None
    currency_symbol: str = "Rs."
    default_payment_method: str = "cash"
    clinic_timezone: str = "UTC"

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    @field_validator("currency_symbol", "default_payment_method", "clinic_timezone", mode="before")
    @classmethod
    def _coerce_empty_strings(cls, value, info):
        if value in {"", None}:
            return cls.model_fields[info.field_name].default
        return value

    @property
    def clinic_address_lines(self) -> list[str]:
        return [line.strip() for line in self.clinic_address.split("|") if line.strip()]

    @property
    def clinic_tz(self) -> ZoneInfo:
        return ZoneInfo(self.clinic_timezone)


def _is_production(app_env: str) -> bool:
    return app_env.strip().lower() in {"prod", "production"}


def validate_settings(settings: Settings) -> None:
    production = _is_production(settings.app_env)
    failures: list[str] = []
    warnings: list[str] = []

    method = settings.default_payment_method.strip().lower()
    if method not in {m.value for m in PaymentMethod} or method == PaymentMethod.none.value:
        failures.append(f"DEFAULT_PAYMENT_METHOD {settings.default_payment_method!r} is not selectable")

    try:
        settings.clinic_tz
    except (ZoneInfoNotFoundError, ValueError):
        failures.append(f"CLINIC_TIMEZONE {settings.clinic_timezone!r} is not a known time zone")

    if settings.clinic_name.strip() == DEFAULT_CLINIC_NAME:
        msg = "CLINIC_NAME is still the placeholder value"
        if production:
            failures.append(msg)
        else:
            warnings.append(msg)

    if settings.database_url.startswith("sqlite") and production:
        warnings.append("DATABASE_URL points at SQLite in production")

    for warning in warnings:
        logger.warning("Config warning: %s", warning)

    if failures:
        raise RuntimeError("Config validation failed: " + "; ".join(failures))


settings = Settings()

from __future__ import annotations

from clinic_billing.core.settings import Settings, settings


def load_profile(config: Settings | None = None) -> dict[str, object]:
    config = config or settings
    return {
        "name": config.clinic_name,
        "address_lines": config.clinic_address_lines,
        "phone": config.clinic_phone,
        "currency_symbol": config.currency_symbol,
    }

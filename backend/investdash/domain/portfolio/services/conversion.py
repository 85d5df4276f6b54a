from __future__ import annotations

from investdash.core.config import settings


BASE_CURRENCY = "USD"


def mock_usd_equivalent(amount: float, currency: str, *, multiplier: float | None = None) -> float:
    """
    Placeholder conversion used only when an investment is created without
    a USD value: USD amounts pass through, anything else gets a fixed multiplier.
    """
    if currency.upper() == BASE_CURRENCY:
        return amount
    rate = settings.mock_fx_multiplier if multiplier is None else multiplier
    return amount * rate

"""
Order Ledger configuration.

Usage in settings.py:
    ORDERLEDGER = {
        "INTENT_VALIDATOR": "orderledger.adapters.catalog.CatalogIntentValidator",
        "VALIDATE_INPUT": True,
        "DEFAULT_PAGE_SIZE": 15,
        "MAX_PAGE_SIZE": 100,
        "LOCK_TIMEOUT_MS": 0,
    }
"""

from dataclasses import dataclass
from typing import Any

from django.conf import settings


@dataclass
class OrderLedgerSettings:
    """Order Ledger configuration settings."""

    # Boundary validator for inbound order intents (dotted path)
    INTENT_VALIDATOR: str = "orderledger.adapters.catalog.CatalogIntentValidator"

    # Run the intent validator before create/update
    VALIDATE_INPUT: bool = True

    # Pagination for read queries
    DEFAULT_PAGE_SIZE: int = 15
    MAX_PAGE_SIZE: int = 100

    # PostgreSQL lock_timeout per unit of work (0 = wait forever)
    LOCK_TIMEOUT_MS: int = 0


def get_orderledger_settings() -> OrderLedgerSettings:
    """Load settings from Django settings."""
    user_settings: dict[str, Any] = getattr(settings, "ORDERLEDGER", {})
    return OrderLedgerSettings(**{
        k: v for k, v in user_settings.items()
        if k in OrderLedgerSettings.__dataclass_fields__
    })


class _LazySettings:
    """Lazy proxy that re-reads settings on every attribute access."""

    def __getattr__(self, name):
        return getattr(get_orderledger_settings(), name)


orderledger_settings = _LazySettings()

"""
Order Ledger Adapters.

Implementations of protocols, and the loader for the configured ones.

Usage:
    from orderledger.adapters import get_intent_validator

    validator = get_intent_validator()
    result = validator.validate_create('Ann', central.pk, items)

Settings:
    ORDERLEDGER = {
        "INTENT_VALIDATOR": "orderledger.adapters.catalog.CatalogIntentValidator",
    }
"""

from __future__ import annotations

import logging
import threading

from django.core.exceptions import ImproperlyConfigured
from django.utils.module_loading import import_string

from orderledger.conf import orderledger_settings
from orderledger.protocols.validation import IntentValidator

logger = logging.getLogger(__name__)


# Cached validator instance
_lock = threading.Lock()
_intent_validator: IntentValidator | None = None


def get_intent_validator() -> IntentValidator:
    """
    Return the configured intent validator.

    Raises:
        ImproperlyConfigured: If INTENT_VALIDATOR is empty, cannot be
            imported, or does not implement IntentValidator
    """
    global _intent_validator

    if _intent_validator is None:
        with _lock:
            if _intent_validator is None:  # double-checked
                validator_path = orderledger_settings.INTENT_VALIDATOR

                if not validator_path:
                    raise ImproperlyConfigured(
                        "ORDERLEDGER['INTENT_VALIDATOR'] must be configured. "
                        "Example: 'orderledger.adapters.catalog.CatalogIntentValidator'"
                    )

                try:
                    validator = import_string(validator_path)()
                except ImportError as e:
                    raise ImproperlyConfigured(
                        f"Failed to import intent validator '{validator_path}': {e}"
                    ) from e

                if not isinstance(validator, IntentValidator):
                    raise ImproperlyConfigured(
                        f"'{validator_path}' does not implement IntentValidator"
                    )
                _intent_validator = validator
                logger.debug("Loaded intent validator: %s", validator_path)

    return _intent_validator


def reset_intent_validator() -> None:
    """Reset the cached validator. Useful for testing."""
    global _intent_validator
    _intent_validator = None


__all__ = [
    "get_intent_validator",
    "reset_intent_validator",
]

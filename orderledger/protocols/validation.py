"""
Intent Validation Protocol — Interface for boundary checks on order intents.

The request layer (or any other caller) validates shape and references
before the lifecycle engine runs. Order Ledger defines this protocol; the
default implementation lives in orderledger.adapters.catalog.

Stock sufficiency is NOT part of this protocol: it is always checked by
the engine under lock.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable


@dataclass(frozen=True)
class IntentError:
    """One failed check."""

    field: str  # "customer", "warehouse_id", "items.0.quantity", ...
    code: str  # "required", "not_found", "invalid", ...
    message: str | None = None

    def as_dict(self) -> dict[str, Any]:
        return {'field': self.field, 'code': self.code, 'message': self.message}


@dataclass(frozen=True)
class IntentValidationResult:
    """Result of validating an order intent."""

    errors: tuple[IntentError, ...] = ()

    @property
    def valid(self) -> bool:
        return not self.errors


@runtime_checkable
class IntentValidator(Protocol):
    """
    Protocol for order intent validation.

    Implementations should check:
    - Required fields are present
    - Referenced warehouse and products exist
    - Quantities are positive integers
    """

    def validate_create(self, customer: str, warehouse_id: Any,
                        items: list[dict]) -> IntentValidationResult:
        """
        Validate a CreateOrder intent.

        Args:
            customer: Customer name
            warehouse_id: Warehouse primary key
            items: List of {"product_id", "quantity"} mappings

        Returns:
            IntentValidationResult (valid when no errors)
        """
        ...

    def validate_update(self, order_id: Any, items: list[dict],
                        customer: str | None = None) -> IntentValidationResult:
        """
        Validate an UpdateOrder intent.

        Args:
            order_id: Order primary key
            items: New list of {"product_id", "quantity"} mappings
            customer: Optional new customer name

        Returns:
            IntentValidationResult (valid when no errors)
        """
        ...

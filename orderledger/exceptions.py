"""
Exceptions for Order Ledger.

Every error is a LedgerError carrying a structured code for programmatic
handling. Subclasses exist for the cases callers branch on.
"""

from decimal import Decimal
from typing import Any


class LedgerError(Exception):
    """
    Structured exception for ledger and order operations.

    Usage:
        try:
            orders.create('Ann', central, items)
        except InsufficientStock as e:
            print(f"Only {e.available} of product {e.product_id} left")
        except LedgerError as e:
            print(e.code, e.message)

    Attributes:
        code: Error code for programmatic handling
        message: Human-readable message
        data: Additional context data
        retryable: Whether retrying the same call may succeed
    """

    code = 'LEDGER_ERROR'
    retryable = False

    _default_messages = {
        'LEDGER_ERROR': 'Ledger operation failed',
        'INSUFFICIENT_STOCK': 'Requested quantity exceeds stock on hand',
        'ILLEGAL_TRANSITION': 'Operation not allowed for the current order status',
        'CORRUPT_LEDGER': 'Ledger is inconsistent with stock',
        'STORAGE_FAULT': 'Storage failure, the operation may be retried',
        'INVALID_QUANTITY': 'Invalid quantity (must be a positive integer)',
        'INVALID_ITEMS': 'Order items failed validation',
        'ORDER_NOT_FOUND': 'Order not found',
        'REASON_REQUIRED': 'Reason is required',
    }

    def __init__(self, code: str | None = None, message: str | None = None, **data):
        self.code = code or self.code
        self.message = message or self._default_messages.get(self.code, self.code)
        self.data = data
        super().__init__(self.message)

    def __str__(self) -> str:
        if not self.data:
            return f"[{self.code}] {self.message}"
        details = ', '.join(f"{k}={v}" for k, v in self.data.items())
        return f"[{self.code}] {self.message} ({details})"

    def as_dict(self) -> dict[str, Any]:
        """Serialize to dict (useful for APIs)."""
        return {
            'code': self.code,
            'message': self.message,
            'retryable': self.retryable,
            'data': {
                k: str(v) if isinstance(v, Decimal) else v
                for k, v in self.data.items()
            }
        }


class InsufficientStock(LedgerError):
    """Requested quantity exceeds what the (product, warehouse) row holds."""

    code = 'INSUFFICIENT_STOCK'

    @property
    def product_id(self):
        return self.data.get('product_id')

    @property
    def warehouse_id(self):
        return self.data.get('warehouse_id')

    @property
    def available(self) -> int:
        """Shortcut for data['available']."""
        return self.data.get('available', 0)

    @property
    def requested(self) -> int:
        """Shortcut for data['requested']."""
        return self.data.get('requested', 0)

    @property
    def shortfall(self) -> int:
        return self.requested - self.available


class IllegalTransition(LedgerError):
    """The order's status forbids the requested action."""

    code = 'ILLEGAL_TRANSITION'


class CorruptLedger(LedgerError):
    """A reversal could not find the stock row it has to credit."""

    code = 'CORRUPT_LEDGER'


class StorageFault(LedgerError):
    """Lock timeout, deadlock, or lost connection. The whole unit of work was rolled back."""

    code = 'STORAGE_FAULT'
    retryable = True

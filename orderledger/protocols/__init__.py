"""
Order Ledger Protocols.

Defines interfaces for external collaborators.
"""

from orderledger.protocols.validation import (
    IntentError,
    IntentValidationResult,
    IntentValidator,
)

__all__ = [
    "IntentError",
    "IntentValidationResult",
    "IntentValidator",
]

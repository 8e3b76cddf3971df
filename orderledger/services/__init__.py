"""
Order ledger services — modular organization of ledger operations.

    from orderledger.services import (
        LedgerStore, StockReservations, MovementReversals,
        OrderLifecycle, OrderQueries, StockMovements,
    )
"""

from orderledger.services.ledger import LedgerStore, unit_of_work
from orderledger.services.lifecycle import OrderLifecycle
from orderledger.services.movements import StockMovements
from orderledger.services.queries import OrderQueries
from orderledger.services.reservations import StockReservations
from orderledger.services.reversals import MovementReversals

__all__ = [
    'LedgerStore',
    'unit_of_work',
    'StockReservations',
    'MovementReversals',
    'OrderLifecycle',
    'OrderQueries',
    'StockMovements',
]

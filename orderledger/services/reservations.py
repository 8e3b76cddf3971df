"""
Stock reservations — debit stock for an order line.

The stock row lock is the only concurrency primitive: check and debit
happen while holding it, so two reservations on the same pair always see
a serial view of the quantity on hand.
"""

import logging

from orderledger.exceptions import InsufficientStock, LedgerError
from orderledger.models.enums import MovementReason
from orderledger.models.movement import ProductMovement
from orderledger.services.ledger import LedgerStore, unit_of_work

logger = logging.getLogger('orderledger')


def validate_quantity(quantity):
    """Quantities are positive ints; bools and decimals are refused."""
    if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
        raise LedgerError('INVALID_QUANTITY', requested=quantity)


class StockReservations:
    """Reservation of stock for order lines."""

    @classmethod
    def reserve(cls, order, product, warehouse, quantity: int,
                reason: str = MovementReason.ORDER) -> ProductMovement:
        """
        Debit stock for one order line.

        1. Locks the (product, warehouse) stock row
        2. Fails when the row is missing or holds less than requested
        3. Decrements stock and appends a movement with delta=-quantity

        Returns:
            The debit movement

        Raises:
            LedgerError('INVALID_QUANTITY'): If quantity is not a positive int
            InsufficientStock: If stock on hand < quantity (nothing changed)

        Concurrency:
            - Runs under unit_of_work() (savepoint when nested)
            - select_for_update() on the stock row, held until the
              enclosing transaction ends
            - No retry: insufficiency is final for this attempt
        """
        validate_quantity(quantity)

        with unit_of_work():
            stock = LedgerStore.lock_stock(product, warehouse)

            if stock is None or stock.quantity < quantity:
                raise InsufficientStock(
                    product_id=getattr(product, 'pk', product),
                    warehouse_id=getattr(warehouse, 'pk', warehouse),
                    requested=quantity,
                    available=stock.quantity if stock else 0,
                )

            LedgerStore.adjust_stock(stock, -quantity)
            movement = LedgerStore.append_movement(
                order=order,
                product=product,
                warehouse=warehouse,
                delta=-quantity,
                reason=reason,
            )
            logger.info(
                "stock.reserved",
                extra={
                    "order_id": getattr(order, 'pk', order),
                    "product_id": stock.product_id,
                    "warehouse_id": stock.warehouse_id,
                    "qty": quantity,
                    "reason": str(reason),
                    "remaining": stock.quantity,
                },
            )
            return movement

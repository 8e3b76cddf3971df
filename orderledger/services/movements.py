"""
Stock movements — changes not tied to an order (receipt, adjustment).

All methods run under unit_of_work() and lock the stock row.
"""

import logging

from orderledger.exceptions import LedgerError
from orderledger.models.enums import MovementReason
from orderledger.models.movement import ProductMovement
from orderledger.models.stock import Stock
from orderledger.services.ledger import LedgerStore, unit_of_work
from orderledger.services.reservations import validate_quantity

logger = logging.getLogger('orderledger')


class StockMovements:
    """Non-order stock movement methods."""

    @classmethod
    def receive(cls, quantity: int, product, warehouse,
                reason: str = MovementReason.RECEIPT) -> Stock:
        """
        Stock entry.

        Creates the (product, warehouse) row on first receipt.
        Appends a movement with positive delta and no order.
        """
        validate_quantity(quantity)

        with unit_of_work():
            stock = LedgerStore.lock_or_create_stock(product, warehouse)
            LedgerStore.adjust_stock(stock, quantity)
            LedgerStore.append_movement(
                order=None,
                product=product,
                warehouse=warehouse,
                delta=quantity,
                reason=reason,
            )
            logger.info(
                "stock.receive",
                extra={
                    "product_id": stock.product_id,
                    "warehouse_id": stock.warehouse_id,
                    "qty": quantity,
                    "reason": str(reason),
                },
            )
            return stock

    @classmethod
    def adjust(cls, product, warehouse, new_quantity: int,
               reason: str) -> ProductMovement | None:
        """
        Inventory count correction.

        Delta is computed under lock: new_quantity - quantity on hand.

        Returns:
            The movement, or None when the count already matches

        Raises:
            LedgerError('REASON_REQUIRED'): If reason is empty
            LedgerError('INVALID_QUANTITY'): If new_quantity is negative
        """
        if not reason:
            raise LedgerError('REASON_REQUIRED')
        if new_quantity < 0:
            raise LedgerError('INVALID_QUANTITY', requested=new_quantity)

        with unit_of_work():
            stock = LedgerStore.lock_or_create_stock(product, warehouse)
            delta = new_quantity - stock.quantity

            if delta == 0:
                return None

            LedgerStore.adjust_stock(stock, delta)
            move = LedgerStore.append_movement(
                order=None,
                product=product,
                warehouse=warehouse,
                delta=delta,
                reason=f"{MovementReason.ADJUSTMENT.value}: {reason}",
            )
            logger.info(
                "stock.adjust",
                extra={
                    "product_id": stock.product_id,
                    "warehouse_id": stock.warehouse_id,
                    "delta": delta,
                    "reason": reason,
                },
            )
            return move

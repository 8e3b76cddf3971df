"""
Movement reversals — give an order's stock back.

What to return is always re-derived from the ledger, never from the
order's current items: the open debits of the order are exactly what it
still holds.
"""

import logging

from orderledger.exceptions import CorruptLedger
from orderledger.models.movement import ProductMovement
from orderledger.services.ledger import LedgerStore, unit_of_work

logger = logging.getLogger('orderledger')


class MovementReversals:
    """Compensation of an order's debit movements."""

    @classmethod
    def open_debits(cls, order, lock: bool = False):
        """Debits of the order that no credit has compensated yet."""
        qs = ProductMovement.objects.for_order(order).open_debits()
        if lock:
            qs = qs.select_for_update(of=('self',))
        return qs.order_by('product_id', 'warehouse_id', 'id')

    @classmethod
    def revert(cls, order, reason: str) -> list[ProductMovement]:
        """
        Credit back every open debit of the order.

        For each debit: lock its stock row, add abs(delta), append a
        compensating movement that points at the debit.

        Idempotent: a compensated debit is linked one-to-one to its credit
        and is no longer open, so a repeated call credits nothing.

        Returns:
            The compensating movements, in lock order

        Raises:
            CorruptLedger: If a debit's stock row no longer exists

        Concurrency:
            - Runs under unit_of_work() (savepoint when nested)
            - Debits are selected FOR UPDATE so concurrent reversals of
              the same order serialize instead of double-crediting
            - Stock rows are locked in (product, warehouse) order
        """
        with unit_of_work():
            debits = list(cls.open_debits(order, lock=True))
            credits = []

            for debit in debits:
                stock = LedgerStore.lock_stock(debit.product_id, debit.warehouse_id)
                if stock is None:
                    logger.error(
                        "ledger.corrupt",
                        extra={
                            "order_id": debit.order_id,
                            "movement_id": debit.pk,
                            "product_id": debit.product_id,
                            "warehouse_id": debit.warehouse_id,
                        },
                    )
                    raise CorruptLedger(
                        order_id=debit.order_id,
                        movement_id=debit.pk,
                        product_id=debit.product_id,
                        warehouse_id=debit.warehouse_id,
                    )

                quantity = abs(debit.delta)
                LedgerStore.adjust_stock(stock, quantity)
                credits.append(LedgerStore.append_movement(
                    order=debit.order_id,
                    product=debit.product_id,
                    warehouse=debit.warehouse_id,
                    delta=quantity,
                    reason=reason,
                    reverses=debit,
                ))

            if credits:
                logger.info(
                    "stock.reverted",
                    extra={
                        "order_id": getattr(order, 'pk', order),
                        "movements": len(credits),
                        "qty": sum(m.delta for m in credits),
                        "reason": str(reason),
                    },
                )
            return credits

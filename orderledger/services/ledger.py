"""
Ledger store — storage primitives for stock rows and movements.

No business rules live here. Every method joins the caller's transaction;
nothing commits on its own. unit_of_work() is the one place that opens
the outer transaction and turns database faults into StorageFault.
"""

import logging
from contextlib import contextmanager

from django.db import InterfaceError, OperationalError, connection, transaction
from django.db.models import F

from orderledger.conf import orderledger_settings
from orderledger.exceptions import InsufficientStock, StorageFault
from orderledger.models.movement import ProductMovement
from orderledger.models.stock import Stock

logger = logging.getLogger('orderledger')


def _pk(obj):
    return getattr(obj, 'pk', obj)


def _apply_lock_timeout():
    timeout = orderledger_settings.LOCK_TIMEOUT_MS
    if timeout and connection.vendor == 'postgresql':
        with connection.cursor() as cursor:
            cursor.execute("SELECT set_config('lock_timeout', %s, true)", [f"{int(timeout)}ms"])


@contextmanager
def unit_of_work():
    """
    All-or-nothing scope for one lifecycle transition.

    Nested calls become savepoints of the outer transaction. Deadlocks,
    lock timeouts and lost connections roll everything back and surface
    as StorageFault (retryable, never retried here).
    """
    outermost = not connection.in_atomic_block
    try:
        with transaction.atomic():
            if outermost:
                _apply_lock_timeout()
            yield
    except (OperationalError, InterfaceError) as exc:
        logger.warning(
            "ledger.storage_fault",
            extra={"error": str(exc), "error_type": type(exc).__name__},
        )
        raise StorageFault(error=str(exc)) from exc


class LedgerStore:
    """Read, lock and write primitives over Stock and ProductMovement."""

    @classmethod
    def get_stock(cls, product, warehouse) -> int:
        """Quantity on hand, without locking. 0 when the row does not exist."""
        stock = Stock.objects.for_pair(product, warehouse).only('quantity').first()
        return stock.quantity if stock else 0

    @classmethod
    def lock_stock(cls, product, warehouse) -> Stock | None:
        """
        Lock the (product, warehouse) row until the transaction ends.

        Must run inside unit_of_work(). Blocks while another transaction
        holds the row.
        """
        return Stock.objects.select_for_update().for_pair(product, warehouse).first()

    @classmethod
    def lock_or_create_stock(cls, product, warehouse) -> Stock:
        """Lock the row, creating it empty first when missing."""
        Stock.objects.get_or_create(
            product_id=_pk(product),
            warehouse_id=_pk(warehouse),
        )
        return cls.lock_stock(product, warehouse)

    @classmethod
    def adjust_stock(cls, stock: Stock, delta: int) -> Stock:
        """
        Apply a signed delta to a locked stock row.

        Raises:
            InsufficientStock: If the result would be negative
        """
        if stock.quantity + delta < 0:
            raise InsufficientStock(
                product_id=stock.product_id,
                warehouse_id=stock.warehouse_id,
                requested=-delta,
                available=stock.quantity,
            )

        Stock.objects.filter(pk=stock.pk).update(quantity=F('quantity') + delta)
        stock.refresh_from_db(fields=['quantity'])
        return stock

    @classmethod
    def append_movement(cls, order, product, warehouse, delta: int, reason: str,
                        reverses: ProductMovement | None = None) -> ProductMovement:
        """Insert a ledger row. Movements are never updated afterwards."""
        return ProductMovement.objects.create(
            order_id=_pk(order) if order is not None else None,
            product_id=_pk(product),
            warehouse_id=_pk(warehouse),
            delta=delta,
            reason=reason,
            reverses=reverses,
        )

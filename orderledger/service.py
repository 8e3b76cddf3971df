"""
Orders Service — The single public interface for orders and stock.

Usage:
    from orderledger import orders, LedgerError

    orders.receive(5, widget, central)
    order = orders.create('Ann', central, [{'product_id': widget.pk, 'quantity': 3}])
    orders.available(widget, central)  # 2
    orders.cancel(order)
    orders.available(widget, central)  # 5
"""

from datetime import date

from django.core.paginator import Page
from django.db.models import QuerySet

from orderledger.adapters import get_intent_validator
from orderledger.conf import orderledger_settings
from orderledger.exceptions import LedgerError
from orderledger.models.movement import ProductMovement
from orderledger.models.order import Order
from orderledger.models.stock import Stock
from orderledger.services.audit import audit_orders
from orderledger.services.lifecycle import OrderLifecycle
from orderledger.services.movements import StockMovements
from orderledger.services.queries import OrderQueries


def _pk(obj):
    return getattr(obj, 'pk', obj)


def _check(result) -> None:
    if not result.valid:
        raise LedgerError(
            'INVALID_ITEMS',
            errors=[error.as_dict() for error in result.errors],
        )


class Orders:
    """
    Single interface for order lifecycle and stock operations.

    Every state-changing method is one atomic unit of work: on any error
    nothing it did is persisted. Orders and warehouses/products may be
    passed as instances or primary keys.

    Errors (all LedgerError):
        InsufficientStock   stock short for a line (user-correctable)
        IllegalTransition   status forbids the action
        CorruptLedger       ledger and stock disagree (fatal)
        StorageFault        lock timeout / deadlock / connection (retryable)
    """

    # ══════════════════════════════════════════════════════════════
    # LIFECYCLE
    # ══════════════════════════════════════════════════════════════

    @classmethod
    def create(cls, customer: str, warehouse, items: list[dict]) -> Order:
        """CreateOrder(customer, warehouse, items) -> ACTIVE order."""
        if orderledger_settings.VALIDATE_INPUT:
            _check(get_intent_validator().validate_create(customer, _pk(warehouse), items))
        return OrderLifecycle.create(customer, warehouse, items)

    @classmethod
    def update(cls, order, items: list[dict], customer: str | None = None) -> Order:
        """UpdateOrder(order, items, customer?) on an ACTIVE order."""
        if orderledger_settings.VALIDATE_INPUT:
            _check(get_intent_validator().validate_update(_pk(order), items, customer))
        return OrderLifecycle.update(order, items, customer=customer)

    @classmethod
    def complete(cls, order) -> Order:
        return OrderLifecycle.complete(order)

    @classmethod
    def cancel(cls, order) -> Order:
        return OrderLifecycle.cancel(order)

    @classmethod
    def resume(cls, order) -> Order:
        return OrderLifecycle.resume(order)

    # ══════════════════════════════════════════════════════════════
    # STOCK
    # ══════════════════════════════════════════════════════════════

    @classmethod
    def receive(cls, quantity: int, product, warehouse, **kwargs) -> Stock:
        return StockMovements.receive(quantity, product, warehouse, **kwargs)

    @classmethod
    def adjust(cls, product, warehouse, new_quantity: int,
               reason: str) -> ProductMovement | None:
        return StockMovements.adjust(product, warehouse, new_quantity, reason)

    @classmethod
    def available(cls, product, warehouse) -> int:
        return OrderQueries.available(product, warehouse)

    # ══════════════════════════════════════════════════════════════
    # READS
    # ══════════════════════════════════════════════════════════════

    @classmethod
    def list_orders(cls, status=None, customer: str | None = None,
                    date_from: date | None = None, date_to: date | None = None,
                    page=1, per_page: int | None = None) -> Page:
        return OrderQueries.orders(
            status=status, customer=customer,
            date_from=date_from, date_to=date_to,
            page=page, per_page=per_page,
        )

    @classmethod
    def list_movements(cls, product=None, warehouse=None, order=None,
                       date_from: date | None = None, date_to: date | None = None,
                       page=1, per_page: int | None = None) -> Page:
        return OrderQueries.movements(
            product=product, warehouse=warehouse, order=order,
            date_from=date_from, date_to=date_to,
            page=page, per_page=per_page,
        )

    @classmethod
    def products_with_stock(cls, warehouse=None) -> QuerySet:
        """Products with per-warehouse stock rows prefetched (``product.stock.all()``)."""
        return OrderQueries.products_with_stock(warehouse=warehouse)

    @classmethod
    def warehouses(cls) -> QuerySet:
        return OrderQueries.warehouses()

    @classmethod
    def balance(cls, order) -> dict[int, int]:
        """Net quantity held per product by the order, from the ledger."""
        return OrderQueries.balance(order)

    @classmethod
    def audit(cls, order=None) -> list:
        return audit_orders(order)

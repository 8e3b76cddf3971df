"""
Order lifecycle — create, update, complete, cancel, resume.

Each action is one unit of work: every reservation, reversal, item
replacement and status change of the action commits together or not at
all. Existing orders are locked before their status is checked.
"""

import logging

from orderledger.exceptions import LedgerError
from orderledger.models.enums import MovementReason, OrderAction
from orderledger.models.order import Order, OrderItem
from orderledger.services.ledger import unit_of_work
from orderledger.services.reservations import StockReservations, validate_quantity
from orderledger.services.reversals import MovementReversals

logger = logging.getLogger('orderledger')


def _pk(obj):
    return getattr(obj, 'pk', obj)


def normalize_items(items) -> list[tuple[int, int]]:
    """
    Turn item intents into (product_id, quantity) lines.

    Accepts mappings with ``product_id`` (or ``product``) and ``quantity``.
    Lines for the same product are merged. Result is sorted by product id,
    which is also the order stock rows get locked in.
    """
    merged: dict[int, int] = {}
    for item in items:
        product_id = item.get('product_id')
        if product_id is None:
            product_id = _pk(item.get('product'))
        if product_id is None:
            raise LedgerError('INVALID_ITEMS', errors=[{'item': dict(item), 'error': 'product_required'}])
        quantity = item.get('quantity')
        validate_quantity(quantity)
        merged[product_id] = merged.get(product_id, 0) + quantity
    return sorted(merged.items())


class OrderLifecycle:
    """State machine driver for orders."""

    @classmethod
    def _lock_order(cls, order) -> Order:
        try:
            return Order.objects.select_for_update().get(pk=_pk(order))
        except Order.DoesNotExist:
            raise LedgerError('ORDER_NOT_FOUND', order_id=_pk(order)) from None

    @classmethod
    def _sync_caller(cls, order, locked: Order) -> None:
        """Carry the committed lifecycle state back to the caller's instance."""
        if isinstance(order, Order) and order is not locked:
            order.customer = locked.customer
            order.status = locked.status
            order.completed_at = locked.completed_at
            order._approved_status = locked.status

    @classmethod
    def _reserve_lines(cls, order: Order, lines, reason: str) -> None:
        for product_id, quantity in lines:
            StockReservations.reserve(
                order=order,
                product=product_id,
                warehouse=order.warehouse_id,
                quantity=quantity,
                reason=reason,
            )

    @classmethod
    def _store_items(cls, order: Order, lines) -> None:
        OrderItem.objects.bulk_create([
            OrderItem(order=order, product_id=product_id, quantity=quantity)
            for product_id, quantity in lines
        ])

    @classmethod
    def create(cls, customer: str, warehouse, items) -> Order:
        """
        Create an ACTIVE order and reserve every line.

        Raises:
            InsufficientStock: If any line cannot be covered (nothing persisted)
        """
        lines = normalize_items(items)

        with unit_of_work():
            order = Order.objects.create(
                customer=customer,
                warehouse_id=_pk(warehouse),
            )
            cls._reserve_lines(order, lines, MovementReason.ORDER)
            cls._store_items(order, lines)

        logger.info(
            "order.created",
            extra={
                "order_id": order.pk,
                "warehouse_id": order.warehouse_id,
                "lines": len(lines),
            },
        )
        return order

    @classmethod
    def update(cls, order, items, customer: str | None = None) -> Order:
        """
        Replace the lines of an ACTIVE order.

        Reverts everything the order holds (reason 'order_update'),
        replaces its items, then reserves the new lines (reason 'order').

        Raises:
            IllegalTransition: If the order is COMPLETED or CANCELLED
            InsufficientStock: If a new line cannot be covered (order untouched)
        """
        lines = normalize_items(items)

        with unit_of_work():
            locked = cls._lock_order(order)
            locked.advance(OrderAction.UPDATE)

            MovementReversals.revert(locked, MovementReason.ORDER_UPDATE)
            locked.items.all().delete()

            if customer and customer.strip():
                locked.customer = customer.strip()
            locked.save(update_fields=['customer', 'status'])

            cls._reserve_lines(locked, lines, MovementReason.ORDER)
            cls._store_items(locked, lines)

        logger.info(
            "order.updated",
            extra={"order_id": locked.pk, "lines": len(lines)},
        )
        cls._sync_caller(order, locked)
        return locked

    @classmethod
    def complete(cls, order) -> Order:
        """
        Transition: ACTIVE -> COMPLETED. Stock stays debited.
        """
        with unit_of_work():
            locked = cls._lock_order(order)
            locked.advance(OrderAction.COMPLETE)
            locked.save(update_fields=['status', 'completed_at'])

        logger.info("order.completed", extra={"order_id": locked.pk})
        cls._sync_caller(order, locked)
        return locked

    @classmethod
    def cancel(cls, order) -> Order:
        """
        Transition: ACTIVE -> CANCELLED, giving all held stock back.

        Items are kept so the order can be resumed.
        """
        with unit_of_work():
            locked = cls._lock_order(order)
            locked.advance(OrderAction.CANCEL)
            MovementReversals.revert(locked, MovementReason.ORDER_CANCEL)
            locked.save(update_fields=['status'])

        logger.info("order.cancelled", extra={"order_id": locked.pk})
        cls._sync_caller(order, locked)
        return locked

    @classmethod
    def resume(cls, order) -> Order:
        """
        Transition: CANCELLED -> ACTIVE, reserving the stored items again.

        No partial resume: if any line is short, nothing changes.

        Raises:
            IllegalTransition: If the order is not CANCELLED
            InsufficientStock: If any stored line cannot be covered
        """
        with unit_of_work():
            locked = cls._lock_order(order)
            locked.advance(OrderAction.RESUME)

            lines = list(
                locked.items.order_by('product_id').values_list('product_id', 'quantity')
            )
            cls._reserve_lines(locked, lines, MovementReason.ORDER_RESUME)
            locked.save(update_fields=['status'])

        logger.info(
            "order.resumed",
            extra={"order_id": locked.pk, "lines": len(lines)},
        )
        cls._sync_caller(order, locked)
        return locked

"""
Ledger audit — check that stock, movements and orders agree.

Usage:
    from orderledger.services.audit import audit_orders

    # Run periodically (cron) or after incidents
    findings = audit_orders()
    # Returns list of (order, code, data) tuples; empty when consistent
"""

import logging

from django.db.models import F

from orderledger.models.enums import OrderStatus
from orderledger.models.movement import ProductMovement
from orderledger.models.order import Order
from orderledger.models.stock import Stock
from orderledger.services.queries import OrderQueries

logger = logging.getLogger('orderledger')


def _expected_balance(order: Order) -> dict[int, int]:
    if order.status == OrderStatus.CANCELLED:
        return {}
    expected: dict[int, int] = {}
    for item in order.items.all():
        expected[item.product_id] = expected.get(item.product_id, 0) + item.quantity
    return expected


def audit_orders(order=None) -> list[tuple[Order | None, str, dict]]:
    """
    Check ledger invariants.

    For every order (or just ``order``):
    - BALANCE_MISMATCH: net movements differ from what the status and
      items say the order holds
    - BAD_COMPENSATION: a credit does not exactly mirror the debit it reverses
    - FOREIGN_WAREHOUSE: a movement of the order hits another warehouse
    Globally (only when auditing all orders):
    - NEGATIVE_STOCK: a stock row below zero

    Returns:
        List of (order, code, data) findings. Empty means consistent.
    """
    qs = Order.objects.prefetch_related('items').order_by('id')
    if order is not None:
        qs = qs.filter(pk=getattr(order, 'pk', order))

    findings = []

    for current in qs:
        held = OrderQueries.balance(current)
        expected = _expected_balance(current)
        if held != expected:
            findings.append((current, 'BALANCE_MISMATCH', {
                'status': str(current.status),
                'held': held,
                'expected': expected,
            }))

        bad = list(
            ProductMovement.objects.for_order(current)
            .filter(reverses__isnull=False)
            .exclude(delta=-F('reverses__delta'), product_id=F('reverses__product_id'))
            .values_list('pk', flat=True)
        )
        if bad:
            findings.append((current, 'BAD_COMPENSATION', {'movement_ids': bad}))

        foreign = list(
            ProductMovement.objects.for_order(current)
            .exclude(warehouse_id=current.warehouse_id)
            .values_list('pk', flat=True)
        )
        if foreign:
            findings.append((current, 'FOREIGN_WAREHOUSE', {'movement_ids': foreign}))

    if order is None:
        for stock in Stock.objects.filter(quantity__lt=0):
            findings.append((None, 'NEGATIVE_STOCK', {
                'product_id': stock.product_id,
                'warehouse_id': stock.warehouse_id,
                'quantity': stock.quantity,
            }))

    for found, code, data in findings:
        logger.warning(
            "ledger.audit.finding",
            extra={
                "order_id": found.pk if found else None,
                "code": code,
                **{k: str(v) for k, v in data.items()},
            },
        )

    return findings

"""
Order and movement queries — read-only operations.

All methods are classmethods and use no locking.
"""

from datetime import date

from django.core.paginator import Page, Paginator
from django.db.models import Prefetch, QuerySet, Sum

from orderledger.conf import orderledger_settings
from orderledger.models.movement import ProductMovement
from orderledger.models.order import Order
from orderledger.models.product import Product
from orderledger.models.stock import Stock
from orderledger.models.warehouse import Warehouse
from orderledger.services.ledger import LedgerStore


def _pk(obj):
    return getattr(obj, 'pk', obj)


def _paginate(qs, page, per_page) -> Page:
    default = orderledger_settings.DEFAULT_PAGE_SIZE
    try:
        size = int(per_page) if per_page else default
    except (TypeError, ValueError):
        size = default
    size = max(1, min(size, orderledger_settings.MAX_PAGE_SIZE))
    return Paginator(qs, size).get_page(page)


class OrderQueries:
    """Read-only order and ledger query methods."""

    @classmethod
    def orders(cls, status=None, customer: str | None = None,
               date_from: date | None = None, date_to: date | None = None,
               page=1, per_page: int | None = None) -> Page:
        """
        Paginated orders, newest first.

        Args:
            status: OrderStatus value
            customer: Case-insensitive substring of the customer name
            date_from: Created on or after this date
            date_to: Created on or before this date
            page: Page number (out-of-range falls back to the last page)
            per_page: Page size (None = DEFAULT_PAGE_SIZE, capped at MAX_PAGE_SIZE)
        """
        qs = Order.objects.select_related('warehouse').prefetch_related('items__product')

        if status:
            qs = qs.filter(status=status)
        if customer:
            qs = qs.filter(customer__icontains=customer)
        if date_from:
            qs = qs.filter(created_at__date__gte=date_from)
        if date_to:
            qs = qs.filter(created_at__date__lte=date_to)

        return _paginate(qs.order_by('-created_at', '-id'), page, per_page)

    @classmethod
    def movements(cls, product=None, warehouse=None, order=None,
                  date_from: date | None = None, date_to: date | None = None,
                  page=1, per_page: int | None = None) -> Page:
        """Paginated ledger rows, newest first, with product/warehouse/order loaded."""
        qs = ProductMovement.objects.select_related('product', 'warehouse', 'order')

        if product is not None:
            qs = qs.filter(product_id=_pk(product))
        if warehouse is not None:
            qs = qs.filter(warehouse_id=_pk(warehouse))
        if order is not None:
            qs = qs.filter(order_id=_pk(order))
        if date_from:
            qs = qs.filter(created_at__date__gte=date_from)
        if date_to:
            qs = qs.filter(created_at__date__lte=date_to)

        return _paginate(qs.order_by('-created_at', '-id'), page, per_page)

    @classmethod
    def balance(cls, order) -> dict[int, int]:
        """
        Net quantity held per product, re-derived from the ledger.

        Only products with a non-zero balance are returned.
        """
        rows = (
            ProductMovement.objects.for_order(order)
            .values('product_id')
            .annotate(net=Sum('delta'))
            .order_by('product_id')
        )
        return {row['product_id']: -row['net'] for row in rows if row['net']}

    @classmethod
    def available(cls, product, warehouse) -> int:
        """Quantity on hand for a (product, warehouse) pair."""
        return LedgerStore.get_stock(product, warehouse)

    @classmethod
    def products_with_stock(cls, warehouse=None) -> QuerySet:
        """
        Products with their stock rows, warehouse loaded.

        Each product's ``stock.all()`` lists one row per warehouse holding
        it, by warehouse name. With ``warehouse`` only that warehouse's row
        is attached. Products without stock rows are still listed.
        """
        stock = Stock.objects.select_related('warehouse').order_by('warehouse__name', 'warehouse_id')
        if warehouse is not None:
            stock = stock.filter(warehouse_id=_pk(warehouse))
        return Product.objects.prefetch_related(Prefetch('stock', queryset=stock)).order_by('name', 'id')

    @classmethod
    def warehouses(cls) -> QuerySet:
        return Warehouse.objects.order_by('name', 'id')

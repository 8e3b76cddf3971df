"""
Stock model — Quantity on hand per (product, warehouse).
"""

from django.db import models
from django.db.models import Q
from django.utils.translation import gettext_lazy as _


class StockQuerySet(models.QuerySet):
    """QuerySet with helpers for Stock lookups."""

    def for_pair(self, product, warehouse):
        """Filter the row of a (product, warehouse) pair. Accepts instances or ids."""
        return self.filter(
            product_id=getattr(product, 'pk', product),
            warehouse_id=getattr(warehouse, 'pk', warehouse),
        )


class Stock(models.Model):
    """
    Quantity of a product held in a warehouse.

    Rules:
    - One row per (product, warehouse) pair
    - quantity never drops below zero (checked under lock, enforced by DB)
    - Changed ONLY through LedgerStore.adjust_stock(), always together
      with a ProductMovement in the same transaction
    """

    product = models.ForeignKey(
        'orderledger.Product',
        on_delete=models.PROTECT,
        related_name='stock',
        verbose_name=_('Product'),
    )
    warehouse = models.ForeignKey(
        'orderledger.Warehouse',
        on_delete=models.PROTECT,
        related_name='stock',
        verbose_name=_('Warehouse'),
    )
    quantity = models.PositiveIntegerField(
        default=0,
        verbose_name=_('Quantity'),
    )

    objects = StockQuerySet.as_manager()

    class Meta:
        verbose_name = _('Stock')
        verbose_name_plural = _('Stock')
        constraints = [
            models.UniqueConstraint(
                fields=['product', 'warehouse'],
                name='unique_stock_product_warehouse',
            ),
            models.CheckConstraint(
                condition=Q(quantity__gte=0),
                name='stock_quantity_non_negative',
            ),
        ]

    def __str__(self) -> str:
        return f"{self.product} @ {self.warehouse}: {self.quantity}"

"""
ProductMovement model — Immutable ledger of stock changes.
"""

from django.db import models
from django.utils import timezone
from django.utils.translation import gettext_lazy as _


class MovementQuerySet(models.QuerySet):
    """QuerySet with ledger filters."""

    def for_order(self, order):
        return self.filter(order_id=getattr(order, 'pk', order))

    def debits(self):
        """Stock leaving the warehouse."""
        return self.filter(delta__lt=0)

    def credits(self):
        """Stock returning to (or entering) the warehouse."""
        return self.filter(delta__gt=0)

    def open_debits(self):
        """Debits that no compensating movement points at yet."""
        return self.debits().filter(reversal__isnull=True)


class ProductMovement(models.Model):
    """
    Immutable record of a signed stock change on one (product, warehouse) pair.

    Rules:
    - NEVER update() or delete()
    - Corrections are new movements with inverse delta
    - A compensating credit points at the debit it reverses (``reverses``);
      the one-to-one link is what marks a debit as already given back

    The sum of deltas for an order is the net stock held against it.
    """

    order = models.ForeignKey(
        'orderledger.Order',
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='movements',
        verbose_name=_('Order'),
    )
    product = models.ForeignKey(
        'orderledger.Product',
        on_delete=models.PROTECT,
        related_name='movements',
        verbose_name=_('Product'),
    )
    warehouse = models.ForeignKey(
        'orderledger.Warehouse',
        on_delete=models.PROTECT,
        related_name='movements',
        verbose_name=_('Warehouse'),
    )
    delta = models.IntegerField(
        verbose_name=_('Delta'),
        help_text=_('Negative = stock leaving, positive = stock returning'),
    )
    reason = models.CharField(
        max_length=255,
        db_index=True,
        verbose_name=_('Reason'),
    )
    reverses = models.OneToOneField(
        'self',
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='reversal',
        verbose_name=_('Reverses'),
        help_text=_('Debit movement compensated by this credit'),
    )
    created_at = models.DateTimeField(default=timezone.now, db_index=True, verbose_name=_('Created at'))

    objects = MovementQuerySet.as_manager()

    class Meta:
        verbose_name = _('Product movement')
        verbose_name_plural = _('Product movements')
        ordering = ['created_at', 'id']
        indexes = [
            models.Index(fields=['order', 'delta'], name='movement_order_delta_idx'),
            models.Index(fields=['product', 'warehouse', 'created_at'], name='movement_pair_created_idx'),
        ]

    def save(self, *args, **kwargs):
        if self.pk:
            raise ValueError(
                "Movements are immutable. "
                "To correct one, create a new movement with the inverse delta."
            )
        if not self.reason:
            raise ValueError("Movement reason is required")
        if not self.delta:
            raise ValueError("Movement delta must be non-zero")
        if self.reverses_id is not None and self.delta < 0:
            raise ValueError("Only credits can reverse a movement")
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ValueError(
            "Movements are immutable. "
            "To reverse one, create a new movement with the inverse delta."
        )

    def __str__(self) -> str:
        signal = '+' if self.delta > 0 else ''
        return f"{signal}{self.delta} | {self.reason}"

"""
Order model — Sales order served from one warehouse, with its line items.
"""

from django.db import models
from django.db.models import Q
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from orderledger.exceptions import IllegalTransition
from orderledger.models.enums import TRANSITIONS, OrderStatus


class Order(models.Model):
    """
    Sales order.

    LIFECYCLE:

        create ──► ACTIVE ──complete()──► COMPLETED
                   │  ▲
          cancel() │  │ resume()
                   ▼  │
                 CANCELLED

    update() keeps the order ACTIVE. COMPLETED is terminal.

    Status is never assigned directly: advance() checks the transition
    table and save() refuses any status that advance() did not approve.
    """

    customer = models.CharField(
        max_length=255,
        verbose_name=_('Customer'),
    )
    warehouse = models.ForeignKey(
        'orderledger.Warehouse',
        on_delete=models.PROTECT,
        related_name='orders',
        verbose_name=_('Warehouse'),
    )
    status = models.CharField(
        max_length=20,
        choices=OrderStatus.choices,
        default=OrderStatus.ACTIVE,
        db_index=True,
        verbose_name=_('Status'),
    )
    created_at = models.DateTimeField(default=timezone.now, db_index=True, verbose_name=_('Created at'))
    completed_at = models.DateTimeField(
        null=True,
        blank=True,
        verbose_name=_('Completed at'),
    )

    # Status save() will accept; new orders start ACTIVE
    _approved_status = OrderStatus.ACTIVE
    # Set by advance(); only then does save() write the lifecycle columns
    _lifecycle_advanced = False

    LIFECYCLE_FIELDS = ('status', 'completed_at')

    class Meta:
        verbose_name = _('Order')
        verbose_name_plural = _('Orders')
        ordering = ['-created_at', '-id']

    @classmethod
    def from_db(cls, db, field_names, values):
        instance = super().from_db(db, field_names, values)
        instance._approved_status = dict(zip(field_names, values)).get('status')
        return instance

    def refresh_from_db(self, using=None, fields=None, **kwargs):
        super().refresh_from_db(using=using, fields=fields, **kwargs)
        if fields is None or 'status' in fields:
            self._approved_status = self.status

    def save(self, *args, **kwargs):
        """
        Save the order.

        On an existing row, status and completed_at are written only after
        advance() ran on this instance. A copy loaded before a lifecycle
        action can still save its other fields without undoing that action.
        """
        if self._approved_status is not None and self.status != self._approved_status:
            raise ValueError(
                "Order status changes only through Order.advance() "
                f"({self._approved_status} -> {self.status} refused)"
            )

        if not self._state.adding and not self._lifecycle_advanced:
            update_fields = kwargs.get('update_fields')
            if update_fields is None:
                update_fields = [
                    f.name for f in self._meta.concrete_fields if not f.primary_key
                ]
            kwargs['update_fields'] = [
                name for name in update_fields if name not in self.LIFECYCLE_FIELDS
            ]

        super().save(*args, **kwargs)
        self._lifecycle_advanced = False

    def advance(self, action) -> str:
        """
        Apply a lifecycle action to the in-memory status.

        Returns:
            The new status

        Raises:
            IllegalTransition: If the current status forbids the action
        """
        allowed, target = TRANSITIONS[action]
        if self.status not in allowed:
            raise IllegalTransition(
                order_id=self.pk,
                action=str(action),
                current=str(self.status),
            )
        self.status = target
        if target == OrderStatus.COMPLETED:
            self.completed_at = timezone.now()
        self._approved_status = target
        self._lifecycle_advanced = True
        return target

    @property
    def is_active(self) -> bool:
        return self.status == OrderStatus.ACTIVE

    def __str__(self) -> str:
        return f"Order #{self.pk} ({self.customer}, {self.status})"


class OrderItem(models.Model):
    """What the order currently holds. Replaced wholesale on update."""

    order = models.ForeignKey(
        Order,
        on_delete=models.CASCADE,
        related_name='items',
        verbose_name=_('Order'),
    )
    product = models.ForeignKey(
        'orderledger.Product',
        on_delete=models.PROTECT,
        related_name='order_items',
        verbose_name=_('Product'),
    )
    quantity = models.PositiveIntegerField(verbose_name=_('Quantity'))

    class Meta:
        verbose_name = _('Order item')
        verbose_name_plural = _('Order items')
        ordering = ['id']
        constraints = [
            models.CheckConstraint(
                condition=Q(quantity__gt=0),
                name='order_item_quantity_positive',
            ),
        ]

    def __str__(self) -> str:
        return f"{self.quantity}x {self.product}"

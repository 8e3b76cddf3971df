"""
Enums for Order Ledger models.
"""

from django.db import models
from django.utils.translation import gettext_lazy as _


class OrderStatus(models.TextChoices):
    """
    Order lifecycle status.

    ACTIVE:    Stock is reserved for the order.
    COMPLETED: Terminal. Reserved stock has left the warehouse.
    CANCELLED: Reservations were reversed. May return to ACTIVE via resume.
    """
    ACTIVE = 'active', _('Active')
    COMPLETED = 'completed', _('Completed')
    CANCELLED = 'cancelled', _('Cancelled')


class OrderAction(models.TextChoices):
    """Lifecycle actions that may change an existing order."""
    UPDATE = 'update', _('Update')
    COMPLETE = 'complete', _('Complete')
    CANCEL = 'cancel', _('Cancel')
    RESUME = 'resume', _('Resume')


class MovementReason(models.TextChoices):
    """Reason tags written on ProductMovement rows."""
    ORDER = 'order', _('Order')
    ORDER_UPDATE = 'order_update', _('Order update')
    ORDER_CANCEL = 'order_cancel', _('Order cancellation')
    ORDER_RESUME = 'order_resume', _('Order resumed')
    RECEIPT = 'receipt', _('Receipt')
    ADJUSTMENT = 'adjustment', _('Inventory adjustment')


# action -> (allowed source statuses, resulting status)
TRANSITIONS = {
    OrderAction.UPDATE: ((OrderStatus.ACTIVE,), OrderStatus.ACTIVE),
    OrderAction.COMPLETE: ((OrderStatus.ACTIVE,), OrderStatus.COMPLETED),
    OrderAction.CANCEL: ((OrderStatus.ACTIVE,), OrderStatus.CANCELLED),
    OrderAction.RESUME: ((OrderStatus.CANCELLED,), OrderStatus.ACTIVE),
}

"""
Warehouse model — Where stock is kept and orders are served from.
"""

from django.db import models
from django.utils.translation import gettext_lazy as _


class Warehouse(models.Model):
    """
    A stock location.

    Warehouses are stable entities, created during system setup. Orders
    are always served from exactly one warehouse.
    """

    name = models.CharField(
        max_length=255,
        verbose_name=_('Name'),
    )

    class Meta:
        verbose_name = _('Warehouse')
        verbose_name_plural = _('Warehouses')
        ordering = ['name']

    def __str__(self) -> str:
        return self.name

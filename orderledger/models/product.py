from django.db import models
from django.utils.translation import gettext_lazy as _


class Product(models.Model):
    """Catalog product. Read-only reference for the ledger."""

    name = models.CharField(max_length=255, verbose_name=_('Name'))
    price = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        verbose_name=_('Price'),
    )

    class Meta:
        verbose_name = _('Product')
        verbose_name_plural = _('Products')
        ordering = ['name']

    def __str__(self) -> str:
        return self.name

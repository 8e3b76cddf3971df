"""Django app configuration for Order Ledger."""

from django.apps import AppConfig
from django.utils.translation import gettext_lazy as _


class OrderLedgerConfig(AppConfig):
    """Configuration for Order Ledger app."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "orderledger"
    verbose_name = _("Orders & Stock Ledger")

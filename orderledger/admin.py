"""
Order Ledger Admin.

Provides views for operations and production debugging:
- Warehouse / Product: list + edit
- Stock: read-only (changes only through the ledger services)
- ProductMovement: read-only audit trail
- Order: read-only with complete / cancel / resume actions
"""

import logging

from django.contrib import admin
from django.utils.translation import gettext_lazy as _

from orderledger.exceptions import LedgerError
from orderledger.models import (
    Order,
    OrderItem,
    OrderStatus,
    Product,
    ProductMovement,
    Stock,
    Warehouse,
)

logger = logging.getLogger(__name__)


class ReadOnlyAdminMixin:
    """No add / change / delete from the admin."""

    def has_add_permission(self, request, obj=None):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


# =========================================================================
# CATALOG
# =========================================================================

@admin.register(Warehouse)
class WarehouseAdmin(admin.ModelAdmin):
    list_display = ['id', 'name']
    search_fields = ['name']


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = ['id', 'name', 'price']
    search_fields = ['name']


# =========================================================================
# LEDGER (read-only)
# =========================================================================

@admin.register(Stock)
class StockAdmin(ReadOnlyAdminMixin, admin.ModelAdmin):
    """Read-only. Stock only changes via the orders service."""

    list_display = ['product', 'warehouse', 'quantity']
    list_filter = ['warehouse']
    search_fields = ['product__name']
    list_select_related = ['product', 'warehouse']


@admin.register(ProductMovement)
class ProductMovementAdmin(ReadOnlyAdminMixin, admin.ModelAdmin):
    """Read-only. Immutable audit trail."""

    list_display = ['created_at', 'product', 'warehouse', 'delta', 'reason', 'order', 'reverses']
    list_filter = ['reason', 'warehouse', 'created_at']
    search_fields = ['reason', 'product__name']
    list_select_related = ['product', 'warehouse', 'order']
    date_hierarchy = 'created_at'


# =========================================================================
# ORDERS
# =========================================================================

class OrderItemInline(ReadOnlyAdminMixin, admin.TabularInline):
    model = OrderItem
    extra = 0
    fields = ['product', 'quantity']
    readonly_fields = ['product', 'quantity']


@admin.register(Order)
class OrderAdmin(ReadOnlyAdminMixin, admin.ModelAdmin):
    """Read-only, with lifecycle actions."""

    list_display = ['id', 'customer', 'warehouse', 'status', 'created_at', 'completed_at']
    list_filter = ['status', 'warehouse', 'created_at']
    search_fields = ['customer']
    list_select_related = ['warehouse']
    date_hierarchy = 'created_at'
    inlines = [OrderItemInline]
    actions = ['complete_orders', 'cancel_orders', 'resume_orders']

    def _run(self, request, queryset, action, eligible):
        from orderledger import orders

        count = 0
        for order in queryset.filter(status=eligible):
            try:
                getattr(orders, action)(order)
                count += 1
            except LedgerError as exc:
                logger.warning("admin %s: failed for order %s: %s", action, order.pk, exc)
                self.message_user(request, f'#{order.pk}: {exc.message}', level='warning')
        return count

    @admin.action(description=_('Complete selected orders'))
    def complete_orders(self, request, queryset):
        count = self._run(request, queryset, 'complete', OrderStatus.ACTIVE)
        self.message_user(request, _('{count} order(s) completed.').format(count=count))

    @admin.action(description=_('Cancel selected orders'))
    def cancel_orders(self, request, queryset):
        count = self._run(request, queryset, 'cancel', OrderStatus.ACTIVE)
        self.message_user(request, _('{count} order(s) cancelled.').format(count=count))

    @admin.action(description=_('Resume selected orders'))
    def resume_orders(self, request, queryset):
        count = self._run(request, queryset, 'resume', OrderStatus.CANCELLED)
        self.message_user(request, _('{count} order(s) resumed.').format(count=count))

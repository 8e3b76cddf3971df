"""
Catalog Intent Validator — checks order intents against local tables.

Implements the IntentValidator protocol using the Warehouse, Product and
Order models of this app. It is the default INTENT_VALIDATOR.
"""

from __future__ import annotations

from orderledger.models.order import Order
from orderledger.models.product import Product
from orderledger.models.warehouse import Warehouse
from orderledger.protocols.validation import IntentError, IntentValidationResult


def _is_positive_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value > 0


class CatalogIntentValidator:
    """
    Shape and reference checks for CreateOrder / UpdateOrder intents.

    - customer present (create)
    - warehouse / order exists
    - at least one item
    - every product_id exists
    - every quantity is a positive integer
    """

    def validate_create(self, customer, warehouse_id, items) -> IntentValidationResult:
        errors = []
        if not customer or not str(customer).strip():
            errors.append(IntentError('customer', 'required'))
        if warehouse_id is None:
            errors.append(IntentError('warehouse_id', 'required'))
        elif not Warehouse.objects.filter(pk=warehouse_id).exists():
            errors.append(IntentError('warehouse_id', 'not_found', f"Warehouse {warehouse_id} not found"))
        errors.extend(self._check_items(items))
        return IntentValidationResult(errors=tuple(errors))

    def validate_update(self, order_id, items, customer=None) -> IntentValidationResult:
        errors = []
        if not Order.objects.filter(pk=order_id).exists():
            errors.append(IntentError('order_id', 'not_found', f"Order {order_id} not found"))
        if customer is not None and not str(customer).strip():
            errors.append(IntentError('customer', 'invalid'))
        errors.extend(self._check_items(items))
        return IntentValidationResult(errors=tuple(errors))

    def _check_items(self, items) -> list[IntentError]:
        if not items:
            return [IntentError('items', 'required', 'At least one item is required')]

        errors = []
        product_ids = set()
        for index, item in enumerate(items):
            product_id = item.get('product_id')
            if product_id is None:
                errors.append(IntentError(f'items.{index}.product_id', 'required'))
            else:
                product_ids.add(product_id)
            if not _is_positive_int(item.get('quantity')):
                errors.append(IntentError(
                    f'items.{index}.quantity', 'invalid', 'Quantity must be a positive integer',
                ))

        known = set(Product.objects.filter(pk__in=product_ids).values_list('pk', flat=True))
        for index, item in enumerate(items):
            product_id = item.get('product_id')
            if product_id is not None and product_id not in known:
                errors.append(IntentError(
                    f'items.{index}.product_id', 'not_found', f"Product {product_id} not found",
                ))
        return errors

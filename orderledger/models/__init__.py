"""
Order Ledger Models.

Core models for warehouse stock and orders:
- Warehouse: Where stock is kept
- Product: What is stocked (read-only reference)
- Stock: Quantity on hand per (product, warehouse)
- ProductMovement: Immutable ledger of stock changes
- Order / OrderItem: Sales order and what it currently holds
"""

from orderledger.models.enums import MovementReason, OrderAction, OrderStatus
from orderledger.models.movement import ProductMovement
from orderledger.models.order import Order, OrderItem
from orderledger.models.product import Product
from orderledger.models.stock import Stock
from orderledger.models.warehouse import Warehouse

__all__ = [
    'OrderStatus',
    'OrderAction',
    'MovementReason',
    'Warehouse',
    'Product',
    'Stock',
    'ProductMovement',
    'Order',
    'OrderItem',
]

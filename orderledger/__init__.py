"""
Django Order Ledger — warehouse stock ledger and order lifecycle engine.

Usage:
    from orderledger import orders, LedgerError

    orders.receive(5, widget, central)
    order = orders.create('Ann', central, [{'product_id': widget.pk, 'quantity': 3}])
    orders.cancel(order)
    orders.available(widget, central)  # 5
"""


def __getattr__(name):
    """Lazy import to avoid circular imports during app loading."""
    if name == 'orders':
        from orderledger.service import Orders
        return Orders
    elif name in ('LedgerError', 'InsufficientStock', 'IllegalTransition',
                  'CorruptLedger', 'StorageFault'):
        from orderledger import exceptions
        return getattr(exceptions, name)
    elif name == 'Warehouse':
        from orderledger.models.warehouse import Warehouse
        return Warehouse
    elif name == 'Product':
        from orderledger.models.product import Product
        return Product
    elif name == 'Stock':
        from orderledger.models.stock import Stock
        return Stock
    elif name == 'ProductMovement':
        from orderledger.models.movement import ProductMovement
        return ProductMovement
    elif name in ('Order', 'OrderItem'):
        from orderledger.models import order
        return getattr(order, name)
    elif name in ('OrderStatus', 'MovementReason'):
        from orderledger.models import enums
        return getattr(enums, name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    'orders',
    'LedgerError',
    'InsufficientStock',
    'IllegalTransition',
    'CorruptLedger',
    'StorageFault',
    'Warehouse',
    'Product',
    'Stock',
    'ProductMovement',
    'Order',
    'OrderItem',
    'OrderStatus',
    'MovementReason',
]

__version__ = '0.1.0'

"""
Pytest fixtures for Order Ledger tests.
"""

from decimal import Decimal

import pytest

from orderledger import orders
from orderledger.adapters import reset_intent_validator
from orderledger.models import Product, Stock, Warehouse


@pytest.fixture(autouse=True)
def _fresh_validator():
    """Validator instances are cached per process; start each test clean."""
    reset_intent_validator()
    yield
    reset_intent_validator()


@pytest.fixture
def warehouse(db):
    """Main warehouse."""
    return Warehouse.objects.create(name='Central')


@pytest.fixture
def other_warehouse(db):
    return Warehouse.objects.create(name='North')


@pytest.fixture
def product_a(db):
    return Product.objects.create(name='Widget A', price=Decimal('10.00'))


@pytest.fixture
def product_b(db):
    return Product.objects.create(name='Widget B', price=Decimal('4.50'))


@pytest.fixture
def stocked(warehouse, product_a, product_b):
    """Stock {A: 5, B: 5} in the main warehouse, received through the ledger."""
    orders.receive(5, product_a, warehouse)
    orders.receive(5, product_b, warehouse)
    return warehouse


@pytest.fixture
def stock_level(warehouse):
    """Current quantity on hand of a product in the main warehouse."""
    def _level(product):
        return Stock.objects.get(product=product, warehouse=warehouse).quantity
    return _level


@pytest.fixture
def items():
    """Build item intents from (product, quantity) pairs."""
    def _items(*pairs):
        return [{'product_id': product.pk, 'quantity': quantity} for product, quantity in pairs]
    return _items

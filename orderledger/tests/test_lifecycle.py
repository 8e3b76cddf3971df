"""
Tests for the order lifecycle through the orders service.
"""

import pytest

from orderledger import orders
from orderledger.exceptions import IllegalTransition, InsufficientStock, LedgerError
from orderledger.models import Order, OrderItem, OrderStatus, ProductMovement


pytestmark = pytest.mark.django_db


def ledger(order):
    """(delta, reason) rows of an order, oldest first."""
    return list(
        ProductMovement.objects.for_order(order)
        .order_by('id')
        .values_list('delta', 'reason')
    )


def held_items(order):
    return sorted(OrderItem.objects.filter(order=order).values_list('product_id', 'quantity'))


@pytest.fixture
def order(stocked, product_a, product_b, items):
    """ACTIVE order holding A:3, B:2 against stock {A: 5, B: 5}."""
    return orders.create('Ann', stocked, items((product_a, 3), (product_b, 2)))


class TestCreate:
    """Tests for orders.create()."""

    def test_create_reserves_every_line(self, order, product_a, product_b, stock_level):
        assert order.status == OrderStatus.ACTIVE
        assert order.completed_at is None
        assert stock_level(product_a) == 2
        assert stock_level(product_b) == 3
        assert ledger(order) == [(-3, 'order'), (-2, 'order')]
        assert held_items(order) == [(product_a.pk, 3), (product_b.pk, 2)]

    def test_create_accepts_warehouse_id(self, stocked, product_a, items):
        order = orders.create('Ann', stocked.pk, items((product_a, 1)))

        assert order.warehouse_id == stocked.pk

    def test_create_merges_duplicate_products(self, stocked, product_a, items, stock_level):
        order = orders.create('Ann', stocked, items((product_a, 1), (product_a, 2)))

        assert ledger(order) == [(-3, 'order')]
        assert held_items(order) == [(product_a.pk, 3)]
        assert stock_level(product_a) == 2

    def test_create_insufficient_persists_nothing(self, stocked, product_a, product_b,
                                                  items, stock_level):
        with pytest.raises(InsufficientStock) as exc:
            orders.create('Ann', stocked, items((product_a, 3), (product_b, 10)))

        assert exc.value.product_id == product_b.pk
        assert exc.value.available == 5
        assert exc.value.requested == 10
        assert stock_level(product_a) == 5
        assert stock_level(product_b) == 5
        assert not Order.objects.exists()
        assert not ProductMovement.objects.debits().exists()

    def test_second_order_sees_first_reservation(self, stocked, product_a, items, stock_level):
        """Stock 5, two orders of 3: exactly one succeeds."""
        orders.create('Ann', stocked, items((product_a, 3)))

        with pytest.raises(InsufficientStock) as exc:
            orders.create('Bob', stocked, items((product_a, 3)))

        assert exc.value.available == 2
        assert stock_level(product_a) == 2
        assert Order.objects.count() == 1


class TestComplete:
    """Tests for orders.complete()."""

    def test_complete_active(self, order, product_a, stock_level):
        completed = orders.complete(order)

        assert completed.status == OrderStatus.COMPLETED
        assert completed.completed_at is not None
        assert stock_level(product_a) == 2
        assert len(ledger(order)) == 2

    def test_complete_twice(self, order, product_a, stock_level):
        orders.complete(order)

        with pytest.raises(IllegalTransition) as exc:
            orders.complete(order)

        assert exc.value.code == 'ILLEGAL_TRANSITION'
        assert exc.value.data['current'] == 'completed'
        assert stock_level(product_a) == 2

    def test_complete_cancelled(self, order, product_a, stock_level):
        orders.cancel(order)

        with pytest.raises(IllegalTransition):
            orders.complete(order)

        assert stock_level(product_a) == 5
        assert Order.objects.get(pk=order.pk).completed_at is None

    def test_unknown_order(self, db):
        with pytest.raises(LedgerError) as exc:
            orders.complete(424242)

        assert exc.value.code == 'ORDER_NOT_FOUND'


class TestCancel:
    """Tests for orders.cancel()."""

    def test_cancel_restores_stock(self, order, product_a, product_b, stock_level):
        cancelled = orders.cancel(order)

        assert cancelled.status == OrderStatus.CANCELLED
        assert stock_level(product_a) == 5
        assert stock_level(product_b) == 5
        assert ledger(order)[2:] == [(3, 'order_cancel'), (2, 'order_cancel')]

    def test_cancel_keeps_items(self, order, product_a, product_b):
        orders.cancel(order)

        assert held_items(order) == [(product_a.pk, 3), (product_b.pk, 2)]

    def test_cancel_twice(self, order, product_a, stock_level):
        orders.cancel(order)

        with pytest.raises(IllegalTransition):
            orders.cancel(order)

        assert stock_level(product_a) == 5
        assert len(ledger(order)) == 4

    def test_cancel_completed(self, order, product_a, stock_level):
        orders.complete(order)

        with pytest.raises(IllegalTransition):
            orders.cancel(order)

        assert stock_level(product_a) == 2


class TestResume:
    """Tests for orders.resume()."""

    def test_resume_cancelled(self, order, product_a, product_b, stock_level):
        orders.cancel(order)

        resumed = orders.resume(order)

        assert resumed.status == OrderStatus.ACTIVE
        assert stock_level(product_a) == 2
        assert stock_level(product_b) == 3
        assert ledger(order)[4:] == [(-3, 'order_resume'), (-2, 'order_resume')]

    def test_resume_active(self, order):
        with pytest.raises(IllegalTransition):
            orders.resume(order)

    def test_resume_completed(self, order):
        orders.complete(order)

        with pytest.raises(IllegalTransition):
            orders.resume(order)

    def test_resume_is_all_or_nothing(self, order, stocked, product_a, product_b,
                                      items, stock_level):
        orders.cancel(order)
        orders.create('Bob', stocked, items((product_b, 4)))

        with pytest.raises(InsufficientStock) as exc:
            orders.resume(order)

        assert exc.value.product_id == product_b.pk
        assert Order.objects.get(pk=order.pk).status == OrderStatus.CANCELLED
        assert stock_level(product_a) == 5
        assert stock_level(product_b) == 1
        assert len(ledger(order)) == 4

    def test_cancel_resume_cycles(self, order, product_a, product_b, stock_level):
        for _ in range(3):
            orders.cancel(order)
            orders.resume(order)

        assert stock_level(product_a) == 2
        assert stock_level(product_b) == 3
        assert orders.balance(order) == {product_a.pk: 3, product_b.pk: 2}


class TestUpdate:
    """Tests for orders.update()."""

    def test_update_replaces_lines(self, stocked, product_a, product_b, items, stock_level):
        order = orders.create('Ann', stocked, items((product_a, 3)))

        updated = orders.update(order, items((product_a, 1), (product_b, 2)))

        assert updated.status == OrderStatus.ACTIVE
        assert ledger(order) == [
            (-3, 'order'),
            (3, 'order_update'),
            (-1, 'order'),
            (-2, 'order'),
        ]
        assert held_items(order) == [(product_a.pk, 1), (product_b.pk, 2)]
        assert stock_level(product_a) == 4
        assert stock_level(product_b) == 3

    def test_update_can_use_released_stock(self, stocked, product_a, items, stock_level):
        """Stock given back by the update is available to its new lines."""
        order = orders.create('Ann', stocked, items((product_a, 4)))

        orders.update(order, items((product_a, 5)))

        assert stock_level(product_a) == 0

    def test_update_customer(self, order, product_a, items):
        updated = orders.update(order, items((product_a, 1)), customer='Anna')

        assert updated.customer == 'Anna'
        assert Order.objects.get(pk=order.pk).customer == 'Anna'

    def test_update_keeps_customer_when_omitted(self, order, product_a, items):
        updated = orders.update(order, items((product_a, 1)))

        assert updated.customer == 'Ann'

    def test_update_ignores_blank_customer(self, order, product_a, items, settings):
        settings.ORDERLEDGER = {'VALIDATE_INPUT': False}

        updated = orders.update(order, items((product_a, 1)), customer='   ')

        assert updated.customer == 'Ann'
        assert Order.objects.get(pk=order.pk).customer == 'Ann'

    def test_update_strips_customer(self, order, product_a, items):
        updated = orders.update(order, items((product_a, 1)), customer='  Anna ')

        assert updated.customer == 'Anna'

    def test_update_insufficient_leaves_order_untouched(self, order, product_a, product_b,
                                                       items, stock_level):
        with pytest.raises(InsufficientStock):
            orders.update(order, items((product_a, 1), (product_b, 6)))

        assert held_items(order) == [(product_a.pk, 3), (product_b.pk, 2)]
        assert ledger(order) == [(-3, 'order'), (-2, 'order')]
        assert stock_level(product_a) == 2
        assert stock_level(product_b) == 3

    def test_update_cancelled(self, order, product_a, items, stock_level):
        orders.cancel(order)

        with pytest.raises(IllegalTransition):
            orders.update(order, items((product_a, 1)))

        assert stock_level(product_a) == 5

    def test_update_completed(self, order, product_a, items):
        orders.complete(order)

        with pytest.raises(IllegalTransition):
            orders.update(order, items((product_a, 1)))


class TestLedgerBalance:
    """Net movements of an order always equal what it holds."""

    def test_balance_through_lifecycle(self, stocked, product_a, product_b, items):
        order = orders.create('Ann', stocked, items((product_a, 3)))
        assert orders.balance(order) == {product_a.pk: 3}

        orders.update(order, items((product_a, 1), (product_b, 2)))
        assert orders.balance(order) == {product_a.pk: 1, product_b.pk: 2}

        orders.cancel(order)
        assert orders.balance(order) == {}

        orders.resume(order)
        assert orders.balance(order) == {product_a.pk: 1, product_b.pk: 2}

        orders.complete(order)
        assert orders.balance(order) == {product_a.pk: 1, product_b.pk: 2}
        assert orders.audit() == []

    def test_random_walk_keeps_stock_consistent(self, stocked, product_a, items, stock_level):
        """Over an arbitrary mix of actions stock + held always equals what was received."""
        script = [
            ('create', 2), ('create', 4), ('cancel', 0), ('create', 4), ('resume', 0),
            ('cancel', 2), ('resume', 0), ('create', 1), ('complete', 2), ('cancel', 1),
            ('create', 5), ('resume', 1), ('cancel', 3), ('create', 5), ('resume', 3),
        ]
        created = []

        for action, arg in script:
            try:
                if action == 'create':
                    created.append(orders.create('Walker', stocked, items((product_a, arg))))
                else:
                    getattr(orders, action)(created[arg % len(created)])
            except (InsufficientStock, IllegalTransition):
                pass

            held = sum(orders.balance(o).get(product_a.pk, 0) for o in created)
            assert stock_level(product_a) >= 0
            assert stock_level(product_a) + held == 5

        assert orders.audit() == []

"""
Tests for the Order Ledger admin.
"""

import pytest
from django.urls import reverse

from orderledger import orders
from orderledger.models import Order, OrderStatus


pytestmark = pytest.mark.django_db


@pytest.fixture
def order(stocked, product_a, items):
    return orders.create('Ann', stocked, items((product_a, 3)))


def run_action(client, action, *pks):
    return client.post(
        reverse('admin:orderledger_order_changelist'),
        {'action': action, '_selected_action': [str(pk) for pk in pks]},
        follow=True,
    )


class TestOrderAdmin:

    def test_changelist(self, admin_client, order):
        response = admin_client.get(reverse('admin:orderledger_order_changelist'))

        assert response.status_code == 200
        assert 'Ann' in response.content.decode()

    def test_cancel_action(self, admin_client, order, product_a, stock_level):
        response = run_action(admin_client, 'cancel_orders', order.pk)

        assert response.status_code == 200
        assert Order.objects.get(pk=order.pk).status == OrderStatus.CANCELLED
        assert stock_level(product_a) == 5

    def test_resume_action_reports_failures(self, admin_client, order, stocked,
                                            product_a, items, stock_level):
        orders.cancel(order)
        orders.create('Bob', stocked, items((product_a, 4)))

        response = run_action(admin_client, 'resume_orders', order.pk)

        messages = [str(m) for m in response.context['messages']]
        assert any(m.startswith(f'#{order.pk}:') for m in messages)
        assert '0 order(s) resumed.' in messages
        assert Order.objects.get(pk=order.pk).status == OrderStatus.CANCELLED
        assert stock_level(product_a) == 1

    def test_complete_skips_ineligible(self, admin_client, order):
        orders.cancel(order)

        run_action(admin_client, 'complete_orders', order.pk)

        assert Order.objects.get(pk=order.pk).status == OrderStatus.CANCELLED

    def test_orders_cannot_be_added(self, admin_client):
        response = admin_client.get(reverse('admin:orderledger_order_add'))

        assert response.status_code == 403


class TestLedgerAdmin:

    def test_movements_are_listed(self, admin_client, stocked):
        response = admin_client.get(reverse('admin:orderledger_productmovement_changelist'))

        assert response.status_code == 200

    def test_stock_is_listed(self, admin_client, stocked):
        response = admin_client.get(reverse('admin:orderledger_stock_changelist'))

        assert response.status_code == 200

"""
Order Item Tests

Adding and removing lines on open orders and moving single items through
preparation.
"""
import pytest
from decimal import Decimal

from core_backend.exceptions import (
    InvalidInputError,
    InvalidReferenceError,
    InvalidTransitionError,
    ItemNotRemovableError,
    OrderClosedError,
)
from orders.models import Order, OrderItem
from orders.services import OrderItemService, OrderService


@pytest.fixture
def order(global_settings, table_1, burger):
    return OrderService.create_order(
        Order.OrderType.DINE_IN, table_id=table_1.pk, items=[{'menu_item_id': burger.pk, 'quantity': 2}]
    )


@pytest.mark.django_db
class TestAddItems:

    def test_add_items_recalculates_from_all_lines(self, order, fries):
        OrderItemService.add_items(order.pk, items=[{'menu_item_id': fries.pk}])

        order.refresh_from_db()
        assert order.items.count() == 2
        assert order.subtotal == Decimal('25.00')
        assert order.total_amount == Decimal('28.25')

    def test_same_menu_item_twice_gives_separate_lines(self, order, burger):
        OrderItemService.add_items(order.pk, items=[{'menu_item_id': burger.pk, 'notes': 'well done'}])

        assert order.items.filter(menu_item=burger).count() == 2

    def test_add_requires_items(self, order):
        with pytest.raises(InvalidInputError):
            OrderItemService.add_items(order.pk, items=[])

    def test_add_to_cancelled_order(self, order, fries):
        OrderService.cancel_order(order.pk)

        with pytest.raises(OrderClosedError):
            OrderItemService.add_items(order.pk, items=[{'menu_item_id': fries.pk}])

    def test_add_to_unknown_order(self, global_settings, fries):
        with pytest.raises(InvalidReferenceError):
            OrderItemService.add_items('6f1c4f7e-0000-4000-8000-000000000000', items=[{'menu_item_id': fries.pk}])

    def test_failed_add_leaves_order_untouched(self, order, fries):
        with pytest.raises(InvalidReferenceError):
            OrderItemService.add_items(order.pk, items=[{'menu_item_id': fries.pk}, {'menu_item_id': 987654}])

        order.refresh_from_db()
        assert order.items.count() == 1
        assert order.subtotal == Decimal('20.00')


@pytest.mark.django_db
class TestRemoveItem:

    def test_remove_pending_item(self, order, fries):
        OrderItemService.add_items(order.pk, items=[{'menu_item_id': fries.pk}])
        fries_line = order.items.get(menu_item=fries)

        OrderItemService.remove_item(order.pk, fries_line.pk)

        order.refresh_from_db()
        assert not OrderItem.objects.filter(pk=fries_line.pk).exists()
        assert order.subtotal == Decimal('20.00')
        assert order.total_amount == Decimal('22.60')

    @pytest.mark.parametrize('status', [
        OrderItem.ItemStatus.PREPARING,
        OrderItem.ItemStatus.READY,
    ])
    def test_item_past_pending_cannot_be_removed(self, order, status):
        item = order.items.get()
        OrderItemService.transition_item_status(item.pk, status)

        with pytest.raises(ItemNotRemovableError):
            OrderItemService.remove_item(order.pk, item.pk)

        assert OrderItem.objects.filter(pk=item.pk).exists()

    def test_remove_from_closed_order_reports_closed_first(self, order):
        item = order.items.get()
        OrderService.cancel_order(order.pk)

        with pytest.raises(OrderClosedError):
            OrderItemService.remove_item(order.pk, item.pk)

    def test_remove_unknown_item(self, order):
        with pytest.raises(InvalidReferenceError):
            OrderItemService.remove_item(order.pk, 999999)

    def test_item_from_another_order_is_unknown(self, order, global_settings, fries):
        other = OrderService.create_order(Order.OrderType.TO_GO, items=[{'menu_item_id': fries.pk}])

        with pytest.raises(InvalidReferenceError):
            OrderItemService.remove_item(order.pk, other.items.get().pk)

    def test_removing_last_unfinished_item_makes_order_ready(self, order, fries):
        burger_line = order.items.get()
        OrderItemService.add_items(order.pk, items=[{'menu_item_id': fries.pk}])
        OrderItemService.transition_item_status(burger_line.pk, OrderItem.ItemStatus.READY)

        OrderItemService.remove_item(order.pk, order.items.get(menu_item=fries).pk)

        order.refresh_from_db()
        assert order.status == Order.OrderStatus.READY


@pytest.mark.django_db
class TestItemTransitions:

    def test_items_only_move_forward(self, order):
        item = order.items.get()
        OrderItemService.transition_item_status(item.pk, OrderItem.ItemStatus.READY)

        with pytest.raises(InvalidTransitionError):
            OrderItemService.transition_item_status(item.pk, OrderItem.ItemStatus.PREPARING)

    def test_pending_cannot_jump_to_served(self, order):
        with pytest.raises(InvalidTransitionError):
            OrderItemService.transition_item_status(order.items.get().pk, OrderItem.ItemStatus.SERVED)

    def test_same_status_is_noop(self, order):
        item = OrderItemService.transition_item_status(order.items.get().pk, OrderItem.ItemStatus.PENDING)

        assert item.status == OrderItem.ItemStatus.PENDING

    def test_unknown_item_status(self, order):
        with pytest.raises(InvalidInputError):
            OrderItemService.transition_item_status(order.items.get().pk, 'BURNT')

    def test_unknown_item(self, global_settings):
        with pytest.raises(InvalidReferenceError):
            OrderItemService.transition_item_status(123456, OrderItem.ItemStatus.READY)

    def test_items_of_cancelled_order_are_frozen(self, order):
        item = order.items.get()
        OrderService.cancel_order(order.pk)

        with pytest.raises(OrderClosedError):
            OrderItemService.transition_item_status(item.pk, OrderItem.ItemStatus.PREPARING)

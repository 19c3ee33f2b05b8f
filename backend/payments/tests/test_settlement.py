"""
Payment Settlement Tests

Settling an order records one Payment, closes the order, and frees its
table in the same transaction.
"""
import pytest
from decimal import Decimal

from core_backend.exceptions import (
    AlreadyPaidError,
    InvalidInputError,
    InvalidReferenceError,
    OrderClosedError,
)
from orders.models import Order, OrderItem
from orders.services import OrderItemService, OrderService
from payments.models import Payment
from payments.services import PaymentService
from tables.models import Table
from tables.services import TableService


def make_ready(order):
    for item in order.items.all():
        OrderItemService.transition_item_status(item.pk, OrderItem.ItemStatus.READY)
    order.refresh_from_db()
    return order


@pytest.fixture
def ready_order(global_settings, table_1, burger, fries):
    """Dine-in order at table 1, total 28.25, every item READY"""
    order = OrderService.create_order(
        Order.OrderType.DINE_IN,
        table_id=table_1.pk,
        items=[
            {'menu_item_id': burger.pk, 'quantity': 2},
            {'menu_item_id': fries.pk, 'quantity': 1},
        ],
    )
    return make_ready(order)


@pytest.mark.django_db
class TestSettlePayment:

    def test_settle_closes_order_and_releases_table(self, ready_order, table_1, floor_staff):
        payment = PaymentService.settle_payment(
            ready_order.pk, Decimal('30.00'), Payment.PaymentMethod.CASH, processed_by=floor_staff
        )

        ready_order.refresh_from_db()
        table_1.refresh_from_db()
        assert ready_order.status == Order.OrderStatus.PAID
        assert table_1.status == Table.TableStatus.VACANT
        assert payment.total_due == Decimal('28.25')
        assert payment.change_due == Decimal('1.75')
        assert payment.processed_by == floor_staff
        assert set(ready_order.items.values_list('status', flat=True)) == {OrderItem.ItemStatus.SERVED}

    def test_tip_is_added_untaxed(self, ready_order):
        payment = PaymentService.settle_payment(
            ready_order.pk, Decimal('33.25'), Payment.PaymentMethod.CARD, tip=Decimal('5.00')
        )

        ready_order.refresh_from_db()
        assert ready_order.tax_amount == Decimal('3.25')
        assert ready_order.tip_amount == Decimal('5.00')
        assert ready_order.total_amount == Decimal('33.25')
        assert payment.total_due == Decimal('33.25')
        assert payment.change_due == Decimal('0.00')

    def test_served_order_can_be_settled(self, ready_order):
        OrderService.transition_order_status(ready_order.pk, Order.OrderStatus.SERVED)

        PaymentService.settle_payment(ready_order.pk, Decimal('28.25'), Payment.PaymentMethod.CARD)

        ready_order.refresh_from_db()
        assert ready_order.status == Order.OrderStatus.PAID

    def test_second_settlement_is_already_paid(self, ready_order):
        PaymentService.settle_payment(ready_order.pk, Decimal('28.25'), Payment.PaymentMethod.CASH)

        with pytest.raises(AlreadyPaidError):
            PaymentService.settle_payment(ready_order.pk, Decimal('28.25'), Payment.PaymentMethod.CASH)

        assert Payment.objects.filter(order=ready_order).count() == 1

    def test_underpayment_changes_nothing(self, ready_order, table_1):
        with pytest.raises(InvalidInputError):
            PaymentService.settle_payment(
                ready_order.pk, Decimal('20.00'), Payment.PaymentMethod.CASH, tip=Decimal('2.00')
            )

        ready_order.refresh_from_db()
        table_1.refresh_from_db()
        assert ready_order.status == Order.OrderStatus.READY
        assert ready_order.tip_amount == Decimal('0.00')
        assert table_1.status == Table.TableStatus.OCCUPIED
        assert not Payment.objects.exists()

    def test_to_go_order_can_be_paid_up_front(self, global_settings, burger):
        order = OrderService.create_order(Order.OrderType.TO_GO, items=[{'menu_item_id': burger.pk}])

        payment = PaymentService.settle_payment(order.pk, order.total_amount, Payment.PaymentMethod.CARD)

        order.refresh_from_db()
        assert order.status == Order.OrderStatus.PAID
        assert payment.total_due == Decimal('11.30')
        assert order.items.get().status == OrderItem.ItemStatus.PENDING

    def test_created_dine_in_order_releases_table(self, global_settings, table_1, burger):
        order = OrderService.create_order(
            Order.OrderType.DINE_IN, table_id=table_1.pk, items=[{'menu_item_id': burger.pk}]
        )

        PaymentService.settle_payment(order.pk, Decimal('20.00'), Payment.PaymentMethod.CASH)

        order.refresh_from_db()
        table_1.refresh_from_db()
        assert order.status == Order.OrderStatus.PAID
        assert table_1.status == Table.TableStatus.VACANT

    def test_preparing_order_can_be_paid(self, global_settings, burger):
        order = OrderService.create_order(
            Order.OrderType.TO_GO, items=[{'menu_item_id': burger.pk}, {'menu_item_id': burger.pk}]
        )
        first = order.items.first()
        OrderItemService.transition_item_status(first.pk, OrderItem.ItemStatus.PREPARING)

        PaymentService.settle_payment(order.pk, Decimal('25.00'), Payment.PaymentMethod.CARD)

        order.refresh_from_db()
        assert order.status == Order.OrderStatus.PAID
        assert set(order.items.values_list('status', flat=True)) == {
            OrderItem.ItemStatus.PREPARING,
            OrderItem.ItemStatus.PENDING,
        }

    def test_cancelled_order_cannot_be_paid(self, ready_order):
        OrderService.cancel_order(ready_order.pk)

        with pytest.raises(OrderClosedError):
            PaymentService.settle_payment(ready_order.pk, Decimal('28.25'), Payment.PaymentMethod.CASH)

    @pytest.mark.parametrize('amount,method,tip', [
        (Decimal('0'), 'CASH', None),
        (Decimal('-5'), 'CASH', None),
        ('lots', 'CASH', None),
        (Decimal('30'), 'CHEQUE', None),
        (Decimal('30'), 'CARD', Decimal('-1')),
    ])
    def test_invalid_tender(self, ready_order, amount, method, tip):
        with pytest.raises(InvalidInputError):
            PaymentService.settle_payment(ready_order.pk, amount, method, tip=tip)

    def test_unknown_order(self, global_settings):
        with pytest.raises(InvalidReferenceError):
            PaymentService.settle_payment(
                '6f1c4f7e-0000-4000-8000-000000000000', Decimal('10'), Payment.PaymentMethod.CASH
            )

    def test_settling_merged_group_releases_every_table(self, global_settings, table_1, table_2, burger):
        TableService.merge_tables([table_1.pk, table_2.pk])
        order = make_ready(
            OrderService.create_order(Order.OrderType.DINE_IN, table_id=table_1.pk, items=[{'menu_item_id': burger.pk}])
        )

        PaymentService.settle_payment(order.pk, Decimal('20.00'), Payment.PaymentMethod.CARD)

        table_1.refresh_from_db()
        table_2.refresh_from_db()
        assert table_1.status == Table.TableStatus.VACANT
        assert table_2.status == Table.TableStatus.VACANT
        assert table_2.merged_with is None

    def test_quick_sale_settles_without_table(self, global_settings, soda):
        order = OrderService.create_order(Order.OrderType.QUICK_SALE, items=[{'menu_item_id': soda.pk}])

        payment = PaymentService.settle_payment(order.pk, Decimal('5.00'), Payment.PaymentMethod.CASH)

        assert payment.total_due == Decimal('2.83')
        assert payment.change_due == Decimal('2.17')

    def test_paid_order_is_closed_to_changes(self, ready_order, fries):
        PaymentService.settle_payment(ready_order.pk, Decimal('28.25'), Payment.PaymentMethod.CASH)

        with pytest.raises(OrderClosedError):
            OrderItemService.add_items(ready_order.pk, items=[{'menu_item_id': fries.pk}])

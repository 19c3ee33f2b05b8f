import logging
from decimal import InvalidOperation

from django.db import IntegrityError, transaction

from core_backend.exceptions import (
    AlreadyPaidError,
    InvalidInputError,
    OrderClosedError,
    storage_guard,
)
from orders.models import Order, OrderItem
from orders.services import OrderCalculationService
from orders.services.lookups import get_order
from settings.config import app_settings
from tables.services import TableService

from .models import Payment
from .money import ZERO, quantize, to_decimal

logger = logging.getLogger(__name__)


class PaymentService:
    """
    Settles orders. Recording the payment, closing the order and freeing its
    table happen in one transaction: either all of it is stored or none.
    """

    @staticmethod
    def _parse_amount(value, field):
        try:
            amount = to_decimal(value)
        except (InvalidOperation, TypeError, ValueError):
            raise InvalidInputError(f"{field.capitalize()} must be a number.", **{field: value})
        if not amount.is_finite():
            raise InvalidInputError(f"{field.capitalize()} must be a number.", **{field: value})
        return quantize(app_settings.currency, amount)

    @staticmethod
    @storage_guard
    @transaction.atomic
    def settle_payment(order_id, amount, method, tip=None, processed_by=None) -> Payment:
        """
        Record the tender for an order and close it. Any open order can be
        paid, including one the kitchen has not finished.

        Args:
            order_id: order being paid
            amount: amount tendered; must cover the total plus the tip
            method: CASH or CARD
            tip: optional tip, added to the total and never taxed
            processed_by: staff member taking the payment

        Raises:
            AlreadyPaidError: the order already has a payment
            OrderClosedError: the order was cancelled
            InvalidInputError: bad method, amount or tip
        """
        if method not in Payment.PaymentMethod.values:
            raise InvalidInputError(f"'{method}' is not a supported payment method.", method=method)

        amount = PaymentService._parse_amount(amount, "amount")
        tip = PaymentService._parse_amount(tip if tip is not None else ZERO, "tip")
        if amount <= 0:
            raise InvalidInputError("Payment amount must be greater than zero.", amount=amount)
        if tip < 0:
            raise InvalidInputError("Tip cannot be negative.", tip=tip)

        order = get_order(order_id, lock=True)

        if order.status == Order.OrderStatus.PAID or Payment.objects.filter(order_id=order.pk).exists():
            raise AlreadyPaidError(order)
        if order.status == Order.OrderStatus.CANCELLED:
            raise OrderClosedError(order)

        # A READY order is handed over on payment. Orders paid up front keep
        # their unfinished items on the station queues.
        if order.status == Order.OrderStatus.READY:
            OrderItem.objects.filter(order_id=order.pk).exclude(status=OrderItem.ItemStatus.SERVED).update(
                status=OrderItem.ItemStatus.SERVED
            )
            PaymentService._transition_order_status(order, Order.OrderStatus.SERVED)

        order.tip_amount = tip
        order.save(update_fields=["tip_amount", "updated_at"])
        OrderCalculationService.recalculate_order_totals(order)

        if amount < order.total_amount:
            raise InvalidInputError(
                f"Amount {amount} does not cover the order total of {order.total_amount}.",
                amount=amount,
                total=order.total_amount,
            )

        try:
            with transaction.atomic():
                payment = Payment.objects.create(
                    order=order,
                    amount=amount,
                    tip=tip,
                    total_due=order.total_amount,
                    change_due=amount - order.total_amount,
                    method=method,
                    processed_by=processed_by,
                )
        except IntegrityError:
            # A concurrent settlement inserted first
            raise AlreadyPaidError(order)

        PaymentService._transition_order_status(order, Order.OrderStatus.PAID)

        if order.table_id is not None:
            TableService.release_table(order.table)

        transaction.on_commit(
            lambda: logger.info(
                "Order %s settled: payment=%s method=%s total=%s tip=%s",
                order.order_number,
                payment.pk,
                method,
                payment.total_due,
                tip,
            )
        )
        return payment

    @staticmethod
    def _transition_order_status(order, target_status):
        old_status = order.status
        order.status = target_status
        order.save(update_fields=["status", "updated_at"])
        logger.info("Order %s: Status transition %s -> %s", order.order_number, old_status, target_status)

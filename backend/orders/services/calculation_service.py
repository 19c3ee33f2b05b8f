import logging
import time

from django.db import transaction

from settings.config import app_settings

logger = logging.getLogger(__name__)


class OrderCalculationService:
    """Service for recalculating the denormalized money fields of an order."""

    @staticmethod
    def build_calculator(items):
        from orders.calculators import OrderCalculator

        return OrderCalculator(items, tax_rate=app_settings.tax_rate, currency=app_settings.currency)

    @staticmethod
    def current_items(order):
        """Fresh list of the order's items, never a prefetched cache."""
        from orders.models import OrderItem

        return list(OrderItem.objects.filter(order_id=order.pk).order_by("created_at", "id"))

    @staticmethod
    @transaction.atomic
    def recalculate_order_totals(order):
        """
        Recalculates subtotal, discount, tax and total for an order from the
        items currently stored for it.

        Callers hold the order row lock, so the item set read here is the one
        the surrounding transaction just wrote.
        """
        start_time = time.monotonic()

        items = OrderCalculationService.current_items(order)
        calculator = OrderCalculationService.build_calculator(items)
        totals = calculator.calculate_totals(
            discount_type=order.discount_type,
            discount_value=order.discount_value,
            surcharges=order.surcharges,
            tip=order.tip_amount,
        )

        order.subtotal = totals["subtotal"]
        order.discount_amount = totals["discount_amount"]
        order.tax_amount = totals["tax_amount"]
        order.surcharges = totals["surcharges"]
        order.tip_amount = totals["tip_amount"]
        order.total_amount = totals["total_amount"]
        order.save(
            update_fields=[
                "subtotal",
                "discount_amount",
                "tax_amount",
                "surcharges",
                "tip_amount",
                "total_amount",
                "updated_at",
            ]
        )

        elapsed_ms = (time.monotonic() - start_time) * 1000
        logger.info(
            "Order totals recalculated order_id=%s items=%s subtotal=%s discount=%s tax=%s total=%s elapsed_ms=%.2f",
            order.pk,
            len(items),
            order.subtotal,
            order.discount_amount,
            order.tax_amount,
            order.total_amount,
            elapsed_ms,
        )
        return order

    @staticmethod
    @transaction.atomic
    def recalculate_in_progress_orders():
        """Re-price every open order, e.g. after the tax rate changed."""
        from orders.models import Order

        count = 0
        for order in (
            Order.objects.select_for_update()
            .exclude(status__in=Order.TERMINAL_STATUSES)
            .order_by("order_number")
        ):
            OrderCalculationService.recalculate_order_totals(order)
            count += 1
        return count

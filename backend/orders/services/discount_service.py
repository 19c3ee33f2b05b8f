import logging
from decimal import Decimal, InvalidOperation

from django.db import transaction

from core_backend.exceptions import InvalidInputError, UnauthorizedError, storage_guard
from payments.money import ZERO, quantize, to_decimal
from settings.config import app_settings
from users.permissions import APPLY_BUNDLE_DISCOUNT, APPLY_MANUAL_DISCOUNT

from .calculation_service import OrderCalculationService
from .lookups import get_open_order

logger = logging.getLogger(__name__)


def _require(capabilities, capability):
    if capability not in (capabilities or frozenset()):
        raise UnauthorizedError(capability)


class OrderDiscountService:
    """
    Order-level discounts.

    A manual discount is either FIXED or PERCENTAGE. Bundle savings are
    layered on top as a FIXED discount; ``Order.bundle_savings`` records the
    bundle part of ``discount_value`` so re-layering replaces it instead of
    adding it a second time.
    """

    @staticmethod
    @storage_guard
    @transaction.atomic
    def apply_discount(order_id, discount_type, value, reason="", applied_by=None, capabilities=frozenset()):
        """
        Apply a manual discount, replacing any discount on the order
        (bundle savings included). Requires the manual discount capability.
        """
        from orders.models import Order

        _require(capabilities, APPLY_MANUAL_DISCOUNT)

        if discount_type not in Order.DiscountType.values:
            raise InvalidInputError(f"'{discount_type}' is not a valid discount type.", discount_type=discount_type)
        try:
            value = to_decimal(value)
        except (InvalidOperation, TypeError, ValueError):
            raise InvalidInputError("Discount value must be a number.", value=value)
        if not value.is_finite() or value < 0:
            raise InvalidInputError("Discount value cannot be negative.", value=value)
        if discount_type == Order.DiscountType.PERCENTAGE and value > Decimal("100"):
            raise InvalidInputError("Percentage discount cannot exceed 100%.", value=value)

        order = get_open_order(order_id)
        order.discount_type = discount_type
        order.discount_value = quantize(app_settings.currency, value)
        order.discount_reason = reason or ""
        order.manual_discount_reason = reason or ""
        order.discount_applied_by = applied_by
        order.bundle_savings = ZERO
        order.save(
            update_fields=[
                "discount_type",
                "discount_value",
                "discount_reason",
                "manual_discount_reason",
                "discount_applied_by",
                "bundle_savings",
                "updated_at",
            ]
        )

        OrderCalculationService.recalculate_order_totals(order)
        logger.info(
            "Order %s: %s discount %s applied by %s",
            order.order_number,
            discount_type,
            order.discount_value,
            getattr(applied_by, "pk", None),
        )
        return order

    @staticmethod
    @storage_guard
    @transaction.atomic
    def remove_discount(order_id, capabilities=frozenset()):
        """Clear every discount on the order. Requires the manual discount capability."""
        _require(capabilities, APPLY_MANUAL_DISCOUNT)

        order = get_open_order(order_id)
        OrderDiscountService._clear(order)
        OrderCalculationService.recalculate_order_totals(order)
        logger.info("Order %s: discount removed", order.order_number)
        return order

    @staticmethod
    @storage_guard
    @transaction.atomic
    def apply_bundle_discount(order_id, capabilities=frozenset()):
        """
        Re-derive the bundle part of the discount from the bundles currently
        on the order. Idempotent. Any order-creating role may do this.
        """
        _require(capabilities, APPLY_BUNDLE_DISCOUNT)

        order = get_open_order(order_id)
        OrderDiscountService.layer_bundle_savings(order)
        OrderCalculationService.recalculate_order_totals(order)
        return order

    @staticmethod
    def layer_bundle_savings(order):
        """
        Set the order's FIXED discount to the manual part plus the savings of
        every intact bundle instance. The reason lists the manual discount's
        own reason followed by the bundle names.

        The manual part is whatever the discount was minus the previously
        layered bundle savings; a PERCENTAGE discount is converted at the
        current subtotal. Must run inside the caller's transaction with the
        order locked.
        """
        from orders.models import Order

        items = OrderCalculationService.current_items(order)
        calculator = OrderCalculationService.build_calculator(items)
        savings = calculator.calculate_bundle_savings()

        if savings == 0 and order.bundle_savings == 0:
            return order

        if order.discount_type == Order.DiscountType.FIXED:
            manual = max(order.discount_value - order.bundle_savings, ZERO)
        elif order.discount_type == Order.DiscountType.PERCENTAGE:
            manual = calculator.calculate_discount(order.discount_type, order.discount_value)
        else:
            manual = ZERO

        if savings == 0 and manual == 0:
            OrderDiscountService._clear(order)
            return order

        reasons = [order.manual_discount_reason] if manual > 0 else []
        if savings > 0:
            reasons.extend(OrderDiscountService._bundle_names(calculator))
        reason = ", ".join(r for r in reasons if r)

        order.discount_type = Order.DiscountType.FIXED
        order.discount_value = quantize(app_settings.currency, manual + savings)
        order.discount_reason = reason[:255]
        order.bundle_savings = savings
        order.save(
            update_fields=["discount_type", "discount_value", "discount_reason", "bundle_savings", "updated_at"]
        )
        logger.info(
            "Order %s: bundle savings %s layered on manual discount %s",
            order.order_number,
            savings,
            manual,
        )
        return order

    @staticmethod
    def _bundle_names(calculator):
        from discounts.models import Promotion

        promotion_ids = []
        for lines in calculator.bundle_groups().values():
            promotion_id = lines[0].promotion_id
            if promotion_id is not None and promotion_id not in promotion_ids:
                promotion_ids.append(promotion_id)
        names = Promotion.objects.in_bulk(promotion_ids)
        return [names[pk].name for pk in promotion_ids if pk in names]

    @staticmethod
    def _clear(order):
        order.discount_type = None
        order.discount_value = ZERO
        order.discount_reason = ""
        order.manual_discount_reason = ""
        order.discount_applied_by = None
        order.bundle_savings = ZERO
        order.save(
            update_fields=[
                "discount_type",
                "discount_value",
                "discount_reason",
                "manual_discount_reason",
                "discount_applied_by",
                "bundle_savings",
                "updated_at",
            ]
        )

import logging

from django.db import transaction

from core_backend.exceptions import (
    InvalidInputError,
    InvalidTransitionError,
    OrderClosedError,
    storage_guard,
)
from payments.money import ZERO, to_decimal
from tables.models import Table
from tables.services import TableService

from .calculation_service import OrderCalculationService
from .discount_service import OrderDiscountService
from .item_service import OrderItemService
from .lookups import get_order

logger = logging.getLogger(__name__)


class OrderService:
    """Core service for order lifecycle management - creating orders and moving them through service."""

    # Order state machine. PAID is only reached through payment settlement.
    VALID_STATUS_TRANSITIONS = {
        "CREATED": ["PREPARING", "READY", "CANCELLED"],
        "PREPARING": ["READY", "CANCELLED"],
        "READY": ["SERVED", "CANCELLED"],
        "SERVED": ["CANCELLED"],
        "PAID": [],
        "CANCELLED": [],
    }

    @staticmethod
    @storage_guard
    @transaction.atomic
    def create_order(
        order_type,
        items=None,
        table_id=None,
        bundles=None,
        customer_name="",
        customer_phone="",
        pickup_time=None,
        notes="",
        surcharges=ZERO,
        created_by=None,
    ):
        """
        Create an order with its first items.

        Args:
            order_type: DINE_IN, TO_GO or QUICK_SALE
            items: list of dicts with menu_item_id, quantity, notes, allergy_ids
            table_id: required for DINE_IN, optional for TO_GO, not allowed for QUICK_SALE
            bundles: list of dicts with promotion_id, expanded into one line per bundled item
            customer_name, customer_phone, pickup_time: TO_GO only
            surcharges: flat untaxed add-on
            created_by: staff member taking the order

        The order starts READY when every line is an instant (NO_PREP) item,
        otherwise CREATED. A DINE_IN table becomes OCCUPIED.
        """
        from orders.models import Order

        if order_type not in Order.OrderType.values:
            raise InvalidInputError(f"'{order_type}' is not a valid order type.", order_type=order_type)

        items = OrderItemService.normalize_item_requests(items)
        bundles = OrderItemService.normalize_bundle_requests(bundles)
        if not items and not bundles:
            raise InvalidInputError("An order needs at least one item.")

        surcharges = OrderService._validate_surcharges(surcharges)

        if order_type != Order.OrderType.TO_GO and (customer_name or customer_phone or pickup_time):
            raise InvalidInputError("Customer details are only recorded for to-go orders.")

        table = OrderService._resolve_table(order_type, table_id)

        order = Order.objects.create(
            order_type=order_type,
            table=table,
            customer_name=customer_name or "",
            customer_phone=customer_phone or "",
            pickup_time=pickup_time,
            notes=notes or "",
            surcharges=surcharges,
            created_by=created_by,
        )

        created = OrderItemService.build_items(order, items, bundles)
        if all(item.menu_item.is_instant for item in created):
            order.status = Order.OrderStatus.READY
            order.save(update_fields=["status", "updated_at"])

        if bundles:
            OrderDiscountService.layer_bundle_savings(order)
        OrderCalculationService.recalculate_order_totals(order)

        if table is not None and order_type == Order.OrderType.DINE_IN:
            TableService.occupy_table(table)

        logger.info(
            "Order %s created: type=%s table=%s status=%s lines=%s total=%s",
            order.order_number,
            order.order_type,
            table.number if table else None,
            order.status,
            len(created),
            order.total_amount,
        )
        return order

    @staticmethod
    def _validate_surcharges(surcharges):
        try:
            value = to_decimal(surcharges)
        except (ArithmeticError, TypeError, ValueError):
            raise InvalidInputError("Surcharges must be a number.", surcharges=surcharges)
        if not value.is_finite() or value < 0:
            raise InvalidInputError("Surcharges cannot be negative.", surcharges=surcharges)
        return value

    @staticmethod
    def _resolve_table(order_type, table_id):
        from orders.models import Order

        if order_type == Order.OrderType.QUICK_SALE:
            if table_id is not None:
                raise InvalidInputError("Quick sales are not attached to a table.", table_id=table_id)
            return None

        if table_id is None:
            if order_type == Order.OrderType.DINE_IN:
                raise InvalidInputError("Dine-in orders require a table.")
            return None

        table = TableService.get_table(table_id, lock=True)
        if table.merged_with_id is not None:
            # A merged group is served through its primary table
            table = TableService.get_table(table.merged_with_id, lock=True)

        if order_type == Order.OrderType.DINE_IN and table.status not in (
            Table.TableStatus.VACANT,
            Table.TableStatus.OCCUPIED,
        ):
            raise InvalidInputError(
                f"Table {table.number} is {table.status} and cannot take a dine-in order.",
                table_id=table.pk,
                status=table.status,
            )
        return table

    @staticmethod
    @storage_guard
    @transaction.atomic
    def transition_order_status(order_id, new_status):
        """
        Move an order along the lifecycle graph.

        CREATED -> READY is only allowed when every item is instant, and
        PREPARING -> READY only when every item is READY or SERVED. Serving an
        order marks its remaining items SERVED. Cancelling frees the table when
        no other open order is using it.
        """
        from orders.models import Order, OrderItem

        if new_status not in Order.OrderStatus.values:
            raise InvalidInputError(f"'{new_status}' is not a valid order status.", status=new_status)

        order = get_order(order_id, lock=True)
        if order.is_closed:
            raise OrderClosedError(order)
        if order.status == new_status:
            return order

        if new_status not in OrderService.VALID_STATUS_TRANSITIONS.get(order.status, []):
            raise InvalidTransitionError("order", order.status, new_status)

        items = list(order.items.select_related("menu_item"))

        if new_status == Order.OrderStatus.READY:
            if order.status == Order.OrderStatus.CREATED and not all(item.menu_item.is_instant for item in items):
                raise InvalidTransitionError(
                    "order",
                    order.status,
                    new_status,
                    message="Only orders made entirely of instant items can skip preparation.",
                )
            unfinished = [
                item
                for item in items
                if item.status not in (OrderItem.ItemStatus.READY, OrderItem.ItemStatus.SERVED)
            ]
            if order.status == Order.OrderStatus.PREPARING and unfinished:
                raise InvalidTransitionError(
                    "order",
                    order.status,
                    new_status,
                    message=f"{len(unfinished)} item(s) are still being prepared.",
                )

        if new_status == Order.OrderStatus.SERVED:
            OrderItem.objects.filter(order_id=order.pk).exclude(status=OrderItem.ItemStatus.SERVED).update(
                status=OrderItem.ItemStatus.SERVED
            )

        previous = order.status
        order.status = new_status
        order.save(update_fields=["status", "updated_at"])
        logger.info("Order %s: Status transition %s -> %s", order.order_number, previous, new_status)

        if new_status == Order.OrderStatus.CANCELLED and order.table_id is not None:
            OrderService._release_table_if_unused(order)

        return order

    @staticmethod
    def cancel_order(order_id):
        from orders.models import Order

        return OrderService.transition_order_status(order_id, Order.OrderStatus.CANCELLED)

    @staticmethod
    def _release_table_if_unused(order):
        from orders.models import Order

        still_open = (
            Order.objects.filter(table_id=order.table_id)
            .exclude(pk=order.pk)
            .exclude(status__in=Order.TERMINAL_STATUSES)
            .exists()
        )
        if not still_open:
            TableService.release_table(order.table)

    @staticmethod
    def get_order(order_id):
        return get_order(order_id)

    @staticmethod
    def list_open_orders_for_table(table_id):
        """Open orders seated at a table, following a satellite to its primary."""
        from orders.models import Order

        table = TableService.get_table(table_id)
        return list(
            Order.objects.filter(table_id=table.primary.pk)
            .exclude(status__in=Order.TERMINAL_STATUSES)
            .order_by("order_number")
        )


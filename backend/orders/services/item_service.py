import logging
import uuid

from django.db import transaction
from django.utils import timezone

from core_backend.exceptions import (
    InvalidInputError,
    InvalidReferenceError,
    InvalidTransitionError,
    ItemNotRemovableError,
    OrderClosedError,
    storage_guard,
)
from menu.services import CatalogService
from settings.config import app_settings

from .calculation_service import OrderCalculationService
from .discount_service import OrderDiscountService
from .lookups import get_open_order, get_order, get_order_item

logger = logging.getLogger(__name__)


def _positive_int(value):
    return isinstance(value, int) and not isinstance(value, bool) and value > 0


class OrderItemService:
    """Service for managing order items - adding, removing, moving through preparation."""

    # Forward-only item graph; PENDING -> READY is the "mark all ready" shortcut
    VALID_ITEM_TRANSITIONS = {
        "PENDING": ["PREPARING", "READY"],
        "PREPARING": ["READY"],
        "READY": ["SERVED"],
        "SERVED": [],
    }

    @staticmethod
    def normalize_item_requests(items):
        """
        Validate raw item requests and return them as dicts with
        ``menu_item_id``, ``quantity``, ``notes`` and ``allergy_ids``.
        """
        if items is None:
            items = []
        if not isinstance(items, (list, tuple)):
            raise InvalidInputError("Items must be a list.")

        normalized = []
        for index, item in enumerate(items):
            if not isinstance(item, dict) or "menu_item_id" not in item:
                raise InvalidInputError("Each item needs a menu_item_id.", index=index)
            quantity = item.get("quantity", 1)
            if not _positive_int(quantity):
                raise InvalidInputError(
                    "Quantity must be a positive whole number.", index=index, quantity=quantity
                )
            allergy_ids = item.get("allergy_ids") or []
            if not isinstance(allergy_ids, (list, tuple)):
                raise InvalidInputError("allergy_ids must be a list.", index=index)
            normalized.append(
                {
                    "menu_item_id": item["menu_item_id"],
                    "quantity": quantity,
                    "notes": item.get("notes") or "",
                    "allergy_ids": list(allergy_ids),
                }
            )
        return normalized

    @staticmethod
    def normalize_bundle_requests(bundles):
        if bundles is None:
            return []
        if not isinstance(bundles, (list, tuple)):
            raise InvalidInputError("Bundles must be a list.")
        normalized = []
        for index, bundle in enumerate(bundles):
            if not isinstance(bundle, dict) or "promotion_id" not in bundle:
                raise InvalidInputError("Each bundle needs a promotion_id.", index=index)
            normalized.append({"promotion_id": bundle["promotion_id"], "notes": bundle.get("notes") or ""})
        return normalized

    @staticmethod
    def build_items(order, items, bundles, now=None):
        """
        Create the OrderItem rows for validated item and bundle requests.

        Regular lines snapshot the best active promotional price; bundle lines
        snapshot the catalog price plus the bundle price and share one
        ``bundle_instance`` per purchased bundle. Returns the created items.
        """
        from discounts.services import PromotionService
        from orders.models import OrderItem

        now = now or timezone.now()
        menu_items = CatalogService.get_menu_items([item["menu_item_id"] for item in items])
        unit_prices = PromotionService.best_unit_prices(
            list(menu_items.values()), now, app_settings.currency
        )

        created = []
        for request in items:
            menu_item = menu_items[request["menu_item_id"]]
            allergies = CatalogService.get_allergies(request["allergy_ids"])
            order_item = OrderItem.objects.create(
                order=order,
                menu_item=menu_item,
                quantity=request["quantity"],
                notes=request["notes"],
                price=unit_prices[menu_item.pk],
                status=OrderItemService.initial_status(order, menu_item),
            )
            if allergies:
                order_item.allergies.set(allergies)
            created.append(order_item)

        for request in bundles:
            promotion = PromotionService.get_bundle(request["promotion_id"], now)
            bundle_items = list(promotion.menu_items.order_by("pk"))
            CatalogService.get_menu_items([menu_item.pk for menu_item in bundle_items])
            instance = uuid.uuid4().hex
            for menu_item in bundle_items:
                created.append(
                    OrderItem.objects.create(
                        order=order,
                        menu_item=menu_item,
                        quantity=1,
                        notes=request["notes"],
                        price=menu_item.price,
                        status=OrderItemService.initial_status(order, menu_item),
                        promotion=promotion,
                        bundle_instance=instance,
                        bundle_price=promotion.bundle_price,
                    )
                )
            logger.info("Order %s: bundle '%s' added as %s", order.order_number, promotion.name, instance)

        return created

    @staticmethod
    def initial_status(order, menu_item):
        from orders.models import Order, OrderItem

        if order.order_type == Order.OrderType.QUICK_SALE and menu_item.is_instant:
            return OrderItem.ItemStatus.SERVED
        return OrderItem.ItemStatus.PENDING

    @staticmethod
    @storage_guard
    @transaction.atomic
    def add_items(order_id, items=None, bundles=None):
        """
        Append items (and bundles) to an open order and recompute its totals
        from the full item set. Adding bundles re-layers bundle savings.
        """
        from orders.models import Order, OrderItem

        items = OrderItemService.normalize_item_requests(items)
        bundles = OrderItemService.normalize_bundle_requests(bundles)
        if not items and not bundles:
            raise InvalidInputError("At least one item is required.")

        order = get_open_order(order_id)
        created = OrderItemService.build_items(order, items, bundles)

        needs_prep = any(item.status == OrderItem.ItemStatus.PENDING and not item.menu_item.is_instant for item in created)
        if needs_prep and order.status in (Order.OrderStatus.READY, Order.OrderStatus.SERVED):
            # New kitchen work reopens the order
            OrderItemService._set_order_status(order, Order.OrderStatus.PREPARING)

        if bundles:
            OrderDiscountService.layer_bundle_savings(order)
        OrderCalculationService.recalculate_order_totals(order)

        logger.info("Order %s: added %s lines", order.order_number, len(created))
        return order

    @staticmethod
    @storage_guard
    @transaction.atomic
    def remove_item(order_id, item_id):
        """
        Remove a PENDING item. Removing a line of a bundle breaks the bundle:
        its remaining lines are billed at their regular price.
        """
        from orders.models import OrderItem

        order = get_open_order(order_id)
        item = get_order_item(order, item_id, lock=True)
        if item.status != OrderItem.ItemStatus.PENDING:
            raise ItemNotRemovableError(item)

        bundle_instance = item.bundle_instance
        was_bundled = item.is_bundled
        item.delete()

        if was_bundled:
            OrderItem.objects.filter(order_id=order.pk, bundle_instance=bundle_instance).update(
                bundle_instance="", bundle_price=None, promotion=None
            )
            OrderDiscountService.layer_bundle_savings(order)

        OrderCalculationService.recalculate_order_totals(order)
        OrderItemService.aggregate_order_status(order)
        logger.info("Order %s: removed item %s", order.order_number, item_id)
        return order

    @staticmethod
    @storage_guard
    @transaction.atomic
    def transition_item_status(item_id, new_status):
        """
        Move an item forward through preparation and roll the change up to
        the order. Requesting the current status is a no-op. Items of a paid
        order can still be finished; a cancelled order is frozen.
        """
        from orders.models import Order, OrderItem

        if new_status not in OrderItem.ItemStatus.values:
            raise InvalidInputError(f"'{new_status}' is not a valid item status.", status=new_status)

        try:
            order_id = OrderItem.objects.values_list("order_id", flat=True).get(pk=item_id)
        except (OrderItem.DoesNotExist, ValueError, TypeError):
            raise InvalidReferenceError("Order item", item_id)

        order = get_order(order_id, lock=True)
        if order.status == Order.OrderStatus.CANCELLED:
            raise OrderClosedError(order)
        item = get_order_item(order, item_id, lock=True)

        if item.status == new_status:
            return item
        if new_status not in OrderItemService.VALID_ITEM_TRANSITIONS[item.status]:
            raise InvalidTransitionError("item", item.status, new_status)

        previous = item.status
        item.status = new_status
        item.save(update_fields=["status", "updated_at"])
        logger.info("Order item %s: Status transition %s -> %s", item.pk, previous, new_status)

        OrderItemService.aggregate_order_status(order)
        return item

    @staticmethod
    def aggregate_order_status(order):
        """
        Roll item statuses up to the order:
        CREATED moves to PREPARING once any item is under way (or straight
        to READY when everything left is instant), PREPARING moves to READY
        once every item is READY or SERVED, READY moves to SERVED once every
        item is SERVED.
        """
        from orders.models import Order, OrderItem

        items = list(OrderItem.objects.filter(order_id=order.pk).select_related("menu_item"))
        if not items:
            return order

        statuses = {item.status for item in items}
        started = {OrderItem.ItemStatus.PREPARING, OrderItem.ItemStatus.READY, OrderItem.ItemStatus.SERVED}
        finished = {OrderItem.ItemStatus.READY, OrderItem.ItemStatus.SERVED}

        if order.status == Order.OrderStatus.CREATED:
            if all(item.menu_item.is_instant for item in items):
                OrderItemService._set_order_status(order, Order.OrderStatus.READY)
            elif statuses & started:
                OrderItemService._set_order_status(order, Order.OrderStatus.PREPARING)

        if order.status == Order.OrderStatus.PREPARING and statuses <= finished:
            OrderItemService._set_order_status(order, Order.OrderStatus.READY)

        if order.status == Order.OrderStatus.READY and statuses == {OrderItem.ItemStatus.SERVED}:
            OrderItemService._set_order_status(order, Order.OrderStatus.SERVED)

        return order

    @staticmethod
    def _set_order_status(order, new_status):
        previous = order.status
        order.status = new_status
        order.save(update_fields=["status", "updated_at"])
        logger.info("Order %s: Status transition %s -> %s", order.order_number, previous, new_status)

import logging

from core_backend.exceptions import InvalidInputError
from menu.models import MenuItem

logger = logging.getLogger(__name__)


class KitchenService:
    """Service for the preparation stations - what each station still has to make."""

    @staticmethod
    def get_station_queue(station):
        """
        Items routed to ``station`` that are not yet READY, grouped by order
        in the order they were taken. Orders paid up front stay on the queue
        until their items are done; cancelled orders drop off.

        Returns a list of ``{"order": Order, "items": [OrderItem, ...]}``.
        """
        from orders.models import Order, OrderItem

        if station not in MenuItem.FulfillmentStation.values or station == MenuItem.FulfillmentStation.NO_PREP:
            raise InvalidInputError(f"'{station}' is not a preparation station.", station=station)

        items = (
            OrderItem.objects.filter(
                menu_item__fulfillment_station=station,
                status__in=[OrderItem.ItemStatus.PENDING, OrderItem.ItemStatus.PREPARING],
            )
            .exclude(order__status=Order.OrderStatus.CANCELLED)
            .select_related("order", "order__table", "menu_item")
            .prefetch_related("allergies")
            .order_by("order__order_number", "created_at", "id")
        )

        queue = []
        for item in items:
            if not queue or queue[-1]["order"].pk != item.order_id:
                queue.append({"order": item.order, "items": []})
            queue[-1]["items"].append(item)

        logger.debug("Station %s has %s open orders", station, len(queue))
        return queue

    @staticmethod
    def format_ticket(order, items):
        """Plain-text ticket for a station printer."""
        lines = [f"ORDER #{order.order_number}"]
        if order.table_id:
            lines.append(f"Table {order.table.number}")
        else:
            lines.append(order.get_order_type_display())
        lines.append("=" * 32)
        for item in items:
            lines.append(f"{item.quantity}x {item.menu_item.name}")
            allergies = [allergy.name for allergy in item.allergies.all()]
            if allergies:
                lines.append(f"   ALLERGY: {', '.join(allergies)}")
            if item.notes:
                lines.append(f"   Note: {item.notes}")
        return "\n".join(lines)

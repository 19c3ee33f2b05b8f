"""Order and item lookups shared by the order services."""

from django.core.exceptions import ValidationError

from core_backend.exceptions import InvalidReferenceError, OrderClosedError


def get_order(order_id, lock=False):
    """
    Fetch an order by id. With ``lock`` the row is held (select_for_update)
    until the surrounding transaction ends.
    """
    from orders.models import Order

    queryset = Order.objects.select_for_update() if lock else Order.objects.all()
    try:
        return queryset.get(pk=order_id)
    except (Order.DoesNotExist, ValidationError, ValueError, TypeError):
        # Malformed UUIDs raise ValidationError from the field
        raise InvalidReferenceError("Order", order_id)


def get_open_order(order_id):
    """Lock an order for modification, rejecting PAID and CANCELLED orders."""
    order = get_order(order_id, lock=True)
    if order.is_closed:
        raise OrderClosedError(order)
    return order


def get_order_item(order, item_id, lock=False):
    from orders.models import OrderItem

    queryset = OrderItem.objects.select_for_update() if lock else OrderItem.objects.all()
    try:
        return queryset.select_related("menu_item").get(pk=item_id, order_id=order.pk)
    except (OrderItem.DoesNotExist, ValueError, TypeError):
        raise InvalidReferenceError("Order item", item_id)

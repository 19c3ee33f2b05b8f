"""
Orders serializers package.
"""

from .order_item_serializers import (
    BundleRequestSerializer,
    ItemRequestSerializer,
    OrderItemSerializer,
    UpdateOrderItemStatusSerializer,
)
from .order_serializers import AddItemsSerializer, OrderCreateSerializer, OrderSerializer
from .discount_serializers import ApplyDiscountSerializer
from .status_serializers import UpdateOrderStatusSerializer

__all__ = [
    'OrderItemSerializer',
    'ItemRequestSerializer',
    'BundleRequestSerializer',
    'UpdateOrderItemStatusSerializer',
    'OrderSerializer',
    'OrderCreateSerializer',
    'AddItemsSerializer',
    'ApplyDiscountSerializer',
    'UpdateOrderStatusSerializer',
]

from rest_framework import serializers

from orders.models import Order


class UpdateOrderStatusSerializer(serializers.Serializer):
    """
    Serializer for validating an order status request. Whether the move is
    allowed is decided by OrderService.
    """

    status = serializers.ChoiceField(choices=Order.OrderStatus.choices)

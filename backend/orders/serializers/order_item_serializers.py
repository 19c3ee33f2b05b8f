from rest_framework import serializers

from orders.models import OrderItem


class OrderItemSerializer(serializers.ModelSerializer):
    menu_item_name = serializers.CharField(source="menu_item.name", read_only=True)
    fulfillment_station = serializers.CharField(source="menu_item.fulfillment_station", read_only=True)
    allergy_ids = serializers.PrimaryKeyRelatedField(source="allergies", many=True, read_only=True)
    total_price = serializers.DecimalField(max_digits=10, decimal_places=2, read_only=True)
    promotion_name = serializers.CharField(source="promotion.name", read_only=True, default=None)

    class Meta:
        model = OrderItem
        fields = [
            "id",
            "menu_item",
            "menu_item_name",
            "fulfillment_station",
            "quantity",
            "price",
            "total_price",
            "status",
            "notes",
            "allergy_ids",
            "promotion",
            "promotion_name",
            "bundle_instance",
            "bundle_price",
            "created_at",
        ]
        read_only_fields = fields


class ItemRequestSerializer(serializers.Serializer):
    """One line of an order request."""

    menu_item_id = serializers.IntegerField()
    quantity = serializers.IntegerField(min_value=1, default=1)
    notes = serializers.CharField(required=False, allow_blank=True, default="")
    allergy_ids = serializers.ListField(child=serializers.IntegerField(), required=False, default=list)


class BundleRequestSerializer(serializers.Serializer):
    promotion_id = serializers.IntegerField()
    notes = serializers.CharField(required=False, allow_blank=True, default="")


class UpdateOrderItemStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=OrderItem.ItemStatus.choices)

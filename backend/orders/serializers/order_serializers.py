from decimal import Decimal

from rest_framework import serializers

from orders.calculators import OrderCalculator
from orders.models import Order
from settings.config import app_settings

from .order_item_serializers import BundleRequestSerializer, ItemRequestSerializer, OrderItemSerializer


class OrderSerializer(serializers.ModelSerializer):
    items = OrderItemSerializer(many=True, read_only=True)
    table_number = serializers.IntegerField(source="table.number", read_only=True, default=None)
    priced_subtotal = serializers.SerializerMethodField()
    created_by_name = serializers.CharField(source="created_by.display_name", read_only=True, default=None)

    class Meta:
        model = Order
        fields = [
            "id",
            "order_number",
            "order_type",
            "status",
            "table",
            "table_number",
            "customer_name",
            "customer_phone",
            "pickup_time",
            "notes",
            "items",
            "subtotal",
            "priced_subtotal",
            "discount_type",
            "discount_value",
            "discount_reason",
            "manual_discount_reason",
            "bundle_savings",
            "discount_amount",
            "tax_amount",
            "surcharges",
            "tip_amount",
            "total_amount",
            "created_by",
            "created_by_name",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields

    def get_priced_subtotal(self, obj):
        calculator = OrderCalculator(obj.items.all(), tax_rate=app_settings.tax_rate, currency=app_settings.currency)
        return str(calculator.calculate_priced_subtotal())


class OrderCreateSerializer(serializers.Serializer):
    order_type = serializers.ChoiceField(choices=Order.OrderType.choices)
    table_id = serializers.IntegerField(required=False, allow_null=True, default=None)
    items = ItemRequestSerializer(many=True, required=False, default=list)
    bundles = BundleRequestSerializer(many=True, required=False, default=list)
    customer_name = serializers.CharField(required=False, allow_blank=True, default="")
    customer_phone = serializers.CharField(required=False, allow_blank=True, default="")
    pickup_time = serializers.DateTimeField(required=False, allow_null=True, default=None)
    notes = serializers.CharField(required=False, allow_blank=True, default="")
    surcharges = serializers.DecimalField(
        max_digits=10, decimal_places=2, min_value=Decimal("0"), required=False, default=Decimal("0.00")
    )


class AddItemsSerializer(serializers.Serializer):
    items = ItemRequestSerializer(many=True, required=False, default=list)
    bundles = BundleRequestSerializer(many=True, required=False, default=list)

from decimal import Decimal

from rest_framework import serializers

from orders.models import Order


class ApplyDiscountSerializer(serializers.Serializer):
    discount_type = serializers.ChoiceField(choices=Order.DiscountType.choices)
    value = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=Decimal("0"))
    reason = serializers.CharField(required=False, allow_blank=True, default="", max_length=255)

    def validate(self, attrs):
        if attrs["discount_type"] == Order.DiscountType.PERCENTAGE and attrs["value"] > Decimal("100"):
            raise serializers.ValidationError({"value": "Percentage discount cannot exceed 100%."})
        return attrs

from rest_framework import serializers

from .models import Payment


class PaymentSerializer(serializers.ModelSerializer):
    order_number = serializers.IntegerField(source="order.order_number", read_only=True)

    class Meta:
        model = Payment
        fields = [
            "id",
            "order",
            "order_number",
            "amount",
            "tip",
            "total_due",
            "change_due",
            "method",
            "processed_by",
            "created_at",
        ]
        read_only_fields = fields


class SettlePaymentSerializer(serializers.Serializer):
    order_id = serializers.UUIDField()
    amount = serializers.DecimalField(max_digits=10, decimal_places=2)
    method = serializers.ChoiceField(choices=Payment.PaymentMethod.choices)
    tip = serializers.DecimalField(max_digits=10, decimal_places=2, required=False, default=None, allow_null=True)

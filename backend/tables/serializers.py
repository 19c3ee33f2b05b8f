from rest_framework import serializers

from .models import Table


class TableSerializer(serializers.ModelSerializer):
    effective_capacity = serializers.IntegerField(read_only=True)
    satellite_ids = serializers.SerializerMethodField()
    seats = serializers.ListField(source="seat_table_numbers", child=serializers.IntegerField(), read_only=True)
    active_order_id = serializers.SerializerMethodField()

    class Meta:
        model = Table
        fields = [
            "id",
            "number",
            "capacity",
            "effective_capacity",
            "status",
            "merged_with",
            "satellite_ids",
            "seats",
            "active_order_id",
            "updated_at",
        ]
        read_only_fields = fields

    def get_satellite_ids(self, obj):
        return list(obj.satellites.values_list("id", flat=True))

    def get_active_order_id(self, obj):
        from orders.models import Order

        order = (
            Order.objects.filter(table_id=obj.primary.pk)
            .exclude(status__in=Order.TERMINAL_STATUSES)
            .order_by("-created_at")
            .values_list("id", flat=True)
            .first()
        )
        return str(order) if order else None


class MergeTablesSerializer(serializers.Serializer):
    table_ids = serializers.ListField(child=serializers.IntegerField(), allow_empty=True)


class UnmergeTablesSerializer(serializers.Serializer):
    primary_table_id = serializers.IntegerField()


class UpdateTableStatusSerializer(serializers.Serializer):
    status = serializers.CharField()

from types import SimpleNamespace

from rest_framework import serializers

from .models import Promotion
from .services import PromotionService


class PromotionSerializer(serializers.ModelSerializer):
    menu_item_ids = serializers.PrimaryKeyRelatedField(source="menu_items", many=True, read_only=True)
    regular_price = serializers.SerializerMethodField()
    savings = serializers.SerializerMethodField()

    class Meta:
        model = Promotion
        fields = [
            "id",
            "name",
            "description",
            "type",
            "value",
            "bundle_price",
            "start_date",
            "end_date",
            "is_active",
            "menu_item_ids",
            "regular_price",
            "savings",
        ]
        read_only_fields = fields

    def _bundle_lines(self, obj):
        return [SimpleNamespace(price=item.price, quantity=1) for item in obj.menu_items.all()]

    def get_regular_price(self, obj):
        if obj.type != Promotion.PromotionType.BUNDLE:
            return None
        return str(sum((line.price for line in self._bundle_lines(obj)), 0))

    def get_savings(self, obj):
        if obj.type != Promotion.PromotionType.BUNDLE or obj.bundle_price is None:
            return None
        return str(PromotionService.savings_for(obj, self._bundle_lines(obj)))

from rest_framework import viewsets

from .serializers import PromotionSerializer
from .services import PromotionService


class ActivePromotionViewSet(viewsets.ReadOnlyModelViewSet):
    """Promotions in effect right now, for the order entry screen."""

    serializer_class = PromotionSerializer
    filterset_fields = ["type"]

    def get_queryset(self):
        return PromotionService.active_queryset().prefetch_related("menu_items").order_by("name")

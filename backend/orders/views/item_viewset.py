from django.shortcuts import get_object_or_404
from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.request import Request
from rest_framework.response import Response

from orders.models import OrderItem
from orders.serializers import (
    AddItemsSerializer,
    OrderItemSerializer,
    OrderSerializer,
    UpdateOrderItemStatusSerializer,
)
from orders.services import OrderItemService
from users.permissions import CREATE_ORDERS, PREPARE_ORDERS, HasCapability


class OrderItemViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    mixins.CreateModelMixin,
    mixins.DestroyModelMixin,
    viewsets.GenericViewSet,
):
    """
    A ViewSet for the items of one order, nested under /orders/<order_pk>/items/.
    """

    serializer_class = OrderItemSerializer
    permission_classes = [IsAuthenticated, HasCapability]
    required_capabilities = {
        "create": CREATE_ORDERS,
        "destroy": CREATE_ORDERS,
        "set_status": PREPARE_ORDERS,
    }

    def get_queryset(self):
        """Filter items based on the order_pk provided in the URL."""
        return (
            OrderItem.objects.filter(order__pk=self.kwargs["order_pk"])
            .select_related("menu_item", "promotion")
            .prefetch_related("allergies")
            .order_by("created_at", "id")
        )

    def get_object(self):
        return get_object_or_404(self.get_queryset(), pk=self.kwargs["pk"])

    def create(self, request: Request, *args, **kwargs) -> Response:
        """Add items and bundles; responds with the whole recalculated order."""
        serializer = AddItemsSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        order = OrderItemService.add_items(
            self.kwargs["order_pk"],
            items=[dict(item) for item in serializer.validated_data["items"]],
            bundles=[dict(bundle) for bundle in serializer.validated_data["bundles"]],
        )
        return Response(OrderSerializer(order).data, status=status.HTTP_201_CREATED)

    def destroy(self, request: Request, *args, **kwargs) -> Response:
        order = OrderItemService.remove_item(self.kwargs["order_pk"], kwargs["pk"])
        return Response(OrderSerializer(order).data, status=status.HTTP_200_OK)

    @action(detail=True, methods=["post"], url_path="status")
    def set_status(self, request: Request, order_pk=None, pk=None) -> Response:
        serializer = UpdateOrderItemStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        # Confirms the item belongs to this order
        self.get_object()
        item = OrderItemService.transition_item_status(pk, serializer.validated_data["status"])
        return Response(OrderItemSerializer(item).data)

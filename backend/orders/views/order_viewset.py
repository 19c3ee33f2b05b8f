import logging

from rest_framework import filters, mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.request import Request
from rest_framework.response import Response
from django_filters.rest_framework import DjangoFilterBackend

from core_backend.exceptions import InvalidInputError
from orders.filters import OrderFilter
from orders.models import Order
from orders.serializers import (
    ApplyDiscountSerializer,
    OrderCreateSerializer,
    OrderSerializer,
    UpdateOrderStatusSerializer,
)
from orders.services import KitchenService, OrderDiscountService, OrderService
from users.permissions import CREATE_ORDERS, PREPARE_ORDERS, HasCapability, capabilities_for

logger = logging.getLogger(__name__)


class OrderViewSet(
    mixins.CreateModelMixin,
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    viewsets.GenericViewSet,
):
    """
    ViewSet for orders. Writes go through OrderService; discounts are
    checked against the caller's role inside OrderDiscountService.
    """

    queryset = Order.objects.select_related("table", "created_by").prefetch_related(
        "items__menu_item", "items__allergies", "items__promotion"
    )
    serializer_class = OrderSerializer
    permission_classes = [IsAuthenticated, HasCapability]
    filter_backends = [DjangoFilterBackend, filters.OrderingFilter]
    filterset_class = OrderFilter
    ordering_fields = ["order_number", "created_at", "total_amount"]
    ordering = ["-created_at"]

    required_capabilities = {
        "create": CREATE_ORDERS,
        "set_status": PREPARE_ORDERS,
        "kitchen": PREPARE_ORDERS,
    }

    def create(self, request: Request, *args, **kwargs) -> Response:
        serializer = OrderCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        order = OrderService.create_order(
            order_type=data["order_type"],
            items=[dict(item) for item in data["items"]],
            table_id=data["table_id"],
            bundles=[dict(bundle) for bundle in data["bundles"]],
            customer_name=data["customer_name"],
            customer_phone=data["customer_phone"],
            pickup_time=data["pickup_time"],
            notes=data["notes"],
            surcharges=data["surcharges"],
            created_by=request.user,
        )
        return Response(self._serialize(order), status=status.HTTP_201_CREATED)

    @action(detail=True, methods=["post"], url_path="status")
    def set_status(self, request: Request, pk=None) -> Response:
        serializer = UpdateOrderStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        order = OrderService.transition_order_status(pk, serializer.validated_data["status"])
        return Response(self._serialize(order))

    @action(detail=True, methods=["post", "delete"], url_path="discount")
    def discount(self, request: Request, pk=None) -> Response:
        capabilities = capabilities_for(request.user)
        if request.method == "DELETE":
            order = OrderDiscountService.remove_discount(pk, capabilities=capabilities)
            return Response(self._serialize(order))

        serializer = ApplyDiscountSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        order = OrderDiscountService.apply_discount(
            pk,
            data["discount_type"],
            data["value"],
            reason=data["reason"],
            applied_by=request.user,
            capabilities=capabilities,
        )
        return Response(self._serialize(order))

    @action(detail=True, methods=["post"], url_path="bundle-discount")
    def bundle_discount(self, request: Request, pk=None) -> Response:
        order = OrderDiscountService.apply_bundle_discount(pk, capabilities=capabilities_for(request.user))
        return Response(self._serialize(order))

    @action(detail=False, methods=["get"], url_path="kitchen")
    def kitchen(self, request: Request) -> Response:
        """Open work for one preparation station (?station=KITCHEN), grouped by order."""
        station = request.query_params.get("station", "")
        queue = KitchenService.get_station_queue(station.upper())
        payload = []
        for entry in queue:
            order, items = entry["order"], entry["items"]
            payload.append(
                {
                    "order_id": str(order.pk),
                    "order_number": order.order_number,
                    "table_number": order.table.number if order.table_id else None,
                    "order_type": order.order_type,
                    "items": [
                        {
                            "id": item.pk,
                            "name": item.menu_item.name,
                            "quantity": item.quantity,
                            "status": item.status,
                            "notes": item.notes,
                            "allergies": [allergy.name for allergy in item.allergies.all()],
                        }
                        for item in items
                    ],
                    "ticket": KitchenService.format_ticket(order, items),
                }
            )
        return Response(payload)

    @action(detail=False, methods=["get"], url_path="for-table")
    def for_table(self, request: Request) -> Response:
        table_id = request.query_params.get("table")
        if not table_id:
            raise InvalidInputError("The 'table' query parameter is required.")
        orders = OrderService.list_open_orders_for_table(table_id)
        return Response(OrderSerializer(orders, many=True).data)

    def _serialize(self, order):
        return OrderSerializer(self.get_queryset().get(pk=order.pk)).data

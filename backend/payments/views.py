import logging

from rest_framework import mixins, status, viewsets
from rest_framework.permissions import IsAuthenticated
from rest_framework.request import Request
from rest_framework.response import Response

from users.permissions import CanSettlePayments

from .models import Payment
from .serializers import PaymentSerializer, SettlePaymentSerializer
from .services import PaymentService

logger = logging.getLogger(__name__)


class PaymentViewSet(mixins.ListModelMixin, mixins.RetrieveModelMixin, viewsets.GenericViewSet):
    """
    Settled payments. POST settles an order: records the tender, closes the
    order and frees its table.
    """

    queryset = Payment.objects.select_related("order").all()
    serializer_class = PaymentSerializer
    permission_classes = [IsAuthenticated, CanSettlePayments]
    filterset_fields = ["method", "order"]

    def create(self, request: Request, *args, **kwargs) -> Response:
        serializer = SettlePaymentSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        payment = PaymentService.settle_payment(
            order_id=data["order_id"],
            amount=data["amount"],
            method=data["method"],
            tip=data.get("tip"),
            processed_by=request.user,
        )
        return Response(PaymentSerializer(payment).data, status=status.HTTP_201_CREATED)

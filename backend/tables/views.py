import logging

from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import filters, status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.request import Request
from rest_framework.response import Response

from users.permissions import CanManageTables

from .models import Table
from .serializers import (
    MergeTablesSerializer,
    TableSerializer,
    UnmergeTablesSerializer,
    UpdateTableStatusSerializer,
)
from .services import TableService

logger = logging.getLogger(__name__)


class TableViewSet(viewsets.ReadOnlyModelViewSet):
    """
    Floor plan tables. Reads are open to any signed-in staff member; merging,
    unmerging and status changes require table management rights.
    """

    queryset = Table.objects.select_related("merged_with").all()
    serializer_class = TableSerializer
    filter_backends = [DjangoFilterBackend, filters.OrderingFilter]
    filterset_fields = ["status", "merged_with"]
    ordering = ["number"]

    def get_permissions(self):
        if self.action in ("merge", "unmerge", "set_status"):
            return [IsAuthenticated(), CanManageTables()]
        return [IsAuthenticated()]

    @action(detail=False, methods=["post"], url_path="merge")
    def merge(self, request: Request) -> Response:
        serializer = MergeTablesSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        primary = TableService.merge_tables(serializer.validated_data["table_ids"])
        return Response(TableSerializer(primary).data)

    @action(detail=False, methods=["post"], url_path="unmerge")
    def unmerge(self, request: Request) -> Response:
        serializer = UnmergeTablesSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        primary = TableService.unmerge_tables(serializer.validated_data["primary_table_id"])
        return Response(TableSerializer(primary).data)

    @action(detail=True, methods=["post"], url_path="status")
    def set_status(self, request: Request, pk=None) -> Response:
        serializer = UpdateTableStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        table = TableService.update_table_status(pk, serializer.validated_data["status"])
        return Response(TableSerializer(table).data, status=status.HTTP_200_OK)

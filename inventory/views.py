"""
Inventory — Views

Ledger endpoints: list/retrieve history, record a transaction, and a
per-type summary over the same filters as the list. There are no
update or delete routes; the ledger is append-only.

@file inventory/views.py
"""

from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from .filters import InventoryTransactionFilter
from .permissions import CanRecordInventory
from .queries import InventoryQueryService
from .serializers import (
    InventoryTransactionReadSerializer,
    InventoryTransactionWriteSerializer,
    TransactionSummarySerializer,
)
from .services import StockLedgerService


class InventoryTransactionViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    mixins.CreateModelMixin,
    viewsets.GenericViewSet,
):
    """
    Stock movement ledger.

    List/retrieve/summary open to any authenticated user.
    Create restricted to admin / warehouse roles; the acting user is
    always request.user.
    """

    permission_classes = [IsAuthenticated, CanRecordInventory]
    filterset_class = InventoryTransactionFilter
    search_fields = [
        'reference_number', 'notes',
        'product__product_name', 'product__product_code', 'batch__batch_number',
    ]
    ordering_fields = ['transaction_date', 'created_at', 'quantity']
    ordering = ['-transaction_date', '-created_at']

    def get_queryset(self):
        return InventoryQueryService.history()

    def get_serializer_class(self):
        if self.action == 'create':
            return InventoryTransactionWriteSerializer
        return InventoryTransactionReadSerializer

    def create(self, request, *args, **kwargs):
        ser = InventoryTransactionWriteSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        entry = StockLedgerService.record_transaction(
            actor_id=request.user.pk,
            **ser.validated_data,
        )
        entry = InventoryQueryService.history().get(pk=entry.pk)
        return Response(
            {'success': True, 'data': InventoryTransactionReadSerializer(entry).data},
            status=status.HTTP_201_CREATED,
        )

    @action(detail=False, methods=['get'], url_path='summary')
    def summary(self, request):
        queryset = self.filter_queryset(self.get_queryset())
        counts = InventoryQueryService.summary(queryset)
        return Response({
            'success': True,
            'data': TransactionSummarySerializer(counts).data,
        })

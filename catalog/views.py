"""
Catalog — Views

Read-only product listing and the per-product batch picker used when
recording a transaction.

@file catalog/views.py
"""

from rest_framework import viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from inventory.queries import InventoryQueryService

from .serializers import BatchSerializer, ProductSerializer


class ProductViewSet(viewsets.ReadOnlyModelViewSet):
    """Active products, alphabetical."""

    permission_classes = [IsAuthenticated]
    serializer_class = ProductSerializer
    search_fields = ['product_name', 'product_code']
    ordering_fields = ['product_name', 'product_code']
    ordering = ['product_name']

    def get_queryset(self):
        return InventoryQueryService.active_products()

    @action(detail=True, methods=['get'], url_path='available-batches')
    def available_batches(self, request, pk=None):
        product = self.get_object()
        batches = InventoryQueryService.available_batches_for(product.pk)
        return Response({
            'success': True,
            'data': BatchSerializer(batches, many=True).data,
        })

"""
StockLedger — Root URL Configuration

All API endpoints are namespaced under /api/v1/.

@file config/urls.py
"""

from django.contrib import admin
from django.urls import include, path
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.reverse import reverse

admin.site.site_header = 'StockLedger Administration'
admin.site.site_title = 'StockLedger'
admin.site.index_title = 'Inventory Transaction Ledger'


@api_view(['GET'])
@permission_classes([AllowAny])
def api_root(request, format=None):
    """StockLedger API v1 — endpoint directory."""
    return Response({
        'auth': {
            'token': reverse('api-v1:auth:token-obtain', request=request, format=format),
            'refresh': reverse('api-v1:auth:token-refresh', request=request, format=format),
        },
        'catalog': {
            'products': reverse('api-v1:catalog:product-list', request=request, format=format),
        },
        'inventory': {
            'transactions': reverse('api-v1:inventory:transaction-list', request=request, format=format),
            'summary': reverse('api-v1:inventory:transaction-summary', request=request, format=format),
        },
    })


api_v1_patterns = [
    path('', api_root, name='api-root'),
    path('auth/', include('users.urls', namespace='auth')),
    path('catalog/', include('catalog.urls', namespace='catalog')),
    path('inventory/', include('inventory.urls', namespace='inventory')),
]

urlpatterns = [
    path('admin/', admin.site.urls),
    path('api/auth/', include('rest_framework.urls', namespace='rest_framework')),
    path('api/v1/', include((api_v1_patterns, 'api-v1'))),
]

"""
Inventory — URL Configuration

@file inventory/urls.py
"""

from django.urls import include, path
from rest_framework.routers import DefaultRouter

from .views import InventoryTransactionViewSet

app_name = 'inventory'

router = DefaultRouter()
router.register('transactions', InventoryTransactionViewSet, basename='transaction')

urlpatterns = [
    path('', include(router.urls)),
]

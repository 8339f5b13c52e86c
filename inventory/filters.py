"""
Inventory — Filters

Query-string filters for the ledger history endpoint.

@file inventory/filters.py
"""

import django_filters

from .models import InventoryTransaction


class InventoryTransactionFilter(django_filters.FilterSet):
    date_from = django_filters.DateFilter(field_name='transaction_date', lookup_expr='gte')
    date_to = django_filters.DateFilter(field_name='transaction_date', lookup_expr='lte')

    class Meta:
        model = InventoryTransaction
        fields = ['transaction_type', 'product', 'batch', 'created_by']

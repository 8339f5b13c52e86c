"""
Inventory — Django Admin Configuration

Read-only ledger browser. No add, edit or delete: entries are created
only through StockLedgerService so the batch counter moves with them.

@file inventory/admin.py
"""

from django.contrib import admin
from django.utils.translation import gettext_lazy as _

from core.services import AuditService

from .models import InventoryTransaction


@admin.register(InventoryTransaction)
class InventoryTransactionAdmin(admin.ModelAdmin):
    list_display = (
        'transaction_date', 'transaction_type', 'product', 'batch',
        'quantity', 'reference_number', 'created_by', 'created_at',
    )
    list_filter = ('transaction_type', 'transaction_date')
    search_fields = ('reference_number', 'product__product_name', 'product__product_code')
    readonly_fields = (
        'id', 'transaction_type', 'product', 'batch', 'quantity',
        'reference_number', 'notes', 'transaction_date',
        'created_by', 'created_at', 'stock_change',
    )
    list_select_related = ('product', 'batch', 'created_by')
    show_full_result_count = False
    list_per_page = 50
    date_hierarchy = 'transaction_date'
    ordering = ('-transaction_date', '-created_at')

    fieldsets = (
        (_('Movement'), {
            'fields': ('id', 'transaction_type', 'product', 'batch', 'quantity', 'transaction_date'),
        }),
        (_('Reference'), {
            'fields': ('reference_number', 'notes'),
        }),
        (_('Audit'), {
            'fields': ('created_by', 'created_at', 'stock_change'),
        }),
    )

    @admin.display(description=_('batch stock before → after'))
    def stock_change(self, obj):
        entry = AuditService.trail('InventoryTransaction', obj.pk).first()
        if entry is None or not entry.new_values or entry.new_values.get('stock_before') is None:
            return '-'
        return f"{entry.new_values['stock_before']} → {entry.new_values['stock_after']}"

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False

"""
Inventory — Serializers

Read serializer for ledger history (denormalised display fields resolved
through joins) and the write serializer for a transaction intent. The
write side never accepts created_by: the actor is the authenticated user.

@file inventory/serializers.py
"""

from django.utils import timezone
from rest_framework import serializers

from .models import InventoryTransaction


class InventoryTransactionReadSerializer(serializers.ModelSerializer):
    transaction_type_display = serializers.CharField(
        source='get_transaction_type_display', read_only=True,
    )
    product_name = serializers.CharField(source='product.product_name', read_only=True)
    product_code = serializers.CharField(source='product.product_code', read_only=True)
    batch_number = serializers.CharField(
        source='batch.batch_number', read_only=True, default=None,
    )
    created_by_name = serializers.CharField(source='created_by.get_full_name', read_only=True)
    signed_quantity = serializers.IntegerField(read_only=True)

    class Meta:
        model = InventoryTransaction
        fields = [
            'id', 'transaction_type', 'transaction_type_display',
            'product', 'product_name', 'product_code',
            'batch', 'batch_number',
            'quantity', 'signed_quantity',
            'reference_number', 'notes',
            'transaction_date', 'created_by', 'created_by_name', 'created_at',
        ]
        read_only_fields = fields


class InventoryTransactionWriteSerializer(serializers.Serializer):
    transaction_type = serializers.ChoiceField(
        choices=InventoryTransaction.TransactionType.choices,
        default=InventoryTransaction.TransactionType.ADJUSTMENT,
    )
    product_id = serializers.UUIDField()
    # Blank means "not tied to a batch"; identifiers are checked by the service.
    batch_id = serializers.CharField(
        required=False, allow_blank=True, allow_null=True, default=None,
    )
    quantity = serializers.IntegerField(min_value=1)
    reference_number = serializers.CharField(
        required=False, allow_blank=True, allow_null=True, max_length=100, default=None,
    )
    notes = serializers.CharField(
        required=False, allow_blank=True, allow_null=True, default=None,
    )
    transaction_date = serializers.DateField(default=timezone.localdate)


class TransactionSummarySerializer(serializers.Serializer):
    total = serializers.IntegerField()
    purchases = serializers.IntegerField()
    sales = serializers.IntegerField()
    adjustments = serializers.IntegerField()

"""
Catalog — Serializers

@file catalog/serializers.py
"""

from rest_framework import serializers

from .models import Batch, Product


class ProductSerializer(serializers.ModelSerializer):
    class Meta:
        model = Product
        fields = ['id', 'product_name', 'product_code', 'is_active']
        read_only_fields = fields


class BatchSerializer(serializers.ModelSerializer):
    class Meta:
        model = Batch
        fields = ['id', 'product', 'batch_number', 'import_date', 'current_stock', 'is_active']
        read_only_fields = fields

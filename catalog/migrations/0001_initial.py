import uuid

import django.db.models.deletion
import django.utils.timezone
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='Product',
            fields=[
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True, verbose_name='created at')),
                ('updated_at', models.DateTimeField(auto_now=True, verbose_name='updated at')),
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('product_name', models.CharField(max_length=255, verbose_name='product name')),
                ('product_code', models.CharField(max_length=64, unique=True, verbose_name='product code')),
                ('is_active', models.BooleanField(db_index=True, default=True, verbose_name='active')),
            ],
            options={
                'verbose_name': 'product',
                'verbose_name_plural': 'products',
                'ordering': ['product_name'],
            },
        ),
        migrations.CreateModel(
            name='Batch',
            fields=[
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True, verbose_name='created at')),
                ('updated_at', models.DateTimeField(auto_now=True, verbose_name='updated at')),
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('batch_number', models.CharField(max_length=100, verbose_name='batch number')),
                ('import_date', models.DateField(db_index=True, default=django.utils.timezone.localdate, verbose_name='import date')),
                ('opening_stock', models.PositiveIntegerField(default=0, verbose_name='opening stock')),
                ('current_stock', models.PositiveIntegerField(default=0, verbose_name='current stock')),
                ('is_active', models.BooleanField(db_index=True, default=True, verbose_name='active')),
                ('product', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='batches', to='catalog.product', verbose_name='product')),
            ],
            options={
                'verbose_name': 'batch',
                'verbose_name_plural': 'batches',
                'ordering': ['-import_date', '-created_at'],
                'indexes': [
                    models.Index(fields=['product', 'is_active', 'current_stock'], name='batch_available_idx'),
                ],
                'constraints': [
                    models.UniqueConstraint(fields=('product', 'batch_number'), name='unique_product_batch_number'),
                    models.CheckConstraint(condition=models.Q(('current_stock__gte', 0)), name='batch_current_stock_non_negative'),
                ],
            },
        ),
    ]

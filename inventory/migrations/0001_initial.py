import uuid

import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('catalog', '0001_initial'),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='InventoryTransaction',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('transaction_type', models.CharField(choices=[('purchase', 'Purchase'), ('sale', 'Sale'), ('adjustment', 'Adjustment')], db_index=True, max_length=12, verbose_name='transaction type')),
                ('quantity', models.PositiveIntegerField(verbose_name='quantity')),
                ('reference_number', models.CharField(blank=True, help_text='External reference, e.g. PO-002', max_length=100, null=True, verbose_name='reference number')),
                ('notes', models.TextField(blank=True, null=True, verbose_name='notes')),
                ('transaction_date', models.DateField(db_index=True, verbose_name='transaction date')),
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True, verbose_name='created at')),
                ('batch', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name='inventory_transactions', to='catalog.batch', verbose_name='batch')),
                ('created_by', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='+', to=settings.AUTH_USER_MODEL, verbose_name='created by')),
                ('product', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='inventory_transactions', to='catalog.product', verbose_name='product')),
            ],
            options={
                'verbose_name': 'inventory transaction',
                'verbose_name_plural': 'inventory transactions',
                'ordering': ['-transaction_date', '-created_at'],
                'indexes': [
                    models.Index(fields=['batch', 'created_at'], name='inv_tx_batch_created_idx'),
                    models.Index(fields=['product', 'transaction_date'], name='inv_tx_product_date_idx'),
                    models.Index(fields=['-transaction_date', '-created_at'], name='inv_tx_history_idx'),
                ],
                'constraints': [
                    models.CheckConstraint(condition=models.Q(('quantity__gt', 0)), name='inv_tx_positive_quantity'),
                ],
            },
        ),
    ]

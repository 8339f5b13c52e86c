"""
Catalog — Models

Products and the batches (lots) they are stocked in. Each batch carries
its own cached stock counter; the inventory ledger is the only writer of
that counter once the batch exists.

@file catalog/models.py
"""

from django.db import models
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from core.models import BaseModel


class Product(BaseModel):
    """A stock-keeping product. Read-only from the ledger's perspective."""

    product_name = models.CharField(_('product name'), max_length=255)
    product_code = models.CharField(
        _('product code'), max_length=64, unique=True,
    )
    is_active = models.BooleanField(_('active'), default=True, db_index=True)

    class Meta:
        verbose_name = _('product')
        verbose_name_plural = _('products')
        ordering = ['product_name']

    def __str__(self):
        return f'{self.product_name} ({self.product_code})'


class Batch(BaseModel):
    """
    A tracked lot of a product.

    ``opening_stock`` is the quantity the batch was created with outside
    the ledger. ``current_stock`` equals opening_stock plus the signed
    sum of every ledger entry that references the batch.
    """

    product = models.ForeignKey(
        Product,
        on_delete=models.PROTECT,
        related_name='batches',
        verbose_name=_('product'),
    )
    batch_number = models.CharField(_('batch number'), max_length=100)
    import_date = models.DateField(
        _('import date'), default=timezone.localdate, db_index=True,
    )
    opening_stock = models.PositiveIntegerField(_('opening stock'), default=0)
    current_stock = models.PositiveIntegerField(_('current stock'), default=0)
    is_active = models.BooleanField(_('active'), default=True, db_index=True)

    class Meta:
        verbose_name = _('batch')
        verbose_name_plural = _('batches')
        ordering = ['-import_date', '-created_at']
        indexes = [
            models.Index(fields=['product', 'is_active', 'current_stock'], name='batch_available_idx'),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=['product', 'batch_number'],
                name='unique_product_batch_number',
            ),
            models.CheckConstraint(
                condition=models.Q(current_stock__gte=0),
                name='batch_current_stock_non_negative',
            ),
        ]

    def __str__(self):
        return f'Batch {self.batch_number} ({self.current_stock} in stock)'

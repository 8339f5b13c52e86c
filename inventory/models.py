"""
Inventory — Models

The transaction ledger. Every purchase, sale or adjustment is one
immutable row; a batch's cached current_stock is the running sum of the
rows that reference it. Records are INSERT ONLY — never update or delete.

@file inventory/models.py
"""

import uuid

from django.conf import settings
from django.db import models
from django.utils.translation import gettext_lazy as _


class InventoryTransaction(models.Model):
    """
    A single stock movement (insert only).

    Direction is carried by ``transaction_type``; ``quantity`` is always a
    positive magnitude. ``transaction_date`` is the caller's logical date,
    ``created_at`` the physical insert time used as ordering tie-break.
    """

    class TransactionType(models.TextChoices):
        PURCHASE = 'purchase', _('Purchase')
        SALE = 'sale', _('Sale')
        ADJUSTMENT = 'adjustment', _('Adjustment')

    # Adjustments are additive, like purchases.
    INBOUND_TYPES = {TransactionType.PURCHASE, TransactionType.ADJUSTMENT}
    OUTBOUND_TYPES = {TransactionType.SALE}

    id = models.UUIDField(
        primary_key=True, default=uuid.uuid4, editable=False,
    )
    transaction_type = models.CharField(
        _('transaction type'), max_length=12,
        choices=TransactionType.choices, db_index=True,
    )
    product = models.ForeignKey(
        'catalog.Product',
        on_delete=models.PROTECT,
        related_name='inventory_transactions',
        verbose_name=_('product'),
    )
    batch = models.ForeignKey(
        'catalog.Batch',
        null=True, blank=True,
        on_delete=models.PROTECT,
        related_name='inventory_transactions',
        verbose_name=_('batch'),
    )
    quantity = models.PositiveIntegerField(_('quantity'))
    reference_number = models.CharField(
        _('reference number'), max_length=100, null=True, blank=True,
        help_text=_('External reference, e.g. PO-002'),
    )
    notes = models.TextField(_('notes'), null=True, blank=True)
    transaction_date = models.DateField(_('transaction date'), db_index=True)
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name='+',
        verbose_name=_('created by'),
    )
    created_at = models.DateTimeField(
        _('created at'), auto_now_add=True, db_index=True,
    )
    # No updated_at — immutable record.

    class Meta:
        verbose_name = _('inventory transaction')
        verbose_name_plural = _('inventory transactions')
        ordering = ['-transaction_date', '-created_at']
        indexes = [
            models.Index(fields=['batch', 'created_at'], name='inv_tx_batch_created_idx'),
            models.Index(fields=['product', 'transaction_date'], name='inv_tx_product_date_idx'),
            models.Index(fields=['-transaction_date', '-created_at'], name='inv_tx_history_idx'),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(quantity__gt=0),
                name='inv_tx_positive_quantity',
            ),
        ]

    def __str__(self):
        return f'{self.transaction_type} {self.quantity} product={self.product_id} batch={self.batch_id}'

    @staticmethod
    def signed_delta(transaction_type: str, quantity: int) -> int:
        if transaction_type in InventoryTransaction.OUTBOUND_TYPES:
            return -quantity
        return quantity

    @property
    def signed_quantity(self) -> int:
        return self.signed_delta(self.transaction_type, self.quantity)

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise NotImplementedError('InventoryTransaction is insert-only; updates are not allowed.')
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise NotImplementedError('InventoryTransaction records cannot be deleted.')

"""
Inventory — Stores

Persistence seams under the stock ledger:

  LedgerStore  append-only access to InventoryTransaction rows
  BatchStore   the per-batch current_stock counter, written only through
               a compare-and-swap UPDATE

Neither store opens its own transaction; callers wrap them in
``transaction.atomic`` so the append and the counter update commit together.

@file inventory/stores.py
"""

import logging
from datetime import date
from uuid import UUID

from django.db.models import F, QuerySet

from catalog.models import Batch
from core.constants import LOGGER_NAME
from core.exceptions import ConflictError, FieldValidationError

from .models import InventoryTransaction

logger = logging.getLogger(LOGGER_NAME)

HISTORY_ORDER = ('-transaction_date', '-created_at')


class LedgerStore:
    """Append-only collection of ledger entries."""

    @staticmethod
    def append(entry: InventoryTransaction) -> UUID:
        if not entry.quantity or entry.quantity <= 0:
            raise FieldValidationError('quantity', 'Quantity must be a positive integer.')
        if entry.batch_id is not None:
            batch_product_id = (
                Batch.objects.filter(pk=entry.batch_id).values_list('product_id', flat=True).first()
            )
            if batch_product_id is None:
                raise FieldValidationError('batch_id', 'Batch not found.')
            if batch_product_id != entry.product_id:
                raise FieldValidationError('batch_id', 'Batch does not belong to the selected product.')
        entry.save(force_insert=True)
        return entry.pk

    @staticmethod
    def list(
        filters: dict | None = None,
        order: tuple[str, ...] | None = None,
    ) -> QuerySet:
        """
        Ledger entries, most recent logical date first by default.

        Recognised filters: transaction_type, product_id, batch_id,
        date_from, date_to. Unknown keys are ignored.
        """
        qs = InventoryTransaction.objects.all()
        filters = filters or {}

        if filters.get('transaction_type'):
            qs = qs.filter(transaction_type=filters['transaction_type'])
        if filters.get('product_id'):
            qs = qs.filter(product_id=filters['product_id'])
        if filters.get('batch_id'):
            qs = qs.filter(batch_id=filters['batch_id'])
        date_from: date | None = filters.get('date_from')
        if date_from:
            qs = qs.filter(transaction_date__gte=date_from)
        date_to: date | None = filters.get('date_to')
        if date_to:
            qs = qs.filter(transaction_date__lte=date_to)

        return qs.order_by(*(order or HISTORY_ORDER))


class BatchStore:
    """Current-stock counters with a conditional update primitive."""

    @staticmethod
    def get_current_stock(batch_id) -> int:
        stock = Batch.objects.filter(pk=batch_id).values_list('current_stock', flat=True).first()
        if stock is None:
            raise FieldValidationError('batch_id', 'Batch not found.')
        return stock

    @staticmethod
    def lock(batch_id) -> Batch:
        """
        Read the batch row under SELECT ... FOR UPDATE.

        Must run inside ``transaction.atomic``. On backends without row
        locks this is a plain read and conditional_adjust is the guard.
        """
        try:
            return Batch.objects.select_for_update().get(pk=batch_id)
        except Batch.DoesNotExist:
            raise FieldValidationError('batch_id', 'Batch not found.')

    @staticmethod
    def conditional_adjust(batch_id, delta: int, expected_current: int) -> int:
        """
        Apply ``delta`` only if current_stock still equals ``expected_current``.

        Returns the new stock. Raises ConflictError when another writer got
        there first; nothing is changed in that case.
        """
        updated = Batch.objects.filter(
            pk=batch_id, current_stock=expected_current,
        ).update(current_stock=F('current_stock') + delta)
        if updated != 1:
            logger.warning(
                'Conditional stock update lost race: batch=%s expected=%s delta=%s',
                batch_id, expected_current, delta,
            )
            raise ConflictError()
        return expected_current + delta

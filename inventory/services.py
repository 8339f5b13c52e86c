"""
Inventory — Service Layer

StockLedgerService.record_transaction is the only write path into the
ledger: it validates the intent, takes the batch row lock, appends the
ledger entry and applies the signed delta to the batch with a
compare-and-swap, all inside one database transaction.

ReconciliationService recomputes batch balances from the ledger and
reports drift; it never writes.

@file inventory/services.py
"""

import logging
from datetime import date, datetime

from django.conf import settings
from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import DatabaseError, transaction
from django.db.models import IntegerField, Q, Sum, Value
from django.db.models.functions import Coalesce

from catalog.models import Batch, Product
from core.constants import DEFAULT_CONFLICT_RETRIES, LOGGER_NAME
from core.exceptions import ConflictError, FieldValidationError, InsufficientStockError, StorageError
from core.services import AuditService
from users.models import User

from .models import InventoryTransaction
from .stores import BatchStore, LedgerStore

logger = logging.getLogger(LOGGER_NAME)

INBOUND_TYPES = InventoryTransaction.INBOUND_TYPES
OUTBOUND_TYPES = InventoryTransaction.OUTBOUND_TYPES


def _conflict_retries() -> int:
    return getattr(settings, 'INVENTORY', {}).get('CONFLICT_RETRIES', DEFAULT_CONFLICT_RETRIES)


def _blank_to_none(value):
    if isinstance(value, str) and not value.strip():
        return None
    return value


def _fetch(queryset, pk, field: str, message: str):
    """Get by pk, reporting missing rows and malformed ids against ``field``."""
    try:
        obj = queryset.filter(pk=pk).first()
    except (DjangoValidationError, ValueError, TypeError):
        raise FieldValidationError(field, f'"{pk}" is not a valid identifier.')
    if obj is None:
        raise FieldValidationError(field, message)
    return obj


class StockLedgerService:
    """Records stock movements and keeps batch counters in step with the ledger."""

    @staticmethod
    def _validate(
        *,
        transaction_type,
        product_id,
        batch_id,
        quantity,
        transaction_date,
        actor_id,
    ) -> tuple[Product, Batch | None, User, date]:
        if transaction_type not in InventoryTransaction.TransactionType.values:
            raise FieldValidationError(
                'transaction_type',
                f'Must be one of: {", ".join(InventoryTransaction.TransactionType.values)}.',
            )
        # bool is an int subclass
        if isinstance(quantity, bool) or not isinstance(quantity, int):
            raise FieldValidationError('quantity', 'Quantity must be an integer.')
        if quantity <= 0:
            raise FieldValidationError('quantity', 'Quantity must be a positive integer.')

        if isinstance(transaction_date, datetime):
            transaction_date = transaction_date.date()
        if not isinstance(transaction_date, date):
            raise FieldValidationError('transaction_date', 'A transaction date is required.')

        if product_id in (None, ''):
            raise FieldValidationError('product_id', 'A product is required.')
        product = _fetch(
            Product.objects.filter(is_active=True), product_id,
            'product_id', 'Product not found or inactive.',
        )

        batch = None
        if batch_id is not None:
            batch = _fetch(Batch.objects.all(), batch_id, 'batch_id', 'Batch not found.')
            if batch.product_id != product.pk:
                raise FieldValidationError('batch_id', 'Batch does not belong to the selected product.')

        if actor_id in (None, ''):
            raise FieldValidationError('actor_id', 'An authenticated principal is required.')
        actor = _fetch(
            User.objects.active(), actor_id,
            'actor_id', 'Unknown or inactive principal.',
        )
        return product, batch, actor, transaction_date

    @staticmethod
    @transaction.atomic
    def _commit(
        *,
        transaction_type: str,
        product: Product,
        batch: Batch | None,
        quantity: int,
        reference_number: str | None,
        notes: str | None,
        transaction_date: date,
        actor: User,
    ) -> tuple[InventoryTransaction, int | None]:
        delta = InventoryTransaction.signed_delta(transaction_type, quantity)

        expected = new_stock = None
        if batch is not None:
            locked = BatchStore.lock(batch.pk)
            expected = locked.current_stock
            new_stock = expected + delta
            if new_stock < 0:
                raise InsufficientStockError(available=expected, requested=quantity)

        entry = InventoryTransaction(
            transaction_type=transaction_type,
            product=product,
            batch=batch,
            quantity=quantity,
            reference_number=reference_number,
            notes=notes,
            transaction_date=transaction_date,
            created_by=actor,
        )
        LedgerStore.append(entry)

        if batch is not None:
            new_stock = BatchStore.conditional_adjust(batch.pk, delta, expected)

        AuditService.log_insert(
            entry,
            actor=actor,
            values={
                'transaction_type': transaction_type,
                'product_id': str(product.pk),
                'batch_id': str(batch.pk) if batch else None,
                'quantity': quantity,
                'transaction_date': transaction_date.isoformat(),
                'stock_before': expected,
                'stock_after': new_stock,
            },
        )
        return entry, new_stock

    @staticmethod
    def record_transaction(
        *,
        transaction_type: str,
        product_id,
        quantity: int,
        transaction_date: date,
        actor_id,
        batch_id=None,
        reference_number: str | None = None,
        notes: str | None = None,
    ) -> InventoryTransaction:
        """
        Validate and durably record one stock movement.

        ``actor_id`` must come from the authenticated request context. A
        lost compare-and-swap re-runs the whole commit against fresh state
        up to INVENTORY['CONFLICT_RETRIES'] times before ConflictError
        reaches the caller.

        Raises FieldValidationError, InsufficientStockError, ConflictError
        or StorageError; in every case nothing is persisted.
        """
        batch_id = _blank_to_none(batch_id)
        product, batch, actor, transaction_date = StockLedgerService._validate(
            transaction_type=transaction_type,
            product_id=product_id,
            batch_id=batch_id,
            quantity=quantity,
            transaction_date=transaction_date,
            actor_id=actor_id,
        )

        attempts = _conflict_retries() + 1
        for attempt in range(1, attempts + 1):
            try:
                entry, new_stock = StockLedgerService._commit(
                    transaction_type=transaction_type,
                    product=product,
                    batch=batch,
                    quantity=quantity,
                    reference_number=_blank_to_none(reference_number),
                    notes=_blank_to_none(notes),
                    transaction_date=transaction_date,
                    actor=actor,
                )
            except ConflictError:
                if attempt == attempts:
                    logger.warning(
                        'Giving up on %s for batch %s after %d conflicting attempts',
                        transaction_type, batch_id, attempts,
                    )
                    raise
                logger.info('Retrying %s for batch %s (attempt %d)', transaction_type, batch_id, attempt + 1)
                continue
            except InsufficientStockError:
                logger.warning(
                    'Rejected %s qty=%s on batch %s: insufficient stock',
                    transaction_type, quantity, batch_id,
                )
                raise
            except DatabaseError as exc:
                logger.exception('Storage failure while recording %s for product %s', transaction_type, product_id)
                raise StorageError() from exc

            logger.info(
                'InventoryTransaction %s %s qty=%s product=%s batch=%s stock=%s by=%s',
                transaction_type, entry.pk, quantity, product.pk, batch_id, new_stock, actor.pk,
            )
            return entry


class ReconciliationService:
    """Checks batch counters against the ledger. Read-only."""

    @staticmethod
    def ledger_balance(batch_id) -> int:
        """Signed sum of every ledger entry that references the batch."""
        result = InventoryTransaction.objects.filter(batch_id=batch_id).aggregate(
            in_sum=Sum('quantity', filter=Q(transaction_type__in=INBOUND_TYPES)),
            out_sum=Sum('quantity', filter=Q(transaction_type__in=OUTBOUND_TYPES)),
        )
        return (result['in_sum'] or 0) - (result['out_sum'] or 0)

    @staticmethod
    def find_discrepancies() -> list[dict]:
        """Batches whose current_stock differs from opening_stock + ledger balance."""
        batches = Batch.objects.annotate(
            in_sum=Coalesce(
                Sum('inventory_transactions__quantity',
                    filter=Q(inventory_transactions__transaction_type__in=INBOUND_TYPES)),
                Value(0), output_field=IntegerField(),
            ),
            out_sum=Coalesce(
                Sum('inventory_transactions__quantity',
                    filter=Q(inventory_transactions__transaction_type__in=OUTBOUND_TYPES)),
                Value(0), output_field=IntegerField(),
            ),
        ).order_by('pk')

        drifted = []
        for batch in batches:
            expected = batch.opening_stock + batch.in_sum - batch.out_sum
            if batch.current_stock != expected:
                drifted.append({
                    'batch_id': str(batch.pk),
                    'batch_number': batch.batch_number,
                    'current_stock': batch.current_stock,
                    'expected_stock': expected,
                    'drift': batch.current_stock - expected,
                })
        return drifted

"""
Tests — StockLedgerService.record_transaction and ReconciliationService.

Purchase/sale/adjustment deltas, insufficient stock on sale, field-level
validation, rollback of both writes on storage failure, conflict retry.

@file inventory/tests/test_services.py
"""

import uuid
from datetime import date, datetime
from unittest.mock import patch

import pytest
from django.db import DatabaseError

from catalog.models import Batch
from core.exceptions import ConflictError, FieldValidationError, InsufficientStockError, StorageError
from core.models import AuditLog
from core.services import AuditService
from inventory.models import InventoryTransaction
from inventory.queries import InventoryQueryService
from inventory.services import ReconciliationService, StockLedgerService
from inventory.stores import BatchStore
from tests.factories import BatchFactory, ProductFactory, UserFactory


pytestmark = pytest.mark.django_db

TX = InventoryTransaction.TransactionType


def _record(batch=None, product=None, actor=None, **overrides):
    product = product or (batch.product if batch else ProductFactory())
    actor = actor or UserFactory(role='warehouse')
    fields = {
        'transaction_type': TX.PURCHASE,
        'product_id': product.pk,
        'batch_id': batch.pk if batch else None,
        'quantity': 1,
        'transaction_date': date(2026, 3, 1),
        'actor_id': actor.pk,
    }
    fields.update(overrides)
    return StockLedgerService.record_transaction(**fields)


def _stock(batch) -> int:
    batch.refresh_from_db()
    return batch.current_stock


class TestRecordTransaction:

    def test_purchase_increases_batch_stock(self, batch):
        tx = _record(batch, transaction_type=TX.PURCHASE, quantity=5)
        assert _stock(batch) == 15
        assert tx.transaction_type == TX.PURCHASE
        assert tx.quantity == 5
        assert InventoryTransaction.objects.count() == 1

    def test_sale_decreases_batch_stock(self, batch):
        _record(batch, transaction_type=TX.SALE, quantity=4)
        assert _stock(batch) == 6

    def test_sale_down_to_zero_allowed(self, batch):
        _record(batch, transaction_type=TX.SALE, quantity=10)
        assert _stock(batch) == 0

    def test_adjustment_is_additive(self, batch):
        _record(batch, transaction_type=TX.ADJUSTMENT, quantity=4)
        assert _stock(batch) == 14

    def test_sale_exceeding_stock_rejected(self, batch):
        _record(batch, transaction_type=TX.PURCHASE, quantity=5)
        with pytest.raises(InsufficientStockError) as exc_info:
            _record(batch, transaction_type=TX.SALE, quantity=20)
        assert exc_info.value.available == 15
        assert exc_info.value.requested == 20
        assert 'quantity' in exc_info.value.detail
        assert _stock(batch) == 15
        assert InventoryTransaction.objects.count() == 1

    def test_adjustment_without_batch_leaves_batches_untouched(self, batch):
        with patch.object(BatchStore, 'conditional_adjust') as cas:
            tx = _record(product=batch.product, transaction_type=TX.ADJUSTMENT, quantity=3)
        cas.assert_not_called()
        assert tx.batch_id is None
        assert InventoryTransaction.objects.get(pk=tx.pk).batch is None
        assert _stock(batch) == 10

    def test_blank_optional_fields_stored_as_null(self, product):
        tx = _record(product=product, batch_id='', reference_number='', notes='  ')
        assert tx.batch_id is None
        assert tx.reference_number is None
        assert tx.notes is None

    def test_created_by_is_the_actor(self, batch):
        actor = UserFactory(role='warehouse')
        tx = _record(batch, actor=actor, reference_number='PO-002', notes='restock')
        tx.refresh_from_db()
        assert tx.created_by_id == actor.pk
        assert tx.reference_number == 'PO-002'
        assert tx.notes == 'restock'

    def test_datetime_transaction_date_is_truncated(self, product):
        tx = _record(product=product, transaction_date=datetime(2026, 3, 2, 15, 30))
        tx.refresh_from_db()
        assert tx.transaction_date == date(2026, 3, 2)

    def test_writes_audit_entry(self, batch):
        tx = _record(batch, quantity=2)
        log = AuditService.trail('InventoryTransaction', tx.pk).get()
        assert log.actor_id == tx.created_by_id
        assert log.new_values['stock_before'] == 10
        assert log.new_values['stock_after'] == 12


class TestValidation:

    @pytest.mark.parametrize('quantity', [0, -1, True, '5', 2.5, None])
    def test_quantity_must_be_positive_integer(self, batch, quantity):
        with pytest.raises(FieldValidationError) as exc_info:
            _record(batch, quantity=quantity)
        assert exc_info.value.field == 'quantity'
        assert InventoryTransaction.objects.count() == 0
        assert _stock(batch) == 10

    def test_unknown_transaction_type(self, batch):
        with pytest.raises(FieldValidationError) as exc_info:
            _record(batch, transaction_type='transfer')
        assert exc_info.value.field == 'transaction_type'

    def test_unknown_product(self):
        with pytest.raises(FieldValidationError) as exc_info:
            _record(product=ProductFactory(), product_id=uuid.uuid4())
        assert exc_info.value.field == 'product_id'

    def test_inactive_product(self):
        product = ProductFactory(is_active=False)
        with pytest.raises(FieldValidationError) as exc_info:
            _record(product=product)
        assert exc_info.value.field == 'product_id'

    def test_batch_of_another_product(self, batch):
        other = ProductFactory()
        with pytest.raises(FieldValidationError) as exc_info:
            _record(product=other, batch_id=batch.pk)
        assert exc_info.value.field == 'batch_id'
        assert _stock(batch) == 10

    def test_malformed_batch_id(self, product):
        with pytest.raises(FieldValidationError) as exc_info:
            _record(product=product, batch_id='not-a-uuid')
        assert exc_info.value.field == 'batch_id'

    def test_unknown_batch(self, product):
        with pytest.raises(FieldValidationError) as exc_info:
            _record(product=product, batch_id=uuid.uuid4())
        assert exc_info.value.field == 'batch_id'

    def test_inactive_actor(self, batch):
        with pytest.raises(FieldValidationError) as exc_info:
            _record(batch, actor=UserFactory(is_active=False))
        assert exc_info.value.field == 'actor_id'

    def test_missing_actor(self, batch):
        with pytest.raises(FieldValidationError) as exc_info:
            _record(batch, actor_id=None)
        assert exc_info.value.field == 'actor_id'

    def test_missing_transaction_date(self, batch):
        with pytest.raises(FieldValidationError) as exc_info:
            _record(batch, transaction_date=None)
        assert exc_info.value.field == 'transaction_date'

    def test_rejected_zero_quantity_leaves_empty_history(self, batch):
        _record(batch, transaction_type=TX.PURCHASE, quantity=5)
        with pytest.raises(FieldValidationError):
            _record(batch, quantity=0)
        history = list(InventoryQueryService.history())
        assert len(history) == 1
        assert history[0].quantity == 5


class TestAtomicity:

    def test_storage_failure_after_append_rolls_back_both(self, batch):
        audit_before = AuditLog.objects.count()
        with patch.object(BatchStore, 'conditional_adjust', side_effect=DatabaseError('simulated failure')):
            with pytest.raises(StorageError):
                _record(batch, quantity=5)
        assert InventoryTransaction.objects.count() == 0
        assert AuditLog.objects.count() == audit_before
        assert _stock(batch) == 10

    def test_storage_failure_on_append(self, batch):
        with patch('inventory.services.LedgerStore.append', side_effect=DatabaseError('disk full')):
            with pytest.raises(StorageError):
                _record(batch, transaction_type=TX.SALE, quantity=3)
        assert InventoryTransaction.objects.count() == 0
        assert _stock(batch) == 10

    def test_retry_after_storage_failure_succeeds(self, batch):
        with patch.object(BatchStore, 'conditional_adjust', side_effect=DatabaseError('blip')):
            with pytest.raises(StorageError):
                _record(batch, quantity=5)
        _record(batch, quantity=5)
        assert _stock(batch) == 15
        assert InventoryTransaction.objects.count() == 1


class TestConflictRetry:

    def test_conflict_is_retried_against_fresh_state(self, batch):
        original = BatchStore.conditional_adjust
        calls = []

        def lose_first_race(batch_id, delta, expected_current):
            calls.append(expected_current)
            if len(calls) == 1:
                raise ConflictError()
            return original(batch_id, delta, expected_current)

        with patch.object(BatchStore, 'conditional_adjust', side_effect=lose_first_race):
            _record(batch, transaction_type=TX.SALE, quantity=4)

        assert calls == [10, 10]
        assert _stock(batch) == 6
        assert InventoryTransaction.objects.count() == 1

    def test_conflict_raised_when_retries_exhausted(self, batch, settings):
        settings.INVENTORY = {'CONFLICT_RETRIES': 2}
        with patch.object(BatchStore, 'conditional_adjust', side_effect=ConflictError()) as cas:
            with pytest.raises(ConflictError):
                _record(batch, quantity=1)
        assert cas.call_count == 3
        assert InventoryTransaction.objects.count() == 0
        assert _stock(batch) == 10


class TestLedgerSumInvariant:

    def test_stock_equals_opening_plus_signed_deltas(self):
        batch = BatchFactory(current_stock=7)
        moves = [
            (TX.PURCHASE, 10), (TX.SALE, 3), (TX.ADJUSTMENT, 2),
            (TX.SALE, 16), (TX.PURCHASE, 1), (TX.SALE, 1),
        ]
        for tx_type, qty in moves:
            _record(batch, transaction_type=tx_type, quantity=qty)

        expected = 7 + sum(InventoryTransaction.signed_delta(t, q) for t, q in moves)
        assert _stock(batch) == expected == 0
        assert ReconciliationService.ledger_balance(batch.pk) == expected - 7
        assert ReconciliationService.find_discrepancies() == []

    def test_rejected_sale_does_not_break_invariant(self, batch):
        _record(batch, transaction_type=TX.SALE, quantity=6)
        with pytest.raises(InsufficientStockError):
            _record(batch, transaction_type=TX.SALE, quantity=5)
        assert _stock(batch) == 4
        assert ReconciliationService.find_discrepancies() == []

    def test_recorded_entries_never_change(self, batch):
        first = _record(batch, transaction_type=TX.PURCHASE, quantity=5, reference_number='PO-1')
        snapshot = InventoryTransaction.objects.filter(pk=first.pk).values().get()
        for _ in range(3):
            _record(batch, transaction_type=TX.SALE, quantity=2)
        assert InventoryTransaction.objects.filter(pk=first.pk).values().get() == snapshot


class TestReconciliation:

    def test_detects_counter_drift(self, batch):
        _record(batch, quantity=5)
        Batch.objects.filter(pk=batch.pk).update(current_stock=99)
        drifted = ReconciliationService.find_discrepancies()
        assert len(drifted) == 1
        assert drifted[0]['batch_id'] == str(batch.pk)
        assert drifted[0]['expected_stock'] == 15
        assert drifted[0]['drift'] == 84

    def test_ledger_balance_empty_is_zero(self, batch):
        assert ReconciliationService.ledger_balance(batch.pk) == 0

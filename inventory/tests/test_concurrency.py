"""
Tests — concurrent writers against one batch.

The threaded races need real row locks and separate connections, so they
only run against PostgreSQL (DATABASE_URL=postgres://...). The
interleaving tests run everywhere.

@file inventory/tests/test_concurrency.py
"""

from concurrent.futures import ThreadPoolExecutor
from datetime import date
from unittest.mock import patch

import pytest
from django.conf import settings
from django.db import connection

from catalog.models import Batch
from core.exceptions import ConflictError, InsufficientStockError
from inventory.models import InventoryTransaction
from inventory.services import ReconciliationService, StockLedgerService
from inventory.stores import BatchStore
from tests.factories import BatchFactory, UserFactory


TX = InventoryTransaction.TransactionType

requires_postgres = pytest.mark.skipif(
    'postgresql' not in settings.DATABASES['default']['ENGINE'],
    reason='row-lock races need PostgreSQL',
)


def _record_in_thread(batch, actor, tx_type, quantity):
    try:
        StockLedgerService.record_transaction(
            transaction_type=tx_type,
            product_id=batch.product_id,
            batch_id=batch.pk,
            quantity=quantity,
            transaction_date=date(2026, 3, 1),
            actor_id=actor.pk,
        )
        return 'ok'
    except InsufficientStockError:
        return 'insufficient'
    finally:
        connection.close()


@pytest.mark.django_db
def test_stale_snapshot_cannot_overwrite_newer_stock(batch):
    snapshot = BatchStore.get_current_stock(batch.pk)
    BatchStore.conditional_adjust(batch.pk, 5, snapshot)
    with pytest.raises(ConflictError):
        BatchStore.conditional_adjust(batch.pk, -2, snapshot)
    assert BatchStore.get_current_stock(batch.pk) == 15


def _record(batch, actor, tx_type, quantity):
    return StockLedgerService.record_transaction(
        transaction_type=tx_type,
        product_id=batch.product_id,
        batch_id=batch.pk,
        quantity=quantity,
        transaction_date=date(2026, 3, 1),
        actor_id=actor.pk,
    )


def _stale_first_lock(stale):
    """Hand out ``stale`` on the first lock, as if another writer committed right after our read."""
    original = BatchStore.lock
    calls = []

    def lock(batch_id):
        calls.append(batch_id)
        if len(calls) == 1:
            return stale
        return original(batch_id)

    return lock, calls


@pytest.mark.django_db
def test_writer_with_stale_read_retries_on_committed_purchase(batch):
    actor = UserFactory(role='warehouse')
    stale = Batch.objects.get(pk=batch.pk)
    _record(batch, actor, TX.PURCHASE, 3)

    lock, calls = _stale_first_lock(stale)
    with patch.object(BatchStore, 'lock', side_effect=lock):
        _record(batch, actor, TX.SALE, 4)

    assert len(calls) == 2
    batch.refresh_from_db()
    assert batch.current_stock == 10 + 3 - 4
    assert InventoryTransaction.objects.filter(batch=batch).count() == 2
    assert ReconciliationService.find_discrepancies() == []


@pytest.mark.django_db
def test_writer_with_stale_read_rechecks_stock_after_committed_sale(batch):
    actor = UserFactory(role='warehouse')
    stale = Batch.objects.get(pk=batch.pk)
    _record(batch, actor, TX.SALE, 8)

    lock, calls = _stale_first_lock(stale)
    with patch.object(BatchStore, 'lock', side_effect=lock):
        with pytest.raises(InsufficientStockError) as exc_info:
            _record(batch, actor, TX.SALE, 5)

    assert len(calls) == 2
    assert exc_info.value.available == 2
    batch.refresh_from_db()
    assert batch.current_stock == 2
    assert InventoryTransaction.objects.filter(batch=batch).count() == 1
    assert ReconciliationService.find_discrepancies() == []


@pytest.mark.postgres
@requires_postgres
@pytest.mark.django_db(transaction=True)
def test_mixed_writers_lose_no_updates():
    batch = BatchFactory(current_stock=50)
    actor = UserFactory(role='warehouse')
    jobs = [(TX.SALE, 1)] * 20 + [(TX.PURCHASE, 2)] * 20

    with ThreadPoolExecutor(max_workers=8) as pool:
        results = list(pool.map(lambda job: _record_in_thread(batch, actor, *job), jobs))

    assert results.count('ok') == 40
    batch.refresh_from_db()
    assert batch.current_stock == 50 - 20 + 40
    assert InventoryTransaction.objects.filter(batch=batch).count() == 40
    assert ReconciliationService.find_discrepancies() == []


@pytest.mark.postgres
@requires_postgres
@pytest.mark.django_db(transaction=True)
def test_last_unit_sold_once():
    batch = BatchFactory(current_stock=1)
    actor = UserFactory(role='warehouse')

    with ThreadPoolExecutor(max_workers=2) as pool:
        results = list(pool.map(lambda _: _record_in_thread(batch, actor, TX.SALE, 1), range(2)))

    assert sorted(results) == ['insufficient', 'ok']
    batch.refresh_from_db()
    assert batch.current_stock == 0
    assert InventoryTransaction.objects.filter(batch=batch).count() == 1

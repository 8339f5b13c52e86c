"""
Inventory — Query / Reporting Facade

Read-only projections over the ledger and batch counters. Nothing here
writes; every call observes committed state only.

@file inventory/queries.py
"""

from collections import Counter
from collections.abc import Iterable

from django.db.models import Count, QuerySet

from catalog.models import Batch, Product

from .models import InventoryTransaction
from .stores import LedgerStore

SUMMARY_KEYS = {
    InventoryTransaction.TransactionType.PURCHASE.value: 'purchases',
    InventoryTransaction.TransactionType.SALE.value: 'sales',
    InventoryTransaction.TransactionType.ADJUSTMENT.value: 'adjustments',
}


class InventoryQueryService:

    @staticmethod
    def history(filters: dict | None = None) -> QuerySet:
        """
        Ledger entries, newest transaction_date first, then newest insert.

        Product, batch and creator are joined in so callers can read
        product_name, product_code, batch_number and the creator's name
        without extra queries.
        """
        return LedgerStore.list(filters).select_related('product', 'batch', 'created_by')

    @staticmethod
    def available_batches_for(product_id) -> QuerySet:
        """Active batches of ``product_id`` with stock on hand, most recently stocked first."""
        return Batch.objects.filter(
            product_id=product_id,
            is_active=True,
            current_stock__gt=0,
        ).order_by('-import_date', '-created_at')

    @staticmethod
    def active_products() -> QuerySet:
        return Product.objects.filter(is_active=True).order_by('product_name')

    @staticmethod
    def summary(transactions: Iterable[InventoryTransaction]) -> dict[str, int]:
        """Counts by transaction type over exactly the entries passed in."""
        if isinstance(transactions, QuerySet):
            rows = (
                transactions.order_by()
                .values('transaction_type')
                .annotate(n=Count('pk'))
            )
            counts = Counter({row['transaction_type']: row['n'] for row in rows})
        else:
            counts = Counter(tx.transaction_type for tx in transactions)

        result = {'total': sum(counts.values())}
        for tx_type, key in SUMMARY_KEYS.items():
            result[key] = counts.get(tx_type, 0)
        return result

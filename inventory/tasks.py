"""
Inventory — Celery Tasks

Periodic ledger/batch reconciliation.

@file inventory/tasks.py
"""

import logging

from celery import shared_task

from core.constants import LOGGER_NAME

logger = logging.getLogger(LOGGER_NAME)


@shared_task(name='inventory.verify_batch_balances')
def verify_batch_balances_task():
    """
    Compare every batch's current_stock with opening_stock plus its ledger
    balance and log each drift. Reports only; stock is never rewritten here.
    """
    from .services import ReconciliationService

    drifted = ReconciliationService.find_discrepancies()
    for row in drifted:
        logger.warning(
            'Batch %s (%s) drift: current_stock=%s expected=%s',
            row['batch_number'], row['batch_id'], row['current_stock'], row['expected_stock'],
        )
    logger.info('verify_batch_balances_task completed: %d drifted batches.', len(drifted))
    return {'drifted_count': len(drifted), 'drifted': drifted}

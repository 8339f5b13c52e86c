"""
Core — Constants

Shared literals used across apps: audit actions, pagination caps and
the project logger name.

@file core/constants.py
"""

LOGGER_NAME = 'stockledger'

AUDIT_ACTION_CREATE = 'CREATE'

DEFAULT_PAGE_SIZE = 25
MAX_PAGE_SIZE = 200

# Retries of a whole ledger commit after a lost compare-and-swap.
DEFAULT_CONFLICT_RETRIES = 3

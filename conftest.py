"""
StockLedger — Root conftest for pytest

Shared fixtures available to all test modules.

@file conftest.py
"""

import pytest
from rest_framework.test import APIClient

from tests.factories import BatchFactory, ProductFactory, SuperuserFactory, UserFactory


@pytest.fixture
def api_client():
    """Unauthenticated DRF test client."""
    return APIClient()


@pytest.fixture
def user(db):
    """Read-only viewer."""
    return UserFactory()


@pytest.fixture
def warehouse_user(db):
    """User allowed to record stock movements."""
    return UserFactory(role='warehouse')


@pytest.fixture
def admin_user(db):
    """Superuser with default password TestPass2026!"""
    return SuperuserFactory()


@pytest.fixture
def authenticated_client(api_client, user):
    """API client authenticated as a viewer."""
    api_client.force_authenticate(user=user)
    return api_client


@pytest.fixture
def warehouse_client(api_client, warehouse_user):
    """API client authenticated as warehouse staff."""
    api_client.force_authenticate(user=warehouse_user)
    return api_client


@pytest.fixture
def product(db):
    return ProductFactory()


@pytest.fixture
def batch(product):
    """Batch B1 of ``product`` holding 10 units."""
    return BatchFactory(product=product, batch_number='B1', current_stock=10)

"""
Catalog — View Tests

Product listing and the available-batches picker.

@file catalog/tests/test_views.py
"""

import pytest
from django.urls import reverse

from tests.factories import BatchFactory, ProductFactory


@pytest.mark.django_db
class TestProductEndpoints:
    def test_requires_authentication(self, api_client):
        resp = api_client.get(reverse('api-v1:catalog:product-list'))
        assert resp.status_code == 401

    def test_lists_active_products_only(self, authenticated_client):
        active = ProductFactory(product_name='Aspirin')
        ProductFactory(product_name='Discontinued', is_active=False)
        resp = authenticated_client.get(reverse('api-v1:catalog:product-list'))
        assert resp.status_code == 200
        assert [row['id'] for row in resp.data['results']] == [str(active.pk)]

    def test_available_batches(self, authenticated_client, batch):
        BatchFactory(product=batch.product, current_stock=0)
        url = reverse('api-v1:catalog:product-available-batches', args=[batch.product.pk])
        resp = authenticated_client.get(url)
        assert resp.status_code == 200
        assert [row['batch_number'] for row in resp.data['data']] == ['B1']
        assert resp.data['data'][0]['current_stock'] == 10

    def test_available_batches_inactive_product_is_404(self, authenticated_client):
        product = ProductFactory(is_active=False)
        BatchFactory(product=product, current_stock=5)
        url = reverse('api-v1:catalog:product-available-batches', args=[product.pk])
        assert authenticated_client.get(url).status_code == 404

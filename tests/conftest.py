from decimal import Decimal

import pytest
from django.contrib.auth import get_user_model
from django.core.cache import cache
from rest_framework.test import APIClient

from modules.products.models import Product

User = get_user_model()


@pytest.fixture(autouse=True)
def _use_db(db):
    """Automatically use the test database for all tests."""


@pytest.fixture(autouse=True)
def _reset_throttles():
    """Throttle counters live in the cache; start every test from zero."""
    cache.clear()
    yield
    cache.clear()


@pytest.fixture()
def api_client():
    """DRF APIClient for testing API endpoints."""
    return APIClient()


@pytest.fixture()
def api_client_with_correlation(api_client):
    """APIClient pre-configured with a known correlation ID header."""
    cid = "test-correlation-id-fixture"
    api_client.defaults["HTTP_X_REQUEST_ID"] = cid
    return api_client, cid


@pytest.fixture()
def owner():
    return User.objects.create_user(username="owner", password="testpass123")


@pytest.fixture()
def other_owner():
    return User.objects.create_user(username="intruder", password="testpass123")


@pytest.fixture()
def auth_client(owner):
    """APIClient force-authenticated as ``owner``."""
    client = APIClient()
    client.force_authenticate(user=owner)
    return client


@pytest.fixture()
def make_product(owner):
    """Factory for catalog rows; defaults to ``owner``'s catalog."""
    counter = {"n": 0}

    def _make(
        code=None,
        name=None,
        price="10.00",
        stock=10,
        owner_id=None,
    ) -> Product:
        counter["n"] += 1
        return Product.objects.create(
            owner_id=owner_id or owner.pk,
            code=code or f"P-{counter['n']:03d}",
            name=name or f"Product {counter['n']}",
            price=Decimal(price),
            stock=stock,
        )

    return _make

"""Integration tests for filtering, search, ordering, and pagination."""

from __future__ import annotations

from datetime import timedelta
from decimal import Decimal

import pytest
from django.utils import timezone
from freezegun import freeze_time

from modules.orders.models import Order

pytestmark = pytest.mark.integration


@pytest.fixture()
def product_batch(make_product):
    cheap = make_product(code="SKU-CHEAP", name="Cheap Widget", price="9.99", stock=10)
    premium = make_product(
        code="SKU-PREMIUM", name="Premium Widget", price="199.99", stock=5
    )
    empty = make_product(code="SKU-EMPTY", name="Sold Out Gizmo", price="49.00", stock=0)
    return cheap, premium, empty


@pytest.fixture()
def order_batch(owner, other_owner):
    with freeze_time(timezone.now() - timedelta(days=2)):
        old_order = Order.objects.create(
            owner=owner, status="pending", total_amount=Decimal("50.00")
        )
    recent_order = Order.objects.create(
        owner=owner, status="confirmed", total_amount=Decimal("150.00")
    )
    Order.objects.create(
        owner=other_owner, status="pending", total_amount=Decimal("75.00")
    )
    return old_order, recent_order


class TestProductFiltering:
    def test_filter_price_range(self, auth_client, product_batch):
        response = auth_client.get("/api/v1/products/?min_price=100&max_price=200")
        assert response.status_code == 200
        assert [p["code"] for p in response.data["results"]] == ["SKU-PREMIUM"]

    def test_filter_by_name(self, auth_client, product_batch):
        response = auth_client.get("/api/v1/products/?name=widget")
        assert response.data["count"] == 2

    def test_filter_by_code(self, auth_client, product_batch):
        response = auth_client.get("/api/v1/products/?code=sku-cheap")
        assert [p["name"] for p in response.data["results"]] == ["Cheap Widget"]

    def test_filter_in_stock(self, auth_client, product_batch):
        in_stock = auth_client.get("/api/v1/products/?in_stock=true")
        sold_out = auth_client.get("/api/v1/products/?in_stock=false")

        assert in_stock.data["count"] == 2
        assert [p["code"] for p in sold_out.data["results"]] == ["SKU-EMPTY"]

    def test_search_product(self, auth_client, product_batch):
        response = auth_client.get("/api/v1/products/?search=Premium")
        assert response.status_code == 200
        assert len(response.data["results"]) == 1

    def test_ordering_products(self, auth_client, product_batch):
        response = auth_client.get("/api/v1/products/?ordering=-price")
        prices = [Decimal(item["price"]) for item in response.data["results"]]
        assert prices == sorted(prices, reverse=True)


class TestOrderFiltering:
    def test_filter_by_status(self, auth_client, order_batch):
        response = auth_client.get("/api/v1/orders/?status=pending")
        assert response.status_code == 200
        assert [o["id"] for o in response.data["results"]] == [str(order_batch[0].id)]

    def test_unknown_status_filter(self, auth_client, order_batch):
        response = auth_client.get("/api/v1/orders/?status=archived")
        assert response.status_code == 400

    def test_filter_date_range(self, auth_client, order_batch):
        start_date = (timezone.now() - timedelta(days=1)).date().isoformat()
        response = auth_client.get(f"/api/v1/orders/?start_date={start_date}")
        assert [o["id"] for o in response.data["results"]] == [str(order_batch[1].id)]

    def test_filter_total_range(self, auth_client, order_batch):
        response = auth_client.get("/api/v1/orders/?min_total=100&max_total=200")
        assert response.data["count"] == 1

    def test_ordering_orders(self, auth_client, order_batch):
        response = auth_client.get("/api/v1/orders/?ordering=total_amount")
        totals = [Decimal(item["total_amount"]) for item in response.data["results"]]
        assert totals == [Decimal("50.00"), Decimal("150.00")]

    def test_default_ordering_is_newest_first(self, auth_client, order_batch):
        response = auth_client.get("/api/v1/orders/")
        ids = [o["id"] for o in response.data["results"]]
        assert ids == [str(order_batch[1].id), str(order_batch[0].id)]


class TestCombinedQuery:
    def test_combined_filters_pagination(self, auth_client, product_batch):
        response = auth_client.get(
            "/api/v1/products/?search=widget&ordering=price&page_size=1"
        )
        assert response.status_code == 200
        assert [p["code"] for p in response.data["results"]] == ["SKU-CHEAP"]
        assert response.data["next"] is not None

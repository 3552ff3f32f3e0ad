"""Unit tests for order serializers."""

from __future__ import annotations

from decimal import Decimal
from uuid import uuid4

import pytest

from modules.orders.models import Order, OrderItem
from modules.orders.serializers import (
    CreateOrderSerializer,
    OrderListSerializer,
    OrderSerializer,
    UpdateOrderStatusSerializer,
)

pytestmark = pytest.mark.unit


@pytest.fixture()
def order(owner, make_product):
    order = Order.objects.create(owner=owner, total_amount=Decimal("25.00"))
    OrderItem.objects.create(
        order=order,
        product=make_product(code="SER-1", name="Serialized"),
        quantity=5,
        unit_price=Decimal("5.00"),
    )
    return order


class TestCreateOrderSerializer:
    def test_valid_payload(self):
        pid = uuid4()
        serializer = CreateOrderSerializer(
            data={"items": [{"product_id": str(pid), "quantity": 2}]}
        )

        assert serializer.is_valid(), serializer.errors
        assert serializer.validated_data["items"][0]["product_id"] == pid

    def test_empty_list_passes_through(self):
        serializer = CreateOrderSerializer(data={"items": []})
        assert serializer.is_valid(), serializer.errors

    def test_missing_items(self):
        serializer = CreateOrderSerializer(data={})
        assert not serializer.is_valid()
        assert "items" in serializer.errors

    def test_bad_product_id(self):
        serializer = CreateOrderSerializer(
            data={"items": [{"product_id": "x", "quantity": 1}]}
        )
        assert not serializer.is_valid()

    def test_negative_quantity_left_to_service(self):
        serializer = CreateOrderSerializer(
            data={"items": [{"product_id": str(uuid4()), "quantity": -3}]}
        )
        assert serializer.is_valid(), serializer.errors


class TestUpdateOrderStatusSerializer:
    def test_requires_status(self):
        assert not UpdateOrderStatusSerializer(data={}).is_valid()

    def test_any_string_passes_through(self):
        serializer = UpdateOrderStatusSerializer(data={"status": "archived"})
        assert serializer.is_valid()


class TestOrderSerializer:
    def test_nested_items_with_product_summary(self, order):
        data = OrderSerializer(order).data

        assert data["status"] == "pending"
        assert data["total_amount"] == "25.00"
        item = data["items"][0]
        assert item["quantity"] == 5
        assert item["unit_price"] == "5.00"
        assert item["subtotal"] == "25.00"
        assert item["product"]["code"] == "SER-1"
        assert str(item["product_id"]) == str(item["product"]["id"])

    def test_owner_is_not_exposed(self, order):
        assert "owner" not in OrderSerializer(order).data


class TestOrderListSerializer:
    def test_item_count(self, order):
        data = OrderListSerializer(order).data

        assert data["item_count"] == 1
        assert "items" not in data

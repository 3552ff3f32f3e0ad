"""Unit tests for Order and OrderItem models."""

from __future__ import annotations

from decimal import Decimal

import pytest
from django.core.exceptions import ValidationError
from django.db import IntegrityError, transaction
from django.db.models.deletion import ProtectedError

from modules.orders.constants import OrderStatus
from modules.orders.models import Order, OrderItem

pytestmark = pytest.mark.unit


def _make_order(owner, **kwargs):
    return Order.objects.create(owner=owner, **kwargs)


class TestOrderDefaults:
    def test_starts_pending_with_zero_total(self, owner):
        order = _make_order(owner)

        assert order.status == OrderStatus.PENDING
        assert order.total_amount == Decimal("0.00")

    def test_primary_key_is_uuid7(self, owner):
        assert _make_order(owner).id.version == 7

    def test_str(self, owner):
        order = _make_order(owner)
        assert str(order) == f"Order {order.id} (pending)"


class TestOrderStateHelpers:
    @pytest.mark.parametrize(
        "status,terminal",
        [
            (OrderStatus.PENDING, False),
            (OrderStatus.CONFIRMED, False),
            (OrderStatus.SHIPPED, False),
            (OrderStatus.DELIVERED, True),
            (OrderStatus.CANCELLED, True),
        ],
    )
    def test_is_terminal(self, owner, status, terminal):
        assert _make_order(owner, status=status).is_terminal is terminal

    def test_can_transition_to(self, owner):
        order = _make_order(owner)

        assert order.can_transition_to(OrderStatus.CONFIRMED)
        assert not order.can_transition_to(OrderStatus.DELIVERED)


class TestOrderItem:
    def test_subtotal_is_quantity_times_unit_price(self, owner, make_product):
        order = _make_order(owner)
        item = OrderItem.objects.create(
            order=order,
            product=make_product(),
            quantity=3,
            unit_price=Decimal("2.50"),
        )

        assert item.subtotal == Decimal("7.50")

    def test_unit_price_is_required(self, owner, make_product):
        order = _make_order(owner)
        product = make_product(price="12.34")

        with pytest.raises(ValidationError) as exc_info:
            OrderItem.objects.create(order=order, product=product, quantity=2)

        assert "unit_price" in exc_info.value.message_dict
        assert OrderItem.objects.count() == 0

    def test_computed_total(self, owner, make_product):
        order = _make_order(owner)
        OrderItem.objects.create(
            order=order, product=make_product(), quantity=1, unit_price=Decimal("1.10")
        )
        OrderItem.objects.create(
            order=order, product=make_product(), quantity=2, unit_price=Decimal("2.00")
        )

        assert order.computed_total() == Decimal("5.10")

    def test_zero_quantity_violates_constraint(self, owner, make_product):
        order = _make_order(owner)

        with pytest.raises(IntegrityError):
            with transaction.atomic():
                OrderItem.objects.create(
                    order=order,
                    product=make_product(),
                    quantity=0,
                    unit_price=Decimal("1.00"),
                )

    def test_items_cascade_with_order(self, owner, make_product):
        order = _make_order(owner)
        OrderItem.objects.create(
            order=order, product=make_product(), quantity=1, unit_price=Decimal("1.00")
        )

        order.delete()

        assert OrderItem.objects.count() == 0

    def test_product_with_order_history_cannot_be_hard_deleted(
        self, owner, make_product
    ):
        product = make_product()
        OrderItem.objects.create(
            order=_make_order(owner), product=product, quantity=1, unit_price=product.price
        )

        with pytest.raises(ProtectedError):
            product.hard_delete()

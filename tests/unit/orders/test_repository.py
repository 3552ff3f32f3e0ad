"""Unit tests for OrderDjangoRepository."""

from __future__ import annotations

from decimal import Decimal
from uuid import uuid4

import pytest

from modules.orders.constants import OrderStatus
from modules.orders.models import Order, OrderItem
from modules.orders.repositories.django_repository import OrderDjangoRepository

pytestmark = pytest.mark.unit


@pytest.fixture()
def repo():
    return OrderDjangoRepository()


@pytest.fixture()
def order_data(owner, make_product):
    a = make_product(price="10.00")
    b = make_product(price="20.00")
    return {
        "owner_id": owner.pk,
        "status": OrderStatus.PENDING,
        "total_amount": Decimal("40.00"),
        "items": [
            {
                "product_id": a.id,
                "quantity": 2,
                "unit_price": Decimal("10.00"),
                "subtotal": Decimal("20.00"),
            },
            {
                "product_id": b.id,
                "quantity": 1,
                "unit_price": Decimal("20.00"),
                "subtotal": Decimal("20.00"),
            },
        ],
    }


class TestCreate:
    def test_persists_order_and_items(self, repo, order_data):
        order = repo.create(order_data)

        assert Order.objects.filter(id=order.id).exists()
        assert OrderItem.objects.filter(order=order).count() == 2
        assert order.total_amount == Decimal("40.00")

    def test_positions_follow_input_order(self, repo, order_data):
        order = repo.create(order_data)

        positions = list(
            OrderItem.objects.filter(order=order)
            .order_by("position")
            .values_list("product_id", flat=True)
        )
        assert positions == [line["product_id"] for line in order_data["items"]]

    def test_total_is_recomputed_from_items(self, repo, order_data):
        order_data["total_amount"] = Decimal("1.00")

        order = repo.create(order_data)

        order.refresh_from_db()
        assert order.total_amount == Decimal("40.00")


class TestRead:
    def test_get_by_id_prefetches_items_and_products(
        self, repo, order_data, owner, django_assert_num_queries
    ):
        created = repo.create(order_data)

        with django_assert_num_queries(3):
            order = repo.get_by_id(created.id, owner.pk)
            names = [item.product.name for item in order.items.all()]

        assert len(names) == 2

    def test_get_by_id_scoped_by_owner(self, repo, order_data, other_owner):
        created = repo.create(order_data)
        assert repo.get_by_id(created.id, other_owner.pk) is None

    @pytest.mark.parametrize("bad_id", ["not-a-uuid", "123"])
    def test_invalid_ids_return_none(self, repo, owner, bad_id):
        assert repo.get_by_id(bad_id, owner.pk) is None
        assert repo.get_for_update(bad_id, owner.pk) is None

    def test_missing_id_returns_none(self, repo, owner):
        assert repo.get_by_id(uuid4(), owner.pk) is None

    def test_list_newest_first(self, repo, order_data, owner):
        first = repo.create(order_data)
        second = repo.create(order_data)

        assert [o.id for o in repo.list(owner.pk)] == [second.id, first.id]

    def test_list_with_filters(self, repo, order_data, owner):
        order = repo.create(order_data)
        repo.create({**order_data, "status": OrderStatus.CANCELLED})

        pending = list(repo.list(owner.pk, {"status": OrderStatus.PENDING}))
        assert [o.id for o in pending] == [order.id]


class TestWrite:
    def test_save_update_fields(self, repo, order_data, owner):
        order = repo.create(order_data)
        order.status = OrderStatus.CONFIRMED

        repo.save(order, update_fields=["status"])

        assert repo.get_by_id(order.id, owner.pk).status == OrderStatus.CONFIRMED

    def test_delete_is_physical(self, repo, order_data, owner):
        order = repo.create(order_data)

        assert repo.delete(order.id, owner.pk) is True
        assert not Order.objects.filter(id=order.id).exists()
        assert not OrderItem.objects.filter(order_id=order.id).exists()

    def test_delete_foreign_order_is_refused(self, repo, order_data, other_owner):
        order = repo.create(order_data)

        assert repo.delete(order.id, other_owner.pk) is False
        assert Order.objects.filter(id=order.id).exists()

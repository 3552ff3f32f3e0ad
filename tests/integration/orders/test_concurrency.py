"""Stock concurrency integration tests.

Shows that the row locks taken by ``OrderService`` serialise competing
transactions on the same product or order.

Scenarios:
- A product with **stock = 5** and 10 threads buying 1 unit each.
  Exactly 5 succeed, 5 raise ``InsufficientStock`` and the final stock is 0.
- Two threads cancelling the same order at once. One wins, the other
  gets ``OrderAlreadyCancelled`` and the stock is released only once.

Uses ``TransactionTestCase`` so each thread sees committed data. Skipped
on backends without ``SELECT ... FOR UPDATE`` (SQLite).
"""

from __future__ import annotations

import threading
from concurrent.futures import ThreadPoolExecutor, as_completed
from decimal import Decimal

import pytest
import structlog
from django.contrib.auth import get_user_model
from django.db import connections
from django.test import TransactionTestCase, skipUnlessDBFeature

from modules.orders.dtos import CreateOrderDTO, CreateOrderItemDTO
from modules.orders.exceptions import InsufficientStock, OrderAlreadyCancelled
from modules.orders.models import Order
from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.orders.services import OrderService
from modules.products.models import Product
from modules.products.repositories.django_repository import ProductDjangoRepository

pytestmark = pytest.mark.integration

logger = structlog.get_logger(__name__)

INITIAL_STOCK = 5
NUM_WORKERS = 10


def _service() -> OrderService:
    return OrderService(
        order_repository=OrderDjangoRepository(),
        product_repository=ProductDjangoRepository(),
    )


@skipUnlessDBFeature("has_select_for_update")
class TestStockConcurrency(TransactionTestCase):
    """Atomic stock reservation and release under concurrent load."""

    def setUp(self):
        self.owner = get_user_model().objects.create_user(
            username="concurrency", password="testpass123"
        )
        self.product = Product.objects.create(
            owner=self.owner,
            code="GAMER-PC",
            name="Gamer PC",
            price=Decimal("2999.99"),
            stock=INITIAL_STOCK,
        )

    def _create_order_in_thread(self, thread_id: int) -> str:
        """Attempt a one-unit order. Returns 'success' or 'insufficient'."""
        dto = CreateOrderDTO(
            items=[CreateOrderItemDTO(product_id=self.product.id, quantity=1)]
        )
        try:
            _service().create_order(self.owner.pk, dto)
            logger.info("concurrency.order_created", thread_id=thread_id)
            return "success"
        except InsufficientStock:
            logger.info("concurrency.insufficient_stock", thread_id=thread_id)
            return "insufficient"
        finally:
            connections.close_all()

    def _run_buyers(self) -> list[str]:
        results = []
        with ThreadPoolExecutor(max_workers=NUM_WORKERS) as pool:
            futures = {
                pool.submit(self._create_order_in_thread, i): i
                for i in range(NUM_WORKERS)
            }
            for future in as_completed(futures):
                results.append(future.result())
        return results

    def test_concurrent_orders_exhaust_stock(self):
        """10 threads buy 1 unit from stock=5: exactly 5 succeed."""
        results = self._run_buyers()

        self.assertEqual(results.count("success"), INITIAL_STOCK)
        self.assertEqual(results.count("insufficient"), NUM_WORKERS - INITIAL_STOCK)

        self.product.refresh_from_db()
        self.assertEqual(self.product.stock, 0)
        self.assertEqual(Order.objects.count(), INITIAL_STOCK)

    def test_stock_is_conserved(self):
        """Initial stock always equals units sold plus units remaining."""
        results = self._run_buyers()

        self.product.refresh_from_db()
        self.assertGreaterEqual(self.product.stock, 0)
        self.assertEqual(
            INITIAL_STOCK, results.count("success") + self.product.stock
        )

    def test_parallel_cancel_releases_stock_once(self):
        dto = CreateOrderDTO(
            items=[CreateOrderItemDTO(product_id=self.product.id, quantity=2)]
        )
        order = _service().create_order(self.owner.pk, dto)
        self.product.refresh_from_db()
        self.assertEqual(self.product.stock, INITIAL_STOCK - 2)

        barrier = threading.Barrier(2)

        def cancel() -> str:
            barrier.wait()
            try:
                _service().cancel_order(order.id, self.owner.pk)
                return "cancelled"
            except OrderAlreadyCancelled:
                return "already"
            finally:
                connections.close_all()

        with ThreadPoolExecutor(max_workers=2) as pool:
            futures = [pool.submit(cancel) for _ in range(2)]
            results = sorted(f.result() for f in futures)

        self.assertEqual(results, ["already", "cancelled"])
        self.product.refresh_from_db()
        self.assertEqual(self.product.stock, INITIAL_STOCK)

"""Django ORM implementation of the Order repository.

Satisfies ``IOrderRepository`` using Django's QuerySet API.
``create`` is wrapped in ``transaction.atomic()`` so the Order
aggregate (Order + OrderItems) is persisted as one unit.

Concurrency control on status changes uses ``select_for_update()``
(no ``version`` field exists on the model).
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any, Dict, Optional

import structlog
from django.core.exceptions import ValidationError
from django.db import models, transaction

from modules.orders.models import Order, OrderItem
from modules.orders.repositories.interfaces import IOrderRepository

logger = structlog.get_logger(__name__)


class OrderDjangoRepository(IOrderRepository):
    """Concrete Order repository backed by Django ORM."""

    @staticmethod
    def _scoped(owner_id: Any) -> models.QuerySet:
        return Order.objects.filter(owner_id=owner_id)

    # ------------------------------------------------------------------
    # Create (aggregate root + children)
    # ------------------------------------------------------------------

    @transaction.atomic
    def create(self, data: Dict[str, Any]) -> Order:
        """Create an order with its items atomically.

        Item subtotals are recomputed by ``OrderItem.save``; the stored
        total is the sum of what was actually persisted.
        """
        order = Order(
            owner_id=data["owner_id"],
            status=data["status"],
            total_amount=data.get("total_amount", Decimal("0.00")),
        )
        order.save()

        total = Decimal("0.00")
        items = data.get("items", [])
        for position, item_data in enumerate(items):
            item = OrderItem(
                order=order,
                product_id=item_data["product_id"],
                position=position,
                quantity=item_data["quantity"],
                unit_price=item_data["unit_price"],
            )
            item.save()
            total += item.subtotal

        if total != order.total_amount:
            order.total_amount = total
            order.save(update_fields=["total_amount"])

        logger.info(
            "order.persisted",
            order_id=str(order.id),
            item_count=len(items),
            total_amount=str(order.total_amount),
        )
        return order

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def get_by_id(self, id: Any, owner_id: Any) -> Optional[Order]:
        """Retrieve an order with eager-loaded items and products.

        Returns ``None`` for non-existent, foreign or invalid IDs.
        """
        try:
            return (
                self._scoped(owner_id)
                .prefetch_related("items__product")
                .filter(id=id)
                .first()
            )
        except (ValueError, ValidationError):
            return None

    def get_for_update(self, id: Any, owner_id: Any) -> Optional[Order]:
        """Retrieve an order with a row-level lock (SELECT FOR UPDATE).

        Eager-loads items so the caller can iterate over them while the
        row is locked.
        """
        try:
            return (
                self._scoped(owner_id)
                .select_for_update()
                .prefetch_related("items")
                .filter(id=id)
                .first()
            )
        except (ValueError, ValidationError):
            return None

    def list(
        self, owner_id: Any, filters: Optional[Dict[str, Any]] = None
    ) -> models.QuerySet:
        """List the owner's orders, newest first, with items prefetched.

        Supported filter keys are plain ORM look-ups, e.g. ``status``
        or ``created_at__gte``.
        """
        queryset = (
            self._scoped(owner_id)
            .prefetch_related("items__product")
            .order_by("-created_at", "-id")
        )
        if filters:
            queryset = queryset.filter(**filters)
        return queryset

    # ------------------------------------------------------------------
    # Save / Delete (IRepository contract)
    # ------------------------------------------------------------------

    @transaction.atomic
    def save(self, entity: Order, update_fields: Optional[list[str]] = None) -> Order:
        """Persist (create or update) an order row (items are immutable)."""
        if update_fields:
            entity.save(update_fields=update_fields)
        else:
            entity.save()
        logger.info("order.saved", order_id=str(entity.id), status=entity.status)
        return entity

    @transaction.atomic
    def delete(self, id: Any, owner_id: Any) -> bool:
        """Permanently delete an order; its items cascade."""
        try:
            deleted, _ = self._scoped(owner_id).filter(id=id).delete()
        except (ValueError, ValidationError):
            return False
        if not deleted:
            return False
        logger.info("order.deleted", order_id=str(id))
        return True

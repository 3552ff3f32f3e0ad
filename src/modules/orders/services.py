"""Order service layer (Use Cases).

Orchestrates the order lifecycle against the owner's catalog:
creation with stock reservation, status transitions, cancellation
with stock release, and deletion.  All write operations are atomic:
the service defines the unit-of-work boundary.

Business rules enforced:
- An order needs at least one line; each quantity must be positive.
- Products are resolved within the owner's catalog only.
- Stock is reserved per line and can never go negative.
- Unit prices are snapshotted at creation time.
- Status transitions follow ``VALID_TRANSITIONS``.
- Cancelling a pending/confirmed order returns its stock (best effort).
- Only cancelled orders can be deleted.
"""

from __future__ import annotations

from decimal import Decimal
from typing import TYPE_CHECKING, Any, Dict, Optional

import structlog
from django.db import models, transaction

from modules.orders.constants import MAX_ORDER_AMOUNT, RESTOCKABLE_STATES, OrderStatus
from modules.orders.events import OrderCancelled, OrderCreated, OrderStatusChanged
from modules.orders.exceptions import (
    DeliveredOrderImmutable,
    EmptyOrder,
    InsufficientStock,
    InvalidOrderStatus,
    InvalidQuantity,
    OrderAlreadyCancelled,
    OrderAmountTooLarge,
    OrderNotDeletable,
    OrderNotFound,
    UnknownOrderStatus,
)
from modules.products.exceptions import ProductNotFound

if TYPE_CHECKING:
    from modules.orders.dtos import CreateOrderDTO
    from modules.orders.models import Order
    from modules.orders.repositories.interfaces import IOrderRepository
    from modules.products.repositories.interfaces import IProductRepository
    from shared.domain.bus import IEventBus
    from shared.domain.events import DomainEvent

logger = structlog.get_logger(__name__)


class OrderService:
    """Application service for Order use-cases.

    Receives repositories (and optionally the event bus) via
    constructor injection.  Holds no state between calls.
    """

    def __init__(
        self,
        order_repository: IOrderRepository,
        product_repository: IProductRepository,
        event_bus: Optional[IEventBus] = None,
    ) -> None:
        if event_bus is None:
            from shared.infrastructure.bus import event_bus as default_bus

            event_bus = default_bus
        self._order_repo = order_repository
        self._product_repo = product_repository
        self._event_bus = event_bus

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    @transaction.atomic
    def create_order(self, owner_id: Any, dto: CreateOrderDTO) -> Order:
        """Create a pending order, reserving stock line by line.

        Steps:
        1. Reject an empty order before touching storage.
        2. Lock every referenced product (sorted by PK to avoid deadlocks).
        3. For each line, in request order:
           - validate the quantity;
           - resolve the product in the owner's catalog;
           - validate sufficient stock;
           - snapshot the price and deduct stock (persisted immediately).
        4. Persist order + items and re-read them with products resolved.

        A failure on any line rolls back the stock already deducted for
        earlier lines.

        Raises:
            EmptyOrder: no lines were given.
            InvalidQuantity: a line quantity is zero or negative.
            ProductNotFound: a product is absent or owned by someone else.
            InsufficientStock: a product has less stock than requested.
            OrderAmountTooLarge: a subtotal or the total cannot be stored.
        """
        log = logger.bind(owner_id=owner_id)

        if not dto.items:
            log.info("order.rejected_empty")
            raise EmptyOrder()

        products = self._product_repo.lock_many(
            [line.product_id for line in dto.items], owner_id
        )

        repo_items = []
        total = Decimal("0.00")
        for line in dto.items:
            if line.quantity <= 0:
                raise InvalidQuantity()

            product = products.get(str(line.product_id))
            if product is None:
                log.info("order.product_missing", product_id=str(line.product_id))
                raise ProductNotFound()

            if product.stock < line.quantity:
                log.warning(
                    "order.insufficient_stock",
                    product_id=str(product.id),
                    requested=line.quantity,
                    available=product.stock,
                )
                raise InsufficientStock(product.name)

            unit_price = product.price
            subtotal = unit_price * line.quantity
            if total + subtotal > MAX_ORDER_AMOUNT:
                log.warning(
                    "order.amount_too_large",
                    product_id=str(product.id),
                    quantity=line.quantity,
                    unit_price=str(unit_price),
                )
                raise OrderAmountTooLarge()

            product.adjust_stock(-line.quantity)
            self._product_repo.save(product, update_fields=["stock"])

            log.info(
                "order.stock_reserved",
                product_id=str(product.id),
                quantity=line.quantity,
                remaining=product.stock,
            )

            repo_items.append(
                {
                    "product_id": product.id,
                    "quantity": line.quantity,
                    "unit_price": unit_price,
                    "subtotal": subtotal,
                }
            )
            total += subtotal

        order = self._order_repo.create(
            {
                "owner_id": owner_id,
                "status": OrderStatus.PENDING,
                "total_amount": total,
                "items": repo_items,
            }
        )

        log.info("order.created", order_id=str(order.id), total_amount=str(total))
        self._publish_on_commit(
            OrderCreated(
                aggregate_id=order.id,
                owner_id=owner_id,
                total_amount=total,
                item_count=len(repo_items),
            )
        )

        # Re-fetch with prefetch for output
        return self._order_repo.get_by_id(order.id, owner_id) or order

    @transaction.atomic
    def update_status(self, order_id: Any, owner_id: Any, new_status: str) -> Order:
        """Move an order to *new_status* along the state machine.

        The status value is checked against the enumeration before the
        order is read.  A transition to ``cancelled`` goes through
        ``cancel_order`` so reserved stock is released.

        Raises:
            UnknownOrderStatus: *new_status* is not a known status.
            OrderNotFound: the order does not exist for this owner.
            InvalidOrderStatus: the transition is not allowed.
        """
        if new_status not in OrderStatus.values:
            logger.info("order.unknown_status", order_id=str(order_id), status=new_status)
            raise UnknownOrderStatus()

        order = self._order_repo.get_for_update(order_id, owner_id)
        if not order:
            raise OrderNotFound()

        log = logger.bind(
            order_id=str(order_id),
            current_status=order.status,
            new_status=new_status,
        )

        if not order.can_transition_to(new_status):
            log.warning("order.invalid_transition")
            raise InvalidOrderStatus()

        if new_status == OrderStatus.CANCELLED:
            return self._cancel(order, owner_id)

        old_status = order.status
        order.status = new_status
        self._order_repo.save(order, update_fields=["status"])

        log.info("order.status_updated")
        self._publish_on_commit(
            OrderStatusChanged(
                aggregate_id=order.id,
                owner_id=owner_id,
                old_status=old_status,
                new_status=new_status,
            )
        )
        return self._order_repo.get_by_id(order_id, owner_id) or order

    @transaction.atomic
    def cancel_order(self, order_id: Any, owner_id: Any) -> Order:
        """Cancel an order, releasing reserved stock where applicable.

        Acquires a row-level lock on the order **first** to prevent
        concurrent cancellations from releasing stock twice.

        Raises:
            OrderNotFound: the order does not exist for this owner.
            OrderAlreadyCancelled: the order is already cancelled.
            DeliveredOrderImmutable: the order was delivered.
        """
        order = self._order_repo.get_for_update(order_id, owner_id)
        if not order:
            raise OrderNotFound()

        if order.status == OrderStatus.CANCELLED:
            logger.info("order.already_cancelled", order_id=str(order_id))
            raise OrderAlreadyCancelled()
        if order.status == OrderStatus.DELIVERED:
            logger.warning("order.cancel_delivered", order_id=str(order_id))
            raise DeliveredOrderImmutable()

        return self._cancel(order, owner_id)

    @transaction.atomic
    def delete_order(self, order_id: Any, owner_id: Any) -> None:
        """Permanently delete a cancelled order and its items.

        Raises:
            OrderNotFound: the order does not exist for this owner.
            OrderNotDeletable: the order is not cancelled.
        """
        order = self._order_repo.get_for_update(order_id, owner_id)
        if not order:
            raise OrderNotFound()

        if order.status != OrderStatus.CANCELLED:
            logger.warning(
                "order.delete_refused", order_id=str(order_id), status=order.status
            )
            raise OrderNotDeletable()

        self._order_repo.delete(order_id, owner_id)
        logger.info("order.deleted", order_id=str(order_id), owner_id=owner_id)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_order(self, order_id: Any, owner_id: Any) -> Order:
        """Retrieve a single order with its items.

        Raises:
            OrderNotFound: if the order does not exist for this owner.
        """
        order = self._order_repo.get_by_id(order_id, owner_id)
        if not order:
            raise OrderNotFound()
        return order

    def list_orders(
        self, owner_id: Any, filters: Optional[Dict[str, Any]] = None
    ) -> models.QuerySet:
        """Return the owner's orders, newest first."""
        return self._order_repo.list(owner_id, filters)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _cancel(self, order: Order, owner_id: Any) -> Order:
        """Cancel an already-locked order.

        Stock is only returned while it is still reserved (``pending`` /
        ``confirmed``).  A shipped order is cancelled without restock.
        Items whose product can no longer be found are skipped.
        """
        log = logger.bind(order_id=str(order.id), current_status=order.status)
        previous_status = order.status
        restock = previous_status in RESTOCKABLE_STATES
        skipped: list[str] = []

        if restock:
            items = sorted(order.items.all(), key=lambda i: str(i.product_id))
            for item in items:
                product = self._product_repo.get_for_update(item.product_id, owner_id)
                if product is None:
                    skipped.append(str(item.product_id))
                    log.warning(
                        "order.restock_skipped",
                        product_id=str(item.product_id),
                        quantity=item.quantity,
                    )
                    continue
                product.adjust_stock(item.quantity)
                self._product_repo.save(product, update_fields=["stock"])
                log.info(
                    "order.stock_released",
                    product_id=str(product.id),
                    quantity=item.quantity,
                    restored_stock=product.stock,
                )

        order.status = OrderStatus.CANCELLED
        self._order_repo.save(order, update_fields=["status"])

        log.info("order.cancelled", restocked=restock, skipped=len(skipped))
        self._publish_on_commit(
            OrderCancelled(
                aggregate_id=order.id,
                owner_id=owner_id,
                previous_status=previous_status,
                restocked=restock,
                skipped_product_ids=tuple(skipped),
            )
        )
        return self._order_repo.get_by_id(order.id, owner_id) or order

    def _publish_on_commit(self, event: DomainEvent) -> None:
        transaction.on_commit(lambda: self._event_bus.publish(event))

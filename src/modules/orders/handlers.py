"""Event handlers for Orders domain events."""

from __future__ import annotations

import structlog

from modules.orders.events import OrderCancelled, OrderCreated, OrderStatusChanged
from shared.domain.bus import IEventHandler

logger = structlog.get_logger(__name__)


class OrderCreatedHandler(IEventHandler[OrderCreated]):
    def handle(self, event: OrderCreated) -> None:
        logger.info(
            "order.event.created",
            order_id=str(event.aggregate_id),
            owner_id=event.owner_id,
            total_amount=str(event.total_amount),
            item_count=event.item_count,
        )


class OrderStatusChangedHandler(IEventHandler[OrderStatusChanged]):
    def handle(self, event: OrderStatusChanged) -> None:
        logger.info(
            "order.event.status_changed",
            order_id=str(event.aggregate_id),
            old_status=event.old_status,
            new_status=event.new_status,
        )


class OrderCancelledHandler(IEventHandler[OrderCancelled]):
    def handle(self, event: OrderCancelled) -> None:
        log = logger.bind(order_id=str(event.aggregate_id), owner_id=event.owner_id)
        if event.skipped_product_ids:
            log.warning(
                "order.event.cancelled_partial_restock",
                skipped_product_ids=list(event.skipped_product_ids),
            )
            return
        log.info(
            "order.event.cancelled",
            previous_status=event.previous_status,
            restocked=event.restocked,
        )


order_created_handler = OrderCreatedHandler()
order_status_changed_handler = OrderStatusChangedHandler()
order_cancelled_handler = OrderCancelledHandler()

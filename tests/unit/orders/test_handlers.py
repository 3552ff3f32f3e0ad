"""Unit tests for Orders event handlers and their registration."""

from __future__ import annotations

import logging
from decimal import Decimal
from uuid import uuid4

import pytest

from modules.orders.events import OrderCancelled, OrderCreated, OrderStatusChanged
from modules.orders.handlers import (
    OrderCancelledHandler,
    OrderCreatedHandler,
    OrderStatusChangedHandler,
    order_created_handler,
)
from shared.infrastructure.bus import event_bus

pytestmark = pytest.mark.unit

LOGGER = "modules.orders.handlers"


def _messages(caplog):
    return [record.getMessage() for record in caplog.records]


def test_order_created_handler_logs(caplog):
    event = OrderCreated(
        aggregate_id=uuid4(), owner_id=1, total_amount=Decimal("9.00"), item_count=2
    )

    with caplog.at_level(logging.INFO, logger=LOGGER):
        OrderCreatedHandler().handle(event)

    assert any("order.event.created" in m for m in _messages(caplog))


def test_order_status_changed_handler_logs(caplog):
    event = OrderStatusChanged(
        aggregate_id=uuid4(), owner_id=1, old_status="pending", new_status="confirmed"
    )

    with caplog.at_level(logging.INFO, logger=LOGGER):
        OrderStatusChangedHandler().handle(event)

    assert any("order.event.status_changed" in m for m in _messages(caplog))


def test_order_cancelled_handler_logs(caplog):
    event = OrderCancelled(
        aggregate_id=uuid4(), owner_id=1, previous_status="pending", restocked=True
    )

    with caplog.at_level(logging.INFO, logger=LOGGER):
        OrderCancelledHandler().handle(event)

    assert any("order.event.cancelled" in m for m in _messages(caplog))


def test_partial_restock_is_a_warning(caplog):
    event = OrderCancelled(
        aggregate_id=uuid4(),
        owner_id=1,
        previous_status="confirmed",
        restocked=True,
        skipped_product_ids=("abc",),
    )

    with caplog.at_level(logging.INFO, logger=LOGGER):
        OrderCancelledHandler().handle(event)

    warnings = [r for r in caplog.records if r.levelno == logging.WARNING]
    assert any("cancelled_partial_restock" in r.getMessage() for r in warnings)


def test_handlers_registered_on_app_ready():
    assert order_created_handler in event_bus._handlers[OrderCreated]

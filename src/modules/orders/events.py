"""Domain events for the Orders bounded context."""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any

from shared.domain.events import DomainEvent


@dataclass(frozen=True, kw_only=True)
class OrderCreated(DomainEvent):
    """Raised when an order is created and its stock reserved."""

    owner_id: Any
    total_amount: Decimal
    item_count: int


@dataclass(frozen=True, kw_only=True)
class OrderStatusChanged(DomainEvent):
    """Raised when an order moves along the state machine."""

    owner_id: Any
    old_status: str
    new_status: str


@dataclass(frozen=True, kw_only=True)
class OrderCancelled(DomainEvent):
    """Raised when an order is cancelled.

    ``skipped_product_ids`` lists items whose product could not be found
    while restocking; their quantity was not returned to stock.
    """

    owner_id: Any
    previous_status: str
    restocked: bool
    skipped_product_ids: tuple[str, ...] = field(default_factory=tuple)

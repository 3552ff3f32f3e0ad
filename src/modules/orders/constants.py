"""Order domain constants.

Defines the status enumeration and the adjacency map that drives the
order state machine.  A status missing from ``VALID_TRANSITIONS``
allows no outbound transition at all.
"""

from decimal import Decimal

from django.db import models


class OrderStatus(models.TextChoices):
    PENDING = "pending", "Pending"
    CONFIRMED = "confirmed", "Confirmed"
    SHIPPED = "shipped", "Shipped"
    DELIVERED = "delivered", "Delivered"
    CANCELLED = "cancelled", "Cancelled"


VALID_TRANSITIONS: dict[str, frozenset[str]] = {
    OrderStatus.PENDING: frozenset({OrderStatus.CONFIRMED, OrderStatus.CANCELLED}),
    OrderStatus.CONFIRMED: frozenset({OrderStatus.SHIPPED, OrderStatus.CANCELLED}),
    OrderStatus.SHIPPED: frozenset({OrderStatus.DELIVERED}),
    OrderStatus.DELIVERED: frozenset(),
    OrderStatus.CANCELLED: frozenset(),
}

TERMINAL_STATES: frozenset[str] = frozenset(
    {OrderStatus.DELIVERED, OrderStatus.CANCELLED}
)

# Stock is still reserved (not yet physically shipped) in these states.
RESTOCKABLE_STATES: frozenset[str] = frozenset(
    {OrderStatus.PENDING, OrderStatus.CONFIRMED}
)


def allowed_transitions(status: str) -> frozenset[str]:
    return VALID_TRANSITIONS.get(status, frozenset())


def is_valid_transition(current: str, new: str) -> bool:
    return new in allowed_transitions(current)


# Order totals and line subtotals are stored with this precision; a unit
# price (12 digits) times a large quantity must still fit.
AMOUNT_MAX_DIGITS = 18
AMOUNT_DECIMAL_PLACES = 2
MAX_ORDER_AMOUNT = Decimal("9999999999999999.99")

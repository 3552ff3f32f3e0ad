"""Order domain exceptions.

Raised by the Service Layer when business rules are violated.
The API layer (Views) catches these and translates them into
appropriate HTTP responses.
"""

from __future__ import annotations

from modules.core.exceptions import ConflictError, NotFoundError, ValidationError


class OrderNotFound(NotFoundError):
    """The order does not exist or belongs to another owner."""

    default_message = "order not found"


class EmptyOrder(ValidationError):
    """An order was submitted without any line."""

    default_message = "empty order"


class InvalidQuantity(ValidationError):
    """A line asked for zero or a negative quantity."""

    default_message = "invalid quantity"


class UnknownOrderStatus(ValidationError):
    """The requested status is not part of the enumeration."""

    default_message = "invalid status"


class InvalidOrderStatus(ValidationError):
    """The state machine does not allow the requested transition."""

    default_message = "invalid status transition"


class InsufficientStock(ConflictError):
    """Not enough stock to fulfil a line.  Message names the product."""

    def __init__(self, product_name: str) -> None:
        self.product_name = product_name
        super().__init__(f"insufficient stock: {product_name}")


class OrderAlreadyCancelled(ConflictError):
    default_message = "already cancelled"


class DeliveredOrderImmutable(ConflictError):
    default_message = "cannot cancel delivered order"


class OrderNotDeletable(ConflictError):
    """Only cancelled orders may be deleted."""

    default_message = "can only delete cancelled orders"


class OrderAmountTooLarge(ValidationError):
    """A line subtotal or the order total exceeds what can be stored."""

    default_message = "order amount too large"

"""Product domain exceptions.

Raised by the Service Layer when business rules are violated.
The API layer (Views) catches these and translates them into
appropriate HTTP responses.
"""

from __future__ import annotations

from modules.core.exceptions import ConflictError, NotFoundError, ValidationError


class ProductAlreadyExists(ConflictError):
    """The owner already has a live product with the same code."""

    default_message = "product code already exists"


class ProductNotFound(NotFoundError):
    """The product does not exist, was deleted, or belongs to another owner."""

    default_message = "product not found"


class NegativeStock(ValidationError):
    """A stock adjustment would leave the product below zero."""

    default_message = "stock cannot be negative"


class StockOutOfRange(ValidationError):
    """A stock adjustment would exceed the largest storable quantity."""

    default_message = "stock out of range"

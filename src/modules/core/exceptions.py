"""Base domain exceptions shared by every module.

Services raise subclasses of these three kinds; the API layer maps
each kind to a single HTTP status:

- ``ValidationError``: malformed or out-of-range input (400).
- ``NotFoundError``: entity absent **or** owned by someone else (404).
- ``ConflictError``: business rule violated by current state (409).

``ValidationError`` here is unrelated to Django's or Pydantic's
classes of the same name: import it qualified when both are in scope.
"""

from __future__ import annotations


class DomainError(Exception):
    """Root of all business-rule errors raised by the service layer."""

    default_message = "domain error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(DomainError):
    default_message = "invalid input"


class NotFoundError(DomainError):
    default_message = "not found"


class ConflictError(DomainError):
    default_message = "conflict"

"""Generic owner-scoped repository interface (Dependency Inversion Principle).

Provides ``IRepository[T]``, the base abstract class that all
domain-specific repository interfaces extend.  Service-layer code
depends on this abstraction, never on Django ORM directly.

Every look-up takes the owner identity explicitly: an entity that
exists but belongs to another owner is reported as ``None``, exactly
like an entity that does not exist at all.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, Generic, Optional, Protocol, TypeVar

from django.db import models

T = TypeVar("T")
T_co = TypeVar("T_co", covariant=True)


class Queryable(Protocol[T_co]):
    def filter(self, **kwargs: Any) -> models.QuerySet: ...


class IRepository(ABC, Generic[T]):
    """Base generic repository contract.

    Type parameter ``T`` represents the domain entity managed by the
    repository (e.g. ``Product``, ``Order``).
    """

    @abstractmethod
    def get_by_id(self, id: Any, owner_id: Any) -> Optional[T]:
        """Retrieve an entity by primary key within the owner's scope."""

    @abstractmethod
    def get_for_update(self, id: Any, owner_id: Any) -> Optional[T]:
        """Retrieve an entity with a row-level lock (SELECT FOR UPDATE)."""

    @abstractmethod
    def list(
        self, owner_id: Any, filters: Optional[Dict[str, Any]] = None
    ) -> Queryable[T]:
        """List the owner's entities with optional filters."""

    @abstractmethod
    def save(self, entity: T, update_fields: Optional[list[str]] = None) -> T:
        """Persist (create or update) an entity."""

    @abstractmethod
    def delete(self, id: Any, owner_id: Any) -> bool:
        """Remove an entity by ID (soft or hard delete)."""

"""Product repository interface (the Catalog Store contract).

Extends ``IRepository[Product]`` with the per-owner code look-up
used to keep product codes unique within a tenant.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Any, Optional

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.products.models import Product


class IProductRepository(IRepository["Product"]):
    """Repository contract for the Product aggregate."""

    @abstractmethod
    def get_by_code(self, code: str, owner_id: Any) -> Optional[Product]:
        """Retrieve a live product by its code within the owner's catalog."""

    @abstractmethod
    def lock_many(self, ids: list[Any], owner_id: Any) -> dict[Any, Product]:
        """Lock the owner's live products with the given ids.

        Rows are locked in ascending id order to prevent deadlocks
        between concurrent orders.  Missing or foreign ids are simply
        absent from the returned mapping.
        """

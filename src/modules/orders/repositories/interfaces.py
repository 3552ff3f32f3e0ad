"""Order repository interface (the Order Store contract).

Extends ``IRepository[Order]`` with atomic creation of the aggregate
(order + items).  Reads must eagerly resolve items and each item's
product; listings are newest first.

The Service Layer depends exclusively on this contract (DIP).
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Any, Dict

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.orders.models import Order


class IOrderRepository(IRepository["Order"]):
    """Repository contract for the Order aggregate root.

    The Order aggregate includes its OrderItem children.  Mutations
    must be atomic.
    """

    @abstractmethod
    def create(self, data: Dict[str, Any]) -> Order:
        """Create an order with its items atomically.

        ``data`` must include ``owner_id``, ``status``, ``total_amount``
        and ``items`` (list of dicts with ``product_id``, ``quantity``,
        ``unit_price``, ``subtotal``).
        """

"""Order DTOs for the Service Layer.

Framework-agnostic data transfer objects using Pydantic v2.
These are the contracts between the API layer (DRF views) and the
Service layer.  DTOs are immutable (``frozen=True``).

The DTOs only enforce types.  Business validation (empty orders,
non-positive quantities) belongs to ``OrderService`` so every caller
gets the same domain errors regardless of how the DTO was built.
"""

from __future__ import annotations

from typing import List
from uuid import UUID

from pydantic import BaseModel, ConfigDict


class CreateOrderItemDTO(BaseModel):
    """A single requested line: which product and how many.

    ``unit_price`` is resolved by the Service Layer from the catalog.
    """

    model_config = ConfigDict(frozen=True)

    product_id: UUID
    quantity: int


class CreateOrderDTO(BaseModel):
    """Immutable DTO for order creation requests.

    Lines are kept in request order; the same product may appear on
    more than one line.
    """

    model_config = ConfigDict(frozen=True)

    items: List[CreateOrderItemDTO]

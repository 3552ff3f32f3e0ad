"""Product DTOs for the Service Layer.

Framework-agnostic data transfer objects using Pydantic v2.
These are the contracts between the API layer (DRF views)
and the Service layer.  DTOs are immutable (``frozen=True``).

- ``CreateProductDTO``: input for product creation.
- ``UpdateProductDTO``: input for partial product updates.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, field_validator

from modules.products.constants import (
    MAX_STOCK,
    PRICE_DECIMAL_PLACES,
    PRICE_MAX_DIGITS,
)

# Anything that would not fit the product columns is rejected up front.
Price = Annotated[
    Decimal, Field(max_digits=PRICE_MAX_DIGITS, decimal_places=PRICE_DECIMAL_PLACES)
]
StockLevel = Annotated[int, Field(le=MAX_STOCK)]


def _require_text(value: str, label: str) -> str:
    if not value or not value.strip():
        raise ValueError(f"{label} cannot be empty")
    return value.strip()


# ---------------------------------------------------------------------------
# Input DTOs
# ---------------------------------------------------------------------------


class CreateProductDTO(BaseModel):
    """Immutable DTO for product creation requests.

    Validates:
    - ``code`` and ``name`` are non-empty strings.
    - ``price`` is not negative and fits 12 digits with 2 decimals.
    - ``stock`` is not negative and fits a 32-bit integer.
    """

    model_config = ConfigDict(frozen=True)

    code: str
    name: str
    price: Price
    description: str = ""
    stock: StockLevel = 0

    @field_validator("code")
    @classmethod
    def code_must_not_be_empty(cls, v: str) -> str:
        return _require_text(v, "code")

    @field_validator("name")
    @classmethod
    def name_must_not_be_empty(cls, v: str) -> str:
        return _require_text(v, "name")

    @field_validator("price")
    @classmethod
    def price_must_not_be_negative(cls, v: Decimal) -> Decimal:
        if v < 0:
            raise ValueError("price cannot be negative")
        return v

    @field_validator("stock")
    @classmethod
    def stock_must_be_non_negative(cls, v: int) -> int:
        if v < 0:
            raise ValueError("stock cannot be negative")
        return v


class UpdateProductDTO(BaseModel):
    """Immutable DTO for product update requests.

    All fields are optional: only supplied fields will be updated.
    """

    model_config = ConfigDict(frozen=True)

    code: str | None = None
    name: str | None = None
    description: str | None = None
    price: Price | None = None
    stock: StockLevel | None = None

    @field_validator("code")
    @classmethod
    def code_must_not_be_empty(cls, v: str | None) -> str | None:
        return v if v is None else _require_text(v, "code")

    @field_validator("name")
    @classmethod
    def name_must_not_be_empty(cls, v: str | None) -> str | None:
        return v if v is None else _require_text(v, "name")

    @field_validator("price")
    @classmethod
    def price_must_not_be_negative(cls, v: Decimal | None) -> Decimal | None:
        if v is not None and v < 0:
            raise ValueError("price cannot be negative")
        return v

    @field_validator("stock")
    @classmethod
    def stock_must_be_non_negative(cls, v: int | None) -> int | None:
        if v is not None and v < 0:
            raise ValueError("stock cannot be negative")
        return v


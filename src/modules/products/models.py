"""Product model with per-owner code uniqueness and stock control.

Business rules implemented:
- Product ``code`` is unique per owner among live (non-deleted) products.
- Price cannot be negative.
- Stock cannot be negative (check constraint + ``adjust_stock`` guard).
- Soft delete via ``deleted_at`` (inherited from SoftDeleteModel).
"""

from __future__ import annotations

from decimal import Decimal

import structlog

from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from django.db import models

from modules.core.models import OwnedModel, SoftDeleteModel
from modules.products.constants import (
    MAX_STOCK,
    PRICE_DECIMAL_PLACES,
    PRICE_MAX_DIGITS,
)
from modules.products.exceptions import NegativeStock, StockOutOfRange

logger = structlog.get_logger(__name__)


class Product(OwnedModel, SoftDeleteModel):
    """Product aggregate root, private to its owner.

    ``code`` is the owner's business key.  It is stripped on save but
    kept case-sensitive.  The unique constraint only covers live rows,
    so a code can be reused after the previous product was deleted.
    """

    code = models.CharField(max_length=64)
    name = models.CharField(max_length=255)
    description = models.TextField(blank=True, default="")
    price = models.DecimalField(
        max_digits=PRICE_MAX_DIGITS,
        decimal_places=PRICE_DECIMAL_PLACES,
        validators=[MinValueValidator(Decimal("0.00"))],
    )
    stock = models.IntegerField(default=0, validators=[MinValueValidator(0)])

    class Meta:
        db_table = "products"
        ordering = ["name"]
        constraints = [
            models.UniqueConstraint(
                fields=["owner", "code"],
                condition=models.Q(deleted_at__isnull=True),
                name="products_owner_code_unique",
            ),
            models.CheckConstraint(
                condition=models.Q(price__gte=0),
                name="products_price_non_negative",
            ),
            models.CheckConstraint(
                condition=models.Q(stock__gte=0),
                name="products_stock_non_negative",
            ),
        ]

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    def clean(self) -> None:
        super().clean()
        if self.code:
            self.code = self.code.strip()
        if self.price is not None and self.price < 0:
            raise ValidationError({"price": "Price cannot be negative."})
        if self.stock is not None and self.stock < 0:
            raise ValidationError({"stock": "Stock cannot be negative."})

    # ------------------------------------------------------------------
    # Stock
    # ------------------------------------------------------------------

    def adjust_stock(self, delta: int) -> int:
        """Apply *delta* to the in-memory stock and return the new value.

        Does not persist: callers save through the repository so the
        write happens inside their transaction.

        Raises:
            NegativeStock: the result would drop below zero.
            StockOutOfRange: the result would not fit the stock column.
        """
        new_stock = self.stock + delta
        if new_stock < 0:
            raise NegativeStock("stock cannot be negative")
        if new_stock > MAX_STOCK:
            raise StockOutOfRange()
        self.stock = new_stock
        return new_stock

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def save(self, *args, **kwargs) -> None:
        is_new = self._state.adding
        if self.code:
            self.code = self.code.strip()
        super().save(*args, **kwargs)
        if is_new:
            logger.info(
                "product_created",
                product_id=str(self.id),
                owner_id=self.owner_id,
                code=self.code,
            )

    def __str__(self) -> str:
        return f"{self.code} - {self.name}"

"""Django ORM implementation of the Product repository.

Satisfies ``IProductRepository`` using Django's QuerySet API.
Error handling follows the Null Object pattern: methods return ``None``
instead of raising: the Service Layer decides how to translate a
missing entity into a domain error.  Only live (non-deleted) products
owned by the caller are ever visible.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

import structlog

from django.core.exceptions import ValidationError
from django.db import models, transaction

from modules.products.models import Product
from modules.products.repositories.interfaces import IProductRepository

logger = structlog.get_logger(__name__)


class ProductDjangoRepository(IProductRepository):
    """Concrete Product repository backed by Django ORM."""

    @staticmethod
    def _scoped(owner_id: Any) -> models.QuerySet:
        return Product.objects.alive().filter(owner_id=owner_id)

    def get_by_id(self, id: Any, owner_id: Any) -> Optional[Product]:
        """Retrieve a product by primary key.

        Returns ``None`` for non-existent, foreign or invalid IDs.
        """
        try:
            return self._scoped(owner_id).filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def get_for_update(self, id: Any, owner_id: Any) -> Optional[Product]:
        """Retrieve a product with a row-level lock.

        Must be called inside ``transaction.atomic``.
        """
        try:
            return self._scoped(owner_id).select_for_update().filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def lock_many(self, ids: list[Any], owner_id: Any) -> dict[Any, Product]:
        unique_ids = sorted({str(i) for i in ids})
        try:
            rows = (
                self._scoped(owner_id)
                .select_for_update()
                .filter(id__in=unique_ids)
                .order_by("id")
            )
            return {str(product.id): product for product in rows}
        except (ValueError, ValidationError):
            return {}

    def get_by_code(self, code: str, owner_id: Any) -> Optional[Product]:
        return self._scoped(owner_id).filter(code=code.strip()).first()

    def list(
        self, owner_id: Any, filters: Optional[Dict[str, Any]] = None
    ) -> models.QuerySet:
        """List the owner's products with optional Django ORM look-ups.

        Examples of valid filters::

            {"name__icontains": "widget"}
            {"price__lte": Decimal("10.00")}
        """
        queryset = self._scoped(owner_id)
        if filters:
            queryset = queryset.filter(**filters)
        return queryset

    @transaction.atomic
    def save(self, entity: Product, update_fields: Optional[list[str]] = None) -> Product:
        """Persist (create or update) a product."""
        if update_fields:
            entity.save(update_fields=update_fields)
        else:
            entity.save()
        logger.info(
            "product.saved",
            product_id=str(entity.id),
            code=entity.code,
            stock=entity.stock,
        )
        return entity

    @transaction.atomic
    def delete(self, id: Any, owner_id: Any) -> bool:
        """Soft-delete a product by ID.

        Returns ``True`` if the product was found and soft-deleted,
        ``False`` if the owner has no live product with that ID.
        """
        product = self.get_by_id(id, owner_id)
        if not product:
            return False
        product.delete()
        logger.info("product.soft_deleted", product_id=str(id))
        return True

"""Product service layer (Use Cases).

Orchestrates business logic for the owner's catalog, delegating
persistence to the injected ``IProductRepository``.

Business rules enforced here:
- Product code must be unique within the owner's catalog.
- Price and stock cannot be negative (validated by DTO).
- Stock adjustments can never drive stock below zero.
- Every operation is scoped by owner; foreign products are "not found".
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, Optional

import structlog
from django.db import models, transaction

from modules.products.exceptions import ProductAlreadyExists, ProductNotFound
from modules.products.models import Product

if TYPE_CHECKING:
    from modules.products.dtos import CreateProductDTO, UpdateProductDTO
    from modules.products.repositories.interfaces import IProductRepository

logger = structlog.get_logger(__name__)


class ProductService:
    """Application service for Product use-cases.

    Receives an ``IProductRepository`` via constructor injection (DIP).
    """

    def __init__(self, repository: IProductRepository) -> None:
        self._repo = repository

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    @transaction.atomic
    def create_product(self, owner_id: Any, dto: CreateProductDTO) -> Product:
        """Create a new product in the owner's catalog.

        Raises:
            ProductAlreadyExists: the owner already uses this code.
        """
        log = logger.bind(owner_id=owner_id, code=dto.code)

        if self._repo.get_by_code(dto.code, owner_id):
            log.warning("product.duplicate_code")
            raise ProductAlreadyExists()

        product = Product(
            owner_id=owner_id,
            code=dto.code,
            name=dto.name,
            price=dto.price,
            description=dto.description,
            stock=dto.stock,
        )
        product = self._repo.save(product)
        log.info("product.created", product_id=str(product.id))
        return product

    @transaction.atomic
    def update_product(self, id: Any, owner_id: Any, dto: UpdateProductDTO) -> Product:
        """Update an existing product with the supplied fields.

        Raises:
            ProductNotFound: the product does not exist for this owner.
            ProductAlreadyExists: the new code is taken by another product.
        """
        product = self._repo.get_for_update(id, owner_id)
        if not product:
            raise ProductNotFound()

        log = logger.bind(product_id=str(id), owner_id=owner_id)

        if dto.code is not None and dto.code != product.code:
            if self._repo.get_by_code(dto.code, owner_id):
                log.warning("product.duplicate_code", code=dto.code)
                raise ProductAlreadyExists()

        for field in ("code", "name", "description", "price", "stock"):
            value = getattr(dto, field)
            if value is not None:
                setattr(product, field, value)

        product = self._repo.save(product)
        log.info("product.updated")
        return product

    @transaction.atomic
    def adjust_stock(self, id: Any, owner_id: Any, delta: int) -> Product:
        """Add *delta* (positive or negative) to the product's stock.

        The row is locked for the duration of the transaction so
        concurrent adjustments serialise on the product.

        Raises:
            ProductNotFound: the product does not exist for this owner.
            NegativeStock: ``stock + delta`` would be negative.
            StockOutOfRange: ``stock + delta`` would not fit the stock column.
        """
        product = self._repo.get_for_update(id, owner_id)
        if not product:
            raise ProductNotFound()

        previous = product.stock
        product.adjust_stock(delta)
        self._repo.save(product, update_fields=["stock"])
        logger.info(
            "product.stock_adjusted",
            product_id=str(id),
            delta=delta,
            previous=previous,
            stock=product.stock,
        )
        return product

    @transaction.atomic
    def delete_product(self, id: Any, owner_id: Any) -> None:
        """Soft-delete a product.

        Existing order items keep pointing at the deleted row, so past
        orders still render; the product just stops being orderable.

        Raises:
            ProductNotFound: the product does not exist for this owner.
        """
        if not self._repo.delete(id, owner_id):
            raise ProductNotFound()
        logger.info("product.deleted", product_id=str(id), owner_id=owner_id)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def list_products(
        self, owner_id: Any, filters: Optional[Dict[str, Any]] = None
    ) -> models.QuerySet:
        """Return the owner's products, optionally filtered."""
        return self._repo.list(owner_id, filters)

    def get_product(self, id: Any, owner_id: Any) -> Product:
        """Retrieve a single product by ID.

        Raises:
            ProductNotFound: if the product does not exist for this owner.
        """
        product = self._repo.get_by_id(id, owner_id)
        if not product:
            raise ProductNotFound()
        return product

    def get_product_by_code(self, code: str, owner_id: Any) -> Product:
        product = self._repo.get_by_code(code, owner_id)
        if not product:
            raise ProductNotFound()
        return product

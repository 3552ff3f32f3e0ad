"""Product API views.

Exposes the ``ProductService`` via HTTP using DRF ViewSets.
The authenticated user is always the owner: every call passes
``request.user.pk`` explicitly to the service.  Domain exceptions are
caught and translated into HTTP status codes: the view never
swallows generic exceptions.
"""

from __future__ import annotations

from django_filters.rest_framework import DjangoFilterBackend
from pydantic import ValidationError as PydanticValidationError
from rest_framework import status
from rest_framework.decorators import action
from rest_framework.filters import OrderingFilter, SearchFilter
from rest_framework.mixins import ListModelMixin
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.viewsets import GenericViewSet

from modules.core.exceptions import DomainError
from modules.core.responses import domain_error_response, dto_error_response
from modules.products.dtos import CreateProductDTO, UpdateProductDTO
from modules.products.filters import ProductFilter
from modules.products.models import Product
from modules.products.repositories.django_repository import ProductDjangoRepository
from modules.products.serializers import ProductSerializer, StockAdjustmentSerializer
from modules.products.services import ProductService


_PRODUCT_FIELDS = ("code", "name", "description", "price", "stock")


def _pick(data) -> dict:
    return {field: data[field] for field in _PRODUCT_FIELDS if field in data}


class ProductViewSet(ListModelMixin, GenericViewSet):
    """ViewSet for the owner's catalog.

    Uses ``ProductService`` with ``ProductDjangoRepository`` (DIP).
    Does **not** extend ``ModelViewSet``: all ORM access goes through
    the service/repository layer.
    """

    filterset_class = ProductFilter
    search_fields = ["name", "code", "description"]
    ordering_fields = ["name", "price", "stock", "created_at"]
    ordering = ["name", "id"]
    filter_backends = [DjangoFilterBackend, SearchFilter, OrderingFilter]
    queryset = Product.objects.all()
    serializer_class = ProductSerializer

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = ProductService(repository=ProductDjangoRepository())

    @property
    def _owner_id(self):
        return self.request.user.pk

    # ------------------------------------------------------------------
    # List / Retrieve
    # ------------------------------------------------------------------

    def get_queryset(self):
        return self._service.list_products(self._owner_id)

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/products/{pk}/"""
        try:
            product = self._service.get_product(pk, self._owner_id)
        except DomainError as exc:
            return domain_error_response(exc)
        return Response(ProductSerializer(product).data)

    @action(detail=False, methods=["get"], url_path=r"by-code/(?P<code>[^/]+)")
    def by_code(self, request: Request, code: str | None = None) -> Response:
        """GET /api/v1/products/by-code/{code}/"""
        try:
            product = self._service.get_product_by_code(code or "", self._owner_id)
        except DomainError as exc:
            return domain_error_response(exc)
        return Response(ProductSerializer(product).data)

    # ------------------------------------------------------------------
    # Create / Update / Destroy
    # ------------------------------------------------------------------

    def create(self, request: Request) -> Response:
        """POST /api/v1/products/"""
        data = request.data

        try:
            dto = CreateProductDTO(**_pick(data))
        except PydanticValidationError as exc:
            return dto_error_response(exc)

        try:
            product = self._service.create_product(self._owner_id, dto)
        except DomainError as exc:
            return domain_error_response(exc)

        return Response(ProductSerializer(product).data, status=status.HTTP_201_CREATED)

    def update(self, request: Request, pk: str | None = None) -> Response:
        """PUT/PATCH /api/v1/products/{pk}/

        Only the supplied fields change.
        """
        data = request.data

        try:
            dto = UpdateProductDTO(**_pick(data))
        except PydanticValidationError as exc:
            return dto_error_response(exc)

        try:
            product = self._service.update_product(pk, self._owner_id, dto)
        except DomainError as exc:
            return domain_error_response(exc)

        return Response(ProductSerializer(product).data)

    def partial_update(self, request: Request, pk: str | None = None) -> Response:
        """PATCH /api/v1/products/{pk}/"""
        return self.update(request, pk)

    @action(detail=True, methods=["patch"], url_path="stock")
    def adjust_stock(self, request: Request, pk: str | None = None) -> Response:
        """PATCH /api/v1/products/{pk}/stock/

        Accepts ``{"delta": N}``; negative deltas remove stock.
        """
        serializer = StockAdjustmentSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            product = self._service.adjust_stock(
                pk, self._owner_id, serializer.validated_data["delta"]
            )
        except DomainError as exc:
            return domain_error_response(exc)

        return Response(ProductSerializer(product).data)

    def destroy(self, request: Request, pk: str | None = None) -> Response:
        """DELETE /api/v1/products/{pk}/"""
        try:
            self._service.delete_product(pk, self._owner_id)
        except DomainError as exc:
            return domain_error_response(exc)
        return Response(status=status.HTTP_204_NO_CONTENT)

"""Product DRF serializers for API output.

The serializer operates at the Interface layer (API Views).
Business logic lives in the Service Layer, which receives
Pydantic DTOs from ``dtos.py``.
"""

from __future__ import annotations

from rest_framework import serializers

from modules.products.constants import MAX_STOCK
from modules.products.models import Product


class ProductSerializer(serializers.ModelSerializer):
    """Read serializer for the Product resource."""

    class Meta:
        model = Product
        fields = [
            "id",
            "code",
            "name",
            "description",
            "price",
            "stock",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class ProductSummarySerializer(serializers.ModelSerializer):
    """Compact product reference embedded in order items."""

    class Meta:
        model = Product
        fields = ["id", "code", "name", "price"]
        read_only_fields = fields


class StockAdjustmentSerializer(serializers.Serializer):
    """Validates ``{"delta": N}`` for the stock endpoint."""

    delta = serializers.IntegerField(min_value=-MAX_STOCK, max_value=MAX_STOCK)

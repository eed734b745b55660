"""Product DRF serializers for API output.

Input is validated by the Pydantic DTOs in ``dtos.py``; the serializer
only renders ``Product`` entities (and documents the schema for OpenAPI).
"""

from __future__ import annotations

from rest_framework import serializers


class ProductSerializer(serializers.Serializer):
    """Read serializer for the Product resource."""

    id = serializers.CharField(read_only=True)
    name = serializers.CharField()
    description = serializers.CharField(allow_blank=True)
    category = serializers.CharField()
    price = serializers.DecimalField(
        max_digits=12,
        decimal_places=2,
        coerce_to_string=False,
        allow_null=True,
        required=False,
    )
    created_at = serializers.DateTimeField(read_only=True)
    updated_at = serializers.DateTimeField(read_only=True)


class ProductDeletedSerializer(serializers.Serializer):
    message = serializers.CharField()

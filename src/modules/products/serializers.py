"""Product DRF serializers for the OpenAPI schema.

Request and response bodies are validated and rendered by the Pydantic
DTOs in ``dtos.py``; these serializers only describe the same shapes to
drf-spectacular.
"""

from __future__ import annotations

from rest_framework import serializers


class ProductSerializer(serializers.Serializer):
    """Product as returned by every endpoint."""

    id = serializers.IntegerField(read_only=True)
    name = serializers.CharField(max_length=255)
    price = serializers.FloatField(min_value=0)
    available = serializers.BooleanField(default=True)
    created_at = serializers.DateTimeField(read_only=True)
    updated_at = serializers.DateTimeField(read_only=True)


class UpdateProductSerializer(serializers.Serializer):
    id = serializers.IntegerField(required=False, help_text="Ignored.")
    name = serializers.CharField(max_length=255, required=False)
    price = serializers.FloatField(min_value=0, required=False)
    available = serializers.BooleanField(required=False)


class PageMetaSerializer(serializers.Serializer):
    total = serializers.IntegerField()
    current = serializers.IntegerField()
    totalPages = serializers.IntegerField()


class ProductPageSerializer(serializers.Serializer):
    """Paged listing; an out-of-range page is answered with ``[]``."""

    data = ProductSerializer(many=True)
    meta = PageMetaSerializer()


class ValidateProductsSerializer(serializers.Serializer):
    ids = serializers.ListField(child=serializers.IntegerField(min_value=1), min_length=1)


class ErrorSerializer(serializers.Serializer):
    detail = serializers.JSONField()

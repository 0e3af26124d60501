"""Discount DRF serializers (output only).

Input is validated by ``CreateDiscountCodeDTO`` in the service layer.
"""

from __future__ import annotations

from rest_framework import serializers

from modules.discounts.models import DiscountCode


class DiscountCodeSerializer(serializers.ModelSerializer):
    """Full admin view of a discount code."""

    class Meta:
        model = DiscountCode
        fields = [
            "id",
            "code",
            "description",
            "discount_type",
            "discount_value",
            "active",
            "expires_at",
            "max_uses",
            "uses",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class DiscountLookupSerializer(serializers.Serializer):
    """What the storefront needs to preview a code (no usage counters)."""

    code = serializers.CharField(read_only=True)
    discount_type = serializers.CharField(read_only=True)
    discount_value = serializers.DecimalField(
        max_digits=10, decimal_places=2, read_only=True
    )
    expires_at = serializers.DateTimeField(read_only=True, allow_null=True)

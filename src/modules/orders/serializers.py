"""Order DRF serializers (output only).

Input is validated by the Pydantic DTOs in ``dtos.py`` inside the
Service Layer, so the same rules apply to API calls and direct service
use.  Serializers declare ``*_id`` fields explicitly so they work for
in-memory orders that have no database relations.
"""

from __future__ import annotations

from rest_framework import serializers

from modules.orders.models import Order


class OrderSerializer(serializers.ModelSerializer):
    """Full read view of an order."""

    user_id = serializers.IntegerField(read_only=True)
    discount_code_id = serializers.UUIDField(read_only=True, allow_null=True)

    class Meta:
        model = Order
        fields = [
            "id",
            "user_id",
            "model_name",
            "description",
            "material",
            "weight_grams",
            "delegate_sizing",
            "delivery_method",
            "fulfillment_mode",
            "shipping_location",
            "base_cost",
            "discount_code_id",
            "discount_applied",
            "final_amount",
            "quoted_price",
            "status",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class OrderListSerializer(serializers.ModelSerializer):
    """Lightweight serializer for order lists."""

    user_id = serializers.IntegerField(read_only=True)

    class Meta:
        model = Order
        fields = [
            "id",
            "user_id",
            "model_name",
            "material",
            "weight_grams",
            "fulfillment_mode",
            "final_amount",
            "discount_applied",
            "status",
            "created_at",
        ]
        read_only_fields = fields


class AdminOrderListSerializer(OrderListSerializer):
    """Order list row for admins, with the customer's username."""

    username = serializers.SerializerMethodField()

    class Meta(OrderListSerializer.Meta):
        fields = OrderListSerializer.Meta.fields + ["username", "description"]
        read_only_fields = fields

    def get_username(self, order: Order) -> str | None:
        usernames = self.context.get("usernames", {})
        return usernames.get(order.user_id)


class OrderQuoteSerializer(serializers.Serializer):
    base_cost = serializers.DecimalField(max_digits=12, decimal_places=3, read_only=True)
    discount_applied = serializers.DecimalField(
        max_digits=10, decimal_places=2, read_only=True
    )
    final_amount = serializers.DecimalField(
        max_digits=10, decimal_places=2, read_only=True
    )
    discount_code = serializers.CharField(read_only=True, allow_null=True)

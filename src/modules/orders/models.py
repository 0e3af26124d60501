"""Order model.

An order is immutable once placed except for ``status``, ``final_amount``
and ``discount_applied``, which only admins change.
"""

from __future__ import annotations

from decimal import Decimal

from django.conf import settings
from django.db import models
from django.db.models import Q

from modules.core.models import BaseModel
from modules.orders.constants import (
    ACTIVE_STATES,
    DeliveryMethod,
    FulfillmentMode,
    Material,
    OrderStatus,
    ShippingLocation,
)


class Order(BaseModel):
    """A single 3D-print order.

    ``base_cost`` is the exact pre-discount price; ``discount_applied`` and
    ``final_amount`` are rounded to pence.  ``discount_code`` is only set
    when a code was redeemed for this order.
    """

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="orders",
    )
    model_name = models.CharField(max_length=255)
    description = models.TextField(blank=True, default="")
    material = models.CharField(max_length=20, choices=Material.choices)
    weight_grams = models.PositiveIntegerField(default=0)
    delegate_sizing = models.BooleanField(default=False)
    delivery_method = models.CharField(max_length=20, choices=DeliveryMethod.choices)
    fulfillment_mode = models.CharField(
        max_length=20,
        choices=FulfillmentMode.choices,
        default=FulfillmentMode.DELIVERY,
    )
    shipping_location = models.CharField(
        max_length=30,
        choices=ShippingLocation.choices,
        blank=True,
        default="",
    )
    base_cost = models.DecimalField(
        max_digits=12, decimal_places=3, default=Decimal("0.000")
    )
    discount_code = models.ForeignKey(
        "discounts.DiscountCode",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="orders",
    )
    discount_applied = models.DecimalField(
        max_digits=10, decimal_places=2, default=Decimal("0.00")
    )
    final_amount = models.DecimalField(
        max_digits=10, decimal_places=2, default=Decimal("0.00")
    )
    quoted_price = models.DecimalField(
        max_digits=10, decimal_places=2, null=True, blank=True, default=None
    )
    status = models.CharField(
        max_length=20,
        choices=OrderStatus.choices,
        default=OrderStatus.PENDING,
    )

    class Meta:
        db_table = "orders"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["status"], name="orders_status_idx"),
            models.Index(fields=["user", "-created_at"], name="orders_user_created_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=Q(final_amount__gte=Decimal("0")),
                name="orders_final_amount_non_negative",
            ),
            models.CheckConstraint(
                condition=Q(discount_applied__gte=Decimal("0")),
                name="orders_discount_applied_non_negative",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.model_name} [{self.status}] {self.final_amount}"

    @property
    def is_active(self) -> bool:
        return self.status in ACTIVE_STATES

    @property
    def is_collection(self) -> bool:
        return self.fulfillment_mode == FulfillmentMode.COLLECTION

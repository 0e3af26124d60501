"""Discount code model."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from django.db import models
from django.db.models import F, Q

from modules.core.models import BaseModel
from modules.discounts.constants import CODE_MAX_LENGTH, UNLIMITED_USES, DiscountType


class DiscountCode(BaseModel):
    """A redeemable code worth a percentage or a fixed amount off an order.

    ``uses`` only ever moves through the repository's conditional increment,
    which is what keeps it at or below ``max_uses`` under concurrency.
    """

    code = models.CharField(max_length=CODE_MAX_LENGTH, unique=True)
    description = models.CharField(max_length=255, blank=True, default="")
    discount_type = models.CharField(max_length=10, choices=DiscountType.choices)
    discount_value = models.DecimalField(max_digits=10, decimal_places=2)
    active = models.BooleanField(default=True)
    expires_at = models.DateTimeField(null=True, blank=True, default=None)
    max_uses = models.IntegerField(default=UNLIMITED_USES)
    uses = models.PositiveIntegerField(default=0)

    class Meta:
        db_table = "discount_codes"
        ordering = ["-created_at"]
        constraints = [
            models.CheckConstraint(
                condition=Q(max_uses__gte=UNLIMITED_USES),
                name="discount_codes_max_uses_valid",
            ),
            models.CheckConstraint(
                condition=Q(max_uses=UNLIMITED_USES) | Q(uses__lte=F("max_uses")),
                name="discount_codes_uses_within_limit",
            ),
            models.CheckConstraint(
                condition=Q(discount_value__gte=Decimal("0")),
                name="discount_codes_value_non_negative",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.code} ({self.discount_type} {self.discount_value})"

    @property
    def is_unlimited(self) -> bool:
        return self.max_uses == UNLIMITED_USES

    @property
    def is_exhausted(self) -> bool:
        return not self.is_unlimited and self.uses >= self.max_uses

    def is_redeemable_at(self, now: datetime) -> bool:
        """Active and not yet expired (usage limits are checked separately)."""
        return self.active and (self.expires_at is None or self.expires_at > now)

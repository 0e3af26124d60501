"""Discount code constants."""

from django.db import models


class DiscountType(models.TextChoices):
    PERCENT = "percent", "Percentage"
    FIXED = "fixed", "Fixed amount"


# ``max_uses`` sentinel for codes that can be redeemed any number of times.
UNLIMITED_USES = -1

CODE_MAX_LENGTH = 64
MAX_PERCENT = 100

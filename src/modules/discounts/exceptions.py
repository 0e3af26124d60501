"""Discount domain exceptions.

Raised by ``DiscountService``; the API layer translates them into HTTP
responses.  Order submission never sees these: an unusable code there simply
means no discount.
"""

from __future__ import annotations

from modules.core.exceptions import InvalidInput


class DiscountCodeNotFound(Exception):
    """No active, unexpired code matches (exact, case-sensitive)."""


class DiscountUsageExhausted(Exception):
    """The code exists and is active but has reached ``max_uses``."""


class DiscountCodeAlreadyExists(Exception):
    """Another discount code already uses this string."""


class InvalidDiscountData(InvalidInput):
    """Discount code payload failed validation."""

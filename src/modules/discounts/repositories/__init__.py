"""Discount code repositories package."""

from __future__ import annotations

from modules.core.storage import use_memory_storage
from modules.discounts.repositories.django_repository import (
    DiscountCodeDjangoRepository,
)
from modules.discounts.repositories.interfaces import IDiscountCodeRepository
from modules.discounts.repositories.memory_repository import (
    DiscountCodeInMemoryRepository,
)

# One shared store per process; the memory backend is single-worker only.
_memory_repository = DiscountCodeInMemoryRepository()


def get_discount_repository() -> IDiscountCodeRepository:
    """Repository for the configured ``STORAGE_BACKEND``."""
    if use_memory_storage():
        return _memory_repository
    return DiscountCodeDjangoRepository()


__all__ = [
    "DiscountCodeDjangoRepository",
    "DiscountCodeInMemoryRepository",
    "IDiscountCodeRepository",
    "get_discount_repository",
]

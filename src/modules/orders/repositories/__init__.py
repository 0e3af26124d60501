"""Order repositories package."""

from __future__ import annotations

from modules.core.storage import use_memory_storage
from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.orders.repositories.interfaces import IOrderRepository
from modules.orders.repositories.memory_repository import OrderInMemoryRepository

# One shared store per process; the memory backend is single-worker only.
_memory_repository = OrderInMemoryRepository()


def get_order_repository() -> IOrderRepository:
    """Repository for the configured ``STORAGE_BACKEND``."""
    if use_memory_storage():
        return _memory_repository
    return OrderDjangoRepository()


__all__ = [
    "IOrderRepository",
    "OrderDjangoRepository",
    "OrderInMemoryRepository",
    "get_order_repository",
]

"""In-memory Order repository.

Process-local fallback used when ``STORAGE_BACKEND=memory``.  Orders are
unsaved ``Order`` instances held in a dict guarded by one lock; they never
reach the database.
"""

from __future__ import annotations

import threading
from typing import Any, Callable, Dict, List, Optional

import structlog
from django.utils import timezone

from modules.orders.models import Order
from modules.orders.repositories.interfaces import IOrderRepository

logger = structlog.get_logger(__name__)


def _matches(order: Order, filters: Dict[str, Any]) -> bool:
    checks: Dict[str, Callable[[Any], bool]] = {
        "user_id": lambda value: order.user_id == value,
        "status": lambda value: order.status == value,
        "status__in": lambda value: order.status in value,
    }
    for key, value in filters.items():
        if key not in checks:
            raise ValueError(f"Unsupported order filter {key!r}.")
        if not checks[key](value):
            return False
    return True


class OrderInMemoryRepository(IOrderRepository):
    """Thread-safe dictionary-backed order store."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._rows: Dict[str, Order] = {}

    def create(self, data: Dict[str, Any]) -> Order:
        order = Order(**data)
        now = timezone.now()
        order.created_at = now
        order.updated_at = now
        with self._lock:
            self._rows[str(order.id)] = order
        logger.info("order.inserted", order_id=str(order.id))
        return order

    def update(self, id: str, data: Dict[str, Any]) -> Optional[Order]:
        with self._lock:
            order = self._rows.get(str(id))
            if order is None:
                return None
            for field, value in data.items():
                setattr(order, field, value)
            order.updated_at = timezone.now()
        logger.info("order.updated", order_id=str(id), fields=sorted(data))
        return order

    def get_by_id(self, id: str) -> Optional[Order]:
        with self._lock:
            return self._rows.get(str(id))

    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[Order]:
        with self._lock:
            rows = list(self._rows.values())
        if filters:
            rows = [row for row in rows if _matches(row, filters)]
        return sorted(rows, key=lambda row: row.created_at, reverse=True)

    def delete(self, id: str) -> bool:
        with self._lock:
            removed = self._rows.pop(str(id), None)
        if removed is None:
            return False
        logger.info("order.deleted", order_id=str(id))
        return True

    def delete_for_user(self, user_id: int) -> int:
        with self._lock:
            doomed = [key for key, row in self._rows.items() if row.user_id == user_id]
            for key in doomed:
                del self._rows[key]
        logger.info("order.deleted_for_user", user_id=user_id, count=len(doomed))
        return len(doomed)

"""In-memory discount code repository.

Process-local fallback used when ``STORAGE_BACKEND=memory``.  A single lock
serialises every read-modify-write, so ``increment_uses`` has the same
compare-and-increment semantics as the SQL ``UPDATE ... WHERE``.
"""

from __future__ import annotations

import threading
from datetime import datetime
from typing import Any, Dict, List, Optional
from uuid import UUID

import structlog
from django.utils import timezone

from modules.discounts.models import DiscountCode
from modules.discounts.repositories.interfaces import IDiscountCodeRepository

logger = structlog.get_logger(__name__)


class DiscountCodeInMemoryRepository(IDiscountCodeRepository):
    """Thread-safe dictionary-backed discount code store."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._rows: Dict[str, DiscountCode] = {}

    def get_by_id(self, id: str) -> Optional[DiscountCode]:
        with self._lock:
            return self._rows.get(str(id))

    def get_by_code(self, code: str) -> Optional[DiscountCode]:
        with self._lock:
            for discount in self._rows.values():
                if discount.code == code:
                    return discount
        return None

    def find_redeemable(self, code: str, now: datetime) -> Optional[DiscountCode]:
        discount = self.get_by_code(code)
        if discount is None or not discount.is_redeemable_at(now):
            return None
        return discount

    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[DiscountCode]:
        with self._lock:
            rows = list(self._rows.values())
        if filters:
            rows = [
                row
                for row in rows
                if all(getattr(row, key) == value for key, value in filters.items())
            ]
        return sorted(rows, key=lambda row: row.created_at, reverse=True)

    def create(self, data: Dict[str, Any]) -> DiscountCode:
        discount = DiscountCode(**data)
        now = timezone.now()
        discount.created_at = now
        discount.updated_at = now
        with self._lock:
            self._rows[str(discount.id)] = discount
        logger.info(
            "discount.created", discount_code_id=str(discount.id), code=discount.code
        )
        return discount

    def increment_uses(self, id: UUID) -> int:
        with self._lock:
            discount = self._rows.get(str(id))
            if discount is None or discount.is_exhausted:
                affected = 0
            else:
                discount.uses += 1
                discount.updated_at = timezone.now()
                affected = 1
        logger.info(
            "discount.increment_attempted", discount_code_id=str(id), claimed=affected
        )
        return affected

    def delete(self, id: str) -> bool:
        with self._lock:
            removed = self._rows.pop(str(id), None)
        if removed is None:
            return False
        logger.info("discount.deleted", discount_code_id=str(id))
        return True

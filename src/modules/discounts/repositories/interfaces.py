"""Discount code repository interface.

Extends ``IRepository[DiscountCode]`` with the look-ups pricing needs and
with the conditional usage increment that enforces ``max_uses``.
"""

from __future__ import annotations

from abc import abstractmethod
from datetime import datetime
from typing import TYPE_CHECKING, Optional
from uuid import UUID

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.discounts.models import DiscountCode


class IDiscountCodeRepository(IRepository["DiscountCode"]):
    """Repository contract for discount codes."""

    @abstractmethod
    def get_by_code(self, code: str) -> Optional[DiscountCode]:
        """Exact, case-sensitive match regardless of active/expiry state."""

    @abstractmethod
    def find_redeemable(self, code: str, now: datetime) -> Optional[DiscountCode]:
        """Exact, case-sensitive match that is active and unexpired at ``now``.

        Usage limits are *not* checked here; callers inspect ``uses`` /
        ``max_uses`` on the returned entity.
        """

    @abstractmethod
    def increment_uses(self, id: UUID) -> int:
        """Atomically bump ``uses`` by one if the ceiling allows it.

        Equivalent to ``UPDATE ... SET uses = uses + 1 WHERE id = :id AND
        (max_uses = -1 OR uses < max_uses)``.  Returns the number of rows
        changed: ``1`` when the use was claimed, ``0`` when the code is
        exhausted (or gone).
        """

"""Order repository interface.

Extends ``IRepository[Order]`` with field updates, per-user look-ups and
bulk removal of a user's orders.

The Service Layer depends exclusively on this contract (DIP).
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.orders.models import Order


class IOrderRepository(IRepository["Order"]):
    """Repository contract for orders.

    ``list`` understands these filter keys:

    - ``user_id``: orders placed by one user
    - ``status``: exact status
    - ``status__in``: any of several statuses
    """

    @abstractmethod
    def create(self, data: Dict[str, Any]) -> Order:
        """Insert an order row; the storage assigns ``id`` and ``created_at``."""

    @abstractmethod
    def update(self, id: str, data: Dict[str, Any]) -> Optional[Order]:
        """Set the given fields (``None`` values included).

        Returns the updated order, or ``None`` if it does not exist.
        """

    @abstractmethod
    def delete_for_user(self, user_id: int) -> int:
        """Remove every order of ``user_id``; returns how many were removed."""

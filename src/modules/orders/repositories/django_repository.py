"""Django ORM implementation of the Order repository.

Satisfies ``IOrderRepository`` using Django's QuerySet API.
Updates lock the row with ``select_for_update()`` so concurrent admin
actions on the same order serialise.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import structlog
from django.core.exceptions import ValidationError
from django.db import transaction

from modules.orders.models import Order
from modules.orders.repositories.interfaces import IOrderRepository

logger = structlog.get_logger(__name__)


class OrderDjangoRepository(IOrderRepository):
    """Concrete Order repository backed by Django ORM."""

    # ------------------------------------------------------------------
    # Create / Update
    # ------------------------------------------------------------------

    def create(self, data: Dict[str, Any]) -> Order:
        order = Order.objects.create(**data)
        logger.info("order.inserted", order_id=str(order.id))
        return order

    @transaction.atomic
    def update(self, id: str, data: Dict[str, Any]) -> Optional[Order]:
        try:
            order = Order.objects.select_for_update().filter(id=id).first()
        except (ValueError, ValidationError):
            return None
        if not order:
            return None

        for field, value in data.items():
            setattr(order, field, value)
        order.save(update_fields=list(data))
        logger.info("order.updated", order_id=str(id), fields=sorted(data))
        return order

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def get_by_id(self, id: str) -> Optional[Order]:
        """Returns ``None`` for non-existent or malformed IDs."""
        try:
            return Order.objects.select_related("user").filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[Order]:
        queryset = Order.objects.select_related("user")
        if filters:
            queryset = queryset.filter(**filters)
        return list(queryset)

    # ------------------------------------------------------------------
    # Delete
    # ------------------------------------------------------------------

    @transaction.atomic
    def delete(self, id: str) -> bool:
        order = self.get_by_id(id)
        if not order:
            return False
        order.delete()
        logger.info("order.deleted", order_id=str(id))
        return True

    def delete_for_user(self, user_id: int) -> int:
        count, _ = Order.objects.filter(user_id=user_id).delete()
        logger.info("order.deleted_for_user", user_id=user_id, count=count)
        return count

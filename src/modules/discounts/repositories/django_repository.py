"""Django ORM implementation of the discount code repository."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional
from uuid import UUID

import structlog
from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import F, Q
from django.utils import timezone

from modules.discounts.constants import UNLIMITED_USES
from modules.discounts.models import DiscountCode
from modules.discounts.repositories.interfaces import IDiscountCodeRepository

logger = structlog.get_logger(__name__)


class DiscountCodeDjangoRepository(IDiscountCodeRepository):
    """Concrete discount code repository backed by Django ORM."""

    def get_by_id(self, id: str) -> Optional[DiscountCode]:
        try:
            return DiscountCode.objects.filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def get_by_code(self, code: str) -> Optional[DiscountCode]:
        discount = DiscountCode.objects.filter(code=code).first()
        # MySQL's default collation compares case-insensitively
        if discount is None or discount.code != code:
            return None
        return discount

    def find_redeemable(self, code: str, now: datetime) -> Optional[DiscountCode]:
        discount = (
            DiscountCode.objects.filter(code=code, active=True)
            .filter(Q(expires_at__isnull=True) | Q(expires_at__gt=now))
            .first()
        )
        if discount is None or discount.code != code:
            return None
        return discount

    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[DiscountCode]:
        queryset = DiscountCode.objects.all()
        if filters:
            queryset = queryset.filter(**filters)
        return list(queryset)

    def create(self, data: Dict[str, Any]) -> DiscountCode:
        discount = DiscountCode.objects.create(**data)
        logger.info(
            "discount.created", discount_code_id=str(discount.id), code=discount.code
        )
        return discount

    @transaction.atomic
    def increment_uses(self, id: UUID) -> int:
        """Conditional ``UPDATE`` in its own savepoint.

        A failure here rolls back only the savepoint, leaving any enclosing
        order transaction usable.
        """
        affected = (
            DiscountCode.objects.filter(id=id)
            .filter(Q(max_uses=UNLIMITED_USES) | Q(uses__lt=F("max_uses")))
            .update(uses=F("uses") + 1, updated_at=timezone.now())
        )
        logger.info(
            "discount.increment_attempted", discount_code_id=str(id), claimed=affected
        )
        return affected

    @transaction.atomic
    def delete(self, id: str) -> bool:
        discount = self.get_by_id(id)
        if not discount:
            return False
        discount.delete()
        logger.info("discount.deleted", discount_code_id=str(id))
        return True

"""Discount service layer (Use Cases).

Resolution rules for a code string:
- exact, case-sensitive match on an active code whose ``expires_at`` is
  null or in the future, otherwise "not found";
- a finite ``max_uses`` already reached means "exhausted";
- anything else yields a :class:`DiscountDescriptor` pricing can apply.

``resolve_discount`` folds both failures into ``None`` (order submission
never blocks a sale on a bad code); ``lookup_discount`` raises distinct
exceptions so the storefront can tell the customer which one happened.
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Any, Dict, List, Mapping, Optional, Union
from uuid import UUID

import structlog
from django.db import IntegrityError, transaction
from django.utils import timezone
from pydantic import ValidationError as PydanticValidationError

from modules.discounts.dtos import CreateDiscountCodeDTO, DiscountDescriptor
from modules.discounts.exceptions import (
    DiscountCodeAlreadyExists,
    DiscountCodeNotFound,
    DiscountUsageExhausted,
    InvalidDiscountData,
)

if TYPE_CHECKING:
    from modules.discounts.models import DiscountCode
    from modules.discounts.repositories.interfaces import IDiscountCodeRepository

logger = structlog.get_logger(__name__)


class DiscountService:
    """Application service for discount code use-cases.

    Receives its repository via constructor injection (DIP).
    """

    def __init__(self, repository: IDiscountCodeRepository) -> None:
        self._repo = repository

    # ------------------------------------------------------------------
    # Resolution
    # ------------------------------------------------------------------

    def lookup_discount(
        self, code: str, now: Optional[datetime] = None
    ) -> DiscountDescriptor:
        """Resolve ``code`` or say why it cannot be used.

        Raises:
            DiscountCodeNotFound: no active, unexpired code matches.
            DiscountUsageExhausted: the code has reached ``max_uses``.
        """
        now = now or timezone.now()
        discount = self._repo.find_redeemable(code, now)
        if discount is None:
            raise DiscountCodeNotFound(f"Discount code {code!r} is invalid or expired.")
        if discount.is_exhausted:
            raise DiscountUsageExhausted(
                f"Discount code {code!r} has reached its usage limit."
            )
        return DiscountDescriptor.from_entity(discount)

    def resolve_discount(
        self, code: Optional[str], now: Optional[datetime] = None
    ) -> Optional[DiscountDescriptor]:
        """Like :meth:`lookup_discount` but returns ``None`` instead of raising."""
        if not code:
            return None
        try:
            return self.lookup_discount(code, now)
        except DiscountCodeNotFound:
            logger.info("discount.not_found", code=code)
        except DiscountUsageExhausted:
            logger.info("discount.usage_exhausted", code=code)
        return None

    def claim_use(self, discount_id: UUID) -> bool:
        """Record one redemption; ``False`` if the ceiling was already reached."""
        return self._repo.increment_uses(discount_id) == 1

    # ------------------------------------------------------------------
    # Administration
    # ------------------------------------------------------------------

    @transaction.atomic
    def create_discount(
        self, data: Union[CreateDiscountCodeDTO, Mapping[str, Any]]
    ) -> DiscountCode:
        """Create a discount code.

        Raises:
            InvalidDiscountData: payload failed validation.
            DiscountCodeAlreadyExists: the code string is taken.
        """
        if isinstance(data, CreateDiscountCodeDTO):
            dto = data
        else:
            try:
                dto = CreateDiscountCodeDTO.model_validate(dict(data))
            except PydanticValidationError as exc:
                raise InvalidDiscountData.from_pydantic(
                    exc, "Invalid discount code data."
                ) from exc

        if self._repo.get_by_code(dto.code) is not None:
            raise DiscountCodeAlreadyExists(f"Discount code {dto.code!r} already exists.")

        try:
            with transaction.atomic():
                discount = self._repo.create(dto.model_dump())
        except IntegrityError as exc:
            raise DiscountCodeAlreadyExists(
                f"Discount code {dto.code!r} already exists."
            ) from exc
        return discount

    def delete_discount(self, discount_id: str) -> None:
        """Raises ``DiscountCodeNotFound`` if there is nothing to delete."""
        if not self._repo.delete(discount_id):
            raise DiscountCodeNotFound(f"Discount code {discount_id} not found.")

    def get_discount(self, discount_id: str) -> DiscountCode:
        discount = self._repo.get_by_id(discount_id)
        if discount is None:
            raise DiscountCodeNotFound(f"Discount code {discount_id} not found.")
        return discount

    def list_discounts(self, filters: Optional[Dict[str, Any]] = None) -> List[DiscountCode]:
        return self._repo.list(filters)

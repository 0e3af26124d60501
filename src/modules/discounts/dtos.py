"""Discount DTOs for the Service Layer.

Framework-agnostic data transfer objects using Pydantic v2.
DTOs are immutable (``frozen=True``).

- ``DiscountTypeEnum``: framework-agnostic discount kinds.
- ``CreateDiscountCodeDTO``: input for the admin "create code" use case.
- ``DiscountDescriptor``: a code that is currently redeemable, as seen by
  pricing.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from enum import StrEnum
from typing import TYPE_CHECKING, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from modules.discounts.constants import CODE_MAX_LENGTH, MAX_PERCENT, UNLIMITED_USES

if TYPE_CHECKING:
    from modules.discounts.models import DiscountCode


class DiscountTypeEnum(StrEnum):
    PERCENT = "percent"
    FIXED = "fixed"


# ---------------------------------------------------------------------------
# Input DTOs
# ---------------------------------------------------------------------------


class CreateDiscountCodeDTO(BaseModel):
    """Immutable DTO for discount code creation.

    Validates:
    - ``code`` is non-blank after trimming surrounding whitespace (case is
      preserved, lookups are case-sensitive).
    - ``discount_value`` is non-negative, and at most 100 for percentages.
    - ``max_uses`` is ``-1`` (unlimited) or a non-negative ceiling.
    """

    model_config = ConfigDict(frozen=True)

    code: str = Field(max_length=CODE_MAX_LENGTH)
    description: str = Field(default="", max_length=255)
    discount_type: DiscountTypeEnum
    discount_value: Decimal = Field(ge=0, max_digits=10, decimal_places=2)
    active: bool = True
    expires_at: Optional[datetime] = None
    max_uses: int = Field(default=UNLIMITED_USES, ge=UNLIMITED_USES)

    @field_validator("code")
    @classmethod
    def code_must_not_be_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Discount code must not be blank.")
        return v

    @model_validator(mode="after")
    def percent_within_range(self):
        if (
            self.discount_type == DiscountTypeEnum.PERCENT
            and self.discount_value > MAX_PERCENT
        ):
            raise ValueError("Percentage discounts cannot exceed 100.")
        return self


# ---------------------------------------------------------------------------
# Output DTOs
# ---------------------------------------------------------------------------


class DiscountDescriptor(BaseModel):
    """A discount code that passed resolution and may be applied to a price."""

    model_config = ConfigDict(frozen=True)

    id: UUID
    code: str
    discount_type: DiscountTypeEnum
    discount_value: Decimal
    max_uses: int
    uses: int
    expires_at: Optional[datetime] = None

    @classmethod
    def from_entity(cls, discount: DiscountCode) -> DiscountDescriptor:
        return cls(
            id=discount.id,
            code=discount.code,
            discount_type=discount.discount_type,
            discount_value=discount.discount_value,
            max_uses=discount.max_uses,
            uses=discount.uses,
            expires_at=discount.expires_at,
        )

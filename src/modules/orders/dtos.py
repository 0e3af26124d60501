"""Order DTOs for the Service Layer.

Framework-agnostic data transfer objects using Pydantic v2.
These are the contracts between the API layer and the Service layer.
DTOs are immutable (``frozen=True``).

- ``OrderDetailsDTO``: what a print costs depends on (quote input).
- ``SubmitOrderDTO``: customer order submission (details + model name,
  description and the price the client displayed).
- ``AdminCreateOrderDTO``: admin-entered order with a hand-set amount.
- ``AmountOverrideDTO``: admin override of ``final_amount`` or
  ``discount_applied``.
- ``OrderQuote``: output of the quote use case.
"""

from __future__ import annotations

from decimal import Decimal
from enum import StrEnum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from modules.orders.constants import DELEGATED_MATERIAL, DELEGATED_WEIGHT_GRAMS
from modules.orders.pricing import PricingInput

# Storefront clients send "Collection" as a shipping location rather than
# setting the fulfilment mode.
COLLECTION_LOCATION_ALIAS = "Collection"


class DeliveryMethodEnum(StrEnum):
    STANDARD = "standard"
    FAST = "fast"
    EXPRESS = "express"


class FulfillmentModeEnum(StrEnum):
    DELIVERY = "delivery"
    COLLECTION = "collection"


class ShippingLocationEnum(StrEnum):
    BARROW = "Barrow"
    ROOSE = "Roose"
    ASKAM = "Askam"
    DALTON = "Dalton"
    ULVERSTON = "Ulverston"


def _fold_collection_alias(data: Any) -> Any:
    if isinstance(data, dict) and data.get("shipping_location") == COLLECTION_LOCATION_ALIAS:
        data = {
            **data,
            "shipping_location": None,
            "fulfillment_mode": FulfillmentModeEnum.COLLECTION,
        }
    return data


def _strip_required(value: str, field_name: str) -> str:
    value = value.strip()
    if not value:
        raise ValueError(f"{field_name} must not be blank.")
    return value


# ---------------------------------------------------------------------------
# Input DTOs
# ---------------------------------------------------------------------------


class OrderDetailsDTO(BaseModel):
    """Immutable DTO describing what is being printed and how it ships.

    Validates:
    - ``material`` and a positive ``weight_grams`` unless sizing is
      delegated to the shop (then both are ignored).
    - ``shipping_location`` unless the order is collected in person.
    - ``delivery_method`` and ``shipping_location`` come from the known
      sets; ``material`` is free text (unknown codes price at the default
      rate).
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    material: Optional[str] = Field(default=None, max_length=20)
    weight_grams: Optional[int] = None
    delivery_method: DeliveryMethodEnum
    fulfillment_mode: FulfillmentModeEnum = FulfillmentModeEnum.DELIVERY
    shipping_location: Optional[ShippingLocationEnum] = None
    delegate_sizing: bool = False
    discount_code: Optional[str] = None

    @model_validator(mode="before")
    @classmethod
    def collection_alias(cls, data: Any) -> Any:
        return _fold_collection_alias(data)

    @field_validator("material", "discount_code")
    @classmethod
    def blank_to_none(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        return v.strip() or None

    @model_validator(mode="after")
    def required_unless_delegated(self):
        if not self.delegate_sizing:
            if self.material is None:
                raise ValueError("material is required unless sizing is delegated.")
            if self.weight_grams is None or self.weight_grams <= 0:
                raise ValueError(
                    "weight_grams must be a positive number unless sizing is delegated."
                )
        if not self.is_collection and self.shipping_location is None:
            raise ValueError("shipping_location is required for delivery orders.")
        return self

    @property
    def is_collection(self) -> bool:
        return self.fulfillment_mode == FulfillmentModeEnum.COLLECTION

    def pricing_input(self) -> PricingInput:
        """Normalised pricing inputs (delegated sizing, collection applied)."""
        return PricingInput(
            material=DELEGATED_MATERIAL if self.delegate_sizing else self.material,
            weight_grams=(
                DELEGATED_WEIGHT_GRAMS if self.delegate_sizing else self.weight_grams
            ),
            delivery_method=self.delivery_method,
            fulfillment_mode=self.fulfillment_mode,
            shipping_location=None if self.is_collection else self.shipping_location,
            delegate_sizing=self.delegate_sizing,
        )


class SubmitOrderDTO(OrderDetailsDTO):
    """Immutable DTO for a customer order submission.

    ``quoted_price`` (sent as ``price``) is the amount the client displayed.
    It is required but informational: the server reprices the order.
    """

    user_id: int
    model_name: str = Field(max_length=255)
    description: str = ""
    quoted_price: Decimal = Field(alias="price", ge=0, decimal_places=2)

    @field_validator("model_name")
    @classmethod
    def model_name_must_not_be_blank(cls, v: str) -> str:
        return _strip_required(v, "model_name")

    def summary(self) -> str:
        """Human-readable line used when the customer leaves no description."""
        pricing = self.pricing_input()
        size = "sizing delegated" if self.delegate_sizing else f"{pricing.weight_grams}g"
        mode = "Collection" if self.is_collection else "Delivery"
        text = f"3D Print: {self.model_name} - {pricing.material} - {size} ({mode})"
        if self.discount_code:
            text += f" | CODE: {self.discount_code}"
        return text


class AdminCreateOrderDTO(BaseModel):
    """Immutable DTO for an order entered by an admin on a customer's behalf.

    Restricted field set: no discount code, no sizing delegation.  The
    admin's ``amount`` becomes the final amount as-is.
    """

    model_config = ConfigDict(frozen=True)

    user_id: int
    model_name: str = Field(max_length=255)
    material: str = Field(max_length=20)
    weight_grams: int = Field(ge=0)
    delivery_method: DeliveryMethodEnum
    fulfillment_mode: FulfillmentModeEnum = FulfillmentModeEnum.DELIVERY
    shipping_location: Optional[ShippingLocationEnum] = None
    amount: Decimal = Field(ge=0, decimal_places=2)
    description: str = ""

    @model_validator(mode="before")
    @classmethod
    def collection_alias(cls, data: Any) -> Any:
        return _fold_collection_alias(data)

    @field_validator("model_name", "material")
    @classmethod
    def must_not_be_blank(cls, v: str, info) -> str:
        return _strip_required(v, info.field_name)

    @model_validator(mode="after")
    def location_required_for_delivery(self):
        if (
            self.fulfillment_mode == FulfillmentModeEnum.DELIVERY
            and self.shipping_location is None
        ):
            raise ValueError("shipping_location is required for delivery orders.")
        return self

    def pricing_input(self) -> PricingInput:
        collection = self.fulfillment_mode == FulfillmentModeEnum.COLLECTION
        return PricingInput(
            material=self.material,
            weight_grams=self.weight_grams,
            delivery_method=self.delivery_method,
            fulfillment_mode=self.fulfillment_mode,
            shipping_location=None if collection else self.shipping_location,
        )


class AmountOverrideDTO(BaseModel):
    """Admin-entered money amount (pence precision, never negative)."""

    model_config = ConfigDict(frozen=True)

    amount: Decimal = Field(ge=0, max_digits=10, decimal_places=2)


# ---------------------------------------------------------------------------
# Output DTOs
# ---------------------------------------------------------------------------


class OrderQuote(BaseModel):
    """Authoritative price preview for an order that has not been placed."""

    model_config = ConfigDict(frozen=True)

    base_cost: Decimal
    discount_applied: Decimal
    final_amount: Decimal
    discount_code: Optional[str] = None

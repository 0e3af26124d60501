"""Order pricing: price table, base cost and discount application.

Pure functions over ``Decimal``; nothing here touches storage.  The quote
endpoint and order submission both price through :func:`price_order`, so
the amount a customer is shown is the amount that gets persisted.

Rounding is half-away-from-zero to whole pence (``ROUND_HALF_UP`` in
``decimal`` terms).  The final amount is computed from the unrounded
discount and rounded once; the reported discount is rounded separately.
``base_cost`` is kept exact.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from types import MappingProxyType
from typing import Dict, Mapping, Optional, Protocol

from modules.discounts.constants import DiscountType
from modules.orders.constants import (
    DeliveryMethod,
    FulfillmentMode,
    Material,
    ShippingLocation,
)

ZERO = Decimal("0")
CURRENCY_QUANTUM = Decimal("0.01")

# ---------------------------------------------------------------------------
# Price table (per-process constants, read-only)
# ---------------------------------------------------------------------------

MATERIAL_RATES: Mapping[str, Decimal] = MappingProxyType(
    {
        Material.PLA.value: Decimal("0.015"),
        Material.PBSE.value: Decimal("0.03"),
        Material.ABS.value: Decimal("0.05"),
    }
)

# Rate charged for a material code missing from MATERIAL_RATES.  Unknown
# codes are priced rather than rejected, so a typo in a client's material
# value is billed at the premium rate instead of failing.
DEFAULT_MATERIAL_RATE = Decimal("0.05")

DELIVERY_SURCHARGES: Mapping[str, Decimal] = MappingProxyType(
    {
        DeliveryMethod.STANDARD.value: Decimal("0.00"),
        DeliveryMethod.FAST.value: Decimal("2.00"),
        DeliveryMethod.EXPRESS.value: Decimal("3.50"),
    }
)

SHIPPING_SURCHARGES: Mapping[str, Decimal] = MappingProxyType(
    {
        ShippingLocation.BARROW.value: Decimal("0.00"),
        ShippingLocation.ROOSE.value: Decimal("1.50"),
        ShippingLocation.ASKAM.value: Decimal("4.00"),
        ShippingLocation.DALTON.value: Decimal("4.60"),
        ShippingLocation.ULVERSTON.value: Decimal("6.00"),
    }
)


class DiscountTerms(Protocol):
    """Anything carrying a discount kind and value (e.g. ``DiscountDescriptor``)."""

    discount_type: str
    discount_value: Decimal


@dataclass(frozen=True)
class PricingInput:
    material: Optional[str]
    weight_grams: int
    delivery_method: Optional[str]
    fulfillment_mode: str = FulfillmentMode.DELIVERY
    shipping_location: Optional[str] = None
    delegate_sizing: bool = False

    @property
    def is_collection(self) -> bool:
        return self.fulfillment_mode == FulfillmentMode.COLLECTION


@dataclass(frozen=True)
class PriceBreakdown:
    base_cost: Decimal
    discount_applied: Decimal
    final_amount: Decimal


def round_currency(amount: Decimal) -> Decimal:
    """Round to pence, halves away from zero (2.345 -> 2.35)."""
    return Decimal(amount).quantize(CURRENCY_QUANTUM, rounding=ROUND_HALF_UP)


def is_known_material(material: Optional[str]) -> bool:
    """``False`` when ``material`` would be billed at DEFAULT_MATERIAL_RATE."""
    return str(material) in MATERIAL_RATES


def material_rate(material: Optional[str]) -> Decimal:
    return MATERIAL_RATES.get(str(material), DEFAULT_MATERIAL_RATE)


def delivery_surcharge(method: Optional[str]) -> Decimal:
    return DELIVERY_SURCHARGES.get(str(method), ZERO)


def shipping_surcharge(location: Optional[str]) -> Decimal:
    return SHIPPING_SURCHARGES.get(str(location), ZERO)


def compute_base_cost(inputs: PricingInput) -> Decimal:
    """Pre-discount cost of an order.

    ============================  ======================================
    delegated sizing, collection  0
    collection                    weight x material rate
    delegated sizing              delivery + shipping surcharges
    otherwise                     weight x rate + delivery + shipping
    ============================  ======================================

    Raises:
        ValueError: ``weight_grams`` is negative.
    """
    if inputs.weight_grams < 0:
        raise ValueError("weight_grams must not be negative.")

    if inputs.delegate_sizing and inputs.is_collection:
        return ZERO
    if inputs.is_collection:
        return inputs.weight_grams * material_rate(inputs.material)

    surcharges = delivery_surcharge(inputs.delivery_method) + shipping_surcharge(
        inputs.shipping_location
    )
    if inputs.delegate_sizing:
        return surcharges
    return inputs.weight_grams * material_rate(inputs.material) + surcharges


def apply_discount(
    base_cost: Decimal, discount: Optional[DiscountTerms] = None
) -> PriceBreakdown:
    """Apply ``discount`` to ``base_cost``.

    A fixed discount larger than the cost is recorded at face value while
    the final amount floors at zero.
    """
    if discount is None:
        return PriceBreakdown(
            base_cost=base_cost,
            discount_applied=round_currency(ZERO),
            final_amount=round_currency(base_cost),
        )

    value = Decimal(discount.discount_value)
    if discount.discount_type == DiscountType.PERCENT:
        raw_discount = base_cost * value / 100
    elif discount.discount_type == DiscountType.FIXED:
        raw_discount = value
    else:
        raise ValueError(f"Unknown discount type {discount.discount_type!r}.")

    return PriceBreakdown(
        base_cost=base_cost,
        discount_applied=round_currency(raw_discount),
        final_amount=round_currency(max(ZERO, base_cost - raw_discount)),
    )


def price_order(
    inputs: PricingInput, discount: Optional[DiscountTerms] = None
) -> PriceBreakdown:
    return apply_discount(compute_base_cost(inputs), discount)


def price_table() -> Dict[str, object]:
    """The price table as plain strings, for clients that render prices."""
    return {
        "currency": "GBP",
        "materials": {k: str(v) for k, v in MATERIAL_RATES.items()},
        "default_material_rate": str(DEFAULT_MATERIAL_RATE),
        "delivery_methods": {k: str(v) for k, v in DELIVERY_SURCHARGES.items()},
        "shipping_locations": {k: str(v) for k, v in SHIPPING_SURCHARGES.items()},
    }

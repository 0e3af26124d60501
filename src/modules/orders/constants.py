"""Order domain constants.

Status choices for the order life-cycle and the enumerations a print order
is described by (material, delivery speed, fulfilment, shipping zone).
"""

from django.db import models


class OrderStatus(models.TextChoices):
    PENDING = "pending", "Pending"
    CONFIRMED = "confirmed", "Confirmed"
    COMPLETED = "completed", "Completed"
    CANCELLED = "cancelled", "Cancelled"


# Orders a customer still has "in flight".
ACTIVE_STATES: frozenset[str] = frozenset({OrderStatus.PENDING, OrderStatus.CONFIRMED})

CANCELLABLE_STATES: frozenset[str] = frozenset(
    {OrderStatus.PENDING, OrderStatus.CONFIRMED}
)


class Material(models.TextChoices):
    PLA = "pla", "PLA"
    PBSE = "pbse", "PBS-E"
    ABS = "abs", "ABS"


class DeliveryMethod(models.TextChoices):
    STANDARD = "standard", "Standard"
    FAST = "fast", "Fast"
    EXPRESS = "express", "Express"


class FulfillmentMode(models.TextChoices):
    DELIVERY = "delivery", "Delivery"
    COLLECTION = "collection", "Collection"


class ShippingLocation(models.TextChoices):
    BARROW = "Barrow", "Barrow-in-Furness"
    ROOSE = "Roose", "Roose"
    ASKAM = "Askam", "Askam-in-Furness"
    DALTON = "Dalton", "Dalton-in-Furness"
    ULVERSTON = "Ulverston", "Ulverston"


# When the customer lets the shop size the print, the order is recorded as
# PLA at 0 g and the weight is settled later by an admin amount override.
DELEGATED_MATERIAL = Material.PLA
DELEGATED_WEIGHT_GRAMS = 0

# Query values accepted by the "my orders" endpoint.
ORDER_STATE_ACTIVE = "active"
ORDER_STATE_COMPLETED = "completed"

ORDER_STATE_CHOICES = (
    (ORDER_STATE_ACTIVE, "Active"),
    (ORDER_STATE_COMPLETED, "Completed"),
)

# Repository lookups each state query value expands to.
ORDER_STATE_LOOKUPS = {
    ORDER_STATE_ACTIVE: {"status__in": sorted(ACTIVE_STATES)},
    ORDER_STATE_COMPLETED: {"status": OrderStatus.COMPLETED},
}

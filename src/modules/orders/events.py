"""Domain events for the Orders bounded context."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional
from uuid import UUID

from shared.domain.events import DomainEvent


@dataclass(frozen=True)
class OrderCreated(DomainEvent):
    """Raised when a customer or an admin creates an order."""

    user_id: Optional[int] = None
    final_amount: Optional[Decimal] = None
    discount_code_id: Optional[UUID] = None


@dataclass(frozen=True)
class OrderStatusChanged(DomainEvent):
    """Raised when an admin confirms or completes an order."""

    old_status: str = ""
    new_status: str = ""


@dataclass(frozen=True)
class OrderCancelled(DomainEvent):
    """Raised when an order is cancelled."""

    old_status: str = ""


@dataclass(frozen=True)
class OrderDeleted(DomainEvent):
    """Raised when an order is removed."""

"""Order domain exceptions.

Raised by the Service Layer when business rules are violated.
The API layer (Views) catches these and translates them into
appropriate HTTP responses.
"""

from __future__ import annotations

from modules.core.exceptions import InvalidInput


class OrderNotFound(Exception):
    """The requested order does not exist."""


class InvalidOrderStatus(Exception):
    """The order cannot move to the requested status."""


class InvalidOrderData(InvalidInput):
    """Order payload failed validation; nothing was stored."""


class OrderStorageError(Exception):
    """The order row could not be written."""

"""Query-string filters for order listings.

The FilterSets validate and clean query parameters.  Views pass the cleaned
values on as the plain lookup dicts every order repository understands, so
the same filters work with the in-memory store.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

import django_filters
from django.http import QueryDict

from modules.orders.constants import ORDER_STATE_CHOICES, ORDER_STATE_LOOKUPS, OrderStatus
from modules.orders.exceptions import InvalidOrderData
from modules.orders.models import Order


class OrderFilter(django_filters.FilterSet):
    status = django_filters.ChoiceFilter(field_name="status", choices=OrderStatus.choices)
    user = django_filters.NumberFilter(field_name="user_id", decimal_places=0, min_value=1)

    class Meta:
        model = Order
        fields = ["status", "user"]


class OrderStateFilter(django_filters.FilterSet):
    state = django_filters.ChoiceFilter(choices=ORDER_STATE_CHOICES, method="filter_state")

    class Meta:
        model = Order
        fields = ["state"]

    def filter_state(self, queryset, name, value):
        return queryset.filter(**ORDER_STATE_LOOKUPS[value])


def _cleaned(filterset_class, query_params: QueryDict) -> Dict[str, Any]:
    filterset = filterset_class(query_params, queryset=Order.objects.none())
    if not filterset.is_valid():
        errors = [
            f"{field}: {message}"
            for field, messages in filterset.errors.items()
            for message in messages
        ]
        raise InvalidOrderData("Invalid filter parameters.", errors)
    return {
        name: value
        for name, value in filterset.form.cleaned_data.items()
        if value not in (None, "")
    }


def admin_order_filters(query_params: QueryDict) -> Dict[str, Any]:
    """``?status=&user=`` as repository lookups.

    Raises:
        InvalidOrderData: unknown status or a user value that is not an ID.
    """
    cleaned = _cleaned(OrderFilter, query_params)
    filters: Dict[str, Any] = {}
    if "status" in cleaned:
        filters["status"] = cleaned["status"]
    if "user" in cleaned:
        filters["user_id"] = int(cleaned["user"])
    return filters


def order_state(query_params: QueryDict) -> Optional[str]:
    """The validated ``?state=`` value, or ``None`` when absent."""
    return _cleaned(OrderStateFilter, query_params).get("state")

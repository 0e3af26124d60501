"""Integration tests for scoped throttling."""

from __future__ import annotations

import pytest

pytestmark = pytest.mark.integration


def _order_payload() -> dict[str, object]:
    return {
        "model_name": "Throttle test",
        "material": "pla",
        "weight_grams": 10,
        "delivery_method": "standard",
        "shipping_location": "Barrow",
        "price": "0.15",
    }


def test_order_creation_is_throttled(customer_client):
    statuses = [
        customer_client.post("/api/v1/orders/", _order_payload(), format="json").status_code
        for _ in range(6)
    ]
    assert statuses[:5] == [201] * 5
    assert statuses[5] == 429


def test_listing_is_not_limited_by_creation_scope(customer_client):
    for _ in range(6):
        customer_client.post("/api/v1/orders/", _order_payload(), format="json")
    assert customer_client.get("/api/v1/orders/").status_code == 200


def test_discount_lookup_is_throttled(api_client, percent_code):
    statuses = [
        api_client.get("/api/v1/discounts/TENOFF/").status_code for _ in range(31)
    ]
    assert statuses[:30] == [200] * 30
    assert statuses[30] == 429

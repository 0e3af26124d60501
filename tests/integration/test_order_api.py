"""Integration tests for the order endpoints."""

from __future__ import annotations

from decimal import Decimal

import pytest
from rest_framework import status

from modules.discounts.models import DiscountCode
from modules.orders.constants import OrderStatus
from modules.orders.models import Order

pytestmark = pytest.mark.integration

ORDERS_URL = "/api/v1/orders/"
QUOTE_URL = "/api/v1/orders/quote/"
ADMIN_ORDERS_URL = "/api/v1/admin/orders/"


def _details(**overrides):
    data = {
        "model_name": "Benchy",
        "material": "pbse",
        "weight_grams": 150,
        "delivery_method": "fast",
        "shipping_location": "Dalton",
        "price": "11.10",
    }
    data.update(overrides)
    return data


@pytest.fixture()
def order(customer_client):
    response = customer_client.post(ORDERS_URL, _details(), format="json")
    assert response.status_code == status.HTTP_201_CREATED
    return Order.objects.get(id=response.json()["id"])


class TestPricing:
    def test_price_table_is_public(self, api_client):
        response = api_client.get("/api/v1/pricing/")
        assert response.status_code == status.HTTP_200_OK
        assert response.json()["materials"]["pla"] == "0.015"

    def test_quote_is_public(self, api_client):
        response = api_client.post(QUOTE_URL, _details(), format="json")
        assert response.status_code == status.HTTP_200_OK
        assert response.json()["final_amount"] == "11.10"
        assert Order.objects.count() == 0

    def test_quote_with_code(self, api_client, percent_code):
        response = api_client.post(
            QUOTE_URL, _details(discount_code="TENOFF"), format="json"
        )
        body = response.json()
        assert body["discount_applied"] == "1.11"
        assert body["final_amount"] == "9.99"
        assert body["discount_code"] == "TENOFF"
        percent_code.refresh_from_db()
        assert percent_code.uses == 0

    def test_quote_validation_error(self, api_client):
        response = api_client.post(
            QUOTE_URL, _details(shipping_location="Paris"), format="json"
        )
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["errors"]


class TestCreateOrder:
    def test_requires_authentication(self, api_client):
        response = api_client.post(ORDERS_URL, _details(), format="json")
        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_create(self, customer_client, customer):
        response = customer_client.post(ORDERS_URL, _details(), format="json")

        assert response.status_code == status.HTTP_201_CREATED
        body = response.json()
        assert body["user_id"] == customer.id
        assert body["final_amount"] == "11.10"
        assert body["status"] == OrderStatus.PENDING
        assert body["description"] == "3D Print: Benchy - pbse - 150g (Delivery)"

    def test_user_id_in_body_is_ignored(self, customer_client, customer, other_customer):
        response = customer_client.post(
            ORDERS_URL, _details(user_id=other_customer.id), format="json"
        )
        assert response.json()["user_id"] == customer.id

    def test_quote_and_order_agree(self, customer_client, percent_code):
        details = _details(discount_code="TENOFF", shipping_location="Collection")
        quote = customer_client.post(QUOTE_URL, details, format="json").json()
        details["price"] = quote["final_amount"]

        body = customer_client.post(ORDERS_URL, details, format="json").json()

        assert body["base_cost"] == quote["base_cost"]
        assert body["discount_applied"] == quote["discount_applied"]
        assert body["final_amount"] == quote["final_amount"]
        assert body["discount_code_id"] == str(percent_code.id)

    def test_stale_client_price_is_not_trusted(self, customer_client):
        response = customer_client.post(ORDERS_URL, _details(price="0.01"), format="json")
        body = response.json()
        assert body["final_amount"] == "11.10"
        assert body["quoted_price"] == "0.01"

    def test_invalid_payload(self, customer_client):
        response = customer_client.post(
            ORDERS_URL, _details(weight_grams=0), format="json"
        )
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["detail"] == "Invalid order data."
        assert Order.objects.count() == 0

    def test_exhausted_code_still_places_order(self, customer_client, single_use_code):
        DiscountCode.objects.filter(id=single_use_code.id).update(uses=1)
        response = customer_client.post(
            ORDERS_URL, _details(discount_code="ONCE"), format="json"
        )
        assert response.status_code == status.HTTP_201_CREATED
        assert response.json()["discount_applied"] == "0.00"

    def test_overlong_code_still_places_order(self, customer_client):
        response = customer_client.post(
            ORDERS_URL, _details(discount_code="X" * 65), format="json"
        )
        assert response.status_code == status.HTTP_201_CREATED
        body = response.json()
        assert body["discount_applied"] == "0.00"
        assert body["final_amount"] == "11.10"
        assert body["discount_code_id"] is None


class TestReadOrders:
    def test_list_own_orders(self, customer_client, order, other_customer):
        Order.objects.create(
            user=other_customer,
            model_name="Not mine",
            material="pla",
            delivery_method="standard",
        )
        response = customer_client.get(ORDERS_URL)
        body = response.json()
        assert body["count"] == 1
        assert body["results"][0]["id"] == str(order.id)

    def test_state_filter(self, customer_client, order):
        Order.objects.filter(id=order.id).update(status=OrderStatus.COMPLETED)
        assert customer_client.get(ORDERS_URL, {"state": "active"}).json()["count"] == 0
        assert (
            customer_client.get(ORDERS_URL, {"state": "completed"}).json()["count"] == 1
        )
        response = customer_client.get(ORDERS_URL, {"state": "nope"})
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_retrieve_other_users_order_is_hidden(self, order, other_customer, api_client):
        api_client.force_authenticate(user=other_customer)
        response = api_client.get(f"{ORDERS_URL}{order.id}/")
        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_retrieve_own_order(self, customer_client, order):
        response = customer_client.get(f"{ORDERS_URL}{order.id}/")
        assert response.status_code == status.HTTP_200_OK
        assert Decimal(response.json()["base_cost"]) == Decimal("11.10")


class TestAdminOrders:
    def test_customers_are_forbidden(self, customer_client):
        assert customer_client.get(ADMIN_ORDERS_URL).status_code == 403

    def test_list_with_filters(self, admin_client, order, customer):
        body = admin_client.get(
            ADMIN_ORDERS_URL, {"status": "pending", "user": customer.id}
        ).json()
        assert body["count"] == 1
        assert body["results"][0]["username"] == "customer"

        assert admin_client.get(ADMIN_ORDERS_URL, {"status": "lost"}).status_code == 400
        response = admin_client.get(ADMIN_ORDERS_URL, {"user": "abc"})
        assert response.status_code == 400
        assert response.json()["errors"] == ["user: Enter a number."]

    def test_confirm_complete_flow(self, admin_client, order):
        url = f"{ADMIN_ORDERS_URL}{order.id}/"
        assert admin_client.post(f"{url}confirm/").json()["status"] == "confirmed"
        assert admin_client.post(f"{url}complete/").json()["status"] == "completed"
        response = admin_client.post(f"{url}cancel/")
        assert response.status_code == status.HTTP_409_CONFLICT

    def test_cancel_pending(self, admin_client, order):
        response = admin_client.post(f"{ADMIN_ORDERS_URL}{order.id}/cancel/")
        assert response.json()["status"] == "cancelled"

    def test_unknown_order(self, admin_client):
        missing = "01890000-0000-7000-8000-000000000000"
        response = admin_client.post(f"{ADMIN_ORDERS_URL}{missing}/confirm/")
        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_amount_override(self, admin_client, order):
        url = f"{ADMIN_ORDERS_URL}{order.id}/amount/"
        assert admin_client.post(url, {"amount": "7.25"}, format="json").json()[
            "final_amount"
        ] == "7.25"
        assert (
            admin_client.post(url, {"amount": "-3"}, format="json").status_code == 400
        )

    def test_discount_override(self, admin_client, order):
        response = admin_client.patch(
            f"{ADMIN_ORDERS_URL}{order.id}/discount/",
            {"discount_applied": "2.00"},
            format="json",
        )
        body = response.json()
        assert body["discount_applied"] == "2.00"
        assert body["final_amount"] == "11.10"

    def test_admin_create(self, admin_client, customer):
        response = admin_client.post(
            ADMIN_ORDERS_URL,
            {
                "user_id": customer.id,
                "model_name": "Bracket",
                "material": "pla",
                "weight_grams": 80,
                "delivery_method": "standard",
                "shipping_location": "Collection",
                "amount": "4.00",
            },
            format="json",
        )
        assert response.status_code == status.HTTP_201_CREATED
        assert response.json()["final_amount"] == "4.00"
        assert response.json()["fulfillment_mode"] == "collection"

    def test_admin_create_for_missing_user(self, admin_client):
        response = admin_client.post(
            ADMIN_ORDERS_URL,
            {"user_id": 424242, "model_name": "x", "amount": "1.00"},
            format="json",
        )
        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_delete(self, admin_client, order):
        url = f"{ADMIN_ORDERS_URL}{order.id}/"
        assert admin_client.delete(url).status_code == status.HTTP_204_NO_CONTENT
        assert admin_client.delete(url).status_code == status.HTTP_404_NOT_FOUND

"""Unit tests for OrderService submission with mocked repositories.

Repositories are ``MagicMock`` spies so the tests can assert exactly which
storage calls happened (and which never did).
"""

from __future__ import annotations

import logging
from decimal import Decimal
from unittest.mock import MagicMock

import pytest
from django.db import DatabaseError

from modules.discounts.models import DiscountCode
from modules.orders.exceptions import InvalidOrderData, OrderStorageError
from modules.orders.models import Order
from modules.orders.services import OrderService

pytestmark = pytest.mark.unit


def _payload(**overrides):
    data = {
        "user_id": 1,
        "model_name": "Benchy",
        "material": "pla",
        "weight_grams": 100,
        "delivery_method": "standard",
        "shipping_location": "Barrow",
        "price": "1.50",
    }
    data.update(overrides)
    return data


@pytest.fixture()
def discount():
    return DiscountCode(
        code="TENOFF",
        discount_type="percent",
        discount_value=Decimal("10"),
        max_uses=5,
        uses=0,
    )


@pytest.fixture()
def discount_repo(discount):
    repo = MagicMock()
    repo.find_redeemable.return_value = discount
    repo.increment_uses.return_value = 1
    return repo


@pytest.fixture()
def order_repo():
    repo = MagicMock()
    created = {}

    def create(data):
        created["order"] = Order(**data)
        return created["order"]

    def update(order_id, data):
        order = created["order"]
        for field, value in data.items():
            setattr(order, field, value)
        return order

    repo.create.side_effect = create
    repo.update.side_effect = update
    return repo


@pytest.fixture()
def service(order_repo, discount_repo):
    return OrderService(order_repository=order_repo, discount_repository=discount_repo)


def _finalize(service, data):
    return OrderService.finalize_order.__wrapped__(service, data)


class TestFinalizeOrder:
    def test_invalid_payload_touches_no_storage(self, service, order_repo, discount_repo):
        with pytest.raises(InvalidOrderData) as exc_info:
            _finalize(service, _payload(weight_grams=0, discount_code="TENOFF"))

        assert exc_info.value.errors
        order_repo.create.assert_not_called()
        discount_repo.find_redeemable.assert_not_called()
        discount_repo.increment_uses.assert_not_called()

    def test_without_code(self, service, order_repo, discount_repo):
        order = _finalize(service, _payload())

        assert order.base_cost == Decimal("1.500")
        assert order.discount_applied == Decimal("0.00")
        assert order.final_amount == Decimal("1.50")
        assert order.discount_code_id is None
        assert order.status == "pending"
        discount_repo.find_redeemable.assert_not_called()
        discount_repo.increment_uses.assert_not_called()

    def test_with_valid_code_claims_one_use(
        self, service, discount, order_repo, discount_repo
    ):
        order = _finalize(service, _payload(discount_code="TENOFF", price="1.35"))

        assert order.discount_applied == Decimal("0.15")
        assert order.final_amount == Decimal("1.35")
        assert order.discount_code_id == discount.id
        discount_repo.increment_uses.assert_called_once_with(discount.id)
        order_repo.create.assert_called_once()
        order_repo.update.assert_not_called()

    def test_nonexistent_code_prices_at_full_amount(
        self, service, order_repo, discount_repo
    ):
        discount_repo.find_redeemable.return_value = None

        order = _finalize(service, _payload(discount_code="NOPE"))

        assert order.discount_applied == Decimal("0.00")
        assert order.final_amount == Decimal("1.50")
        assert order.discount_code_id is None
        discount_repo.increment_uses.assert_not_called()

    def test_exhausted_code_is_not_applied(self, service, discount, discount_repo):
        discount.uses = discount.max_uses

        order = _finalize(service, _payload(discount_code="TENOFF"))

        assert order.discount_applied == Decimal("0.00")
        discount_repo.increment_uses.assert_not_called()

    def test_lost_claim_reprices_at_full_amount(
        self, service, order_repo, discount_repo
    ):
        discount_repo.increment_uses.return_value = 0

        order = _finalize(service, _payload(discount_code="TENOFF"))

        assert order.discount_code_id is None
        assert order.discount_applied == Decimal("0.00")
        assert order.final_amount == Decimal("1.50")
        order_repo.update.assert_called_once()

    def test_increment_failure_keeps_discounted_order(
        self, service, discount, order_repo, discount_repo, caplog
    ):
        discount_repo.increment_uses.side_effect = DatabaseError("deadlock")

        with caplog.at_level(logging.ERROR):
            order = _finalize(service, _payload(discount_code="TENOFF"))

        assert order.final_amount == Decimal("1.35")
        assert order.discount_code_id == discount.id
        order_repo.update.assert_not_called()
        assert any(
            "discount.increment_failed" in record.getMessage()
            for record in caplog.records
        )

    def test_insert_failure_consumes_no_discount_use(
        self, service, order_repo, discount_repo
    ):
        order_repo.create.side_effect = DatabaseError("disk full")

        with pytest.raises(OrderStorageError):
            _finalize(service, _payload(discount_code="TENOFF"))

        discount_repo.increment_uses.assert_not_called()

    def test_client_price_mismatch_is_logged_and_ignored(self, service, caplog):
        with caplog.at_level(logging.WARNING):
            order = _finalize(service, _payload(price="0.01"))

        assert order.final_amount == Decimal("1.50")
        assert order.quoted_price == Decimal("0.01")
        assert any(
            "order.quote_mismatch" in record.getMessage() for record in caplog.records
        )

    def test_unknown_material_is_priced_and_logged(self, service, caplog):
        with caplog.at_level(logging.WARNING):
            order = _finalize(service, _payload(material="nylon", price="5.00"))

        assert order.final_amount == Decimal("5.00")
        assert any(
            "order.unknown_material" in record.getMessage() for record in caplog.records
        )

    def test_blank_description_is_generated(self, service):
        order = _finalize(service, _payload(description="  "))
        assert order.description == "3D Print: Benchy - pla - 100g (Delivery)"

    def test_customer_description_is_kept(self, service):
        order = _finalize(service, _payload(description="Blue please"))
        assert order.description == "Blue please"


class TestQuoteOrder:
    def test_quote_never_claims_a_use(self, service, discount_repo):
        quote = service.quote_order(_payload(discount_code="TENOFF"))

        assert quote.final_amount == Decimal("1.35")
        assert quote.discount_code == "TENOFF"
        discount_repo.increment_uses.assert_not_called()

    @pytest.mark.parametrize(
        "overrides",
        [
            {},
            {"discount_code": "TENOFF"},
            {"delegate_sizing": True, "shipping_location": "Ulverston"},
            {"shipping_location": "Collection", "material": "abs", "weight_grams": 37},
        ],
    )
    def test_quote_matches_placed_order(self, service, overrides):
        quote = service.quote_order(_payload(**overrides))
        order = _finalize(service, _payload(price=quote.final_amount, **overrides))

        assert order.base_cost == quote.base_cost
        assert order.discount_applied == quote.discount_applied
        assert order.final_amount == quote.final_amount

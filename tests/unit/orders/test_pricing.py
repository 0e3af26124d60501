"""Unit tests for the pricing functions (no database access)."""

from __future__ import annotations

from decimal import Decimal
from types import SimpleNamespace

import pytest

from modules.orders.pricing import (
    DEFAULT_MATERIAL_RATE,
    PricingInput,
    apply_discount,
    compute_base_cost,
    is_known_material,
    price_order,
    price_table,
    round_currency,
)

pytestmark = pytest.mark.unit


def _inputs(**overrides) -> PricingInput:
    values = {
        "material": "pla",
        "weight_grams": 100,
        "delivery_method": "standard",
        "fulfillment_mode": "delivery",
        "shipping_location": "Barrow",
        "delegate_sizing": False,
    }
    values.update(overrides)
    return PricingInput(**values)


def _percent(value: str):
    return SimpleNamespace(discount_type="percent", discount_value=Decimal(value))


def _fixed(value: str):
    return SimpleNamespace(discount_type="fixed", discount_value=Decimal(value))


# ---------------------------------------------------------------------------
# Base cost
# ---------------------------------------------------------------------------


class TestComputeBaseCost:
    @pytest.mark.parametrize(
        "overrides, expected",
        [
            ({}, Decimal("1.500")),
            (
                {
                    "material": "abs",
                    "weight_grams": 200,
                    "delivery_method": "express",
                    "shipping_location": "Ulverston",
                },
                Decimal("19.50"),
            ),
            (
                {
                    "material": "pbse",
                    "weight_grams": 150,
                    "delivery_method": "fast",
                    "shipping_location": "Dalton",
                },
                Decimal("11.10"),
            ),
        ],
    )
    def test_delivery_orders_add_both_surcharges(self, overrides, expected):
        assert compute_base_cost(_inputs(**overrides)) == expected

    def test_collection_ignores_delivery_and_location(self):
        plain = compute_base_cost(
            _inputs(fulfillment_mode="collection", shipping_location=None)
        )
        express = compute_base_cost(
            _inputs(
                fulfillment_mode="collection",
                delivery_method="express",
                shipping_location="Ulverston",
            )
        )
        assert plain == express == Decimal("1.500")

    def test_delegated_sizing_charges_only_surcharges(self):
        cost = compute_base_cost(
            _inputs(
                delegate_sizing=True,
                weight_grams=0,
                delivery_method="fast",
                shipping_location="Roose",
            )
        )
        assert cost == Decimal("3.50")

    def test_delegated_sizing_with_collection_is_free(self):
        cost = compute_base_cost(
            _inputs(
                delegate_sizing=True,
                fulfillment_mode="collection",
                shipping_location=None,
            )
        )
        assert cost == Decimal("0")

    def test_unknown_material_uses_default_rate(self):
        assert compute_base_cost(_inputs(material="nylon")) == 100 * DEFAULT_MATERIAL_RATE

    @pytest.mark.parametrize(
        "material, known",
        [("pla", True), ("abs", True), ("nylon", False), (None, False)],
    )
    def test_is_known_material(self, material, known):
        assert is_known_material(material) is known

    def test_unknown_surcharges_count_as_zero(self):
        cost = compute_base_cost(
            _inputs(delivery_method="teleport", shipping_location="Paris")
        )
        assert cost == Decimal("1.500")

    def test_negative_weight_is_rejected(self):
        with pytest.raises(ValueError):
            compute_base_cost(_inputs(weight_grams=-1))

    def test_cost_grows_with_weight(self):
        lighter = compute_base_cost(_inputs(weight_grams=100))
        heavier = compute_base_cost(_inputs(weight_grams=101))
        assert heavier >= lighter


# ---------------------------------------------------------------------------
# Discounts and rounding
# ---------------------------------------------------------------------------


class TestApplyDiscount:
    def test_no_discount(self):
        price = apply_discount(Decimal("1.500"))
        assert price.discount_applied == Decimal("0.00")
        assert price.final_amount == Decimal("1.50")

    def test_percent_discount(self):
        price = apply_discount(Decimal("1.500"), _percent("10"))
        assert price.discount_applied == Decimal("0.15")
        assert price.final_amount == Decimal("1.35")

    def test_hundred_percent_is_free(self):
        price = apply_discount(Decimal("19.50"), _percent("100"))
        assert price.discount_applied == Decimal("19.50")
        assert price.final_amount == Decimal("0.00")

    def test_fixed_discount_larger_than_cost_floors_at_zero(self):
        price = apply_discount(Decimal("3.50"), _fixed("5.00"))
        assert price.discount_applied == Decimal("5.00")
        assert price.final_amount == Decimal("0.00")

    def test_final_amount_uses_unrounded_discount(self):
        # 50% of 0.375 is 0.1875; 0.375 - 0.1875 = 0.1875 -> 0.19
        price = apply_discount(Decimal("0.375"), _percent("50"))
        assert price.discount_applied == Decimal("0.19")
        assert price.final_amount == Decimal("0.19")

    def test_half_pence_base_rounds_once(self):
        # 67g PLA to Roose: 1.005 + 1.50 = 2.505; 2.505 * 0.9 = 2.2545
        price = price_order(
            PricingInput("pla", 67, "standard", "delivery", "Roose"), _percent("10")
        )
        assert price.base_cost == Decimal("2.505")
        assert price.discount_applied == Decimal("0.25")
        assert price.final_amount == Decimal("2.25")

    def test_unknown_discount_type(self):
        terms = SimpleNamespace(discount_type="bogof", discount_value=Decimal("1"))
        with pytest.raises(ValueError):
            apply_discount(Decimal("1.00"), terms)

    @pytest.mark.parametrize("discount", [None, _percent("15"), _fixed("0.99")])
    @pytest.mark.parametrize("weight", [0, 3, 77, 1000])
    def test_final_amount_bounds(self, discount, weight):
        price = price_order(_inputs(weight_grams=weight), discount)
        assert Decimal("0") <= price.final_amount <= round_currency(price.base_cost)
        assert price.final_amount == price.final_amount.quantize(Decimal("0.01"))


class TestRoundCurrency:
    @pytest.mark.parametrize(
        "amount, expected",
        [
            (Decimal("2.345"), Decimal("2.35")),
            (Decimal("0.045"), Decimal("0.05")),
            (Decimal("0.044"), Decimal("0.04")),
            (Decimal("10"), Decimal("10.00")),
        ],
    )
    def test_halves_round_away_from_zero(self, amount, expected):
        assert round_currency(amount) == expected

    def test_collection_order_rounds_half_up(self):
        # 3g of PLA = 0.045
        price = price_order(
            _inputs(weight_grams=3, fulfillment_mode="collection", shipping_location=None)
        )
        assert price.final_amount == Decimal("0.05")


def test_price_table_is_serialisable():
    table = price_table()
    assert table["currency"] == "GBP"
    assert table["materials"] == {"pla": "0.015", "pbse": "0.03", "abs": "0.05"}
    assert table["delivery_methods"]["express"] == "3.50"
    assert table["shipping_locations"]["Ulverston"] == "6.00"

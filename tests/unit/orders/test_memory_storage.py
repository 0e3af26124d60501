"""OrderService over the in-memory repositories.

The concurrency test races several submissions for a single-use code and
checks the conditional increment hands the discount to exactly one order.
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from decimal import Decimal

import pytest

from modules.discounts.repositories.memory_repository import (
    DiscountCodeInMemoryRepository,
)
from modules.orders.constants import OrderStatus
from modules.orders.repositories.memory_repository import OrderInMemoryRepository
from modules.orders.services import OrderService

pytestmark = pytest.mark.unit

NUM_WORKERS = 10


def _payload(user_id: int = 1, **overrides):
    data = {
        "user_id": user_id,
        "model_name": "Benchy",
        "material": "abs",
        "weight_grams": 200,
        "delivery_method": "standard",
        "shipping_location": "Barrow",
        "price": "10.00",
    }
    data.update(overrides)
    return data


@pytest.fixture()
def order_repo():
    return OrderInMemoryRepository()


@pytest.fixture()
def discount_repo():
    return DiscountCodeInMemoryRepository()


@pytest.fixture()
def service(order_repo, discount_repo):
    return OrderService(order_repository=order_repo, discount_repository=discount_repo)


def test_single_use_code_is_redeemed_once(service, order_repo, discount_repo):
    code = discount_repo.create(
        {"code": "RACE", "discount_type": "fixed", "discount_value": Decimal("3.00"),
         "max_uses": 1}
    )

    def submit(worker: int):
        return OrderService.finalize_order.__wrapped__(
            service, _payload(user_id=worker, discount_code="RACE")
        )

    with ThreadPoolExecutor(max_workers=NUM_WORKERS) as pool:
        orders = list(pool.map(submit, range(1, NUM_WORKERS + 1)))

    discounted = [o for o in orders if o.discount_code_id is not None]
    assert len(discounted) == 1
    assert discounted[0].final_amount == Decimal("7.00")
    assert all(
        o.final_amount == Decimal("10.00") and o.discount_applied == Decimal("0.00")
        for o in orders
        if o.discount_code_id is None
    )
    assert discount_repo.get_by_id(code.id).uses == 1
    assert len(order_repo.list()) == NUM_WORKERS


def test_unlimited_code_counts_every_use(service, discount_repo):
    code = discount_repo.create(
        {"code": "ALWAYS", "discount_type": "percent", "discount_value": Decimal("10")}
    )
    for _ in range(3):
        OrderService.finalize_order.__wrapped__(
            service, _payload(discount_code="ALWAYS")
        )
    assert discount_repo.get_by_id(code.id).uses == 3


def test_lifecycle_without_database(service, order_repo):
    order = OrderService.finalize_order.__wrapped__(service, _payload())
    order_id = str(order.id)

    OrderService.update_status.__wrapped__(service, order_id, OrderStatus.CONFIRMED)
    assert order_repo.get_by_id(order_id).status == OrderStatus.CONFIRMED
    assert [o.id for o in service.list_user_orders(1, "active")] == [order.id]

    OrderService.update_status.__wrapped__(service, order_id, OrderStatus.COMPLETED)
    assert service.list_user_orders(1, "active") == []
    assert [o.id for o in service.list_user_orders(1, "completed")] == [order.id]

    assert service.delete_user_orders(1) == 1
    assert order_repo.list() == []


def test_unsupported_filter_is_rejected(order_repo):
    with pytest.raises(ValueError):
        order_repo.list({"model_name": "Benchy"})

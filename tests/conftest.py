from decimal import Decimal

import pytest
from django.contrib.auth import get_user_model
from django.core.cache import cache
from rest_framework.test import APIClient

from modules.discounts.models import DiscountCode

STRONG_PASSWORD = "Str0ng-Passw0rd!"


@pytest.fixture(autouse=True)
def _use_db(db):
    """Automatically use the test database for all tests."""


@pytest.fixture(autouse=True)
def _clear_cache():
    """Throttle counters live in the cache; start every test from zero."""
    cache.clear()
    yield
    cache.clear()


@pytest.fixture()
def api_client():
    """DRF APIClient for testing API endpoints."""
    return APIClient()


@pytest.fixture()
def api_client_with_correlation(api_client):
    """APIClient pre-configured with a known correlation ID header."""
    cid = "test-correlation-id-fixture"
    api_client.defaults["HTTP_X_REQUEST_ID"] = cid
    return api_client, cid


@pytest.fixture()
def customer():
    return get_user_model().objects.create_user(
        username="customer", password=STRONG_PASSWORD, email="customer@example.com"
    )


@pytest.fixture()
def other_customer():
    return get_user_model().objects.create_user(
        username="other", password=STRONG_PASSWORD
    )


@pytest.fixture()
def admin_user():
    return get_user_model().objects.create_user(
        username="shopadmin", password=STRONG_PASSWORD, is_staff=True
    )


@pytest.fixture()
def customer_client(customer):
    client = APIClient()
    client.force_authenticate(user=customer)
    return client


@pytest.fixture()
def admin_client(admin_user):
    client = APIClient()
    client.force_authenticate(user=admin_user)
    return client


@pytest.fixture()
def percent_code():
    return DiscountCode.objects.create(
        code="TENOFF",
        discount_type="percent",
        discount_value=Decimal("10"),
    )


@pytest.fixture()
def single_use_code():
    return DiscountCode.objects.create(
        code="ONCE",
        discount_type="fixed",
        discount_value=Decimal("5.00"),
        max_uses=1,
    )

from decimal import Decimal

import pytest

from tiered_discount.config import set_config_for_test
from tiered_discount.data.backends.memory_backend import InMemoryCatalog, InMemoryPromotionStore
from tiered_discount.data.models import Promotion, Tier


def make_promotion(product_id=1, tiers=((10, 30.0), (10, 20.0)), sold=0, total=None, enabled=True):
    """Build a promotion with `sold` units already filled in tier order."""
    built = []
    left = sold
    for capacity, discount in tiers:
        take = min(capacity, left)
        left -= take
        built.append(Tier(
            capacity=capacity,
            discount_percent=discount,
            sold=take,
            notified_sold_out=take == capacity,
        ))
    if total is None:
        total = sum(capacity for capacity, _ in tiers)
    return Promotion(product_id=product_id, enabled=enabled, total_quantity=total, tiers=built)


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch):
    for var in ["DATA_DIR", "STORE_BACKEND", "MAX_COMMIT_ATTEMPTS", "LOG_LEVEL"]:
        monkeypatch.delenv(var, raising=False)
    set_config_for_test(log_level="WARNING", store_backend="memory", max_commit_attempts=3)
    yield


@pytest.fixture
def promotion_factory():
    return make_promotion


@pytest.fixture
def store():
    return InMemoryPromotionStore()


@pytest.fixture
def catalog():
    c = InMemoryCatalog()
    c.add(1, "SparkleCo Beverages 101", Decimal("10.00"))
    c.add(2, "CrunchLabs Snacks 202", Decimal("4.00"))
    c.add(3, "HomeGuard Household 303", Decimal("25.00"))
    return c

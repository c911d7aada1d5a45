from decimal import Decimal

from tiered_discount.data.backends.memory_backend import InMemoryPromotionStore
from tiered_discount.data.models import CartLine
from tiered_discount.errors import StorageUnavailable
from tiered_discount.services.allocation import AllocationService
from tiered_discount.services.pricing import PriceEstimator, discounted_price


class BrokenStore(InMemoryPromotionStore):
    def read(self, product_id):
        raise StorageUnavailable("database is down")


def test_discounted_price_rounds_half_up():
    assert discounted_price(Decimal("10.00"), 26.25) == Decimal("7.38")
    assert discounted_price(Decimal("9.99"), 0) == Decimal("9.99")
    assert discounted_price(Decimal("5.00"), 100) == Decimal("0.00")


def test_estimate_uses_blended_discount(promotion_factory, catalog):
    store = InMemoryPromotionStore([promotion_factory(tiers=((10, 30.0), (10, 20.0)), sold=5)])
    estimator = PriceEstimator(store, catalog)
    assert estimator.estimate(1, 8) == Decimal("7.38")
    assert estimator.estimate(1, 2) == Decimal("7.00")


def test_estimate_is_repeatable_and_never_writes(promotion_factory, catalog):
    store = InMemoryPromotionStore([promotion_factory(sold=5)])
    estimator = PriceEstimator(store, catalog)
    first = estimator.estimate(1, 8)
    assert all(estimator.estimate(1, 8) == first for _ in range(5))
    assert store.read(1).version == 0


def test_estimate_matches_committed_discount(promotion_factory, catalog):
    store = InMemoryPromotionStore([promotion_factory(sold=5)])
    estimator = PriceEstimator(store, catalog)
    estimated = estimator.estimate_discount(1, 8)
    assert AllocationService(store).commit(1, 8).blended_discount_percent == estimated


def test_estimate_not_applicable_cases(promotion_factory, catalog):
    store = InMemoryPromotionStore([
        promotion_factory(product_id=1, tiers=((10, 30.0),), sold=10),
        promotion_factory(product_id=2, enabled=False),
    ])
    estimator = PriceEstimator(store, catalog)
    assert estimator.estimate(1, 3) is None   # exhausted
    assert estimator.estimate(2, 1) is None   # disabled
    assert estimator.estimate(3, 1) is None   # no promotion record
    assert estimator.estimate(1, 0) is None


def test_estimate_degrades_when_store_is_down(catalog):
    assert PriceEstimator(BrokenStore(), catalog).estimate(1, 1) is None


def test_estimate_respects_decimal_places(promotion_factory, catalog):
    store = InMemoryPromotionStore([promotion_factory(tiers=((10, 33.3333),))])
    assert PriceEstimator(store, catalog, price_decimal_places=3).estimate(1, 1) == Decimal("6.667")


def test_annotate_cart(promotion_factory, catalog):
    store = InMemoryPromotionStore([promotion_factory(product_id=1, tiers=((10, 30.0),))])
    priced = PriceEstimator(store, catalog).annotate_cart([
        CartLine(product_id=1, quantity=2),
        CartLine(product_id=2, quantity=1),
    ])

    assert priced[0].promotional is True
    assert priced[0].unit_price == Decimal("7.00")
    assert priced[0].regular_price == Decimal("10.00")
    assert priced[0].discount_percent == 30.0

    assert priced[1].promotional is False
    assert priced[1].unit_price == priced[1].regular_price == Decimal("4.00")
    assert priced[1].discount_percent == 0.0


def test_products_missing_from_catalog_are_left_unpriced(promotion_factory, catalog):
    store = InMemoryPromotionStore([promotion_factory(product_id=42, tiers=((10, 30.0),))])
    estimator = PriceEstimator(store, catalog)

    assert estimator.estimate_discount(42, 2) == 30.0
    assert estimator.estimate(42, 2) is None

    unknown, known = estimator.annotate_cart([
        CartLine(product_id=42, quantity=2),
        CartLine(product_id=2, quantity=1),
    ])
    assert unknown.promotional is False
    assert unknown.regular_price is None and unknown.unit_price is None
    assert known.unit_price == Decimal("4.00")

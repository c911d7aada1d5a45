from tiered_discount.data.backends.memory_backend import InMemoryPromotionStore
from tiered_discount.errors import StorageUnavailable
from tiered_discount.services.guard import QuantityGuard


class BrokenStore(InMemoryPromotionStore):
    def read(self, product_id):
        raise StorageUnavailable("database is down")


def test_allows_quantity_within_remaining(promotion_factory):
    guard = QuantityGuard(InMemoryPromotionStore([promotion_factory(sold=15)]))
    decision = guard.check_add_to_cart(1, 5)
    assert decision.allowed is True
    assert decision.remaining == 5


def test_rejects_quantity_over_remaining(promotion_factory):
    guard = QuantityGuard(InMemoryPromotionStore([promotion_factory(sold=15)]))
    decision = guard.check_add_to_cart(1, 6)
    assert decision.allowed is False
    assert decision.remaining == 5
    assert decision.requested_quantity == 6
    assert decision.reason == "Only 5 promotional units are left; you tried to add 6."


def test_rejects_when_promotion_is_exhausted(promotion_factory):
    guard = QuantityGuard(InMemoryPromotionStore([promotion_factory(sold=20)]))
    assert guard.check_add_to_cart(1, 1).allowed is False


def test_allows_anything_without_a_running_promotion(promotion_factory):
    guard = QuantityGuard(InMemoryPromotionStore([promotion_factory(enabled=False)]))
    assert guard.check_add_to_cart(1, 500).allowed is True
    assert guard.check_add_to_cart(2, 500).allowed is True


def test_does_not_reserve_units(promotion_factory):
    store = InMemoryPromotionStore([promotion_factory(sold=15)])
    guard = QuantityGuard(store)
    guard.check_add_to_cart(1, 5)
    assert store.read(1).promotion.sold_total == 15
    assert store.read(1).version == 0


def test_rejects_non_positive_quantity(promotion_factory):
    guard = QuantityGuard(InMemoryPromotionStore([promotion_factory()]))
    assert guard.check_add_to_cart(1, 0).allowed is False


def test_rejects_when_store_is_down():
    decision = QuantityGuard(BrokenStore()).check_add_to_cart(1, 1)
    assert decision.allowed is False
    assert decision.reason

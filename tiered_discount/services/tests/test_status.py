from tiered_discount.data.backends.memory_backend import InMemoryPromotionStore
from tiered_discount.services.status import SUMMARY_COLUMNS, StatusService


def test_status_snapshot(promotion_factory):
    service = StatusService(InMemoryPromotionStore([promotion_factory(tiers=((10, 30.0), (10, 20.0)), sold=13)]))
    status = service.status(1)

    assert status.enabled is True
    assert status.total_quantity == 20
    assert status.sold_total == 13
    assert status.remaining == 7
    assert [(t.capacity, t.discount_percent, t.sold) for t in status.per_tier] == [(10, 30.0, 10), (10, 20.0, 3)]
    assert status.active_tier_index == 1
    assert status.active_discount_percent == 20.0
    assert status.remaining_in_tier == 7


def test_status_of_exhausted_promotion(promotion_factory):
    status = StatusService(InMemoryPromotionStore([promotion_factory(sold=20)])).status(1)
    assert status.remaining == 0
    assert status.active_tier_index is None
    assert status.remaining_in_tier == 0


def test_status_unknown_product():
    assert StatusService(InMemoryPromotionStore()).status(5) is None


def test_summary_lists_enabled_promotions(promotion_factory):
    store = InMemoryPromotionStore([
        promotion_factory(product_id=1, sold=4),
        promotion_factory(product_id=2, enabled=False),
        promotion_factory(product_id=3, tiers=((5, 10.0),), sold=5),
    ])
    summary = StatusService(store).summary()

    assert list(summary.columns) == SUMMARY_COLUMNS
    assert summary["product_id"].tolist() == [1, 3]
    assert summary["remaining"].tolist() == [16, 0]


def test_summary_empty_store():
    summary = StatusService(InMemoryPromotionStore()).summary()
    assert summary.empty
    assert list(summary.columns) == SUMMARY_COLUMNS

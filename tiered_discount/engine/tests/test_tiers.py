import pytest

from tiered_discount.engine import tiers


def test_active_tier_is_first_tier_with_headroom(promotion_factory):
    promotion = promotion_factory(tiers=((10, 30.0), (10, 20.0)), sold=12)
    active = tiers.active_tier(promotion)
    assert active.index == 1
    assert active.discount_percent == 20.0
    assert active.remaining_in_tier == 8


def test_active_tier_none_when_all_tiers_full(promotion_factory):
    assert tiers.active_tier(promotion_factory(tiers=((10, 30.0),), sold=10)) is None


def test_active_tier_none_when_disabled_or_without_tiers(promotion_factory):
    assert tiers.active_tier(promotion_factory(enabled=False)) is None
    assert tiers.active_tier(promotion_factory(tiers=(), total=5)) is None
    assert tiers.active_tier(None) is None


def test_total_quantity_caps_available_units(promotion_factory):
    promotion = promotion_factory(tiers=((10, 30.0), (10, 20.0)), sold=3, total=8)
    assert tiers.available_units(promotion) == 5
    assert tiers.active_tier(promotion).remaining_in_tier == 5


def test_blended_discount_spanning_two_tiers(promotion_factory):
    promotion = promotion_factory(tiers=((10, 30.0), (10, 20.0)), sold=5)
    assert tiers.blended_discount(promotion, 8) == pytest.approx(26.25)


def test_blended_discount_within_a_single_tier(promotion_factory):
    promotion = promotion_factory(tiers=((10, 30.0), (10, 20.0)), sold=0)
    assert tiers.blended_discount(promotion, 4) == pytest.approx(30.0)


def test_units_beyond_capacity_are_priced_at_zero_discount(promotion_factory):
    promotion = promotion_factory(tiers=((10, 30.0),), sold=8)
    # 2 units at 30%, 2 at full price
    assert tiers.blended_discount(promotion, 4) == pytest.approx(15.0)


def test_exhausted_promotion_plans_nothing(promotion_factory):
    promotion = promotion_factory(tiers=((10, 30.0),), sold=10)
    plan = tiers.plan_allocation(promotion, 3)
    assert plan.units_allocated == 0
    assert plan.blended_discount_percent == 0.0
    assert plan.draws == ()
    assert tiers.blended_discount(promotion, 3) == 0.0


def test_non_positive_quantity_yields_no_discount(promotion_factory):
    promotion = promotion_factory()
    assert tiers.blended_discount(promotion, 0) == 0.0
    assert tiers.blended_discount(promotion, -2) == 0.0


def test_plan_breakdown_and_new_tier_list(promotion_factory):
    promotion = promotion_factory(tiers=((10, 30.0), (10, 20.0)), sold=5)
    plan = tiers.plan_allocation(promotion, 8)

    assert [(d.tier_index, d.units) for d in plan.draws] == [(0, 5), (1, 3)]
    assert plan.blended_discount_percent == pytest.approx(tiers.blended_discount(promotion, 8))
    assert plan.newly_sold_out_tiers == frozenset({0})
    assert [t.sold for t in plan.tiers] == [10, 3]
    assert plan.tiers[0].notified_sold_out is True
    assert plan.tiers[1].notified_sold_out is False


def test_plan_does_not_mutate_snapshot(promotion_factory):
    promotion = promotion_factory(tiers=((10, 30.0), (10, 20.0)), sold=5)
    before = promotion.model_dump()
    tiers.plan_allocation(promotion, 12)
    assert promotion.model_dump() == before


def test_plan_reports_every_tier_it_fills(promotion_factory):
    promotion = promotion_factory(tiers=((2, 30.0), (3, 20.0), (5, 10.0)), sold=1)
    plan = tiers.plan_allocation(promotion, 4)
    assert plan.newly_sold_out_tiers == frozenset({0, 1})


def test_already_notified_tier_is_not_reported_again(promotion_factory):
    promotion = promotion_factory(tiers=((2, 30.0), (3, 20.0)), sold=2)
    plan = tiers.plan_allocation(promotion, 1)
    assert 0 not in plan.newly_sold_out_tiers
    assert plan.newly_sold_out_tiers == frozenset()


def test_apply_plan_keeps_sold_total_in_step(promotion_factory):
    promotion = promotion_factory(tiers=((10, 30.0), (10, 20.0)), sold=5)
    updated = tiers.apply_plan(promotion, tiers.plan_allocation(promotion, 8))
    assert updated.sold_total == 13
    assert updated.sold_total == sum(t.sold for t in updated.tiers)
    assert updated.remaining == 7
    assert promotion.sold_total == 5


def test_plan_result_shape(promotion_factory):
    promotion = promotion_factory(product_id=7, tiers=((4, 25.0),))
    result = tiers.plan_allocation(promotion, 4).to_result()
    assert result.product_id == 7
    assert result.requested_quantity == 4
    assert result.units_allocated == 4
    assert result.blended_discount_percent == pytest.approx(25.0)
    assert result.newly_sold_out_tiers == frozenset({0})
    filled = result.sold_out_tier_details[0]
    assert (filled.capacity, filled.discount_percent, filled.sold) == (4, 25.0, 4)
    assert filled.notified_sold_out is True

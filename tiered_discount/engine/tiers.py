"""
tiers.py

Pure tier arithmetic over an immutable Promotion snapshot.

Nothing here performs I/O or mutates its input. The same tier walk backs both
the advisory cart price and the committed allocation, so the two agree whenever
no other order lands in between.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import FrozenSet, List, Optional, Tuple

from ..data.models import AllocationResult, Promotion, Tier, TierDraw


@dataclass(frozen=True)
class ActiveTier:
    index: int
    discount_percent: float
    remaining_in_tier: int


@dataclass(frozen=True)
class AllocationPlan:
    """Intended allocation: the draws, the resulting tier list and the tiers it fills."""
    product_id: int
    requested_quantity: int
    draws: Tuple[TierDraw, ...]
    blended_discount_percent: float
    newly_sold_out_tiers: FrozenSet[int]
    tiers: Tuple[Tier, ...]

    @property
    def units_allocated(self) -> int:
        return sum(draw.units for draw in self.draws)

    def to_result(self) -> AllocationResult:
        return AllocationResult(
            product_id=self.product_id,
            requested_quantity=self.requested_quantity,
            units_allocated=self.units_allocated,
            per_tier_breakdown=list(self.draws),
            blended_discount_percent=self.blended_discount_percent,
            newly_sold_out_tiers=self.newly_sold_out_tiers,
            sold_out_tier_details={index: self.tiers[index] for index in self.newly_sold_out_tiers},
        )


def is_applicable(promotion: Optional[Promotion]) -> bool:
    """A promotion constrains pricing only when it exists, is enabled and has tiers."""
    return promotion is not None and promotion.enabled and len(promotion.tiers) > 0


def available_units(promotion: Optional[Promotion]) -> int:
    """Promotional units still sellable: capped by both the total quantity and tier headroom."""
    if not is_applicable(promotion):
        return 0
    headroom = sum(tier.remaining for tier in promotion.tiers)
    return min(promotion.remaining, headroom)


def active_tier(promotion: Optional[Promotion]) -> Optional[ActiveTier]:
    """Tier the next unit would be sold from, or None if nothing is left."""
    available = available_units(promotion)
    if available <= 0:
        return None
    for index, tier in enumerate(promotion.tiers):
        if tier.sold < tier.capacity:
            return ActiveTier(
                index=index,
                discount_percent=tier.discount_percent,
                remaining_in_tier=min(tier.remaining, available),
            )
    return None


def _draw_units(promotion: Promotion, quantity: int) -> List[TierDraw]:
    budget = min(quantity, available_units(promotion))
    draws: List[TierDraw] = []
    for index, tier in enumerate(promotion.tiers):
        if budget <= 0:
            break
        take = min(tier.remaining, budget)
        if take > 0:
            draws.append(TierDraw(tier_index=index, units=take, discount_percent=tier.discount_percent))
            budget -= take
    return draws


def _blend(draws: List[TierDraw], quantity: int) -> float:
    if quantity <= 0:
        return 0.0
    # Units beyond the promotional capacity count at 0% and dilute the average.
    return sum(draw.units * draw.discount_percent for draw in draws) / quantity


def blended_discount(promotion: Optional[Promotion], quantity: int) -> float:
    """Average discount percentage over `quantity` units starting at the active tier."""
    if not is_applicable(promotion) or quantity <= 0:
        return 0.0
    return _blend(_draw_units(promotion, quantity), quantity)


def plan_allocation(promotion: Promotion, quantity: int) -> AllocationPlan:
    """Walk the tiers for `quantity` units and describe the resulting state.

    The returned plan holds a new tier list; `promotion` is left untouched.
    Tiers reaching capacity for the first time are reported in
    `newly_sold_out_tiers` and come back with `notified_sold_out` set, so the
    write that fills a tier is also the one that claims its notification.
    """
    draws = _draw_units(promotion, quantity) if is_applicable(promotion) and quantity > 0 else []
    drawn = {draw.tier_index: draw.units for draw in draws}

    tiers: List[Tier] = []
    newly_sold_out = set()
    for index, tier in enumerate(promotion.tiers):
        units = drawn.get(index, 0)
        if not units:
            tiers.append(tier)
            continue
        sold = tier.sold + units
        fills_now = sold == tier.capacity and not tier.notified_sold_out
        if fills_now:
            newly_sold_out.add(index)
        tiers.append(tier.model_copy(update={
            "sold": sold,
            "notified_sold_out": tier.notified_sold_out or fills_now,
        }))

    return AllocationPlan(
        product_id=promotion.product_id,
        requested_quantity=quantity,
        draws=tuple(draws),
        blended_discount_percent=_blend(draws, quantity),
        newly_sold_out_tiers=frozenset(newly_sold_out),
        tiers=tuple(tiers),
    )


def apply_plan(promotion: Promotion, plan: AllocationPlan) -> Promotion:
    """Build the post-allocation promotion; model validation re-checks every invariant."""
    return Promotion(
        product_id=promotion.product_id,
        enabled=promotion.enabled,
        total_quantity=promotion.total_quantity,
        tiers=plan.tiers,
    )

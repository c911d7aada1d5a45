from __future__ import annotations

from typing import Dict, FrozenSet, List

from pydantic import BaseModel, ConfigDict, Field

from .promotions import Tier


class TierDraw(BaseModel):
    """Units taken from one tier by an allocation."""
    model_config = ConfigDict(frozen=True)

    tier_index: int = Field(ge=0, description="Position of the tier in the promotion")
    units: int = Field(ge=1, description="Units drawn from the tier")
    discount_percent: float = Field(description="Discount of the tier the units came from")


class AllocationRequest(BaseModel):
    """A confirmed order line asking for promotional units."""
    product_id: int = Field(description="Product being purchased")
    requested_quantity: int = Field(gt=0, description="Units on the order line")


class AllocationResult(BaseModel):
    """Outcome of a planned or committed allocation."""
    product_id: int = Field(description="Product the units were allocated from")
    requested_quantity: int = Field(description="Units requested by the order line")
    units_allocated: int = Field(description="Promotional units drawn from tiers")
    per_tier_breakdown: List[TierDraw] = Field(default_factory=list, description="Units per tier, in tier order")
    blended_discount_percent: float = Field(description="Effective discount over the requested quantity")
    newly_sold_out_tiers: FrozenSet[int] = Field(default_factory=frozenset, description="Tiers filled by this allocation")
    sold_out_tier_details: Dict[int, Tier] = Field(default_factory=dict, description="Post-allocation state of each newly filled tier")

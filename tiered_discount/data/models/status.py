from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field


class TierStatus(BaseModel):
    """Display view of one tier."""
    capacity: int = Field(description="Units in the tier")
    discount_percent: float = Field(description="Tier discount")
    sold: int = Field(description="Units sold from the tier")


class PromotionStatus(BaseModel):
    """Read-only snapshot of a promotion for display."""
    product_id: int = Field(description="Product identifier")
    enabled: bool = Field(description="Whether the promotion is running")
    total_quantity: int = Field(description="Total promotional units")
    sold_total: int = Field(description="Promotional units sold")
    remaining: int = Field(description="Promotional units still available")
    per_tier: List[TierStatus] = Field(default_factory=list, description="Tiers in allocation order")
    active_tier_index: Optional[int] = Field(default=None, description="Tier the next unit comes from")
    active_discount_percent: float = Field(default=0.0, description="Discount of the active tier")
    remaining_in_tier: int = Field(default=0, description="Units left in the active tier")

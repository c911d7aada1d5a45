from __future__ import annotations

from typing import Tuple

from pydantic import BaseModel, ConfigDict, Field, computed_field, model_validator


class Tier(BaseModel):
    """One fixed-capacity discount bucket. Tiers fill strictly in sequence order."""
    model_config = ConfigDict(frozen=True)

    capacity: int = Field(ge=1, description="Number of promotional units in this tier")
    discount_percent: float = Field(ge=0, le=100, description="Flat discount applied to units of this tier")
    sold: int = Field(default=0, ge=0, description="Units already allocated from this tier")
    notified_sold_out: bool = Field(default=False, description="Sold-out notification already claimed")

    @model_validator(mode="after")
    def _sold_within_capacity(self) -> "Tier":
        if self.sold > self.capacity:
            raise ValueError(f"tier sold ({self.sold}) exceeds capacity ({self.capacity})")
        return self

    @property
    def remaining(self) -> int:
        return self.capacity - self.sold

    @property
    def is_sold_out(self) -> bool:
        return self.sold >= self.capacity


class Promotion(BaseModel):
    """Tiered promotion attached to a single product.

    `sold_total` is derived from the tiers so it can never drift from their sum.
    """
    model_config = ConfigDict(frozen=True)

    product_id: int = Field(description="Product the promotion applies to")
    enabled: bool = Field(default=True, description="Whether the promotion is running")
    total_quantity: int = Field(ge=0, description="Total promotional units on offer")
    tiers: Tuple[Tier, ...] = Field(default=(), description="Tiers in allocation order")

    @computed_field
    @property
    def sold_total(self) -> int:
        return sum(tier.sold for tier in self.tiers)

    @property
    def remaining(self) -> int:
        return max(0, self.total_quantity - self.sold_total)

    @model_validator(mode="after")
    def _check_invariants(self) -> "Promotion":
        if self.sold_total > self.total_quantity:
            raise ValueError(
                f"sold total ({self.sold_total}) exceeds total quantity ({self.total_quantity})"
            )
        # Once a tier has headroom, nothing after it may have been sold.
        open_index = next((i for i, tier in enumerate(self.tiers) if not tier.is_sold_out), None)
        if open_index is not None:
            for index in range(open_index + 1, len(self.tiers)):
                if self.tiers[index].sold:
                    raise ValueError(
                        f"tier {index} has sales while earlier tier {open_index} is not full"
                    )
        return self


class VersionedPromotion(BaseModel):
    """A promotion snapshot together with the storage version it was read at."""
    model_config = ConfigDict(frozen=True)

    promotion: Promotion = Field(description="Immutable promotion snapshot")
    version: int = Field(ge=0, description="Storage version token used for compare-and-swap writes")

from __future__ import annotations

from typing import Dict, List

from pydantic import BaseModel, Field

from .allocation import AllocationResult


class OrderLine(BaseModel):
    """A line of an order that has just become authoritative."""
    product_id: int = Field(description="Product ordered")
    quantity: int = Field(gt=0, description="Units ordered")


class OrderAllocationReport(BaseModel):
    """Per-line allocation outcome for an order."""
    order_id: str = Field(description="Order identifier")
    allocations: Dict[int, AllocationResult] = Field(default_factory=dict, description="Committed allocations by product")
    failures: Dict[int, str] = Field(default_factory=dict, description="Failed lines by product, with the error message")
    skipped: List[int] = Field(default_factory=list, description="Products without a running promotion")

    @property
    def ok(self) -> bool:
        return not self.failures

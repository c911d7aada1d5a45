from __future__ import annotations

from typing import Optional

import pandas as pd

from ..data.interface import PromotionStore
from ..data.models import PromotionStatus, TierStatus
from ..engine import tiers

SUMMARY_COLUMNS = ["product_id", "enabled", "total_quantity", "sold_total", "remaining"]


class StatusService:
    """Read-only views of promotion state for display."""

    def __init__(self, store: PromotionStore) -> None:
        self.store = store

    def status(self, product_id: int) -> Optional[PromotionStatus]:
        record = self.store.read(product_id)
        if record is None:
            return None
        promotion = record.promotion
        active = tiers.active_tier(promotion)
        return PromotionStatus(
            product_id=promotion.product_id,
            enabled=promotion.enabled,
            total_quantity=promotion.total_quantity,
            sold_total=promotion.sold_total,
            remaining=promotion.remaining,
            per_tier=[
                TierStatus(capacity=t.capacity, discount_percent=t.discount_percent, sold=t.sold)
                for t in promotion.tiers
            ],
            active_tier_index=active.index if active else None,
            active_discount_percent=active.discount_percent if active else 0.0,
            remaining_in_tier=active.remaining_in_tier if active else 0,
        )

    def summary(self) -> pd.DataFrame:
        """One row per enabled promotion: totals, sold and remaining units."""
        rows = []
        for product_id in self.store.list_product_ids():
            record = self.store.read(product_id)
            if record is None or not record.promotion.enabled:
                continue
            promotion = record.promotion
            rows.append({
                "product_id": promotion.product_id,
                "enabled": promotion.enabled,
                "total_quantity": promotion.total_quantity,
                "sold_total": promotion.sold_total,
                "remaining": promotion.remaining,
            })
        return pd.DataFrame(rows, columns=SUMMARY_COLUMNS)

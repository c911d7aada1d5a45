from __future__ import annotations

from typing import Iterable, Optional

from ..data.interface import PromotionStore
from ..data.models import AllocationResult, OrderAllocationReport, OrderLine
from ..engine import tiers
from ..errors import TieredDiscountError
from ..logging import get_logger
from .allocation import AllocationService
from .notifications import TierSoldOutNotifier


class OrderAllocator:
    """Hook the order workflow calls once an order becomes authoritative.

    Each promotional line is committed on its own; a failed line is reported back
    for the shopper to resolve and does not undo the other lines.
    """

    def __init__(
        self,
        store: PromotionStore,
        allocation: AllocationService,
        notifier: Optional[TierSoldOutNotifier] = None,
    ) -> None:
        self.store = store
        self.allocation = allocation
        self.notifier = notifier
        self.logger = get_logger(__name__)

    def allocate_order(self, order_id: str, lines: Iterable[OrderLine]) -> OrderAllocationReport:
        report = OrderAllocationReport(order_id=order_id)
        for line in lines:
            try:
                record = self.store.read(line.product_id)
                if record is None or not tiers.is_applicable(record.promotion):
                    report.skipped.append(line.product_id)
                    continue
                result = self.allocation.commit(line.product_id, line.quantity)
            except TieredDiscountError as e:
                self.logger.warning(f"Order {order_id}: line for product {line.product_id} failed: {e}")
                report.failures[line.product_id] = f"{type(e).__name__}: {e}"
                continue
            report.allocations[line.product_id] = result
            self.dispatch_sold_out(result)
        return report

    def dispatch_sold_out(self, result: AllocationResult) -> None:
        """Notify once per newly filled tier; notifier failures never touch the allocation."""
        if self.notifier is None or not result.newly_sold_out_tiers:
            return
        for tier_index in sorted(result.newly_sold_out_tiers):
            tier = result.sold_out_tier_details.get(tier_index)
            if tier is None:
                self.logger.error(f"No tier details for product {result.product_id} tier {tier_index}; not notifying")
                continue
            try:
                self.notifier.notify_tier_sold_out(result.product_id, tier_index, tier)
            except Exception:
                self.logger.exception(
                    f"Sold-out notification for product {result.product_id} tier {tier_index} failed"
                )

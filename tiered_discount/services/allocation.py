from __future__ import annotations

from typing import Optional

from ..config import get_config
from ..data.interface import PromotionStore
from ..data.models import AllocationRequest, AllocationResult
from ..engine import tiers
from ..errors import AllocationContention, InsufficientInventory
from ..logging import get_logger


class AllocationService:
    """The only writer of promotion state.

    `commit` runs an optimistic loop: read a versioned snapshot, plan against it,
    and write back only if the version is unchanged. A lost race re-reads and
    re-plans; nothing is locked across the read and the write.
    """

    def __init__(self, store: PromotionStore, max_attempts: Optional[int] = None) -> None:
        self.store = store
        self.max_attempts = get_config().max_commit_attempts if max_attempts is None else max_attempts
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self.logger = get_logger(__name__)

    def commit(self, product_id: int, quantity: int) -> AllocationResult:
        """Allocate `quantity` promotional units for one confirmed order line.

        All-or-nothing: either every unit is recorded against the tiers or nothing is.

        Raises:
            InsufficientInventory: the promotion is off or has fewer units left than requested.
            AllocationContention: every attempt lost the race to another writer.
            StorageUnavailable: the store failed; propagated unchanged.
        """
        request = AllocationRequest(product_id=product_id, requested_quantity=quantity)

        for attempt in range(1, self.max_attempts + 1):
            record = self.store.read(request.product_id)
            promotion = record.promotion if record else None

            available = tiers.available_units(promotion)
            if available < request.requested_quantity:
                raise InsufficientInventory(request.product_id, request.requested_quantity, available)

            plan = tiers.plan_allocation(promotion, request.requested_quantity)
            updated = tiers.apply_plan(promotion, plan)

            if self.store.write_if(request.product_id, record.version, updated):
                result = plan.to_result()
                breakdown = ", ".join(f"tier {d.tier_index}: {d.units}" for d in result.per_tier_breakdown)
                self.logger.info(
                    f"Committed {result.units_allocated} unit(s) for product {request.product_id} "
                    f"on attempt {attempt} ({breakdown}); blended discount "
                    f"{result.blended_discount_percent:.2f}%"
                )
                return result

            self.logger.debug(
                f"Version {record.version} of product {request.product_id} changed during commit "
                f"(attempt {attempt}/{self.max_attempts}); retrying"
            )

        self.logger.warning(
            f"Giving up on product {request.product_id} after {self.max_attempts} contended attempt(s)"
        )
        raise AllocationContention(request.product_id, self.max_attempts)

from __future__ import annotations

from ..data.interface import PromotionStore
from ..data.models import GuardDecision
from ..engine import tiers
from ..errors import StorageUnavailable
from ..logging import get_logger


class QuantityGuard:
    """Add-to-cart check against remaining promotional units.

    Advisory only: nothing is reserved, so a commit later on may still find the
    units gone.
    """

    def __init__(self, store: PromotionStore) -> None:
        self.store = store
        self.logger = get_logger(__name__)

    def check_add_to_cart(self, product_id: int, requested_quantity: int) -> GuardDecision:
        if requested_quantity <= 0:
            return GuardDecision(
                allowed=False,
                requested_quantity=requested_quantity,
                reason="Quantity must be at least 1.",
            )

        try:
            record = self.store.read(product_id)
        except StorageUnavailable as e:
            self.logger.warning(f"Cannot verify promotional stock for product {product_id}: {e}")
            return GuardDecision(
                allowed=False,
                requested_quantity=requested_quantity,
                reason="Promotional stock could not be verified. Please try again shortly.",
            )

        promotion = record.promotion if record else None
        if not tiers.is_applicable(promotion):
            return GuardDecision(allowed=True, requested_quantity=requested_quantity)

        remaining = tiers.available_units(promotion)
        if requested_quantity > remaining:
            reason = (
                f"Only {remaining} promotional units are left; "
                f"you tried to add {requested_quantity}."
            )
            self.logger.info(f"Rejected add-to-cart for product {product_id}: {reason}")
            return GuardDecision(
                allowed=False,
                requested_quantity=requested_quantity,
                remaining=remaining,
                reason=reason,
            )
        return GuardDecision(allowed=True, requested_quantity=requested_quantity, remaining=remaining)

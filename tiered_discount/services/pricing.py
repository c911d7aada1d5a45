from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, List, Optional

from ..config import get_config
from ..data.interface import Catalog, PromotionStore
from ..data.models import CartLine, Promotion, PricedCartLine
from ..engine import tiers
from ..errors import StorageUnavailable
from ..logging import get_logger


def discounted_price(regular_price: Decimal, discount_percent: float, places: int = 2) -> Decimal:
    """Regular price reduced by `discount_percent`, floored at zero and rounded half-up."""
    factor = Decimal(1) - Decimal(str(discount_percent)) / Decimal(100)
    price = max(Decimal(0), Decimal(regular_price) * factor)
    return price.quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP)


class PriceEstimator:
    """Advisory cart pricing from the latest promotion snapshot. Never writes."""

    def __init__(self, store: PromotionStore, catalog: Catalog, price_decimal_places: Optional[int] = None) -> None:
        self.store = store
        self.catalog = catalog
        self.places = get_config().price_decimal_places if price_decimal_places is None else price_decimal_places
        self.logger = get_logger(__name__)

    def _snapshot(self, product_id: int) -> Optional[Promotion]:
        try:
            record = self.store.read(product_id)
        except StorageUnavailable as e:
            self.logger.warning(f"Promotion for product {product_id} unavailable, pricing at full price: {e}")
            return None
        return record.promotion if record else None

    def _regular_price(self, product_id: int) -> Optional[Decimal]:
        try:
            return self.catalog.get_regular_price(product_id)
        except KeyError:
            self.logger.warning(f"Product {product_id} has no catalog price; leaving it unpriced")
            return None

    def estimate_discount(self, product_id: int, quantity: int) -> Optional[float]:
        """Blended discount for `quantity` units, or None when no promotion applies."""
        if quantity <= 0:
            return None
        promotion = self._snapshot(product_id)
        if tiers.active_tier(promotion) is None:
            return None
        return tiers.plan_allocation(promotion, quantity).blended_discount_percent

    def estimate(self, product_id: int, quantity: int) -> Optional[Decimal]:
        """Estimated discounted unit price, or None when the promotion is inactive or exhausted."""
        discount = self.estimate_discount(product_id, quantity)
        if discount is None:
            return None
        regular = self._regular_price(product_id)
        if regular is None:
            return None
        return discounted_price(regular, discount, self.places)

    def annotate_cart(self, lines: Iterable[CartLine]) -> List[PricedCartLine]:
        priced = []
        for line in lines:
            regular = self._regular_price(line.product_id)
            discount = self.estimate_discount(line.product_id, line.quantity)
            if discount is None or regular is None:
                priced.append(PricedCartLine(
                    product_id=line.product_id,
                    quantity=line.quantity,
                    regular_price=regular,
                    unit_price=regular,
                ))
                continue
            priced.append(PricedCartLine(
                product_id=line.product_id,
                quantity=line.quantity,
                regular_price=regular,
                unit_price=discounted_price(regular, discount, self.places),
                discount_percent=discount,
                promotional=True,
            ))
        return priced

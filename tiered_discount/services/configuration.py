from __future__ import annotations

from typing import Iterable, List, Sequence, Tuple, Union

from pydantic import ValidationError

from ..data.interface import PromotionStore
from ..data.models import Promotion, Tier, VersionedPromotion
from ..errors import InvalidConfiguration
from ..logging import get_logger


def parse_tier_lines(text: str) -> List[Tuple[int, float]]:
    """Parse one tier per line in the form "capacity|discount" (e.g. "10|30").

    Blank lines are ignored; anything else that does not parse raises
    InvalidConfiguration.
    """
    parsed = []
    for number, raw in enumerate(text.splitlines(), start=1):
        line = raw.strip()
        if not line:
            continue
        if "|" not in line:
            raise InvalidConfiguration(f"Line {number}: expected 'capacity|discount', got {line!r}")
        capacity, discount = (part.strip() for part in line.split("|", 1))
        try:
            parsed.append((int(capacity), float(discount)))
        except ValueError as e:
            raise InvalidConfiguration(f"Line {number}: {e}") from e
    return parsed


class PromotionConfigurator:
    """Creates or replaces a product's promotion with every counter at zero."""

    def __init__(self, store: PromotionStore) -> None:
        self.store = store
        self.logger = get_logger(__name__)

    def configure(
        self,
        product_id: int,
        enabled: bool,
        total_quantity: int,
        tiers: Union[str, Sequence[Tuple[int, float]]],
    ) -> VersionedPromotion:
        if isinstance(tiers, str):
            tiers = parse_tier_lines(tiers)
        promotion = self.build(product_id, enabled, total_quantity, tiers)
        record = self.store.save(promotion)
        self.logger.info(
            f"Configured promotion for product {product_id}: enabled={enabled}, "
            f"total={total_quantity}, tiers={len(promotion.tiers)} (version {record.version})"
        )
        return record

    @staticmethod
    def build(
        product_id: int,
        enabled: bool,
        total_quantity: int,
        tiers: Iterable[Tuple[int, float]],
    ) -> Promotion:
        try:
            return Promotion(
                product_id=product_id,
                enabled=enabled,
                total_quantity=total_quantity,
                tiers=[Tier(capacity=capacity, discount_percent=discount) for capacity, discount in tiers],
            )
        except ValidationError as e:
            raise InvalidConfiguration(f"Invalid promotion for product {product_id}: {e}") from e

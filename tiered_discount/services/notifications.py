from __future__ import annotations

from typing import Optional, Protocol, Tuple

from ..config import get_config
from ..data.interface import Catalog
from ..data.models import Tier
from ..logging import get_logger


class TierSoldOutNotifier(Protocol):
    """Host collaborator told when a tier sells out. Delivery is informational only."""

    def notify_tier_sold_out(self, product_id: int, tier_index: int, tier: Tier) -> None:
        ...


def compose_sold_out_message(site_name: str, product_name: str, tier: Tier) -> Tuple[str, str]:
    """Return (subject, body) for a sold-out tier."""
    subject = f"[{site_name}] Discount tier sold out"
    discount = f"{tier.discount_percent:g}"
    body = (
        f'For product "{product_name}", the {discount}% discount tier '
        f"({tier.capacity} units) has sold out."
    )
    return subject, body


class LoggingNotifier(TierSoldOutNotifier):
    """Writes sold-out messages to the application log instead of sending mail."""

    def __init__(self, catalog: Catalog, site_name: Optional[str] = None, recipient: Optional[str] = None) -> None:
        config = get_config()
        self.catalog = catalog
        self.site_name = site_name or config.site_name
        self.recipient = recipient or config.admin_email
        self.logger = get_logger(__name__)

    def notify_tier_sold_out(self, product_id: int, tier_index: int, tier: Tier) -> None:
        try:
            product_name = self.catalog.get_product_name(product_id)
        except KeyError:
            product_name = f"#{product_id}"
        subject, body = compose_sold_out_message(self.site_name, product_name, tier)
        self.logger.info(f"to={self.recipient or '-'} tier={tier_index} | {subject} | {body}")

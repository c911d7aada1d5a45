from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..config import AppConfig, get_config
from ..data.interface import Catalog, PromotionStore
from ..data.util import get_catalog, get_promotion_store
from .allocation import AllocationService
from .configuration import PromotionConfigurator
from .guard import QuantityGuard
from .notifications import LoggingNotifier, TierSoldOutNotifier
from .orders import OrderAllocator
from .pricing import PriceEstimator
from .status import StatusService


@dataclass
class Services:
    """Service objects built once at start-up and handed to request handlers."""
    store: PromotionStore
    catalog: Catalog
    estimator: PriceEstimator
    guard: QuantityGuard
    allocation: AllocationService
    status: StatusService
    orders: OrderAllocator
    configurator: PromotionConfigurator


def build_services(
    config: Optional[AppConfig] = None,
    store: Optional[PromotionStore] = None,
    catalog: Optional[Catalog] = None,
    notifier: Optional[TierSoldOutNotifier] = None,
) -> Services:
    config = config or get_config()
    store = store or get_promotion_store(config.store_backend, config.data_dir)
    catalog = catalog or get_catalog(config.store_backend, config.data_dir)
    notifier = notifier or LoggingNotifier(catalog, site_name=config.site_name, recipient=config.admin_email)

    allocation = AllocationService(store, max_attempts=config.max_commit_attempts)
    return Services(
        store=store,
        catalog=catalog,
        estimator=PriceEstimator(store, catalog, price_decimal_places=config.price_decimal_places),
        guard=QuantityGuard(store),
        allocation=allocation,
        status=StatusService(store),
        orders=OrderAllocator(store, allocation, notifier),
        configurator=PromotionConfigurator(store),
    )

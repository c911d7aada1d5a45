from .promotions import (
    Tier,
    Promotion,
    VersionedPromotion,
)

from .allocation import (
    TierDraw,
    AllocationRequest,
    AllocationResult,
)
from .products import CatalogProduct
from .cart import (
    CartLine,
    PricedCartLine,
    GuardDecision,
)
from .status import (
    TierStatus,
    PromotionStatus,
)
from .orders import (
    OrderLine,
    OrderAllocationReport,
)

__all__ = [
    # Promotion state
    "Tier",
    "Promotion",
    "VersionedPromotion",
    # Allocation
    "TierDraw",
    "AllocationRequest",
    "AllocationResult",
    # Catalog and cart
    "CatalogProduct",
    "CartLine",
    "PricedCartLine",
    "GuardDecision",
    # Display
    "TierStatus",
    "PromotionStatus",
    # Orders
    "OrderLine",
    "OrderAllocationReport",
]

# tiered_discount/data/interface.py
from __future__ import annotations

from decimal import Decimal
from typing import List, Optional, Protocol

from .models import Promotion, VersionedPromotion


# ---- Promotion storage protocol ----

class PromotionStore(Protocol):
    """
    Optimistic-concurrency repository holding one Promotion per product.

    IMPORTANT for allocation safety:
    - `read` returns an immutable snapshot plus the version it was read at.
    - `write_if` must be atomic: it succeeds only when the stored version still
      equals `expected_version`, and every successful write bumps the version.
    - Failures to reach the underlying storage raise StorageUnavailable.
    """

    def read(self, product_id: int) -> Optional[VersionedPromotion]:
        """Return the current snapshot, or None when the product has no promotion."""
        ...

    def write_if(self, product_id: int, expected_version: int, promotion: Promotion) -> bool:
        """Store `promotion` only if nobody wrote since `expected_version` was read."""
        ...

    def save(self, promotion: Promotion) -> VersionedPromotion:
        """Unconditionally store a promotion (configuration path) and bump its version."""
        ...

    def list_product_ids(self) -> List[int]:
        """List every product that has a promotion record."""
        ...


# ---- Catalog protocol (host collaborator) ----

class Catalog(Protocol):
    """Read-only product catalog owned by the host shop."""

    def get_regular_price(self, product_id: int) -> Decimal:
        """Regular unit price. Raises KeyError for unknown products."""
        ...

    def get_product_name(self, product_id: int) -> str:
        """Display name. Raises KeyError for unknown products."""
        ...

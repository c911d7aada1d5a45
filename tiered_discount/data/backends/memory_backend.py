from __future__ import annotations

import threading
from decimal import Decimal
from typing import Dict, Iterable, List, Optional

from ..interface import Catalog, PromotionStore
from ..models import CatalogProduct, Promotion, VersionedPromotion


class InMemoryPromotionStore(PromotionStore):
    """
    Process-local store.
    - The lock is held only inside a single read or conditional write, which is what
      makes `write_if` an atomic compare-and-swap. Callers never hold it across calls.
    """

    def __init__(self, promotions: Iterable[Promotion] = ()) -> None:
        self._records: Dict[int, VersionedPromotion] = {}
        self._lock = threading.Lock()
        for promotion in promotions:
            self.save(promotion)

    def read(self, product_id: int) -> Optional[VersionedPromotion]:
        with self._lock:
            return self._records.get(product_id)

    def write_if(self, product_id: int, expected_version: int, promotion: Promotion) -> bool:
        with self._lock:
            current = self._records.get(product_id)
            if current is None or current.version != expected_version:
                return False
            self._records[product_id] = VersionedPromotion(promotion=promotion, version=current.version + 1)
            return True

    def save(self, promotion: Promotion) -> VersionedPromotion:
        with self._lock:
            current = self._records.get(promotion.product_id)
            version = 0 if current is None else current.version + 1
            record = VersionedPromotion(promotion=promotion, version=version)
            self._records[promotion.product_id] = record
            return record

    def list_product_ids(self) -> List[int]:
        with self._lock:
            return sorted(self._records)


class InMemoryCatalog(Catalog):
    """Dictionary-backed catalog, handy for tests and demos."""

    def __init__(self, products: Iterable[CatalogProduct] = ()) -> None:
        self._products: Dict[int, CatalogProduct] = {p.product_id: p for p in products}

    def add(self, product_id: int, name: str, base_price: Decimal | str | float) -> None:
        self._products[product_id] = CatalogProduct(
            product_id=product_id, name=name, base_price=Decimal(str(base_price))
        )

    def get_regular_price(self, product_id: int) -> Decimal:
        return self._products[product_id].base_price

    def get_product_name(self, product_id: int) -> str:
        return self._products[product_id].name

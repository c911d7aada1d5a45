from __future__ import annotations

import os
import threading
from contextlib import contextmanager
from dataclasses import dataclass
from decimal import Decimal
from pathlib import Path
from typing import Dict, Iterator, List, Optional

import pandas as pd
from filelock import FileLock, Timeout
from pydantic import ValidationError

from ..interface import Catalog, PromotionStore
from ..models import CatalogProduct, Promotion, Tier, VersionedPromotion
from ...config import get_config
from ...errors import StorageUnavailable
from ...logging import get_logger

PROMOTION_COLUMNS = ["product_id", "enabled", "total_quantity", "sold_total", "version"]
TIER_COLUMNS = ["product_id", "tier_index", "capacity", "discount_percent", "sold", "notified_sold_out"]
PRODUCT_COLUMNS = ["product_id", "name", "base_price"]


@dataclass
class _Tables:
    promotions: pd.DataFrame
    tiers: pd.DataFrame


def resolve_data_dir(data_dir: str | Path | None = None) -> Path:
    """Turn the configured data directory into an absolute path.

    Relative paths are anchored at the repository root (the first parent holding a
    pyproject.toml), falling back to the current directory.
    """
    if data_dir is None:
        data_dir = get_config().data_dir

    path = Path(data_dir)
    if path.is_absolute():
        return path

    current = Path.cwd()
    for parent in [current] + list(current.parents):
        if (parent / "pyproject.toml").exists():
            return parent / path
    return current / path


def _as_bool(value) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("true", "1", "yes")
    return bool(value)


class CsvPromotionStore(PromotionStore):
    """
    CSV-backed promotion store.
    - One row per promotion in `tiered_promotions.csv`, one row per tier in
      `promotion_tiers.csv`; the `version` column is the compare-and-swap token.
    - Every call re-reads the files so other writers are always observed.
    - Each read, conditional write or save runs under a thread lock plus a file lock
      on the data directory, so the compare-and-swap holds across threads and across
      processes sharing the folder. The lock is store-wide because every write
      rewrites both files.
    """

    PROMOTIONS_FILE = "tiered_promotions.csv"
    TIERS_FILE = "promotion_tiers.csv"
    LOCK_FILE = ".tiered_promotions.lock"

    def __init__(self, data_dir: str | Path = None, lock_timeout: Optional[float] = None) -> None:
        self.data_dir = resolve_data_dir(data_dir)
        self._promotions_path = self.data_dir / self.PROMOTIONS_FILE
        self._tiers_path = self.data_dir / self.TIERS_FILE
        self.lock_timeout = get_config().storage_lock_timeout if lock_timeout is None else lock_timeout
        self._lock = threading.Lock()
        self.logger = get_logger(__name__)
        try:
            self.data_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageUnavailable(f"Cannot prepare promotion data directory {self.data_dir}: {e}") from e
        self._file_lock = FileLock(str(self.data_dir / self.LOCK_FILE))
        with self._locked():
            self._ensure_files()

    # ---------- file helpers ----------

    @contextmanager
    def _locked(self) -> Iterator[None]:
        with self._lock:
            try:
                self._file_lock.acquire(timeout=self.lock_timeout)
            except Timeout as e:
                raise StorageUnavailable(
                    f"Timed out after {self.lock_timeout}s waiting for the promotion store lock in {self.data_dir}"
                ) from e
            try:
                yield
            finally:
                self._file_lock.release()

    def _ensure_files(self) -> None:
        try:
            if not self._promotions_path.exists():
                self._atomic_write(pd.DataFrame(columns=PROMOTION_COLUMNS), self._promotions_path)
            if not self._tiers_path.exists():
                self._atomic_write(pd.DataFrame(columns=TIER_COLUMNS), self._tiers_path)
        except OSError as e:
            raise StorageUnavailable(f"Cannot prepare promotion data directory {self.data_dir}: {e}") from e

    def _load_tables(self) -> _Tables:
        try:
            promotions = pd.read_csv(self._promotions_path)
            tiers = pd.read_csv(self._tiers_path)
        except (OSError, ValueError) as e:
            raise StorageUnavailable(
                f"Error reading promotion CSV files from {self.data_dir}: {e}\n"
                f"Please check that the CSV files are valid and readable."
            ) from e

        missing = [c for c in PROMOTION_COLUMNS if c not in promotions.columns]
        missing += [c for c in TIER_COLUMNS if c not in tiers.columns]
        if missing:
            raise StorageUnavailable(
                f"Promotion CSV files in {self.data_dir} are missing columns: {', '.join(missing)}"
            )
        return _Tables(promotions=promotions, tiers=tiers)

    @staticmethod
    def _atomic_write(df: pd.DataFrame, path: Path) -> None:
        tmp = path.with_name(path.name + ".tmp")
        try:
            df.to_csv(tmp, index=False)
            os.replace(tmp, path)
        except OSError as e:
            raise StorageUnavailable(f"Error writing {path}: {e}") from e

    @staticmethod
    def _promotion_row(tables: _Tables, product_id: int) -> Optional[pd.Series]:
        rows = tables.promotions[tables.promotions["product_id"] == product_id]
        if rows.empty:
            return None
        return rows.iloc[0]

    def _to_versioned(self, tables: _Tables, row: pd.Series) -> VersionedPromotion:
        product_id = int(row["product_id"])
        tier_rows = tables.tiers[tables.tiers["product_id"] == product_id].sort_values("tier_index")
        try:
            tiers = [
                Tier(
                    capacity=int(t.capacity),
                    discount_percent=float(t.discount_percent),
                    sold=int(t.sold),
                    notified_sold_out=_as_bool(t.notified_sold_out),
                )
                for t in tier_rows.itertuples(index=False)
            ]
            promotion = Promotion(
                product_id=product_id,
                enabled=_as_bool(row["enabled"]),
                total_quantity=int(row["total_quantity"]),
                tiers=tiers,
            )
        except ValidationError as e:
            raise StorageUnavailable(f"Stored promotion for product {product_id} is corrupt: {e}") from e

        if int(row["sold_total"]) != promotion.sold_total:
            self.logger.warning(
                f"Cached sold_total {int(row['sold_total'])} for product {product_id} "
                f"disagrees with tier sales {promotion.sold_total}; using tier sales"
            )
        return VersionedPromotion(promotion=promotion, version=int(row["version"]))

    def _write_tables(self, tables: _Tables, promotion: Promotion, version: int) -> None:
        product_id = promotion.product_id

        promotion_records = [
            r for r in tables.promotions.to_dict("records") if int(r["product_id"]) != product_id
        ]
        promotion_records.append({
            "product_id": product_id,
            "enabled": promotion.enabled,
            "total_quantity": promotion.total_quantity,
            "sold_total": promotion.sold_total,
            "version": version,
        })

        tier_records = [
            r for r in tables.tiers.to_dict("records") if int(r["product_id"]) != product_id
        ]
        tier_records.extend(
            {
                "product_id": product_id,
                "tier_index": index,
                "capacity": tier.capacity,
                "discount_percent": tier.discount_percent,
                "sold": tier.sold,
                "notified_sold_out": tier.notified_sold_out,
            }
            for index, tier in enumerate(promotion.tiers)
        )

        promotions = pd.DataFrame(promotion_records, columns=PROMOTION_COLUMNS).sort_values("product_id")
        tiers = pd.DataFrame(tier_records, columns=TIER_COLUMNS).sort_values(["product_id", "tier_index"])

        # The promotions file carries the version, so it is replaced last.
        self._atomic_write(tiers, self._tiers_path)
        self._atomic_write(promotions, self._promotions_path)

    # ---------- interface implementation ----------

    def read(self, product_id: int) -> Optional[VersionedPromotion]:
        with self._locked():
            tables = self._load_tables()
            row = self._promotion_row(tables, product_id)
            if row is None:
                return None
            return self._to_versioned(tables, row)

    def write_if(self, product_id: int, expected_version: int, promotion: Promotion) -> bool:
        with self._locked():
            tables = self._load_tables()
            row = self._promotion_row(tables, product_id)
            if row is None or int(row["version"]) != expected_version:
                return False
            self._write_tables(tables, promotion, expected_version + 1)
            return True

    def save(self, promotion: Promotion) -> VersionedPromotion:
        with self._locked():
            tables = self._load_tables()
            row = self._promotion_row(tables, promotion.product_id)
            version = 0 if row is None else int(row["version"]) + 1
            self._write_tables(tables, promotion, version)
            return VersionedPromotion(promotion=promotion, version=version)

    def list_product_ids(self) -> List[int]:
        with self._locked():
            tables = self._load_tables()
        return sorted(int(pid) for pid in tables.promotions["product_id"].tolist())


class CsvCatalog(Catalog):
    """
    Catalog read from `products.csv` (product_id, name, base_price; extra columns ignored).
    - Loads the CSV once at construction; the catalog is read-only for this core.
    """

    PRODUCTS_FILE = "products.csv"

    def __init__(self, data_dir: str | Path = None) -> None:
        self.data_dir = resolve_data_dir(data_dir)
        self._products = self._load_products(self.data_dir / self.PRODUCTS_FILE)

    @staticmethod
    def _load_products(path: Path) -> Dict[int, CatalogProduct]:
        if not path.exists():
            raise FileNotFoundError(
                f"Product catalog not found: {path}\n"
                f"Please either:\n"
                f"  1. Generate sample data: python -m tiered_discount.scripts.seed_promotions\n"
                f"  2. Set DATA_DIR environment variable to point to your data directory"
            )
        try:
            products = pd.read_csv(path, dtype={"base_price": str})
        except (OSError, ValueError) as e:
            raise RuntimeError(
                f"Error reading product catalog {path}: {e}\n"
                f"Please check that the CSV file is valid and readable."
            ) from e

        missing = [c for c in PRODUCT_COLUMNS if c not in products.columns]
        if missing:
            raise RuntimeError(f"Product catalog {path} is missing columns: {', '.join(missing)}")

        return {
            int(row.product_id): CatalogProduct(
                product_id=int(row.product_id),
                name=str(row.name),
                base_price=Decimal(str(row.base_price)),
            )
            for row in products[PRODUCT_COLUMNS].itertuples(index=False)
        }

    def get_regular_price(self, product_id: int) -> Decimal:
        return self._products[product_id].base_price

    def get_product_name(self, product_id: int) -> str:
        return self._products[product_id].name

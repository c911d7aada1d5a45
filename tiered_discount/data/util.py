from __future__ import annotations

from pathlib import Path
from typing import Literal, Optional

from .backends.csv_backend import CsvCatalog, CsvPromotionStore
from .backends.memory_backend import InMemoryCatalog, InMemoryPromotionStore
from .interface import Catalog, PromotionStore
from ..config import get_config


def get_promotion_store(
    kind: Optional[Literal["csv", "memory"]] = None,
    data_dir: Optional[str | Path] = None,
) -> PromotionStore:
    config = get_config()
    kind = kind or config.store_backend
    if kind == "csv":
        # Reads and writes the configured CSV folder
        return CsvPromotionStore(data_dir=data_dir or config.data_dir)
    if kind == "memory":
        return InMemoryPromotionStore()
    raise ValueError(f"Unknown promotion store kind: {kind}")


def get_catalog(
    kind: Optional[Literal["csv", "memory"]] = None,
    data_dir: Optional[str | Path] = None,
) -> Catalog:
    config = get_config()
    kind = kind or config.store_backend
    if kind == "csv":
        return CsvCatalog(data_dir=data_dir or config.data_dir)
    if kind == "memory":
        return InMemoryCatalog()
    raise ValueError(f"Unknown catalog kind: {kind}")

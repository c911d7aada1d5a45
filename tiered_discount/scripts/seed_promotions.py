#!/usr/bin/env python3
"""
seed_promotions.py

Generates a small product catalog and tiered promotions under a local folder
(default: the configured data_dir).

Files:
- products.csv (catalog), tiered_promotions.csv, promotion_tiers.csv

Run:
  python -m tiered_discount.scripts.seed_promotions --products 20 --seed 42
"""

from __future__ import annotations
import argparse
import csv
import os
import random
import sys
from decimal import Decimal
from typing import Dict, List, Optional, Tuple

from tiered_discount.config import get_config
from tiered_discount.data.backends.csv_backend import CsvPromotionStore, resolve_data_dir
from tiered_discount.services.configuration import PromotionConfigurator

# -----------------------------
# Config & helper structures
# -----------------------------

CATEGORIES = {
    "Beverages": ["SparkleCo", "H2Only", "BeanWorks", "Leaf&Lime"],
    "Snacks": ["CrunchLabs", "NuttyBuddy", "SweetTreats", "SaltyWave"],
    "Household": ["HomeGuard", "ShinePro", "EcoClean", "FreshNest"],
    "Personal Care": ["GlowCare", "PureForm", "DailyZen", "Wellness+"],
}

# (capacity, discount %) ladders; deeper discounts go first.
TIER_LADDERS: List[List[Tuple[int, float]]] = [
    [(10, 30.0), (10, 20.0), (10, 10.0)],
    [(5, 50.0), (15, 25.0)],
    [(20, 15.0)],
    [(3, 40.0), (7, 30.0), (10, 20.0), (20, 10.0)],
]


def ensure_dir(path: str) -> None:
    if not os.path.exists(path):
        os.makedirs(path, exist_ok=True)

def price_round(p: float) -> Decimal:
    return Decimal(str(round(max(p, 0.01), 2)))

def gen_products(n: int) -> List[Dict]:
    products = []
    for product_id in range(1, n + 1):
        category = random.choice(list(CATEGORIES.keys()))
        brand = random.choice(CATEGORIES[category])
        products.append({
            "product_id": product_id,
            "name": f"{brand} {category} {random.randint(10, 999)}",
            "category": category,
            "brand": brand,
            "base_price": price_round(random.uniform(1.0, 30.0)),
        })
    return products

def gen_promotions(products: List[Dict], share: float) -> List[Tuple[int, List[Tuple[int, float]]]]:
    promos = []
    for p in products:
        if random.random() < share:
            promos.append((p["product_id"], random.choice(TIER_LADDERS)))
    return promos

def write_csv(path: str, rows: List[Dict], headers: List[str]) -> None:
    with open(path, "w", newline="", encoding="utf-8") as f:
        w = csv.DictWriter(f, fieldnames=headers)
        w.writeheader()
        for r in rows:
            w.writerow(r)


# -----------------------------
# Main
# -----------------------------

def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Generate a sample catalog with tiered promotions.")
    parser.add_argument("--products", type=int, default=20, help="Number of catalog products.")
    parser.add_argument("--promo-share", type=float, default=0.5, help="Share of products with a promotion.")
    parser.add_argument("--output-dir", type=str, default=get_config().data_dir)
    parser.add_argument("--seed", type=int, default=42)
    parser.add_argument("--no-overwrite", action="store_true", help="Fail if CSVs already exist.")
    args = parser.parse_args(argv)

    random.seed(args.seed)

    outdir = str(resolve_data_dir(args.output_dir))
    ensure_dir(outdir)

    files = {
        "products": os.path.join(outdir, "products.csv"),
        "promotions": os.path.join(outdir, CsvPromotionStore.PROMOTIONS_FILE),
        "tiers": os.path.join(outdir, CsvPromotionStore.TIERS_FILE),
    }
    if args.no_overwrite:
        for p in files.values():
            if os.path.exists(p):
                print(f"Refusing to overwrite existing file: {p}", file=sys.stderr)
                return 2
    # Start from empty promotion files so stale records do not survive.
    for key in ("promotions", "tiers"):
        if os.path.exists(files[key]):
            os.remove(files[key])

    products = gen_products(args.products)
    write_csv(files["products"], products, ["product_id", "name", "category", "brand", "base_price"])

    configurator = PromotionConfigurator(CsvPromotionStore(outdir))
    promotions = gen_promotions(products, args.promo_share)
    for product_id, ladder in promotions:
        total = sum(capacity for capacity, _ in ladder)
        configurator.configure(product_id, enabled=True, total_quantity=total, tiers=ladder)

    print(f"Generated data in {outdir}")
    print(f" products: {len(products)} | promotions: {len(promotions)}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

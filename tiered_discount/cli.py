"""
Command line access to the tiered discount services.

  tiered-discount status 12
  tiered-discount estimate 12 --quantity 8
  tiered-discount commit 12 --quantity 8
  tiered-discount configure 12 --total 20 --tiers "10|30" "10|20"
"""

from __future__ import annotations

import argparse
import sys
from typing import List, Optional

from tiered_discount.errors import TieredDiscountError
from tiered_discount.services.container import Services, build_services


def _positive_int(value: str) -> int:
    number = int(value)
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be a positive whole number, got {value}")
    return number


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="tiered-discount", description="Tiered inventory discount tools.")
    sub = parser.add_subparsers(dest="command", required=True)

    status = sub.add_parser("status", help="Show a product's promotion status.")
    status.add_argument("product_id", type=int)

    sub.add_parser("summary", help="List every running promotion.")

    for name, help_text in (
        ("estimate", "Estimate the discounted unit price."),
        ("check", "Check whether a quantity may be added to the cart."),
        ("commit", "Allocate promotional units for a confirmed order line."),
    ):
        cmd = sub.add_parser(name, help=help_text)
        cmd.add_argument("product_id", type=int)
        cmd.add_argument("--quantity", type=_positive_int, default=1)

    configure = sub.add_parser("configure", help="Create or replace a promotion (counters reset).")
    configure.add_argument("product_id", type=int)
    configure.add_argument("--total", type=int, required=True, help="Total promotional units.")
    configure.add_argument("--tiers", nargs="+", required=True, help='Tiers as "capacity|discount".')
    configure.add_argument("--disabled", action="store_true")
    return parser


def run(args: argparse.Namespace, services: Services) -> int:
    if args.command == "status":
        status = services.status.status(args.product_id)
        print(status.model_dump_json(indent=2) if status else "No promotion running.")
    elif args.command == "summary":
        summary = services.status.summary()
        print(summary.to_string(index=False) if not summary.empty else "No products with promotions found.")
    elif args.command == "estimate":
        price = services.estimator.estimate(args.product_id, args.quantity)
        print(price if price is not None else "not applicable")
    elif args.command == "check":
        decision = services.guard.check_add_to_cart(args.product_id, args.quantity)
        print(decision.model_dump_json(indent=2))
        return 0 if decision.allowed else 1
    elif args.command == "commit":
        result = services.allocation.commit(args.product_id, args.quantity)
        services.orders.dispatch_sold_out(result)
        print(result.model_dump_json(indent=2))
    elif args.command == "configure":
        record = services.configurator.configure(
            args.product_id,
            enabled=not args.disabled,
            total_quantity=args.total,
            tiers="\n".join(args.tiers),
        )
        print(record.model_dump_json(indent=2))
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = _build_parser().parse_args(argv)
    services = build_services()
    try:
        return run(args, services)
    except TieredDiscountError as e:
        print(f"{type(e).__name__}: {e}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    raise SystemExit(main())

#!/usr/bin/env python3

from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import asdict, replace
from pathlib import Path
from typing import Any, Optional

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from pairswap.core.config import AmmConfig, config_from_env, load_config
from pairswap.core.effects import Effect
from pairswap.core.engine import AmmEngine
from pairswap.errors import AmmError, PoolNotFound


def _u64_arg(raw: str) -> int:
    try:
        value = int(raw, 10)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"not an integer: {raw!r}") from exc
    if value < 0:
        raise argparse.ArgumentTypeError(f"must be non-negative: {raw!r}")
    return value


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Run one pool operation offline and print the resulting pool as JSON.")
    p.add_argument("--asset-a", default="A", help="First asset id (default: A)")
    p.add_argument("--asset-b", default="B", help="Second asset id (default: B)")
    p.add_argument("--amount-a", required=True, type=_u64_arg, help="Initial deposit of asset-a")
    p.add_argument("--amount-b", required=True, type=_u64_arg, help="Initial deposit of asset-b")
    p.add_argument("--fee-points", type=_u64_arg, default=None, help="Swap fee in parts per 10_000 (overrides config/env)")
    p.add_argument("--config", type=Path, default=None, help="Optional YAML config file")
    p.add_argument("--verbose", action="store_true", help="Log engine effects to stderr")

    sub = p.add_subparsers(dest="op", required=True)

    sub.add_parser("create", help="Only create the pool")

    add = sub.add_parser("add", help="Add liquidity after creation")
    add.add_argument("--low", required=True, type=_u64_arg, help="Low-asset amount offered")
    add.add_argument("--high", required=True, type=_u64_arg, help="High-asset amount offered")
    add.add_argument("--min-lp", type=_u64_arg, default=0)

    rm = sub.add_parser("remove", help="Burn LP after creation")
    rm.add_argument("--lp", required=True, type=_u64_arg, help="LP amount to burn")
    rm.add_argument("--min-low", type=_u64_arg, default=0)
    rm.add_argument("--min-high", type=_u64_arg, default=0)

    swap = sub.add_parser("swap", help="Exact-in swap after creation")
    swap.add_argument("--amount-in", required=True, type=_u64_arg)
    swap.add_argument("--min-out", type=_u64_arg, default=0)
    swap.add_argument("--direction", choices=("low_to_high", "high_to_low"), default="low_to_high")

    return p


def _resolve_config(args: argparse.Namespace) -> AmmConfig:
    base = load_config(args.config) if args.config is not None else AmmConfig()
    cfg = config_from_env(base=base)
    if args.fee_points is not None:
        cfg = replace(cfg, fee_points=args.fee_points)
    return cfg


def run(argv: Optional[list[str]] = None) -> tuple[int, dict[str, Any]]:
    """Parse *argv*, execute, and return ``(exit_code, json_payload)``."""
    args = build_parser().parse_args(argv)
    if args.verbose:
        logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s", stream=sys.stderr)

    try:
        cfg = _resolve_config(args)
    except (OSError, ValueError) as exc:
        return 2, {"error": "config", "message": str(exc)}

    effects: list[Effect] = []
    engine = AmmEngine(cfg, effect_sink=effects.append)

    try:
        lp_created = engine.create_pool(args.asset_a, args.asset_b, args.amount_a, args.amount_b)
        handle = engine.get_pool(args.asset_a, args.asset_b)
        if handle is None:
            raise PoolNotFound(f"no pool for {args.asset_a}/{args.asset_b} after create")

        result: dict[str, Any] = {"lp_minted": lp_created}
        if args.op == "add":
            result = asdict(engine.add_liquidity(handle, args.low, args.high, args.min_lp))
        elif args.op == "remove":
            result = asdict(engine.remove_liquidity(handle, args.lp, args.min_low, args.min_high))
        elif args.op == "swap":
            if args.direction == "low_to_high":
                out = engine.swap_exact_low_for_high(handle, args.amount_in, args.min_out)
            else:
                out = engine.swap_exact_high_for_low(handle, args.amount_in, args.min_out)
            result = {"amount_out": out}
    except AmmError as exc:
        return 1, {"error": exc.code, "message": str(exc)}

    reserve_low, reserve_high, lp_supply = engine.pool_balances(handle)
    payload = {
        "op": args.op,
        "pool_id": handle.pool.pool_id,
        "pair": {"low": handle.pair.low, "high": handle.pair.high},
        "result": result,
        "balances": {"reserve_low": reserve_low, "reserve_high": reserve_high, "lp_supply": lp_supply},
        "effects": [e.to_dict() for e in effects],
    }
    return 0, payload


def main(argv: Optional[list[str]] = None) -> int:
    code, payload = run(argv)
    print(json.dumps(payload, sort_keys=True, indent=2))
    return code


if __name__ == "__main__":
    raise SystemExit(main())

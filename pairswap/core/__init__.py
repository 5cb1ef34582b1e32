"""
Core pool algorithms
"""

from .cpmm import quote_exact_in, swap_exact_in
from .liquidity import (
    AddLiquidityResult,
    RemoveLiquidityResult,
    create_pool,
    add_liquidity,
    remove_liquidity,
)
from .config import AmmConfig, config_from_env, load_config
from .effects import Direction, Effect, Event
from .engine import AmmEngine
from .invariants import check_all

__all__ = [
    "quote_exact_in",
    "swap_exact_in",
    "AddLiquidityResult",
    "RemoveLiquidityResult",
    "create_pool",
    "add_liquidity",
    "remove_liquidity",
    "AmmConfig",
    "config_from_env",
    "load_config",
    "Direction",
    "Effect",
    "Event",
    "AmmEngine",
    "check_all",
]

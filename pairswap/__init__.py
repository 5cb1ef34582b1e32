"""
pairswap: constant-product AMM pool engine.

Public API:
- `AmmEngine`: pool registry + create/add/remove/swap operations
- `AmmConfig`: runtime configuration
- `PairKey`, `canonicalize`: canonical pair identity
- `pairswap.errors`: typed failures (all subclass `AmmError`)
"""

from .core import AmmConfig, AmmEngine, Effect, Event
from .errors import AmmError
from .state import PairKey, Pool, PoolHandle, PoolRegistry, canonicalize

__all__ = [
    "AmmConfig",
    "AmmEngine",
    "AmmError",
    "Effect",
    "Event",
    "PairKey",
    "Pool",
    "PoolHandle",
    "PoolRegistry",
    "canonicalize",
]

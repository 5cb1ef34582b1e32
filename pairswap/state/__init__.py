"""
State management for pairswap pools
"""

from .pairs import AssetId, Ordering, PairKey, canonicalize, compare, is_flipped, pool_id
from .pools import Pool, PoolHandle
from .registry import PoolRegistry

__all__ = [
    "AssetId",
    "Ordering",
    "PairKey",
    "canonicalize",
    "compare",
    "is_flipped",
    "pool_id",
    "Pool",
    "PoolHandle",
    "PoolRegistry",
]

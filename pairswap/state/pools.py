"""
Pool state for constant-product pools.

``Pool`` is an immutable record; every transition builds a new one with
``dataclasses.replace``. ``PoolHandle`` is the lockable cell the registry
indexes: it holds the current record and swaps it wholesale, so a reader never
observes a half-applied update.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, field

from ..kernels.python.cpmm_swap_v1 import require_fee_points
from ..kernels.python.wide_math_v1 import require_u64
from .pairs import PairKey


@dataclass(frozen=True)
class Pool:
    """
    State of a liquidity pool.

    Attributes:
        pair: Canonical asset pair (``pair.low`` < ``pair.high``)
        reserve_low: Reserve of ``pair.low``
        reserve_high: Reserve of ``pair.high``
        lp_supply: Total LP supply outstanding
        fee_points: Swap fee in parts per 10_000 (0 <= fee_points < 10_000)
    """

    pair: PairKey
    reserve_low: int
    reserve_high: int
    lp_supply: int
    fee_points: int

    def __post_init__(self) -> None:
        if not isinstance(self.pair, PairKey):
            raise TypeError("pair must be a PairKey")
        require_u64("reserve_low", self.reserve_low)
        require_u64("reserve_high", self.reserve_high)
        require_u64("lp_supply", self.lp_supply)
        require_fee_points(self.fee_points)

    @property
    def pool_id(self) -> str:
        return self.pair.pool_id

    def balances(self) -> tuple[int, int, int]:
        return self.reserve_low, self.reserve_high, self.lp_supply

    def get_constant_product(self) -> int:
        """Compute k = reserve_low * reserve_high."""
        return self.reserve_low * self.reserve_high

    def __repr__(self) -> str:
        return (
            f"Pool(pair={self.pair}, "
            f"reserves=({self.reserve_low}, {self.reserve_high}), "
            f"lp_supply={self.lp_supply}, fee_points={self.fee_points})"
        )


@dataclass(eq=False)
class PoolHandle:
    """Mutable, lockable reference to the current ``Pool`` record of one pair."""

    pool: Pool
    lock: threading.Lock = field(default_factory=threading.Lock, repr=False, compare=False)

    @property
    def pair(self) -> PairKey:
        return self.pool.pair

    def balances(self) -> tuple[int, int, int]:
        # A single attribute read; records are immutable.
        return self.pool.balances()

"""
Pool engine (imperative shell around the pure pool transitions).

Every mutating operation follows the same path:
1. resolve the pool handle and validate amounts,
2. take the pool lock,
3. compute the post-state with a pure transition from ``liquidity`` / ``cpmm``,
4. check the post-state invariants,
5. swap the record into the handle and release the lock,
6. emit one ``Effect`` (logger + optional sink).

Any exception in steps 1-4 leaves the handle untouched, so an operation either
fully applies or not at all.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Mapping, Optional, Tuple, TypeVar, Union

from ..errors import ArithmeticOverflow, InvariantViolation, PoolNotFound
from ..integration.snapshot import AmmSnapshot, registry_from_snapshot, snapshot_from_registry
from ..kernels.python.wide_math_v1 import require_u64
from ..state.pairs import AssetId, PairKey, canonicalize
from ..state.pools import Pool, PoolHandle
from ..state.registry import PoolRegistry
from . import cpmm, liquidity
from .config import AmmConfig
from .effects import (
    Direction,
    Effect,
    effect_liquidity_added,
    effect_liquidity_removed,
    effect_pool_created,
    effect_swapped,
)
from .invariants import check_all, check_k_non_decreasing
from .liquidity import AddLiquidityResult, RemoveLiquidityResult


logger = logging.getLogger(__name__)

PoolRef = Union[PoolHandle, PairKey]
EffectSink = Callable[[Effect], None]
T = TypeVar("T")


class AmmEngine:
    """
    Registry of constant-product pools plus the operation surface over them.

    Operations on different pools run concurrently; operations on the same
    pool are serialized by that pool's lock.
    """

    def __init__(
        self,
        config: Optional[AmmConfig] = None,
        registry: Optional[PoolRegistry] = None,
        *,
        effect_sink: Optional[EffectSink] = None,
    ) -> None:
        self.config = config or AmmConfig()
        self.registry = registry if registry is not None else PoolRegistry()
        self._effect_sink = effect_sink

    # -- helpers ---------------------------------------------------------------

    def _require_amount(self, name: str, value: int) -> int:
        require_u64(name, value)
        if value > self.config.max_amount:
            raise ArithmeticOverflow(f"{name} exceeds configured max_amount: {value}")
        return value

    def _resolve(self, pool: PoolRef) -> PoolHandle:
        if isinstance(pool, PoolHandle):
            return pool
        if isinstance(pool, PairKey):
            handle = self.registry.lookup(pool)
            if handle is None:
                raise PoolNotFound(f"no pool for {pool}")
            return handle
        raise TypeError(f"pool must be a PoolHandle or PairKey, got {type(pool).__name__}")

    @staticmethod
    def _check_post_state(after: Pool) -> None:
        violations = check_all(after)
        if violations:
            raise InvariantViolation(violations)

    def _emit(self, effect: Effect) -> None:
        if self.config.log_effects:
            logger.info(effect.event.value, extra=effect.to_dict())
        if self._effect_sink is None:
            return
        # The operation is already committed; a sink failure must not surface as its error.
        try:
            self._effect_sink(effect)
        except Exception:
            logger.exception("effect sink failed for %s", effect.event.value, extra={"pool_id": effect.pool_id})

    def _apply(
        self,
        handle: PoolHandle,
        transition: Callable[[Pool], Tuple[Pool, T]],
        *,
        k_must_not_decrease: bool,
    ) -> Tuple[Pool, Pool, T]:
        with handle.lock:
            before = handle.pool
            after, out = transition(before)
            self._check_post_state(after)
            if k_must_not_decrease and not check_k_non_decreasing(before, after):
                raise InvariantViolation(["k_non_decreasing"])
            handle.pool = after
        return before, after, out

    # -- operations ------------------------------------------------------------

    def create_pool(self, asset_a: AssetId, asset_b: AssetId, amount_a: int, amount_b: int) -> int:
        """
        Create the pool for ``{asset_a, asset_b}`` and return the LP minted to the creator.

        Raises:
            ZeroInput: If either amount is zero
            InvalidPair: If the assets are equal or malformed
            PoolAlreadyExists: If the canonical pair already has a pool
        """
        self._require_amount("amount_a", amount_a)
        self._require_amount("amount_b", amount_b)

        pool, lp_minted = liquidity.create_pool(asset_a, asset_b, amount_a, amount_b, self.config.fee_points)
        self._check_post_state(pool)
        # Registration is the commit point: nothing is visible before it succeeds.
        self.registry.register(pool.pair, PoolHandle(pool))

        self._emit(effect_pool_created(pool))
        return lp_minted

    def get_pool(self, asset_a: AssetId, asset_b: AssetId) -> Optional[PoolHandle]:
        return self.registry.lookup(canonicalize(asset_a, asset_b))

    def add_liquidity(
        self,
        pool: PoolRef,
        amount_low_in: int,
        amount_high_in: int,
        min_lp_out: int,
    ) -> AddLiquidityResult:
        handle = self._resolve(pool)
        self._require_amount("amount_low_in", amount_low_in)
        self._require_amount("amount_high_in", amount_high_in)
        require_u64("min_lp_out", min_lp_out)

        before, after, res = self._apply(
            handle,
            lambda p: liquidity.add_liquidity(p, amount_low_in, amount_high_in, min_lp_out),
            k_must_not_decrease=True,
        )
        self._emit(effect_liquidity_added(before, after))
        return res

    def remove_liquidity(
        self,
        pool: PoolRef,
        lp_to_burn: int,
        min_low_out: int,
        min_high_out: int,
    ) -> RemoveLiquidityResult:
        handle = self._resolve(pool)
        self._require_amount("lp_to_burn", lp_to_burn)
        require_u64("min_low_out", min_low_out)
        require_u64("min_high_out", min_high_out)

        before, after, res = self._apply(
            handle,
            lambda p: liquidity.remove_liquidity(p, lp_to_burn, min_low_out, min_high_out),
            k_must_not_decrease=False,
        )
        self._emit(effect_liquidity_removed(before, after))
        return res

    def _swap(self, pool: PoolRef, amount_in: int, min_out: int, *, low_to_high: bool) -> int:
        handle = self._resolve(pool)
        self._require_amount("amount_in", amount_in)
        require_u64("min_out", min_out)

        before, after, amount_out = self._apply(
            handle,
            lambda p: cpmm.swap_exact_in(p, amount_in, min_out, low_to_high),
            k_must_not_decrease=True,
        )
        direction = Direction.LOW_TO_HIGH if low_to_high else Direction.HIGH_TO_LOW
        self._emit(effect_swapped(before, after, direction=direction, amount_in=amount_in, amount_out=amount_out))
        return amount_out

    def swap_exact_low_for_high(self, pool: PoolRef, amount_in: int, min_out: int) -> int:
        return self._swap(pool, amount_in, min_out, low_to_high=True)

    def swap_exact_high_for_low(self, pool: PoolRef, amount_in: int, min_out: int) -> int:
        return self._swap(pool, amount_in, min_out, low_to_high=False)

    def quote_exact_in(self, pool: PoolRef, amount_in: int, low_to_high: bool) -> int:
        handle = self._resolve(pool)
        self._require_amount("amount_in", amount_in)
        return cpmm.quote_exact_in(handle.pool, amount_in, low_to_high)

    def pool_balances(self, pool: PoolRef) -> Tuple[int, int, int]:
        """Return ``(reserve_low, reserve_high, lp_supply)``."""
        return self._resolve(pool).balances()

    # -- persistence -----------------------------------------------------------

    def snapshot(self) -> AmmSnapshot:
        return snapshot_from_registry(self.registry)

    @classmethod
    def from_snapshot(
        cls,
        data: Mapping[str, Any],
        config: Optional[AmmConfig] = None,
        *,
        effect_sink: Optional[EffectSink] = None,
    ) -> "AmmEngine":
        return cls(config=config, registry=registry_from_snapshot(data), effect_sink=effect_sink)

    def __repr__(self) -> str:
        return f"AmmEngine(pools={len(self.registry)}, fee_points={self.config.fee_points})"

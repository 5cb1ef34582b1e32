"""Effect records for the pool engine.

One ``Effect`` is produced per successful operation. It carries the pair
identity, the signed deltas actually applied to the pool, and the post-state
balances. Effects are derived from the (pre, post) record pair, never from the
caller's requested amounts.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, unique
from typing import Any, Optional

from ..state.pools import Pool


@unique
class Event(Enum):
    POOL_CREATED = "PoolCreated"
    LIQUIDITY_ADDED = "LiquidityAdded"
    LIQUIDITY_REMOVED = "LiquidityRemoved"
    SWAPPED = "Swapped"


@unique
class Direction(Enum):
    LOW_TO_HIGH = "low_to_high"
    HIGH_TO_LOW = "high_to_low"


@dataclass(frozen=True)
class Effect:
    """Post-transition observables emitted after a committed operation."""

    event: Event
    pool_id: str
    low: str
    high: str
    reserve_low_delta: int
    reserve_high_delta: int
    lp_supply_delta: int
    reserve_low_after: int
    reserve_high_after: int
    lp_supply_after: int
    direction: Optional[Direction] = None
    amount_in: int = 0
    amount_out: int = 0

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "event": self.event.value,
            "pool_id": self.pool_id,
            "low": self.low,
            "high": self.high,
            "reserve_low_delta": self.reserve_low_delta,
            "reserve_high_delta": self.reserve_high_delta,
            "lp_supply_delta": self.lp_supply_delta,
            "reserve_low_after": self.reserve_low_after,
            "reserve_high_after": self.reserve_high_after,
            "lp_supply_after": self.lp_supply_after,
        }
        if self.event is Event.SWAPPED:
            out["direction"] = self.direction.value if self.direction is not None else None
            out["amount_in"] = self.amount_in
            out["amount_out"] = self.amount_out
        return out


def _transition(event: Event, before: Optional[Pool], after: Pool, **extra: Any) -> Effect:
    b_low, b_high, b_lp = before.balances() if before is not None else (0, 0, 0)
    return Effect(
        event=event,
        pool_id=after.pool_id,
        low=after.pair.low,
        high=after.pair.high,
        reserve_low_delta=after.reserve_low - b_low,
        reserve_high_delta=after.reserve_high - b_high,
        lp_supply_delta=after.lp_supply - b_lp,
        reserve_low_after=after.reserve_low,
        reserve_high_after=after.reserve_high,
        lp_supply_after=after.lp_supply,
        **extra,
    )


def effect_pool_created(after: Pool) -> Effect:
    return _transition(Event.POOL_CREATED, None, after)


def effect_liquidity_added(before: Pool, after: Pool) -> Effect:
    return _transition(Event.LIQUIDITY_ADDED, before, after)


def effect_liquidity_removed(before: Pool, after: Pool) -> Effect:
    return _transition(Event.LIQUIDITY_REMOVED, before, after)


def effect_swapped(before: Pool, after: Pool, *, direction: Direction, amount_in: int, amount_out: int) -> Effect:
    return _transition(
        Event.SWAPPED,
        before,
        after,
        direction=direction,
        amount_in=amount_in,
        amount_out=amount_out,
    )

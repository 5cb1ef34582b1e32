"""Invariant checkers for pool records.

Each function returns True when the invariant holds, and ``check_all()``
returns the list of violated invariant IDs (empty = all pass). The engine runs
``check_all()`` on every post-state before committing it.
"""

from __future__ import annotations

from typing import Callable

from ..kernels.python.cpmm_swap_v1 import FEE_DENOM
from ..kernels.python.wide_math_v1 import U64_MAX
from ..state.pools import Pool


def inv_fee_in_range(p: Pool) -> bool:
    return 0 <= p.fee_points < FEE_DENOM


def inv_reserves_u64(p: Pool) -> bool:
    return 0 <= p.reserve_low <= U64_MAX and 0 <= p.reserve_high <= U64_MAX


def inv_supply_u64(p: Pool) -> bool:
    return 0 <= p.lp_supply <= U64_MAX


def inv_reserves_positive_when_supplied(p: Pool) -> bool:
    if p.lp_supply == 0:
        return True
    return p.reserve_low > 0 and p.reserve_high > 0


def inv_drained_is_empty(p: Pool) -> bool:
    if p.lp_supply > 0:
        return True
    return p.reserve_low == 0 and p.reserve_high == 0


INVARIANT_REGISTRY: dict[str, Callable[[Pool], bool]] = {
    "inv_fee_in_range": inv_fee_in_range,
    "inv_reserves_u64": inv_reserves_u64,
    "inv_supply_u64": inv_supply_u64,
    "inv_reserves_positive_when_supplied": inv_reserves_positive_when_supplied,
    "inv_drained_is_empty": inv_drained_is_empty,
}


def check_all(pool: Pool) -> list[str]:
    """Return list of violated invariant IDs (empty = all pass)."""
    return [
        inv_id
        for inv_id, check_fn in INVARIANT_REGISTRY.items()
        if not check_fn(pool)
    ]


def check_k_non_decreasing(before: Pool, after: Pool) -> bool:
    """True when ``reserve_low * reserve_high`` did not shrink (swaps and adds)."""
    return after.get_constant_product() >= before.get_constant_product()

"""
Liquidity management operations: create pool, add/remove liquidity.

These are pure transitions over ``Pool`` records. Each returns the post-state
record alongside the caller-facing amounts; nothing is committed here.
"""

from dataclasses import dataclass, replace
from typing import Tuple

from ..errors import ZeroInput
from ..kernels.python.lp_math_v1 import burn_liquidity, mint_liquidity, mint_liquidity_initial
from ..kernels.python.wide_math_v1 import require_u64
from ..state.pairs import AssetId, canonicalize, is_flipped
from ..state.pools import Pool


@dataclass(frozen=True)
class AddLiquidityResult:
    low_returned: int
    high_returned: int
    lp_minted: int


@dataclass(frozen=True)
class RemoveLiquidityResult:
    low_out: int
    high_out: int


def create_pool(
    asset_a: AssetId,
    asset_b: AssetId,
    amount_a: int,
    amount_b: int,
    fee_points: int,
) -> Tuple[Pool, int]:
    """
    Build the initial record for a new pool.

    Amounts travel with their assets: if ``(asset_a, asset_b)`` is the reverse
    of canonical order, ``amount_a`` seeds the high reserve.

    LP minting for the first deposit:
        lp = floor(sqrt(reserve_low * reserve_high))

    Returns:
        Tuple of (Pool, lp_minted)

    Raises:
        ZeroInput: If either amount is zero
        InvalidPair: If the assets are equal or malformed
    """
    require_u64("amount_a", amount_a)
    require_u64("amount_b", amount_b)
    if amount_a == 0 or amount_b == 0:
        raise ZeroInput(f"initial deposits must be positive: ({amount_a}, {amount_b})")

    pair = canonicalize(asset_a, asset_b)
    if is_flipped(asset_a, asset_b):
        reserve_low, reserve_high = amount_b, amount_a
    else:
        reserve_low, reserve_high = amount_a, amount_b

    lp_minted = mint_liquidity_initial(amount_low=reserve_low, amount_high=reserve_high)
    pool = Pool(
        pair=pair,
        reserve_low=reserve_low,
        reserve_high=reserve_high,
        lp_supply=lp_minted,
        fee_points=fee_points,
    )
    return pool, lp_minted


def add_liquidity(
    pool: Pool,
    amount_low_in: int,
    amount_high_in: int,
    min_lp_out: int,
) -> Tuple[Pool, AddLiquidityResult]:
    """
    Add liquidity in the pool's current ratio.

    The binding side is deposited in full; the other side's deposit is rounded
    up and its unused remainder is handed back in the result.
    """
    res = mint_liquidity(
        reserve_low=pool.reserve_low,
        reserve_high=pool.reserve_high,
        total_supply=pool.lp_supply,
        amount_low_desired=amount_low_in,
        amount_high_desired=amount_high_in,
        min_liquidity=min_lp_out,
    )
    after = replace(
        pool,
        reserve_low=res.new_reserve_low,
        reserve_high=res.new_reserve_high,
        lp_supply=res.new_total_supply,
    )
    return after, AddLiquidityResult(
        low_returned=res.amount_low_refund,
        high_returned=res.amount_high_refund,
        lp_minted=res.liquidity_minted,
    )


def remove_liquidity(
    pool: Pool,
    lp_to_burn: int,
    min_low_out: int,
    min_high_out: int,
) -> Tuple[Pool, RemoveLiquidityResult]:
    """
    Burn LP for a proportional share of both reserves.

    Outputs:
        low_out = floor(lp_to_burn * reserve_low / lp_supply)
        high_out = floor(lp_to_burn * reserve_high / lp_supply)
    or the entire reserves when ``lp_to_burn == lp_supply``.
    """
    res = burn_liquidity(
        lp_amount=lp_to_burn,
        reserve_low=pool.reserve_low,
        reserve_high=pool.reserve_high,
        total_supply=pool.lp_supply,
        min_low_out=min_low_out,
        min_high_out=min_high_out,
    )
    after = replace(
        pool,
        reserve_low=res.new_reserve_low,
        reserve_high=res.new_reserve_high,
        lp_supply=res.new_total_supply,
    )
    return after, RemoveLiquidityResult(low_out=res.amount_low_out, high_out=res.amount_high_out)

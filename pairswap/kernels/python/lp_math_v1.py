"""
Liquidity math kernel (v1 semantics).

Pure functions with explicit rounding rules:
- initial mint is the geometric mean of the two deposits (floor),
- the non-binding side of a deposit is rounded *up* (pool never under-credited),
- minted LP is rounded *down* (LP never over-minted),
- burned LP pays out floor-proportional shares, or the whole pool on a full burn.

Results are frozen dataclasses carrying every intermediate the caller needs to
build a post-state; nothing here touches pool records.
"""

from __future__ import annotations

from dataclasses import dataclass

from ...errors import ArithmeticUnderflow, ExcessiveSlippage, ZeroInput
from .wide_math_v1 import ceil_muldiv, checked_add, checked_sub, muldiv, mulsqrt, require_u64


@dataclass(frozen=True)
class MintLiquidityResult:
    liquidity_minted: int
    amount_low_used: int
    amount_high_used: int
    amount_low_refund: int
    amount_high_refund: int
    new_reserve_low: int
    new_reserve_high: int
    new_total_supply: int


@dataclass(frozen=True)
class BurnLiquidityResult:
    amount_low_out: int
    amount_high_out: int
    new_reserve_low: int
    new_reserve_high: int
    new_total_supply: int


def mint_liquidity_initial(*, amount_low: int, amount_high: int) -> int:
    """
    Initial liquidity mint (pool creation).

    Returns ``floor(sqrt(amount_low * amount_high))``; the whole amount goes to
    the creator (no minimum-liquidity lock).
    """
    require_u64("amount_low", amount_low)
    require_u64("amount_high", amount_high)
    if amount_low == 0 or amount_high == 0:
        raise ZeroInput("initial amounts must be positive")
    return mulsqrt(amount_low, amount_high)


def mint_liquidity(
    *,
    reserve_low: int,
    reserve_high: int,
    total_supply: int,
    amount_low_desired: int,
    amount_high_desired: int,
    min_liquidity: int = 0,
) -> MintLiquidityResult:
    """
    Mint LP tokens for a ratio-preserving deposit.

    The binding side is found by comparing the wide cross products
    ``amount_low * reserve_high`` and ``amount_high * reserve_low``; the binding
    side is deposited in full and the other side is derived from it.
    """
    for name, v in (
        ("reserve_low", reserve_low),
        ("reserve_high", reserve_high),
        ("total_supply", total_supply),
        ("amount_low_desired", amount_low_desired),
        ("amount_high_desired", amount_high_desired),
        ("min_liquidity", min_liquidity),
    ):
        require_u64(name, v)

    if amount_low_desired == 0 or amount_high_desired == 0:
        raise ZeroInput("desired amounts must be positive")

    # Compared unbounded: both sides are at most u128 and never divided.
    x = amount_low_desired * reserve_high
    y = amount_high_desired * reserve_low

    if x > y:
        amount_high_used = amount_high_desired
        amount_low_used = ceil_muldiv(amount_high_desired, reserve_low, reserve_high)
        minted = muldiv(amount_high_used, total_supply, reserve_high)
    elif x < y:
        amount_low_used = amount_low_desired
        amount_high_used = ceil_muldiv(amount_low_desired, reserve_high, reserve_low)
        minted = muldiv(amount_low_used, total_supply, reserve_low)
    else:
        amount_low_used = amount_low_desired
        amount_high_used = amount_high_desired
        if total_supply == 0:
            # Re-seeding a drained pool (both reserves zero).
            minted = amount_low_used
        else:
            minted = muldiv(amount_low_used, total_supply, reserve_low)

    new_reserve_low = checked_add(reserve_low, amount_low_used)
    new_reserve_high = checked_add(reserve_high, amount_high_used)
    new_total_supply = checked_add(total_supply, minted)

    if minted < min_liquidity:
        raise ExcessiveSlippage("liquidity_minted", minted, min_liquidity)

    return MintLiquidityResult(
        liquidity_minted=minted,
        amount_low_used=amount_low_used,
        amount_high_used=amount_high_used,
        amount_low_refund=amount_low_desired - amount_low_used,
        amount_high_refund=amount_high_desired - amount_high_used,
        new_reserve_low=new_reserve_low,
        new_reserve_high=new_reserve_high,
        new_total_supply=new_total_supply,
    )


def burn_liquidity(
    *,
    lp_amount: int,
    reserve_low: int,
    reserve_high: int,
    total_supply: int,
    min_low_out: int = 0,
    min_high_out: int = 0,
) -> BurnLiquidityResult:
    """
    Burn LP tokens for underlying assets (floor rounding).

    Burning the entire supply returns the entire reserves without dividing.
    """
    for name, v in (
        ("lp_amount", lp_amount),
        ("reserve_low", reserve_low),
        ("reserve_high", reserve_high),
        ("total_supply", total_supply),
        ("min_low_out", min_low_out),
        ("min_high_out", min_high_out),
    ):
        require_u64(name, v)

    if lp_amount == 0:
        raise ZeroInput("lp_amount must be positive")
    if lp_amount > total_supply:
        raise ArithmeticUnderflow(f"cannot burn more than total_supply: {lp_amount} > {total_supply}")

    if lp_amount == total_supply:
        amount_low_out = reserve_low
        amount_high_out = reserve_high
    else:
        amount_low_out = muldiv(lp_amount, reserve_low, total_supply)
        amount_high_out = muldiv(lp_amount, reserve_high, total_supply)

    if amount_low_out < min_low_out:
        raise ExcessiveSlippage("amount_low_out", amount_low_out, min_low_out)
    if amount_high_out < min_high_out:
        raise ExcessiveSlippage("amount_high_out", amount_high_out, min_high_out)

    return BurnLiquidityResult(
        amount_low_out=amount_low_out,
        amount_high_out=amount_high_out,
        new_reserve_low=checked_sub(reserve_low, amount_low_out),
        new_reserve_high=checked_sub(reserve_high, amount_high_out),
        new_total_supply=checked_sub(total_supply, lp_amount),
    )

"""
CPMM swap kernel (v1 semantics).

- The fee is taken off the input for *pricing only*:
  ``input_with_fee = floor(amount_in * (10_000 - fee_points) / 10_000)``.
- The quote is the constant-product output, floored:
  ``amount_out = floor(input_with_fee * reserve_out / (reserve_in + input_with_fee))``.
- The full, non-fee-reduced ``amount_in`` is credited to the pool, so fee
  revenue accrues to the reserves (and thus to LP holders).
"""

from __future__ import annotations

from dataclasses import dataclass

from ...errors import ExcessiveSlippage, NoLiquidity, ZeroInput
from .wide_math_v1 import checked_add, checked_sub, muldiv, require_u64


FEE_DENOM = 10_000


@dataclass(frozen=True)
class SwapExactInResult:
    amount_out: int
    amount_in: int
    input_with_fee: int
    fee_retained: int
    new_reserve_in: int
    new_reserve_out: int
    k_before: int
    k_after: int


def require_fee_points(fee_points: int) -> int:
    require_u64("fee_points", fee_points)
    if fee_points >= FEE_DENOM:
        raise ValueError(f"fee_points must be in [0, {FEE_DENOM}): {fee_points}")
    return fee_points


def input_with_fee(*, amount_in: int, fee_points: int) -> int:
    """Compute ``floor(amount_in * (10_000 - fee_points) / 10_000)``."""
    require_fee_points(fee_points)
    return muldiv(amount_in, FEE_DENOM - fee_points, FEE_DENOM)


def quote_exact_in(*, reserve_in: int, reserve_out: int, amount_in: int, fee_points: int) -> int:
    """Output amount for an exact input, without any state update."""
    require_u64("reserve_in", reserve_in)
    require_u64("reserve_out", reserve_out)
    require_u64("amount_in", amount_in)

    if amount_in == 0:
        raise ZeroInput("amount_in must be positive")
    if reserve_in == 0 or reserve_out == 0:
        raise NoLiquidity("cannot swap against an empty reserve")

    net_in = input_with_fee(amount_in=amount_in, fee_points=fee_points)
    return muldiv(net_in, reserve_out, reserve_in + net_in)


def swap_exact_in(
    *,
    reserve_in: int,
    reserve_out: int,
    amount_in: int,
    fee_points: int,
    min_amount_out: int = 0,
) -> SwapExactInResult:
    """
    Exact-in swap quote + post-state.

    Raises ExcessiveSlippage iff the quoted output is strictly below
    ``min_amount_out``.
    """
    require_u64("min_amount_out", min_amount_out)
    amount_out = quote_exact_in(
        reserve_in=reserve_in,
        reserve_out=reserve_out,
        amount_in=amount_in,
        fee_points=fee_points,
    )
    if amount_out < min_amount_out:
        raise ExcessiveSlippage("amount_out", amount_out, min_amount_out)

    net_in = input_with_fee(amount_in=amount_in, fee_points=fee_points)
    new_reserve_in = checked_add(reserve_in, amount_in)
    new_reserve_out = checked_sub(reserve_out, amount_out)

    return SwapExactInResult(
        amount_out=amount_out,
        amount_in=amount_in,
        input_with_fee=net_in,
        fee_retained=amount_in - net_in,
        new_reserve_in=new_reserve_in,
        new_reserve_out=new_reserve_out,
        k_before=reserve_in * reserve_out,
        k_after=new_reserve_in * new_reserve_out,
    )

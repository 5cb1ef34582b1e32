"""
Exact-in swaps over a pool record, in either direction.

The pool side being sold is the input reserve; the kernel prices the trade
with the fee-discounted input and credits the full input:

    input_with_fee = floor(amount_in * (10_000 - fee_points) / 10_000)
    amount_out = floor(input_with_fee * reserve_out / (reserve_in + input_with_fee))
    reserve_in' = reserve_in + amount_in
    reserve_out' = reserve_out - amount_out

so reserve_low * reserve_high never shrinks across a swap.
"""

from dataclasses import replace
from typing import Tuple

from ..errors import InvariantViolation
from ..kernels.python.cpmm_swap_v1 import quote_exact_in as _kernel_quote_exact_in_v1
from ..kernels.python.cpmm_swap_v1 import swap_exact_in as _kernel_swap_exact_in_v1
from ..state.pools import Pool


def _sides(pool: Pool, low_to_high: bool) -> Tuple[int, int]:
    if low_to_high:
        return pool.reserve_low, pool.reserve_high
    return pool.reserve_high, pool.reserve_low


def quote_exact_in(pool: Pool, amount_in: int, low_to_high: bool) -> int:
    """
    Output a swap of ``amount_in`` would receive right now.

    Read-only; raises the same errors as ``swap_exact_in`` minus slippage.
    """
    reserve_in, reserve_out = _sides(pool, low_to_high)
    return _kernel_quote_exact_in_v1(
        reserve_in=reserve_in,
        reserve_out=reserve_out,
        amount_in=amount_in,
        fee_points=pool.fee_points,
    )


def swap_exact_in(
    pool: Pool,
    amount_in: int,
    min_out: int,
    low_to_high: bool,
) -> Tuple[Pool, int]:
    """
    Compute output amount and post-state for an exact-in swap.

    Args:
        pool: Current pool record
        amount_in: Exact input amount
        min_out: Minimum acceptable output
        low_to_high: True to sell the low asset for the high asset

    Returns:
        Tuple of (post-swap Pool, amount_out)

    Raises:
        ZeroInput: If amount_in is zero
        NoLiquidity: If either reserve is zero
        ExcessiveSlippage: If amount_out < min_out
        ArithmeticOverflow: If the input reserve would exceed u64
    """
    reserve_in, reserve_out = _sides(pool, low_to_high)
    res = _kernel_swap_exact_in_v1(
        reserve_in=reserve_in,
        reserve_out=reserve_out,
        amount_in=amount_in,
        fee_points=pool.fee_points,
        min_amount_out=min_out,
    )

    if res.k_after < res.k_before:
        raise InvariantViolation(["k_non_decreasing"])

    if low_to_high:
        after = replace(pool, reserve_low=res.new_reserve_in, reserve_high=res.new_reserve_out)
    else:
        after = replace(pool, reserve_low=res.new_reserve_out, reserve_high=res.new_reserve_in)
    return after, res.amount_out

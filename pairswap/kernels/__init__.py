"""
Kernel layer.

Deterministic, integer-only arithmetic used by the pool engine:
- `pairswap/kernels/python/wide_math_v1.py`: checked u64/u128 multiply-divide and square root,
- `pairswap/kernels/python/lp_math_v1.py`: LP mint/burn math,
- `pairswap/kernels/python/cpmm_swap_v1.py`: fee-adjusted constant-product swap quote.
"""

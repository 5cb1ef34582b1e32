"""
Checked wide-integer arithmetic kernel (v1).

Every multiplicative step in the pricing path goes through this module:
- operands are unsigned 64-bit quantities,
- intermediate products are checked against a 128-bit width,
- results must fit back into 64 bits.

Python ints are unbounded, so the widths are enforced explicitly rather than
inherited from the machine. No floating point is used anywhere.
"""

from __future__ import annotations

import math

from ...errors import ArithmeticOverflow, ArithmeticUnderflow, DivisionByZero


U64_MAX = (1 << 64) - 1
U128_MAX = (1 << 128) - 1


def _require_int(name: str, value: int) -> None:
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError(f"{name} must be an int")


def require_u64(name: str, value: int) -> int:
    """Validate that *value* is an int in ``[0, U64_MAX]`` and return it."""
    _require_int(name, value)
    if value < 0:
        raise ArithmeticUnderflow(f"{name} must be non-negative: {value}")
    if value > U64_MAX:
        raise ArithmeticOverflow(f"{name} exceeds u64: {value}")
    return int(value)


def _wide_product(a: int, b: int) -> int:
    require_u64("a", a)
    require_u64("b", b)
    product = a * b
    if product > U128_MAX:
        raise ArithmeticOverflow("intermediate product exceeds u128")
    return product


def _narrow(value: int) -> int:
    if value > U64_MAX:
        raise ArithmeticOverflow(f"result exceeds u64: {value}")
    return value


def muldiv(a: int, b: int, c: int) -> int:
    """
    Compute ``floor(a * b / c)``.

    Raises DivisionByZero if ``c == 0`` and ArithmeticOverflow if the result
    does not fit in u64.
    """
    require_u64("c", c)
    if c == 0:
        raise DivisionByZero("muldiv divisor is zero")
    return _narrow(_wide_product(a, b) // c)


def ceil_muldiv(a: int, b: int, c: int) -> int:
    """
    Compute ``ceil(a * b / c)``.

    Used wherever rounding must favor the pool rather than the user.
    """
    require_u64("c", c)
    if c == 0:
        raise DivisionByZero("ceil_muldiv divisor is zero")
    product = _wide_product(a, b)
    return _narrow((product + c - 1) // c)


def mulsqrt(a: int, b: int) -> int:
    """Compute ``floor(sqrt(a * b))`` exactly via ``math.isqrt`` on the wide product."""
    return _narrow(math.isqrt(_wide_product(a, b)))


def checked_add(a: int, b: int) -> int:
    require_u64("a", a)
    require_u64("b", b)
    return _narrow(a + b)


def checked_sub(a: int, b: int) -> int:
    require_u64("a", a)
    require_u64("b", b)
    if b > a:
        raise ArithmeticUnderflow(f"{a} - {b} underflows")
    return a - b

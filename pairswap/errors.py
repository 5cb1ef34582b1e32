"""Exception types for the pairswap engine.

Every failure in the kernels, the pool layer and the engine facade is raised as
one of these. Each class carries a stable ``code`` string so callers (and the
offline CLI) can report failures without matching on message text.

Operations are fail-closed: when any of these is raised, the pool and registry
state is exactly what it was before the call.
"""

from __future__ import annotations


class AmmError(Exception):
    """Base class for all engine errors."""

    code = "amm_error"


class ZeroInput(AmmError):
    """Raised when a required amount is zero."""

    code = "zero_input"


class InvalidPair(AmmError):
    """Raised for a self-pair or a malformed pair ordering."""

    code = "invalid_pair"


class PoolAlreadyExists(AmmError):
    """Raised when a pool for the canonical pair is already registered."""

    code = "pool_already_exists"


class PoolNotFound(AmmError):
    """Raised when an operation names a pair with no registered pool."""

    code = "pool_not_found"


class ExcessiveSlippage(AmmError):
    """Raised when a computed output or mint is strictly below the caller's minimum."""

    code = "excessive_slippage"

    def __init__(self, what: str, actual: int, minimum: int) -> None:
        self.what = what
        self.actual = actual
        self.minimum = minimum
        super().__init__(f"{what} ({actual}) < minimum ({minimum})")


class NoLiquidity(AmmError):
    """Raised when a swap targets a pool with an empty reserve."""

    code = "no_liquidity"


class ArithmeticOverflow(AmmError, OverflowError):
    code = "arithmetic_overflow"


class ArithmeticUnderflow(AmmError):
    code = "arithmetic_underflow"


class DivisionByZero(AmmError, ZeroDivisionError):
    code = "division_by_zero"


class InvariantViolation(AmmError):
    """Raised when a computed post-state violates one or more pool invariants."""

    code = "invariant_violation"

    def __init__(self, violations: list[str]) -> None:
        self.violations = violations
        super().__init__(f"invariant violations: {', '.join(violations)}")

"""
Runtime configuration for the pool engine.

``AmmConfig`` is a frozen dataclass; build one directly, from a YAML file
(``load_config``) or from ``PAIRSWAP_*`` environment variables
(``config_from_env``).
"""

from __future__ import annotations

import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Mapping, Optional, Union

import yaml

from ..kernels.python.cpmm_swap_v1 import FEE_DENOM
from ..kernels.python.wide_math_v1 import U64_MAX


DEFAULT_FEE_POINTS = 30


@dataclass(frozen=True)
class AmmConfig:
    # Swap fee in parts per 10_000, applied to every pool created by the engine.
    fee_points: int = DEFAULT_FEE_POINTS
    # Per-operand ceiling; may be lowered below u64 but never raised above it.
    max_amount: int = U64_MAX
    # If False, effects still reach `effect_sink` but are not written to the logger.
    log_effects: bool = True

    def __post_init__(self) -> None:
        if not isinstance(self.fee_points, int) or isinstance(self.fee_points, bool):
            raise ValueError("fee_points must be an int")
        if not (0 <= self.fee_points < FEE_DENOM):
            raise ValueError(f"fee_points must be in [0, {FEE_DENOM}): {self.fee_points}")
        if not isinstance(self.max_amount, int) or isinstance(self.max_amount, bool):
            raise ValueError("max_amount must be an int")
        if not (0 < self.max_amount <= U64_MAX):
            raise ValueError(f"max_amount must be in (0, {U64_MAX}]")
        if not isinstance(self.log_effects, bool):
            raise ValueError("log_effects must be a bool")


_CONFIG_KEYS = frozenset(f.name for f in fields(AmmConfig))


def config_from_mapping(obj: Mapping[str, Any], *, base: Optional[AmmConfig] = None) -> AmmConfig:
    if not isinstance(obj, Mapping):
        raise ValueError("config must be a mapping")
    unknown = sorted(set(obj) - _CONFIG_KEYS)
    if unknown:
        raise ValueError(f"unknown config keys: {', '.join(map(str, unknown))}")
    return replace(base or AmmConfig(), **dict(obj))


def load_config(path: Union[str, Path]) -> AmmConfig:
    """Load an ``AmmConfig`` from a YAML mapping; an empty file yields the defaults."""
    obj = yaml.safe_load(Path(path).read_text(encoding="utf-8"))
    if obj is None:
        return AmmConfig()
    return config_from_mapping(obj)


def _bool_env(raw: str, *, name: str) -> bool:
    v = raw.strip().lower()
    if v in {"1", "true", "yes", "on"}:
        return True
    if v in {"0", "false", "no", "off"}:
        return False
    raise ValueError(f"{name} must be a boolean flag, got {raw!r}")


def config_from_env(
    environ: Optional[Mapping[str, str]] = None,
    *,
    base: Optional[AmmConfig] = None,
) -> AmmConfig:
    """Apply ``PAIRSWAP_FEE_POINTS`` / ``PAIRSWAP_LOG_EFFECTS`` overrides on top of *base*."""
    env = os.environ if environ is None else environ
    overrides: dict[str, Any] = {}

    raw_fee = env.get("PAIRSWAP_FEE_POINTS")
    if raw_fee is not None and raw_fee.strip():
        try:
            overrides["fee_points"] = int(raw_fee.strip(), 10)
        except ValueError as exc:
            raise ValueError(f"PAIRSWAP_FEE_POINTS must be an int, got {raw_fee!r}") from exc

    raw_log = env.get("PAIRSWAP_LOG_EFFECTS")
    if raw_log is not None and raw_log.strip():
        overrides["log_effects"] = _bool_env(raw_log, name="PAIRSWAP_LOG_EFFECTS")

    return replace(base or AmmConfig(), **overrides)

"""
Snapshot of every registered pool, as canonical JSON.

The snapshot is versioned and hashes to a domain-separated commitment; decoding
is strict and rebuilds a fresh ``PoolRegistry``.
"""

from __future__ import annotations

import hashlib
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional

from ..core.invariants import check_all
from ..kernels.python.wide_math_v1 import U64_MAX
from ..state.canonical import canonical_json_bytes, domain_sep_bytes, sha256_hex
from ..state.pairs import PairKey, canonicalize
from ..state.pools import Pool, PoolHandle
from ..state.registry import PoolRegistry


AMM_SNAPSHOT_VERSION = 1

_POOL_FIELDS = ("pool_id", "low", "high", "reserve_low", "reserve_high", "lp_supply", "fee_points")


def _require_str(value: Any, *, name: str, max_len: int = 4096) -> str:
    if not isinstance(value, str):
        raise TypeError(f"{name} must be a string")
    if not value:
        raise ValueError(f"{name} must be non-empty")
    if len(value) > max_len:
        raise ValueError(f"{name} too large")
    return value


def _require_u64(value: Any, *, name: str) -> int:
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError(f"{name} must be an int")
    if value < 0 or value > U64_MAX:
        raise ValueError(f"{name} must be a u64")
    return int(value)


@dataclass(frozen=True)
class AmmSnapshot:
    """Versioned pool snapshot; ``data`` never contains its own commitment."""

    version: int
    data: Dict[str, Any]

    def canonical_bytes(self) -> bytes:
        return canonical_json_bytes(self.data)

    def commitment_bytes(self) -> bytes:
        payload = domain_sep_bytes("amm_snapshot", version=self.version) + self.canonical_bytes()
        return hashlib.sha256(payload).digest()

    def commitment_hex(self) -> str:
        payload = domain_sep_bytes("amm_snapshot", version=self.version) + self.canonical_bytes()
        return sha256_hex(payload)


def _pool_entry(pool: Pool) -> Dict[str, Any]:
    return {
        "pool_id": pool.pool_id,
        "low": pool.pair.low,
        "high": pool.pair.high,
        "reserve_low": int(pool.reserve_low),
        "reserve_high": int(pool.reserve_high),
        "lp_supply": int(pool.lp_supply),
        "fee_points": int(pool.fee_points),
    }


def snapshot_from_registry(registry: PoolRegistry, *, version: int = AMM_SNAPSHOT_VERSION) -> AmmSnapshot:
    if not isinstance(version, int) or isinstance(version, bool) or version <= 0:
        raise ValueError("version must be a positive int")

    pools_entries: List[Dict[str, Any]] = []
    for key in registry.keys():
        handle = registry.lookup(key)
        if handle is None:  # pragma: no cover - registries never delete
            continue
        pools_entries.append(_pool_entry(handle.pool))

    return AmmSnapshot(version=version, data={"version": version, "pools": pools_entries})


def pools_from_snapshot(data: Mapping[str, Any]) -> List[Pool]:
    """
    Decode and strictly validate the pool records of a snapshot.

    Entries must appear in strictly increasing pair order, the order
    ``snapshot_from_registry`` emits, so a restored registry re-exports the same
    bytes.

    Raises TypeError / ValueError on any malformed entry, and InvalidPair for an
    entry that pairs an asset with itself.
    """
    if not isinstance(data, Mapping):
        raise TypeError("snapshot must be a mapping")
    version = data.get("version")
    if version != AMM_SNAPSHOT_VERSION:
        raise ValueError(f"unsupported snapshot version: {version!r}")
    raw_pools = data.get("pools")
    if not isinstance(raw_pools, list):
        raise TypeError("snapshot.pools must be a list")

    pools: List[Pool] = []
    prev: Optional[PairKey] = None
    for i, entry in enumerate(raw_pools):
        if not isinstance(entry, Mapping):
            raise TypeError(f"pools[{i}] must be an object")
        extra = sorted(set(entry) - set(_POOL_FIELDS))
        if extra:
            raise ValueError(f"pools[{i}] has unknown fields: {', '.join(extra)}")

        low = _require_str(entry.get("low"), name=f"pools[{i}].low")
        high = _require_str(entry.get("high"), name=f"pools[{i}].high")
        pair = canonicalize(low, high)
        if pair.low != low:
            raise ValueError(f"pools[{i}] pair is not in canonical order")
        if prev is not None and pair == prev:
            raise ValueError(f"duplicate pool for pair {pair}")
        if prev is not None and pair < prev:
            raise ValueError(f"pools[{i}] is out of order: {pair} sorts before {prev}")
        prev = pair

        pool_id = _require_str(entry.get("pool_id"), name=f"pools[{i}].pool_id")
        if pool_id != pair.pool_id:
            raise ValueError(f"pools[{i}].pool_id does not match its pair")

        pool = Pool(
            pair=pair,
            reserve_low=_require_u64(entry.get("reserve_low"), name=f"pools[{i}].reserve_low"),
            reserve_high=_require_u64(entry.get("reserve_high"), name=f"pools[{i}].reserve_high"),
            lp_supply=_require_u64(entry.get("lp_supply"), name=f"pools[{i}].lp_supply"),
            fee_points=_require_u64(entry.get("fee_points"), name=f"pools[{i}].fee_points"),
        )
        violations = check_all(pool)
        if violations:
            raise ValueError(f"pools[{i}] violates invariants: {', '.join(violations)}")
        pools.append(pool)
    return pools


def registry_from_snapshot(data: Mapping[str, Any]) -> PoolRegistry:
    registry = PoolRegistry()
    for pool in pools_from_snapshot(data):
        registry.register(pool.pair, PoolHandle(pool))
    return registry

"""
Canonical pair identification.

Asset ids are ordered byte-wise on their UTF-8 encoding: a proper prefix sorts
first, otherwise the first differing byte decides. This is a strict total
order, so every unordered pair of distinct assets maps to exactly one
``PairKey``.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, unique

from ..errors import InvalidPair
from .canonical import domain_sep_bytes, encode_bytes, sha256_hex


AssetId = str


@unique
class Ordering(Enum):
    LESS = -1
    EQUAL = 0
    GREATER = 1


def _asset_bytes(asset: AssetId, *, name: str) -> bytes:
    if not isinstance(asset, str):
        raise InvalidPair(f"{name} must be a string asset id")
    if not asset:
        raise InvalidPair(f"{name} must be non-empty")
    try:
        return asset.encode("utf-8")
    except UnicodeEncodeError as exc:
        raise InvalidPair(f"{name} is not valid UTF-8 text") from exc


def compare(a: AssetId, b: AssetId) -> Ordering:
    """Byte-wise lexicographic comparison of two asset ids."""
    # bytes comparison is exactly the shorter-prefix-first lexicographic order.
    ab = _asset_bytes(a, name="a")
    bb = _asset_bytes(b, name="b")
    if ab < bb:
        return Ordering.LESS
    if ab > bb:
        return Ordering.GREATER
    return Ordering.EQUAL


@dataclass(frozen=True, order=True)
class PairKey:
    """Registry key for an unordered asset pair; ``low`` sorts strictly before ``high``."""

    low: AssetId
    high: AssetId

    def __post_init__(self) -> None:
        if compare(self.low, self.high) is not Ordering.LESS:
            raise InvalidPair(f"pair is not in canonical order: ({self.low!r}, {self.high!r})")

    @property
    def pool_id(self) -> str:
        return pool_id(self)

    def __str__(self) -> str:
        return f"{self.low}/{self.high}"


def canonicalize(a: AssetId, b: AssetId) -> PairKey:
    """Return the canonical key for ``{a, b}``; raises InvalidPair for a self-pair."""
    order = compare(a, b)
    if order is Ordering.EQUAL:
        raise InvalidPair(f"cannot pair an asset with itself: {a!r}")
    if order is Ordering.LESS:
        return PairKey(low=a, high=b)
    return PairKey(low=b, high=a)


def is_flipped(a: AssetId, b: AssetId) -> bool:
    """True when ``(a, b)`` is the reverse of canonical order."""
    return compare(a, b) is Ordering.GREATER


def pool_id(pair: PairKey) -> str:
    """
    Deterministic pool identifier for a canonical pair.

    pool_id = sha256(domain_sep("pool") || len(low) || low || len(high) || high)
    """
    payload = (
        domain_sep_bytes("pool")
        + encode_bytes(pair.low.encode("utf-8"))
        + encode_bytes(pair.high.encode("utf-8"))
    )
    return sha256_hex(payload)

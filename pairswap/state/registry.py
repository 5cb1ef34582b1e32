"""
Pool registry: at most one live pool per canonical pair.

The registry indexes ``PoolHandle`` objects; it does not own their contents.
Check-and-insert runs under the registry lock so concurrent creation attempts
for the same pair resolve to exactly one winner.
"""

from __future__ import annotations

import threading
from typing import Dict, Iterator, List, Optional

from ..errors import PoolAlreadyExists
from .pairs import PairKey
from .pools import PoolHandle


class PoolRegistry:
    """Mapping PairKey -> PoolHandle with an atomic register operation."""

    def __init__(self) -> None:
        self._pools: Dict[PairKey, PoolHandle] = {}
        self._lock = threading.Lock()

    def register(self, key: PairKey, handle: PoolHandle) -> None:
        """
        Insert ``handle`` under ``key``.

        Raises:
            PoolAlreadyExists: If a pool is already registered for ``key``
        """
        if not isinstance(key, PairKey):
            raise TypeError("key must be a PairKey")
        if handle.pair != key:
            raise ValueError(f"handle pair {handle.pair} does not match key {key}")
        with self._lock:
            if key in self._pools:
                raise PoolAlreadyExists(f"pool already exists for {key}")
            self._pools[key] = handle

    def lookup(self, key: PairKey) -> Optional[PoolHandle]:
        with self._lock:
            return self._pools.get(key)

    def contains(self, key: PairKey) -> bool:
        with self._lock:
            return key in self._pools

    def keys(self) -> List[PairKey]:
        """Registered keys in canonical (sorted) order."""
        with self._lock:
            return sorted(self._pools)

    def __contains__(self, key: object) -> bool:
        return isinstance(key, PairKey) and self.contains(key)

    def __iter__(self) -> Iterator[PairKey]:
        return iter(self.keys())

    def __len__(self) -> int:
        with self._lock:
            return len(self._pools)

    def __repr__(self) -> str:
        return f"PoolRegistry({len(self)} pools)"

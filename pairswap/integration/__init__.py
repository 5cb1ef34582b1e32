"""
Persistence integration layer
"""

from .snapshot import (
    AMM_SNAPSHOT_VERSION,
    AmmSnapshot,
    pools_from_snapshot,
    registry_from_snapshot,
    snapshot_from_registry,
)

__all__ = [
    "AMM_SNAPSHOT_VERSION",
    "AmmSnapshot",
    "pools_from_snapshot",
    "registry_from_snapshot",
    "snapshot_from_registry",
]

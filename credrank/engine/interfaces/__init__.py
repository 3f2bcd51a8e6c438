"""Store interfaces consumed by the scoring engine."""

from .stores import (
    GraphStore,
    ProfileStore,
    ContentStore,
    SmartAccountStore,
    SnapshotStore
)

__all__ = [
    "GraphStore",
    "ProfileStore",
    "ContentStore",
    "SmartAccountStore",
    "SnapshotStore",
]

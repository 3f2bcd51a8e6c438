"""Concrete store implementations for the scoring engine."""

from .sqlite_store import SQLiteTrustStore
from .disk_snapshot_store import DiskSnapshotStore

__all__ = [
    "SQLiteTrustStore",
    "DiskSnapshotStore",
]

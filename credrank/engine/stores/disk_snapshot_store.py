"""
Disk-backed smart follower snapshot store.

An alternative to the SQLite snapshot table for deployments that only need
the snapshot memo. Rows never expire; housekeeping is left to the operator.
"""

import os
from threading import Lock
from typing import Optional
from diskcache import Cache
import bittensor as bt

from credrank.engine.interfaces import SnapshotStore
from credrank.engine.models import SmartFollowersResult, SnapshotKey


class DiskSnapshotStore(SnapshotStore):
    """
    SnapshotStore on top of a diskcache Cache.

    diskcache's Cache.add only writes when the key is absent, which gives the
    same insert-if-absent discipline as the SQL UNIQUE constraint.
    """

    def __init__(self, cache_dir: str, size_limit: float = 1e9):
        self._cache_dir = cache_dir
        self._size_limit = size_limit
        self._lock = Lock()
        self._cache: Optional[Cache] = None

    def get_cache(self) -> Cache:
        """Thread-safe lazy cache access."""
        if self._cache is None:
            with self._lock:
                if self._cache is None:
                    os.makedirs(self._cache_dir, exist_ok=True)
                    self._cache = Cache(
                        directory=self._cache_dir,
                        size_limit=self._size_limit,
                        disk_min_file_size=0,
                        disk_pickle_protocol=4,
                    )
                    bt.logging.info(f"DiskSnapshotStore initialized at: {self._cache_dir}")
        return self._cache

    def close(self) -> None:
        if self._cache is not None:
            with self._lock:
                if self._cache is not None:
                    self._cache.close()
                    self._cache = None

    def get_snapshot(self, key: SnapshotKey) -> Optional[SmartFollowersResult]:
        data = self.get_cache().get(key.as_string())
        if not data:
            bt.logging.debug(f"Snapshot cache miss for {key.as_string()}")
            return None

        bt.logging.debug(f"Snapshot cache hit for {key.as_string()}")
        return SmartFollowersResult(
            smart_followers_count=int(data['smart_followers_count']),
            smart_followers_pct=float(data['smart_followers_pct']),
            is_estimate=bool(data['is_estimate']),
        )

    def insert_snapshot_if_absent(self, key: SnapshotKey, result: SmartFollowersResult) -> SmartFollowersResult:
        added = self.get_cache().add(key.as_string(), result.to_dict())
        if added:
            bt.logging.debug(f"Stored snapshot {key.as_string()}")
            return result

        stored = self.get_snapshot(key)
        return stored if stored is not None else result

    def __len__(self) -> int:
        return len(self.get_cache())

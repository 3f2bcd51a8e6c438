"""
Write-once-per-day memo in front of a SnapshotStore.

Read failures are reported as a miss and write failures hand back the
computed value, so a broken snapshot table never blocks a lookup.
"""

from typing import Optional
import bittensor as bt

from credrank.engine.interfaces import SnapshotStore
from credrank.engine.models import SmartFollowersResult, SnapshotKey
from credrank.engine.utils.error_handling import (
    ErrorMessages,
    log_store_failure,
    safe_operation
)


class SnapshotCache:
    """Date-keyed snapshot memo with insert-if-absent writes."""

    def __init__(self, store: SnapshotStore):
        self.store = store

    @safe_operation(ErrorMessages.SNAPSHOT_READ_FAILED, default_return=None)
    def get(self, key: SnapshotKey) -> Optional[SmartFollowersResult]:
        cached = self.store.get_snapshot(key)
        if cached is not None:
            bt.logging.debug(f"Snapshot hit for {key.as_string()}")
        return cached

    def put(self, key: SnapshotKey, result: SmartFollowersResult) -> SmartFollowersResult:
        """
        Persist result unless a row already exists for the key.

        Returns:
            The stored row, which is a concurrent writer's result if it won
            the race, or `result` itself when the write failed.
        """
        try:
            stored = self.store.insert_snapshot_if_absent(key, result)
        except Exception as e:
            log_store_failure(e, ErrorMessages.SNAPSHOT_WRITE_FAILED, {'key': key.as_string()})
            return result

        if stored != result:
            bt.logging.debug(f"Snapshot {key.as_string()} was written concurrently, using stored row")
        return stored

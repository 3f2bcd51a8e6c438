"""Store interfaces the engine reads from and writes snapshots to."""

from abc import ABC, abstractmethod
from datetime import date, datetime
from typing import Iterable, List, Optional, Set

from credrank.engine.models import (
    ContentRecord,
    FollowEdge,
    SmartAccountScore,
    SmartFollowersResult,
    SnapshotKey,
    TrackedAccount
)


class GraphStore(ABC):
    """Read access to the follow-edge table keyed by (src, dst)."""

    @abstractmethod
    def has_follow_edges(self, dst_account_id: str) -> bool:
        """Return True if at least one edge points at dst_account_id."""
        pass

    @abstractmethod
    def count_followers_among(self, dst_account_id: str, src_account_ids: Set[str]) -> int:
        """Count edges into dst_account_id whose source is in src_account_ids."""
        pass

    @abstractmethod
    def get_follow_edges(self) -> List[FollowEdge]:
        """Return every stored edge (used by the upstream ranking job)."""
        pass


class ProfileStore(ABC):
    """Read access to tracked profiles keyed by account id."""

    @abstractmethod
    def get_tracked_account(self, account_id: str) -> Optional[TrackedAccount]:
        pass

    @abstractmethod
    def get_tracked_accounts(self) -> List[TrackedAccount]:
        pass

    @abstractmethod
    def find_account_id(self, username: str) -> Optional[str]:
        """Resolve a handle (case-insensitive, '@' optional) to an account id."""
        pass


class ContentStore(ABC):
    """Read access to content/engagement records, filterable by entity and time."""

    @abstractmethod
    def get_content_records(
        self,
        entity_id: str,
        start: datetime,
        end: datetime,
        author_handle: Optional[str] = None,
        include_official: bool = False
    ) -> List[ContentRecord]:
        """
        Get content attributed to an entity with start <= created_at <= end.

        Args:
            entity_id: Project or creator identifier
            start: Window start (UTC, inclusive)
            end: Window end (UTC, inclusive)
            author_handle: Optional author filter (case-insensitive, '@' optional)
            include_official: Whether to include the entity's own official posts
        """
        pass


class SmartAccountStore(ABC):
    """Read/write access to the daily smart-account classification."""

    @abstractmethod
    def get_smart_account_ids(self, as_of_date: date) -> Set[str]:
        """Ids of accounts flagged is_smart on the given day."""
        pass

    @abstractmethod
    def get_smart_account_score(self, account_id: str, as_of_date: date) -> Optional[SmartAccountScore]:
        pass

    @abstractmethod
    def get_max_smart_score(self, as_of_date: date) -> Optional[float]:
        """Highest smart_score stored for the day, None when the day has no rows."""
        pass

    @abstractmethod
    def upsert_smart_account_scores(self, scores: Iterable[SmartAccountScore]) -> int:
        """Write scores keyed by (account_id, as_of_date). Returns rows written."""
        pass


class SnapshotStore(ABC):
    """Read/write access to the date-keyed smart follower snapshot table."""

    @abstractmethod
    def get_snapshot(self, key: SnapshotKey) -> Optional[SmartFollowersResult]:
        pass

    @abstractmethod
    def insert_snapshot_if_absent(self, key: SnapshotKey, result: SmartFollowersResult) -> SmartFollowersResult:
        """
        Insert a snapshot unless one already exists for the key.

        Returns:
            The row stored for the key after the call. When another writer got
            there first this is their row, not `result`.
        """
        pass

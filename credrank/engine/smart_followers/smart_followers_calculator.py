"""
Smart follower lookups for projects and creators.

Order of precedence for one (entity, target account, day):

1. A stored snapshot for the key is returned verbatim.
2. If the follow graph has edges into the target, count followers that are
   in the day's smart-account set.
3. Otherwise estimate from engagement: authors whose 30-day engagement with
   the entity clears max(floor, 80th percentile). Percentage is 0 and the
   result is marked as an estimate.

Store failures on steps 1 and 2 degrade to step 3 instead of raising.
"""

from concurrent.futures import ThreadPoolExecutor
from datetime import date, datetime, timedelta
from typing import Callable, List, Optional
import bittensor as bt

from credrank.engine.engagement import EngagementAggregator
from credrank.engine.interfaces import (
    ContentStore,
    GraphStore,
    ProfileStore,
    SmartAccountStore,
    SnapshotStore
)
from credrank.engine.models import (
    SmartFollowersDeltas,
    SmartFollowersResult,
    SnapshotKey,
    validate_entity_type
)
from credrank.engine.smart_followers.snapshot_cache import SnapshotCache
from credrank.engine.utils.config import EngineConfig
from credrank.engine.utils.date_utils import AsOfDate, end_of_day, parse_as_of_date, utc_now
from credrank.engine.utils.error_handling import (
    ErrorMessages,
    log_and_raise_validation_error,
    log_store_failure
)

DELTA_OFFSETS_DAYS = (0, 7, 30)


class SmartFollowersCalculator:
    """
    Computes smart follower counts with snapshot memoization.

    All collaborators are passed in; nothing is read from the environment.
    """

    def __init__(
        self,
        config: EngineConfig,
        graph_store: GraphStore,
        profile_store: ProfileStore,
        content_store: ContentStore,
        smart_account_store: SmartAccountStore,
        snapshot_store: SnapshotStore,
        clock: Callable[[], datetime] = utc_now
    ):
        self.config = config
        self.graph_store = graph_store
        self.profile_store = profile_store
        self.content_store = content_store
        self.smart_account_store = smart_account_store
        self.snapshot_cache = SnapshotCache(snapshot_store)
        self.clock = clock
        self.aggregator = EngagementAggregator(config)

    def _resolve_day(self, as_of_date: Optional[AsOfDate]) -> date:
        if as_of_date is None:
            return self.clock().date()
        return parse_as_of_date(as_of_date)

    def get_smart_followers(
        self,
        entity_type: str,
        entity_id: str,
        target_account_id: str,
        as_of_date: Optional[AsOfDate] = None,
        persist: Optional[bool] = None
    ) -> SmartFollowersResult:
        """
        Smart follower count and percentage for a target account.

        Args:
            entity_type: 'project' or 'creator'
            entity_id: Project or creator identifier (content is read by this id)
            target_account_id: Platform user id whose followers are counted
            as_of_date: Day to evaluate (defaults to the clock's current day)
            persist: Whether to write a computed result. By default results
                     for the current day are written, and so are graph-path
                     results for earlier days (that day's smart-account set
                     exists). Engagement estimates for past days are not,
                     since they can't be told apart from a day never ranked.

        Returns:
            SmartFollowersResult; is_estimate is True when the follow graph
            could not be used

        Raises:
            ValueError: Unknown entity type, malformed date or missing target id
        """
        validate_entity_type(entity_type)
        if not target_account_id:
            log_and_raise_validation_error(
                ErrorMessages.MISSING_ACCOUNT_ID,
                context_info={'entity_type': entity_type, 'entity_id': entity_id}
            )

        day = self._resolve_day(as_of_date)
        key = SnapshotKey.build(entity_type, entity_id, target_account_id, day)

        cached = self.snapshot_cache.get(key)
        if cached is not None:
            return cached

        result = self.compute(key)

        if persist is None:
            persist = day == self.clock().date() or not result.is_estimate
        if persist:
            return self.snapshot_cache.put(key, result)
        return result

    def compute(self, key: SnapshotKey) -> SmartFollowersResult:
        """Fresh computation for a key, ignoring any stored snapshot."""
        graph_result = self._from_graph(key)
        if graph_result is not None:
            return graph_result
        return self._from_engagement(key)

    def _from_graph(self, key: SnapshotKey) -> Optional[SmartFollowersResult]:
        try:
            if not self.graph_store.has_follow_edges(key.x_user_id):
                bt.logging.debug(f"No follow edges for {key.x_user_id}, using engagement estimate")
                return None

            smart_ids = self.smart_account_store.get_smart_account_ids(key.as_of_date)
            if not smart_ids:
                bt.logging.debug(
                    f"No smart accounts for {key.as_of_date.isoformat()}, using engagement estimate"
                )
                return None

            count = self.graph_store.count_followers_among(key.x_user_id, smart_ids)
            account = self.profile_store.get_tracked_account(key.x_user_id)
        except Exception as e:
            log_store_failure(e, ErrorMessages.GRAPH_READ_FAILED, {'key': key.as_string()})
            return None

        followers = account.followers_count if account is not None else 0
        pct = count / followers * 100 if followers > 0 else 0.0

        bt.logging.debug(f"{key.as_string()}: {count} smart followers of {followers} ({pct:.2f}%)")
        return SmartFollowersResult(
            smart_followers_count=count,
            smart_followers_pct=pct,
            is_estimate=False,
        )

    def _from_engagement(self, key: SnapshotKey) -> SmartFollowersResult:
        end = min(self.clock(), end_of_day(key.as_of_date))
        start = end - timedelta(days=self.config.fallback_lookback_days)

        try:
            records = self.content_store.get_content_records(
                key.entity_id,
                start,
                end,
                include_official=False
            )
        except Exception as e:
            log_store_failure(e, ErrorMessages.CONTENT_READ_FAILED, {'key': key.as_string()})
            return SmartFollowersResult.estimate(0)

        engagers = self.aggregator.high_engagement_authors(records)
        bt.logging.debug(
            f"{key.as_string()}: estimated {len(engagers)} smart engagers from {len(records)} records"
        )
        return SmartFollowersResult.estimate(len(engagers))

    def get_smart_followers_deltas(
        self,
        entity_type: str,
        entity_id: str,
        target_account_id: str,
        as_of_date: Optional[AsOfDate] = None
    ) -> SmartFollowersDeltas:
        """
        Change in smart follower count against 7 and 30 days earlier.

        Three independent point lookups. Today's lookup is persisted as usual;
        the 7 and 30 day back-reads never write, so history is not back-filled
        from the data currently in the stores.
        """
        day = self._resolve_day(as_of_date)
        days = [day - timedelta(days=offset) for offset in DELTA_OFFSETS_DAYS]

        def lookup(target_day: date) -> int:
            persist = None if target_day == day else False
            return self.get_smart_followers(
                entity_type, entity_id, target_account_id, target_day, persist=persist
            ).smart_followers_count

        counts = self._run_lookups(lookup, days)
        current, week_ago, month_ago = counts
        return SmartFollowersDeltas(
            delta_7d=current - week_ago,
            delta_30d=current - month_ago,
        )

    def _run_lookups(self, lookup: Callable[[date], int], days: List[date]) -> List[int]:
        max_workers = self.config.delta_max_workers
        if max_workers > 1:
            bt.logging.debug(f"Running {len(days)} delta lookups with {max_workers} workers")
            with ThreadPoolExecutor(max_workers=min(max_workers, len(days))) as executor:
                return list(executor.map(lookup, days))

        return [lookup(d) for d in days]

"""
Daily batch jobs.

Smart-account ranking runs first (after graph ingestion); the smart follower
snapshot job then fills the day's snapshot rows for every project and
creator so leaderboard reads are cache hits.
"""

import json
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Iterable, List, NamedTuple, Optional
import bittensor as bt

from credrank.engine.creator_scorer import CreatorScorer
from credrank.engine.interfaces import SnapshotStore
from credrank.engine.models import normalize_handle, validate_entity_type
from credrank.engine.smart_followers import SmartAccountRanker, SmartFollowersCalculator
from credrank.engine.stores import SQLiteTrustStore
from credrank.engine.utils.config import EngineConfig
from credrank.engine.utils.date_utils import AsOfDate, parse_as_of_date, utc_now


class EngineComponents(NamedTuple):
    ranker: SmartAccountRanker
    smart_followers: SmartFollowersCalculator
    creator_scorer: CreatorScorer


def create_engine(
    store: SQLiteTrustStore,
    config: Optional[EngineConfig] = None,
    clock: Callable[[], datetime] = utc_now,
    snapshot_store: Optional[SnapshotStore] = None
) -> EngineComponents:
    """
    Wire the engine against one SQLite store.

    Args:
        store: Backing store for graph, profiles, content and scores
        config: Engine knobs (defaults when omitted)
        clock: Source of "now" for as-of semantics
        snapshot_store: Optional separate snapshot backend (e.g. DiskSnapshotStore)
    """
    config = config or EngineConfig()
    ranker = SmartAccountRanker(config, store, store, store, clock=clock)
    smart_followers = SmartFollowersCalculator(
        config,
        graph_store=store,
        profile_store=store,
        content_store=store,
        smart_account_store=store,
        snapshot_store=snapshot_store or store,
        clock=clock,
    )
    creator_scorer = CreatorScorer(config, store, store, store, smart_followers, clock=clock)
    return EngineComponents(ranker, smart_followers, creator_scorer)


class SnapshotTarget(NamedTuple):
    """An entity whose smart followers are snapshotted daily."""
    entity_type: str
    entity_id: str
    handle: str

    @classmethod
    def from_dict(cls, data: dict) -> 'SnapshotTarget':
        return cls(
            validate_entity_type(data['entity_type']),
            str(data['entity_id']),
            normalize_handle(data['handle']),
        )


@dataclass
class SnapshotJobSummary:
    as_of_date: str
    computed: int = 0
    estimates: int = 0
    skipped: List[str] = field(default_factory=list)
    failed: List[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            'as_of_date': self.as_of_date,
            'computed': self.computed,
            'estimates': self.estimates,
            'skipped': self.skipped,
            'failed': self.failed,
        }


def run_smart_account_ranking(ranker: SmartAccountRanker, as_of_date: Optional[AsOfDate] = None) -> int:
    """Rank tracked accounts for the day. Returns the number of scores stored."""
    bt.logging.info("Starting smart account ranking")
    scores = ranker.run(as_of_date)
    bt.logging.info(f"Smart account ranking complete: {len(scores)} scores")
    return len(scores)


def run_snapshot_job(
    engine: EngineComponents,
    store: SQLiteTrustStore,
    targets: Iterable[SnapshotTarget],
    as_of_date: Optional[AsOfDate] = None,
    events_logger=None
) -> SnapshotJobSummary:
    """
    Compute and persist smart follower snapshots for each target.

    Every computed result is written for the job's day, including past days
    and engagement estimates, so the summary counts match stored rows.

    Targets whose handle doesn't resolve to a tracked account are skipped.
    A failure on one target is logged and the job moves on.
    """
    day = parse_as_of_date(as_of_date) if as_of_date is not None else engine.smart_followers.clock().date()
    summary = SnapshotJobSummary(as_of_date=day.isoformat())

    for target in targets:
        label = f"{target.entity_type}:{target.entity_id}"
        account_id = store.find_account_id(target.handle)
        if not account_id:
            bt.logging.warning(f"Could not find account id for {label} (@{target.handle}), skipping")
            summary.skipped.append(label)
            continue

        try:
            result = engine.smart_followers.get_smart_followers(
                target.entity_type, target.entity_id, account_id, day, persist=True
            )
        except Exception as e:
            bt.logging.error(f"Error calculating smart followers for {label}: {e}")
            summary.failed.append(label)
            continue

        summary.computed += 1
        if result.is_estimate:
            summary.estimates += 1

        if events_logger is not None:
            events_logger.event(json.dumps({
                'type': 'smart_followers_snapshot',
                'entity': label,
                'x_user_id': account_id,
                'as_of_date': day.isoformat(),
                **result.to_dict(),
            }))

    bt.logging.info(
        f"Snapshot job for {summary.as_of_date}: {summary.computed} computed "
        f"({summary.estimates} estimates), {len(summary.skipped)} skipped, {len(summary.failed)} failed"
    )
    return summary

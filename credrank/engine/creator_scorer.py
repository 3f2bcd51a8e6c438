"""
Creator and project scoring orchestration.

Reads content for the window, builds per-post metrics, looks up smart
followers and hands everything to the signal scorer. Store failures are
logged and treated as "no data". Author smart scores are rescaled against
the day's top account so they sit on the 0-1 scale the scorers expect.
"""

from datetime import date, datetime, timedelta
from typing import Callable, Dict, Iterable, Optional, Sequence
import bittensor as bt

from credrank.engine.engagement import EngagementAggregator
from credrank.engine.interfaces import ContentStore, ProfileStore, SmartAccountStore
from credrank.engine.models import (
    ContentRecord,
    CreatorScoreSummary,
    ScoreTriple,
    normalize_handle,
    validate_window
)
from credrank.engine.signal_scoring import (
    SignalScorer,
    aggregate_creator_scores,
    build_post_metrics
)
from credrank.engine.smart_followers import SmartFollowersCalculator
from credrank.engine.utils.config import EngineConfig, WINDOW_HOURS
from credrank.engine.utils.date_utils import AsOfDate, end_of_day, parse_as_of_date, utc_now
from credrank.engine.utils.error_handling import ErrorMessages, safe_operation


class CreatorScorer:
    """Scores creators across projects and projects on their own."""

    def __init__(
        self,
        config: EngineConfig,
        content_store: ContentStore,
        profile_store: ProfileStore,
        smart_account_store: SmartAccountStore,
        smart_followers: SmartFollowersCalculator,
        clock: Callable[[], datetime] = utc_now
    ):
        self.config = config
        self.content_store = content_store
        self.profile_store = profile_store
        self.smart_account_store = smart_account_store
        self.smart_followers = smart_followers
        self.clock = clock
        self.aggregator = EngagementAggregator(config)
        self.signal_scorer = SignalScorer(config)

    def _window_bounds(self, window: str, day: date):
        end = min(self.clock(), end_of_day(day))
        start = end - timedelta(hours=WINDOW_HOURS[window])
        return start, end

    @safe_operation(ErrorMessages.CONTENT_READ_FAILED, default_return=())
    def _read_content(
        self,
        entity_id: str,
        start: datetime,
        end: datetime,
        author_handle: Optional[str] = None
    ) -> Sequence[ContentRecord]:
        return self.content_store.get_content_records(
            entity_id, start, end, author_handle=author_handle, include_official=False
        )

    @safe_operation(ErrorMessages.PROFILE_READ_FAILED, default_return=None)
    def _resolve_account_id(self, handle: str) -> Optional[str]:
        return self.profile_store.find_account_id(handle)

    @safe_operation(ErrorMessages.SMART_SCORE_READ_FAILED, default_return=None)
    def _raw_smart_score(self, account_id: str, day: date) -> Optional[float]:
        score = self.smart_account_store.get_smart_account_score(account_id, day)
        return score.smart_score if score is not None else None

    @safe_operation(ErrorMessages.SMART_SCORE_READ_FAILED, default_return=None)
    def _day_max_smart_score(self, day: date) -> Optional[float]:
        return self.smart_account_store.get_max_smart_score(day)

    def _smart_score(self, account_id: Optional[str], day: date, day_max: Optional[float]) -> Optional[float]:
        """
        Author smart score relative to the day's top account, in [0, 1].

        Stored scores are PageRank-sized (they sum to roughly 1 over the whole
        graph), so they are divided by the day's maximum before being used as
        authenticity or influencer inputs.
        """
        if not account_id or not day_max:
            return None
        raw = self._raw_smart_score(account_id, day)
        if raw is None:
            return None
        return min(1.0, max(0.0, raw / day_max))

    def _author_smart_scores(self, handles: Iterable[str], day: date) -> Dict[str, float]:
        day_max = self._day_max_smart_score(day)
        if not day_max:
            return {}

        scores = {}
        for handle in handles:
            score = self._smart_score(self._resolve_account_id(handle), day, day_max)
            if score is not None:
                scores[handle] = score
        return scores

    def score_creator(
        self,
        creator_handle: str,
        project_ids: Iterable[str],
        window: str = '7d',
        as_of_date: Optional[AsOfDate] = None,
        is_joined: bool = False,
        audience_org_score: Optional[float] = None
    ) -> CreatorScoreSummary:
        """
        Score one creator's activity on each project and roll it up.

        Args:
            creator_handle: Creator's social handle ('@' optional)
            project_ids: Projects the creator posts about
            window: '24h', '7d' or '30d'
            as_of_date: Day to evaluate (defaults to the clock's current day)
            is_joined: Whether the creator joined the leaderboard
            audience_org_score: Optional organic-audience score (0-100)

        Returns:
            CreatorScoreSummary with per-project triples

        Raises:
            ValueError: Unknown window or malformed date
        """
        validate_window(window)
        day = parse_as_of_date(as_of_date) if as_of_date is not None else self.clock().date()
        handle = normalize_handle(creator_handle)
        start, end = self._window_bounds(window, day)

        account_id = self._resolve_account_id(handle)
        smart_scores = {}
        smart_score = self._smart_score(account_id, day, self._day_max_smart_score(day))
        if smart_score is not None:
            smart_scores[handle] = smart_score
        org_scores = {handle: audience_org_score} if audience_org_score is not None else {}

        smart_followers_count = 0
        if account_id:
            smart_followers_count = self.smart_followers.get_smart_followers(
                'creator', handle, account_id, day
            ).smart_followers_count
        else:
            bt.logging.debug(f"No tracked account for @{handle}, smart followers treated as 0")

        project_scores: Dict[str, ScoreTriple] = {}
        for project_id in project_ids:
            records = self._read_content(project_id, start, end, author_handle=handle)
            metrics = build_post_metrics(records, self.aggregator, smart_scores, org_scores)
            project_scores[project_id] = self.signal_scorer.score_posts(
                metrics, window, smart_followers_count, end, is_joined=is_joined
            )

        summary = aggregate_creator_scores(handle, window, project_scores)
        bt.logging.info(
            f"@{handle} ({window}): {len(project_scores)} projects, "
            f"avg heat {summary.avg_heat}, avg signal {summary.avg_signal}, band {summary.trust_band}"
        )
        return summary

    def score_project(
        self,
        project_id: str,
        project_account_id: str,
        window: str = '24h',
        as_of_date: Optional[AsOfDate] = None
    ) -> ScoreTriple:
        """
        Score all non-official activity about a project.

        Influencer mentions come from each author's smart score for the day.
        """
        validate_window(window)
        day = parse_as_of_date(as_of_date) if as_of_date is not None else self.clock().date()
        start, end = self._window_bounds(window, day)

        records = self._read_content(project_id, start, end)
        smart_scores = self._author_smart_scores({r.author for r in records if r.author}, day)
        metrics = build_post_metrics(records, self.aggregator, smart_scores)

        smart_followers_count = self.smart_followers.get_smart_followers(
            'project', project_id, project_account_id, day
        ).smart_followers_count

        return self.signal_scorer.score_posts(metrics, window, smart_followers_count, end)

"""
Signal score and trust band.

Signal is a quality-weighted influence measure. Each post contributes
log1p(engagement) scaled by recency decay and by content-type, originality,
authenticity, sentiment and join multipliers. The total is then scaled by
how large the creator's smart audience is and clamped to 0-100.
"""

import math
from datetime import datetime
from typing import Optional, Sequence
import bittensor as bt

from credrank.engine.models import CreatorPostMetric, ScoreTriple
from credrank.engine.signal_scoring.heat_score import HeatScorer, posts_in_window
from credrank.engine.utils.config import EngineConfig
from credrank.engine.utils.date_utils import ensure_utc

NEUTRAL_SMART_SCORE = 0.5
NEUTRAL_ORG_SCORE = 0.5
SMART_SCORE_SHARE = 0.6
ORG_SCORE_SHARE = 0.4


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def recency_weight(age_hours: float, halflife_hours: float) -> float:
    """Exponential decay: 1.0 at age 0, 0.5 after one half-life."""
    return math.exp(-(max(0.0, age_hours) / halflife_hours) * math.log(2))


class SignalScorer:
    """Computes signal, trust band and the combined score triple."""

    def __init__(self, config: EngineConfig):
        self.config = config
        self.heat_scorer = HeatScorer(config)

    def auth_weight(self, smart_score: Optional[float], audience_org_score: Optional[float]) -> float:
        """Authenticity multiplier from author smart score (0-1) and audience org score (0-100)."""
        smart = smart_score if smart_score is not None else NEUTRAL_SMART_SCORE
        org = audience_org_score / 100 if audience_org_score is not None else NEUTRAL_ORG_SCORE
        combined = smart * SMART_SCORE_SHARE + org * ORG_SCORE_SHARE
        return clamp(combined * 2, self.config.auth_weight_floor, self.config.auth_weight_cap)

    def sentiment_weight(self, sentiment_score: Optional[float]) -> float:
        if sentiment_score is None:
            return 1.0
        weight = 0.7 + (sentiment_score / 100) * 0.6
        return clamp(weight, self.config.sentiment_weight_floor, self.config.sentiment_weight_cap)

    def audience_weight(self, smart_followers_count: int) -> float:
        """Boost for creators whose own audience is smart; 1.0 with none."""
        boost = math.log10(1 + max(0, smart_followers_count)) * self.config.audience_weight_slope
        return clamp(1 + boost, 1.0, self.config.audience_weight_cap)

    def post_points(
        self,
        post: CreatorPostMetric,
        halflife_hours: float,
        now: datetime,
        is_joined: bool = False
    ) -> float:
        age_hours = (ensure_utc(now) - ensure_utc(post.created_at)).total_seconds() / 3600
        originality = 1.0 if post.is_original else self.config.duplicate_weight
        join = self.config.join_weight_max if is_joined else 1.0

        return (
            math.log1p(max(0.0, post.engagement_points))
            * recency_weight(age_hours, halflife_hours)
            * self.config.content_weight(post.content_type)
            * originality
            * self.auth_weight(post.smart_score, post.audience_org_score)
            * self.sentiment_weight(post.sentiment_score)
            * join
        )

    def compute_signal_total(
        self,
        posts: Sequence[CreatorPostMetric],
        window: str,
        now: datetime,
        smart_followers_count: int = 0,
        is_joined: bool = False
    ) -> Optional[float]:
        """Unclamped signal points, or None when no post falls in the window."""
        in_window = posts_in_window(posts, window, now)
        if not in_window:
            return None

        halflife = self.config.recency_halflife_hours(window)
        total = sum(self.post_points(p, halflife, now, is_joined) for p in in_window)
        return total * self.audience_weight(smart_followers_count)

    def compute_signal_score(
        self,
        posts: Sequence[CreatorPostMetric],
        window: str,
        now: datetime,
        smart_followers_count: int = 0,
        is_joined: bool = False
    ) -> Optional[int]:
        total = self.compute_signal_total(posts, window, now, smart_followers_count, is_joined)
        if total is None:
            return None
        return int(clamp(round(total), 0, 100))

    def trust_band_for(self, signal: Optional[float]) -> Optional[str]:
        """A/B/C/D by signal thresholds; None when there is no signal."""
        if signal is None:
            return None
        if signal >= self.config.trust_band_a_min:
            return 'A'
        if signal >= self.config.trust_band_b_min:
            return 'B'
        if signal >= self.config.trust_band_c_min:
            return 'C'
        return 'D'

    def score_posts(
        self,
        posts: Sequence[CreatorPostMetric],
        window: str,
        smart_followers_count: int,
        now: datetime,
        is_joined: bool = False
    ) -> ScoreTriple:
        """
        Heat, signal and trust band for one creator/project window.

        Returns:
            ScoreTriple with heat/signal/trust_band None when the window is
            empty (no activity is distinct from a zero score)
        """
        heat = self.heat_scorer.compute_heat_score(posts, window, now)
        total = self.compute_signal_total(posts, window, now, smart_followers_count, is_joined)

        if total is None:
            signal = None
            final_score = 0.0
        else:
            signal = int(clamp(round(total), 0, 100))
            final_score = round(total, 2)

        triple = ScoreTriple(
            heat=heat,
            signal=signal,
            trust_band=self.trust_band_for(signal),
            final_score=final_score,
            smart_followers_count=smart_followers_count,
        )
        bt.logging.debug(f"Scored {len(posts)} posts ({window}): {triple.to_dict()}")
        return triple

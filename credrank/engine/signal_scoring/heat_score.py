"""
Heat score: a short-window, volume-sensitive engagement pulse.

Blends mention volume (40%), average likes + reshares (30%), distinct
authors (20%) and posts by high smart-score authors (10%). Each input is
mapped onto 0-100 by piecewise linear bands.
"""

from datetime import datetime, timedelta
from typing import List, Optional, Sequence
import bittensor as bt

from credrank.engine.models import CreatorPostMetric, validate_window
from credrank.engine.utils.config import EngineConfig, WINDOW_HOURS
from credrank.engine.utils.date_utils import ensure_utc

VOLUME_WEIGHT = 0.40
ENGAGEMENT_WEIGHT = 0.30
DIVERSITY_WEIGHT = 0.20
INFLUENCER_WEIGHT = 0.10


def _volume_score(mentions: float) -> float:
    if mentions >= 1000:
        return 100.0
    if mentions >= 100:
        return 50 + (mentions - 100) / 900 * 50
    if mentions >= 10:
        return 20 + (mentions - 10) / 90 * 30
    return mentions / 10 * 20


def _engagement_score(avg_engagement: float) -> float:
    if avg_engagement >= 100:
        return 100.0
    if avg_engagement >= 20:
        return 50 + (avg_engagement - 20) / 80 * 50
    if avg_engagement >= 5:
        return 20 + (avg_engagement - 5) / 15 * 30
    return avg_engagement / 5 * 20


def _diversity_score(unique_authors: float) -> float:
    if unique_authors >= 100:
        return 100.0
    if unique_authors >= 20:
        return 50 + (unique_authors - 20) / 80 * 50
    return unique_authors / 20 * 50


def _influencer_score(influencer_mentions: float) -> float:
    if influencer_mentions >= 10:
        return 100.0
    if influencer_mentions >= 3:
        return 50 + (influencer_mentions - 3) / 7 * 50
    return influencer_mentions / 3 * 50


def heat_from_counts(
    mention_count: int,
    avg_likes: float,
    avg_reshares: float,
    unique_authors: int,
    influencer_mentions: int = 0
) -> int:
    """Combine the four heat components into an int in [0, 100]."""
    heat = (
        _volume_score(mention_count) * VOLUME_WEIGHT
        + _engagement_score(avg_likes + avg_reshares) * ENGAGEMENT_WEIGHT
        + _diversity_score(unique_authors) * DIVERSITY_WEIGHT
        + _influencer_score(influencer_mentions) * INFLUENCER_WEIGHT
    )
    return int(round(max(0.0, min(100.0, heat))))


def posts_in_window(posts: Sequence[CreatorPostMetric], window: str, now: datetime) -> List[CreatorPostMetric]:
    """Posts with now - window <= created_at <= now."""
    end = ensure_utc(now)
    start = end - timedelta(hours=WINDOW_HOURS[validate_window(window)])
    return [p for p in posts if start <= ensure_utc(p.created_at) <= end]


class HeatScorer:
    """Computes heat for a window of posts."""

    def __init__(self, config: EngineConfig):
        self.config = config

    def compute_heat_score(
        self,
        posts: Sequence[CreatorPostMetric],
        window: str,
        now: datetime
    ) -> Optional[int]:
        """
        Heat for the posts inside the window ending at `now`.

        Returns:
            int in [0, 100], or None when no post falls in the window
        """
        in_window = posts_in_window(posts, window, now)
        if not in_window:
            return None

        count = len(in_window)
        authors = {p.author_handle for p in in_window if p.author_handle}
        influencer_posts = [
            p for p in in_window
            if p.smart_score is not None
            and p.smart_score >= self.config.influencer_smart_score_min
        ]

        heat = heat_from_counts(
            mention_count=count,
            avg_likes=sum(p.likes for p in in_window) / count,
            avg_reshares=sum(p.reshares for p in in_window) / count,
            unique_authors=len(authors),
            influencer_mentions=len(influencer_posts),
        )
        bt.logging.debug(
            f"Heat {window}: {count} posts, {len(authors)} authors, "
            f"{len(influencer_posts)} influencer posts -> {heat}"
        )
        return heat

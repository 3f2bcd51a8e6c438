"""
Engagement aggregation over raw content records.

Collapses posts/mentions into per-author engagement totals and simple window
summaries. Used by the smart follower fallback, the heat score and the
post-metrics builder.
"""

import math
from collections import defaultdict
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Set
import bittensor as bt

from credrank.engine.models import ContentRecord
from credrank.engine.utils.config import EngineConfig


@dataclass(frozen=True)
class EngagementSummary:
    """Volume figures for a set of content records."""
    mention_count: int
    avg_likes: float
    avg_reshares: float
    unique_authors: int


def engagement_threshold(totals: Iterable[float], min_engagement: float, top_fraction: float) -> float:
    """
    Threshold for the "high-trust engager" set.

    The higher of an absolute floor and the value at the top_fraction rank of
    the descending totals (the 80th percentile for the default 0.2). With
    fewer values than the rank index, the floor alone applies.
    """
    ordered = sorted(totals, reverse=True)
    index = math.floor(len(ordered) * top_fraction)
    percentile_value = ordered[index] if index < len(ordered) else 0
    return max(min_engagement, percentile_value)


class EngagementAggregator:
    """Aggregates engagement per author using the configured point weights."""

    def __init__(self, config: Optional[EngineConfig] = None):
        self.config = config or EngineConfig()

    def engagement_points(self, record: ContentRecord) -> float:
        """likes x1 + replies x2 + reshares x3 with the default weights."""
        return (
            record.likes * self.config.like_weight
            + record.replies * self.config.reply_weight
            + record.reshares * self.config.reshare_weight
        )

    def aggregate_by_author(self, records: Iterable[ContentRecord]) -> Dict[str, float]:
        """
        Sum engagement points per normalized author handle.

        Records without an author are skipped.
        """
        totals: Dict[str, float] = defaultdict(float)
        skipped = 0
        for record in records:
            author = record.author
            if not author:
                skipped += 1
                continue
            totals[author] += self.engagement_points(record)

        if skipped:
            bt.logging.debug(f"Skipped {skipped} content records without an author")
        return dict(totals)

    def high_engagement_authors(self, records: Iterable[ContentRecord]) -> Set[str]:
        """Authors at or above the fallback engagement threshold."""
        totals = self.aggregate_by_author(records)
        if not totals:
            return set()

        threshold = engagement_threshold(
            totals.values(),
            self.config.fallback_min_engagement,
            self.config.fallback_top_fraction
        )
        selected = {author for author, points in totals.items() if points >= threshold}

        bt.logging.debug(
            f"Engagement threshold {threshold:.1f}: {len(selected)}/{len(totals)} authors selected"
        )
        return selected

    def summarize(self, records: List[ContentRecord]) -> EngagementSummary:
        if not records:
            return EngagementSummary(0, 0.0, 0.0, 0)

        count = len(records)
        return EngagementSummary(
            mention_count=count,
            avg_likes=sum(r.likes for r in records) / count,
            avg_reshares=sum(r.reshares for r in records) / count,
            unique_authors=len({r.author for r in records if r.author}),
        )

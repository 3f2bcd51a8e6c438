"""Engagement aggregation for content records."""

from .engagement_aggregator import (
    EngagementAggregator,
    EngagementSummary,
    engagement_threshold
)

__all__ = [
    "EngagementAggregator",
    "EngagementSummary",
    "engagement_threshold",
]

"""
Composite scoring: per-post metrics, heat, signal/trust band and the
cross-project creator roll-up.
"""

from .post_metrics import build_post_metrics, classify_content_type
from .heat_score import HeatScorer, heat_from_counts, posts_in_window
from .signal_score import SignalScorer, recency_weight
from .creator_aggregator import (
    aggregate_creator_scores,
    mean_excluding_none,
    modal_trust_band
)

__all__ = [
    "build_post_metrics",
    "classify_content_type",
    "HeatScorer",
    "heat_from_counts",
    "posts_in_window",
    "SignalScorer",
    "recency_weight",
    "aggregate_creator_scores",
    "mean_excluding_none",
    "modal_trust_band",
]

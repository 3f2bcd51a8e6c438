"""
Smart follower subsystem.

Bot-risk heuristic and daily smart-account ranking upstream, followed by the
per-entity smart follower lookup and its snapshot memo.
"""

from .bot_risk import calculate_bot_risk, bot_risk_for_account
from .smart_account_ranker import SmartAccountRanker, compute_pagerank
from .snapshot_cache import SnapshotCache
from .smart_followers_calculator import SmartFollowersCalculator

__all__ = [
    "calculate_bot_risk",
    "bot_risk_for_account",
    "SmartAccountRanker",
    "compute_pagerank",
    "SnapshotCache",
    "SmartFollowersCalculator",
]

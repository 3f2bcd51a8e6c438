"""Data models for the trust and influence scoring engine."""

from .records import (
    TrackedAccount,
    FollowEdge,
    SmartAccountScore,
    ContentRecord,
    normalize_handle
)
from .smart_followers import (
    ENTITY_TYPES,
    SnapshotKey,
    SmartFollowersResult,
    SmartFollowersSnapshot,
    SmartFollowersDeltas,
    validate_entity_type
)
from .scores import (
    WINDOWS,
    CONTENT_TYPES,
    TRUST_BANDS,
    CreatorPostMetric,
    ScoreTriple,
    CreatorScoreSummary,
    TopicScore,
    validate_window
)

__all__ = [
    "TrackedAccount",
    "FollowEdge",
    "SmartAccountScore",
    "ContentRecord",
    "normalize_handle",
    "ENTITY_TYPES",
    "SnapshotKey",
    "SmartFollowersResult",
    "SmartFollowersSnapshot",
    "SmartFollowersDeltas",
    "validate_entity_type",
    "WINDOWS",
    "CONTENT_TYPES",
    "TRUST_BANDS",
    "CreatorPostMetric",
    "ScoreTriple",
    "CreatorScoreSummary",
    "TopicScore",
    "validate_window",
]

"""Data models for derived per-post metrics and composite scores."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, Optional

from credrank.engine.utils.error_handling import log_and_raise_validation_error, ErrorMessages

WINDOWS = ('24h', '7d', '30d')
CONTENT_TYPES = ('thread', 'analysis', 'meme', 'quote_rt', 'retweet', 'reply', 'other')
TRUST_BANDS = ('A', 'B', 'C', 'D')


def validate_window(window: str) -> str:
    """Return the window unchanged, raising ValueError if it is unknown."""
    if window not in WINDOWS:
        log_and_raise_validation_error(
            f"{ErrorMessages.INVALID_WINDOW}: {window!r}",
            context_info={'allowed': WINDOWS}
        )
    return window


@dataclass
class CreatorPostMetric:
    """Per-post inputs to heat and signal scoring. Derived on demand, never persisted."""
    content_id: str
    author_handle: str
    created_at: datetime
    engagement_points: float
    likes: int = 0
    reshares: int = 0
    content_type: str = 'other'
    is_original: bool = True
    sentiment_score: Optional[float] = None
    smart_score: Optional[float] = None
    audience_org_score: Optional[float] = None

    def __post_init__(self):
        if self.content_type not in CONTENT_TYPES:
            raise ValueError(f"Unknown content type: {self.content_type}")


@dataclass(frozen=True)
class ScoreTriple:
    """
    Composite scores for one creator/project in one window.

    heat and signal are None when the window holds no qualifying activity,
    which is distinct from a computed score of 0.
    """
    heat: Optional[int]
    signal: Optional[int]
    trust_band: Optional[str]
    final_score: float = 0.0
    smart_followers_count: int = 0

    def to_dict(self) -> dict:
        return {
            'heat': self.heat,
            'signal': self.signal,
            'trust_band': self.trust_band,
            'final_score': self.final_score,
            'smart_followers_count': self.smart_followers_count,
        }


@dataclass
class CreatorScoreSummary:
    """Cross-project roll-up for a single creator."""
    creator_handle: str
    window: str
    avg_heat: Optional[float]
    avg_signal: Optional[float]
    trust_band: Optional[str]
    project_scores: Dict[str, ScoreTriple] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            'creator_handle': self.creator_handle,
            'window': self.window,
            'avg_heat': self.avg_heat,
            'avg_signal': self.avg_signal,
            'trust_band': self.trust_band,
            'projects': {pid: triple.to_dict() for pid, triple in self.project_scores.items()},
        }


@dataclass(frozen=True)
class TopicScore:
    """Topic affinity for a body of content, normalized against the top topic."""
    topic: str
    score: int
    content_count: int
    weighted_score: float

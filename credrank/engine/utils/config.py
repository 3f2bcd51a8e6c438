import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Dict, Optional

from dotenv import load_dotenv
import bittensor as bt

env_path = Path(__file__).parents[1] / '.env'
load_dotenv(dotenv_path=env_path)

__version__ = "0.3.1"

# Cache Configuration
CACHE_ROOT = Path(__file__).resolve().parents[3] / "cache"
CACHE_DIRS = {
    "snapshots": os.path.join(CACHE_ROOT, "snapshots"),
    "events": os.path.join(CACHE_ROOT, "events"),
}

# Smart account selection (consumed by the upstream ranking job)
SMART_FOLLOWERS_TOP_N = 1000
SMART_FOLLOWERS_TOP_PCT = 0.1
BOT_RISK_THRESHOLD = 0.5
MIN_ACCOUNT_AGE_DAYS = 90
PAGERANK_ALPHA = 0.85
PAGERANK_MAX_ITER = 1000

# Fallback "smart audience estimate"
FALLBACK_LOOKBACK_DAYS = 30
FALLBACK_MIN_ENGAGEMENT = 100
FALLBACK_TOP_FRACTION = 0.2

# Engagement point weights
ENGAGEMENT_LIKE_WEIGHT = 1
ENGAGEMENT_REPLY_WEIGHT = 2
ENGAGEMENT_RESHARE_WEIGHT = 3

# Delta lookups (1 = sequential, 2+ = concurrent)
DELTA_MAX_WORKERS = 1

# Signal score recency half-lives (hours)
SIGNAL_RECENCY_HALFLIFE_HOURS = {"24h": 12.0, "7d": 84.0, "30d": 360.0}
WINDOW_HOURS = {"24h": 24, "7d": 7 * 24, "30d": 30 * 24}

# Signal score content weights
SIGNAL_CONTENT_WEIGHTS = {
    "thread": 2.0,
    "analysis": 1.8,
    "meme": 0.8,
    "quote_rt": 1.0,
    "retweet": 0.3,
    "reply": 0.5,
    "other": 1.0,
}
SIGNAL_DUPLICATE_WEIGHT = 0.3
SIGNAL_AUTH_WEIGHT_FLOOR = 0.5
SIGNAL_AUTH_WEIGHT_CAP = 2.0
SIGNAL_SENTIMENT_WEIGHT_FLOOR = 0.7
SIGNAL_SENTIMENT_WEIGHT_CAP = 1.3
SIGNAL_JOIN_WEIGHT_MAX = 1.5
SIGNAL_AUDIENCE_WEIGHT_SLOPE = 0.1
SIGNAL_AUDIENCE_WEIGHT_CAP = 1.5

# Trust band thresholds (signal score, 0-100)
TRUST_BAND_A_MIN = 80.0
TRUST_BAND_B_MIN = 60.0
TRUST_BAND_C_MIN = 40.0

# Heat score
HEAT_INFLUENCER_SMART_SCORE_MIN = 0.5


def _env_number(source, key: str, default, cast):
    """Read a numeric knob, keeping the default for empty or malformed values."""
    value = source.get(key)
    if value is None or value == '':
        return default
    try:
        return cast(value)
    except ValueError:
        bt.logging.warning(f"Ignoring malformed {key}={value!r}, using {default}")
        return default


@dataclass(frozen=True)
class EngineConfig:
    """
    Tunable knobs for the scoring engine.

    Calculators receive an instance at construction time. The defaults are
    the module-level constants above; EngineConfig.from_env() overlays the
    environment variables named in ENV_KEYS.
    """
    top_n: int = SMART_FOLLOWERS_TOP_N
    top_pct: float = SMART_FOLLOWERS_TOP_PCT
    bot_risk_threshold: float = BOT_RISK_THRESHOLD
    min_account_age_days: int = MIN_ACCOUNT_AGE_DAYS
    pagerank_alpha: float = PAGERANK_ALPHA
    pagerank_max_iter: int = PAGERANK_MAX_ITER

    fallback_lookback_days: int = FALLBACK_LOOKBACK_DAYS
    fallback_min_engagement: float = FALLBACK_MIN_ENGAGEMENT
    fallback_top_fraction: float = FALLBACK_TOP_FRACTION

    like_weight: float = ENGAGEMENT_LIKE_WEIGHT
    reply_weight: float = ENGAGEMENT_REPLY_WEIGHT
    reshare_weight: float = ENGAGEMENT_RESHARE_WEIGHT

    delta_max_workers: int = DELTA_MAX_WORKERS

    duplicate_weight: float = SIGNAL_DUPLICATE_WEIGHT
    auth_weight_floor: float = SIGNAL_AUTH_WEIGHT_FLOOR
    auth_weight_cap: float = SIGNAL_AUTH_WEIGHT_CAP
    sentiment_weight_floor: float = SIGNAL_SENTIMENT_WEIGHT_FLOOR
    sentiment_weight_cap: float = SIGNAL_SENTIMENT_WEIGHT_CAP
    join_weight_max: float = SIGNAL_JOIN_WEIGHT_MAX
    audience_weight_slope: float = SIGNAL_AUDIENCE_WEIGHT_SLOPE
    audience_weight_cap: float = SIGNAL_AUDIENCE_WEIGHT_CAP

    trust_band_a_min: float = TRUST_BAND_A_MIN
    trust_band_b_min: float = TRUST_BAND_B_MIN
    trust_band_c_min: float = TRUST_BAND_C_MIN

    influencer_smart_score_min: float = HEAT_INFLUENCER_SMART_SCORE_MIN

    cache_dir: str = CACHE_DIRS["snapshots"]

    def __post_init__(self):
        if not 0.0 <= self.bot_risk_threshold <= 1.0:
            raise ValueError(f"bot_risk_threshold must be within [0, 1], got {self.bot_risk_threshold}")
        if not 0.0 <= self.top_pct <= 1.0:
            raise ValueError(f"top_pct must be within [0, 1], got {self.top_pct}")
        if not 0.0 < self.fallback_top_fraction <= 1.0:
            raise ValueError(
                f"fallback_top_fraction must be within (0, 1], got {self.fallback_top_fraction}"
            )
        if self.min_account_age_days < 0:
            raise ValueError(f"min_account_age_days must be non-negative, got {self.min_account_age_days}")

    def content_weight(self, content_type: str) -> float:
        """Weight for a classified content type (unknown types weigh 1.0)."""
        return SIGNAL_CONTENT_WEIGHTS.get(content_type, 1.0)

    def recency_halflife_hours(self, window: str) -> float:
        return SIGNAL_RECENCY_HALFLIFE_HOURS[window]

    def with_overrides(self, **overrides) -> 'EngineConfig':
        """Return a copy with the given fields replaced."""
        return replace(self, **overrides)

    @classmethod
    def from_env(cls, environ: Optional[Dict[str, str]] = None) -> 'EngineConfig':
        """
        Build a config from environment variables.

        Args:
            environ: Optional mapping to read instead of os.environ
                     (lets tests avoid process-wide mutation)
        """
        source = os.environ if environ is None else environ
        overrides = {}
        for field in fields(cls):
            key = ENV_KEYS.get(field.name)
            if key is None or key not in source:
                continue
            default = getattr(cls, field.name)
            if field.type is int:
                overrides[field.name] = _env_number(source, key, default, int)
            elif field.type is float:
                overrides[field.name] = _env_number(source, key, default, float)
            else:
                overrides[field.name] = source[key]

        config = cls(**overrides)
        config.log_summary()
        return config

    def log_summary(self) -> None:
        """Log out all non-sensitive config variables."""
        bt.logging.info(f"SMART_FOLLOWERS_TOP_N: {self.top_n}")
        bt.logging.info(f"SMART_FOLLOWERS_TOP_PCT: {self.top_pct}")
        bt.logging.info(f"BOT_RISK_THRESHOLD: {self.bot_risk_threshold}")
        bt.logging.info(f"MIN_ACCOUNT_AGE_DAYS: {self.min_account_age_days}")
        bt.logging.info(f"FALLBACK_LOOKBACK_DAYS: {self.fallback_lookback_days}")
        bt.logging.info(f"FALLBACK_MIN_ENGAGEMENT: {self.fallback_min_engagement}")
        bt.logging.info(f"DELTA_MAX_WORKERS: {self.delta_max_workers}")
        bt.logging.info(
            f"TRUST_BANDS: A>={self.trust_band_a_min}, "
            f"B>={self.trust_band_b_min}, C>={self.trust_band_c_min}"
        )


ENV_KEYS = {
    'top_n': 'SMART_FOLLOWERS_TOP_N',
    'top_pct': 'SMART_FOLLOWERS_TOP_PCT',
    'bot_risk_threshold': 'BOT_RISK_THRESHOLD',
    'min_account_age_days': 'MIN_ACCOUNT_AGE_DAYS',
    'pagerank_alpha': 'PAGERANK_ALPHA',
    'fallback_lookback_days': 'FALLBACK_LOOKBACK_DAYS',
    'fallback_min_engagement': 'FALLBACK_MIN_ENGAGEMENT',
    'delta_max_workers': 'DELTA_MAX_WORKERS',
    'auth_weight_floor': 'SIGNAL_AUTH_WEIGHT_FLOOR',
    'auth_weight_cap': 'SIGNAL_AUTH_WEIGHT_CAP',
    'sentiment_weight_floor': 'SIGNAL_SENTIMENT_WEIGHT_FLOOR',
    'sentiment_weight_cap': 'SIGNAL_SENTIMENT_WEIGHT_CAP',
    'join_weight_max': 'SIGNAL_JOIN_WEIGHT_MAX',
    'trust_band_a_min': 'SIGNAL_TRUST_BAND_A_MIN',
    'trust_band_b_min': 'SIGNAL_TRUST_BAND_B_MIN',
    'trust_band_c_min': 'SIGNAL_TRUST_BAND_C_MIN',
    'cache_dir': 'SNAPSHOT_CACHE_DIR',
}

"""Data models for smart-follower results and their date-keyed snapshots."""

from dataclasses import dataclass
from datetime import date
from typing import NamedTuple

from credrank.engine.utils.date_utils import parse_as_of_date
from credrank.engine.utils.error_handling import log_and_raise_validation_error, ErrorMessages

ENTITY_TYPES = ('project', 'creator')


def validate_entity_type(entity_type: str) -> str:
    """Return the entity type unchanged, raising ValueError if it is unknown."""
    if entity_type not in ENTITY_TYPES:
        log_and_raise_validation_error(
            f"{ErrorMessages.INVALID_ENTITY_TYPE}: {entity_type!r}",
            context_info={'allowed': ENTITY_TYPES}
        )
    return entity_type


def clamp_pct(value: float) -> float:
    """Clamp a percentage to [0, 100]."""
    return min(100.0, max(0.0, float(value)))


class SnapshotKey(NamedTuple):
    """Cache key: at most one snapshot row exists per key."""
    entity_type: str
    entity_id: str
    x_user_id: str
    as_of_date: date

    @classmethod
    def build(cls, entity_type: str, entity_id: str, x_user_id: str, as_of_date) -> 'SnapshotKey':
        return cls(
            validate_entity_type(entity_type),
            str(entity_id),
            str(x_user_id),
            parse_as_of_date(as_of_date),
        )

    def as_string(self) -> str:
        """Flat string form used by key/value backends."""
        return f"smart_followers:{self.entity_type}:{self.entity_id}:{self.x_user_id}:{self.as_of_date.isoformat()}"


@dataclass(frozen=True)
class SmartFollowersResult:
    """Smart follower count/percentage for one entity on one day."""
    smart_followers_count: int
    smart_followers_pct: float
    is_estimate: bool

    def __post_init__(self):
        if self.smart_followers_count < 0:
            raise ValueError(f"smart_followers_count must be non-negative, got {self.smart_followers_count}")
        object.__setattr__(self, 'smart_followers_pct', clamp_pct(self.smart_followers_pct))

    @classmethod
    def estimate(cls, count: int) -> 'SmartFollowersResult':
        """Fallback result: no follower denominator, so the percentage is 0."""
        return cls(smart_followers_count=count, smart_followers_pct=0.0, is_estimate=True)

    def to_dict(self) -> dict:
        return {
            'smart_followers_count': self.smart_followers_count,
            'smart_followers_pct': self.smart_followers_pct,
            'is_estimate': self.is_estimate,
        }


@dataclass(frozen=True)
class SmartFollowersSnapshot:
    """Persisted, write-once-per-day smart follower result."""
    key: SnapshotKey
    result: SmartFollowersResult

    @classmethod
    def from_dict(cls, data: dict) -> 'SmartFollowersSnapshot':
        """Create a snapshot from a database row dictionary."""
        key = SnapshotKey.build(
            data['entity_type'],
            data['entity_id'],
            data['x_user_id'],
            data['as_of_date'],
        )
        result = SmartFollowersResult(
            smart_followers_count=int(data.get('smart_followers_count') or 0),
            smart_followers_pct=float(data.get('smart_followers_pct') or 0.0),
            is_estimate=bool(data.get('is_estimate')),
        )
        return cls(key=key, result=result)

    def to_dict(self) -> dict:
        return {
            'entity_type': self.key.entity_type,
            'entity_id': self.key.entity_id,
            'x_user_id': self.key.x_user_id,
            'as_of_date': self.key.as_of_date.isoformat(),
            **self.result.to_dict(),
        }


@dataclass(frozen=True)
class SmartFollowersDeltas:
    """Change in smart follower count against 7 and 30 days earlier."""
    delta_7d: int
    delta_30d: int

    def to_dict(self) -> dict:
        return {'delta_7d': self.delta_7d, 'delta_30d': self.delta_30d}

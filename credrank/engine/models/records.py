"""Data models for rows read from the external stores."""

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from credrank.engine.utils.date_utils import ensure_utc, parse_as_of_date, parse_timestamp


def normalize_handle(handle: Optional[str]) -> str:
    """Lower-case a social handle and strip the leading '@'."""
    if not handle:
        return ''
    return handle.strip().lstrip('@').lower()


def _as_datetime(value) -> Optional[datetime]:
    if value is None or value == '':
        return None
    if isinstance(value, datetime):
        return ensure_utc(value)
    return parse_timestamp(str(value))


@dataclass
class TrackedAccount:
    """
    Profile snapshot for a tracked platform account.

    Owned by an external ingestion process; the engine only reads it.
    """
    account_id: str
    followers_count: int = 0
    following_count: int = 0
    account_created_at: Optional[datetime] = None
    username: Optional[str] = None

    def __post_init__(self):
        if not self.account_id:
            raise ValueError("Account id cannot be empty")
        self.followers_count = int(self.followers_count or 0)
        self.following_count = int(self.following_count or 0)
        self.account_created_at = _as_datetime(self.account_created_at)

    @classmethod
    def from_dict(cls, data: dict) -> 'TrackedAccount':
        """Create TrackedAccount from a database row dictionary."""
        return cls(
            account_id=str(data['account_id']),
            followers_count=data.get('followers_count') or 0,
            following_count=data.get('following_count') or 0,
            account_created_at=data.get('account_created_at'),
            username=data.get('username'),
        )

    def to_dict(self) -> dict:
        return {
            'account_id': self.account_id,
            'followers_count': self.followers_count,
            'following_count': self.following_count,
            'account_created_at': self.account_created_at.isoformat() if self.account_created_at else None,
            'username': self.username,
        }


@dataclass(frozen=True)
class FollowEdge:
    """Directed edge: src follows dst."""
    src_account_id: str
    dst_account_id: str


@dataclass
class SmartAccountScore:
    """Daily trust classification for one account."""
    account_id: str
    as_of_date: date
    pagerank: float
    bot_risk: float
    smart_score: float
    is_smart: bool

    def __post_init__(self):
        self.as_of_date = parse_as_of_date(self.as_of_date)
        if not 0.0 <= self.bot_risk <= 1.0:
            raise ValueError(f"bot_risk must be within [0, 1], got {self.bot_risk}")
        self.is_smart = bool(self.is_smart)

    @classmethod
    def from_dict(cls, data: dict) -> 'SmartAccountScore':
        return cls(
            account_id=str(data['account_id']),
            as_of_date=data['as_of_date'],
            pagerank=float(data.get('pagerank') or 0.0),
            bot_risk=float(data.get('bot_risk') or 0.0),
            smart_score=float(data.get('smart_score') or 0.0),
            is_smart=bool(data.get('is_smart')),
        )

    def to_dict(self) -> dict:
        return {
            'account_id': self.account_id,
            'as_of_date': self.as_of_date.isoformat(),
            'pagerank': self.pagerank,
            'bot_risk': self.bot_risk,
            'smart_score': self.smart_score,
            'is_smart': self.is_smart,
        }


@dataclass
class ContentRecord:
    """A post or mention attributed to a project/creator, with engagement counts."""
    author_handle: str
    entity_id: str
    created_at: datetime
    likes: int = 0
    replies: int = 0
    reshares: int = 0
    text: str = ''
    sentiment_score: Optional[int] = None
    is_official: bool = False
    content_id: str = ''

    def __post_init__(self):
        created_at = _as_datetime(self.created_at)
        if created_at is None:
            raise ValueError(f"Content record missing created_at: {self.content_id or self.author_handle}")
        self.created_at = created_at
        self.likes = int(self.likes or 0)
        self.replies = int(self.replies or 0)
        self.reshares = int(self.reshares or 0)
        self.text = self.text or ''
        self.is_official = bool(self.is_official)

    @property
    def author(self) -> str:
        """Normalized author handle."""
        return normalize_handle(self.author_handle)

    @classmethod
    def from_dict(cls, data: dict) -> 'ContentRecord':
        sentiment = data.get('sentiment_score')
        return cls(
            author_handle=data.get('author_handle') or '',
            entity_id=str(data.get('entity_id') or ''),
            created_at=data.get('created_at'),
            likes=data.get('likes') or 0,
            replies=data.get('replies') or 0,
            reshares=data.get('reshares') or 0,
            text=data.get('text') or '',
            sentiment_score=int(sentiment) if sentiment is not None else None,
            is_official=bool(data.get('is_official')),
            content_id=str(data.get('content_id') or ''),
        )

    def to_dict(self) -> dict:
        return {
            'content_id': self.content_id,
            'author_handle': self.author_handle,
            'entity_id': self.entity_id,
            'created_at': self.created_at.isoformat(),
            'likes': self.likes,
            'replies': self.replies,
            'reshares': self.reshares,
            'text': self.text,
            'sentiment_score': self.sentiment_score,
            'is_official': self.is_official,
        }

"""
Derive per-post scoring inputs from raw content records.

Content type comes from simple text patterns, originality from whether the
normalized text was already seen earlier in the same batch.
"""

import re
from typing import Iterable, List, Mapping, Optional

from credrank.engine.content_analysis import analyze_sentiment
from credrank.engine.engagement import EngagementAggregator
from credrank.engine.models import ContentRecord, CreatorPostMetric

_THREAD_NUMBERING_RE = re.compile(r'\d+/\d+')
THREAD_EMOJI = '\U0001F9F5'
LAUGH_EMOJI = '\U0001F602'


def classify_content_type(text: str) -> str:
    """
    Map post text to one of the scored content types.

    Checked in order: thread, analysis, meme, quote_rt, retweet, reply.
    Anything else is 'other'.
    """
    text = text or ''
    lowered = text.lower()

    if _THREAD_NUMBERING_RE.search(text) or 'thread' in lowered or THREAD_EMOJI in text:
        return 'thread'
    if 'analysis' in lowered or 'deep dive' in lowered:
        return 'analysis'
    if 'meme' in lowered or LAUGH_EMOJI in text:
        return 'meme'
    if 'quote' in lowered:
        return 'quote_rt'
    if lowered.startswith('rt @') or lowered.startswith('retweet'):
        return 'retweet'
    if lowered.startswith('@'):
        return 'reply'
    return 'other'


def build_post_metrics(
    records: Iterable[ContentRecord],
    aggregator: Optional[EngagementAggregator] = None,
    smart_scores: Optional[Mapping[str, float]] = None,
    audience_org_scores: Optional[Mapping[str, float]] = None
) -> List[CreatorPostMetric]:
    """
    Build CreatorPostMetric rows, oldest first.

    Args:
        records: Content records for one creator/project window
        aggregator: Engagement weighting (default weights when omitted)
        smart_scores: Normalized author handle -> smart score for the day
        audience_org_scores: Normalized author handle -> audience org score (0-100)

    Returns:
        One metric per record; a repeated text is marked non-original
    """
    aggregator = aggregator or EngagementAggregator()
    smart_scores = smart_scores or {}
    audience_org_scores = audience_org_scores or {}

    seen_texts = set()
    metrics = []
    for record in sorted(records, key=lambda r: r.created_at):
        normalized_text = record.text.lower().strip()
        is_original = normalized_text not in seen_texts
        if is_original:
            seen_texts.add(normalized_text)

        sentiment = record.sentiment_score
        if sentiment is None:
            sentiment = analyze_sentiment(record.text)

        metrics.append(CreatorPostMetric(
            content_id=record.content_id,
            author_handle=record.author,
            created_at=record.created_at,
            engagement_points=aggregator.engagement_points(record),
            likes=record.likes,
            reshares=record.reshares,
            content_type=classify_content_type(record.text),
            is_original=is_original,
            sentiment_score=sentiment,
            smart_score=smart_scores.get(record.author),
            audience_org_score=audience_org_scores.get(record.author),
        ))

    return metrics

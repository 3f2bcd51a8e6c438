"""
Pure text analysis: lexicon sentiment and keyword topic tagging.

The two analyzers are independent and never share state.
"""

from .sentiment_analyzer import (
    analyze_sentiment,
    analyze_sentiments,
    analyze_content_sentiments,
    aggregate_sentiment_score,
    clean_content_text,
    get_sentiment_label
)
from .topic_classifier import (
    PROFILE_TOPICS,
    TOPIC_LABELS,
    classify_topics,
    compute_topic_scores
)

__all__ = [
    "analyze_sentiment",
    "analyze_sentiments",
    "analyze_content_sentiments",
    "aggregate_sentiment_score",
    "clean_content_text",
    "get_sentiment_label",
    "PROFILE_TOPICS",
    "TOPIC_LABELS",
    "classify_topics",
    "compute_topic_scores",
]

"""
Keyword-lexicon sentiment analysis.

Scores text polarity on a 0-100 scale where 50 is neutral or indeterminate.
A negator or intensifier only modifies the next lexicon hit; any other word
in between resets both modifiers.
"""

import re
from types import MappingProxyType
from typing import Iterable, List, Sequence, Tuple

from credrank.engine.models import ContentRecord

NEUTRAL_SCORE = 50
MIN_TEXT_LENGTH = 3
COMPRESSION_FACTOR = 0.6
POSITIVE_LABEL_MIN = 60
NEGATIVE_LABEL_MAX = 40

POSITIVE_KEYWORDS = MappingProxyType({
    # Strong (3)
    'amazing': 3, 'excellent': 3, 'incredible': 3, 'fantastic': 3, 'brilliant': 3,
    'outstanding': 3, 'exceptional': 3, 'phenomenal': 3, 'bullish': 3, 'moon': 3,
    'gem': 3, 'winner': 3, 'best': 3, 'love': 3, 'perfect': 3,
    # Medium (2)
    'great': 2, 'good': 2, 'nice': 2, 'happy': 2, 'excited': 2, 'awesome': 2,
    'solid': 2, 'strong': 2, 'growing': 2, 'bullrun': 2, 'pump': 2,
    'buy': 2, 'accumulate': 2, 'opportunity': 2, 'potential': 2, 'promising': 2,
    'undervalued': 2, 'innovation': 2, 'revolutionary': 2,
    # Light (1)
    'okay': 1, 'fine': 1, 'interesting': 1, 'cool': 1, 'up': 1, 'green': 1,
    'gain': 1, 'profit': 1, 'win': 1, 'positive': 1, 'support': 1, 'like': 1,
})

NEGATIVE_KEYWORDS = MappingProxyType({
    # Strong (3)
    'scam': 3, 'fraud': 3, 'rug': 3, 'rugpull': 3, 'terrible': 3, 'awful': 3,
    'horrible': 3, 'disaster': 3, 'crash': 3, 'dump': 3, 'dead': 3, 'worthless': 3,
    'hate': 3, 'worst': 3, 'avoid': 3, 'ponzi': 3, 'fake': 3,
    # Medium (2)
    'bad': 2, 'bearish': 2, 'sell': 2, 'selling': 2, 'drop': 2, 'fall': 2,
    'failing': 2, 'failed': 2, 'poor': 2, 'weak': 2, 'worried': 2, 'concern': 2,
    'risk': 2, 'risky': 2, 'overvalued': 2, 'bubble': 2, 'warning': 2,
    # Light (1)
    'down': 1, 'red': 1, 'loss': 1, 'lose': 1, 'problem': 1, 'issue': 1,
    'bug': 1, 'delay': 1, 'slow': 1, 'meh': 1, 'boring': 1,
})

INTENSIFIERS = MappingProxyType({
    'very': 1.5, 'really': 1.5, 'extremely': 2.0, 'super': 1.5, 'so': 1.3,
    'absolutely': 2.0, 'totally': 1.5, 'completely': 1.5, 'highly': 1.5,
})

_CONTRACTED_NEGATORS = (
    "don't", "doesn't", "didn't", "won't", "wouldn't", "couldn't",
    "shouldn't", "isn't", "aren't", "wasn't", "weren't", "ain't",
)

# Apostrophe-less spellings ("dont", "isnt") are common in posts
NEGATORS = frozenset(
    ('not', 'no', 'never', 'neither', 'nobody', 'nothing', 'nowhere')
    + _CONTRACTED_NEGATORS
    + tuple(word.replace("'", '') for word in _CONTRACTED_NEGATORS)
)

_URL_RE = re.compile(r'https?://\S+')
_MENTION_RE = re.compile(r'@\w+')
_HASHTAG_RE = re.compile(r'#(\w+)')
_TICKER_RE = re.compile(r'\$\w+')
_RT_PREFIX_RE = re.compile(r'^RT\s+', re.IGNORECASE)
_WHITESPACE_RE = re.compile(r'\s+')
# Apostrophes stay inside tokens so contractions reach the negator table
_TOKEN_SPLIT_RE = re.compile(r'[\s,.!?;:"()\[\]{}]+')


def tokenize(text: str) -> List[str]:
    """Lower-case, drop URLs and mentions, unwrap hashtags, split into words."""
    cleaned = text.lower().replace('’', "'")
    cleaned = _URL_RE.sub('', cleaned)
    cleaned = _MENTION_RE.sub('', cleaned)
    cleaned = _HASHTAG_RE.sub(r'\1', cleaned)

    tokens = []
    for raw in _TOKEN_SPLIT_RE.split(cleaned):
        word = raw.strip("'")
        if len(word) > 1:
            tokens.append(word)
    return tokens


def _accumulate(tokens: Sequence[str]) -> Tuple[float, float]:
    positive = 0.0
    negative = 0.0
    intensifier = 1.0
    negated = False

    for word in tokens:
        if word in NEGATORS:
            negated = True
            continue

        if word in INTENSIFIERS:
            intensifier = INTENSIFIERS[word]
            continue

        if word in POSITIVE_KEYWORDS:
            score = POSITIVE_KEYWORDS[word] * intensifier
            if negated:
                negative += score
            else:
                positive += score
        elif word in NEGATIVE_KEYWORDS:
            score = NEGATIVE_KEYWORDS[word] * intensifier
            if negated:
                positive += score
            else:
                negative += score

        intensifier = 1.0
        negated = False

    return positive, negative


def analyze_sentiment(text: str) -> int:
    """
    Score the sentiment of a single text.

    Args:
        text: Raw post text

    Returns:
        int in [0, 100]; 50 for empty, very short or keyword-free text

    Examples:
        >>> analyze_sentiment("This is NOT a scam, very promising")
        80
    """
    if not text or len(text.strip()) < MIN_TEXT_LENGTH:
        return NEUTRAL_SCORE

    positive, negative = _accumulate(tokenize(text))
    total = positive + negative
    if total == 0:
        return NEUTRAL_SCORE

    raw = positive / total * 100
    compressed = NEUTRAL_SCORE + (raw - NEUTRAL_SCORE) * COMPRESSION_FACTOR
    return int(round(max(0.0, min(100.0, compressed))))


def analyze_sentiments(texts: Iterable[str]) -> List[int]:
    """Score several texts, preserving input order."""
    return [analyze_sentiment(text) for text in texts]


def analyze_content_sentiments(records: Iterable[ContentRecord]) -> List[ContentRecord]:
    """
    Fill sentiment_score on records that don't carry one.

    Records that already have a stored score keep it. The same list objects
    are returned so callers can chain.
    """
    scored = []
    for record in records:
        if record.sentiment_score is None:
            record.sentiment_score = analyze_sentiment(record.text)
        scored.append(record)
    return scored


def clean_content_text(text: str) -> str:
    """Strip URLs, mentions, $tickers and RT prefixes for display or analysis."""
    cleaned = _URL_RE.sub('', text or '')
    cleaned = _MENTION_RE.sub('', cleaned)
    cleaned = _TICKER_RE.sub('', cleaned)
    cleaned = _HASHTAG_RE.sub(r'\1', cleaned)
    cleaned = _RT_PREFIX_RE.sub('', cleaned.lstrip())
    return _WHITESPACE_RE.sub(' ', cleaned).strip()


def get_sentiment_label(score: float) -> str:
    if score >= POSITIVE_LABEL_MIN:
        return 'positive'
    if score <= NEGATIVE_LABEL_MAX:
        return 'negative'
    return 'neutral'


def aggregate_sentiment_score(records: Iterable[ContentRecord]) -> int:
    """
    Engagement-weighted mean sentiment across records.

    Each record weighs 1 + likes + reshares + replies, so a post nobody
    engaged with still counts once. Missing scores are analyzed from text.
    """
    weighted_sum = 0.0
    total_weight = 0.0
    for record in records:
        score = record.sentiment_score
        if score is None:
            score = analyze_sentiment(record.text)
        weight = 1 + record.likes + record.reshares + record.replies
        weighted_sum += score * weight
        total_weight += weight

    if total_weight == 0:
        return NEUTRAL_SCORE
    return int(round(weighted_sum / total_weight))

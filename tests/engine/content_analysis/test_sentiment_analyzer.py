"""
Tests for the lexicon sentiment analyzer.
"""

import pytest
from datetime import datetime, timezone

from credrank.engine.content_analysis.sentiment_analyzer import (
    aggregate_sentiment_score,
    analyze_content_sentiments,
    analyze_sentiment,
    analyze_sentiments,
    clean_content_text,
    get_sentiment_label,
    tokenize
)
from credrank.engine.models import ContentRecord

CREATED = datetime(2025, 11, 20, tzinfo=timezone.utc)


def make_record(text, likes=0, replies=0, reshares=0, sentiment=None):
    return ContentRecord(
        author_handle="@someone",
        entity_id="p1",
        created_at=CREATED,
        likes=likes,
        replies=replies,
        reshares=reshares,
        text=text,
        sentiment_score=sentiment,
    )


class TestAnalyzeSentiment:
    """Test scoring of single texts."""

    def test_empty_and_short_text_is_neutral(self):
        assert analyze_sentiment("") == 50
        assert analyze_sentiment("  ") == 50
        assert analyze_sentiment("ok") == 50

    def test_no_keywords_is_neutral(self):
        assert analyze_sentiment("the quick brown fox jumps") == 50

    def test_negated_scam_with_intensified_positive(self):
        assert analyze_sentiment("This is NOT a scam, very promising") == 80

    def test_single_positive_keyword_is_compressed(self):
        # raw 100 -> 50 + 50 * 0.6
        assert analyze_sentiment("great project") == 80

    def test_single_negative_keyword_is_compressed(self):
        assert analyze_sentiment("total scam here") == 20

    def test_negated_positive_goes_negative(self):
        assert analyze_sentiment("not good") < 50

    def test_negated_negative_goes_positive(self):
        assert analyze_sentiment("not bad") > 50

    def test_contraction_negators(self):
        assert analyze_sentiment("I don't like it") < 50
        assert analyze_sentiment("I dont like it") < 50
        assert analyze_sentiment("this isn't a scam") > 50

    def test_modifier_only_applies_to_next_word(self):
        """A non-lexicon word between negator and keyword resets the negation."""
        assert analyze_sentiment("not the best") > 50

    def test_mixed_polarity(self):
        # positive 2 (good), negative 2 (bad) -> raw 50
        assert analyze_sentiment("good and bad") == 50

    def test_case_insensitive(self):
        text = "Amazing Gem, totally BULLISH"
        assert analyze_sentiment(text) == analyze_sentiment(text.lower())
        assert analyze_sentiment(text) == analyze_sentiment(text.upper())

    def test_urls_and_mentions_ignored(self):
        base = "solid team, great roadmap"
        decorated = "@alice solid team, great roadmap https://example.com/scam @bob"
        assert analyze_sentiment(decorated) == analyze_sentiment(base)

    def test_hashtags_unwrapped(self):
        assert analyze_sentiment("#bullish on this") == analyze_sentiment("bullish on this")

    @pytest.mark.parametrize("text", [
        "scam scam scam rug rug dump",
        "moon moon moon gem gem extremely amazing",
        "not not not",
        "very very very",
        "!!!???",
    ])
    def test_always_in_range(self, text):
        assert 0 <= analyze_sentiment(text) <= 100


class TestTokenize:

    def test_single_characters_dropped(self):
        assert tokenize("a b cd") == ["cd"]

    def test_apostrophes_kept_inside_words(self):
        assert "don't" in tokenize("I don't know")


class TestSentimentHelpers:

    def test_batch_preserves_order(self):
        assert analyze_sentiments(["great", "", "awful news"]) == [80, 50, 20]

    def test_content_sentiments_fill_only_missing(self):
        records = [make_record("great stuff"), make_record("awful stuff", sentiment=70)]
        scored = analyze_content_sentiments(records)
        assert [r.sentiment_score for r in scored] == [80, 70]

    def test_clean_content_text(self):
        cleaned = clean_content_text("RT @alice: $BTC #moon soon https://t.co/x   ok")
        assert "@alice" not in cleaned
        assert "$BTC" not in cleaned
        assert "https" not in cleaned
        assert "moon" in cleaned
        assert "  " not in cleaned

    @pytest.mark.parametrize("score,label", [
        (80, 'positive'), (60, 'positive'), (59, 'neutral'),
        (50, 'neutral'), (41, 'neutral'), (40, 'negative'), (0, 'negative'),
    ])
    def test_sentiment_label(self, score, label):
        assert get_sentiment_label(score) == label

    def test_aggregate_empty_is_neutral(self):
        assert aggregate_sentiment_score([]) == 50

    def test_aggregate_is_engagement_weighted(self):
        records = [
            make_record("x", sentiment=80, likes=9),  # weight 10
            make_record("y", sentiment=20),           # weight 1
        ]
        expected = round((80 * 10 + 20 * 1) / 11)
        assert aggregate_sentiment_score(records) == expected

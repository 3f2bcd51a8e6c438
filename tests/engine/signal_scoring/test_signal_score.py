"""
Tests for signal score, trust bands and the score triple.
"""

import math
import pytest
from datetime import datetime, timedelta, timezone

from credrank.engine.models import CreatorPostMetric
from credrank.engine.signal_scoring import SignalScorer, recency_weight

NOW = datetime(2025, 11, 25, 12, 0, tzinfo=timezone.utc)


def post(points=100.0, hours_ago=0, content_type='other', is_original=True,
         sentiment=None, smart=None, org=None):
    return CreatorPostMetric(
        content_id="", author_handle="creator", created_at=NOW - timedelta(hours=hours_ago),
        engagement_points=points, content_type=content_type, is_original=is_original,
        sentiment_score=sentiment, smart_score=smart, audience_org_score=org,
    )


@pytest.fixture
def scorer(config):
    return SignalScorer(config)


class TestWeights:

    def test_recency_half_life(self):
        assert recency_weight(0, 12) == pytest.approx(1.0)
        assert recency_weight(12, 12) == pytest.approx(0.5)
        assert recency_weight(-5, 12) == pytest.approx(1.0)

    def test_auth_weight_bounds(self, scorer):
        assert scorer.auth_weight(None, None) == pytest.approx(1.0)
        assert scorer.auth_weight(1.0, 100) == pytest.approx(2.0)
        assert scorer.auth_weight(0.0, 0) == pytest.approx(0.5)

    def test_sentiment_weight(self, scorer):
        assert scorer.sentiment_weight(None) == 1.0
        assert scorer.sentiment_weight(100) == pytest.approx(1.3)
        assert scorer.sentiment_weight(0) == pytest.approx(0.7)
        assert scorer.sentiment_weight(50) == pytest.approx(1.0)

    def test_audience_weight(self, scorer):
        assert scorer.audience_weight(0) == 1.0
        assert scorer.audience_weight(9) == pytest.approx(1.1)
        assert scorer.audience_weight(10 ** 9) == pytest.approx(1.5)


class TestSignalScore:
    """Test per-post multipliers and the window total."""

    def test_single_post(self, scorer):
        total = scorer.compute_signal_total([post(100)], '7d', NOW)
        assert total == pytest.approx(math.log1p(100))
        assert scorer.compute_signal_score([post(100)], '7d', NOW) == round(math.log1p(100))

    def test_empty_window_is_none(self, scorer):
        assert scorer.compute_signal_score([], '7d', NOW) is None
        assert scorer.compute_signal_score([post(hours_ago=48)], '24h', NOW) is None

    def test_duplicates_discounted(self, scorer):
        original = scorer.compute_signal_total([post()], '7d', NOW)
        duplicate = scorer.compute_signal_total([post(is_original=False)], '7d', NOW)
        assert duplicate == pytest.approx(original * 0.3)

    def test_content_type_weights(self, scorer):
        other = scorer.compute_signal_total([post()], '7d', NOW)
        thread = scorer.compute_signal_total([post(content_type='thread')], '7d', NOW)
        retweet = scorer.compute_signal_total([post(content_type='retweet')], '7d', NOW)
        assert thread == pytest.approx(other * 2.0)
        assert retweet == pytest.approx(other * 0.3)

    def test_recency_decay_by_window(self, scorer):
        fresh = scorer.compute_signal_total([post()], '24h', NOW)
        half = scorer.compute_signal_total([post(hours_ago=12)], '24h', NOW)
        assert half == pytest.approx(fresh * 0.5)

    def test_positive_sentiment_rewarded(self, scorer):
        positive = scorer.compute_signal_total([post(sentiment=90)], '7d', NOW)
        negative = scorer.compute_signal_total([post(sentiment=10)], '7d', NOW)
        assert positive > negative

    def test_smart_author_rewarded(self, scorer):
        smart = scorer.compute_signal_total([post(smart=0.9)], '7d', NOW)
        unknown = scorer.compute_signal_total([post()], '7d', NOW)
        assert smart > unknown

    def test_smart_audience_rewarded(self, scorer):
        base = scorer.compute_signal_total([post()], '7d', NOW)
        boosted = scorer.compute_signal_total([post()], '7d', NOW, smart_followers_count=99)
        assert boosted == pytest.approx(base * 1.2)

    def test_join_bonus(self, scorer):
        base = scorer.compute_signal_total([post()], '7d', NOW)
        joined = scorer.compute_signal_total([post()], '7d', NOW, is_joined=True)
        assert joined == pytest.approx(base * 1.5)

    def test_clamped_to_100(self, scorer):
        posts = [post(10_000, content_type='thread', smart=1.0, org=100) for _ in range(20)]
        assert scorer.compute_signal_score(posts, '30d', NOW) == 100


class TestTrustBand:

    @pytest.mark.parametrize("signal,band", [
        (100, 'A'), (80, 'A'), (79, 'B'), (60, 'B'), (59, 'C'),
        (40, 'C'), (39, 'D'), (0, 'D'), (None, None),
    ])
    def test_bands(self, scorer, signal, band):
        assert scorer.trust_band_for(signal) == band

    def test_custom_thresholds(self, config):
        scorer = SignalScorer(config.with_overrides(trust_band_a_min=50.0))
        assert scorer.trust_band_for(55) == 'A'


class TestScorePosts:

    def test_empty_window_triple(self, scorer):
        triple = scorer.score_posts([], '24h', 5, NOW)
        assert triple.heat is None
        assert triple.signal is None
        assert triple.trust_band is None
        assert triple.final_score == 0.0
        assert triple.smart_followers_count == 5

    def test_full_triple(self, scorer):
        posts = [post(10_000, content_type='thread', smart=1.0, org=100) for _ in range(20)]
        triple = scorer.score_posts(posts, '7d', 0, NOW)
        assert triple.signal == 100
        assert triple.trust_band == 'A'
        assert triple.heat is not None
        assert triple.final_score > 100

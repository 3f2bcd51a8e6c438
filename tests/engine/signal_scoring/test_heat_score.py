"""
Tests for the heat score.
"""

import pytest
from datetime import datetime, timedelta, timezone

from credrank.engine.models import CreatorPostMetric
from credrank.engine.signal_scoring import HeatScorer, heat_from_counts

NOW = datetime(2025, 11, 25, 12, 0, tzinfo=timezone.utc)


def post(author="a", hours_ago=1, likes=0, reshares=0, smart_score=None):
    return CreatorPostMetric(
        content_id="", author_handle=author, created_at=NOW - timedelta(hours=hours_ago),
        engagement_points=likes + 3 * reshares, likes=likes, reshares=reshares,
        smart_score=smart_score,
    )


class TestHeatFromCounts:

    def test_zero(self):
        assert heat_from_counts(0, 0, 0, 0, 0) == 0

    def test_saturated(self):
        assert heat_from_counts(1000, 80, 20, 100, 10) == 100

    def test_band_midpoints(self):
        # Each component sits at exactly 50
        assert heat_from_counts(100, 20, 0, 20, 3) == 50

    def test_volume_dominates(self):
        assert heat_from_counts(1000, 0, 0, 0, 0) == 40

    def test_monotonic_in_mentions(self):
        values = [heat_from_counts(n, 5, 1, 5) for n in (1, 10, 50, 100, 500, 1000)]
        assert values == sorted(values)


class TestHeatScorer:

    def test_no_posts_is_none(self, config):
        assert HeatScorer(config).compute_heat_score([], '24h', NOW) is None

    def test_posts_outside_window_is_none(self, config):
        posts = [post(hours_ago=30)]
        assert HeatScorer(config).compute_heat_score(posts, '24h', NOW) is None
        assert HeatScorer(config).compute_heat_score(posts, '7d', NOW) is not None

    def test_low_activity_is_zero_not_none(self, config):
        assert HeatScorer(config).compute_heat_score([post()], '24h', NOW) == 1

    def test_influencer_posts_raise_heat(self, config):
        scorer = HeatScorer(config)
        plain = [post(author=f"u{i}") for i in range(3)]
        influential = [post(author=f"u{i}", smart_score=0.9) for i in range(3)]
        assert scorer.compute_heat_score(influential, '24h', NOW) > scorer.compute_heat_score(plain, '24h', NOW)

    def test_influencer_posts_counted_per_post(self, config):
        """One smart author posting three times counts as three influencer posts."""
        scorer = HeatScorer(config)
        plain = [post(author="w", hours_ago=h) for h in (1, 2, 3)]
        influential = [post(author="w", hours_ago=h, smart_score=0.9) for h in (1, 2, 3)]

        assert scorer.compute_heat_score(plain, '24h', NOW) == 3
        assert scorer.compute_heat_score(influential, '24h', NOW) == 8

    def test_below_threshold_not_influencer(self, config):
        scorer = HeatScorer(config)
        posts = [post(author=f"u{i}", smart_score=0.2) for i in range(3)]
        plain = [post(author=f"u{i}") for i in range(3)]
        assert scorer.compute_heat_score(posts, '24h', NOW) == scorer.compute_heat_score(plain, '24h', NOW)

    def test_unknown_window(self, config):
        with pytest.raises(ValueError):
            HeatScorer(config).compute_heat_score([post()], '1y', NOW)

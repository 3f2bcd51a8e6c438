"""
Tests for per-post metric derivation.
"""

import pytest
from datetime import datetime, timedelta, timezone

from credrank.engine.models import ContentRecord
from credrank.engine.signal_scoring import build_post_metrics, classify_content_type

T0 = datetime(2025, 11, 24, 12, 0, tzinfo=timezone.utc)


def record(text, offset_hours=0, sentiment=None, author="creator", **counts):
    return ContentRecord(author, "p1", T0 + timedelta(hours=offset_hours), text=text,
                         sentiment_score=sentiment, **counts)


class TestClassifyContentType:

    @pytest.mark.parametrize("text,expected", [
        ("1/7 why restaking matters", 'thread'),
        ("A thread on L2 fees", 'thread'),
        ("\U0001F9F5 on tokenomics", 'thread'),
        ("Deep dive into the vaults", 'analysis'),
        ("quick analysis of flows", 'analysis'),
        ("this meme is gold", 'meme'),
        ("lol \U0001F602", 'meme'),
        ("quote of the day", 'quote_rt'),
        ("RT @alice: big news", 'retweet'),
        ("retweeting this", 'retweet'),
        ("@bob agreed", 'reply'),
        ("gm everyone", 'other'),
        ("", 'other'),
    ])
    def test_types(self, text, expected):
        assert classify_content_type(text) == expected

    def test_thread_takes_precedence(self):
        assert classify_content_type("1/3 analysis meme thread") == 'thread'


class TestBuildPostMetrics:

    def test_duplicates_marked_non_original(self):
        metrics = build_post_metrics([
            record("Same text", offset_hours=1),
            record("same text  ", offset_hours=0),
            record("different", offset_hours=2),
        ])
        assert [m.is_original for m in metrics] == [True, False, True]

    def test_sorted_oldest_first(self):
        metrics = build_post_metrics([record("b", offset_hours=5), record("a", offset_hours=1)])
        assert metrics[0].created_at < metrics[1].created_at

    def test_engagement_points(self):
        metric = build_post_metrics([record("x", likes=1, replies=1, reshares=1)])[0]
        assert metric.engagement_points == 6
        assert metric.likes == 1
        assert metric.reshares == 1

    def test_missing_sentiment_filled(self):
        metrics = build_post_metrics([record("great project"), record("whatever", sentiment=30)])
        assert [m.sentiment_score for m in metrics] == [80, 30]

    def test_smart_and_org_scores_attached_by_author(self):
        metrics = build_post_metrics(
            [record("x", author="@Creator"), record("y", author="other", offset_hours=1)],
            smart_scores={"creator": 0.7},
            audience_org_scores={"creator": 65.0},
        )
        assert metrics[0].smart_score == 0.7
        assert metrics[0].audience_org_score == 65.0
        assert metrics[1].smart_score is None
        assert metrics[0].author_handle == "creator"

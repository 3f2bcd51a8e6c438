"""
Tests for CreatorScorer: creator roll-ups and project scoring end to end
against a temporary SQLite store.
"""

import pytest
from datetime import date, datetime, timedelta, timezone
from unittest.mock import MagicMock

from credrank.engine.creator_scorer import CreatorScorer
from credrank.engine.models import (
    ContentRecord,
    FollowEdge,
    SmartAccountScore,
    TrackedAccount
)
from credrank.engine.smart_followers import SmartAccountRanker, SmartFollowersCalculator

TODAY = date(2025, 11, 25)
NOW = datetime(2025, 11, 25, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def scorer(store, config, clock):
    smart_followers = SmartFollowersCalculator(
        config,
        graph_store=store,
        profile_store=store,
        content_store=store,
        smart_account_store=store,
        snapshot_store=store,
        clock=clock,
    )
    return CreatorScorer(config, store, store, store, smart_followers, clock=clock)


def seed_creator(store, handle="Alice", account_id="acc-alice", smart=("s1", "s2", "s3")):
    store.upsert_tracked_accounts([TrackedAccount(account_id, followers_count=100, username=handle)])
    store.add_follow_edges([FollowEdge(src, account_id) for src in smart])
    store.upsert_smart_account_scores([
        SmartAccountScore(src, TODAY, pagerank=0.1, bot_risk=0.0, smart_score=0.1, is_smart=True)
        for src in smart
    ])


def post(author, entity_id, hours_ago=1, likes=100, text="gm", **kwargs):
    return ContentRecord(author, entity_id, NOW - timedelta(hours=hours_ago), likes=likes, text=text,
                         content_id=f"{author}-{entity_id}-{hours_ago}-{text}", **kwargs)


class TestScoreCreator:
    """Test the cross-project creator summary."""

    def test_inactive_project_excluded_from_means(self, scorer, store):
        seed_creator(store)
        store.add_content_records([post("@alice", "proj-1")])

        summary = scorer.score_creator("@Alice", ["proj-1", "proj-2"], window='7d')

        active = summary.project_scores["proj-1"]
        idle = summary.project_scores["proj-2"]
        assert active.signal is not None
        assert active.smart_followers_count == 3
        assert idle.heat is None
        assert idle.signal is None
        assert idle.trust_band is None
        assert summary.avg_signal == float(active.signal)
        assert summary.trust_band == active.trust_band
        assert summary.creator_handle == "alice"

    def test_smart_followers_snapshot_written_for_creator(self, scorer, store):
        seed_creator(store)
        store.add_content_records([post("alice", "proj-1")])

        scorer.score_creator("alice", ["proj-1"])

        rows = store.get_all_snapshots(TODAY)
        assert len(rows) == 1
        assert rows[0]['entity_type'] == 'creator'
        assert rows[0]['entity_id'] == 'alice'

    def test_unknown_creator_has_no_smart_followers(self, scorer, store):
        store.add_content_records([post("nobody", "proj-1")])

        summary = scorer.score_creator("nobody", ["proj-1"])

        assert summary.project_scores["proj-1"].smart_followers_count == 0
        assert summary.project_scores["proj-1"].signal is not None
        assert store.get_snapshot_count() == 0

    def test_other_authors_ignored(self, scorer, store):
        seed_creator(store)
        store.add_content_records([post("bob", "proj-1")])

        summary = scorer.score_creator("alice", ["proj-1"])

        assert summary.avg_signal is None
        assert summary.trust_band is None

    def test_join_bonus_raises_final_score(self, scorer, store):
        store.add_content_records([post("carol", "proj-1", likes=1000)])

        plain = scorer.score_creator("carol", ["proj-1"])
        joined = scorer.score_creator("carol", ["proj-1"], is_joined=True)

        assert joined.project_scores["proj-1"].final_score > plain.project_scores["proj-1"].final_score

    def test_posts_outside_window_ignored(self, scorer, store):
        store.add_content_records([post("carol", "proj-1", hours_ago=48)])

        assert scorer.score_creator("carol", ["proj-1"], window='24h').avg_signal is None
        assert scorer.score_creator("carol", ["proj-1"], window='7d').avg_signal is not None

    def test_past_day_window_ends_at_end_of_day(self, scorer, store):
        store.add_content_records([post("carol", "proj-1", hours_ago=24 * 3)])

        summary = scorer.score_creator("carol", ["proj-1"], window='24h', as_of_date=TODAY - timedelta(days=3))

        assert summary.avg_signal is not None

    def test_content_failure_treated_as_no_data(self, store, config, clock):
        content_store = MagicMock()
        content_store.get_content_records.side_effect = RuntimeError("db down")
        smart_followers = MagicMock()
        scorer = CreatorScorer(config, content_store, store, store, smart_followers, clock=clock)

        summary = scorer.score_creator("carol", ["proj-1"])

        assert summary.avg_signal is None
        smart_followers.get_smart_followers.assert_not_called()

    def test_invalid_window(self, scorer):
        with pytest.raises(ValueError):
            scorer.score_creator("alice", ["proj-1"], window='90d')


class TestScoreProject:
    """Test project-level scoring."""

    def test_project_triple(self, scorer, store):
        seed_creator(store, handle="proj", account_id="acc-proj")
        store.add_content_records([
            post(f"user{i}", "proj-1", hours_ago=i + 1, likes=50, text=f"great update {i}")
            for i in range(5)
        ])

        triple = scorer.score_project("proj-1", "acc-proj", window='24h')

        assert triple.heat is not None
        assert triple.signal is not None
        assert triple.trust_band in ('A', 'B', 'C', 'D')
        assert triple.smart_followers_count == 3

    def test_official_posts_not_scored(self, scorer, store):
        store.add_content_records([post("proj", "proj-1", likes=10_000, is_official=True)])

        triple = scorer.score_project("proj-1", "acc-proj", window='24h')

        assert triple.heat is None
        assert triple.signal is None
        assert triple.final_score == 0.0

    def test_smart_authors_count_as_influencers(self, scorer, store):
        store.upsert_tracked_accounts([
            TrackedAccount(f"acc-{i}", username=f"whale{i}") for i in range(3)
        ])
        store.upsert_smart_account_scores([
            SmartAccountScore(f"acc-{i}", TODAY, pagerank=0.3, bot_risk=0.0, smart_score=0.9, is_smart=True)
            for i in range(3)
        ])
        store.add_content_records([post(f"whale{i}", "proj-w") for i in range(3)])
        store.add_content_records([post(f"user{i}", "proj-u") for i in range(3)])

        whales = scorer.score_project("proj-w", "acc-w")
        users = scorer.score_project("proj-u", "acc-u")

        assert whales.heat > users.heat
        assert whales.final_score > users.final_score


class TestSmartScoreScale:
    """Author smart scores are read relative to the day's top account."""

    def test_ranked_smart_author_beats_unknown_author(self, scorer, store, config, clock):
        accounts = [
            TrackedAccount(f"a{i}", followers_count=500, following_count=100,
                           account_created_at="2020-01-01T00:00:00Z", username=f"acct{i}")
            for i in range(50)
        ]
        store.upsert_tracked_accounts(accounts)
        store.add_follow_edges([FollowEdge(f"a{i}", "a0") for i in range(1, 50)])
        SmartAccountRanker(config, store, store, store, clock=clock).run()

        top = store.get_smart_account_score("a0", TODAY)
        assert top.is_smart is True
        assert top.smart_score < 1.0

        store.add_content_records([
            post("acct0", "proj-smart", likes=50, text="solid update"),
            post("stranger", "proj-plain", likes=50, text="solid update"),
        ])

        smart = scorer.score_project("proj-smart", "acc-smart")
        plain = scorer.score_project("proj-plain", "acc-plain")

        assert smart.final_score > plain.final_score
        assert smart.heat > plain.heat

    def test_scores_rescaled_against_day_max(self, scorer, store):
        store.upsert_smart_account_scores([
            SmartAccountScore("top", TODAY, pagerank=0.3, bot_risk=0.0, smart_score=0.3, is_smart=True),
            SmartAccountScore("mid", TODAY, pagerank=0.15, bot_risk=0.0, smart_score=0.15, is_smart=False),
        ])

        assert scorer._smart_score("top", TODAY, 0.3) == pytest.approx(1.0)
        assert scorer._smart_score("mid", TODAY, 0.3) == pytest.approx(0.5)
        assert scorer._smart_score("missing", TODAY, 0.3) is None
        assert scorer._smart_score("top", TODAY, None) is None

    def test_no_ranking_for_day_means_no_scores(self, scorer, store):
        store.upsert_tracked_accounts([TrackedAccount("acc-w", username="whale")])
        assert scorer._author_smart_scores({"whale"}, TODAY) == {}

    def test_smart_score_read_failure_degrades(self, scorer, store, config, clock):
        smart_store = MagicMock()
        smart_store.get_max_smart_score.side_effect = RuntimeError("db down")
        scorer = CreatorScorer(config, store, store, smart_store, scorer.smart_followers, clock=clock)
        store.add_content_records([post("carol", "proj-1")])

        triple = scorer.score_project("proj-1", "acc-proj")

        assert triple.signal is not None

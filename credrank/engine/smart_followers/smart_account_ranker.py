"""
Daily smart-account classification.

Runs PageRank over the follow graph of tracked accounts, discounts each
account's rank by its bot risk and flags the top of the resulting list as
"smart". The smart followers calculator only reads the stored result.
"""

import math
from datetime import date, datetime
from typing import Callable, Dict, Iterable, List, Optional
import networkx as nx
import bittensor as bt

from credrank.engine.interfaces import GraphStore, ProfileStore, SmartAccountStore
from credrank.engine.models import FollowEdge, SmartAccountScore, TrackedAccount
from credrank.engine.smart_followers.bot_risk import bot_risk_for_account
from credrank.engine.utils.config import EngineConfig
from credrank.engine.utils.date_utils import AsOfDate, end_of_day, parse_as_of_date, utc_now


def compute_pagerank(
    edges: Iterable[FollowEdge],
    node_ids: Iterable[str],
    alpha: float = 0.85,
    max_iter: int = 1000
) -> Dict[str, float]:
    """
    PageRank over follow edges restricted to the given nodes.

    Edges touching an unknown node are dropped. Every node gets a score,
    including ones with no edges at all.
    """
    nodes = set(node_ids)
    G = nx.DiGraph()
    G.add_nodes_from(nodes)

    skipped = 0
    for edge in edges:
        if edge.src_account_id not in nodes or edge.dst_account_id not in nodes:
            skipped += 1
            continue
        G.add_edge(edge.src_account_id, edge.dst_account_id)

    if skipped:
        bt.logging.debug(f"Skipped {skipped} edges with untracked endpoints")

    if G.number_of_nodes() == 0:
        return {}

    return nx.pagerank(G, alpha=alpha, max_iter=max_iter)


class SmartAccountRanker:
    """Computes and stores SmartAccountScore rows for one as-of date."""

    def __init__(
        self,
        config: EngineConfig,
        graph_store: GraphStore,
        profile_store: ProfileStore,
        score_store: SmartAccountStore,
        clock: Callable[[], datetime] = utc_now
    ):
        self.config = config
        self.graph_store = graph_store
        self.profile_store = profile_store
        self.score_store = score_store
        self.clock = clock

    def smart_cutoff(self, total: int) -> int:
        """Number of top-ranked accounts eligible to be smart: max(top N, top pct)."""
        top_n = min(self.config.top_n, total)
        top_pct = math.floor(total * self.config.top_pct)
        return max(top_n, top_pct)

    def rank_accounts(
        self,
        accounts: List[TrackedAccount],
        edges: List[FollowEdge],
        as_of_date: date
    ) -> List[SmartAccountScore]:
        """
        Score and classify accounts without touching any store.

        Returns:
            Scores sorted by smart_score descending (ties by account id)
        """
        reference = min(self.clock(), end_of_day(as_of_date))
        pagerank = compute_pagerank(
            edges,
            (a.account_id for a in accounts),
            alpha=self.config.pagerank_alpha,
            max_iter=self.config.pagerank_max_iter
        )

        rows = []
        for account in accounts:
            rank = pagerank.get(account.account_id, 0.0)
            risk = bot_risk_for_account(
                account,
                now=reference,
                min_account_age_days=self.config.min_account_age_days
            )
            rows.append((account.account_id, rank, risk, rank * (1 - risk)))

        rows.sort(key=lambda row: (-row[3], row[0]))
        cutoff = self.smart_cutoff(len(rows))

        scores = [
            SmartAccountScore(
                account_id=account_id,
                as_of_date=as_of_date,
                pagerank=rank,
                bot_risk=risk,
                smart_score=smart_score,
                is_smart=position < cutoff and risk < self.config.bot_risk_threshold,
            )
            for position, (account_id, rank, risk, smart_score) in enumerate(rows)
        ]

        smart_count = sum(1 for s in scores if s.is_smart)
        bt.logging.info(
            f"Ranked {len(scores)} accounts: {smart_count} smart "
            f"(cutoff {cutoff}, bot risk < {self.config.bot_risk_threshold})"
        )
        return scores

    def run(self, as_of_date: Optional[AsOfDate] = None) -> List[SmartAccountScore]:
        """
        Rank all tracked accounts and upsert the scores for the day.

        With no follow edges there is nothing to rank; the calculator will
        use its engagement fallback instead and nothing is written.
        """
        day = parse_as_of_date(as_of_date) if as_of_date is not None else self.clock().date()

        accounts = self.profile_store.get_tracked_accounts()
        bt.logging.info(f"Found {len(accounts)} tracked profiles")

        edges = self.graph_store.get_follow_edges()
        bt.logging.info(f"Found {len(edges)} follow edges")

        if not edges:
            bt.logging.warning(
                "No follow edges found, skipping smart account ranking. "
                "Smart follower lookups will use the engagement fallback."
            )
            return []

        scores = self.rank_accounts(accounts, edges, day)
        written = self.score_store.upsert_smart_account_scores(scores)
        bt.logging.info(f"Stored {written} smart account scores for {day.isoformat()}")
        return scores

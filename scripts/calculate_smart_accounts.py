#!/usr/bin/env python3
"""
Rank tracked accounts and store the day's smart-account scores.

Run daily after follow-graph ingestion and before the snapshot job.

Usage:
    python scripts/calculate_smart_accounts.py --db-path data/credrank.db [--date 2025-11-25]
"""

import argparse
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(project_root))

from credrank.engine.jobs import create_engine, run_smart_account_ranking
from credrank.engine.stores import SQLiteTrustStore
from credrank.engine.utils.config import EngineConfig
import bittensor as bt


def main():
    parser = argparse.ArgumentParser(description="Calculate daily smart account scores")
    parser.add_argument("--db-path", type=Path, default=None, help="SQLite database path")
    parser.add_argument("--date", default=None, help="As-of date (YYYY-MM-DD), defaults to today")
    args = parser.parse_args()

    config = EngineConfig.from_env()
    store = SQLiteTrustStore(args.db_path)
    engine = create_engine(store, config)

    print("=" * 80)
    print("Smart Account Ranking")
    print("=" * 80)

    try:
        count = run_smart_account_ranking(engine.ranker, args.date)
    except ValueError as e:
        bt.logging.error(f"Invalid input: {e}")
        return 1

    if count == 0:
        print("\nNo follow edges found. Smart follower lookups will use the engagement fallback.")
    else:
        print(f"\n✅ Stored {count} smart account scores")

    return 0


if __name__ == "__main__":
    sys.exit(main())

#!/usr/bin/env python3
"""
Write the day's smart follower snapshots for projects and creators.

The targets file is a JSON list of objects with entity_type ('project' or
'creator'), entity_id and handle. Run daily after calculate_smart_accounts.py.

Usage:
    python scripts/snapshot_smart_followers.py --targets targets.json --db-path data/credrank.db
"""

import argparse
import json
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(project_root))

from credrank.engine.jobs import SnapshotTarget, create_engine, run_snapshot_job
from credrank.engine.stores import SQLiteTrustStore
from credrank.engine.utils.config import CACHE_DIRS, EngineConfig
from credrank.utils.logging import setup_events_logger
import bittensor as bt


def load_targets(path: Path):
    with open(path, 'r') as f:
        raw = json.load(f)
    return [SnapshotTarget.from_dict(item) for item in raw]


def main():
    parser = argparse.ArgumentParser(description="Snapshot smart followers for all targets")
    parser.add_argument("--targets", type=Path, required=True, help="JSON file listing snapshot targets")
    parser.add_argument("--db-path", type=Path, default=None, help="SQLite database path")
    parser.add_argument("--events-dir", default=CACHE_DIRS["events"], help="Directory for the events log")
    args = parser.parse_args()

    try:
        targets = load_targets(args.targets)
    except (OSError, ValueError, KeyError) as e:
        bt.logging.error(f"Could not load targets from {args.targets}: {e}")
        return 1

    config = EngineConfig.from_env()
    store = SQLiteTrustStore(args.db_path)
    engine = create_engine(store, config)
    events_logger = setup_events_logger(args.events_dir, job_name="smart_followers_snapshot")

    summary = run_snapshot_job(engine, store, targets, events_logger=events_logger)

    print("=" * 80)
    print(f"Smart Followers Snapshot ({summary.as_of_date})")
    print("=" * 80)
    print(f"  Computed:   {summary.computed}")
    print(f"  Estimates:  {summary.estimates}")
    print(f"  Skipped:    {len(summary.skipped)}")
    print(f"  Failed:     {len(summary.failed)}")
    print("=" * 80)

    return 1 if summary.failed else 0


if __name__ == "__main__":
    sys.exit(main())

"""
SQLite-backed store for the scoring engine.

Holds the tracked-profile, follow-edge, content, smart-account-score and
snapshot tables in a single database file. Each operation opens its own
connection, so one instance can be shared across threads.
"""

import sqlite3
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Set
import bittensor as bt

from credrank.engine.interfaces import (
    ContentStore,
    GraphStore,
    ProfileStore,
    SmartAccountStore,
    SnapshotStore
)
from credrank.engine.models import (
    ContentRecord,
    FollowEdge,
    SmartAccountScore,
    SmartFollowersResult,
    SmartFollowersSnapshot,
    SnapshotKey,
    TrackedAccount,
    normalize_handle
)

# Stay well under SQLite's bound-parameter limit
IN_CLAUSE_CHUNK_SIZE = 500


def _iso(value: datetime) -> str:
    """Fixed-width UTC timestamp so string comparison matches time order."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).strftime('%Y-%m-%dT%H:%M:%S.%f+00:00')


class SQLiteTrustStore(GraphStore, ProfileStore, ContentStore, SmartAccountStore, SnapshotStore):
    """
    Manages the SQLite database behind every engine store interface.

    The smart_followers_snapshots table carries a UNIQUE constraint on
    (entity_type, entity_id, x_user_id, as_of_date); it is the only
    concurrency guard for snapshot writes.
    """

    def __init__(self, db_path: Optional[Path] = None):
        """
        Initialize database connection.

        Args:
            db_path: Optional custom database path. Defaults to:
                    credrank/engine/stores/trust_store.db
        """
        if db_path is None:
            db_path = Path(__file__).parent / "trust_store.db"

        self.db_path = Path(db_path)

        # Ensure parent directory exists
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

        self.initialize_schema()

        bt.logging.debug(f"SQLiteTrustStore initialized at {self.db_path}")

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path, timeout=30)
        conn.row_factory = sqlite3.Row
        return conn

    def initialize_schema(self) -> None:
        """Create tables and indexes if they don't exist."""
        with self._connect() as conn:
            cursor = conn.cursor()

            cursor.execute("""
            CREATE TABLE IF NOT EXISTS tracked_profiles (
                account_id TEXT PRIMARY KEY,
                username TEXT,
                followers_count INTEGER NOT NULL DEFAULT 0,
                following_count INTEGER NOT NULL DEFAULT 0,
                account_created_at TEXT
            )
            """)

            cursor.execute("""
            CREATE TABLE IF NOT EXISTS follow_edges (
                src_account_id TEXT NOT NULL,
                dst_account_id TEXT NOT NULL,
                PRIMARY KEY (src_account_id, dst_account_id)
            )
            """)

            cursor.execute("""
            CREATE TABLE IF NOT EXISTS smart_account_scores (
                account_id TEXT NOT NULL,
                as_of_date TEXT NOT NULL,
                pagerank REAL NOT NULL DEFAULT 0,
                bot_risk REAL NOT NULL DEFAULT 0,
                smart_score REAL NOT NULL DEFAULT 0,
                is_smart INTEGER NOT NULL DEFAULT 0,
                PRIMARY KEY (account_id, as_of_date)
            )
            """)

            cursor.execute("""
            CREATE TABLE IF NOT EXISTS content_records (
                record_id INTEGER PRIMARY KEY AUTOINCREMENT,
                content_id TEXT NOT NULL DEFAULT '',
                entity_id TEXT NOT NULL,
                author_handle TEXT NOT NULL,
                author_key TEXT NOT NULL,
                created_at TEXT NOT NULL,
                likes INTEGER NOT NULL DEFAULT 0,
                replies INTEGER NOT NULL DEFAULT 0,
                reshares INTEGER NOT NULL DEFAULT 0,
                text TEXT NOT NULL DEFAULT '',
                sentiment_score INTEGER,
                is_official INTEGER NOT NULL DEFAULT 0
            )
            """)

            cursor.execute("""
            CREATE TABLE IF NOT EXISTS smart_followers_snapshots (
                snapshot_id INTEGER PRIMARY KEY AUTOINCREMENT,
                entity_type TEXT NOT NULL CHECK (entity_type IN ('project', 'creator')),
                entity_id TEXT NOT NULL,
                x_user_id TEXT NOT NULL,
                as_of_date TEXT NOT NULL,
                smart_followers_count INTEGER NOT NULL DEFAULT 0,
                smart_followers_pct REAL NOT NULL DEFAULT 0,
                is_estimate INTEGER NOT NULL DEFAULT 0,
                created_at TEXT NOT NULL,
                UNIQUE(entity_type, entity_id, x_user_id, as_of_date)
            )
            """)

            indexes = [
                "CREATE INDEX IF NOT EXISTS idx_edges_dst ON follow_edges(dst_account_id)",
                "CREATE INDEX IF NOT EXISTS idx_scores_date_smart ON smart_account_scores(as_of_date, is_smart)",
                "CREATE INDEX IF NOT EXISTS idx_content_entity_time ON content_records(entity_id, created_at)",
                "CREATE INDEX IF NOT EXISTS idx_content_author ON content_records(author_key)",
            ]
            for index_sql in indexes:
                cursor.execute(index_sql)

            conn.commit()
            bt.logging.debug("Schema initialized for trust store tables")

    # ------------------------------------------------------------------
    # Ingestion helpers (the engine itself never calls these)
    # ------------------------------------------------------------------

    def upsert_tracked_accounts(self, accounts: Iterable[TrackedAccount]) -> int:
        rows = [
            (
                a.account_id,
                a.username,
                a.followers_count,
                a.following_count,
                _iso(a.account_created_at) if a.account_created_at else None,
            )
            for a in accounts
        ]
        with self._connect() as conn:
            conn.executemany(
                """
                INSERT INTO tracked_profiles (account_id, username, followers_count, following_count, account_created_at)
                VALUES (?, ?, ?, ?, ?)
                ON CONFLICT(account_id) DO UPDATE SET
                    username = excluded.username,
                    followers_count = excluded.followers_count,
                    following_count = excluded.following_count,
                    account_created_at = excluded.account_created_at
                """,
                rows
            )
            conn.commit()
        bt.logging.debug(f"Upserted {len(rows)} tracked profiles")
        return len(rows)

    def add_follow_edges(self, edges: Iterable[FollowEdge]) -> int:
        rows = [(e.src_account_id, e.dst_account_id) for e in edges]
        with self._connect() as conn:
            cursor = conn.executemany(
                "INSERT OR IGNORE INTO follow_edges (src_account_id, dst_account_id) VALUES (?, ?)",
                rows
            )
            conn.commit()
            inserted = cursor.rowcount
        bt.logging.debug(f"Inserted {inserted} follow edges ({len(rows)} submitted)")
        return inserted

    def add_content_records(self, records: Iterable[ContentRecord]) -> int:
        rows = [
            (
                r.content_id,
                r.entity_id,
                r.author_handle,
                r.author,
                _iso(r.created_at),
                r.likes,
                r.replies,
                r.reshares,
                r.text,
                r.sentiment_score,
                int(r.is_official),
            )
            for r in records
        ]
        with self._connect() as conn:
            conn.executemany(
                """
                INSERT INTO content_records (
                    content_id, entity_id, author_handle, author_key, created_at,
                    likes, replies, reshares, text, sentiment_score, is_official
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                rows
            )
            conn.commit()
        bt.logging.debug(f"Inserted {len(rows)} content records")
        return len(rows)

    # ------------------------------------------------------------------
    # GraphStore
    # ------------------------------------------------------------------

    def has_follow_edges(self, dst_account_id: str) -> bool:
        with self._connect() as conn:
            row = conn.execute(
                "SELECT 1 FROM follow_edges WHERE dst_account_id = ? LIMIT 1",
                (dst_account_id,)
            ).fetchone()
            return row is not None

    def count_followers_among(self, dst_account_id: str, src_account_ids: Set[str]) -> int:
        if not src_account_ids:
            return 0

        ids = sorted(src_account_ids)
        total = 0
        with self._connect() as conn:
            for i in range(0, len(ids), IN_CLAUSE_CHUNK_SIZE):
                chunk = ids[i:i + IN_CLAUSE_CHUNK_SIZE]
                placeholders = ','.join('?' * len(chunk))
                row = conn.execute(
                    f"""
                    SELECT COUNT(*) FROM follow_edges
                    WHERE dst_account_id = ? AND src_account_id IN ({placeholders})
                    """,
                    (dst_account_id, *chunk)
                ).fetchone()
                total += row[0] if row else 0
        return total

    def get_follow_edges(self) -> List[FollowEdge]:
        with self._connect() as conn:
            rows = conn.execute("SELECT src_account_id, dst_account_id FROM follow_edges").fetchall()
        return [FollowEdge(row['src_account_id'], row['dst_account_id']) for row in rows]

    # ------------------------------------------------------------------
    # ProfileStore
    # ------------------------------------------------------------------

    def get_tracked_account(self, account_id: str) -> Optional[TrackedAccount]:
        with self._connect() as conn:
            row = conn.execute(
                "SELECT * FROM tracked_profiles WHERE account_id = ?",
                (account_id,)
            ).fetchone()
        return TrackedAccount.from_dict(dict(row)) if row else None

    def get_tracked_accounts(self) -> List[TrackedAccount]:
        with self._connect() as conn:
            rows = conn.execute("SELECT * FROM tracked_profiles ORDER BY account_id").fetchall()
        return [TrackedAccount.from_dict(dict(row)) for row in rows]

    def find_account_id(self, username: str) -> Optional[str]:
        """Resolve a handle to its tracked account id."""
        with self._connect() as conn:
            row = conn.execute(
                "SELECT account_id FROM tracked_profiles WHERE lower(username) = ? LIMIT 1",
                (normalize_handle(username),)
            ).fetchone()
        return row['account_id'] if row else None

    # ------------------------------------------------------------------
    # ContentStore
    # ------------------------------------------------------------------

    def get_content_records(
        self,
        entity_id: str,
        start: datetime,
        end: datetime,
        author_handle: Optional[str] = None,
        include_official: bool = False
    ) -> List[ContentRecord]:
        conditions = ["entity_id = ?", "created_at >= ?", "created_at <= ?"]
        params: List[Any] = [str(entity_id), _iso(start), _iso(end)]

        if author_handle:
            conditions.append("author_key = ?")
            params.append(normalize_handle(author_handle))
        if not include_official:
            conditions.append("is_official = 0")

        select_sql = f"""
        SELECT * FROM content_records
        WHERE {' AND '.join(conditions)}
        ORDER BY created_at ASC, record_id ASC
        """
        with self._connect() as conn:
            rows = conn.execute(select_sql, params).fetchall()
        return [ContentRecord.from_dict(dict(row)) for row in rows]

    # ------------------------------------------------------------------
    # SmartAccountStore
    # ------------------------------------------------------------------

    def get_smart_account_ids(self, as_of_date: date) -> Set[str]:
        with self._connect() as conn:
            rows = conn.execute(
                "SELECT account_id FROM smart_account_scores WHERE as_of_date = ? AND is_smart = 1",
                (as_of_date.isoformat(),)
            ).fetchall()
        return {row['account_id'] for row in rows}

    def get_smart_account_score(self, account_id: str, as_of_date: date) -> Optional[SmartAccountScore]:
        with self._connect() as conn:
            row = conn.execute(
                "SELECT * FROM smart_account_scores WHERE account_id = ? AND as_of_date = ?",
                (account_id, as_of_date.isoformat())
            ).fetchone()
        return SmartAccountScore.from_dict(dict(row)) if row else None

    def get_max_smart_score(self, as_of_date: date) -> Optional[float]:
        with self._connect() as conn:
            row = conn.execute(
                "SELECT MAX(smart_score) AS max_score FROM smart_account_scores WHERE as_of_date = ?",
                (as_of_date.isoformat(),)
            ).fetchone()
        return row['max_score'] if row else None

    def upsert_smart_account_scores(self, scores: Iterable[SmartAccountScore]) -> int:
        rows = [
            (s.account_id, s.as_of_date.isoformat(), s.pagerank, s.bot_risk, s.smart_score, int(s.is_smart))
            for s in scores
        ]
        with self._connect() as conn:
            conn.executemany(
                """
                INSERT INTO smart_account_scores (account_id, as_of_date, pagerank, bot_risk, smart_score, is_smart)
                VALUES (?, ?, ?, ?, ?, ?)
                ON CONFLICT(account_id, as_of_date) DO UPDATE SET
                    pagerank = excluded.pagerank,
                    bot_risk = excluded.bot_risk,
                    smart_score = excluded.smart_score,
                    is_smart = excluded.is_smart
                """,
                rows
            )
            conn.commit()
        bt.logging.debug(f"Upserted {len(rows)} smart account scores")
        return len(rows)

    # ------------------------------------------------------------------
    # SnapshotStore
    # ------------------------------------------------------------------

    def get_snapshot(self, key: SnapshotKey) -> Optional[SmartFollowersResult]:
        with self._connect() as conn:
            row = conn.execute(
                """
                SELECT * FROM smart_followers_snapshots
                WHERE entity_type = ? AND entity_id = ? AND x_user_id = ? AND as_of_date = ?
                """,
                (key.entity_type, key.entity_id, key.x_user_id, key.as_of_date.isoformat())
            ).fetchone()
        if row is None:
            return None
        return SmartFollowersSnapshot.from_dict(dict(row)).result

    def insert_snapshot_if_absent(self, key: SnapshotKey, result: SmartFollowersResult) -> SmartFollowersResult:
        with self._connect() as conn:
            cursor = conn.execute(
                """
                INSERT OR IGNORE INTO smart_followers_snapshots (
                    entity_type, entity_id, x_user_id, as_of_date,
                    smart_followers_count, smart_followers_pct, is_estimate, created_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    key.entity_type,
                    key.entity_id,
                    key.x_user_id,
                    key.as_of_date.isoformat(),
                    result.smart_followers_count,
                    result.smart_followers_pct,
                    int(result.is_estimate),
                    _iso(datetime.now(timezone.utc)),
                )
            )
            conn.commit()
            inserted = cursor.rowcount == 1

        if inserted:
            bt.logging.debug(f"Inserted snapshot {key.as_string()}")
            return result

        stored = self.get_snapshot(key)
        bt.logging.debug(f"Snapshot {key.as_string()} already existed, keeping stored row")
        return stored if stored is not None else result

    def get_all_snapshots(self, as_of_date: Optional[date] = None) -> List[Dict[str, Any]]:
        """Get all snapshot rows, optionally for a single day."""
        with self._connect() as conn:
            if as_of_date is not None:
                rows = conn.execute(
                    "SELECT * FROM smart_followers_snapshots WHERE as_of_date = ? ORDER BY snapshot_id",
                    (as_of_date.isoformat(),)
                ).fetchall()
            else:
                rows = conn.execute(
                    "SELECT * FROM smart_followers_snapshots ORDER BY snapshot_id"
                ).fetchall()
        return [dict(row) for row in rows]

    def get_snapshot_count(self) -> int:
        with self._connect() as conn:
            row = conn.execute("SELECT COUNT(*) FROM smart_followers_snapshots").fetchone()
        return row[0] if row else 0

"""SQLite match history backend for local play."""

import sqlite3
import logging
from datetime import datetime
from typing import List, Optional
from .base import HistoryBackend, LeaderboardEntry, MatchRecord

logger = logging.getLogger(__name__)


class SQLiteBackend(HistoryBackend):
    """
    SQLite storage implementation.

    Optimized for:
    - Per-profile history lookups (newest first)
    - Leaderboard aggregation over all profiles
    """

    def __init__(self, db_path: str = ":memory:", create_schema: bool = True):
        """
        Initialize SQLite backend.

        Args:
            db_path: Path to database file (use ":memory:" for in-memory)
            create_schema: If False, skip schema creation (database already set up)
        """
        self.db_path = db_path
        self.conn = sqlite3.connect(db_path, timeout=30.0)
        self.conn.row_factory = sqlite3.Row  # Enable dict-like access
        if create_schema:
            self._create_schema()
        self._optimize()

    def _create_schema(self) -> None:
        """Create database schema."""
        self.conn.executescript(
            """
            CREATE TABLE IF NOT EXISTS match_history (
                match_id INTEGER PRIMARY KEY AUTOINCREMENT,
                profile_id TEXT NOT NULL,
                player_score INTEGER NOT NULL,
                ai_score INTEGER NOT NULL,
                won INTEGER NOT NULL,              -- 0/1
                tokens_spent INTEGER NOT NULL,
                tokens_won INTEGER NOT NULL,
                coins_earned INTEGER NOT NULL,     -- negative on a loss
                xp_earned INTEGER NOT NULL,
                difficulty TEXT NOT NULL,
                played_at TEXT NOT NULL            -- ISO-8601
            );

            CREATE INDEX IF NOT EXISTS idx_profile_id ON match_history(profile_id);
        """
        )
        self.conn.commit()

    def _optimize(self) -> None:
        """Apply SQLite settings."""
        if self.db_path != ":memory:":
            self.conn.execute("PRAGMA journal_mode = WAL")
        self.conn.execute("PRAGMA synchronous = NORMAL")
        logger.debug(f"SQLite history store ready at {self.db_path}")

    def save(self, record: MatchRecord) -> int:
        """Store a finished match."""
        played_at = datetime.now().isoformat(timespec="seconds")
        cursor = self.conn.execute(
            """
            INSERT INTO match_history (
                profile_id, player_score, ai_score, won, tokens_spent,
                tokens_won, coins_earned, xp_earned, difficulty, played_at
            )
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
        """,
            (
                record.profile_id,
                record.player_score,
                record.ai_score,
                int(record.won),
                record.tokens_spent,
                record.tokens_won,
                record.coins_earned,
                record.xp_earned,
                record.difficulty,
                played_at,
            ),
        )
        self.conn.commit()
        logger.debug(f"Saved match {cursor.lastrowid} for profile {record.profile_id}")
        return cursor.lastrowid

    def get_history(self, profile_id: str, limit: int = 20) -> List[MatchRecord]:
        """Most recent matches for a profile."""
        cursor = self.conn.execute(
            """
            SELECT * FROM match_history
            WHERE profile_id = ?
            ORDER BY played_at DESC, match_id DESC
            LIMIT ?
            """,
            (profile_id, limit),
        )
        return [self._row_to_record(row) for row in cursor]

    def get_leaderboard(self, limit: int = 20) -> List[LeaderboardEntry]:
        """Profiles ranked by total XP."""
        cursor = self.conn.execute(
            """
            SELECT profile_id,
                   SUM(xp_earned) AS total_xp,
                   SUM(coins_earned) AS total_coins,
                   SUM(won) AS wins,
                   COUNT(*) AS matches
            FROM match_history
            GROUP BY profile_id
            ORDER BY total_xp DESC, wins DESC, profile_id
            LIMIT ?
            """,
            (limit,),
        )
        return [
            LeaderboardEntry(
                profile_id=row["profile_id"],
                total_xp=row["total_xp"],
                total_coins=row["total_coins"],
                wins=row["wins"],
                matches=row["matches"],
            )
            for row in cursor
        ]

    def count_matches(self, profile_id: Optional[str] = None) -> int:
        """Count matches."""
        if profile_id is None:
            cursor = self.conn.execute("SELECT COUNT(*) FROM match_history")
        else:
            cursor = self.conn.execute(
                "SELECT COUNT(*) FROM match_history WHERE profile_id = ?", (profile_id,)
            )
        return cursor.fetchone()[0]

    def flush(self) -> None:
        """Commit pending transactions."""
        self.conn.commit()

    def close(self) -> None:
        """Close database connection."""
        self.conn.commit()
        self.conn.close()

    @staticmethod
    def _row_to_record(row: sqlite3.Row) -> MatchRecord:
        return MatchRecord(
            profile_id=row["profile_id"],
            player_score=row["player_score"],
            ai_score=row["ai_score"],
            won=bool(row["won"]),
            tokens_spent=row["tokens_spent"],
            tokens_won=row["tokens_won"],
            coins_earned=row["coins_earned"],
            xp_earned=row["xp_earned"],
            difficulty=row["difficulty"],
            match_id=row["match_id"],
            played_at=datetime.fromisoformat(row["played_at"]),
        )

"""PostgreSQL match history backend for a shared server."""

import logging
import psycopg2
import psycopg2.extras
from typing import List, Optional
from .base import HistoryBackend, LeaderboardEntry, MatchRecord

logger = logging.getLogger(__name__)


class PostgreSQLBackend(HistoryBackend):
    """
    PostgreSQL storage implementation.

    Optimized for:
    - Many clients writing results concurrently
    - Per-profile history lookups (newest first)
    - Leaderboard aggregation over all profiles
    """

    def __init__(
        self,
        host: str = "localhost",
        port: int = 5432,
        database: str = "congkak",
        user: str = "postgres",
        password: str = "",
    ):
        """
        Initialize PostgreSQL backend.

        Args:
            host: Database host
            port: Database port
            database: Database name
            user: Database user
            password: Database password
        """
        self.host = host
        self.port = port
        self.database = database
        self.user = user

        self.conn = psycopg2.connect(
            host=host,
            port=port,
            database=database,
            user=user,
            password=password,
        )
        self.conn.autocommit = False  # Manual transaction control
        self._create_schema()

    def _create_schema(self) -> None:
        """Create database schema."""
        with self.conn.cursor() as cursor:
            cursor.execute(
                """
                CREATE TABLE IF NOT EXISTS match_history (
                    match_id SERIAL PRIMARY KEY,
                    profile_id TEXT NOT NULL,
                    player_score INTEGER NOT NULL,
                    ai_score INTEGER NOT NULL,
                    won BOOLEAN NOT NULL,
                    tokens_spent SMALLINT NOT NULL,
                    tokens_won SMALLINT NOT NULL,
                    coins_earned INTEGER NOT NULL,
                    xp_earned INTEGER NOT NULL,
                    difficulty TEXT NOT NULL,
                    played_at TIMESTAMPTZ NOT NULL DEFAULT now()
                );

                CREATE INDEX IF NOT EXISTS idx_profile_id ON match_history(profile_id);
            """
            )
            self.conn.commit()

    def save(self, record: MatchRecord) -> int:
        """Store a finished match."""
        try:
            with self.conn.cursor() as cursor:
                cursor.execute(
                    """
                    INSERT INTO match_history (
                        profile_id, player_score, ai_score, won, tokens_spent,
                        tokens_won, coins_earned, xp_earned, difficulty
                    )
                    VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s)
                    RETURNING match_id
                """,
                    (
                        record.profile_id,
                        record.player_score,
                        record.ai_score,
                        record.won,
                        record.tokens_spent,
                        record.tokens_won,
                        record.coins_earned,
                        record.xp_earned,
                        record.difficulty,
                    ),
                )
                match_id = cursor.fetchone()[0]
            self.conn.commit()
        except psycopg2.Error:
            self.conn.rollback()
            raise
        logger.debug(f"Saved match {match_id} for profile {record.profile_id}")
        return match_id

    def get_history(self, profile_id: str, limit: int = 20) -> List[MatchRecord]:
        """Most recent matches for a profile."""
        with self.conn.cursor(cursor_factory=psycopg2.extras.RealDictCursor) as cursor:
            cursor.execute(
                """
                SELECT * FROM match_history
                WHERE profile_id = %s
                ORDER BY played_at DESC, match_id DESC
                LIMIT %s
                """,
                (profile_id, limit),
            )
            rows = cursor.fetchall()
        return [
            MatchRecord(
                profile_id=row["profile_id"],
                player_score=row["player_score"],
                ai_score=row["ai_score"],
                won=row["won"],
                tokens_spent=row["tokens_spent"],
                tokens_won=row["tokens_won"],
                coins_earned=row["coins_earned"],
                xp_earned=row["xp_earned"],
                difficulty=row["difficulty"],
                match_id=row["match_id"],
                played_at=row["played_at"],
            )
            for row in rows
        ]

    def get_leaderboard(self, limit: int = 20) -> List[LeaderboardEntry]:
        """Profiles ranked by total XP."""
        with self.conn.cursor() as cursor:
            cursor.execute(
                """
                SELECT profile_id,
                       SUM(xp_earned),
                       SUM(coins_earned),
                       COUNT(*) FILTER (WHERE won),
                       COUNT(*)
                FROM match_history
                GROUP BY profile_id
                ORDER BY 2 DESC, 4 DESC, profile_id
                LIMIT %s
                """,
                (limit,),
            )
            rows = cursor.fetchall()
        return [
            LeaderboardEntry(
                profile_id=profile_id,
                total_xp=int(total_xp),
                total_coins=int(total_coins),
                wins=int(wins),
                matches=int(matches),
            )
            for profile_id, total_xp, total_coins, wins, matches in rows
        ]

    def count_matches(self, profile_id: Optional[str] = None) -> int:
        """Count matches."""
        with self.conn.cursor() as cursor:
            if profile_id is None:
                cursor.execute("SELECT COUNT(*) FROM match_history")
            else:
                cursor.execute(
                    "SELECT COUNT(*) FROM match_history WHERE profile_id = %s", (profile_id,)
                )
            return cursor.fetchone()[0]

    def flush(self) -> None:
        """Commit pending transactions."""
        self.conn.commit()

    def close(self) -> None:
        """Close database connection."""
        self.conn.commit()
        self.conn.close()

"""Abstract base class for match history backends."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional


@dataclass
class MatchRecord:
    """
    One finished match in the history.
    """

    profile_id: str  # Player profile the match belongs to
    player_score: int  # Player's weighted score
    ai_score: int  # Opponent's weighted score
    won: bool
    tokens_spent: int  # Tokens dealt to the player's side
    tokens_won: int  # Tokens in the player's store at the end
    coins_earned: int  # Negative on a loss
    xp_earned: int
    difficulty: str = "normal"
    match_id: Optional[int] = None  # Assigned by the backend on save
    played_at: Optional[datetime] = None  # Assigned by the backend on save


@dataclass
class LeaderboardEntry:
    """Aggregated results for one profile."""

    profile_id: str
    total_xp: int
    total_coins: int
    wins: int
    matches: int


class HistoryBackend(ABC):
    """Abstract interface for match history storage."""

    @abstractmethod
    def save(self, record: MatchRecord) -> int:
        """
        Store a finished match.

        Args:
            record: Match to store (match_id and played_at are ignored)

        Returns:
            Assigned match id
        """
        pass

    @abstractmethod
    def get_history(self, profile_id: str, limit: int = 20) -> List[MatchRecord]:
        """
        Most recent matches for a profile, newest first.

        Args:
            profile_id: Profile to look up
            limit: Maximum number of matches

        Returns:
            List of match records
        """
        pass

    @abstractmethod
    def get_leaderboard(self, limit: int = 20) -> List[LeaderboardEntry]:
        """
        Profiles ranked by total XP earned.

        Args:
            limit: Maximum number of entries

        Returns:
            Entries ordered by total XP, highest first
        """
        pass

    @abstractmethod
    def count_matches(self, profile_id: Optional[str] = None) -> int:
        """
        Count stored matches, optionally for one profile.

        Args:
            profile_id: Optional profile filter

        Returns:
            Match count
        """
        pass

    @abstractmethod
    def flush(self) -> None:
        """Ensure all pending writes are persisted."""
        pass

    @abstractmethod
    def close(self) -> None:
        """Cleanup and close connection."""
        pass

    def __enter__(self):
        """Context manager support."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager cleanup."""
        self.close()

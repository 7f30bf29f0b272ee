"""Storage backends for match history."""

from .base import HistoryBackend, LeaderboardEntry, MatchRecord
from .sqlite import SQLiteBackend
from .postgresql import PostgreSQLBackend

__all__ = [
    "HistoryBackend",
    "LeaderboardEntry",
    "MatchRecord",
    "SQLiteBackend",
    "PostgreSQLBackend",
]

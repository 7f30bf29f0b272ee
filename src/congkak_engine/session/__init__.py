"""Match driving and end-of-match settlement."""

from .match import Match, MatchResult
from .rewards import compute_rewards, credit_inventory

__all__ = ["Match", "MatchResult", "compute_rewards", "credit_inventory"]

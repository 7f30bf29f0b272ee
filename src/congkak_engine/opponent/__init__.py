"""Heuristic opponent move selection."""

from .heuristic import Difficulty, recommend_move, simulate_landing

__all__ = ["Difficulty", "recommend_move", "simulate_landing"]

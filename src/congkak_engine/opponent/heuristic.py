"""
One-ply heuristic opponent.

Looks only at where the last token of each candidate pit would land if the
pit were sown once. Continuations are ignored, so this is a greedy guess,
not a search.

Priorities:
- normal: a move ending in the mover's own store
- hard: the same, then a move ending in an empty own pit with tokens opposite
- otherwise (and always on easy): a uniformly random legal move
"""

import logging
import random
from enum import Enum
from typing import List, Optional, Union

from ..core import (
    Board,
    generate_legal_moves,
    get_opposite_pit,
    next_sowing_position,
    store_index,
)
from ..core.board import is_own_pit

logger = logging.getLogger(__name__)


class Difficulty(Enum):
    """Opponent strength."""

    EASY = "easy"
    NORMAL = "normal"
    HARD = "hard"

    @classmethod
    def parse(cls, name: Union[str, "Difficulty"]) -> "Difficulty":
        """Resolve a difficulty from its name, raising ValueError if unknown."""
        if isinstance(name, cls):
            return name
        try:
            return cls(str(name).strip().lower())
        except ValueError:
            raise ValueError(
                f"Unknown difficulty {name!r}, expected one of "
                f"{', '.join(d.value for d in cls)}"
            ) from None

    def __str__(self) -> str:
        return self.value


def simulate_landing(board: Board, pit: int) -> int:
    """
    Where the last token of a single sowing from `pit` would land.

    Walks the sowing path as many hops as the pit holds tokens, skipping
    the opponent's store. The board is not modified.

    Args:
        board: Current board
        pit: Pit to simulate from (belongs to the current player)

    Returns:
        Landing position index
    """
    pos = pit
    for _ in range(board.count(pit)):
        pos = next_sowing_position(pos, board.current_player)
    return pos


def find_store_landing(board: Board, candidates: List[int]) -> Optional[int]:
    """First candidate whose last token lands in the mover's store."""
    own_store = store_index(board.current_player)
    for pit in candidates:
        if simulate_landing(board, pit) == own_store:
            return pit
    return None


def find_capture(board: Board, candidates: List[int]) -> Optional[int]:
    """First candidate ending in an empty own pit that faces a non-empty pit."""
    for pit in candidates:
        landing = simulate_landing(board, pit)
        if not is_own_pit(landing, board.current_player):
            continue
        # Empty before the landing token arrives
        if board.count(landing) == 0 and board.count(get_opposite_pit(landing)) > 0:
            return pit
    return None


def recommend_move(
    board: Board,
    difficulty: Union[Difficulty, str] = Difficulty.NORMAL,
    rng: Optional[random.Random] = None,
) -> Optional[int]:
    """
    Pick a pit for the current player.

    Args:
        board: Current board (read only)
        difficulty: Opponent strength
        rng: Random source for tie-breaking choices

    Returns:
        Pit index, or None if the current player has no legal move
    """
    difficulty = Difficulty.parse(difficulty)
    rng = rng or random.Random()

    candidates = generate_legal_moves(board)
    if not candidates:
        logger.debug(f"No candidates for player {board.current_player}")
        return None

    if difficulty is not Difficulty.EASY:
        pit = find_store_landing(board, candidates)
        if pit is not None:
            logger.debug(f"{difficulty}: pit {pit} lands in own store")
            return pit

    if difficulty is Difficulty.HARD:
        pit = find_capture(board, candidates)
        if pit is not None:
            logger.debug(f"{difficulty}: pit {pit} sets up a capture")
            return pit

    return rng.choice(candidates)

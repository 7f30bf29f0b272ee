"""Core board state and rules."""

from .board import (
    Board,
    NUM_POSITIONS,
    P1_STORE,
    P2_STORE,
    PITS_PER_SIDE,
    SOWING_PATH,
    get_opposite_pit,
    next_position,
    next_sowing_position,
    opponent_of,
    player_pits,
    store_index,
)
from .config import EngineConfig, ExtraTurnPolicy
from .resolver import MoveSequence, Step, StepStatus, generate_legal_moves, is_valid_move
from .scoring import (
    check_game_over,
    is_terminal,
    score,
    store_tokens,
    weighted_score,
    winner,
)
from .setup import create_starting_board
from .tokens import TokenKind

__all__ = [
    "Board",
    "NUM_POSITIONS",
    "P1_STORE",
    "P2_STORE",
    "PITS_PER_SIDE",
    "SOWING_PATH",
    "get_opposite_pit",
    "next_position",
    "next_sowing_position",
    "opponent_of",
    "player_pits",
    "store_index",
    "EngineConfig",
    "ExtraTurnPolicy",
    "MoveSequence",
    "Step",
    "StepStatus",
    "generate_legal_moves",
    "is_valid_move",
    "check_game_over",
    "is_terminal",
    "score",
    "store_tokens",
    "weighted_score",
    "winner",
    "create_starting_board",
    "TokenKind",
]

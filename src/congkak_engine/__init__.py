"""Congkak move-resolution engine with a heuristic opponent."""

from .config import EngineConfig, ExtraTurnPolicy, RewardTable
from .core import Board, MoveSequence, Step, StepStatus, TokenKind
from .engine import CongkakEngine
from .errors import CongkakError, IllegalMoveError, MatchNotFinishedError, MoveInProgressError
from .opponent import Difficulty, recommend_move

__version__ = "0.1.0"

__all__ = [
    "EngineConfig",
    "ExtraTurnPolicy",
    "RewardTable",
    "Board",
    "MoveSequence",
    "Step",
    "StepStatus",
    "TokenKind",
    "CongkakEngine",
    "CongkakError",
    "IllegalMoveError",
    "MatchNotFinishedError",
    "MoveInProgressError",
    "Difficulty",
    "recommend_move",
]

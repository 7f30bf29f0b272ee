"""
Engine facade used by drivers and renderers.

Owns one board and hands out copies only. Moves are resolved through
MoveSequence, which has the board to itself until it is exhausted.
"""

import logging
import random
from typing import List, Optional, Union

from .core import (
    Board,
    EngineConfig,
    MoveSequence,
    TokenKind,
    check_game_over,
    create_starting_board,
    generate_legal_moves,
    is_valid_move,
    score,
    store_tokens,
    weighted_score,
)
from .core.board import PitSnapshot, player_pits
from .core.setup import Inventory
from .opponent import Difficulty, recommend_move

logger = logging.getLogger(__name__)


class CongkakEngine:
    """
    In-process Congkak engine.

    Typical driver loop:

        engine.reset(inventory)
        for step in engine.resolve_move(pit):
            render(step)
        if not engine.is_game_over() and engine.current_player() == 2:
            pit = engine.recommend_move("hard")
    """

    def __init__(self, config: Optional[EngineConfig] = None, rng: Optional[random.Random] = None):
        """
        Initialize engine.

        Args:
            config: Rule settings
            rng: Random source for dealing and opponent choices (seed it to replay a match)
        """
        self.config = config or EngineConfig()
        self.rng = rng or random.Random()
        self._board = Board()
        self.reset()

    def reset(self, inventory: Optional[Inventory] = None) -> None:
        """Deal a new match, optionally from a player's inventory."""
        self._board = create_starting_board(
            inventory,
            rng=self.rng,
            rarity_table=self.config.rarity_table,
            common_kind=self.config.common_kind,
        )
        source = "inventory" if inventory is not None else "rarity table"
        logger.info(f"New match dealt from {source}: {self._board.total_tokens} tokens")

    def load(self, board: Board) -> None:
        """Replace the board with a copy of an existing position."""
        self._board = board.copy()

    def resolve_move(self, pit: int) -> MoveSequence:
        """
        Start resolving a move for the current player.

        The returned sequence must be drained before the next move is
        started. An illegal pit yields an empty sequence.
        """
        return MoveSequence(self._board, pit, self.config)

    def is_valid_move(self, pit: int) -> bool:
        return is_valid_move(self._board, pit)

    def legal_moves(self) -> List[int]:
        return generate_legal_moves(self._board)

    def score(self, player: int) -> int:
        return score(self._board, player)

    def weighted_score(self, player: int) -> int:
        return weighted_score(self._board, player)

    def is_game_over(self) -> bool:
        return self._board.game_over

    def current_player(self) -> int:
        return self._board.current_player

    def recommend_move(self, difficulty: Union[Difficulty, str] = Difficulty.NORMAL) -> Optional[int]:
        return recommend_move(self._board, difficulty, self.rng)

    def store_tokens(self, player: int) -> List[TokenKind]:
        return store_tokens(self._board, player)

    def side_tokens(self, player: int) -> int:
        """Tokens still in a player's small pits."""
        return sum(self._board.count(pit) for pit in player_pits(player))

    def check_game_over(self) -> bool:
        """
        Force the end-of-game check.

        Drivers call this when the opponent has no move, or when they see
        every small pit empty without the game having ended.
        """
        if not self._board.game_over and self._board.tokens_in_pits == 0:
            logger.warning("All small pits empty but game not marked over, forcing check")
        return check_game_over(self._board)

    def snapshot(self) -> PitSnapshot:
        """Copy of every pit's contents."""
        return self._board.snapshot()

    def board(self) -> Board:
        """Independent copy of the board."""
        return self._board.copy()

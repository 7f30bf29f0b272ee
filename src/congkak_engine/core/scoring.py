"""
Scoring and end-of-game rules.

The game ends as soon as either player's seven small pits are all empty.
Remaining tokens on each side are then swept into that side's own store.
"""

import logging
from typing import List, Optional

from .board import Board, player_pits, store_index
from .tokens import TokenKind

logger = logging.getLogger(__name__)


def score(board: Board, player: int) -> int:
    """Number of tokens in a player's store."""
    return board.count(store_index(player))


def weighted_score(board: Board, player: int) -> int:
    """Sum of the rarity values of the tokens in a player's store."""
    return sum(token.points for token in board.pits[store_index(player)])


def store_tokens(board: Board, player: int) -> List[TokenKind]:
    """Copy of a player's store contents."""
    return list(board.pits[store_index(player)])


def is_terminal(board: Board) -> bool:
    """
    Check if the end-of-game condition holds.

    Args:
        board: Board to check

    Returns:
        True if either side's small pits are all empty
    """
    return board.side_empty(1) or board.side_empty(2)


def check_game_over(board: Board) -> bool:
    """
    Apply the end-of-game rule.

    If either side is empty, mark the game over and sweep each side's
    remaining tokens into that side's own store. Running it again on a
    finished board changes nothing.

    Args:
        board: Board to check (mutated on transition)

    Returns:
        True if the game is over
    """
    if board.game_over:
        return True
    if not is_terminal(board):
        return False

    board.game_over = True
    for player in (1, 2):
        store = board.pits[store_index(player)]
        swept = 0
        for pit in player_pits(player):
            swept += len(board.pits[pit])
            store.extend(board.pits[pit])
            board.pits[pit] = []
        if swept:
            logger.debug(f"Swept {swept} tokens into player {player}'s store")

    logger.info(
        f"Game over: P1 {score(board, 1)} ({weighted_score(board, 1)} pts) vs "
        f"P2 {score(board, 2)} ({weighted_score(board, 2)} pts)"
    )
    return True


def winner(board: Board) -> Optional[int]:
    """
    Winner by weighted score.

    Returns:
        1 or 2, or None if the game is unfinished or tied
    """
    if not board.game_over:
        return None
    p1 = weighted_score(board, 1)
    p2 = weighted_score(board, 2)
    if p1 > p2:
        return 1
    elif p2 > p1:
        return 2
    return None

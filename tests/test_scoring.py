"""Tests for scoring and end-of-game rules."""

from congkak_engine.core import (
    Board,
    TokenKind,
    check_game_over,
    is_terminal,
    score,
    store_tokens,
    weighted_score,
    winner,
)

W = TokenKind.WHITE


def board_with_stores(p1_store, p2_store, counts=None):
    pits = [[W] * c for c in (counts or [1] * 14)] + [list(p1_store), list(p2_store)]
    return Board(pits=pits)


def test_score_counts_tokens():
    """Simple score is the number of tokens in the store."""
    board = board_with_stores([W, W, TokenKind.BLUE], [TokenKind.RED])

    assert score(board, 1) == 3
    assert score(board, 2) == 1


def test_weighted_score_uses_rarity():
    """Weighted score sums rarity values."""
    store = [W, TokenKind.YELLOW, TokenKind.RED, TokenKind.BLUE, TokenKind.BLACK]
    board = board_with_stores(store, [W, W])

    assert weighted_score(board, 1) == 1 + 2 + 3 + 10 + 5
    assert weighted_score(board, 2) == 2


def test_store_tokens_is_a_copy():
    """Returned store contents can be modified freely."""
    board = board_with_stores([W, TokenKind.RED], [])
    tokens = store_tokens(board, 1)
    tokens.clear()

    assert score(board, 1) == 2


def test_non_terminal_state():
    """Test non-terminal state."""
    board = Board.from_counts([7] * 14 + [0, 0])

    assert is_terminal(board) is False
    assert check_game_over(board) is False
    assert board.game_over is False
    assert board.total_tokens == 98


def test_terminal_sweep_to_own_store():
    """Remaining tokens go to their own side's store."""
    # P1 side empty, P2 has tokens remaining
    board = Board.from_counts([0, 0, 0, 0, 0, 0, 0, 2, 3, 4, 5, 0, 0, 1, 10, 5])

    assert is_terminal(board) is True
    assert check_game_over(board) is True
    assert board.game_over is True
    assert board.count(14) == 10  # Untouched
    assert board.count(15) == 5 + 2 + 3 + 4 + 5 + 1
    assert board.tokens_in_pits == 0


def test_terminal_sweep_when_player_two_empty():
    """The sweep works the same way when player two runs out."""
    board = Board.from_counts([1, 0, 2, 0, 0, 0, 3] + [0] * 7 + [4, 8])

    check_game_over(board)

    assert board.count(14) == 10
    assert board.count(15) == 8


def test_check_game_over_is_idempotent():
    """Running the check again changes nothing."""
    board = Board.from_counts([0] * 7 + [1, 2, 0, 0, 0, 0, 0] + [6, 6])
    check_game_over(board)
    after_first = board.snapshot()

    assert check_game_over(board) is True
    assert board.snapshot() == after_first


def test_winner():
    """Winner is decided by weighted score once the game is over."""
    board = board_with_stores([TokenKind.BLUE], [W] * 9, counts=[0] * 14)
    assert winner(board) is None  # Not marked over yet

    check_game_over(board)
    assert winner(board) == 1

    tied = board_with_stores([W, W], [TokenKind.YELLOW], counts=[0] * 14)
    check_game_over(tied)
    assert winner(tied) is None

"""Tests for move resolution rules."""

import pytest
from congkak_engine.core import (
    Board,
    EngineConfig,
    ExtraTurnPolicy,
    MoveSequence,
    StepStatus,
    TokenKind,
    generate_legal_moves,
    is_valid_move,
)

W = TokenKind.WHITE
Y = TokenKind.YELLOW
R = TokenKind.RED
B = TokenKind.BLUE


def empty_pits():
    return [[] for _ in range(16)]


def statuses(steps):
    return [s.status for s in steps]


def drops(steps):
    return [s.position for s in steps if s.status is StepStatus.DROPPING]


def test_legal_moves():
    """Test legal move generation."""
    board = Board.from_counts([7] * 14 + [0, 0])
    assert generate_legal_moves(board) == [0, 1, 2, 3, 4, 5, 6]

    # Empty pits should not be legal
    board = Board.from_counts([0, 3, 0, 3, 0, 0, 1] + [7] * 7 + [0, 0])
    assert generate_legal_moves(board) == [1, 3, 6]

    board.current_player = 2
    assert generate_legal_moves(board) == [7, 8, 9, 10, 11, 12, 13]


@pytest.mark.parametrize("pit", [-1, 7, 13, 14, 15, 16, 2])
def test_illegal_moves_are_no_ops(pit):
    """Wrong side, out of range, stores and empty pits produce no steps."""
    board = Board.from_counts([1, 1, 0, 1, 1, 1, 1] + [1] * 7 + [0, 0])
    before = board.snapshot()

    seq = MoveSequence(board, pit)

    assert seq.valid is False
    assert list(seq) == []
    assert seq.exhausted
    assert board.snapshot() == before
    assert board.current_player == 1


def test_no_moves_after_game_over():
    """A finished game rejects every move."""
    board = Board.from_counts([1] * 14 + [0, 0])
    board.game_over = True

    assert is_valid_move(board, 0) is False
    assert list(MoveSequence(board, 0)) == []


def test_simple_move():
    """Test basic move without capture or extra turn."""
    board = Board.from_counts([2, 0, 0, 0, 0, 0, 1, 1, 1, 1, 1, 0, 1, 1, 0, 0])

    steps = list(MoveSequence(board, 0))

    assert statuses(steps) == [
        StepStatus.PICKUP,
        StepStatus.DROPPING,
        StepStatus.DROPPING,
        StepStatus.END,
    ]
    assert drops(steps) == [1, 2]
    assert [s.hand_count for s in steps[1:3]] == [1, 0]
    assert board.count(0) == 0
    assert board.count(1) == 1
    assert board.count(2) == 1
    assert board.current_player == 2  # Switched to P2
    assert steps[-1].current_player == 2
    assert steps[-1].game_over is False


def test_extra_turn():
    """Landing in own store keeps the turn."""
    board = Board.from_counts([7] * 14 + [0, 0])

    steps = list(MoveSequence(board, 0))

    assert drops(steps) == [1, 2, 3, 4, 5, 6, 14]
    assert statuses(steps)[-2:] == [StepStatus.EXTRA_TURN_BONUS, StepStatus.END]
    assert board.count(14) == 1
    assert board.current_player == 1  # Still P1's turn
    assert board.extra_turn_credits == {1: 0, 2: 0}


def test_capture():
    """Test capture rule."""
    # Pit 3 is empty and its mirror, pit 10, holds 5
    board = Board.from_counts([0, 2, 0, 0, 0, 0, 1, 1, 1, 1, 5, 1, 1, 1, 0, 0])

    steps = list(MoveSequence(board, 1))  # Sows into 2, then 3

    assert drops(steps) == [2, 3]
    capture = steps[-2]
    assert capture.status is StepStatus.CAPTURE
    assert capture.position == 3
    assert capture.captured_count == 6
    assert board.count(1) == 0  # Picked up
    assert board.count(3) == 0  # Captured
    assert board.count(10) == 0  # Captured from opposite
    assert board.count(14) == 6  # Store gets the landed token plus the 5 opposite
    assert board.current_player == 2


def test_no_capture_when_opposite_empty():
    """Landing alone in an own pit facing an empty pit captures nothing."""
    board = Board.from_counts([0, 2, 0, 0, 0, 0, 1, 1, 1, 1, 0, 1, 1, 1, 0, 0])

    steps = list(MoveSequence(board, 1))

    assert StepStatus.CAPTURE not in statuses(steps)
    assert board.count(3) == 1
    assert board.count(14) == 0


def test_no_capture_on_opponent_side():
    """An empty opponent pit is never a capture."""
    board = Board.from_counts([1, 0, 0, 0, 0, 0, 2, 0, 1, 1, 1, 1, 1, 1, 0, 0])

    steps = list(MoveSequence(board, 6))  # Sows into 14, then 7

    assert drops(steps) == [14, 7]
    assert StepStatus.CAPTURE not in statuses(steps)
    assert board.count(7) == 1
    assert board.current_player == 2


def test_continuation():
    """A hand ending in an occupied small pit picks it up and keeps sowing."""
    board = Board.from_counts([1, 1, 0, 0, 0, 0, 1, 1, 1, 1, 1, 1, 1, 1, 0, 0])

    steps = list(MoveSequence(board, 0))

    assert statuses(steps) == [
        StepStatus.PICKUP,
        StepStatus.DROPPING,
        StepStatus.PICKUP_CONTINUE,
        StepStatus.DROPPING,
        StepStatus.DROPPING,
        StepStatus.CAPTURE,
        StepStatus.END,
    ]
    assert steps[2].position == 1
    assert steps[2].hand_count == 2
    assert drops(steps) == [1, 2, 3]
    assert steps[5].captured_count == 2
    assert board.count(14) == 2
    assert board.count(2) == 1


def test_continuation_on_opponent_side():
    """Continuation also applies to the opponent's pits."""
    board = Board.from_counts([0, 0, 0, 0, 0, 1, 2, 3, 0, 0, 0, 0, 0, 1, 0, 0])

    steps = list(MoveSequence(board, 6))  # 14, then 7 (now 4 tokens)

    assert steps[3].status is StepStatus.PICKUP_CONTINUE
    assert steps[3].position == 7
    assert steps[3].hand_count == 4
    assert drops(steps) == [14, 7, 8, 9, 10, 11]
    assert board.count(7) == 0
    assert board.current_player == 2


def test_sowing_skips_opponent_store_for_player_one():
    """Player one's hand never drops into player two's store."""
    board = Board.from_counts([0, 0, 0, 0, 0, 0, 10, 0, 0, 0, 0, 0, 0, 0, 0, 3])

    steps = list(MoveSequence(board, 6))

    assert drops(steps) == [14, 7, 8, 9, 10, 11, 12, 13, 0, 1]
    assert board.count(15) == 3
    # Pit 1 was empty and pit 12 received a token: capture 2
    assert steps[-2].status is StepStatus.CAPTURE
    assert board.count(14) == 3


def test_sowing_skips_opponent_store_for_player_two():
    """Player two's hand never drops into player one's store."""
    counts = [1, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 1, 9, 4, 0]
    board = Board.from_counts(counts, current_player=2)

    steps = list(MoveSequence(board, 13))

    assert drops(steps) == [15, 0, 1, 2, 3, 4, 5, 6, 7]
    assert 14 not in drops(steps)
    assert board.count(14) == 4


def test_sown_order_is_reversed():
    """The top token of a pit is sown first."""
    pits = empty_pits()
    pits[0] = [W, Y, R]  # R on top
    pits[8] = [W]
    board = Board.from_pits(pits)

    list(MoveSequence(board, 0))

    assert board.pits[1] == [R]
    assert board.pits[2] == [Y]
    assert board.pits[3] == [W]


def test_steal_on_last_token():
    """A blue token landing in its owner's store steals up to three tokens."""
    pits = empty_pits()
    pits[0] = [W]
    pits[6] = [B]
    pits[8] = [W]
    pits[15] = [W, Y, R, R, W]
    board = Board.from_pits(pits)

    steps = list(MoveSequence(board, 6))

    assert statuses(steps) == [
        StepStatus.PICKUP,
        StepStatus.DROPPING,
        StepStatus.STEAL,
        StepStatus.EXTRA_TURN_BONUS,
        StepStatus.END,
    ]
    assert steps[2].stolen_count == 3
    # Popped from the tail of the opponent's store
    assert board.pits[14] == [B, W, R, R]
    assert board.pits[15] == [W, Y]
    assert board.current_player == 1


def test_steal_takes_only_what_is_there():
    """With one token in the opponent's store, exactly one is stolen."""
    pits = empty_pits()
    pits[0] = [W]
    pits[6] = [B]
    pits[8] = [W]
    pits[15] = [R]
    board = Board.from_pits(pits)

    steps = list(MoveSequence(board, 6))

    steal = [s for s in steps if s.status is StepStatus.STEAL]
    assert len(steal) == 1
    assert steal[0].stolen_count == 1
    assert board.pits[14] == [B, R]
    assert board.pits[15] == []


def test_steal_mid_hand():
    """The steal also triggers when the blue token is not the last one."""
    pits = empty_pits()
    pits[0] = [W]
    pits[6] = [W, B]  # B sown first into 14, then W into 7
    pits[8] = [W]
    pits[15] = [W, W]
    board = Board.from_pits(pits)

    steps = list(MoveSequence(board, 6))

    assert statuses(steps)[:4] == [
        StepStatus.PICKUP,
        StepStatus.DROPPING,
        StepStatus.STEAL,
        StepStatus.DROPPING,
    ]
    assert steps[2].stolen_count == 2
    assert board.pits[14] == [B, W, W]
    assert board.pits[15] == []
    assert board.current_player == 2


def test_white_in_store_does_not_steal():
    """Only blue tokens steal."""
    pits = empty_pits()
    pits[0] = [W]
    pits[6] = [R]
    pits[8] = [W]
    pits[15] = [W, W]
    board = Board.from_pits(pits)

    steps = list(MoveSequence(board, 6))

    assert StepStatus.STEAL not in statuses(steps)
    assert board.count(15) == 2


def test_steal_limit_is_configurable():
    """steal_limit caps the transfer."""
    pits = empty_pits()
    pits[0] = [W]
    pits[6] = [B]
    pits[8] = [W]
    pits[15] = [W] * 6
    board = Board.from_pits(pits)

    steps = list(MoveSequence(board, 6, EngineConfig(steal_limit=5)))

    assert [s.stolen_count for s in steps if s.status is StepStatus.STEAL] == [5]
    assert board.count(14) == 6


def test_step_snapshots_are_copies():
    """Each step carries the board as it was when the step was produced."""
    board = Board.from_counts([7] * 14 + [0, 0])

    steps = list(MoveSequence(board, 0))

    assert len(steps[0].pits[0]) == 0
    assert len(steps[1].pits[1]) == 8  # First drop
    assert len(steps[1].pits[2]) == 7  # Not reached yet
    assert len(steps[-1].pits[14]) == 1


def test_sequence_is_lazy_and_not_restartable():
    """Steps are produced one at a time and only once."""
    board = Board.from_counts([7] * 14 + [0, 0])
    seq = MoveSequence(board, 0)

    first = next(seq)
    assert first.status is StepStatus.PICKUP
    assert board.count(1) == 7  # Nothing sown yet

    next(seq)
    assert board.count(1) == 8
    assert seq.steps_produced == 2

    rest = seq.drain()
    assert rest[-1].status is StepStatus.END
    assert seq.exhausted
    assert list(seq) == []
    with pytest.raises(StopIteration):
        next(seq)


def test_move_ending_game_sweeps():
    """The end step reports game over and the sweep into each side's store."""
    board = Board.from_counts([0, 0, 0, 0, 0, 0, 1, 2, 0, 3, 0, 0, 0, 0, 0, 0])

    steps = list(MoveSequence(board, 6))

    end = steps[-1]
    assert end.status is StepStatus.END
    assert end.game_over is True
    assert board.game_over is True
    assert board.count(14) == 1
    assert board.count(15) == 5
    assert board.tokens_in_pits == 0


def test_credit_policy_banks_and_spends_extra_turns():
    """Under the credit policy a store landing banks a turn spent after a capture."""
    config = EngineConfig(extra_turn_policy=ExtraTurnPolicy.CREDIT)
    counts = [1, 1, 0, 0, 0, 0, 1, 0, 1, 0, 0, 2, 0, 0, 0, 0]
    board = Board.from_counts(counts)

    # Pit 6 -> own store: keep the turn and bank a credit
    steps = list(MoveSequence(board, 6, config))
    assert steps[-2].status is StepStatus.EXTRA_TURN_BONUS
    assert board.current_player == 1
    assert board.extra_turn_credits[1] == 1

    # Pit 1 -> pit 2, capturing pit 11; the banked credit keeps the turn
    steps = list(MoveSequence(board, 1, config))
    assert statuses(steps)[-3:] == [
        StepStatus.CAPTURE,
        StepStatus.EXTRA_TURN_BONUS,
        StepStatus.END,
    ]
    assert board.current_player == 1
    assert board.extra_turn_credits[1] == 0
    assert board.count(14) == 4


def test_continuation_policy_does_not_bank():
    """The default policy passes the turn after the same capture."""
    counts = [1, 1, 0, 0, 0, 0, 1, 0, 1, 0, 0, 2, 0, 0, 0, 0]
    board = Board.from_counts(counts)

    list(MoveSequence(board, 6))
    assert board.current_player == 1

    steps = list(MoveSequence(board, 1))
    assert StepStatus.EXTRA_TURN_BONUS not in statuses(steps)
    assert board.current_player == 2

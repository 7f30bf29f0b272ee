"""Tests for the engine facade."""

import logging
import random

from congkak_engine import CongkakEngine, EngineConfig, ExtraTurnPolicy, StepStatus
from congkak_engine.core import Board


def test_reset_from_inventory():
    """A new match is dealt from the inventory."""
    engine = CongkakEngine(rng=random.Random(5))
    engine.reset({"white": 1, "yellow": 1})

    assert engine.current_player() == 1
    assert engine.is_game_over() is False
    assert engine.side_tokens(1) == 49
    assert engine.side_tokens(2) == 49
    assert engine.score(1) == 0
    assert engine.legal_moves() == [0, 1, 2, 3, 4, 5, 6]


def test_first_move_reaches_store():
    """Seven tokens from pit 0 end in the store and keep the turn."""
    engine = CongkakEngine(rng=random.Random(5))
    engine.reset({"white": 1, "yellow": 1})

    steps = list(engine.resolve_move(0))
    statuses = [step.status for step in steps]

    assert statuses[0] is StepStatus.PICKUP
    assert steps[0].hand_count == 7
    drops = [step.position for step in steps if step.status is StepStatus.DROPPING]
    assert drops == [1, 2, 3, 4, 5, 6, 14]
    assert statuses[-2] is StepStatus.EXTRA_TURN_BONUS
    assert statuses[-1] is StepStatus.END
    assert steps[-1].current_player == 1
    assert steps[-1].game_over is False
    assert engine.score(1) == 1
    assert engine.current_player() == 1


def test_board_is_a_copy():
    """Callers cannot reach into the engine's board."""
    engine = CongkakEngine(rng=random.Random(1))
    board = engine.board()
    board.pits[0].clear()
    snap = engine.snapshot()

    assert engine.is_valid_move(0)
    assert len(snap[0]) == 7


def test_load_copies_board():
    """Loading a position does not keep a reference to it."""
    board = Board.from_counts([1] + [0] * 6 + [1] * 7 + [0, 0])
    engine = CongkakEngine()
    engine.load(board)
    board.pits[0].clear()

    assert engine.is_valid_move(0)


def test_illegal_move_is_empty():
    """Illegal pits produce no steps and leave the board alone."""
    engine = CongkakEngine(rng=random.Random(1))
    before = engine.snapshot()

    assert list(engine.resolve_move(8)) == []
    assert list(engine.resolve_move(14)) == []
    assert engine.snapshot() == before
    assert engine.current_player() == 1


def test_forced_game_over_check(caplog):
    """An empty board that was never marked over is settled on request."""
    engine = CongkakEngine()
    engine.load(Board.from_counts([0] * 14 + [50, 48]))

    with caplog.at_level(logging.WARNING, logger="congkak_engine.engine"):
        assert engine.check_game_over() is True

    assert engine.is_game_over() is True
    assert "forcing check" in caplog.text
    assert engine.legal_moves() == []


def test_recommend_move_is_legal():
    """Recommendations are always legal moves."""
    engine = CongkakEngine(rng=random.Random(8))
    for difficulty in ("easy", "normal", "hard"):
        assert engine.recommend_move(difficulty) in engine.legal_moves()


def test_token_conservation_over_games():
    """Every step of every game holds exactly 98 tokens."""
    for seed in range(5):
        policy = ExtraTurnPolicy.CREDIT if seed % 2 else ExtraTurnPolicy.CONTINUATION
        engine = CongkakEngine(EngineConfig(extra_turn_policy=policy), rng=random.Random(seed))
        moves = 0
        while not engine.is_game_over():
            pit = engine.recommend_move("easy")
            for step in engine.resolve_move(pit):
                assert sum(len(tokens) for tokens in step.pits) == 98
            moves += 1
            assert moves < 10_000

        assert engine.score(1) + engine.score(2) == 98
        assert engine.side_tokens(1) == 0
        assert engine.side_tokens(2) == 0

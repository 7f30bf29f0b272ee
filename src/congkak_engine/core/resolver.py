"""
Congkak move resolution.

Implements the sowing rules:
- Pick up every token in the chosen pit
- Sow one token per position along the path, skipping the opponent's store
- A blue token landing in the mover's store steals from the opponent's store
- Continuation ("pusingan"): a hand ending in an occupied small pit picks
  that pit up and keeps sowing
- Ending in one's own store keeps the turn
- Capture ("tembak"): ending in an empty own pit takes the opposite pit

A move is resolved lazily, one step per request, so a renderer can animate
each drop before asking for the next one.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from .board import (
    Board,
    PitSnapshot,
    get_opposite_pit,
    is_own_pit,
    is_store,
    next_sowing_position,
    opponent_of,
    player_pits,
    store_index,
)
from .config import EngineConfig, ExtraTurnPolicy
from .scoring import check_game_over
from .tokens import TokenKind

logger = logging.getLogger(__name__)


class StepStatus(Enum):
    """What happened in a step."""

    PICKUP = "pickup"
    DROPPING = "dropping"
    PICKUP_CONTINUE = "pickup_continue"
    STEAL = "steal"
    CAPTURE = "capture"
    EXTRA_TURN_BONUS = "extra_turn_bonus"
    END = "end"


@dataclass(frozen=True)
class Step:
    """
    Read-only record of one step of a move.

    `pits` is a copy of the board at the moment the step was produced.
    Fields that do not apply to a status are None.
    """

    status: StepStatus
    pits: PitSnapshot
    position: Optional[int] = None
    hand_count: Optional[int] = None
    stolen_count: Optional[int] = None
    captured_count: Optional[int] = None
    current_player: Optional[int] = None
    game_over: Optional[bool] = None


def is_valid_move(board: Board, pit: int) -> bool:
    """
    Check whether the current player may move from a pit.

    A move is legal if the game is not over and the chosen pit:
    - Belongs to the current player
    - Contains at least one token
    """
    if board.game_over:
        return False
    if not is_own_pit(pit, board.current_player):
        return False
    return board.count(pit) > 0


def generate_legal_moves(board: Board) -> List[int]:
    """Legal pit indices for the current player, in pit order."""
    if board.game_over:
        return []
    return [pit for pit in player_pits(board.current_player) if board.pits[pit]]


class _Phase(Enum):
    PICKUP = "pickup"
    SOW = "sow"
    STEAL = "steal"
    CONTINUE = "continue"
    RESOLVE = "resolve"
    TURN = "turn"
    END = "end"
    DONE = "done"


class MoveSequence:
    """
    Iterator over the steps of one move.

    Each call to next() performs exactly one unit of work on the board and
    returns the Step describing it. The sequence is finite and cannot be
    restarted; once exhausted it keeps raising StopIteration.

    An illegal move produces an empty sequence and leaves the board untouched.

    The board belongs to this sequence until it is exhausted. Abandoning it
    part way leaves the board partially sown, so only abandon between moves.
    """

    def __init__(self, board: Board, pit: int, config: Optional[EngineConfig] = None):
        """
        Prepare a move.

        Args:
            board: Board to mutate as steps are requested
            pit: Pit index chosen by the current player
            config: Rule settings (defaults if omitted)
        """
        self.board = board
        self.pit = pit
        self.config = config or EngineConfig()
        self.player = board.current_player
        self.valid = is_valid_move(board, pit)

        self._hand: List[TokenKind] = []
        self._pos = pit
        self._steps_produced = 0

        if self.valid:
            self._phase = _Phase.PICKUP
        else:
            logger.debug(f"Ignoring illegal move {pit} for player {board.current_player}")
            self._phase = _Phase.DONE

    @property
    def exhausted(self) -> bool:
        """True once the final step has been produced (or the move was illegal)."""
        return self._phase is _Phase.DONE

    @property
    def steps_produced(self) -> int:
        return self._steps_produced

    def __iter__(self) -> "MoveSequence":
        return self

    def __next__(self) -> Step:
        if self._phase is _Phase.DONE:
            raise StopIteration

        handler = {
            _Phase.PICKUP: self._pickup,
            _Phase.SOW: self._sow,
            _Phase.STEAL: self._steal,
            _Phase.CONTINUE: self._continue,
            _Phase.RESOLVE: self._resolve,
            _Phase.TURN: self._turn,
            _Phase.END: self._end,
        }[self._phase]
        step = handler()
        self._steps_produced += 1
        return step

    def drain(self) -> List[Step]:
        """Run the move to completion and return every remaining step."""
        return list(self)

    # ------------------------------------------------------------------
    # Phase handlers. Each one mutates the board once and returns one step.
    # ------------------------------------------------------------------

    @property
    def _own_store(self) -> int:
        return store_index(self.player)

    @property
    def _opponent_store(self) -> int:
        return store_index(opponent_of(self.player))

    def _step(self, status: StepStatus, **fields) -> Step:
        return Step(status=status, pits=self.board.snapshot(), **fields)

    def _pickup(self) -> Step:
        self._hand = self.board.pits[self.pit]
        self.board.pits[self.pit] = []
        self._phase = _Phase.SOW
        return self._step(StepStatus.PICKUP, position=self.pit, hand_count=len(self._hand))

    def _sow(self) -> Step:
        self._pos = next_sowing_position(self._pos, self.player)

        # Top of the hand goes first, so sown order is the reverse of pit order
        token = self._hand.pop()
        self.board.pits[self._pos].append(token)

        if token.steals and self._pos == self._own_store:
            self._phase = _Phase.STEAL
        else:
            self._phase = self._after_drop()

        return self._step(StepStatus.DROPPING, position=self._pos, hand_count=len(self._hand))

    def _after_drop(self) -> _Phase:
        if self._hand:
            return _Phase.SOW
        if not is_store(self._pos) and self.board.count(self._pos) > 1:
            return _Phase.CONTINUE
        return _Phase.RESOLVE

    def _steal(self) -> Step:
        opponent_store = self.board.pits[self._opponent_store]
        stolen = []
        for _ in range(self.config.steal_limit):
            if not opponent_store:
                break
            stolen.append(opponent_store.pop())
        self.board.pits[self._own_store].extend(stolen)

        if stolen:
            logger.debug(f"Player {self.player} stole {len(stolen)} tokens")
        self._phase = self._after_drop()
        return self._step(StepStatus.STEAL, position=self._pos, stolen_count=len(stolen))

    def _continue(self) -> Step:
        self._hand = self.board.pits[self._pos]
        self.board.pits[self._pos] = []
        self._phase = _Phase.SOW
        return self._step(
            StepStatus.PICKUP_CONTINUE, position=self._pos, hand_count=len(self._hand)
        )

    def _resolve(self) -> Step:
        if self._pos == self._own_store:
            if self.config.extra_turn_policy is ExtraTurnPolicy.CREDIT:
                self.board.extra_turn_credits[self.player] += 1
            self._phase = _Phase.END
            return self._step(StepStatus.EXTRA_TURN_BONUS, position=self._pos)

        # Capture: last token alone in an own pit, with tokens opposite
        if is_own_pit(self._pos, self.player) and self.board.count(self._pos) == 1:
            opposite = get_opposite_pit(self._pos)
            if self.board.pits[opposite]:
                captured = self.board.pits[opposite] + self.board.pits[self._pos]
                self.board.pits[opposite] = []
                self.board.pits[self._pos] = []
                self.board.pits[self._own_store].extend(captured)
                logger.debug(
                    f"Player {self.player} captured {len(captured)} tokens at pit {self._pos}"
                )
                self._phase = _Phase.TURN
                return self._step(
                    StepStatus.CAPTURE, position=self._pos, captured_count=len(captured)
                )

        return self._turn()

    def _turn(self) -> Step:
        credits = self.board.extra_turn_credits
        if self.config.extra_turn_policy is ExtraTurnPolicy.CREDIT and credits[self.player] > 0:
            credits[self.player] -= 1
            self._phase = _Phase.END
            return self._step(StepStatus.EXTRA_TURN_BONUS, position=self._pos)

        self.board.current_player = opponent_of(self.player)
        return self._end()

    def _end(self) -> Step:
        check_game_over(self.board)
        self._phase = _Phase.DONE
        return self._step(
            StepStatus.END,
            current_player=self.board.current_player,
            game_over=self.board.game_over,
        )

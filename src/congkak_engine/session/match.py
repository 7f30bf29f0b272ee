"""
Match driver.

Runs a whole match on top of CongkakEngine: validates human moves, asks the
heuristic for computer moves, guards against overlapping moves, and settles
rewards once the game is over.
"""

import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, Iterator, List, Mapping, Optional, Tuple, Union

from ..config import RewardTable
from ..core import Step, TokenKind, opponent_of
from ..core.setup import Inventory
from ..engine import CongkakEngine
from ..errors import CongkakError, IllegalMoveError, MatchNotFinishedError, MoveInProgressError
from ..opponent import Difficulty
from .rewards import compute_rewards, credit_inventory

logger = logging.getLogger(__name__)


@dataclass
class MatchResult:
    """Outcome of a finished match, from the rewarded player's side."""

    difficulty: str  # Opponent difficulty
    player_score: int  # Weighted score
    opponent_score: int
    won: bool
    tokens_spent: int  # Tokens dealt to the player's side
    tokens_won: List[TokenKind]  # Player's store contents at the end
    coins_earned: int
    xp_earned: int
    inventory: Optional[Dict[str, int]] = None  # Inventory after credit-back
    moves: List[Tuple[int, int]] = field(default_factory=list)  # (player, pit)

    def to_record(self, profile_id: str):
        """Build a MatchRecord for a history backend."""
        from ..storage import MatchRecord

        return MatchRecord(
            profile_id=profile_id,
            player_score=self.player_score,
            ai_score=self.opponent_score,
            won=self.won,
            tokens_spent=self.tokens_spent,
            tokens_won=len(self.tokens_won),
            coins_earned=self.coins_earned,
            xp_earned=self.xp_earned,
            difficulty=self.difficulty,
        )


class Match:
    """
    One match between a human and the computer, or computer against computer.

    Players listed in `computer` are played by the heuristic at the given
    difficulty. The rewarded player is the human if there is one, otherwise
    player 1.

    Only one move may be in flight at a time: drain the iterator returned by
    play_move() or play_computer_turn() before starting another. A move
    starts when its first step is requested; an iterator that is replaced by
    a newer one before then is refused. Closing an iterator part way leaves
    the board half sown, so the match is marked abandoned until start().
    """

    def __init__(
        self,
        engine: CongkakEngine,
        computer: Mapping[int, Union[Difficulty, str]],
        rewards: Optional[RewardTable] = None,
    ):
        """
        Initialize match.

        Args:
            engine: Engine to drive
            computer: Difficulty per computer-controlled player (1 and/or 2)
            rewards: Payout table used by result()
        """
        if not computer:
            raise ValueError("At least one player must be computer-controlled")
        self.engine = engine
        self.computer: Dict[int, Difficulty] = {}
        for player, difficulty in computer.items():
            if player not in (1, 2):
                raise ValueError(f"Invalid player {player}, must be 1 or 2")
            self.computer[player] = Difficulty.parse(difficulty)
        humans = [p for p in (1, 2) if p not in self.computer]
        self.human_player: Optional[int] = humans[0] if humans else None
        self.rewards = rewards if rewards is not None else RewardTable()

        self.move_in_progress = False
        self.abandoned = False
        self._ticket = 0  # Bumped for every issued move
        self.moves: List[Tuple[int, int]] = []
        self._inventory: Optional[Inventory] = None
        self._tokens_spent = 0

    @classmethod
    def vs_computer(
        cls,
        engine: CongkakEngine,
        difficulty: Union[Difficulty, str] = Difficulty.NORMAL,
        human_player: int = 1,
        rewards: Optional[RewardTable] = None,
    ) -> "Match":
        """Human against the computer."""
        return cls(engine, {opponent_of(human_player): difficulty}, rewards)

    @property
    def rewarded_player(self) -> int:
        return self.human_player if self.human_player is not None else 1

    @property
    def opponent_difficulty(self) -> Difficulty:
        return self.computer[opponent_of(self.rewarded_player)]

    def start(self, inventory: Optional[Inventory] = None) -> None:
        """Deal a new game."""
        if self.move_in_progress:
            raise MoveInProgressError("Cannot restart while a move is in progress")
        self.engine.reset(inventory)
        self.abandoned = False
        self._ticket += 1
        self._inventory = inventory
        self._tokens_spent = self.engine.side_tokens(self.rewarded_player)
        self.moves = []

    def is_computer_turn(self) -> bool:
        return not self.engine.is_game_over() and self.engine.current_player() in self.computer

    def play_move(self, pit: int) -> Iterator[Step]:
        """
        Start the human's move.

        Raises:
            MoveInProgressError: If another move has not been drained
            IllegalMoveError: If the pit is not a legal move for the human
            CongkakError: If it is not the human's turn, or the match was abandoned
        """
        self._check_ready()
        player = self.engine.current_player()
        if player in self.computer:
            raise CongkakError(f"It is the computer's turn (player {player})")
        return self._begin(player, pit)

    def play_computer_turn(self) -> Iterator[Step]:
        """
        Let the computer pick and play a move.

        If the computer has no legal move the end-of-game check is forced and
        an empty iterator is returned.
        """
        self._check_ready()
        player = self.engine.current_player()
        if player not in self.computer:
            raise CongkakError(f"It is the human's turn (player {player})")

        pit = self.engine.recommend_move(self.computer[player])
        if pit is None:
            logger.info(f"Player {player} has no moves, forcing end-of-game check")
            self.engine.check_game_over()
            return iter(())
        logger.debug(f"Player {player} ({self.computer[player]}) plays pit {pit}")
        return self._begin(player, pit)

    def play_out(
        self, on_step: Optional[Callable[[Step], None]] = None, max_moves: int = 10_000
    ) -> None:
        """
        Play computer turns until the game ends or a human must move.

        Raises:
            CongkakError: If the game runs past max_moves moves
        """
        while self.is_computer_turn():
            if len(self.moves) >= max_moves:
                raise CongkakError(f"Match did not finish within {max_moves} moves")
            for step in self.play_computer_turn():
                if on_step is not None:
                    on_step(step)

    def result(self) -> MatchResult:
        """
        Settle the finished match.

        Raises:
            MatchNotFinishedError: If the game is still running
        """
        if not self.engine.is_game_over():
            raise MatchNotFinishedError("The match is still in progress")

        player = self.rewarded_player
        player_score = self.engine.weighted_score(player)
        opponent_score = self.engine.weighted_score(opponent_of(player))
        won = player_score > opponent_score
        difficulty = self.opponent_difficulty.value
        coins, xp = compute_rewards(won, difficulty, self.rewards)
        tokens_won = self.engine.store_tokens(player)

        inventory = None
        if self._inventory is not None:
            inventory = credit_inventory(self._inventory, tokens_won)

        return MatchResult(
            difficulty=difficulty,
            player_score=player_score,
            opponent_score=opponent_score,
            won=won,
            tokens_spent=self._tokens_spent,
            tokens_won=tokens_won,
            coins_earned=coins,
            xp_earned=xp,
            inventory=inventory,
            moves=list(self.moves),
        )

    def _check_ready(self) -> None:
        if self.abandoned:
            raise CongkakError("A move was abandoned part way, call start() for a new game")
        if self.move_in_progress:
            raise MoveInProgressError("A move is already being resolved")

    def _begin(self, player: int, pit: int) -> Iterator[Step]:
        if not self.engine.is_valid_move(pit):
            raise IllegalMoveError(pit, player)
        self._ticket += 1
        return self._drain(self._ticket, player, pit)

    def _drain(self, ticket: int, player: int, pit: int) -> Iterator[Step]:
        # Runs on the first step request, not when the move is issued
        if ticket != self._ticket:
            raise CongkakError(f"Move {pit} for player {player} was replaced by a later move")
        self._check_ready()
        if self.engine.current_player() != player or not self.engine.is_valid_move(pit):
            raise IllegalMoveError(pit, player)

        self.move_in_progress = True
        self.moves.append((player, pit))
        sequence = self.engine.resolve_move(pit)
        try:
            for step in sequence:
                if sequence.exhausted:
                    self._finish_move()
                yield step
        finally:
            if not sequence.exhausted:
                self.move_in_progress = False
                self.abandoned = True
                logger.warning(
                    f"Move {pit} for player {player} abandoned after "
                    f"{sequence.steps_produced} steps, board is half sown"
                )

    def _finish_move(self) -> None:
        self.move_in_progress = False
        # A resolver bug could leave every pit empty without ending the game
        if not self.engine.is_game_over() and self.engine.side_tokens(1) + self.engine.side_tokens(2) == 0:
            self.engine.check_game_over()

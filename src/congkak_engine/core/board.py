"""
Board state representation for Congkak.

A Congkak board has 16 containers:
- 7 small pits ("kampung") per player
- 1 store ("induk") per player

Each container holds an ordered list of tokens. The last token in the list
is the one on top: it is the first token sown when the pit is picked up.
"""

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Sequence, Tuple

from .tokens import TokenKind

PITS_PER_SIDE = 7
TOKENS_PER_PIT = 7
NUM_POSITIONS = 2 * PITS_PER_SIDE + 2

P1_STORE = 14
P2_STORE = 15

# Cyclic order followed by a sowing hand:
# P1 kampung (0-6) -> P1 store (14) -> P2 kampung (7-13) -> P2 store (15)
SOWING_PATH: Tuple[int, ...] = (0, 1, 2, 3, 4, 5, 6, 14, 7, 8, 9, 10, 11, 12, 13, 15)
_PATH_INDEX: Dict[int, int] = {pos: i for i, pos in enumerate(SOWING_PATH)}

PitSnapshot = Tuple[Tuple[TokenKind, ...], ...]


def validate_player(player: int) -> int:
    """Return player unchanged, or raise ValueError if it is not 1 or 2."""
    if player not in (1, 2):
        raise ValueError(f"Invalid player {player}, must be 1 or 2")
    return player


def opponent_of(player: int) -> int:
    """The other player."""
    return 2 if validate_player(player) == 1 else 1


def store_index(player: int) -> int:
    """Index of a player's store."""
    return P1_STORE if validate_player(player) == 1 else P2_STORE


def player_pits(player: int) -> List[int]:
    """Small pit indices belonging to a player, in pit order."""
    if validate_player(player) == 1:
        return list(range(0, PITS_PER_SIDE))
    return list(range(PITS_PER_SIDE, 2 * PITS_PER_SIDE))


def is_store(pos: int) -> bool:
    return pos in (P1_STORE, P2_STORE)


def is_own_pit(pos: int, player: int) -> bool:
    """True if pos is one of the player's small pits."""
    if validate_player(player) == 1:
        return 0 <= pos < PITS_PER_SIDE
    return PITS_PER_SIDE <= pos < 2 * PITS_PER_SIDE


def get_opposite_pit(pit_idx: int) -> int:
    """
    Get the pit diametrically across the board.

    Formula: opposite_of(pit_i) = 13 - pit_i

    Args:
        pit_idx: Small pit index (0-13)

    Returns:
        Opposite pit index
    """
    if not 0 <= pit_idx < 2 * PITS_PER_SIDE:
        raise ValueError(f"Cannot get opposite of position {pit_idx}")
    return (2 * PITS_PER_SIDE - 1) - pit_idx


def next_position(pos: int) -> int:
    """Next position along the sowing path, ignoring whose hand it is."""
    return SOWING_PATH[(_PATH_INDEX[pos] + 1) % NUM_POSITIONS]


def next_sowing_position(pos: int, player: int) -> int:
    """Next position a player's hand drops into (skips the opponent's store)."""
    nxt = next_position(pos)
    if nxt == store_index(opponent_of(player)):
        nxt = next_position(nxt)
    return nxt


@dataclass
class Board:
    """
    Mutable Congkak board.

    Board layout:
            P2 kampung (13-7)
         [13][12][11][10][9][8][7]
    [15]                          [14]  <- Stores
         [0] [1] [2] [3] [4][5][6]
            P1 kampung (0-6)

    Indices:
    - P1 pits: 0 to 6
    - P2 pits: 7 to 13 (pit i faces pit 13 - i)
    - P1 store: 14
    - P2 store: 15
    """

    pits: List[List[TokenKind]] = field(
        default_factory=lambda: [[] for _ in range(NUM_POSITIONS)]
    )
    current_player: int = 1
    game_over: bool = False
    # Banked extra turns, only used by the credit policy
    extra_turn_credits: Dict[int, int] = field(default_factory=lambda: {1: 0, 2: 0})

    def __post_init__(self) -> None:
        """Validate board invariants."""
        if len(self.pits) != NUM_POSITIONS:
            raise ValueError(
                f"Board size {len(self.pits)} doesn't match expected {NUM_POSITIONS}"
            )
        validate_player(self.current_player)
        for pos, pit in enumerate(self.pits):
            for token in pit:
                if not isinstance(token, TokenKind):
                    raise ValueError(f"Position {pos} holds a non-token value {token!r}")

    @classmethod
    def from_pits(
        cls, pits: Sequence[Iterable], current_player: int = 1, game_over: bool = False
    ) -> "Board":
        """
        Build a board from per-position token sequences.

        Tokens may be given as TokenKind members or kind names.
        """
        return cls(
            pits=[[TokenKind.parse(t) for t in pit] for pit in pits],
            current_player=current_player,
            game_over=game_over,
        )

    @classmethod
    def from_counts(
        cls, counts: Sequence[int], kind: TokenKind = TokenKind.WHITE, current_player: int = 1
    ) -> "Board":
        """Build a board holding counts[i] tokens of a single kind at position i."""
        if any(c < 0 for c in counts):
            raise ValueError("Negative token count not allowed")
        return cls(pits=[[kind] * c for c in counts], current_player=current_player)

    def count(self, pos: int) -> int:
        """Number of tokens at a position."""
        return len(self.pits[pos])

    def counts(self) -> Tuple[int, ...]:
        """Token counts for all 16 positions."""
        return tuple(len(pit) for pit in self.pits)

    @property
    def total_tokens(self) -> int:
        """Total tokens on the board."""
        return sum(len(pit) for pit in self.pits)

    @property
    def tokens_in_pits(self) -> int:
        """Tokens remaining in small pits (not in stores)."""
        return self.total_tokens - self.count(P1_STORE) - self.count(P2_STORE)

    def side_empty(self, player: int) -> bool:
        """True if all of a player's small pits are empty."""
        return all(not self.pits[pit] for pit in player_pits(player))

    def snapshot(self) -> PitSnapshot:
        """Deep, immutable copy of all pit contents."""
        return tuple(tuple(pit) for pit in self.pits)

    def copy(self) -> "Board":
        """Independent copy of the board, flags included."""
        return Board(
            pits=[list(pit) for pit in self.pits],
            current_player=self.current_player,
            game_over=self.game_over,
            extra_turn_credits=dict(self.extra_turn_credits),
        )

    def __str__(self) -> str:
        """Human-readable board representation."""
        counts = self.counts()
        p2_pits = list(reversed(counts[PITS_PER_SIDE : 2 * PITS_PER_SIDE]))
        p1_pits = list(counts[:PITS_PER_SIDE])

        pit_width = 3
        p2_str = " ".join(f"{s:>{pit_width}}" for s in p2_pits)
        p1_str = " ".join(f"{s:>{pit_width}}" for s in p1_pits)
        store_width = len(p2_str)

        status = "Game over" if self.game_over else f"Player {self.current_player}'s turn"
        return f"""
      {p2_str}
[{counts[P2_STORE]:>2}] {' ' * store_width} [{counts[P1_STORE]:>2}]
      {p1_str}

{status}
"""

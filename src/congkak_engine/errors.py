"""Exceptions raised by match drivers.

The engine itself never raises on a bad move; it resolves it as a no-op.
These cover protocol mistakes made by the code driving a match.
"""


class CongkakError(Exception):
    """Base class for match driver errors."""


class MoveInProgressError(CongkakError):
    """A move was started while another one was still being resolved."""


class IllegalMoveError(CongkakError):
    """The requested pit is not a legal move for the player to act."""

    def __init__(self, pit: int, player: int):
        super().__init__(f"Pit {pit} is not a legal move for player {player}")
        self.pit = pit
        self.player = player


class MatchNotFinishedError(CongkakError):
    """A match result was requested before the game ended."""

"""Rule configuration for the move-resolution engine."""

from dataclasses import dataclass
from enum import Enum
from typing import Tuple

from .tokens import TokenKind


class ExtraTurnPolicy(Enum):
    """
    How landing the last token in one's own store keeps the turn.

    CONTINUATION: the turn simply does not pass; nothing is banked.
    CREDIT: a credit is also banked and spent later to skip a turn switch.
    """

    CONTINUATION = "continuation"
    CREDIT = "credit"


# Cumulative probability thresholds for the random starting deal, checked in order.
# Anything above the last threshold is the common kind.
DEFAULT_RARITY_TABLE: Tuple[Tuple[float, TokenKind], ...] = (
    (0.05, TokenKind.BLUE),
    (0.10, TokenKind.RED),
    (0.20, TokenKind.YELLOW),
)


@dataclass(frozen=True)
class EngineConfig:
    """Rule settings for one engine instance."""

    steal_limit: int = 3  # Tokens a blue token may take from the opponent's store
    extra_turn_policy: ExtraTurnPolicy = ExtraTurnPolicy.CONTINUATION
    rarity_table: Tuple[Tuple[float, TokenKind], ...] = DEFAULT_RARITY_TABLE
    common_kind: TokenKind = TokenKind.WHITE

    def __post_init__(self) -> None:
        """Validate settings."""
        if self.steal_limit < 0:
            raise ValueError(f"steal_limit must be >= 0, got {self.steal_limit}")
        last = 0.0
        for threshold, _ in self.rarity_table:
            if not last <= threshold <= 1.0:
                raise ValueError("rarity_table thresholds must be ascending within [0, 1]")
            last = threshold

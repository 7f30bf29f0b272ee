"""
Token (guli) kinds and their rarity values.

Every token on the board is one of a closed set of kinds. The kind decides
how many points the token is worth in a store and whether it carries a
special effect when it lands.
"""

from enum import Enum
from typing import Union


class TokenKind(Enum):
    """Closed set of token kinds, keyed by their lower-case name."""

    WHITE = "white"  # Common
    YELLOW = "yellow"  # Uncommon
    RED = "red"  # Rare
    BLACK = "black"  # Mythic
    BLUE = "blue"  # Epic, steals from the opponent's store

    @property
    def points(self) -> int:
        """Rarity value used for weighted scoring."""
        return _POINTS[self]

    @property
    def steals(self) -> bool:
        """True if landing this token in its owner's store triggers a steal."""
        return self is TokenKind.BLUE

    @classmethod
    def parse(cls, name: Union[str, "TokenKind"]) -> "TokenKind":
        """
        Resolve a kind from its name.

        Args:
            name: Kind name ("white", "Blue", ...) or an existing TokenKind

        Returns:
            Matching TokenKind

        Raises:
            ValueError: If the name is not a known kind
        """
        if isinstance(name, cls):
            return name
        try:
            return cls(str(name).strip().lower())
        except ValueError:
            raise ValueError(f"Unknown token kind {name!r}") from None

    def __str__(self) -> str:
        return self.value


_POINTS = {
    TokenKind.WHITE: 1,
    TokenKind.YELLOW: 2,
    TokenKind.RED: 3,
    TokenKind.BLACK: 5,
    TokenKind.BLUE: 10,
}

# Kind used when an inventory cannot supply any token
FALLBACK_KIND = TokenKind.WHITE

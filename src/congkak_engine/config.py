"""Engine and match configuration."""

from dataclasses import dataclass, field
from typing import Dict

from .core.config import DEFAULT_RARITY_TABLE, EngineConfig, ExtraTurnPolicy

__all__ = ["DEFAULT_RARITY_TABLE", "EngineConfig", "ExtraTurnPolicy", "RewardTable"]


@dataclass(frozen=True)
class RewardTable:
    """Coins and XP paid out at the end of a match."""

    win_coins: Dict[str, int] = field(
        default_factory=lambda: {"easy": 50, "normal": 100, "hard": 150}
    )
    default_win_coins: int = 100
    loss_penalty: int = 10
    win_xp: int = 200
    loss_xp: int = 50

    def coins_for_win(self, difficulty: str) -> int:
        return self.win_coins.get(difficulty, self.default_win_coins)

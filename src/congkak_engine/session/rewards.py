"""
End-of-match rewards.

Coins and XP depend on the outcome and the opponent's difficulty. Tokens the
player finishes with in their store are credited back to their inventory.
"""

from typing import Dict, Iterable, Mapping, Optional, Tuple, Union

from ..config import RewardTable
from ..core import TokenKind


def compute_rewards(
    won: bool, difficulty: str, table: Optional[RewardTable] = None
) -> Tuple[int, int]:
    """
    Coins and XP for a finished match.

    Args:
        won: True if the player's weighted score beat the opponent's
        difficulty: Opponent difficulty name
        table: Payout table (default payouts if omitted)

    Returns:
        (coins_earned, xp_earned); coins are negative on a loss
    """
    table = table if table is not None else RewardTable()
    if won:
        return table.coins_for_win(difficulty), table.win_xp
    return -table.loss_penalty, table.loss_xp


def credit_inventory(
    inventory: Mapping[Union[TokenKind, str], int], tokens: Iterable[TokenKind]
) -> Dict[str, int]:
    """
    Return a new inventory with won tokens added back.

    Only kinds the inventory already tracks are credited. Keys of the result
    are kind names.
    """
    credited = {TokenKind.parse(kind).value: int(count) for kind, count in inventory.items()}
    for token in tokens:
        if token.value in credited:
            credited[token.value] += 1
    return credited

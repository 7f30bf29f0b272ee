"""
Starting distributions for a new match.

Two ways of filling the 14 small pits with 7 tokens each:
- From a player's collected inventory: the pool mirrors the inventory's mix
- Without an inventory: independent draws from a fixed rarity table
"""

import logging
import random
from typing import List, Mapping, Optional, Tuple, Union

from .board import NUM_POSITIONS, PITS_PER_SIDE, TOKENS_PER_PIT, Board
from .config import DEFAULT_RARITY_TABLE
from .tokens import FALLBACK_KIND, TokenKind

logger = logging.getLogger(__name__)

Inventory = Mapping[Union[TokenKind, str], int]

TOKENS_NEEDED = 2 * PITS_PER_SIDE * TOKENS_PER_PIT


def expand_inventory(inventory: Inventory) -> List[TokenKind]:
    """
    Flatten an inventory into a list of kinds, in mapping order.

    Args:
        inventory: Mapping of kind (or kind name) to count

    Returns:
        List with `count` copies of each kind

    Raises:
        ValueError: On unknown kinds or negative counts
    """
    tokens: List[TokenKind] = []
    for name, count in inventory.items():
        kind = TokenKind.parse(name)
        count = int(count)
        if count < 0:
            raise ValueError(f"Negative inventory count {count} for {kind}")
        tokens.extend([kind] * count)
    return tokens


def build_pool(inventory: Inventory, rng: random.Random) -> List[TokenKind]:
    """
    Build the shuffled pool of tokens to deal from.

    The pool holds enough tokens for both sides. It is filled by cycling
    through the expanded inventory so the mix keeps the inventory's relative
    frequencies, then shuffled uniformly.
    """
    owned = expand_inventory(inventory)
    if owned:
        pool = [owned[i % len(owned)] for i in range(TOKENS_NEEDED)]
    else:
        logger.debug(f"Empty inventory, dealing {FALLBACK_KIND} tokens only")
        pool = [FALLBACK_KIND] * TOKENS_NEEDED
    rng.shuffle(pool)
    return pool


def draw_random_kind(
    rng: random.Random,
    rarity_table: Tuple[Tuple[float, TokenKind], ...] = DEFAULT_RARITY_TABLE,
    common_kind: TokenKind = TokenKind.WHITE,
) -> TokenKind:
    """Draw one token from the rarity table."""
    roll = rng.random()
    for threshold, kind in rarity_table:
        if roll < threshold:
            return kind
    return common_kind


def create_starting_board(
    inventory: Optional[Inventory] = None,
    rng: Optional[random.Random] = None,
    rarity_table: Tuple[Tuple[float, TokenKind], ...] = DEFAULT_RARITY_TABLE,
    common_kind: TokenKind = TokenKind.WHITE,
) -> Board:
    """
    Create the initial board.

    Args:
        inventory: Optional player inventory biasing the starting pool
        rng: Random source (a fresh unseeded one if omitted)
        rarity_table: Thresholds used when no inventory is given
        common_kind: Kind drawn above the last rarity threshold

    Returns:
        Board with 7 tokens in each small pit, empty stores, player 1 to move
    """
    rng = rng or random.Random()
    pits: List[List[TokenKind]] = [[] for _ in range(NUM_POSITIONS)]
    small_pits = range(2 * PITS_PER_SIDE)

    if inventory is not None:
        pool = build_pool(inventory, rng)
        # Player 1 side first, then player 2, popping from the pool's tail
        for pit in small_pits:
            for _ in range(TOKENS_PER_PIT):
                pits[pit].append(pool.pop())
        logger.debug(f"Dealt from inventory, {len(pool)} pool tokens discarded")
    else:
        for pit in small_pits:
            for _ in range(TOKENS_PER_PIT):
                pits[pit].append(draw_random_kind(rng, rarity_table, common_kind))

    return Board(pits=pits, current_player=1, game_over=False)
